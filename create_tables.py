from database import Base, engine

# Importing the package registers every model on Base.metadata
import models  # noqa: F401

print("Database URL:", engine.url)
print("Tables:", ", ".join(sorted(Base.metadata.tables)))

print("Creating tables...")
Base.metadata.create_all(bind=engine)
print("Tables created successfully.")
