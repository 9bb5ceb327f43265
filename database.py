import os
from datetime import datetime, timezone

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Local SQLite file unless DATABASE_URL points elsewhere
DATABASE_URL = os.getenv("DATABASE_URL") or f"sqlite:///{os.path.join(BASE_DIR, 'blog_console.db')}"

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Dependency that hands a DB session to FastAPI endpoints
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Image fan-out opens one short-lived session per image, outside the request session
def get_session_factory():
    return SessionLocal
