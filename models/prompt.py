from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime

from database import Base, utcnow


class Prompt(Base):
    """Blog prompt template. At most one default per content_type (kept by services.crud)."""
    __tablename__ = "prompts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    content_type = Column(String, nullable=False, index=True)  # informational | review | tutorial | comparison | listicle
    template = Column(Text, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
