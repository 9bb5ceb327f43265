from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.orm import relationship

from database import Base, utcnow


class SourceData(Base):
    __tablename__ = "source_data"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, unique=True, index=True, nullable=False)

    category_large = Column(String, nullable=False)
    category_medium = Column(String, nullable=False)
    category_small = Column(String, nullable=True)

    core_keyword = Column(String, nullable=False)
    seo_keywords = Column(JSON, nullable=False, default=list)  # ordered list of strings
    blog_topic = Column(Text, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    posts = relationship("GeneratedPost", back_populates="source_data")
