import enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Text, JSON
from sqlalchemy.orm import relationship

from database import Base, utcnow


class PostStatusEnum(enum.Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


class GeneratedPost(Base):
    __tablename__ = "generated_posts"

    id = Column(Integer, primary_key=True, index=True)
    source_data_id = Column(Integer, ForeignKey("source_data.id", ondelete="SET NULL"), nullable=True, index=True)

    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    content_type = Column(String, nullable=True)
    additional_request = Column(Text, nullable=True)

    # the prompt actually sent, never a reference to a template row
    prompt_used = Column(Text, nullable=True)
    model_used = Column(String, nullable=False)
    tokens_used = Column(Integer, nullable=True)

    status = Column(Enum(PostStatusEnum), nullable=False, default=PostStatusEnum.draft)
    image_url = Column(String, nullable=True)
    sub_image_urls = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    source_data = relationship("SourceData", back_populates="posts")
