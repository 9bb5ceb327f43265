from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, UniqueConstraint

from database import Base, utcnow


class ImagePrompt(Base):
    __tablename__ = "image_prompts"
    __table_args__ = (UniqueConstraint("category", "key", name="uq_image_prompts_category_key"),)

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String, nullable=False)  # style | mood | purpose | text | template
    key = Column(String, nullable=False)
    name = Column(String, nullable=False)
    prompt = Column(Text, nullable=False)  # purpose rows hold JSON {"role", "focusDescription"}
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
