"""
Seed image_prompts with the built-in fragments so they can be edited in the settings screen.

RUN:
    python -m scripts.seed_image_prompts
"""
from database import Base, SessionLocal, engine
import models  # noqa: F401
from services.crud import seed_image_prompts
from services.template_resolver import DEFAULT_IMAGE_PROMPTS

NAMES = {
    ("style", "realistic"): "사실적",
    ("style", "illustration"): "일러스트",
    ("style", "minimal"): "미니멀",
    ("style", "3d"): "3D",
    ("style", "watercolor"): "수채화",
    ("mood", "professional"): "전문적",
    ("mood", "friendly"): "친근한",
    ("mood", "creative"): "창의적",
    ("mood", "luxurious"): "고급스러운",
    ("mood", "bright"): "밝은",
    ("purpose", "main"): "메인 이미지",
    ("purpose", "sub1"): "서브 이미지 1",
    ("purpose", "sub2"): "서브 이미지 2",
    ("purpose", "sub3"): "서브 이미지 3",
    ("text", "include"): "텍스트 포함",
    ("text", "none"): "텍스트 없음",
    ("template", "default"): "기본 템플릿",
}


def main():
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        added = seed_image_prompts(db, DEFAULT_IMAGE_PROMPTS, NAMES)
    print(f"[image-prompts] {added} rows added ({len(DEFAULT_IMAGE_PROMPTS) - added} already present)")


if __name__ == "__main__":
    main()
