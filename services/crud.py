import logging
import math
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, sessionmaker

from database import utcnow
from models import GeneratedPost, ImagePrompt, PostStatusEnum, Prompt, SourceData
import schemas

logger = logging.getLogger(__name__)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


# --- Source data ---

def list_source_data(
    db: Session,
    search: Optional[str] = None,
    category_large: Optional[str] = None,
    category_medium: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[SourceData], int]:
    query = db.query(SourceData)
    if search:
        ilike = f"%{search}%"
        query = query.filter(or_(SourceData.blog_topic.ilike(ilike), SourceData.core_keyword.ilike(ilike)))
    if category_large:
        query = query.filter(SourceData.category_large == category_large)
    if category_medium:
        query = query.filter(SourceData.category_medium == category_medium)

    total = query.count()
    rows = query.order_by(SourceData.number.asc()).offset((page - 1) * limit).limit(limit).all()
    return rows, total


def get_source_data(db: Session, source_id: int) -> Optional[SourceData]:
    return db.get(SourceData, source_id)


def get_source_data_by_number(db: Session, number: int) -> Optional[SourceData]:
    return db.query(SourceData).filter(SourceData.number == number).first()


def create_source_data(db: Session, payload: schemas.SourceDataCreate) -> SourceData:
    row = SourceData(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_source_data(db: Session, row: SourceData, payload: schemas.SourceDataUpdate) -> SourceData:
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(row, field, value)
    db.commit()
    db.refresh(row)
    return row


def delete_source_data(db: Session, row: SourceData) -> None:
    # posts outlive their source row; detach them explicitly (SQLite ignores ON DELETE without the pragma)
    db.query(GeneratedPost).filter(GeneratedPost.source_data_id == row.id).update(
        {GeneratedPost.source_data_id: None}, synchronize_session=False
    )
    db.delete(row)
    db.commit()


def upsert_source_data(db: Session, items: Iterable[schemas.SourceDataCreate]) -> List[SourceData]:
    """Insert or update by `number`, single commit. A number repeated in `items` keeps its last row."""
    latest = {item.number: item for item in items}
    saved: List[SourceData] = []
    for item in latest.values():
        row = get_source_data_by_number(db, item.number)
        if row is None:
            row = SourceData(**item.model_dump())
            db.add(row)
        else:
            for field, value in item.model_dump().items():
                setattr(row, field, value)
        db.flush()
        saved.append(row)
    db.commit()
    return saved


def generated_source_ids(db: Session) -> List[int]:
    rows = (
        db.query(GeneratedPost.source_data_id)
        .filter(GeneratedPost.source_data_id.isnot(None))
        .distinct()
        .all()
    )
    return sorted(r[0] for r in rows)


# --- Generated posts ---

def list_posts(
    db: Session,
    status: Optional[str] = None,
    content_type: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[GeneratedPost], int]:
    query = db.query(GeneratedPost)
    if status:
        query = query.filter(GeneratedPost.status == PostStatusEnum(status))
    if content_type:
        query = query.filter(GeneratedPost.content_type == content_type)
    if search:
        ilike = f"%{search}%"
        query = query.filter(or_(GeneratedPost.title.ilike(ilike), GeneratedPost.content.ilike(ilike)))

    total = query.count()
    rows = (
        query.options(joinedload(GeneratedPost.source_data))
        .order_by(GeneratedPost.created_at.desc(), GeneratedPost.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total


def get_post(db: Session, post_id: int) -> Optional[GeneratedPost]:
    return db.query(GeneratedPost).options(joinedload(GeneratedPost.source_data)).filter(GeneratedPost.id == post_id).first()


def create_post(
    db: Session,
    payload: schemas.PostCreate,
    image_url: Optional[str],
    sub_image_urls: Optional[List[str]],
) -> GeneratedPost:
    post = GeneratedPost(
        source_data_id=payload.source_data_id,
        title=payload.title,
        content=payload.content,
        content_type=payload.content_type,
        additional_request=payload.additional_request or None,
        prompt_used=payload.prompt_used,
        model_used=payload.model_used,
        tokens_used=payload.tokens_used,
        status=PostStatusEnum.draft,
        image_url=image_url,
        sub_image_urls=sub_image_urls or None,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def update_post(db: Session, post: GeneratedPost, payload: schemas.PostUpdate) -> GeneratedPost:
    data = payload.model_dump(exclude_unset=True)
    if "status" in data and data["status"] is not None:
        data["status"] = PostStatusEnum(data["status"])
    for field, value in data.items():
        setattr(post, field, value)
    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, post: GeneratedPost) -> None:
    # blob objects are left in storage
    db.delete(post)
    db.commit()


# --- Blog prompt templates ---

def list_prompts(db: Session) -> List[Prompt]:
    return db.query(Prompt).order_by(Prompt.created_at.desc(), Prompt.id.desc()).all()


def get_prompt(db: Session, prompt_id: int) -> Optional[Prompt]:
    return db.get(Prompt, prompt_id)


def _clear_defaults(db: Session, content_type: str, keep_id: Optional[int] = None) -> None:
    query = db.query(Prompt).filter(Prompt.content_type == content_type, Prompt.is_default.is_(True))
    if keep_id is not None:
        query = query.filter(Prompt.id != keep_id)
    query.update({Prompt.is_default: False}, synchronize_session=False)


def create_prompt(db: Session, payload: schemas.PromptIn) -> Prompt:
    if payload.is_default:
        _clear_defaults(db, payload.content_type)
    row = Prompt(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_prompt(db: Session, row: Prompt, payload: schemas.PromptUpdate) -> Prompt:
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(row, field, value)
    if row.is_default:
        _clear_defaults(db, row.content_type, keep_id=row.id)
    db.commit()
    db.refresh(row)
    return row


def delete_prompt(db: Session, row: Prompt) -> None:
    db.delete(row)
    db.commit()


# --- Image prompt templates ---

def list_image_prompts(db: Session) -> List[ImagePrompt]:
    return db.query(ImagePrompt).order_by(ImagePrompt.category.asc(), ImagePrompt.key.asc()).all()


def get_image_prompt(db: Session, prompt_id: int) -> Optional[ImagePrompt]:
    return db.get(ImagePrompt, prompt_id)


def update_image_prompt(db: Session, row: ImagePrompt, payload: schemas.ImagePromptUpdate) -> ImagePrompt:
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(row, field, value)
    row.updated_at = utcnow()
    db.commit()
    db.refresh(row)
    return row


def active_image_prompts(db: Session) -> List[ImagePrompt]:
    return db.query(ImagePrompt).filter(ImagePrompt.is_active.is_(True)).order_by(ImagePrompt.id.asc()).all()


def load_active_image_prompts(session_factory: sessionmaker) -> List[ImagePrompt]:
    """Fresh snapshot in its own session; storage trouble means built-in defaults, not a failed request."""
    try:
        with session_factory() as db:
            return active_image_prompts(db)
    except SQLAlchemyError as e:
        logger.warning("[image-prompts] could not load templates, using defaults -> %s", e)
        return []


def seed_image_prompts(db: Session, defaults: dict, names: Optional[dict] = None) -> int:
    """Insert missing (category, key) rows. Existing rows are never overwritten."""
    added = 0
    for (category, key), text in defaults.items():
        exists = db.query(ImagePrompt.id).filter(ImagePrompt.category == category, ImagePrompt.key == key).first()
        if exists:
            continue
        name = (names or {}).get((category, key)) or f"{category}:{key}"
        db.add(ImagePrompt(category=category, key=key, name=name, prompt=text, is_active=True))
        added += 1
    db.commit()
    return added
