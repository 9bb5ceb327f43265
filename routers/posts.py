# routers/posts.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from database import get_db
from services import crud, storage
import schemas

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/posts", tags=["posts"])


def _get_or_404(db: Session, post_id: int):
    post = crud.get_post(db, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


def _resolve_images(payload: schemas.PostCreate) -> tuple[Optional[str], List[str]]:
    """
    Pre-uploaded URLs are taken as they are; raw payloads are uploaded here.
    A failed upload is dropped so the post text is still saved.
    """
    image_url = payload.image_url
    if not image_url and payload.image_data:
        image_url = storage.upload_image(payload.image_data, payload.image_mime_type, "main")
        if image_url is None:
            log.warning("[posts] main image upload failed, saving post without it")

    sub_urls = [u for u in (payload.sub_image_urls or []) if u]
    for i, sub in enumerate(payload.sub_images or [], start=1):
        url = storage.upload_image(sub.image_data, sub.mime_type, f"sub{i}")
        if url:
            sub_urls.append(url)
        else:
            log.warning("[posts] sub image %d upload failed, skipping it", i)
    return image_url, sub_urls


@router.get("", response_model=schemas.PostList)
def list_posts(
    status_: Optional[schemas.PostStatus] = Query(None, alias="status"),
    content_type: Optional[schemas.ContentType] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    rows, total = crud.list_posts(db, status_, content_type, search, page, limit)
    return {"data": rows, "total": total, "page": page, "limit": limit, "totalPages": crud.total_pages(total, limit)}


@router.post("", response_model=schemas.PostOut, status_code=status.HTTP_201_CREATED)
def create_post(payload: schemas.PostCreate, db: Session = Depends(get_db)):
    if payload.source_data_id is not None and not crud.get_source_data(db, payload.source_data_id):
        raise HTTPException(status_code=404, detail="Source data not found")

    image_url, sub_urls = _resolve_images(payload)
    post = crud.create_post(db, payload, image_url, sub_urls)
    log.info("[posts] saved post %s (main image: %s, sub images: %d)", post.id, bool(image_url), len(sub_urls))
    return post


@router.get("/{post_id}", response_model=schemas.PostOut)
def get_post(post_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, post_id)


@router.put("/{post_id}", response_model=schemas.PostOut)
def update_post(post_id: int, payload: schemas.PostUpdate, db: Session = Depends(get_db)):
    return crud.update_post(db, _get_or_404(db, post_id), payload)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: int, db: Session = Depends(get_db)):
    crud.delete_post(db, _get_or_404(db, post_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
