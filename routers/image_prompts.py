# routers/image_prompts.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from services import crud
import schemas

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/image-prompts", tags=["image-prompts"])


@router.get("", response_model=List[schemas.ImagePromptOut])
def list_image_prompts(db: Session = Depends(get_db)):
    # the settings screen renders an empty list rather than an error page
    try:
        return crud.list_image_prompts(db)
    except SQLAlchemyError as e:
        log.error("[image-prompts] list failed -> %s", e)
        return []


@router.get("/{prompt_id}", response_model=schemas.ImagePromptOut)
def get_image_prompt(prompt_id: int, db: Session = Depends(get_db)):
    row = crud.get_image_prompt(db, prompt_id)
    if not row:
        raise HTTPException(status_code=404, detail="Image prompt not found")
    return row


@router.put("/{prompt_id}", response_model=schemas.ImagePromptOut)
def update_image_prompt(prompt_id: int, payload: schemas.ImagePromptUpdate, db: Session = Depends(get_db)):
    row = crud.get_image_prompt(db, prompt_id)
    if not row:
        raise HTTPException(status_code=404, detail="Image prompt not found")
    return crud.update_image_prompt(db, row, payload)
