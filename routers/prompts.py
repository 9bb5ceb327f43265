# routers/prompts.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from database import get_db
from services import crud
import schemas

router = APIRouter(prefix="/prompts", tags=["prompts"])


def _get_or_404(db: Session, prompt_id: int):
    row = crud.get_prompt(db, prompt_id)
    if not row:
        raise HTTPException(status_code=404, detail="Prompt not found")
    return row


@router.get("", response_model=List[schemas.PromptOut])
def list_prompts(db: Session = Depends(get_db)):
    return crud.list_prompts(db)


@router.post("", response_model=schemas.PromptOut, status_code=status.HTTP_201_CREATED)
def create_prompt(payload: schemas.PromptIn, db: Session = Depends(get_db)):
    """Saving a default clears the previous default of the same content type."""
    return crud.create_prompt(db, payload)


@router.get("/{prompt_id}", response_model=schemas.PromptOut)
def get_prompt(prompt_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, prompt_id)


@router.put("/{prompt_id}", response_model=schemas.PromptOut)
def update_prompt(prompt_id: int, payload: schemas.PromptUpdate, db: Session = Depends(get_db)):
    return crud.update_prompt(db, _get_or_404(db, prompt_id), payload)


@router.delete("/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_prompt(prompt_id: int, db: Session = Depends(get_db)):
    crud.delete_prompt(db, _get_or_404(db, prompt_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
