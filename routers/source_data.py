# routers/source_data.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from services import crud
from services.csv_import import CSVImportError, parse_source_data_csv
import schemas

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/source-data", tags=["source-data"])


def _get_or_404(db: Session, source_id: int):
    row = crud.get_source_data(db, source_id)
    if not row:
        raise HTTPException(status_code=404, detail="Source data not found")
    return row


@router.get("", response_model=schemas.SourceDataList)
def list_source_data(
    search: Optional[str] = Query(None),
    category_large: Optional[str] = Query(None),
    category_medium: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    rows, total = crud.list_source_data(db, search, category_large, category_medium, page, limit)
    return {"data": rows, "total": total, "page": page, "limit": limit, "totalPages": crud.total_pages(total, limit)}


@router.post("", response_model=schemas.SourceDataOut, status_code=status.HTTP_201_CREATED)
def create_source_data(payload: schemas.SourceDataCreate, db: Session = Depends(get_db)):
    try:
        return crud.create_source_data(db, payload)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"Source data number {payload.number} already exists")


@router.post("/upload", response_model=schemas.CSVImportResult)
def upload_csv(file: Optional[UploadFile] = File(None), db: Session = Depends(get_db)):
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    data = file.file.read()
    try:
        items, total = parse_source_data_csv(data)
    except CSVImportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not items:
        raise HTTPException(status_code=400, detail="No valid data found in CSV")

    saved = crud.upsert_source_data(db, items)
    log.info("[source-data] imported %d of %d rows from %s", len(saved), total, file.filename)
    return {"success": True, "imported": len(saved), "total": total}


@router.get("/generated-status", response_model=schemas.GeneratedStatus)
def generated_status(db: Session = Depends(get_db)):
    ids = crud.generated_source_ids(db)
    return {"generated_ids": ids, "count": len(ids)}


@router.get("/by-number/{number}", response_model=schemas.SourceDataOut)
def get_by_number(number: str, db: Session = Depends(get_db)):
    try:
        num = int(number)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid number parameter")
    row = crud.get_source_data_by_number(db, num)
    if not row:
        raise HTTPException(status_code=404, detail="Source data not found")
    return row


@router.get("/{source_id}", response_model=schemas.SourceDataOut)
def get_source_data(source_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, source_id)


@router.put("/{source_id}", response_model=schemas.SourceDataOut)
def update_source_data(source_id: int, payload: schemas.SourceDataUpdate, db: Session = Depends(get_db)):
    row = _get_or_404(db, source_id)
    renumbered = payload.number is not None and payload.number != row.number
    try:
        return crud.update_source_data(db, row, payload)
    except IntegrityError:
        db.rollback()
        if not renumbered:
            raise
        raise HTTPException(status_code=409, detail=f"Source data number {payload.number} already exists")


@router.delete("/{source_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_source_data(source_id: int, db: Session = Depends(get_db)):
    crud.delete_source_data(db, _get_or_404(db, source_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
