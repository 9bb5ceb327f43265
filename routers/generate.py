# routers/generate.py
from __future__ import annotations

import logging
from functools import partial
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from database import get_db, get_session_factory
from services import crud
from services.errors import GenerationError
from services.generation import ImageGenerator, TextGenerator, extract_title, get_image_generator, get_text_generator
from services.image_fanout import generate_many
from services.image_prompt import compose_image_prompt
from services.prompt_builder import build_prompt
import schemas

log = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["generate"])


@router.get("/models")
def list_models():
    return {"models": schemas.AI_MODELS, "default": schemas.DEFAULT_MODEL}


@router.post("/generate", response_model=schemas.GenerateResponse)
def generate_post(
    body: schemas.GenerateRequest,
    db: Session = Depends(get_db),
    generator: TextGenerator = Depends(get_text_generator),
):
    source = crud.get_source_data(db, body.source_data_id)
    if not source:
        raise HTTPException(status_code=404, detail="Source data not found")

    prompt = build_prompt(source, body.content_type, body.additional_request)
    result = generator.generate(prompt, body.model)
    log.info("[generate] source=%s model=%s tokens=%s", source.id, body.model, result.tokens_used)

    return schemas.GenerateResponse(
        content=result.content,
        title=extract_title(result.content, source.blog_topic),
        source_data_id=source.id,
        content_type=body.content_type,
        additional_request=body.additional_request or None,
        prompt_used=prompt,
        model_used=body.model,
        tokens_used=result.tokens_used,
    )


def _image_request_error(e: ValidationError) -> str:
    # loc is (tag, field, ...); only the failing leaf decides the message
    leaves = {str(err["loc"][-1]) for err in e.errors() if err.get("loc")}
    if "images" in leaves:
        return "At least one image must be requested"
    if leaves & {"title", "content"}:
        return "Content and title are required"
    return "Invalid image request"


@router.post("/generate-image")
async def generate_image(
    payload: Dict[str, Any] = Body(...),
    generator: ImageGenerator = Depends(get_image_generator),
    session_factory=Depends(get_session_factory),
):
    try:
        req = schemas.IMAGE_REQUEST_ADAPTER.validate_python(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_image_request_error(e))

    load_rows = partial(crud.load_active_image_prompts, session_factory)

    if isinstance(req, schemas.MultiImageRequest):
        images = await generate_many(req.title, req.content, req.images, generator, load_rows, req.reference_image)
        return schemas.MultiImageResponse(
            images=[schemas.PurposeImageOut(purpose=i.purpose, image_data=i.image_data, mime_type=i.mime_type) for i in images]
        )

    rows = await run_in_threadpool(load_rows)
    prompt = compose_image_prompt(
        req.title,
        req.content,
        purpose="main",
        style=req.style,
        mood=req.mood,
        include_text=req.include_text,
        text_content=req.text_content,
        additional_request=req.additional_request,
        has_reference_image=req.reference_image is not None,
        rows=rows,
    )
    image = await generator.generate(prompt, req.reference_image)
    if image is None:
        raise GenerationError("Failed to generate image")
    return schemas.GeneratedImageOut(image_data=image.image_data, mime_type=image.mime_type)
