from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from starlette.concurrency import run_in_threadpool

from services.errors import GenerationError
from services.image_prompt import compose_image_prompt

logger = logging.getLogger(__name__)


@dataclass
class PurposeImage:
    purpose: str
    image_data: str
    mime_type: str


async def generate_one(
    title: str,
    content: str,
    descriptor: Any,
    generator: Any,
    load_rows: Callable[[], Sequence[Any]],
    reference_image: Any = None,
) -> PurposeImage:
    """One image: fresh template rows, compose, generate. Raises GenerationError when nothing came back."""
    rows = await run_in_threadpool(load_rows)
    ref = descriptor.reference_image or reference_image
    prompt = compose_image_prompt(
        title,
        content,
        purpose=descriptor.purpose,
        style=descriptor.style,
        mood=descriptor.mood,
        include_text=descriptor.include_text,
        text_content=descriptor.text_content,
        additional_request=descriptor.additional_request,
        has_reference_image=ref is not None,
        rows=rows,
    )
    image = await generator.generate(prompt, ref)
    if image is None:
        raise GenerationError(f"No image produced for {descriptor.purpose}")
    return PurposeImage(purpose=descriptor.purpose, image_data=image.image_data, mime_type=image.mime_type)


async def generate_many(
    title: str,
    content: str,
    descriptors: Sequence[Any],
    generator: Any,
    load_rows: Callable[[], Sequence[Any]],
    reference_image: Optional[Any] = None,
) -> List[PurposeImage]:
    """
    Run every descriptor concurrently and keep whatever succeeded.
    Only an all-failed batch is an error. Order of the result is not the request order.
    """
    results = await asyncio.gather(
        *(generate_one(title, content, d, generator, load_rows, reference_image) for d in descriptors),
        return_exceptions=True,
    )

    images: List[PurposeImage] = []
    for descriptor, result in zip(descriptors, results):
        if isinstance(result, BaseException):
            logger.warning("[images] %s failed -> %s", descriptor.purpose, result)
            continue
        images.append(result)

    if not images:
        raise GenerationError("Failed to generate images")
    logger.info("[images] %d/%d generated", len(images), len(descriptors))
    return images
