"""
Calls to the text (OpenAI) and image (Gemini) providers.

Both generators take a client factory so the lazily built clients in
services.ai_clients are only touched when a request actually needs them.
Every provider problem comes back as GenerationError; nothing is retried.
"""
from __future__ import annotations

import base64
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from google.genai import types

from services import ai_clients
from services.errors import GenerationError
from services.storage import decode_image_data

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "당신은 전문 블로그 콘텐츠 작가입니다. 주어진 정보를 바탕으로 SEO에 최적화된 고품질 블로그 글을 작성합니다."

_TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)


@dataclass
class TextGeneration:
    content: str
    tokens_used: int


@dataclass
class GeneratedImage:
    image_data: str  # base64
    mime_type: str


def uses_responses_api(model: str) -> bool:
    """gpt-5 family is served through the Responses API (reasoning/verbosity knobs)."""
    return model.startswith("gpt-5")


def extract_title(content: str, fallback: str) -> str:
    m = _TITLE_RE.search(content or "")
    return m.group(1).strip() if m else fallback


class TextGenerator:
    def __init__(self, client_factory: Callable[[], Any] = ai_clients.get_openai_client):
        self._client_factory = client_factory

    def _via_responses(self, client, prompt: str, model: str) -> TextGeneration:
        resp = client.responses.create(
            model=model,
            instructions=SYSTEM_PROMPT,
            input=prompt,
            reasoning={"effort": "medium"},
            text={"verbosity": "high"},
        )
        usage = getattr(resp, "usage", None)
        tokens = ((getattr(usage, "input_tokens", 0) or 0) + (getattr(usage, "output_tokens", 0) or 0)) if usage else 0
        return TextGeneration(content=resp.output_text or "", tokens_used=tokens)

    def _via_chat(self, client, prompt: str, model: str) -> TextGeneration:
        completion = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.7,
            max_tokens=4000,
        )
        content = completion.choices[0].message.content if completion.choices else None
        usage = getattr(completion, "usage", None)
        return TextGeneration(content=content or "", tokens_used=(getattr(usage, "total_tokens", 0) or 0) if usage else 0)

    def generate(self, prompt: str, model: str) -> TextGeneration:
        client = self._client_factory()
        try:
            if uses_responses_api(model):
                result = self._via_responses(client, prompt, model)
            else:
                result = self._via_chat(client, prompt, model)
        except Exception as e:
            logger.error("[openai] %s generation failed -> %s", model, e)
            raise GenerationError("Failed to generate blog post") from e

        if not result.content.strip():
            logger.error("[openai] %s returned no content", model)
            raise GenerationError("Failed to generate blog post")
        return result


def extract_inline_image(response: Any) -> Optional[GeneratedImage]:
    """First inline-data part of the first candidate, or None when the model produced no image."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is None or not inline.data:
            continue
        data = inline.data
        if isinstance(data, (bytes, bytearray)):
            data = base64.b64encode(data).decode("ascii")
        return GeneratedImage(image_data=data, mime_type=inline.mime_type or "image/png")
    return None


class ImageGenerator:
    def __init__(self, client_factory: Callable[[], Any] = ai_clients.get_gemini_client, model: Optional[str] = None):
        self._client_factory = client_factory
        self.model = model or ai_clients.IMAGE_MODEL

    async def generate(self, prompt: str, reference_image: Any = None) -> Optional[GeneratedImage]:
        """`reference_image` is anything with `.data` (base64) and `.mime_type`."""
        client = self._client_factory()

        parts = [types.Part.from_text(text=prompt)]
        if reference_image is not None:
            try:
                raw = decode_image_data(reference_image.data)
            except ValueError as e:
                raise GenerationError("Reference image is not valid base64") from e
            parts.append(types.Part.from_bytes(data=raw, mime_type=reference_image.mime_type))

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=[types.Content(role="user", parts=parts)],
                config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
            )
        except Exception as e:
            logger.error("[gemini] image generation failed -> %s", e)
            raise GenerationError("Failed to generate image") from e

        image = extract_inline_image(response)
        if image is None:
            logger.warning("[gemini] response carried no image part")
        return image


_text_generator = TextGenerator()
_image_generator = ImageGenerator()


# FastAPI dependencies (tests swap them through app.dependency_overrides)
def get_text_generator() -> TextGenerator:
    return _text_generator


def get_image_generator() -> ImageGenerator:
    return _image_generator
