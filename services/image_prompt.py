from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Optional

from services import template_resolver as tr

EXCERPT_LENGTH = 500

REFERENCE_IMAGE_INSTRUCTIONS = """Reference image instructions:
- A reference image is attached to this request. Use it as inspiration for style, color palette and composition.
- If the reference image shows a product or object, incorporate it naturally and recognizably into the scene.
- Keep the generated image visually cohesive with the reference image while matching the blog topic."""

_MAIN_NOTE = "It is the first image readers see, so it must stand out as a thumbnail."
_SUB_NOTE = "It is shown inside the post body, so it should support the text rather than summarize the whole post."

_PLACEHOLDER = re.compile(r"\{\{([A-Z_]+)\}\}")


def excerpt_of(content: str) -> str:
    return (content or "")[:EXCERPT_LENGTH]


def text_fragment(include_text: bool, text_content: Optional[str], rows: Iterable[Any] = ()) -> str:
    if include_text and text_content and text_content.strip():
        fragment = tr.resolve(tr.TEXT, "include", rows)
        if tr.TEXT_CONTENT_TOKEN not in fragment:
            # an edited fragment without the token still has to carry the literal text
            return f'{fragment.rstrip()} "{text_content.strip()}"'
        return fragment.replace(tr.TEXT_CONTENT_TOKEN, text_content.strip())
    return tr.resolve(tr.TEXT, "none", rows)


def fill_placeholders(template: str, values: Dict[str, str]) -> str:
    """Replace every {{NAME}} occurrence in one pass; unknown names stay as written."""
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def _tidy(text: str) -> str:
    text = re.sub(r"[ \t]+\n", "\n", text)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def compose_image_prompt(
    title: str,
    content: str,
    purpose: str = "main",
    style: Optional[str] = None,
    mood: Optional[str] = None,
    include_text: bool = False,
    text_content: Optional[str] = None,
    additional_request: Optional[str] = None,
    has_reference_image: bool = False,
    rows: Iterable[Any] = (),
) -> str:
    rows = list(rows or ())
    purpose_prompt = tr.resolve_purpose(purpose or "main", rows)
    additional = (additional_request or "").strip()

    values = {
        "STYLE": tr.resolve(tr.STYLE, style or "realistic", rows),
        "MOOD": tr.resolve(tr.MOOD, mood or "professional", rows),
        "PURPOSE_ROLE": purpose_prompt.role,
        "PURPOSE_FOCUS": purpose_prompt.focus_description,
        "TEXT_PROMPT": text_fragment(include_text, text_content, rows),
        "TITLE": title,
        "EXCERPT": excerpt_of(content),
        "ADDITIONAL": f"Additional request: {additional}" if additional else "",
        "REFERENCE_IMAGE": REFERENCE_IMAGE_INSTRUCTIONS if has_reference_image else "",
        "IS_MAIN": _MAIN_NOTE if (purpose or "main") == "main" else _SUB_NOTE,
    }

    # an active template/default row replaces the built-in layout
    template = tr.resolve(tr.TEMPLATE, "default", rows)
    return _tidy(fill_placeholders(template, values))
