"""
Image prompt fragments: database override first, built-in default second.

Rows are whatever the caller just read from `image_prompts` (active only).
Nothing is cached here, so an edit in the settings screen applies to the
very next generation.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

STYLE, MOOD, PURPOSE, TEXT, TEMPLATE = "style", "mood", "purpose", "text", "template"
CATEGORIES = (STYLE, MOOD, PURPOSE, TEXT, TEMPLATE)


@dataclass(frozen=True)
class PurposePrompt:
    role: str
    focus_description: str


_STYLES: Dict[str, str] = {
    "realistic": "Photorealistic, high-resolution photography with natural lighting, true-to-life colors and fine detail.",
    "illustration": "Clean digital illustration with bold shapes, smooth gradients and a friendly editorial feel.",
    "minimal": "Minimalist design with generous negative space, a restrained color palette and simple geometric forms.",
    "3d": "Polished 3D render with soft global illumination, subtle shadows and tactile materials.",
    "watercolor": "Hand-painted watercolor look with soft washes, visible paper texture and gentle color bleeding.",
}

_MOODS: Dict[str, str] = {
    "professional": "Professional and trustworthy atmosphere with a calm, balanced composition.",
    "friendly": "Warm, friendly and approachable atmosphere that feels inviting to everyday readers.",
    "creative": "Creative and playful atmosphere with unexpected angles and vivid accents.",
    "luxurious": "Luxurious, premium atmosphere with rich tones, elegant lighting and refined details.",
    "bright": "Bright, cheerful and energetic atmosphere with plenty of light and fresh colors.",
}

_PURPOSES: Dict[str, PurposePrompt] = {
    "main": PurposePrompt(
        role="the main thumbnail and header image of a blog post",
        focus_description="Capture the core subject of the whole post at a glance so it works as an eye-catching thumbnail.",
    ),
    "sub1": PurposePrompt(
        role="the first supporting image placed in the introduction of a blog post",
        focus_description="Illustrate the background or problem the post opens with, setting the context for the reader.",
    ),
    "sub2": PurposePrompt(
        role="the second supporting image placed in the main body of a blog post",
        focus_description="Visualize a key detail, step or example explained in the body of the post.",
    ),
    "sub3": PurposePrompt(
        role="the third supporting image placed near the conclusion of a blog post",
        focus_description="Convey the outcome, benefit or takeaway the post concludes with.",
    ),
}

TEXT_CONTENT_TOKEN = "{{TEXT_CONTENT}}"

_TEXTS: Dict[str, str] = {
    "include": (
        'Render the following text inside the image exactly as written, clearly legible and well integrated '
        'into the layout: "' + TEXT_CONTENT_TOKEN + '"'
    ),
    "none": "Include minimal or no text in the image itself; let the visuals carry the message.",
}

DEFAULT_TEMPLATE = """
Create an image that serves as {{PURPOSE_ROLE}}. {{IS_MAIN}}
Focus: {{PURPOSE_FOCUS}}

Blog title: {{TITLE}}

Content summary:
{{EXCERPT}}

Style: {{STYLE}}
Mood: {{MOOD}}

{{REFERENCE_IMAGE}}

Text: {{TEXT_PROMPT}}

{{ADDITIONAL}}

Requirements:
- The image should visually represent the main topic of the blog post
- Use a pleasing color palette that matches the requested style and mood
- The style should be suitable for Korean blog audiences
- Maintain high visual quality and clarity
- Avoid cluttered or overly complex compositions

Generate an image that fits this blog post perfectly.
"""

_TEMPLATES: Dict[str, str] = {"default": DEFAULT_TEMPLATE}

_DEFAULT_KEY = {STYLE: "realistic", MOOD: "professional", PURPOSE: "main", TEXT: "none", TEMPLATE: "default"}

_TABLES: Dict[str, Dict[str, Any]] = {
    STYLE: _STYLES,
    MOOD: _MOODS,
    PURPOSE: _PURPOSES,
    TEXT: _TEXTS,
    TEMPLATE: _TEMPLATES,
}


def _default(category: str, key: str) -> Any:
    if category not in _TABLES:
        raise ValueError(f"Unknown image prompt category: {category}")
    table = _TABLES[category]
    return table.get(key) or table[_DEFAULT_KEY[category]]


def find_row(category: str, key: str, rows: Iterable[Any]) -> Optional[Any]:
    """First row matching (category, key), or None."""
    for row in rows or ():
        if row.category == category and row.key == key:
            return row
    return None


def resolve(category: str, key: str, rows: Iterable[Any] = ()) -> str:
    """Prompt fragment for a text category (style/mood/text/template)."""
    if category == PURPOSE:
        raise ValueError("purpose fragments are structured; use resolve_purpose()")
    row = find_row(category, key, rows)
    if row is not None and (row.prompt or "").strip():
        return row.prompt
    return _default(category, key)


def parse_purpose(raw: str) -> PurposePrompt:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("purpose prompt must be a JSON object")
    role, focus = data.get("role"), data.get("focusDescription")
    if not isinstance(role, str) or not role.strip() or not isinstance(focus, str) or not focus.strip():
        raise ValueError("purpose prompt needs string 'role' and 'focusDescription'")
    return PurposePrompt(role=role, focus_description=focus)


def resolve_purpose(key: str, rows: Iterable[Any] = ()) -> PurposePrompt:
    row = find_row(PURPOSE, key, rows)
    if row is not None:
        try:
            return parse_purpose(row.prompt)
        except (ValueError, TypeError) as e:  # json.JSONDecodeError is a ValueError
            logger.warning("[image-prompts] purpose/%s is not usable, falling back to default -> %s", key, e)
    return _default(PURPOSE, key)


def _seed_text(category: str, value: Any) -> str:
    if isinstance(value, PurposePrompt):
        return json.dumps({"role": value.role, "focusDescription": value.focus_description}, ensure_ascii=False)
    return value.strip() if category == TEMPLATE else value


# (category, key) -> prompt text, in the shape stored in image_prompts
DEFAULT_IMAGE_PROMPTS: Dict[tuple, str] = {
    (category, key): _seed_text(category, value)
    for category, table in _TABLES.items()
    for key, value in table.items()
}
