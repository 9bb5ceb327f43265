from types import SimpleNamespace

from services import template_resolver as tr
from services.image_prompt import (
    EXCERPT_LENGTH,
    REFERENCE_IMAGE_INSTRUCTIONS,
    compose_image_prompt,
    excerpt_of,
    fill_placeholders,
)


def row(category, key, prompt):
    return SimpleNamespace(category=category, key=key, prompt=prompt, is_active=True)


def test_excerpt_is_first_500_characters():
    content = "Ж" * 600
    assert excerpt_of(content) == "Ж" * EXCERPT_LENGTH
    prompt = compose_image_prompt("제목", content)
    assert "Ж" * 500 in prompt
    assert "Ж" * 501 not in prompt


def test_default_prompt_carries_title_style_mood_and_purpose():
    prompt = compose_image_prompt("가을 캠핑 준비물", "텐트와 침낭", purpose="sub1", style="watercolor", mood="bright")
    assert "Blog title: 가을 캠핑 준비물" in prompt
    assert tr.resolve(tr.STYLE, "watercolor") in prompt
    assert tr.resolve(tr.MOOD, "bright") in prompt
    assert tr.resolve_purpose("sub1").role in prompt
    assert tr.resolve_purpose("sub1").focus_description in prompt
    assert "{{" not in prompt


def test_text_fragment_quotes_requested_text():
    prompt = compose_image_prompt("t", "c", include_text=True, text_content=" 여름 세일 ")
    assert '"여름 세일"' in prompt

    without = compose_image_prompt("t", "c", include_text=True, text_content="   ")
    assert tr.resolve(tr.TEXT, "none") in without


def test_reference_block_only_when_image_attached():
    assert REFERENCE_IMAGE_INSTRUCTIONS in compose_image_prompt("t", "c", has_reference_image=True)
    assert REFERENCE_IMAGE_INSTRUCTIONS not in compose_image_prompt("t", "c", has_reference_image=False)


def test_additional_request_line():
    assert "Additional request: 파란 하늘" in compose_image_prompt("t", "c", additional_request=" 파란 하늘 ")
    assert "Additional request" not in compose_image_prompt("t", "c", additional_request="  ")


def test_output_is_trimmed_without_runs_of_blank_lines():
    prompt = compose_image_prompt("t", "c")
    assert prompt == prompt.strip()
    assert "\n\n\n" not in prompt


def test_template_row_replaces_layout_and_every_occurrence_is_filled():
    rows = [row("template", "default", "{{TITLE}} / {{TITLE}} / {{STYLE}} / {{UNKNOWN}}")]
    prompt = compose_image_prompt("캠핑", "c", style="minimal", rows=rows)
    assert prompt == f"캠핑 / 캠핑 / {tr.resolve(tr.STYLE, 'minimal')} / {{{{UNKNOWN}}}}"


def test_user_text_is_not_expanded_again():
    rows = [row("template", "default", "{{TITLE}} | {{STYLE}}")]
    prompt = compose_image_prompt("{{STYLE}}", "c", rows=rows)
    assert prompt.startswith("{{STYLE}} | ")


def test_override_rows_feed_fragments():
    rows = [
        row("style", "realistic", "STYLE-OVERRIDE"),
        row("text", "include", 'Write <{{TEXT_CONTENT}}> on it'),
    ]
    prompt = compose_image_prompt("t", "c", include_text=True, text_content="SALE", rows=rows)
    assert "Style: STYLE-OVERRIDE" in prompt
    assert "Write <SALE> on it" in prompt


def test_fill_placeholders_keeps_unknown_names():
    assert fill_placeholders("{{A}}-{{B}}-{{a}}", {"A": "1"}) == "1-{{B}}-{{a}}"


def test_main_and_sub_notes_differ():
    main = compose_image_prompt("t", "c", purpose="main")
    sub = compose_image_prompt("t", "c", purpose="sub3")
    assert "thumbnail" in main
    assert main != sub


def test_edited_include_fragment_without_token_still_carries_text():
    rows = [row("text", "include", "Put this text in the image.")]
    prompt = compose_image_prompt("t", "c", include_text=True, text_content="SALE 50%", rows=rows)
    assert 'Put this text in the image. "SALE 50%"' in prompt
