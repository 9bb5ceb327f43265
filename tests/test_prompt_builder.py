from types import SimpleNamespace

import pytest

from services.prompt_builder import CONTENT_TYPE_DESCRIPTIONS, GUIDELINES, build_prompt


def source(**overrides):
    data = dict(
        category_large="IT",
        category_medium="스마트폰",
        category_small="안드로이드",
        core_keyword="갤럭시 배터리",
        seo_keywords=["배터리 절약", "충전 속도"],
        blog_topic="갤럭시 배터리 오래 쓰는 법",
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def test_prompt_lists_source_fields_and_guidelines():
    prompt = build_prompt(source(), "tutorial")
    assert CONTENT_TYPE_DESCRIPTIONS["tutorial"] in prompt
    assert "- 대분류: IT" in prompt
    assert "- 중분류: 스마트폰" in prompt
    assert "- 소분류: 안드로이드" in prompt
    assert "- 핵심 키워드: 갤럭시 배터리" in prompt
    assert "- SEO 키워드: 배터리 절약, 충전 속도" in prompt
    assert "- 블로그 콘텐츠 주제: 갤럭시 배터리 오래 쓰는 법" in prompt
    for i, g in enumerate(GUIDELINES, start=1):
        assert f"{i}. {g}" in prompt
    assert prompt.endswith("\n")


def test_small_category_line_is_omitted_when_empty():
    assert "소분류" not in build_prompt(source(category_small=None), "review")
    assert "소분류" not in build_prompt(source(category_small=""), "review")


def test_additional_request_section_only_when_given():
    assert "## 추가 요청사항" not in build_prompt(source(), "listicle")
    assert "## 추가 요청사항" not in build_prompt(source(), "listicle", "   ")
    prompt = build_prompt(source(), "listicle", "표로 정리해주세요")
    assert "## 추가 요청사항\n표로 정리해주세요" in prompt


def test_prompt_is_deterministic():
    assert build_prompt(source(), "comparison", "x") == build_prompt(source(), "comparison", "x")


def test_unknown_content_type_is_rejected():
    with pytest.raises(ValueError):
        build_prompt(source(), "poem")
