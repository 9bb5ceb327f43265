from typing import Any, Optional

CONTENT_TYPE_DESCRIPTIONS = {
    "informational": "정보를 제공하는 교육적인 글",
    "review": "제품이나 서비스에 대한 상세한 리뷰",
    "tutorial": "단계별 가이드 또는 튜토리얼",
    "comparison": "여러 옵션을 비교 분석하는 글",
    "listicle": "리스트 형식의 정리된 글",
}

GUIDELINES = [
    "SEO 키워드를 자연스럽게 본문에 포함해주세요.",
    "핵심 키워드가 제목과 본문에 적절히 배치되도록 해주세요.",
    "독자가 이해하기 쉬운 친근한 어조로 작성해주세요.",
    "블로그 글의 구조: 제목, 서론, 본론(소제목 활용), 결론으로 구성해주세요.",
    "한국어로 작성하며, 1500-2000자 정도의 분량으로 작성해주세요.",
]


def build_prompt(source_data: Any, content_type: str, additional_request: Optional[str] = None) -> str:
    """
    Text-generation prompt for one source data row.
    `source_data` is a SourceData row or anything with the same attributes.
    Pure: same input, same prompt.
    """
    if content_type not in CONTENT_TYPE_DESCRIPTIONS:
        raise ValueError(f"Unsupported content type: {content_type}")

    lines = [
        f"당신은 전문 블로그 콘텐츠 작가입니다. 아래 정보를 바탕으로 {CONTENT_TYPE_DESCRIPTIONS[content_type]}을 작성해주세요.",
        "",
        "## 블로그 주제 정보",
        f"- 대분류: {source_data.category_large}",
        f"- 중분류: {source_data.category_medium}",
    ]
    if source_data.category_small:
        lines.append(f"- 소분류: {source_data.category_small}")
    lines += [
        f"- 핵심 키워드: {source_data.core_keyword}",
        f"- SEO 키워드: {', '.join(source_data.seo_keywords or [])}",
        f"- 블로그 콘텐츠 주제: {source_data.blog_topic}",
        "",
        "## 작성 가이드라인",
    ]
    lines += [f"{i}. {g}" for i, g in enumerate(GUIDELINES, start=1)]

    if additional_request and additional_request.strip():
        lines += ["", "## 추가 요청사항", additional_request.strip()]

    lines += [
        "",
        "## 출력 형식",
        "마크다운 형식으로 작성해주세요. 제목은 # (H1)으로 시작하고, 소제목은 ## (H2)를 사용해주세요.",
    ]
    return "\n".join(lines) + "\n"
