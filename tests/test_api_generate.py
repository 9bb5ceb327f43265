from services.errors import GenerationError


def test_models_catalog(client):
    r = client.get("/models")
    assert r.status_code == 200
    body = r.json()
    assert body["default"] == "gpt-5-mini"
    assert [m["id"] for m in body["models"]] == ["gpt-5-mini", "gpt-4.1", "gpt-5.2"]


def test_generate_unknown_source_is_404_without_provider_call(client, text_generator):
    r = client.post("/generate", json={"source_data_id": 999, "content_type": "informational"})
    assert r.status_code == 404, f"status={r.status_code} body={r.text}"
    assert r.json() == {"error": "Source data not found"}
    assert text_generator.calls == []


def test_generate_returns_draft_with_extracted_title(client, make_source, text_generator):
    src = make_source(1)
    r = client.post("/generate", json={
        "source_data_id": src["id"],
        "content_type": "review",
        "additional_request": "가격 비교 포함",
        "model": "gpt-4.1",
    })
    assert r.status_code == 200, f"status={r.status_code} body={r.text}"
    body = r.json()
    assert body["title"] == "테스트 제목"
    assert body["content"] == text_generator.content
    assert body["tokens_used"] == 321
    assert body["model_used"] == "gpt-4.1"
    assert body["source_data_id"] == src["id"]
    assert "가격 비교 포함" in body["prompt_used"]

    prompt, model = text_generator.calls[0]
    assert prompt == body["prompt_used"]
    assert model == "gpt-4.1"


def test_generate_defaults_model_and_falls_back_to_topic(client, make_source, text_generator):
    src = make_source(2, blog_topic="제주 맛집 투어")
    text_generator.content = "제목 없는 본문"
    r = client.post("/generate", json={"source_data_id": src["id"], "content_type": "listicle"})
    assert r.status_code == 200, f"status={r.status_code} body={r.text}"
    assert r.json()["title"] == "제주 맛집 투어"
    assert text_generator.calls[0][1] == "gpt-5-mini"


def test_generate_rejects_unknown_content_type_and_model(client, make_source, text_generator):
    src = make_source(3)
    r = client.post("/generate", json={"source_data_id": src["id"], "content_type": "poem"})
    assert r.status_code == 400
    r = client.post("/generate", json={"source_data_id": src["id"], "content_type": "review", "model": "gpt-2"})
    assert r.status_code == 400
    assert text_generator.calls == []


def test_generate_provider_failure_is_500(client, make_source, text_generator):
    src = make_source(4)
    text_generator.error = GenerationError("Failed to generate blog post")
    r = client.post("/generate", json={"source_data_id": src["id"], "content_type": "tutorial"})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to generate blog post"}


def test_unexpected_error_is_a_generic_500(client, make_source, text_generator):
    src = make_source(5)
    text_generator.error = RuntimeError("socket exploded")
    r = client.post("/generate", json={"source_data_id": src["id"], "content_type": "tutorial"})
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
