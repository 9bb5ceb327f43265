import os
import tempfile

# before the app is imported: no tables on the real database, images go to a scratch dir
os.environ["AUTO_CREATE_TABLES"] = "0"
os.environ.setdefault("IMAGE_STORAGE_DIR", tempfile.mkdtemp(prefix="blog-images-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from database import Base, get_db, get_session_factory
import models  # noqa: F401
from main import app
from services.errors import GenerationError
from services.generation import GeneratedImage, TextGeneration, get_image_generator, get_text_generator

# 1x1 transparent PNG
PNG_B64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kQAAAABJRU5ErkJggg=="
)


class StubTextGenerator:
    def __init__(self, content="# 테스트 제목\n\n본문입니다.", tokens=321):
        self.content = content
        self.tokens = tokens
        self.error = None
        self.calls = []

    def generate(self, prompt, model):
        self.calls.append((prompt, model))
        if self.error:
            raise self.error
        return TextGeneration(content=self.content, tokens_used=self.tokens)


class StubImageGenerator:
    """Fails when the prompt asks for FAIL, returns nothing when it asks for NOIMAGE."""

    def __init__(self):
        self.calls = []

    async def generate(self, prompt, reference_image=None):
        self.calls.append((prompt, reference_image))
        if "Additional request: FAIL" in prompt:
            raise GenerationError("Failed to generate image")
        if "Additional request: NOIMAGE" in prompt:
            return None
        return GeneratedImage(image_data=PNG_B64, mime_type="image/png")


@pytest.fixture
def session_factory(tmp_path):
    # a file, not :memory:, so the threadpool reads of the image fan-out get their own connections
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def text_generator():
    return StubTextGenerator()


@pytest.fixture
def image_generator():
    return StubImageGenerator()


@pytest.fixture
def storage_dir(tmp_path, monkeypatch):
    target = tmp_path / "blog-images"
    monkeypatch.setenv("IMAGE_STORAGE_DIR", str(target))
    return target


@pytest.fixture
def client(session_factory, text_generator, image_generator, storage_dir):
    def _db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_text_generator] = lambda: text_generator
    app.dependency_overrides[get_image_generator] = lambda: image_generator
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_source(client):
    def _make(number=1, **overrides):
        body = {
            "number": number,
            "category_large": "여행",
            "category_medium": "국내여행",
            "category_small": "제주",
            "core_keyword": "제주 여행",
            "seo_keywords": ["제주 맛집", "제주 숙소"],
            "blog_topic": f"제주 여행 코스 추천 {number}",
        }
        body.update(overrides)
        r = client.post("/source-data", json=body)
        assert r.status_code == 201, f"status={r.status_code} body={r.text}"
        return r.json()

    return _make
