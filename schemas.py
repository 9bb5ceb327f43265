from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, Tag, Discriminator, field_validator, model_validator
from typing import Annotated, Any, List, Literal, Optional, Union
from datetime import datetime
import enum

from services.storage import decode_image_data


# ----------------- Enumerations -----------------

ContentType = Literal["informational", "review", "tutorial", "comparison", "listicle"]
PostStatus = Literal["draft", "published", "archived"]
ImagePurpose = Literal["main", "sub1", "sub2", "sub3"]
ImagePromptCategory = Literal["style", "mood", "purpose", "text", "template"]

# Text models offered to the console. gpt-5* goes through the Responses API.
AI_MODELS = [
    {"id": "gpt-5-mini", "name": "GPT-5 Mini", "description": "빠르고 효율적"},
    {"id": "gpt-4.1", "name": "GPT-4.1", "description": "안정적인 품질"},
    {"id": "gpt-5.2", "name": "GPT-5.2", "description": "최신 고성능 모델"},
]
ModelId = Literal["gpt-5-mini", "gpt-4.1", "gpt-5.2"]
DEFAULT_MODEL: str = "gpt-5-mini"


def _reject_nulls(data: Any, fields: tuple) -> Any:
    """Partial updates may omit a field but not null out a NOT NULL column."""
    if isinstance(data, dict):
        nulled = [f for f in fields if f in data and data[f] is None]
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
    return data


class Page(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


# ----------------- Source data -----------------

class SourceDataBase(BaseModel):
    number: int = Field(gt=0)
    category_large: str = Field(min_length=1)
    category_medium: str = Field(min_length=1)
    category_small: Optional[str] = None
    core_keyword: str = Field(min_length=1)
    seo_keywords: List[str] = Field(default_factory=list)
    blog_topic: str = Field(min_length=1)


class SourceDataCreate(SourceDataBase):
    pass


class SourceDataUpdate(BaseModel):
    number: Optional[int] = Field(default=None, gt=0)
    category_large: Optional[str] = Field(default=None, min_length=1)
    category_medium: Optional[str] = Field(default=None, min_length=1)
    category_small: Optional[str] = None
    core_keyword: Optional[str] = Field(default=None, min_length=1)
    seo_keywords: Optional[List[str]] = None
    blog_topic: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _required_not_null(cls, data):
        return _reject_nulls(
            data, ("number", "category_large", "category_medium", "core_keyword", "seo_keywords", "blog_topic")
        )


class SourceDataOut(SourceDataBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SourceDataList(Page):
    data: List[SourceDataOut]


class CSVImportResult(BaseModel):
    success: bool = True
    imported: int
    total: int


class GeneratedStatus(BaseModel):
    generated_ids: List[int]
    count: int


# ----------------- Text generation -----------------

class GenerateRequest(BaseModel):
    source_data_id: int
    content_type: ContentType
    additional_request: Optional[str] = None
    model: ModelId = DEFAULT_MODEL


class GenerateResponse(BaseModel):
    content: str
    title: str
    source_data_id: int
    content_type: ContentType
    additional_request: Optional[str] = None
    prompt_used: str
    model_used: str
    tokens_used: int


# ----------------- Image generation -----------------
# Wire format is camelCase for these bodies, so every field carries an alias.

class ReferenceImage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data: str = Field(min_length=1)  # base64, a data: URL prefix is tolerated
    mime_type: str = Field(alias="mimeType", min_length=1)

    @field_validator("data")
    @classmethod
    def _decodable(cls, v: str) -> str:
        decode_image_data(v)  # ValueError -> 400 before any provider call
        return v


class ImageOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    style: str = "realistic"
    mood: str = "professional"
    include_text: bool = Field(default=False, alias="includeText")
    text_content: Optional[str] = Field(default=None, alias="textContent")
    additional_request: Optional[str] = Field(default=None, alias="additionalRequest")
    reference_image: Optional[ReferenceImage] = Field(default=None, alias="referenceImage")


class SingleImageRequest(ImageOptions):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)


class ImageDescriptor(ImageOptions):
    purpose: ImagePurpose


class MultiImageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    reference_image: Optional[ReferenceImage] = Field(default=None, alias="referenceImage")
    images: List[ImageDescriptor] = Field(min_length=1)


def _image_request_kind(v: Any) -> str:
    if isinstance(v, dict):
        return "multi" if "images" in v else "single"
    return "multi" if isinstance(v, MultiImageRequest) else "single"


# Decided once at the boundary: a body with an "images" field is a batch request
ImageGenerationRequest = Annotated[
    Union[
        Annotated[SingleImageRequest, Tag("single")],
        Annotated[MultiImageRequest, Tag("multi")],
    ],
    Discriminator(_image_request_kind),
]
IMAGE_REQUEST_ADAPTER: TypeAdapter = TypeAdapter(ImageGenerationRequest)


class GeneratedImageOut(BaseModel):
    image_data: str
    mime_type: str


class PurposeImageOut(GeneratedImageOut):
    purpose: str


class MultiImageResponse(BaseModel):
    images: List[PurposeImageOut]


# ----------------- Posts -----------------

class SubImageIn(BaseModel):
    image_data: str = Field(min_length=1)
    mime_type: str = "image/png"


class PostCreate(BaseModel):
    source_data_id: Optional[int] = None
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    content_type: Optional[ContentType] = None
    additional_request: Optional[str] = None
    prompt_used: Optional[str] = None
    model_used: str = DEFAULT_MODEL
    tokens_used: Optional[int] = 0

    # client-side upload: URLs already in blob storage
    image_url: Optional[str] = None
    sub_image_urls: Optional[List[str]] = None

    # server-side upload: raw base64 payloads
    image_data: Optional[str] = None
    image_mime_type: Optional[str] = None
    sub_images: Optional[List[SubImageIn]] = None


class PostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    status: Optional[PostStatus] = None
    image_url: Optional[str] = None
    sub_image_urls: Optional[List[str]] = None

    @model_validator(mode="before")
    @classmethod
    def _required_not_null(cls, data):
        return _reject_nulls(data, ("title", "content", "status"))


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    source_data_id: Optional[int] = None
    title: str
    content: str
    content_type: Optional[str] = None
    additional_request: Optional[str] = None
    prompt_used: Optional[str] = None
    model_used: str
    tokens_used: Optional[int] = None
    status: PostStatus
    image_url: Optional[str] = None
    sub_image_urls: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    source_data: Optional[SourceDataOut] = None

    @field_validator("status", mode="before")
    @classmethod
    def _enum_value(cls, v):
        return v.value if isinstance(v, enum.Enum) else v


class PostList(Page):
    data: List[PostOut]


# ----------------- Prompt templates -----------------

class PromptIn(BaseModel):
    name: str = Field(min_length=1)
    content_type: ContentType
    template: str = Field(min_length=1)
    is_default: bool = False


class PromptUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    content_type: Optional[ContentType] = None
    template: Optional[str] = Field(default=None, min_length=1)
    is_default: Optional[bool] = None


class PromptOut(PromptIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ImagePromptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: ImagePromptCategory
    key: str
    name: str
    prompt: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ImagePromptUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    prompt: Optional[str] = Field(default=None, min_length=1)
    is_active: Optional[bool] = None
