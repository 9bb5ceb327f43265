# services/storage.py
import base64
import binascii
import logging
import os
import random
import re
import string
import time
from typing import List, Optional

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

MIME_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
}

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")


def storage_dir() -> str:
    # read per call so tests and deployments can point it elsewhere
    return os.getenv("IMAGE_STORAGE_DIR") or os.path.join(BASE_DIR, "static", "uploads", "blog-images")


def public_base_url() -> str:
    return (os.getenv("IMAGE_PUBLIC_BASE_URL") or "/static/uploads/blog-images").rstrip("/")


def extension_for(mime_type: Optional[str]) -> str:
    return MIME_EXTENSIONS.get((mime_type or "").lower(), "png")


def decode_image_data(data: str) -> bytes:
    """base64 (optionally a data: URL) -> bytes. Raises ValueError on bad input."""
    cleaned = _DATA_URL_PREFIX.sub("", (data or "").strip())
    try:
        raw = base64.b64decode(cleaned, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 image data: {e}") from e
    if not raw:
        raise ValueError("empty image data")
    return raw


def make_object_name(purpose: str, mime_type: Optional[str]) -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{int(time.time() * 1000)}-{suffix}-{purpose}.{extension_for(mime_type)}"


def upload_image(image_data: str, mime_type: Optional[str], purpose: str) -> Optional[str]:
    """Store one base64 image and return its public URL, or None if it could not be stored."""
    try:
        raw = decode_image_data(image_data)
        dst_dir = storage_dir()
        os.makedirs(dst_dir, exist_ok=True)
        name = make_object_name(purpose, mime_type)
        with open(os.path.join(dst_dir, name), "xb") as f:
            f.write(raw)
    except (ValueError, OSError) as e:
        logger.error("[storage] upload failed (%s) -> %s", purpose, e)
        return None
    return f"{public_base_url()}/{name}"


def upload_many(images: List[dict]) -> List[dict]:
    """[{image_data, mime_type, purpose}] -> [{purpose, url}] with url None for failures."""
    return [
        {"purpose": img["purpose"], "url": upload_image(img["image_data"], img.get("mime_type"), img["purpose"])}
        for img in images
    ]
