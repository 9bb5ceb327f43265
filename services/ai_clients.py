"""
Provider clients, built once on first use.

Keys are only checked when a client is first requested, so the app boots
without them; a missing key fails that request with a clear message.
"""
import os
import logging
import threading
from typing import Optional

from dotenv import load_dotenv
from openai import OpenAI
from google import genai

from services.errors import ConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)

IMAGE_MODEL = os.getenv("IMAGE_MODEL", "gemini-2.5-flash-image")

_lock = threading.Lock()
_openai: Optional[OpenAI] = None
_gemini: Optional[genai.Client] = None
_reported: set = set()


def _timeout(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


def _require(name: str) -> str:
    value = os.getenv(name)
    if not value:
        if name not in _reported:
            _reported.add(name)
            logger.error("[config] %s environment variable is not set", name)
        raise ConfigurationError(f"{name} environment variable is not set")
    return value


def get_openai_client() -> OpenAI:
    global _openai
    with _lock:
        if _openai is None:
            _openai = OpenAI(api_key=_require("OPENAI_API_KEY"), timeout=_timeout("OPENAI_TIMEOUT", 120.0))
            logger.info("[openai] client initialized")
        return _openai


def get_gemini_client() -> genai.Client:
    global _gemini
    with _lock:
        if _gemini is None:
            _gemini = genai.Client(
                api_key=_require("GOOGLE_AI_API_KEY"),
                http_options={"timeout": int(_timeout("GEMINI_TIMEOUT", 120.0) * 1000)},  # milliseconds
            )
            logger.info("[gemini] client initialized (image model %s)", IMAGE_MODEL)
        return _gemini


def reset_clients() -> None:
    """Drop cached clients (tests, key rotation)."""
    global _openai, _gemini
    with _lock:
        _openai = None
        _gemini = None
        _reported.clear()
