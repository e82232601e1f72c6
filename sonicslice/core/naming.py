"""
Clip naming helpers.
Timestamped default names, plus an optional OpenAI-backed assistant that
turns a short description into a snake_case clip name.
"""
from __future__ import annotations
import os
import re
import time
from datetime import datetime
from typing import Any, Optional

from openai import OpenAI

from .config import NAMING_CONFIG
from sonicslice.utils.logger import logger


def unix_time_ms() -> int:
    return int(time.time() * 1000)


def fallback_clip_name() -> str:
    """Name used whenever the naming assistant cannot help."""
    return f"{NAMING_CONFIG.fallback_prefix}_{unix_time_ms()}"


def cut_name(base_name: str, when: Optional[datetime] = None) -> str:
    """``<base>_cut_<HHMMSS>`` for a freshly cut clip."""
    when = when or datetime.now()
    return f"{base_name}{NAMING_CONFIG.cut_infix}{when.strftime('%H%M%S')}"


def join_name() -> str:
    """``Joined_Mix_<unix ms>`` for a join export."""
    return f"{NAMING_CONFIG.join_prefix}_{unix_time_ms()}"


def sanitize_name(text: str, max_length: int = NAMING_CONFIG.max_name_length) -> str:
    """Strip the reply, drop a file extension and replace whitespace with '_'."""
    name = text.strip().strip('"\'`')
    name = re.sub(r"\.(wav|mp3|flac|ogg)$", "", name, flags=re.IGNORECASE)
    name = re.sub(r"\s+", "_", name)
    return name[:max_length]


class OpenAINameSuggester:
    """
    Asks a chat model for a short, creative clip name.

    Failures never propagate: without an API key, or when the request fails,
    ``suggest`` logs the problem and returns None so the caller can fall back
    to a timestamp name.
    """

    PROMPT = (
        "Generate a short, creative, snake_case filename (max {max_len} chars, "
        "no extension) for an audio clip described as: \"{description}\". "
        "Return ONLY the filename string, nothing else."
    )

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = NAMING_CONFIG.model,
        client: Any = None,
    ) -> None:
        self.model = model
        self._api_key = api_key or os.environ.get(NAMING_CONFIG.api_key_env)
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                logger.warning(
                    f"{NAMING_CONFIG.api_key_env} not set. Clip naming assist is disabled."
                )
                return None
            self._client = OpenAI(api_key=self._api_key)
        return self._client

    def suggest(self, description: str) -> Optional[str]:
        client = self._get_client()
        if client is None:
            return None

        prompt = self.PROMPT.format(
            max_len=NAMING_CONFIG.max_name_length, description=description
        )
        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=32,
            )
            text = resp.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"Naming assist request failed: {e}", exc_info=True)
            return None

        name = sanitize_name(text)
        return name or None
