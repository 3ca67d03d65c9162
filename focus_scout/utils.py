# File: focus_scout/utils.py
"""focus_scout.utils: Утилитарные функции для обработки URL."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import urldefrag, urljoin, urlparse

from focus_scout.logger import logger

__all__: Sequence[str] = (
    "canonicalize_scheme",
    "is_valid_url",
    "resolve_link",
)

_INSECURE_PREFIX = "http://"
_SECURE_PREFIX = "https://"


def canonicalize_scheme(url: str) -> str:
    """Переписывает префикс ``http://`` в ``https://``; остальные URL не меняются."""
    if url[: len(_INSECURE_PREFIX)].lower() == _INSECURE_PREFIX:
        return _SECURE_PREFIX + url[len(_INSECURE_PREFIX):]
    return url


def is_valid_url(url: str) -> bool:
    """Проверяет, что URL абсолютный и использует http(s)."""
    try:
        parsed = urlparse(url)
        valid = parsed.scheme in ("http", "https") and bool(parsed.netloc)
    except ValueError as exc:
        logger.debug("URL validation error %s: %s", url, exc)
        return False
    return valid


def resolve_link(base_url: str, href: str) -> str | None:
    """Разрешает href относительно страницы и отбрасывает фрагмент.

    Возвращает None, если результат не является http(s)-адресом
    (mailto:, javascript:, битый URL).
    """
    try:
        absolute, _ = urldefrag(urljoin(base_url, href.strip()))
    except ValueError:
        return None
    return absolute if is_valid_url(absolute) else None
