# File: site_audit/utils.py
"""site_audit.utils: Утилитарные функции для обработки URL и имён файлов отчётов."""

from __future__ import annotations

import re
from typing import Collection, List, Optional, Sequence
from urllib.parse import urldefrag, urlsplit

from site_audit.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "origin_of",
    "is_same_origin",
    "safe_name_from_url",
    "remove_duplicates",
)

_DEFAULT_PORTS = {"http": 80, "https": 443}
_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_RESERVED_RE = re.compile(r"[:?#/]")
_UNDERSCORES_RE = re.compile(r"__+")


def normalize_url(url: str) -> str:
    """Убирает фрагмент: `/page#a` и `/page#b` это один и тот же адрес."""
    normalized = urldefrag(url)[0]
    if normalized != url:
        logger.debug("Normalized URL: %s -> %s", url, normalized)
    return normalized


def origin_of(url: str) -> Optional[str]:
    """Возвращает origin (scheme://host:port) или None для некорректного URL."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return None
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if not scheme or not host:
        return None
    port = port or _DEFAULT_PORTS.get(scheme)
    return f"{scheme}://{host}:{port}" if port else f"{scheme}://{host}"


def is_same_origin(url: str, base_origin: str) -> bool:
    """Проверяет, что URL принадлежит origin стартовой страницы."""
    origin = origin_of(url)
    return origin is not None and origin == base_origin


def safe_name_from_url(url: str) -> str:
    """Безопасное имя файла: без схемы, `:?#/` → `_`, повторы `_` схлопнуты."""
    name = _SCHEME_RE.sub("", url)
    name = _RESERVED_RE.sub("_", name)
    return _UNDERSCORES_RE.sub("_", name)


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
