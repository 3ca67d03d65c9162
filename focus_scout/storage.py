# File: focus_scout/storage.py
"""focus_scout.storage: сохранение загруженных страниц в зеркальное дерево каталогов.

Страница ``https://host/a/b.html`` сохраняется как ``<base>/https/host/a/b.html``.
URL, похожие на каталог, получают имя файла ``index.html``: иначе файл без
расширения столкнулся бы с одноимённым каталогом.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import Sequence, Union
from urllib.parse import urlparse

from focus_scout.crawler.errors import WriteError
from focus_scout.logger import logger

__all__: Sequence[str] = ("sanitize_filename", "resolve_download_path", "PageStore")

INDEX_FILE = "index.html"

_UNDERSCORED = re.compile(r'[*?"|]')
_SLASHES = re.compile(r"/+")


def sanitize_filename(file_path: str) -> str:
    """Заменяет или удаляет символы, недопустимые в именах файлов."""
    file_path = file_path.replace(":", "")
    file_path = _UNDERSCORED.sub("_", file_path)
    file_path = file_path.replace("<", "[").replace(">", "]")
    file_path = file_path.replace("\\", "/")
    return _SLASHES.sub("/", file_path)


def _is_directory_like(url: str, last_segment: str) -> bool:
    path = urlparse(url).path
    return not path or path.endswith("/") or "." not in last_segment


def resolve_download_path(url: str, base_path: Union[str, Path]) -> Path:
    """Строит путь файла для URL внутри base_path."""
    sanitized = sanitize_filename(url)
    segments = [s for s in PurePosixPath(sanitized).parts if s not in ("/", ".", "..")]
    if not segments:
        segments = ["_"]
    if _is_directory_like(url, segments[-1]):
        segments.append(INDEX_FILE)
    return Path(base_path).expanduser().absolute().joinpath(*segments)


class PageStore:
    """Пишет байты страниц под base_path, перезаписывая существующие файлы."""

    def __init__(self, base_path: Union[str, Path]) -> None:
        self.base_path = Path(base_path).expanduser()

    def path_for(self, url: str) -> Path:
        return resolve_download_path(url, self.base_path)

    def save(self, url: str, content: bytes) -> Path:
        target = self.path_for(url)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as exc:
            raise WriteError(target, exc) from exc
        logger.debug("Saved %s -> %s", url, target)
        return target
