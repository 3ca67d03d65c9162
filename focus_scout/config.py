# === FILE: focus_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера FocusScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import json
import os
import errno
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
)

# Пробельные символы и пунктуация, по которым текст режется на слова.
DEFAULT_DELIMITERS = " \t\n\r\f,./<>?;:'\"[]{}\\|`~!@#$%^&*()_+-="


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска краулера."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: HttpUrl = Field(..., description="Стартовый URL обхода.")
    download_path: Path = Field(..., description="Каталог для сохранения страниц.")
    query: list[str] = Field(default_factory=list, description="Поисковые термины.")
    max_pages: int = Field(50, ge=1, description="Жесткий лимит по числу страниц.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("FocusScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    concurrency: int = Field(1, ge=1, description="Число одновременных загрузок.")
    delimiters: str = Field(DEFAULT_DELIMITERS, min_length=1, description="Разделители слов.")
    force_https: bool = Field(True, description="Переписывать http:// в https:// перед загрузкой.")
    trace: bool = Field(False, description="Печатать ход обхода.")
    debug: bool = Field(False, description="Отладочный вывод.")
    robots_debug: bool = Field(False, description="Отладочный вывод проверки robots.txt.")

    @field_validator("query", mode="before")
    def _split_query(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            return [term.lower() for item in v for term in str(item).split()]
        return v

    @field_validator("download_path", mode="before")
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        return v

    @property
    def query_terms(self) -> tuple[str, ...]:
        return tuple(self.query)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_data(path: Union[str, Path, None]) -> dict[str, Any]:
    """
    Читает YAML или JSON и возвращает сырой словарь настроек без проверки схемы.
    CLI накладывает поверх него свои опции перед созданием CrawlerConfig.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    return CrawlerConfig(**read_config_data(path))
