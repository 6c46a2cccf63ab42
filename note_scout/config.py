# === FILE: note_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации NoteScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import quote

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
    model_validator,
)


class NoteScoutConfig(BaseModel):
    """Конфигурация для одного запуска дампа."""
    model_config = ConfigDict(extra="forbid", frozen=True, validate_default=True)

    server_url: HttpUrl = Field("https://hackmd.io", description="Адрес сервиса заметок.")
    team: Optional[str] = Field(None, description="Имя команды HackMD.")
    database: str = Field("hackmd.json", description="Путь к JSON-снимку базы.")
    update: bool = Field(False, description="Пересобрать базу даже если файл уже есть.")

    meilisearch: Optional[HttpUrl] = Field(None, description="URL Meilisearch для публикации.")
    meilisearch_key: str = Field("masterKey", description="Ключ API Meilisearch.")
    index_name: str = Field("pages", min_length=1, description="Имя индекса документов.")
    index_wait_timeout: float = Field(30.0, gt=0, description="Ожидание создания индекса (секунд).")

    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос (секунд).")
    keepalive: float = Field(60.0, gt=0, description="Keep-alive соединений (секунд).")
    retry_times: int = Field(3, ge=0, description="Число повторных попыток при временных сбоях.")
    backoff_base: float = Field(0.5, ge=0, description="Базовая задержка экспоненциального backoff.")
    backoff_max: float = Field(60.0, ge=0, description="Максимальная задержка между попытками.")
    concurrency: int = Field(5, ge=1, description="Число одновременных загрузок.")
    user_agent: str = Field("NoteScout/0.1", min_length=1, description="Заголовок User-Agent.")

    csrf_header: str = Field("X-XSRF-Token", min_length=1, description="Заголовок для CSRF-токена.")
    credentials_env_prefix: str = Field("HACKMD", min_length=1, description="Префикс переменных окружения.")

    @field_validator("team", mode="before")
    def _blank_team_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _check_backoff(self) -> NoteScoutConfig:
        if self.backoff_max < self.backoff_base:
            raise ValueError("backoff_max must be >= backoff_base")
        return self

    @property
    def base_url(self) -> str:
        return str(self.server_url).rstrip("/")

    def endpoint(self, *parts: str) -> str:
        """Собирает URL сервиса из экранированных частей пути."""
        path = "/".join(quote(p.strip("/"), safe="") for p in parts)
        return f"{self.base_url}/{path}" if path else self.base_url

    def with_overrides(self, **overrides: Any) -> NoteScoutConfig:
        """Возвращает проверенную копию, пропуская незаданные (None) значения."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return NoteScoutConfig(**data)


_DEFAULT_CFG = Path("note_scout.yaml")


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


def load_config(path: Union[str, Path, None] = None) -> NoteScoutConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект NoteScoutConfig.
    Без явного пути читает note_scout.yaml из текущей папки, если он есть,
    иначе возвращает конфигурацию по умолчанию.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return NoteScoutConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return NoteScoutConfig(**data)


__all__ = ["NoteScoutConfig", "load_config"]
