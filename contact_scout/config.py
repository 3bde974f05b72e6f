# === FILE: contact_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации ContactScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Callable, List, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from contact_scout.crawler.routes import DEFAULT_ALLOW_KEYWORDS, DEFAULT_DENY_KEYWORDS
from contact_scout.extract.addresses import DEFAULT_CONTACT_KEYWORDS
from contact_scout.extract.social import DEFAULT_SOCIAL_DOMAINS


class ScoutConfig(BaseModel):
    """Конфигурация для одного запуска обхода реестра доменов."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    concurrency: int = Field(4, ge=1, description="Макс. число доменов, обрабатываемых одновременно.")
    route_policy: Literal["deny", "allow"] = Field(
        "deny", description="Стратегия классификации маршрутов: deny-list или allow-list."
    )
    deny_keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_DENY_KEYWORDS),
        description="Ключевые слова, исключающие путь из обхода.",
    )
    allow_keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOW_KEYWORDS),
        description="Ключевые слова, разрешающие путь (allow-list).",
    )
    contact_keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTACT_KEYWORDS),
        description="Признаки ссылки на контактную страницу (текст или href).",
    )
    social_domains: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SOCIAL_DOMAINS),
        description="Фрагменты доменов социальных сетей.",
    )
    default_scheme: Literal["https", "http"] = Field(
        "https", description="Схема для доменов из реестра без схемы."
    )
    request_timeout: float = Field(10.0, gt=0, description="Таймаут проверки доступности (секунд).")
    page_timeout: float = Field(30.0, gt=0, description="Таймаут навигации/проверки страницы (секунд).")
    domain_timeout: Optional[float] = Field(
        None, gt=0, description="Общий таймаут на один домен (секунд), None означает без ограничения."
    )
    max_pages: int = Field(500, ge=1, description="Жесткий лимит страниц на один домен.")
    user_agent: str = Field("ContactScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    headless: bool = Field(True, description="Запуск браузера без окна.")
    blocked_resource_types: List[str] = Field(
        default_factory=lambda: ["image", "stylesheet", "font", "media"],
        description="Типы ресурсов, загрузка которых блокируется.",
    )
    stop_at_first_phone: bool = Field(
        False, description="Прекратить поиск телефонов после первого найденного."
    )
    dedupe_phones_by_digits: bool = Field(
        False, description="Считать одинаковыми номера с одинаковым набором цифр."
    )
    scan_frames: bool = Field(True, description="Искать ссылки на соцсети во фреймах.")

    @field_validator("deny_keywords", "allow_keywords", "contact_keywords", "social_domains")
    def _lower_keywords(cls, v: List[str]) -> List[str]:
        return [item.strip().lower() for item in v if item and item.strip()]

    @model_validator(mode="after")
    def _check_active_keywords(self) -> ScoutConfig:
        if self.route_policy == "allow" and not self.allow_keywords:
            raise ValueError("allow_keywords must not be empty for the allow route policy")
        return self


_DEFAULT_CFG = Path("configs/default.yaml")

_PARSERS: dict[str, tuple[str, Callable[[str], Any], tuple[type[Exception], ...]]] = {
    ".yaml": ("YAML", yaml.safe_load, (yaml.YAMLError,)),
    ".yml": ("YAML", yaml.safe_load, (yaml.YAMLError,)),
    ".json": ("JSON", json.loads, (json.JSONDecodeError,)),
}


def _read_mapping(path: Path) -> dict[str, Any]:
    """Парсит YAML/JSON по расширению; верхний уровень обязан быть словарём."""
    suffix = path.suffix.lower()
    if suffix not in _PARSERS:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix or path.name}")
    kind, parse, errors = _PARSERS[suffix]
    try:
        data = parse(path.read_text(encoding="utf-8"))
    except errors as exc:
        raise ValueError(f"Ошибка разбора {kind} в {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(f"{kind} в {path}: ожидался словарь верхнего уровня, а не {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ScoutConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ScoutConfig.
    Без пути берёт configs/default.yaml, а если его нет, значения по умолчанию.
    При отсутствии явно указанного файла бросает FileNotFoundError.
    """
    if path is None:
        return ScoutConfig(**_read_mapping(_DEFAULT_CFG)) if _DEFAULT_CFG.is_file() else ScoutConfig()

    cfg_path = Path(path).expanduser().resolve()
    if not cfg_path.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(cfg_path))
    return ScoutConfig(**_read_mapping(cfg_path))


__all__ = ["ScoutConfig", "ValidationError", "load_config"]
