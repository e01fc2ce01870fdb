# === FILE: site_audit/config.py ===
"""
Модуль для загрузки и валидации конфигурации аудита SiteAudit.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Literal, Optional, Union
from urllib.parse import urldefrag

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
    model_validator,
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120 Safari/537.36"
)


class AuditConfig(BaseModel):
    """Конфигурация для одного запуска аудита."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    # Обход
    base_url: HttpUrl = Field(..., description="Стартовый URL обхода.")
    max_pages: int = Field(8, ge=1, description="Жесткий лимит по числу страниц.")
    max_depth: int = Field(2, ge=0, description="Максимальная глубина обхода ссылок.")
    request_pause: float = Field(1.5, ge=0, description="Пауза между страницами (секунд).")
    probe_pause: float = Field(1.0, ge=0, description="Пауза между пробами (секунд).")
    navigation_timeout: float = Field(60.0, gt=0, description="Таймаут навигации (секунд).")
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = "networkidle"

    # Отчёты
    report_dir: Path = Field(Path("reports"), description="Каталог детальных отчётов.")
    summary_dir: Path = Field(Path("reports/summary"), description="Каталог сводок.")

    # Браузер
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    headless: bool = True
    debug_port: int = Field(9222, gt=0, lt=65536, description="Порт remote debugging для Lighthouse.")
    http_timeout: float = Field(30.0, gt=0, description="Таймаут внешних HTTP-запросов (секунд).")

    # Доступность (axe-core)
    axe_script_path: Optional[Path] = Field(None, description="Локальная копия axe.min.js.")
    axe_cdn_url: str = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.9.1/axe.min.js"
    axe_tags: List[str] = Field(default_factory=lambda: ["wcag2a", "wcag2aa"], min_length=1)
    axe_max_violations: int = Field(50, ge=0)

    # Валидация HTML (Nu HTML Checker)
    validator_url: str = "http://localhost:8888/"
    validator_fallback_url: str = "https://validator.w3.org/nu/"
    validation_max_messages: int = Field(50, ge=0)

    # CSS
    css_max_length: int = Field(800_000, gt=0, description="Потолок размера CSS для анализа.")

    # Web vitals
    vitals_window: float = Field(3.0, ge=0, description="Окно наблюдения метрик (секунд).")
    load_fallback_delay: float = Field(3.0, ge=0)

    # Углеродный след
    carbon_api_url: str = "https://api.websitecarbon.com/site"
    carbon_pause: float = Field(1.0, ge=0)
    carbon_backoff: float = Field(5.0, ge=0)

    # Lighthouse
    lighthouse_enabled: bool = True
    lighthouse_bin: str = "lighthouse"
    lighthouse_timeout: float = Field(120.0, gt=0)

    @field_validator("base_url", mode="before")
    def _strip_fragment(cls, v: Any) -> Any:
        if isinstance(v, str):
            return urldefrag(v.strip())[0]
        return v

    @model_validator(mode="after")
    def _check_axe_script_exists(self) -> AuditConfig:
        if self.axe_script_path is not None and not self.axe_script_path.is_file():
            raise FileNotFoundError(
                errno.ENOENT, os.strerror(errno.ENOENT), str(self.axe_script_path)
            )
        return self

    @property
    def entry_url(self) -> str:
        return str(self.base_url)


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


def load_config(path: Union[str, Path, None]) -> AuditConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект AuditConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
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
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return AuditConfig(**data)


__all__ = ["AuditConfig", "ValidationError", "load_config", "DEFAULT_USER_AGENT"]
