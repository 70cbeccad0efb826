# === FILE: link_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации LinkScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "PathNormalization",
    "SiteRecord",
    "CrawlerConfig",
    "DEFAULT_HEADERS",
    "load_config",
]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS: Dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Upgrade-Insecure-Requests": "1",
}


class PathNormalization(str, Enum):
    """How the URL path takes part in the dedup key.

    ``preserve`` keeps the path byte for byte, so ``/en/Page`` and
    ``/en/page/`` stay distinct.  ``fold`` lowercases it and strips trailing
    slashes; only safe for sites that serve paths case-insensitively.
    """

    PRESERVE = "preserve"
    FOLD = "fold"


class SiteRecord(BaseModel):
    """Registered site as handed over by the site store."""
    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    name: str = ""


class CrawlerConfig(BaseModel):
    """Параметры одного запуска проверки (и пакетного scan-all).

    Рекомендуемые значения: ``timeout`` 10-30 с, ``inter_request_delay``
    0.5-1 с; значения по умолчанию лежат в этих пределах.  Валидация
    намеренно шире (любой положительный таймаут до 120 с, пауза от 0),
    чтобы тесты и локальные прогоны могли обходиться без задержек.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float = Field(30.0, gt=0, le=120, description="Таймаут на один запрос (секунд).")
    inter_request_delay: float = Field(
        1.0, ge=0, description="Пауза между проверками страниц одного хоста (секунд)."
    )
    locale_filter: bool = Field(
        True, description="Оставлять только URL с тем же первым сегментом пути, что у базового."
    )
    path_normalization: PathNormalization = Field(
        PathNormalization.PRESERVE, description="Политика пути при дедупликации."
    )
    max_sitemap_depth: int = Field(5, ge=0, description="Максимальная вложенность sitemap index.")
    head_precheck: bool = Field(False, description="Сначала HEAD, затем GET при отказе.")
    link_scope: Literal["all", "anchors"] = Field(
        "all", description="Какие элементы HTML собирать при отсутствии sitemap."
    )
    check_concurrency: int = Field(1, ge=1, le=32, description="Размер пула проверок страниц.")
    max_concurrent_sites: int = Field(5, ge=1, le=5, description="Одновременных сайтов в scan-all.")
    crawl_budget: Optional[float] = Field(
        None, gt=0, description="Лимит времени на фазу проверки (секунд)."
    )
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    headers: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_HEADERS), description="Дополнительные заголовки."
    )
    sites: List[SiteRecord] = Field(default_factory=list, description="Сайты для scan-all.")

    @field_validator("path_normalization", mode="before")
    def _lower_mode(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def request_headers(self) -> Dict[str, str]:
        """Headers sent with every request, User-Agent included."""
        return {**self.headers, "User-Agent": self.user_agent}


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


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Без пути использует configs/default.yaml, если он есть, иначе значения по умолчанию.
    При отсутствии явно указанного файла бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlerConfig()
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

    return CrawlerConfig(**data)
