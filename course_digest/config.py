# === FILE: course_digest/config.py ===
"""
Loading and validation of the course_digest configuration.

Pydantic describes the schema of both the scraper settings
(``configs/default.yaml``) and the degree list (``config/degrees.json``).
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from course_digest.logger import logger


class Predegree(BaseModel):
    """Degree metadata as kept in the shared ``config`` repository.

    It still has to be turned into a :class:`~course_digest.scraper.degrees.Degree`
    by scraping the yearly programme pages.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field("", description="Unique kebab-case name of the degree.")
    name: str = Field("", description="Human-readable name of the degree.")
    code: str = Field("", description="University code, usually formatted as 1234/567.")


class ScraperConfig(BaseModel):
    """Settings for one scraping run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: str = Field("https://corsi.unibo.it", min_length=1, description="Root of the degree websites.")
    degrees_path: Path = Field(Path("config/degrees.json"), description="JSON list of degrees to scrape.")
    output_dir: Path = Field(Path("output"), description="Directory receiving the .adoc documents.")
    years_per_degree: int = Field(3, ge=1, description="Enrollment years scraped for every degree.")
    timeout: float = Field(10.0, gt=0, description="Timeout of a single request (seconds).")
    user_agent: str = Field("CourseDigestBot/1.0", min_length=1, description="User-Agent header.")
    rate_limit: float = Field(5.0, gt=0, description="Requests per second.")
    retry_times: int = Field(2, ge=0, description="Retries on 5xx/429 and connection errors.")
    backoff: float = Field(1.0, ge=0, description="Base delay of the exponential retry backoff (seconds).")
    concurrency: int = Field(4, ge=1, description="Teaching pages fetched in parallel.")
    index_title: str = Field(
        "Unified Course Descriptions for Some UNIBO Degrees",
        min_length=1,
        description="Title of index.adoc.",
    )
    documentation_url: str = Field(
        "https://cartabinaria.students.cs.unibo.it/en/wiki/web-scraper/course-description-merged/",
        description="Link shown under the index title.",
    )

    @field_validator("base_url", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v


_DEFAULT_CFG = Path("configs/default.yaml")
_PREDEGREES = TypeAdapter(List[Predegree])


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ScraperConfig:
    """
    Read a YAML or JSON file and return a validated ScraperConfig.

    Without *path* the default ``configs/default.yaml`` is used when present,
    the built-in defaults otherwise. An explicit path that does not exist
    raises FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            logger.debug("No %s found, using built-in defaults", _DEFAULT_CFG)
            return ScraperConfig()
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
        raise ValueError(f"Unsupported config format: {suffix}")

    return ScraperConfig(**data)


def load_predegrees(path: Union[str, Path]) -> list[Predegree]:
    """Read the degree list. Any read or parse failure propagates."""
    path_obj = Path(path)
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
    predegrees = _PREDEGREES.validate_json(path_obj.read_bytes())
    logger.debug("Loaded %d degrees from %s", len(predegrees), path_obj)
    return predegrees


__all__ = ["Predegree", "ScraperConfig", "load_config", "load_predegrees"]
