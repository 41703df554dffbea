# === FILE: url_scan/config.py ===
"""
Loading and validation of the UrlScan crawl configuration.
Pydantic describes the schema; files may be YAML or JSON.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from url_scan.crawler.fetcher import DEFAULT_USER_AGENT
from url_scan.crawler.models import ScopePolicy
from url_scan.utils import is_valid_url


class CrawlConfig(BaseModel):
    """Configuration of a single crawl."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: str = Field(..., description="URL the crawl starts from.")
    output: Path = Field(Path("output.txt"), description="Base path of the two output files.")
    in_scope: List[str] = Field(default_factory=list, description="Host suffixes to follow.")
    out_scope: List[str] = Field(default_factory=list, description="Host suffixes to record only.")
    workers: int = Field(1, ge=1, description="Number of concurrent crawl workers.")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    timeout: Optional[float] = Field(None, gt=0, description="Per-request timeout in seconds; none by default.")
    unique_records: bool = Field(False, description="Write each URL at most once per output file.")

    @field_validator("start_url", mode="before")
    def _check_start_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not is_valid_url(v):
                raise ValueError(f"start_url must be an absolute http(s) URL, got {v!r}")
        return v

    @field_validator("in_scope", "out_scope", mode="before")
    def _split_csv(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return v.split(",")
        return v

    @property
    def policy(self) -> ScopePolicy:
        return ScopePolicy.from_lists(self.in_scope, self.out_scope)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML or JSON config file into a plain mapping."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlConfig:
    """
    Build a validated CrawlConfig from an optional file plus overrides.

    Overrides that are ``None`` are ignored, so CLI options left unset keep
    the file's values.
    """
    data: Dict[str, Any] = read_config_file(path) if path is not None else {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlConfig(**data)
