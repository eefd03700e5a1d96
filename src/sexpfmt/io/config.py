from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import codecs
import yaml


@dataclass
class SExprConfig:
    max_depth: int = 256
    encoding: str = "utf-8"
    trailing_newline: bool = True

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise ValueError(f"Unknown encoding: {self.encoding!r}") from exc

    @classmethod
    def from_meta(cls, meta: Optional[Dict[str, Any]]) -> "SExprConfig":
        meta = dict(meta or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(meta) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(
            max_depth=int(meta.get("max_depth", 256)),
            encoding=str(meta.get("encoding", "utf-8")),
            trailing_newline=bool(meta.get("trailing_newline", True)),
        )

    @staticmethod
    def from_yaml(path: str | Path) -> "SExprConfig":
        with open(path, "r", encoding="utf-8") as f:
            y = yaml.safe_load(f)
        if y is not None and not isinstance(y, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(y).__name__}")
        # allow the settings to live under a top-level 'sexpfmt' key
        if y and set(y) == {"sexpfmt"}:
            y = y["sexpfmt"]
        return SExprConfig.from_meta(y)


DEFAULT_CONFIG = SExprConfig()
