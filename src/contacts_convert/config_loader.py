from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # type: ignore[import-untyped]

from .models import DEFAULT_VCARD_VERSION, ChunkPolicy, validate_version
from .partition import DEFAULT_ARCHIVE_NAME


@dataclass
class OutputsConfig:
    dir: Path


@dataclass
class VCardConfig:
    version: str = DEFAULT_VCARD_VERSION


@dataclass
class SplitConfig:
    policy: ChunkPolicy = field(default_factory=ChunkPolicy)
    archive_name: str = DEFAULT_ARCHIVE_NAME


@dataclass
class MappingConfig:
    overrides: Dict[str, Optional[str]] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class ConverterConfig:
    input_path: Optional[str]
    outputs: OutputsConfig
    vcard: VCardConfig
    split: SplitConfig
    mapping: MappingConfig
    logging: LoggingConfig
    preview_rows: int = 0


def _load_yaml(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_converter_config(args: argparse.Namespace) -> ConverterConfig:
    config_data = _load_yaml(getattr(args, "config", None))
    outputs_cfg = config_data.get("outputs", {}) or {}
    vcard_cfg = config_data.get("vcard", {}) or {}
    split_cfg = config_data.get("split", {}) or {}
    mapping_cfg = config_data.get("mapping", {}) or {}
    logging_cfg = config_data.get("logging", {}) or {}

    outputs_dir = Path(getattr(args, "out_dir", None) or outputs_cfg.get("dir") or os.getcwd())

    version = validate_version(
        getattr(args, "version", None) or str(vcard_cfg.get("version") or DEFAULT_VCARD_VERSION)
    )

    split_by = getattr(args, "split_by", None) or split_cfg.get("by") or "count"
    split_value = getattr(args, "split_value", None)
    if split_value is None:
        split_value = split_cfg.get("value", 100)
    split = SplitConfig(
        policy=ChunkPolicy.from_mapping({"by": split_by, "value": split_value}),
        archive_name=getattr(args, "archive_name", None)
        or split_cfg.get("archive_name")
        or DEFAULT_ARCHIVE_NAME,
    )

    overrides = dict(mapping_cfg.get("overrides", {}) or {})
    for item in getattr(args, "map", None) or []:
        name, _, header = item.partition("=")
        overrides[name.strip()] = header.strip() or None
    mapping = MappingConfig(overrides=overrides)

    arg_level = getattr(args, "log_level", None)
    effective_level = (arg_level or logging_cfg.get("level") or "WARNING").upper()

    return ConverterConfig(
        input_path=getattr(args, "input", None),
        outputs=OutputsConfig(dir=outputs_dir),
        vcard=VCardConfig(version=version),
        split=split,
        mapping=mapping,
        logging=LoggingConfig(level=effective_level),
        preview_rows=int(getattr(args, "preview", None) or 0),
    )
