from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Optional

from .config_loader import ConverterConfig, load_converter_config
from .errors import (
    ConversionError,
    EmptyResultError,
    MissingRequiredFieldError,
    SerializationError,
)
from .models import SUPPORTED_FIELDS, ChunkPolicy, Contact, FieldMapping, MappingField

logger = logging.getLogger(__name__)

__all__ = [
    "ChunkPolicy",
    "Contact",
    "ConversionError",
    "ConverterConfig",
    "EmptyResultError",
    "FieldMapping",
    "MappingField",
    "MissingRequiredFieldError",
    "SUPPORTED_FIELDS",
    "SerializationError",
    "base_parser",
    "converted_filename",
    "load_cli_config",
    "load_config",
    "read_source_text",
    "warn_missing",
    "write_output",
]


def load_config(args: Any) -> ConverterConfig:
    return load_converter_config(args)


def warn_missing(path: Optional[str], label: str) -> bool:
    if not path or not os.path.exists(path):
        logger.warning("%s path missing: %s", label, path)
        return True
    return False


def read_source_text(path: Optional[str], label: str) -> str:
    """Read a whole input document; a missing path yields an empty document."""
    if warn_missing(path, label):
        return ""
    with open(str(path), "r", encoding="utf-8", errors="replace") as handle:
        return handle.read()


def converted_filename(source_path: Optional[str], extension: str) -> str:
    stem = Path(source_path).stem if source_path else "contacts"
    return f"{stem}_converted.{extension}"


def base_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("input", type=str, help="Path to the source file.")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config.")
    parser.add_argument("--out-dir", type=str, default=None)
    parser.add_argument(
        "--preview", type=int, default=None, help="Log the first N parsed contacts."
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override logging level")
    return parser


def write_output(path: Path, content: str | bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    logger.info("Saved: %s", path)
    return path


def load_cli_config(args: Any) -> Optional[ConverterConfig]:
    """Load config for a command; log and return None when it is invalid."""
    try:
        return load_config(args)
    except (OSError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return None
