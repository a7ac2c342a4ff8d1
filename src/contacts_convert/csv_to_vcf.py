from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Tuple

from .common import (
    ConversionError,
    EmptyResultError,
    base_parser,
    converted_filename,
    load_cli_config,
    load_config,
    read_source_text,
    write_output,
)
from .config_loader import ConverterConfig
from .logging_utils import configure_logging
from .mapping import apply_mapping, apply_overrides, auto_map, validate_mapping
from .models import VCARD_VERSIONS, Contact, FieldMapping
from .preview import log_preview
from .tabular import parse_tabular
from .vcard import write_cards

logger = logging.getLogger(__name__)


def load_contacts(config: ConverterConfig) -> Tuple[List[Contact], FieldMapping]:
    rows = parse_tabular(read_source_text(config.input_path, "CSV"))
    if not rows:
        raise EmptyResultError("CSV appears empty or invalid.")
    headers = list(rows[0].keys())
    mapping = apply_overrides(auto_map(headers), config.mapping.overrides)
    validate_mapping(mapping)
    for name, header in mapping.items():
        logger.info("Mapping %s <- %s", name, header or "(unmapped)")
    return apply_mapping(rows, mapping), mapping


def build(args: argparse.Namespace, config: Optional[ConverterConfig] = None) -> str:
    config = config or load_config(args)
    contacts, _ = load_contacts(config)
    log_preview(contacts, config.preview_rows)
    logger.info("Writing %d contacts as vCard %s", len(contacts), config.vcard.version)
    return write_cards(contacts, config.vcard.version)


def main() -> int:
    parser = base_parser("Convert a CSV contact export into a vCard file.")
    parser.add_argument("--version", type=str, choices=VCARD_VERSIONS, default=None)
    parser.add_argument(
        "--map",
        action="append",
        default=None,
        metavar="FIELD=HEADER",
        help="Override the automatic column mapping (repeatable, empty HEADER unmaps).",
    )
    args = parser.parse_args()

    config = load_cli_config(args)
    if config is None:
        return 1
    configure_logging(config, level_override=args.log_level)
    try:
        content = build(args, config=config)
    except ConversionError as exc:
        logger.error("%s", exc)
        return 1

    write_output(config.outputs.dir / converted_filename(config.input_path, "vcf"), content)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
