from __future__ import annotations

import argparse
import logging
from typing import List, Optional

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
from .models import Contact
from .preview import log_preview
from .tabular import write_tabular
from .vcard import parse_cards

logger = logging.getLogger(__name__)

EMPTY_VCF_MESSAGE = "Could not parse contacts from this VCard file."


def load_cards(config: ConverterConfig) -> List[Contact]:
    contacts = parse_cards(read_source_text(config.input_path, "VCF"))
    if not contacts:
        raise EmptyResultError(EMPTY_VCF_MESSAGE)
    logger.info("Parsed %d contacts from %s", len(contacts), config.input_path)
    return contacts


def build(args: argparse.Namespace, config: Optional[ConverterConfig] = None) -> str:
    config = config or load_config(args)
    contacts = load_cards(config)
    log_preview(contacts, config.preview_rows)
    return write_tabular(contacts)


def main() -> int:
    parser = base_parser("Convert a vCard file into a CSV contact list.")
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

    write_output(config.outputs.dir / converted_filename(config.input_path, "csv"), content)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
