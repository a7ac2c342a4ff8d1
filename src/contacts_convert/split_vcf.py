from __future__ import annotations

import argparse
import logging
from typing import Optional

from .common import (
    ConversionError,
    base_parser,
    load_cli_config,
    load_config,
    write_output,
)
from .config_loader import ConverterConfig
from .logging_utils import configure_logging
from .models import CHUNK_BY_COUNT, CHUNK_BY_FILES
from .partition import build_archive, chunk_files, chunk_layout
from .preview import log_preview
from .vcf_to_csv import load_cards

logger = logging.getLogger(__name__)


def build(args: argparse.Namespace, config: Optional[ConverterConfig] = None) -> bytes:
    config = config or load_config(args)
    contacts = load_cards(config)
    log_preview(contacts, config.preview_rows)

    policy = config.split.policy
    count, size = chunk_layout(len(contacts), policy)
    logger.info(
        "Splitting %d contacts by %s=%d: up to %d files of up to %d contacts",
        len(contacts),
        policy.by,
        policy.value,
        count,
        size,
    )
    files = chunk_files(contacts, policy)
    return build_archive(files)


def main() -> int:
    parser = base_parser("Split a large vCard file into a ZIP of smaller vCard files.")
    parser.add_argument(
        "--split-by", type=str, choices=[CHUNK_BY_COUNT, CHUNK_BY_FILES], default=None
    )
    parser.add_argument(
        "--split-value",
        type=int,
        default=None,
        help="Max contacts per file (count) or number of files to create (files).",
    )
    parser.add_argument("--archive-name", type=str, default=None)
    args = parser.parse_args()

    config = load_cli_config(args)
    if config is None:
        return 1
    configure_logging(config, level_override=args.log_level)
    try:
        archive = build(args, config=config)
    except ConversionError as exc:
        logger.error("%s", exc)
        return 1

    write_output(config.outputs.dir / config.split.archive_name, archive)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
