from __future__ import annotations

import io
import logging
import math
import zipfile
from typing import List, Sequence, Tuple

from .errors import SerializationError
from .models import CHUNK_BY_COUNT, ChunkPolicy, Contact
from .vcard import write_cards

logger = logging.getLogger(__name__)

SPLIT_VERSION = "3.0"
DEFAULT_ARCHIVE_NAME = "split_contacts.zip"


def chunk_layout(total: int, policy: ChunkPolicy) -> Tuple[int, int]:
    """Return (chunk count, chunk size) for ``total`` contacts under ``policy``."""
    if policy.by == CHUNK_BY_COUNT:
        size = max(1, policy.value)
        return math.ceil(total / size), size
    count = max(1, policy.value)
    return count, math.ceil(total / count)


def partition(contacts: Sequence[Contact], policy: ChunkPolicy) -> List[List[Contact]]:
    total = len(contacts)
    count, size = chunk_layout(total, policy)
    chunks: List[List[Contact]] = []
    for index in range(count):
        chunk = list(contacts[index * size : min((index + 1) * size, total)])
        if not chunk:
            break
        chunks.append(chunk)
    logger.debug("Partitioned %d contacts into %d chunks", total, len(chunks))
    return chunks


def chunk_filename(index: int) -> str:
    return f"contacts_part_{index + 1}.vcf"


def chunk_files(contacts: Sequence[Contact], policy: ChunkPolicy) -> List[Tuple[str, str]]:
    return [
        (chunk_filename(index), write_cards(chunk, SPLIT_VERSION))
        for index, chunk in enumerate(partition(contacts, policy))
    ]


def build_archive(files: Sequence[Tuple[str, str]]) -> bytes:
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for name, text in files:
                archive.writestr(name, text.encode("utf-8"))
    except (OSError, ValueError) as exc:
        raise SerializationError(f"Error generating zip file: {exc}") from exc
    return buffer.getvalue()


__all__ = [
    "DEFAULT_ARCHIVE_NAME",
    "build_archive",
    "chunk_files",
    "chunk_filename",
    "chunk_layout",
    "partition",
]
