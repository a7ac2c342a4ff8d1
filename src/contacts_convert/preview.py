from __future__ import annotations

import logging
from typing import Optional, Sequence

import pandas as pd

from .models import DEFAULT_VCARD_VERSION, SUPPORTED_FIELDS, Contact
from .vcard import write_card

logger = logging.getLogger(__name__)


def contacts_frame(contacts: Sequence[Contact], limit: Optional[int] = None) -> pd.DataFrame:
    """One row per contact, columns labelled like the exported CSV header."""
    selected = contacts if limit is None else contacts[: max(0, limit)]
    columns = [item.label for item in SUPPORTED_FIELDS]
    frame = pd.DataFrame(
        [contact.field_values() for contact in selected],
        columns=columns,
        dtype=str,
    )
    frame.index = pd.Index([contact.contact_id for contact in selected], name="id")
    return frame


def card_preview(
    contacts: Sequence[Contact], position: int = 0, version: str = DEFAULT_VCARD_VERSION
) -> str:
    if not contacts:
        return ""
    position = min(max(0, position), len(contacts) - 1)
    return write_card(contacts[position], version)


def log_preview(contacts: Sequence[Contact], limit: int) -> None:
    if limit <= 0 or not contacts:
        return
    frame = contacts_frame(contacts, limit=limit)
    logger.info("Preview of %d of %d contacts:\n%s", len(frame), len(contacts), frame.to_string())


__all__ = ["card_preview", "contacts_frame", "log_preview"]
