from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .errors import MissingRequiredFieldError
from .models import (
    FIELD_NAMES,
    SUPPORTED_FIELDS,
    UNKNOWN_FIRST_NAME,
    Contact,
    FieldMapping,
    MappingField,
)

logger = logging.getLogger(__name__)


def auto_map(
    headers: Sequence[str], catalog: Sequence[MappingField] = SUPPORTED_FIELDS
) -> FieldMapping:
    """
    Guess a header for every catalog field.

    A header matches when its lowercased text contains the field name or
    the field label. The first matching header wins; fields are visited in
    catalog order and several fields may land on the same header.
    """
    mapping: FieldMapping = {}
    for item in catalog:
        label = item.label.lower()
        match: Optional[str] = None
        for header in headers:
            lowered = header.lower()
            if item.match_key in lowered or label in lowered:
                match = header
                break
        mapping[item.name] = match
    logger.debug(
        "Auto-mapped %d of %d fields",
        sum(1 for value in mapping.values() if value),
        len(mapping),
    )
    return mapping


def identity_mapping(catalog: Sequence[MappingField] = SUPPORTED_FIELDS) -> FieldMapping:
    """Map every field to its own label, the header row written by write_tabular."""
    return {item.name: item.label for item in catalog}


def apply_overrides(
    mapping: FieldMapping, overrides: Optional[Mapping[str, Optional[str]]]
) -> FieldMapping:
    merged = dict(mapping)
    known = set(FIELD_NAMES)
    for name, header in (overrides or {}).items():
        if name not in known:
            logger.warning("Ignoring mapping override for unknown field: %s", name)
            continue
        merged[name] = header or None
    return merged


def missing_required(
    mapping: FieldMapping, catalog: Sequence[MappingField] = SUPPORTED_FIELDS
) -> List[str]:
    return [item.name for item in catalog if item.required and not mapping.get(item.name)]


def validate_mapping(
    mapping: FieldMapping, catalog: Sequence[MappingField] = SUPPORTED_FIELDS
) -> FieldMapping:
    missing = missing_required(mapping, catalog)
    if missing:
        raise MissingRequiredFieldError(missing)
    return mapping


def apply_mapping(rows: Iterable[Dict[str, str]], mapping: FieldMapping) -> List[Contact]:
    known = set(FIELD_NAMES)
    contacts: List[Contact] = []
    for idx, row in enumerate(rows):
        values: Dict[str, str] = {}
        for name, header in mapping.items():
            if header and name in known:
                values[name] = row.get(header, "") or ""
        if not values.get("first_name") and not values.get("last_name"):
            values["first_name"] = UNKNOWN_FIRST_NAME
        values["contact_id"] = f"c-{idx}"
        contacts.append(Contact.from_mapping(values))
    logger.debug("Mapped %d rows to contacts", len(contacts))
    return contacts


__all__ = [
    "apply_mapping",
    "apply_overrides",
    "auto_map",
    "identity_mapping",
    "missing_required",
    "validate_mapping",
]
