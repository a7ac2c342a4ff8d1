from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Tuple

from .models import DEFAULT_VCARD_VERSION, Contact, validate_version

logger = logging.getLogger(__name__)

CARD_SPLIT = re.compile(r"BEGIN:VCARD", re.IGNORECASE)
LINE_SPLIT = re.compile(r"\r\n|\n")
ESCAPE_SEQUENCE = re.compile(r"\\(.)", re.DOTALL)
UNESCAPES = {"n": "\n", "N": "\n", "\\": "\\", ";": ";", ",": ","}


def escape_value(value: str) -> str:
    if not value:
        return ""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def unescape_value(value: str) -> str:
    if not value:
        return ""
    return ESCAPE_SEQUENCE.sub(lambda match: UNESCAPES.get(match.group(1), match.group(0)), value)


def _unescaped_positions(value: str, separator: str) -> List[int]:
    positions: List[int] = []
    escaped = False
    for index, char in enumerate(value):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == separator:
            positions.append(index)
    return positions


def split_components(value: str) -> List[str]:
    """Split a structured value on unescaped semicolons and unescape each part."""
    parts: List[str] = []
    start = 0
    for position in _unescaped_positions(value, ";"):
        parts.append(value[start:position])
        start = position + 1
    parts.append(value[start:])
    return [unescape_value(part) for part in parts]


def unfold_lines(block: str) -> List[str]:
    unfolded: List[str] = []
    for line in LINE_SPLIT.split(block):
        if line.startswith(" ") and unfolded:
            unfolded[-1] += line[1:]
        else:
            unfolded.append(line)
    return unfolded


def split_property(line: str) -> Tuple[str, List[str], str] | None:
    """Return (NAME, params, raw value) for a content line, or None without a colon."""
    colons = _unescaped_positions(line, ":")
    if not colons:
        return None
    key_part, raw_value = line[: colons[0]], line[colons[0] + 1 :]
    name, *params = key_part.split(";")
    name = name.strip().upper()
    if "." in name:
        # grouped properties such as "item1.EMAIL"
        name = name.rsplit(".", 1)[1]
    return name, params, raw_value.strip()


@dataclass
class _CardBuilder:
    values: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str:
        return self.values.get(name, "")

    def set(self, name: str, value: str) -> None:
        self.values[name] = value

    def build(self, contact_id: str) -> Contact:
        return Contact.from_mapping({**self.values, "contact_id": contact_id})


def _component(parts: List[str], index: int) -> str:
    return parts[index] if index < len(parts) else ""


def _handle_n(card: _CardBuilder, raw: str, params: List[str]) -> None:
    parts = split_components(raw)
    card.set("last_name", _component(parts, 0))
    card.set("first_name", _component(parts, 1))


def _handle_fn(card: _CardBuilder, raw: str, params: List[str]) -> None:
    if card.get("first_name") or card.get("last_name"):
        return
    first, *rest = unescape_value(raw).split(" ")
    card.set("first_name", first)
    card.set("last_name", " ".join(rest))


def _handle_org(card: _CardBuilder, raw: str, params: List[str]) -> None:
    card.set("organization", split_components(raw)[0])


def _handle_tel(card: _CardBuilder, raw: str, params: List[str]) -> None:
    value = unescape_value(raw)
    upper_params = [param.upper() for param in params]
    if any("CELL" in param for param in upper_params) or not card.get("mobile_phone"):
        card.set("mobile_phone", value)
    elif any("WORK" in param for param in upper_params):
        card.set("work_phone", value)
    else:
        logger.debug("Dropping extra TEL value %s", value)


def _handle_adr(card: _CardBuilder, raw: str, params: List[str]) -> None:
    card.set("address", ", ".join(part for part in split_components(raw) if part))


def _text_handler(target: str) -> Callable[[_CardBuilder, str, List[str]], None]:
    def handler(card: _CardBuilder, raw: str, params: List[str]) -> None:
        card.set(target, unescape_value(raw))

    return handler


PROPERTY_HANDLERS: Dict[str, Callable[[_CardBuilder, str, List[str]], None]] = {
    "N": _handle_n,
    "FN": _handle_fn,
    "ORG": _handle_org,
    "TITLE": _text_handler("job_title"),
    "TEL": _handle_tel,
    "EMAIL": _text_handler("email"),
    "URL": _text_handler("website"),
    "ADR": _handle_adr,
    "NOTE": _text_handler("note"),
}


def parse_cards(text: str) -> List[Contact]:
    """
    Parse every BEGIN:VCARD block in ``text`` into a Contact.

    END:VCARD is not required, unknown properties are ignored and lines
    without a colon are skipped.
    """
    blocks = CARD_SPLIT.split(text or "")[1:]
    contacts: List[Contact] = []
    for idx, block in enumerate(blocks):
        if not block.strip():
            continue
        card = _CardBuilder()
        for line in unfold_lines(block):
            parsed = split_property(line)
            if parsed is None:
                continue
            name, params, raw_value = parsed
            handler = PROPERTY_HANDLERS.get(name)
            if handler is not None:
                handler(card, raw_value, params)
        contacts.append(card.build(f"vcf-{idx}"))
    logger.debug("Parsed %d vCards", len(contacts))
    return contacts


# (line prefix, contact attribute, escape value)
_OPTIONAL_LINES: List[Tuple[str, str, bool]] = [
    ("ORG:{}", "organization", True),
    ("TITLE:{}", "job_title", True),
    ("TEL;TYPE=CELL:{}", "mobile_phone", False),
    ("TEL;TYPE=WORK:{}", "work_phone", False),
    ("EMAIL;TYPE=INTERNET:{}", "email", False),
    ("URL:{}", "website", False),
    ("ADR;TYPE=HOME:;;{};;;;", "address", True),
    ("NOTE:{}", "note", True),
]


def write_card(contact: Contact, version: str = DEFAULT_VCARD_VERSION) -> str:
    version = validate_version(version)
    lines = [
        "BEGIN:VCARD",
        f"VERSION:{version}",
        f"N:{escape_value(contact.last_name)};{escape_value(contact.first_name)};;;",
        f"FN:{f'{contact.first_name} {contact.last_name}'.strip()}",
    ]
    for template, attribute, escaped in _OPTIONAL_LINES:
        value = getattr(contact, attribute)
        if value:
            lines.append(template.format(escape_value(value) if escaped else value))
    lines.append("END:VCARD")
    return "\n".join(lines) + "\n"


def write_cards(contacts: Iterable[Contact], version: str = DEFAULT_VCARD_VERSION) -> str:
    return "\n".join(write_card(contact, version) for contact in contacts)


__all__ = [
    "PROPERTY_HANDLERS",
    "escape_value",
    "parse_cards",
    "split_components",
    "unescape_value",
    "unfold_lines",
    "write_card",
    "write_cards",
]
