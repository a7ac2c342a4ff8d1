from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

VCARD_VERSIONS = ("2.1", "3.0", "4.0")
DEFAULT_VCARD_VERSION = "3.0"

CHUNK_BY_COUNT = "count"
CHUNK_BY_FILES = "files"

UNKNOWN_FIRST_NAME = "Unknown"

# field name -> target value; None means the field is not mapped
FieldMapping = Dict[str, Optional[str]]


@dataclass
class Contact:
    contact_id: str = ""
    first_name: str = ""
    last_name: str = ""
    organization: str = ""
    job_title: str = ""
    mobile_phone: str = ""
    work_phone: str = ""
    email: str = ""
    website: str = ""
    address: str = ""
    note: str = ""

    @classmethod
    def from_mapping(cls, payload: Dict[str, Any]) -> "Contact":
        return cls(
            contact_id=str(payload.get("contact_id", "") or ""),
            first_name=str(payload.get("first_name", "") or ""),
            last_name=str(payload.get("last_name", "") or ""),
            organization=str(payload.get("organization", "") or ""),
            job_title=str(payload.get("job_title", "") or ""),
            mobile_phone=str(payload.get("mobile_phone", "") or ""),
            work_phone=str(payload.get("work_phone", "") or ""),
            email=str(payload.get("email", "") or ""),
            website=str(payload.get("website", "") or ""),
            address=str(payload.get("address", "") or ""),
            note=str(payload.get("note", "") or ""),
        )

    def field_values(self) -> List[str]:
        """Values of the catalog fields, in catalog order."""
        return [getattr(self, item.name) for item in SUPPORTED_FIELDS]

    def replace(self, **changes: Any) -> "Contact":
        return replace(self, **changes)


@dataclass(frozen=True)
class MappingField:
    name: str
    label: str
    required: bool
    description: str

    @property
    def match_key(self) -> str:
        # "first_name" -> "firstname", so "FirstName" style headers still match
        return self.name.replace("_", "").lower()


SUPPORTED_FIELDS: List[MappingField] = [
    MappingField("first_name", "First Name", True, "Given Name"),
    MappingField("last_name", "Last Name", False, "Family Name"),
    MappingField("organization", "Organization", False, "Company"),
    MappingField("job_title", "Job Title", False, "Role / Position"),
    MappingField("mobile_phone", "Mobile Phone", False, "Cell"),
    MappingField("work_phone", "Work Phone", False, "Office"),
    MappingField("email", "Email", False, "Email Address"),
    MappingField("website", "Website", False, "URL"),
    MappingField("address", "Address", False, "Full Address"),
    MappingField("note", "Notes", False, "Remarks"),
]

FIELD_NAMES = [item.name for item in SUPPORTED_FIELDS]


@dataclass(frozen=True)
class ChunkPolicy:
    by: str = CHUNK_BY_COUNT
    value: int = 100

    def __post_init__(self) -> None:
        if self.by not in (CHUNK_BY_COUNT, CHUNK_BY_FILES):
            raise ValueError(f"Unsupported chunk policy: {self.by!r}")

    @classmethod
    def from_mapping(cls, payload: Dict[str, Any]) -> "ChunkPolicy":
        return cls(
            by=str(payload.get("by", CHUNK_BY_COUNT) or CHUNK_BY_COUNT).strip().lower(),
            value=int(payload.get("value", 100)),
        )


def validate_version(version: str) -> str:
    candidate = str(version or "").strip()
    if candidate not in VCARD_VERSIONS:
        raise ValueError(
            f"Unsupported vCard version {version!r}; expected one of {', '.join(VCARD_VERSIONS)}"
        )
    return candidate
