# api/services/field_mapper.py

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

logger = logging.getLogger(__name__)


def _default_field_aliases_path() -> str:
    """Path to the optional field_aliases.json under app data (data/)."""
    try:
        from config import AppConfig
        return getattr(AppConfig, "FIELD_ALIASES_PATH", "data/field_aliases.json")
    except ImportError:
        return "data/field_aliases.json"


# Known form field names per canonical contact field, highest priority first
DEFAULT_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "full_name": ("full_name", "name", "Name", "fullName"),
    "first_name": ("firstName", "first_name", "FirstName", "First"),
    "last_name": ("lastName", "last_name", "LastName", "Last"),
    "email": ("email", "Email", "eMail"),
    "phone": ("phone", "Phone", "phoneNumber", "PhoneNumber"),
}

# Keys written into the outbound payload
CANONICAL_OUTPUT_KEYS = ("name", "full_name", "firstName", "lastName", "email", "phone")


class CanonicalContact(BaseModel):
    full_name: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""

    def to_outbound_fields(self) -> Dict[str, str]:
        """Canonical keys as the downstream flow expects them"""
        return {
            "name": self.full_name,
            "full_name": self.full_name,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
        }


def _is_present(value: Any) -> bool:
    return value is not None and _as_text(value).strip() != ""


def _as_text(value: Any) -> str:
    """Form-value text: lists join with ",", integral floats drop ".0", empty containers are blank"""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(_as_text(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value) if value else ""
    return str(value)


def pick(payload: Dict[str, Any], *keys: str) -> Any:
    """
    Return the first value among keys that is present and not blank.

    Values are returned as found (no stripping); "" when nothing matches.
    """
    if not isinstance(payload, dict):
        return ""
    for key in keys:
        value = payload.get(key)
        if _is_present(value):
            return value
    return ""


def split_full_name(full_name: str) -> Tuple[str, str]:
    """'Jane  van Doe' -> ('Jane', 'van Doe'); single tokens have an empty last name"""
    parts = full_name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


class ContactFieldMapper:
    """
    Derives canonical contact fields from an open form payload.

    Each canonical field is looked up through an ordered list of alias keys.
    Built-in aliases can be extended (never reordered) from a JSON file of the
    form {"email": ["work_email"], "phone": ["mobile"]}.
    """

    def __init__(self, aliases_file: Optional[str] = None):
        self._aliases_file = Path(aliases_file or _default_field_aliases_path())
        self._aliases: Dict[str, List[str]] = {
            field: list(keys) for field, keys in DEFAULT_FIELD_ALIASES.items()
        }
        self.load_aliases()

    def load_aliases(self):
        """Append extra aliases from the JSON file, if there is one"""
        if not self._aliases_file.exists():
            logger.debug(f"No field alias file at {self._aliases_file} - using built-in aliases")
            return

        try:
            with open(self._aliases_file, "r", encoding="utf-8") as f:
                extra = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"❌ Error loading field aliases from {self._aliases_file}: {e}")
            return

        if not isinstance(extra, dict):
            logger.error(f"❌ Field alias file {self._aliases_file} must contain a JSON object")
            return

        added = 0
        for field, keys in extra.items():
            if field not in self._aliases:
                logger.warning(f"⚠️ Unknown canonical field '{field}' in {self._aliases_file} - skipped")
                continue
            if isinstance(keys, str):
                keys = [keys]
            for key in keys:
                if isinstance(key, str) and key and key not in self._aliases[field]:
                    self._aliases[field].append(key)
                    added += 1

        logger.info(f"✅ Loaded {added} extra field aliases from {self._aliases_file}")

    def get_aliases(self, field: str) -> List[str]:
        return list(self._aliases.get(field, []))

    def normalize_contact_fields(self, payload: Dict[str, Any]) -> CanonicalContact:
        """
        Derive the canonical contact from a raw payload.

        First/last name fall back to splitting the full name, then the first
        name falls back to the local part of the email address.
        """
        raw_full_name = _as_text(pick(payload, *self._aliases["full_name"]))
        first_name = _as_text(pick(payload, *self._aliases["first_name"])).strip()
        last_name = _as_text(pick(payload, *self._aliases["last_name"])).strip()
        email = _as_text(pick(payload, *self._aliases["email"]))
        phone = _as_text(pick(payload, *self._aliases["phone"]))

        if (not first_name or not last_name) and raw_full_name:
            split_first, split_last = split_full_name(raw_full_name)
            if not first_name:
                first_name = split_first
            if not last_name:
                last_name = split_last

        if not first_name and email:
            first_name = email.split("@")[0]

        full_name = raw_full_name or f"{first_name} {last_name}".strip()

        return CanonicalContact(
            full_name=full_name,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
        )

    def build_outbound_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Original payload with the canonical contact fields overlaid"""
        contact = self.normalize_contact_fields(payload)
        outbound = dict(payload)
        outbound.update(contact.to_outbound_fields())
        logger.debug(f"🔄 Normalized contact: {contact.model_dump()}")
        return outbound


# Global instance
field_mapper = ContactFieldMapper()
