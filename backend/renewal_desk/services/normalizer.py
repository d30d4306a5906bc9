"""Record normalizer: maps one raw spreadsheet row to a canonical customer+policy record.

Header names arrive in whatever shape the agency's spreadsheet used
("Customer Name", "customer_name", "CustomerName" ...). They are collapsed to a
lower-case key without whitespace or underscores and looked up in FIELD_ALIASES.

Phone and date values are cleaned by small named rules applied in order, so each
heuristic can be tested on its own:

    PHONE_RULES: expand_scientific_notation -> strip_non_digits
                 -> prefix_default_country_code -> ensure_plus_prefix
    DATE_RULES:  day_first | year_first (first match wins, otherwise unchanged)

Known unresolved cases, kept as-is on purpose: two-digit years and MM-DD-YYYY
dates are not disambiguated, and phone numbers that are not exactly 10 digits
get no country code.
"""
import random
import re
import string
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel

from renewal_desk.core.config import settings

# Canonical field -> accepted normalized header names, highest priority first
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name": ("name", "customername", "customer"),
    "phone": ("phone", "phonenumber", "mobile", "contact"),
    "email": ("email", "emailaddress"),
    "policy_number": ("policynumber", "policyid", "id"),
    "policy_type": ("policytype", "type"),
    "expiry_date": ("expirydate", "expiry", "duedate"),
}

REQUIRED_FIELDS = ("name", "phone", "expiry_date")

DEFAULT_POLICY_TYPE = "General"
AUTO_POLICY_PREFIX = "AUTO-"
AUTO_POLICY_ALPHABET = string.digits + string.ascii_uppercase

_KEY_STRIP_RE = re.compile(r"[\s_]")
_NON_DIGIT_RE = re.compile(r"\D")
_DATE_SPLIT_RE = re.compile(r"[-/]")

MAX_PHONE_EXPONENT = 20


class CanonicalRecord(BaseModel):
    name: str
    phone: str
    email: str = ""
    policy_number: str
    policy_type: str = DEFAULT_POLICY_TYPE
    expiry_date: str


# ── Keys ────────────────────────────────────────────────────────────

def normalize_key(key) -> str:
    """'Customer Name' / 'customer_name' / 'CustomerName' -> 'customername'."""
    return _KEY_STRIP_RE.sub("", str(key).lower())


def normalize_keys(raw: Mapping) -> Dict[str, str]:
    normalized = {}
    for key, value in raw.items():
        if value is None:
            value = ""
        normalized[normalize_key(key)] = str(value).strip()
    return normalized


def resolve_field(normalized: Mapping[str, str], field: str) -> str:
    """First non-empty value among the field's aliases, or ''."""
    for alias in FIELD_ALIASES[field]:
        value = normalized.get(alias)
        if value:
            return value
    return ""


# ── Phone rules ─────────────────────────────────────────────────────

def expand_scientific_notation(phone: str) -> str:
    """'9.19877E+11' (spreadsheet-exported number) -> '919877000000'."""
    if "E+" not in phone.upper():
        return phone
    try:
        value = Decimal(phone.strip())
    except InvalidOperation:
        return phone
    # Longer than any phone number; left for digit stripping instead of expanding
    if not value.is_finite() or value.adjusted() > MAX_PHONE_EXPONENT:
        return phone
    return str(int(value))


def strip_non_digits(phone: str) -> str:
    return _NON_DIGIT_RE.sub("", phone)


def prefix_default_country_code(phone: str) -> str:
    if len(phone) == 10:
        return settings.DEFAULT_COUNTRY_CODE + phone
    return phone


def ensure_plus_prefix(phone: str) -> str:
    if not phone.startswith("+"):
        return "+" + phone
    return phone


PHONE_RULES: List[Tuple[str, Callable[[str], str]]] = [
    ("expand_scientific_notation", expand_scientific_notation),
    ("strip_non_digits", strip_non_digits),
    ("prefix_default_country_code", prefix_default_country_code),
    ("ensure_plus_prefix", ensure_plus_prefix),
]


def normalize_phone(phone) -> str:
    value = str(phone)
    for _name, rule in PHONE_RULES:
        value = rule(value)
    return value


# ── Date rules ──────────────────────────────────────────────────────
# Each rule takes the split parts and returns the ISO date, or None when its
# shape does not apply.

def day_first(parts: List[str]) -> Optional[str]:
    """DD-MM-YYYY or DD/MM/YYYY -> YYYY-MM-DD."""
    if len(parts[0]) == 2 and len(parts[2]) == 4:
        return f"{parts[2]}-{parts[1]}-{parts[0]}"
    return None


def year_first(parts: List[str]) -> Optional[str]:
    """YYYY-MM-DD or YYYY/MM/DD -> YYYY-MM-DD."""
    if len(parts[0]) == 4:
        return f"{parts[0]}-{parts[1]}-{parts[2]}"
    return None


DATE_RULES: List[Tuple[str, Callable[[List[str]], Optional[str]]]] = [
    ("day_first", day_first),
    ("year_first", year_first),
]


def normalize_date(value: str) -> str:
    if "-" not in value and "/" not in value:
        return value
    parts = _DATE_SPLIT_RE.split(value)
    if len(parts) < 3:
        return value
    for _name, rule in DATE_RULES:
        result = rule(parts)
        if result is not None:
            return result
    return value


# ── Policy number ───────────────────────────────────────────────────

def generate_policy_number() -> str:
    """AUTO- plus 9 random base-36 characters. Collisions are left to the unique index."""
    return AUTO_POLICY_PREFIX + "".join(random.choices(AUTO_POLICY_ALPHABET, k=9))


# ── Row ─────────────────────────────────────────────────────────────

def normalize_record(raw: Mapping) -> Optional[CanonicalRecord]:
    """Map one raw row to a CanonicalRecord, or None when a required field is missing."""
    normalized = normalize_keys(raw)
    fields = {field: resolve_field(normalized, field) for field in FIELD_ALIASES}

    if any(not fields[field] for field in REQUIRED_FIELDS):
        return None

    return CanonicalRecord(
        name=fields["name"],
        phone=normalize_phone(fields["phone"]),
        email=fields["email"],
        policy_number=fields["policy_number"] or generate_policy_number(),
        policy_type=fields["policy_type"] or DEFAULT_POLICY_TYPE,
        expiry_date=normalize_date(fields["expiry_date"]),
    )
