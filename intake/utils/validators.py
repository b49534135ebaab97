"""
Form field validation: presence, email format, zone count, preferred solution.

Validators return (value_or_ok, error_message). A None error means the input
passed; the returned value is trimmed and normalized for storage.
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

EMAIL_RE = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)

ALL_FIELDS_REQUIRED = "All fields are required"
EMAIL_REQUIRED = "Email is required"
INVALID_EMAIL = "Invalid email address"
INVALID_ZONES = "Number of zones must be at least 1"
INVALID_SOLUTION = "Invalid preferred solution"

# number_of_zones is a postgres INTEGER column
MAX_ZONES = 2**31 - 1

# value submitted by the quotation dropdown -> label shown to staff
PREFERRED_SOLUTIONS = {
    "soundtrack-your-brand": "Soundtrack Your Brand",
    "beat-breeze": "Beat Breeze",
    "not-sure": "Not Sure Yet",
}

INQUIRY_FIELDS = ("name", "company", "email", "message")
QUOTATION_FIELDS = (
    "firstName",
    "lastName",
    "email",
    "country",
    "companyName",
    "companyAddress",
    "preferredSolution",
    "numberOfZones",
)
# fields that may arrive as JSON numbers
NUMERIC_FIELDS = frozenset({"numberOfZones"})


def clean(value: Any) -> str:
    """Trimmed text. Anything that is not a string reads as blank."""
    if not isinstance(value, str):
        return ""
    return value.strip()


def _present(field: str, value: Any) -> bool:
    if field in NUMERIC_FIELDS and isinstance(value, (int, float)) and not isinstance(value, bool):
        return True
    return bool(clean(value))


def missing_fields(data: Mapping[str, Any], fields: Iterable[str]) -> List[str]:
    return [f for f in fields if not _present(f, data.get(f))]


def validate_required(
    data: Mapping[str, Any], fields: Iterable[str]
) -> Tuple[bool, Optional[str]]:
    """
    Every field must be non-empty after trimming. The error never names the
    field that is missing.
    """
    if missing_fields(data, fields):
        return False, ALL_FIELDS_REQUIRED
    return True, None


def validate_email(value: Any) -> Tuple[Optional[str], Optional[str]]:
    """Returns (lower-cased email, None) or (None, error)."""
    email = clean(value)
    if not email:
        return None, EMAIL_REQUIRED
    if not EMAIL_RE.fullmatch(email):
        return None, INVALID_EMAIL
    return email.lower(), None


def validate_zones(value: Any) -> Tuple[Optional[int], Optional[str]]:
    """Zone count must be a whole number that fits the zones column, at least 1."""
    if isinstance(value, bool):
        return None, INVALID_ZONES
    if isinstance(value, float):
        if not value.is_integer():
            return None, INVALID_ZONES
        value = int(value)
    if isinstance(value, int):
        zones = value
    else:
        try:
            zones = int(clean(value))
        except ValueError:
            return None, INVALID_ZONES
    if not 1 <= zones <= MAX_ZONES:
        return None, INVALID_ZONES
    return zones, None


def validate_preferred_solution(value: Any) -> Tuple[Optional[str], Optional[str]]:
    solution = clean(value)
    if solution not in PREFERRED_SOLUTIONS:
        return None, INVALID_SOLUTION
    return solution, None


def validate_inquiry(
    data: Mapping[str, Any],
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    ok, err = validate_required(data, INQUIRY_FIELDS)
    if not ok:
        return None, err
    email, err = validate_email(data.get("email"))
    if err:
        return None, err
    return (
        {
            "name": clean(data.get("name")),
            "company": clean(data.get("company")),
            "email": email,
            "message": clean(data.get("message")),
        },
        None,
    )


def validate_quotation(
    data: Mapping[str, Any],
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    ok, err = validate_required(data, QUOTATION_FIELDS)
    if not ok:
        return None, err
    email, err = validate_email(data.get("email"))
    if err:
        return None, err
    zones, err = validate_zones(data.get("numberOfZones"))
    if err:
        return None, err
    solution, err = validate_preferred_solution(data.get("preferredSolution"))
    if err:
        return None, err
    return (
        {
            "first_name": clean(data.get("firstName")),
            "last_name": clean(data.get("lastName")),
            "email": email,
            "country": clean(data.get("country")),
            "company_name": clean(data.get("companyName")),
            "company_address": clean(data.get("companyAddress")),
            "preferred_solution": solution,
            "number_of_zones": zones,
        },
        None,
    )


def optional_text(value: Any) -> Optional[str]:
    """Trimmed text, or None when blank."""
    return clean(value) or None
