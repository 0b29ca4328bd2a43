"""
Field validators shared by the report flow and the announcement API.

Two flavours live here:
- predicates (`is_valid_*`) that answer yes/no and never raise;
- step-level checks (`*_error`) that return a user-facing message or None.
"""

import math
from datetime import date
from typing import Optional

from petspot.settings import settings
from petspot.store.models import Sex, Species
from petspot.utils.time import is_future, parse_date

EMAIL_MAX_LENGTH = 254
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

MIN_LATITUDE, MAX_LATITUDE = -90.0, 90.0
MIN_LONGITUDE, MAX_LONGITUDE = -180.0, 180.0

MSG_FIELD_REQUIRED = "This field cannot be empty"
MSG_LAST_SEEN_DATE_REQUIRED = "Please select the date of disappearance"
MSG_LAST_SEEN_DATE_FUTURE = "Date cannot be in the future"
MSG_SPECIES_INVALID = "Invalid species selected"
MSG_SEX_INVALID = "Invalid gender selected"
MSG_AGE_NOT_NUMBER = "Age must be a whole number"
MSG_LATITUDE_FORMAT = "Invalid latitude format"
MSG_LONGITUDE_FORMAT = "Invalid longitude format"
MSG_LATITUDE_RANGE = "Latitude must be between -90.0 and 90.0"
MSG_LONGITUDE_RANGE = "Longitude must be between -180.0 and 180.0"
MSG_LATITUDE_MISSING = "Latitude is required when longitude is provided"
MSG_LONGITUDE_MISSING = "Longitude is required when latitude is provided"
MSG_CONTACT_REQUIRED = "Enter a phone number or an email address"
MSG_PHONE_LETTERS = "Phone number cannot contain letters"
MSG_EMAIL_INVALID = "Enter a valid email address"


def extract_digits(value: str) -> str:
    return "".join(ch for ch in (value or "") if ch.isdigit())


def count_digits(value: str) -> int:
    return len(extract_digits(value))


# ------------------------------------------------------------
# Predicates
# ------------------------------------------------------------

def is_valid_email(value: str) -> bool:
    if not isinstance(value, str):
        return False
    s = value.strip()
    if not s or len(s) > EMAIL_MAX_LENGTH:
        return False
    if any(ch.isspace() for ch in s):
        return False
    if s.count("@") != 1:
        return False
    local, domain = s.split("@")
    if not local or not domain:
        return False
    # local@domain.tld: the domain needs a dot with something on both sides
    head, dot, tld = domain.rpartition(".")
    return bool(dot) and bool(head) and bool(tld)


def is_valid_phone(value: str) -> bool:
    """Permissive: any string carrying at least one digit."""
    if not isinstance(value, str):
        return False
    return any(ch.isdigit() for ch in value)


def is_valid_password(value: str) -> bool:
    if not isinstance(value, str):
        return False
    return PASSWORD_MIN_LENGTH <= len(value.strip()) <= PASSWORD_MAX_LENGTH


def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def is_valid_coordinate_pair(lat, lng) -> bool:
    """Both absent, or both finite numbers within latitude/longitude bounds."""
    if lat is None and lng is None:
        return True
    if lat is None or lng is None:
        return False
    if not (_is_number(lat) and _is_number(lng)):
        return False
    return MIN_LATITUDE <= lat <= MAX_LATITUDE and MIN_LONGITUDE <= lng <= MAX_LONGITUDE


def is_valid_last_seen_date(value, reference: Optional[date] = None) -> bool:
    parsed = parse_date(value)
    if parsed is None:
        return False
    return not is_future(parsed, reference)


def is_valid_species(value: str) -> bool:
    return value in {s.value for s in Species}


def is_valid_sex(value: str) -> bool:
    return value in {s.value for s in Sex}


def is_digits_only(value: str) -> bool:
    return isinstance(value, str) and value.isascii() and value.isdigit()


# ------------------------------------------------------------
# Description step
# ------------------------------------------------------------

def species_error(species: str) -> Optional[str]:
    if not (species or "").strip():
        return MSG_FIELD_REQUIRED
    if not is_valid_species(species):
        return MSG_SPECIES_INVALID
    return None


def breed_error(breed: str) -> Optional[str]:
    if not (breed or "").strip():
        return MSG_FIELD_REQUIRED
    return None


def sex_error(sex: Optional[str]) -> Optional[str]:
    if not sex:
        return MSG_FIELD_REQUIRED
    if not is_valid_sex(sex):
        return MSG_SEX_INVALID
    return None


def age_error(age: str) -> Optional[str]:
    if not (age or "").strip():
        return None
    if not is_digits_only(age.strip()):
        return MSG_AGE_NOT_NUMBER
    if int(age) > settings.AGE_MAX:
        return f"Age must be between 0 and {settings.AGE_MAX}"
    return None


def last_seen_date_error(value: Optional[date], reference: Optional[date] = None) -> Optional[str]:
    if value is None:
        return MSG_LAST_SEEN_DATE_REQUIRED
    if is_future(value, reference):
        return MSG_LAST_SEEN_DATE_FUTURE
    return None


def _parse_coordinate(text: str) -> Optional[float]:
    try:
        v = float(text)
    except (TypeError, ValueError):
        return None
    return v if math.isfinite(v) else None


def coordinate_errors(latitude: str, longitude: str) -> tuple:
    """
    Validate the free-text coordinate inputs as a pair.
    Returns (latitude_error, longitude_error); both None when valid or both blank.
    """
    lat_s = (latitude or "").strip()
    lng_s = (longitude or "").strip()
    if not lat_s and not lng_s:
        return None, None

    lat_err = None
    lng_err = None
    if lat_s:
        lat = _parse_coordinate(lat_s)
        if lat is None:
            lat_err = MSG_LATITUDE_FORMAT
        elif not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
            lat_err = MSG_LATITUDE_RANGE
    else:
        lat_err = MSG_LATITUDE_MISSING

    if lng_s:
        lng = _parse_coordinate(lng_s)
        if lng is None:
            lng_err = MSG_LONGITUDE_FORMAT
        elif not (MIN_LONGITUDE <= lng <= MAX_LONGITUDE):
            lng_err = MSG_LONGITUDE_RANGE
    else:
        lng_err = MSG_LONGITUDE_MISSING

    return lat_err, lng_err


# ------------------------------------------------------------
# Contact step
# ------------------------------------------------------------

def phone_error(phone: str) -> Optional[str]:
    """Blank is allowed here; the at-least-one-contact rule is checked separately."""
    s = (phone or "").strip()
    if not s:
        return None
    if any(ch.isalpha() for ch in s):
        return MSG_PHONE_LETTERS
    digits = count_digits(s)
    if digits < settings.PHONE_MIN_DIGITS:
        return f"Enter at least {settings.PHONE_MIN_DIGITS} digits"
    if settings.PHONE_MAX_DIGITS_ENFORCED and digits > settings.PHONE_MAX_DIGITS:
        return f"Enter no more than {settings.PHONE_MAX_DIGITS} digits"
    return None


def email_error(email: str) -> Optional[str]:
    s = (email or "").strip()
    if not s:
        return None
    if not is_valid_email(s):
        return MSG_EMAIL_INVALID
    return None


def contact_errors(phone: str, email: str) -> dict:
    """
    Field-scoped errors for the contact step, keyed by "phone"/"email".
    Both blank is one failure reported on both fields.
    """
    if not (phone or "").strip() and not (email or "").strip():
        return {"phone": MSG_CONTACT_REQUIRED, "email": MSG_CONTACT_REQUIRED}
    errors = {}
    p = phone_error(phone)
    if p:
        errors["phone"] = p
    e = email_error(email)
    if e:
        errors["email"] = e
    return errors
