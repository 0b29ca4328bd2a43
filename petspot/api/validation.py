"""
Request validation for the announcement endpoints.

Fail-fast: the first problem found is raised as a ValidationError naming the
offending field. Order of checks: unknown fields, missing required values,
value formats, then the at-least-one-contact rule.
"""

import math
from typing import Optional, Tuple

from petspot.api.errors import ValidationError
from petspot.api.schemas import CreateAnnouncementBody
from petspot.core.validators import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    is_digits_only,
    is_valid_email,
    is_valid_last_seen_date,
    is_valid_phone,
    is_valid_sex,
    is_valid_species,
)
from petspot.settings import settings
from petspot.store.models import AnnouncementStatus
from petspot.utils.time import parse_date

MISSING_VALUE = "MISSING_VALUE"
INVALID_FORMAT = "INVALID_FORMAT"
INVALID_FIELD = "INVALID_FIELD"
MISSING_CONTACT = "MISSING_CONTACT"

REQUIRED_FIELDS = ("species", "sex", "lastSeenDate", "status", "locationLatitude", "locationLongitude")
OPTIONAL_TEXT_FIELDS = ("petName", "breed", "description", "reward")
OPTIONAL_FIELDS = OPTIONAL_TEXT_FIELDS + ("age", "microchipNumber", "email", "phone")
ALLOWED_FIELDS = set(REQUIRED_FIELDS) | set(OPTIONAL_FIELDS)


def _invalid(field: str, message: str) -> ValidationError:
    return ValidationError(INVALID_FORMAT, message, field)


def _is_blank(v) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def _check_string(body: dict, field: str) -> None:
    if not isinstance(body[field], str):
        raise _invalid(field, f"{field} must be a string")


def validate_create_announcement(body) -> CreateAnnouncementBody:
    if not isinstance(body, dict):
        raise ValidationError(INVALID_FORMAT, "request body must be a JSON object")

    for key in body:
        if key not in ALLOWED_FIELDS:
            raise ValidationError(INVALID_FIELD, f"{key} is not a valid field", key)

    for field in REQUIRED_FIELDS:
        if _is_blank(body.get(field)):
            raise ValidationError(MISSING_VALUE, f"{field} cannot be empty", field)

    for field in ("species", "sex", "lastSeenDate", "status"):
        _check_string(body, field)
    if not is_valid_species(body["species"]):
        raise _invalid("species", "species is not a supported value")
    if not is_valid_sex(body["sex"]):
        raise _invalid("sex", "sex must be one of MALE, FEMALE, UNKNOWN")
    if body["status"] not in {s.value for s in AnnouncementStatus}:
        raise _invalid("status", "status must be MISSING or FOUND")
    if parse_date(body["lastSeenDate"]) is None:
        raise _invalid("lastSeenDate", "lastSeenDate must be in YYYY-MM-DD format")
    if not is_valid_last_seen_date(body["lastSeenDate"]):
        raise _invalid("lastSeenDate", "lastSeenDate cannot be a future date")

    lat, lng = body["locationLatitude"], body["locationLongitude"]
    if not _is_number(lat) or not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
        raise _invalid("locationLatitude", "locationLatitude must be between -90 and 90")
    if not _is_number(lng) or not (MIN_LONGITUDE <= lng <= MAX_LONGITUDE):
        raise _invalid("locationLongitude", "locationLongitude must be between -180 and 180")

    clean = {f: body[f] for f in REQUIRED_FIELDS}
    for field in OPTIONAL_FIELDS:
        if _is_blank(body.get(field)):
            continue
        value = body[field]
        if field == "age":
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise _invalid("age", "age must be a positive integer")
        else:
            _check_string(body, field)
            value = value.strip()
            if field == "microchipNumber" and not is_digits_only(value):
                raise _invalid(field, "microchipNumber must contain digits only")
            if field == "email" and not is_valid_email(value):
                raise _invalid(field, "email is not a valid email address")
            if field == "phone" and not is_valid_phone(value):
                raise _invalid(field, "phone is not a valid phone number")
        clean[field] = value

    if "email" not in clean and "phone" not in clean:
        raise ValidationError(MISSING_CONTACT, "at least one contact method (email or phone) is required", "contact")

    return CreateAnnouncementBody(**clean)


def validate_location_filter(lat: Optional[str], lng: Optional[str], range_km: Optional[str]) -> Optional[Tuple[float, float, int]]:
    """
    Query-string location filter for listing. Returns (lat, lng, range_km) or
    None when no coordinates were given.
    """
    if lat is None and lng is None:
        if range_km is not None:
            raise ValidationError(MISSING_VALUE, "lat and lng are required when range is provided", "lat")
        return None
    if lat is None:
        raise ValidationError(MISSING_VALUE, "lat is required when lng is provided", "lat")
    if lng is None:
        raise ValidationError(MISSING_VALUE, "lng is required when lat is provided", "lng")

    try:
        lat_v = float(lat)
    except ValueError:
        raise _invalid("lat", "lat must be a number")
    try:
        lng_v = float(lng)
    except ValueError:
        raise _invalid("lng", "lng must be a number")
    if not math.isfinite(lat_v) or not (MIN_LATITUDE <= lat_v <= MAX_LATITUDE):
        raise _invalid("lat", "lat must be between -90 and 90")
    if not math.isfinite(lng_v) or not (MIN_LONGITUDE <= lng_v <= MAX_LONGITUDE):
        raise _invalid("lng", "lng must be between -180 and 180")

    if range_km is None:
        return lat_v, lng_v, settings.DEFAULT_RANGE_KM
    if not is_digits_only(range_km) or int(range_km) <= 0:
        raise _invalid("range", "range must be a positive integer")
    return lat_v, lng_v, int(range_km)
