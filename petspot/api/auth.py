import base64
import binascii
import hashlib
import hmac
import secrets
from typing import Optional, Tuple

from fastapi import Header, HTTPException

from petspot.api.errors import NotFoundError, UnauthenticatedError, UnauthorizedError
from petspot.settings import settings
from petspot.store.announcement_repo import load_announcement

PBKDF2_ALGORITHM = "sha256"
PBKDF2_ITERATIONS = 120_000
MANAGEMENT_PASSWORD_DIGITS = 6


def require_api_key(x_api_key: str = Header(default="", alias="x-api-key")):
    """
    API key is optional.
    - If API_KEY env is empty: allow all requests.
    - If API_KEY env is set: require matching x-api-key header.
    """
    if not getattr(settings, "API_KEY", ""):
        return
    if x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")


# ------------------------------------------------------------
# Management passwords
# ------------------------------------------------------------

def generate_management_password() -> str:
    return str(secrets.randbelow(10 ** MANAGEMENT_PASSWORD_DIGITS)).zfill(MANAGEMENT_PASSWORD_DIGITS)


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    salt = salt or secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac(PBKDF2_ALGORITHM, password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"pbkdf2_{PBKDF2_ALGORITHM}${PBKDF2_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, iterations, salt_hex, digest_hex = stored.split("$")
        algorithm = scheme.split("_", 1)[1]
        digest = hashlib.pbkdf2_hmac(algorithm, password.encode("utf-8"), bytes.fromhex(salt_hex), int(iterations))
    except (ValueError, IndexError):
        return False
    return hmac.compare_digest(digest.hex(), digest_hex)


# ------------------------------------------------------------
# Basic auth for announcement management
# ------------------------------------------------------------

def parse_basic_auth(authorization: Optional[str]) -> Optional[Tuple[str, str]]:
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "basic" or not value:
        return None
    try:
        decoded = base64.b64decode(value.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


def authorize_announcement(announcement_id: str, authorization: Optional[str]) -> dict:
    """
    Check `id:managementPassword` Basic credentials against the stored hash.
    Returns the stored record on success.
    """
    if not authorization:
        raise UnauthenticatedError()
    creds = parse_basic_auth(authorization)
    if creds is None:
        raise UnauthenticatedError("Authorization header must use Basic credentials")

    username, password = creds
    if username != announcement_id:
        raise UnauthorizedError()
    record = load_announcement(announcement_id)
    if record is None:
        raise NotFoundError("Announcement not found")
    if not verify_password(password, record.get("managementPasswordHash") or ""):
        raise UnauthorizedError()
    return record
