import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    API_KEY: str = os.getenv("API_KEY", "")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Client side: where the announcement service lives
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:3000")
    HTTP_TIMEOUT_SEC: float = float(os.getenv("HTTP_TIMEOUT_SEC", "10"))
    # Search radius the client sends with location-filtered list requests
    LIST_RANGE_KM: int = int(os.getenv("LIST_RANGE_KM", "15"))

    # Report flow input limits
    MICROCHIP_MAX_DIGITS: int = int(os.getenv("MICROCHIP_MAX_DIGITS", "15"))
    DESCRIPTION_MAX_CHARS: int = int(os.getenv("DESCRIPTION_MAX_CHARS", "500"))
    REWARD_MAX_CHARS: int = int(os.getenv("REWARD_MAX_CHARS", "120"))
    AGE_MAX: int = int(os.getenv("AGE_MAX", "40"))
    COORDINATE_DECIMALS: int = int(os.getenv("COORDINATE_DECIMALS", "5"))

    # Contact step phone rules
    PHONE_MIN_DIGITS: int = int(os.getenv("PHONE_MIN_DIGITS", "7"))
    PHONE_MAX_DIGITS: int = int(os.getenv("PHONE_MAX_DIGITS", "11"))
    PHONE_MAX_DIGITS_ENFORCED: bool = os.getenv("PHONE_MAX_DIGITS_ENFORCED", "true").lower() == "true"

    # Server side storage
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    ANNOUNCEMENT_KEY_PREFIX: str = os.getenv("ANNOUNCEMENT_KEY_PREFIX", "announcement:")
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "public/images")
    PHOTO_MAX_BYTES: int = int(os.getenv("PHOTO_MAX_BYTES", str(20 * 1024 * 1024)))
    DEFAULT_RANGE_KM: int = int(os.getenv("DEFAULT_RANGE_KM", "5"))

    # Privacy
    ENABLE_PII_REDACTION: bool = os.getenv("ENABLE_PII_REDACTION", "true").lower() == "true"

settings = Settings()
