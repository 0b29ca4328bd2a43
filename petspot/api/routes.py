from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Header, Query, UploadFile

from petspot.api.auth import authorize_announcement, generate_management_password, hash_password, require_api_key
from petspot.api.errors import ConflictError, NotFoundError, PayloadTooLargeError, ValidationError
from petspot.api.schemas import AnnouncementListOut, AnnouncementOut, CreatedAnnouncementOut
from petspot.api.validation import validate_create_announcement, validate_location_filter
from petspot.observability.logging import log
from petspot.settings import settings
from petspot.store import announcement_repo
from petspot.utils.geo import haversine_km
from petspot.utils.images import detect_image_extension

router = APIRouter(prefix="/api/v1/announcements", dependencies=[Depends(require_api_key)])

INVALID_FILE_FORMAT = "INVALID_FILE_FORMAT"
DUPLICATE_MICROCHIP = "DUPLICATE_MICROCHIP"


@router.post(
    "",
    status_code=201,
    response_model=CreatedAnnouncementOut,
    response_model_exclude_none=True,
)
def create_announcement(payload: Any = Body(None)):
    try:
        body = validate_create_announcement(payload)
    except ValidationError as e:
        log(event="announcement_rejected", code=e.code, field=e.field)
        raise

    password = generate_management_password()
    fields = body.model_dump(exclude_none=True)
    try:
        record = announcement_repo.create_announcement(fields, hash_password(password))
    except announcement_repo.DuplicateMicrochipError as e:
        log(event="announcement_rejected", code=DUPLICATE_MICROCHIP, existingId=e.existing_id)
        raise ConflictError(
            DUPLICATE_MICROCHIP,
            "An announcement with this microchip number already exists",
            "microchipNumber",
        )

    log(event="announcement_created", announcementId=record["id"], species=record["species"])
    out = announcement_repo.to_public(record)
    out["managementPassword"] = password
    return out


@router.get("", response_model=AnnouncementListOut, response_model_exclude_none=True)
def list_announcements(
    lat: Optional[str] = Query(None),
    lng: Optional[str] = Query(None),
    range_km: Optional[str] = Query(None, alias="range"),
):
    location = validate_location_filter(lat, lng, range_km)
    records = announcement_repo.list_announcements()
    if location is not None:
        lat_v, lng_v, radius = location
        records = [
            rec for rec in records
            if haversine_km(lat_v, lng_v, rec["locationLatitude"], rec["locationLongitude"]) <= radius
        ]
    return {"data": [announcement_repo.to_public(rec) for rec in records]}


@router.get("/{announcement_id}", response_model=AnnouncementOut, response_model_exclude_none=True)
def get_announcement(announcement_id: str):
    record = announcement_repo.load_announcement(announcement_id)
    if record is None:
        raise NotFoundError("Announcement not found")
    return announcement_repo.to_public(record)


@router.post("/{announcement_id}/photos", status_code=201)
def upload_photo(
    announcement_id: str,
    photo: UploadFile = File(...),
    authorization: Optional[str] = Header(None),
):
    authorize_announcement(announcement_id, authorization)

    content = photo.file.read(settings.PHOTO_MAX_BYTES + 1)
    if len(content) > settings.PHOTO_MAX_BYTES:
        raise PayloadTooLargeError(f"File exceeds the {settings.PHOTO_MAX_BYTES} byte limit")

    ext = detect_image_extension(content[:16])
    if ext is None:
        raise ValidationError(INVALID_FILE_FORMAT, "File must be a JPEG, PNG, GIF, WEBP, BMP or HEIC image", "photo")

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    filename = f"{announcement_id}.{ext}"
    (upload_dir / filename).write_bytes(content)
    announcement_repo.set_photo_url(announcement_id, f"/images/{filename}")

    log(event="announcement_photo_stored", announcementId=announcement_id, sizeBytes=len(content), ext=ext)
    return {}
