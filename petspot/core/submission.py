"""
Two-phase submission of a finished report: create the announcement, then
upload its photo. The photo upload only runs after a successful create;
a failed upload leaves the created id and management password in place.
"""

from typing import Optional, Protocol

from petspot.core.errors import SubmissionError
from petspot.observability.logging import log
from petspot.store.models import AnnouncementResult, AnnouncementStatus, FlowData, PhotoAttachment, Sex
from petspot.utils.time import format_date

PHASE_CREATE = "create"
PHASE_UPLOAD = "upload"


class AnnouncementService(Protocol):
    async def create_announcement(self, payload: dict) -> AnnouncementResult: ...

    async def upload_photo(self, announcement_id: str, photo: PhotoAttachment, management_password: str) -> None: ...


def normalize_phone(phone: str) -> str:
    """Digits only, keeping a leading '+'."""
    s = (phone or "").strip()
    digits = "".join(ch for ch in s if ch.isdigit())
    if not digits:
        return ""
    return ("+" + digits) if s.startswith("+") else digits


def build_create_payload(data: FlowData) -> dict:
    """
    Map a flow snapshot to the create-announcement body.
    Optional fields with no value are left out entirely, never sent as null or "".
    """
    payload = {
        "species": (data.species or "").upper(),
        "sex": (data.sex or Sex.UNKNOWN.value).upper(),
        "lastSeenDate": format_date(data.lastSeenDate),
        "status": AnnouncementStatus.MISSING.value,
        "locationLatitude": data.latitude if data.latitude is not None else 0.0,
        "locationLongitude": data.longitude if data.longitude is not None else 0.0,
    }

    optional = {
        "microchipNumber": data.microchipNumber,
        "petName": (data.petName or "").strip(),
        "breed": (data.breed or "").strip(),
        "description": (data.description or "").strip(),
        "email": (data.email or "").strip(),
        "phone": normalize_phone(data.phone),
        "reward": (data.reward or "").strip(),
    }
    for key, value in optional.items():
        if value:
            payload[key] = value
    if data.age is not None:
        payload["age"] = data.age
    return payload


class SubmissionPipeline:
    """
    Holds the outcome of the latest submission attempt for one flow.

    At most one attempt runs at a time: `is_submitting` is raised before the
    first suspension point, and a call made while it is up returns None
    without touching the service.
    """

    def __init__(self, service: AnnouncementService, flow_id: str = ""):
        self.service = service
        self.flow_id = flow_id
        self.is_submitting = False
        self.announcement_id: Optional[str] = None
        self.management_password: Optional[str] = None
        self.error: Optional[SubmissionError] = None
        self.error_phase: Optional[str] = None

    @property
    def is_partial_success(self) -> bool:
        return self.error_phase == PHASE_UPLOAD and self.announcement_id is not None

    def reset(self) -> None:
        self.announcement_id = None
        self.management_password = None
        self.error = None
        self.error_phase = None

    def _fail(self, phase: str, err: SubmissionError) -> None:
        self.error = err
        self.error_phase = phase
        log(
            event="submission_failed",
            flowId=self.flow_id,
            phase=phase,
            errorType=err.type,
            statusCode=err.statusCode,
            announcementId=self.announcement_id,
        )

    async def submit(self, data: FlowData) -> Optional[AnnouncementResult]:
        """
        Run create then upload. Returns the created result (also on a failed
        upload) or None when creation failed or another attempt is in flight.
        """
        if self.is_submitting:
            log(event="submission_ignored", flowId=self.flow_id, reason="in_flight")
            return None

        self.is_submitting = True
        self.reset()
        try:
            payload = build_create_payload(data)
            log(event="submission_started", flowId=self.flow_id, hasPhoto=data.photo is not None,
                fields=sorted(payload))
            try:
                result = await self.service.create_announcement(payload)
            except SubmissionError as e:
                self._fail(PHASE_CREATE, e)
                return None

            self.announcement_id = result.id
            self.management_password = result.managementPassword
            log(event="announcement_created", flowId=self.flow_id, announcementId=result.id)

            if data.photo is not None:
                try:
                    await self.service.upload_photo(result.id, data.photo, result.managementPassword)
                except SubmissionError as e:
                    self._fail(PHASE_UPLOAD, e)
                    return result
                log(event="photo_uploaded", flowId=self.flow_id, announcementId=result.id)
            return result
        finally:
            self.is_submitting = False
