"""
HTTP client for the announcement service.

Every failure is raised as a SubmissionError so the flow only ever deals
with the closed error taxonomy:
- no response at all (connect/read errors, timeouts) -> network
- 400 -> validation, 409 -> duplicate-microchip, >= 500 -> server
- any other 4xx -> validation carrying the status code
- a 2xx create reply that cannot be parsed -> server
"""

from pathlib import Path
from typing import List, Optional

import httpx

from petspot.core.errors import SubmissionError
from petspot.observability.logging import log
from petspot.settings import settings
from petspot.store.models import Announcement, AnnouncementResult, PhotoAttachment

ANNOUNCEMENTS_PATH = "/api/v1/announcements"

MSG_PHOTO_UNREADABLE = "The selected photo could not be read. Please pick it again."


def _server_message(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if body.get("message"):
            return str(body["message"])
    return None


def classify_response(resp: httpx.Response) -> SubmissionError:
    status = resp.status_code
    if status == 409:
        return SubmissionError.duplicate_microchip()
    if status >= 500:
        return SubmissionError.server(status)
    return SubmissionError.validation(_server_message(resp), status)


class AnnouncementClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.API_BASE_URL).rstrip("/"),
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT_SEC,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AnnouncementClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            log(event="announcement_api_unreachable", method=method, url=url,
                errorType=type(e).__name__, error=str(e)[:200])
            raise SubmissionError.network() from e

    def _raise_for(self, resp: httpx.Response, operation: str) -> None:
        err = classify_response(resp)
        log(event="announcement_api_error", operation=operation, statusCode=resp.status_code,
            errorType=err.type, responseText=(resp.text or "")[:500])
        raise err

    # ------------------------------------------------------------
    # Create + photo
    # ------------------------------------------------------------

    async def create_announcement(self, payload: dict) -> AnnouncementResult:
        resp = await self._send("POST", ANNOUNCEMENTS_PATH, json=payload)
        if resp.status_code not in (200, 201):
            self._raise_for(resp, "create")
        try:
            body = resp.json()
            return AnnouncementResult(id=str(body["id"]), managementPassword=str(body["managementPassword"]))
        except (ValueError, KeyError, TypeError) as e:
            log(event="announcement_api_bad_body", operation="create", statusCode=resp.status_code,
                errorType=type(e).__name__, responseText=(resp.text or "")[:500])
            raise SubmissionError.server(resp.status_code) from e

    async def upload_photo(self, announcement_id: str, photo: PhotoAttachment, management_password: str) -> None:
        try:
            content = Path(photo.rawFileHandle).read_bytes()
        except OSError as e:
            log(event="photo_read_failed", announcementId=announcement_id, errorType=type(e).__name__)
            raise SubmissionError.validation(MSG_PHOTO_UNREADABLE, None) from e

        resp = await self._send(
            "POST",
            f"{ANNOUNCEMENTS_PATH}/{announcement_id}/photos",
            files={"photo": (photo.filename, content, photo.mimeType)},
            auth=httpx.BasicAuth(announcement_id, management_password),
        )
        if resp.status_code not in (200, 201):
            self._raise_for(resp, "upload_photo")

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    async def get_announcements(
        self,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        range_km: Optional[int] = None,
    ) -> List[Announcement]:
        params = {}
        if lat is not None and lng is not None:
            params = {"lat": lat, "lng": lng, "range": range_km or settings.LIST_RANGE_KM}
        resp = await self._send("GET", ANNOUNCEMENTS_PATH, params=params)
        if resp.status_code != 200:
            self._raise_for(resp, "list")
        return [Announcement.from_dict(item) for item in resp.json().get("data", [])]

    async def get_announcement_by_id(self, announcement_id: str) -> Announcement:
        resp = await self._send("GET", f"{ANNOUNCEMENTS_PATH}/{announcement_id}")
        if resp.status_code == 404:
            raise LookupError(f"announcement {announcement_id} not found")
        if resp.status_code != 200:
            self._raise_for(resp, "get")
        return Announcement.from_dict(resp.json())
