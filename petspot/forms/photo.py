import asyncio
import mimetypes
from dataclasses import dataclass
from typing import Optional

from petspot.capabilities import PhotoMetadataCapability
from petspot.core.effects import LaunchPhotoPicker, ShowToast
from petspot.core.flow_steps import FlowStep
from petspot.core.intents import OpenPhotoPicker, PhotoPickerCancelled, PhotoSelected, RemovePhoto
from petspot.forms.base import StepForm, cancel_task
from petspot.observability.logging import log
from petspot.store.models import PhotoAttachment, PhotoStatus

MSG_PHOTO_REQUIRED = "Please add a photo of your pet to continue"
MSG_PHOTO_LOAD_FAILED = "Could not load the selected photo. Please try another one."

DEFAULT_MIME_TYPE = "application/octet-stream"


def guess_mime_type(filename: str) -> str:
    mime, _ = mimetypes.guess_type(filename or "")
    return mime or DEFAULT_MIME_TYPE


@dataclass
class PhotoDraft:
    status: PhotoStatus = PhotoStatus.EMPTY
    attachment: Optional[PhotoAttachment] = None
    pendingUri: Optional[str] = None


class PhotoForm(StepForm):
    """
    Photo step: EMPTY -> LOADING -> CONFIRMED, or back to EMPTY (with a toast)
    when metadata extraction fails. A photo is required to move forward only.
    """

    step = FlowStep.PHOTO

    def __init__(self, flow_state, effects, metadata: PhotoMetadataCapability):
        super().__init__(flow_state, effects)
        self.metadata = metadata
        self.draft = PhotoDraft()
        self._extraction: Optional[asyncio.Task] = None

    def on_enter(self) -> None:
        photo = self.flow_state.current_snapshot().photo
        if photo is not None:
            self.draft = PhotoDraft(status=PhotoStatus.CONFIRMED, attachment=photo)
        else:
            self.draft = PhotoDraft()

    def _handle(self, intent):
        if isinstance(intent, OpenPhotoPicker):
            self.effects.emit(LaunchPhotoPicker())
            return None
        if isinstance(intent, PhotoPickerCancelled):
            return None
        if isinstance(intent, PhotoSelected):
            return self._select(intent.uri)
        if isinstance(intent, RemovePhoto):
            self._remove()
            return None
        return super()._handle(intent)

    def _select(self, uri: str) -> asyncio.Task:
        if self._extraction is not None and not self._extraction.done():
            log(event="photo_extraction_cancelled", flowId=self.flow_id, reason="superseded")
        cancel_task(self._extraction)
        self.draft = PhotoDraft(status=PhotoStatus.LOADING, pendingUri=uri)
        log(event="photo_extraction_started", flowId=self.flow_id)
        self._extraction = asyncio.get_running_loop().create_task(self._extract(uri))
        return self._extraction

    async def _extract(self, uri: str) -> None:
        try:
            meta = await self.metadata.extract_metadata(uri)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log(event="photo_extraction_failed", flowId=self.flow_id,
                errorType=type(e).__name__, error=str(e)[:200])
            self.draft = PhotoDraft()
            self.effects.emit(ShowToast(MSG_PHOTO_LOAD_FAILED))
            return

        self.draft = PhotoDraft(
            status=PhotoStatus.CONFIRMED,
            attachment=PhotoAttachment(
                rawFileHandle=uri,
                filename=meta.filename,
                sizeBytes=int(meta.sizeBytes or 0),
                mimeType=meta.mimeType or guess_mime_type(meta.filename),
                previewReference=uri,
            ),
        )
        log(event="photo_extraction_succeeded", flowId=self.flow_id, sizeBytes=meta.sizeBytes)

    def _remove(self) -> None:
        cancel_task(self._extraction)
        self._extraction = None
        self.draft = PhotoDraft()
        self.flow_state.clear_photo()

    def cancel_pending(self) -> None:
        cancel_task(self._extraction)
        self._extraction = None

    def save_draft(self) -> None:
        # a photo still loading is not worth keeping; whatever FlowState holds stays
        if self.draft.status == PhotoStatus.CONFIRMED and self.draft.attachment is not None:
            self.flow_state.update_photo(self.draft.attachment)

    def on_continue(self):
        if self.draft.status != PhotoStatus.CONFIRMED or self.draft.attachment is None:
            self._reject({"photo": MSG_PHOTO_REQUIRED}, MSG_PHOTO_REQUIRED)
            return None
        self.flow_state.update_photo(self.draft.attachment)
        self._advance()
        return None
