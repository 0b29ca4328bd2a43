import asyncio

from petspot.core.effects import EffectQueue, LaunchPhotoPicker, NavigateBack, NavigateToStep, ShowToast
from petspot.core.flow_state import FlowState
from petspot.core.flow_steps import FlowStep
from petspot.core.intents import (
    BackClicked,
    ContinueClicked,
    OpenPhotoPicker,
    PhotoPickerCancelled,
    PhotoSelected,
    RemovePhoto,
)
from petspot.forms.photo import MSG_PHOTO_LOAD_FAILED, MSG_PHOTO_REQUIRED, PhotoForm, guess_mime_type
from petspot.store.models import PhotoAttachment, PhotoStatus

SAVED = PhotoAttachment(rawFileHandle="/tmp/old.png", filename="old.png", sizeBytes=10, mimeType="image/png")


def _form(photo_metadata):
    fs = FlowState("f")
    q = EffectQueue()
    form = PhotoForm(fs, q, photo_metadata)
    form.on_enter()
    return form, fs, q


def test_picker_intents(photo_metadata):
    form, _, q = _form(photo_metadata)
    form.handle_intent(OpenPhotoPicker())
    form.handle_intent(PhotoPickerCancelled())
    assert q.drain() == [LaunchPhotoPicker()]
    assert form.draft.status == PhotoStatus.EMPTY


def test_continue_without_photo_shows_toast(photo_metadata):
    form, fs, q = _form(photo_metadata)
    form.handle_intent(ContinueClicked())
    assert q.drain() == [ShowToast(MSG_PHOTO_REQUIRED)]
    assert fs.current_snapshot().photo is None


def test_selection_goes_through_loading_to_confirmed(photo_metadata):
    form, fs, q = _form(photo_metadata)

    async def scenario():
        task = form.handle_intent(PhotoSelected("/tmp/rex.jpg"))
        assert form.draft.status == PhotoStatus.LOADING
        await task

    asyncio.run(scenario())

    assert form.draft.status == PhotoStatus.CONFIRMED
    att = form.draft.attachment
    assert att.filename == "rex.jpg"
    assert att.sizeBytes == 2048
    assert att.mimeType == "image/jpeg"
    assert att.rawFileHandle == "/tmp/rex.jpg"

    form.handle_intent(ContinueClicked())
    assert fs.current_snapshot().photo == att
    assert q.drain() == [NavigateToStep(FlowStep.DESCRIPTION)]


def test_extraction_failure_returns_to_empty(photo_metadata):
    photo_metadata.error = OSError("unreadable")
    form, _, q = _form(photo_metadata)

    async def scenario():
        await form.handle_intent(PhotoSelected("/tmp/broken.jpg"))

    asyncio.run(scenario())

    assert form.draft.status == PhotoStatus.EMPTY
    assert form.draft.attachment is None
    assert q.drain() == [ShowToast(MSG_PHOTO_LOAD_FAILED)]


def test_newer_selection_cancels_older_extraction(photo_metadata):
    photo_metadata.slow.add("/tmp/slow.jpg")
    form, _, _ = _form(photo_metadata)

    async def scenario():
        first = form.handle_intent(PhotoSelected("/tmp/slow.jpg"))
        await asyncio.sleep(0)
        second = form.handle_intent(PhotoSelected("/tmp/fast.jpg"))
        await second
        await asyncio.gather(first, return_exceptions=True)
        return first

    first = asyncio.run(scenario())

    assert first.cancelled()
    assert form.draft.status == PhotoStatus.CONFIRMED
    assert form.draft.attachment.filename == "fast.jpg"


def test_remove_photo_clears_flow_state(photo_metadata):
    form, fs, _ = _form(photo_metadata)
    fs.update_photo(SAVED)
    form.on_enter()
    assert form.draft.status == PhotoStatus.CONFIRMED

    form.handle_intent(RemovePhoto())

    assert form.draft.status == PhotoStatus.EMPTY
    assert fs.current_snapshot().photo is None


def test_back_preserves_saved_photo(photo_metadata):
    form, fs, q = _form(photo_metadata)
    fs.update_photo(SAVED)
    before = fs.current_snapshot()
    form.on_enter()

    form.handle_intent(BackClicked())

    assert fs.current_snapshot() == before
    assert q.drain() == [NavigateBack(FlowStep.MICROCHIP)]


def test_back_without_photo_is_allowed(photo_metadata):
    form, fs, q = _form(photo_metadata)
    form.handle_intent(BackClicked())
    assert q.drain() == [NavigateBack(FlowStep.MICROCHIP)]
    assert fs.current_snapshot().photo is None


def test_guess_mime_type():
    assert guess_mime_type("a.png") == "image/png"
    assert guess_mime_type("noext") == "application/octet-stream"
