from dataclasses import dataclass
from typing import Optional

from petspot.capabilities import ClipboardCapability
from petspot.core.effects import DismissFlow, ShowToast
from petspot.core.flow_steps import FlowStep
from petspot.core.intents import CloseClicked, CopyPasswordClicked
from petspot.forms.base import StepForm
from petspot.observability.logging import log

MSG_PASSWORD_COPIED = "Password copied to clipboard"


@dataclass
class SummaryDraft:
    announcementId: Optional[str] = None
    managementPassword: Optional[str] = None


class SummaryForm(StepForm):
    """Terminal step: shows the management password. Back and Close both dismiss the flow."""

    step = FlowStep.SUMMARY

    def __init__(self, flow_state, effects, clipboard: ClipboardCapability):
        super().__init__(flow_state, effects)
        self.clipboard = clipboard
        self.draft = SummaryDraft()

    def on_enter(self) -> None:
        snap = self.flow_state.current_snapshot()
        self.draft = SummaryDraft(announcementId=snap.announcementId,
                                  managementPassword=snap.managementPassword)

    def _handle(self, intent):
        if isinstance(intent, CopyPasswordClicked):
            self._copy_password()
            return None
        if isinstance(intent, CloseClicked):
            self._dismiss()
            return None
        return super()._handle(intent)

    def _copy_password(self) -> None:
        password = self.draft.managementPassword
        if not password:
            return
        try:
            self.clipboard.copy_text(password)
        except Exception as e:
            log(event="clipboard_copy_failed", flowId=self.flow_id, errorType=type(e).__name__)
            return
        self.effects.emit(ShowToast(MSG_PASSWORD_COPIED))

    def _dismiss(self) -> None:
        log(event="flow_dismissed", flowId=self.flow_id, announcementId=self.draft.announcementId)
        self.effects.emit(DismissFlow())

    def on_back(self) -> None:
        self._dismiss()

    def on_continue(self):
        return None
