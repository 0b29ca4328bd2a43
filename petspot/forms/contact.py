import asyncio
from dataclasses import dataclass, field
from typing import Optional

from petspot.core.effects import NavigateToSummary, ShowToast
from petspot.core.flow_state import truncate_reward
from petspot.core.flow_steps import FlowStep
from petspot.core.intents import RetryClicked, UpdateEmail, UpdatePhone, UpdateReward
from petspot.core.submission import SubmissionPipeline
from petspot.core.validators import MSG_CONTACT_REQUIRED, contact_errors
from petspot.forms.base import StepForm, cancel_task
from petspot.observability.logging import log

MSG_PHOTO_UPLOAD_FAILED = (
    "Your announcement was created but the photo could not be uploaded. "
    "Tap retry to try again."
)
RETRY_ACTION_LABEL = "Retry"


@dataclass
class ContactDraft:
    phone: str = ""
    email: str = ""
    reward: str = ""
    isSubmitting: bool = False
    errors: dict = field(default_factory=dict)


class ContactForm(StepForm):
    """Last data step. A valid Continue hands the whole flow to the submission pipeline."""

    step = FlowStep.CONTACT

    def __init__(self, flow_state, effects, pipeline: SubmissionPipeline):
        super().__init__(flow_state, effects)
        self.pipeline = pipeline
        self.draft = ContactDraft()
        self._submission: Optional[asyncio.Task] = None

    def on_enter(self) -> None:
        snap = self.flow_state.current_snapshot()
        self.draft = ContactDraft(phone=snap.phone, email=snap.email, reward=snap.reward)

    def _clear_contact_error(self, name: str) -> None:
        self.draft.errors.pop(name, None)
        # one filled contact method satisfies the either-or rule for both fields
        for other in ("phone", "email"):
            if self.draft.errors.get(other) == MSG_CONTACT_REQUIRED:
                self.draft.errors.pop(other)

    def _handle(self, intent):
        if isinstance(intent, UpdatePhone):
            self.draft.phone = intent.phone or ""
            self._clear_contact_error("phone")
            return None
        if isinstance(intent, UpdateEmail):
            self.draft.email = intent.email or ""
            self._clear_contact_error("email")
            return None
        if isinstance(intent, UpdateReward):
            self.draft.reward = truncate_reward(intent.reward)
            return None
        if isinstance(intent, RetryClicked):
            log(event="submission_retry", flowId=self.flow_id)
            return self.on_continue()
        return super()._handle(intent)

    @property
    def is_busy(self) -> bool:
        return self.pipeline.is_submitting or (self._submission is not None and not self._submission.done())

    def on_continue(self) -> Optional[asyncio.Task]:
        if self.is_busy:
            log(event="submission_ignored", flowId=self.flow_id, reason="in_flight")
            return None

        errors = contact_errors(self.draft.phone, self.draft.email)
        if errors:
            self.draft.errors = errors
            self._reject(errors)
            return None

        self.draft.errors = {}
        self.flow_state.update_contact(self.draft.phone, self.draft.email, self.draft.reward)
        self.draft.isSubmitting = True
        self._submission = asyncio.get_running_loop().create_task(self._submit())
        return self._submission

    async def _submit(self) -> None:
        try:
            result = await self.pipeline.submit(self.flow_state.current_snapshot())
        finally:
            self.draft.isSubmitting = False

        if result is not None:
            # kept even when only the photo failed, so the created announcement is not lost
            self.flow_state.update_submission_result(result)

        err = self.pipeline.error
        if err is not None:
            message = MSG_PHOTO_UPLOAD_FAILED if self.pipeline.is_partial_success else err.message
            self.effects.emit(ShowToast(message, RETRY_ACTION_LABEL))
            return
        if result is not None:
            self.effects.emit(NavigateToSummary(result.managementPassword))

    def save_draft(self) -> None:
        self.flow_state.update_contact(self.draft.phone, self.draft.email, self.draft.reward)

    def cancel_pending(self) -> None:
        cancel_task(self._submission)
        self._submission = None
        self.draft.isSubmitting = False
