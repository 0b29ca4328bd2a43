"""
Shared plumbing for the per-step forms.

A form owns a screen-local draft, hydrates it from FlowState on entry and
merges it back on Continue (after validation) or Back (always, except on the
first step where Back means abandon). Navigation leaves the form only as
effects on the flow's EffectQueue.
"""

import asyncio
from typing import Optional

from petspot.core.effects import EffectQueue, ExitFlow, NavigateBack, NavigateToStep, ShowToast
from petspot.core.flow_state import FlowState
from petspot.core.flow_steps import FlowStep, next_step, previous_step
from petspot.core.intents import BackClicked, ContinueClicked
from petspot.observability.logging import log

MSG_FIX_ERRORS = "Please correct the highlighted fields"


class StepForm:
    step: FlowStep = FlowStep.MICROCHIP

    def __init__(self, flow_state: FlowState, effects: EffectQueue):
        self.flow_state = flow_state
        self.effects = effects

    @property
    def flow_id(self) -> str:
        return self.flow_state.flow_id

    def on_enter(self) -> None:
        raise NotImplementedError

    def handle_intent(self, intent) -> Optional[asyncio.Task]:
        """Dispatch one intent. Returns the background task when the intent starts one."""
        if isinstance(intent, ContinueClicked):
            return self.on_continue()
        if isinstance(intent, BackClicked):
            self.on_back()
            return None
        return self._handle(intent)

    def _handle(self, intent) -> Optional[asyncio.Task]:
        log(event="intent_unhandled", flowId=self.flow_id, step=self.step.value,
            intent=type(intent).__name__)
        return None

    def on_continue(self) -> Optional[asyncio.Task]:
        raise NotImplementedError

    def on_back(self) -> None:
        target = previous_step(self.step)
        if target is None:
            # leaving from the first step abandons the report
            self.cancel_pending()
            log(event="flow_exit_requested", flowId=self.flow_id, step=self.step.value)
            self.effects.emit(ExitFlow())
            return
        self.cancel_pending()
        self.save_draft()
        self.effects.emit(NavigateBack(target))

    def save_draft(self) -> None:
        """Lenient merge of the draft into FlowState used by Back."""

    def cancel_pending(self) -> None:
        """Cancel background work owned by this form."""

    # ------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------

    def _advance(self) -> None:
        target = next_step(self.step)
        if target is not None:
            self.effects.emit(NavigateToStep(target))

    def _reject(self, errors: dict, message: str = MSG_FIX_ERRORS) -> None:
        log(event="step_validation_failed", flowId=self.flow_id, step=self.step.value,
            fields=sorted(errors))
        self.effects.emit(ShowToast(message))


def cancel_task(task: Optional[asyncio.Task]) -> None:
    if task is not None and not task.done():
        task.cancel()
