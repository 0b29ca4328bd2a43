"""
Entry point of one "report missing pet" flow.

The controller owns the flow's FlowState, EffectQueue and SubmissionPipeline,
builds one form per step and routes intents: flow-level intents are handled
here, everything else goes to the form of the current step. It also listens
on the effect queue so that navigation effects move `currentStep` and
hydrate the target form before the UI drains them.
"""

import asyncio
import uuid
from typing import Optional

from petspot.capabilities import ClipboardCapability, GeolocationCapability, PhotoMetadataCapability
from petspot.core.effects import (
    DismissFlow,
    EffectQueue,
    ExitFlow,
    NavigateBack,
    NavigateToStep,
    NavigateToSummary,
)
from petspot.core.flow_state import FlowState
from petspot.core.flow_steps import FIRST_STEP, FlowStep, next_step, previous_step
from petspot.core.intents import ContinueClicked, NavigateBackIntent, NavigateNext, Submit, UpdateCurrentStep
from petspot.core.submission import AnnouncementService, SubmissionPipeline
from petspot.forms.base import StepForm
from petspot.forms.contact import ContactForm
from petspot.forms.description import DescriptionForm
from petspot.forms.microchip import MicrochipForm
from petspot.forms.photo import PhotoForm
from petspot.forms.summary import SummaryForm
from petspot.observability.logging import log


class FlowController:
    def __init__(
        self,
        service: AnnouncementService,
        geolocation: GeolocationCapability,
        photo_metadata: PhotoMetadataCapability,
        clipboard: ClipboardCapability,
        flow_id: Optional[str] = None,
    ):
        self.flow_id = flow_id or uuid.uuid4().hex
        self.flow_state = FlowState(self.flow_id)
        self.effects = EffectQueue()
        self.pipeline = SubmissionPipeline(service, self.flow_id)
        self.forms = {
            FlowStep.MICROCHIP: MicrochipForm(self.flow_state, self.effects),
            FlowStep.PHOTO: PhotoForm(self.flow_state, self.effects, photo_metadata),
            FlowStep.DESCRIPTION: DescriptionForm(self.flow_state, self.effects, geolocation),
            FlowStep.CONTACT: ContactForm(self.flow_state, self.effects, self.pipeline),
            FlowStep.SUMMARY: SummaryForm(self.flow_state, self.effects, clipboard),
        }
        self.effects.subscribe(self._on_effect)
        self.active_form.on_enter()
        log(event="flow_started", flowId=self.flow_id)

    @property
    def current_step(self) -> FlowStep:
        return self.flow_state.current_step

    @property
    def active_form(self) -> StepForm:
        return self.forms[self.current_step]

    def form(self, step: FlowStep) -> StepForm:
        return self.forms[FlowStep(step)]

    def handle_intent(self, intent) -> Optional[asyncio.Task]:
        """Route one intent; returns the background task it started, if any."""
        if isinstance(intent, NavigateNext):
            target = next_step(self.current_step)
            if target is None:
                log(event="navigate_next_ignored", flowId=self.flow_id, step=self.current_step.value)
                return None
            self.effects.emit(NavigateToStep(target))
            return None

        if isinstance(intent, NavigateBackIntent):
            target = previous_step(self.current_step)
            self.effects.emit(ExitFlow() if target is None else NavigateBack(target))
            return None

        if isinstance(intent, UpdateCurrentStep):
            self.effects.emit(NavigateToStep(FlowStep(intent.step)))
            return None

        if isinstance(intent, Submit):
            if self.current_step != FlowStep.CONTACT:
                log(event="submit_ignored", flowId=self.flow_id, step=self.current_step.value)
                return None
            return self.forms[FlowStep.CONTACT].handle_intent(ContinueClicked())

        return self.active_form.handle_intent(intent)

    def _enter(self, step: FlowStep) -> None:
        self.flow_state.update_current_step(step)
        self.forms[step].on_enter()

    def _on_effect(self, effect) -> None:
        if isinstance(effect, (NavigateToStep, NavigateBack)):
            if effect.step != self.current_step:
                # work started by the step being left must not land on a later step
                self.active_form.cancel_pending()
            self._enter(effect.step)
        elif isinstance(effect, NavigateToSummary):
            if self.current_step != FlowStep.CONTACT:
                log(event="summary_navigation_ignored", flowId=self.flow_id, step=self.current_step.value)
                return
            self._enter(FlowStep.SUMMARY)
        elif isinstance(effect, (ExitFlow, DismissFlow)):
            self.abandon()

    def abandon(self) -> None:
        for form in self.forms.values():
            form.cancel_pending()
        self.pipeline.reset()
        self.flow_state.reset()
        self.forms[FIRST_STEP].on_enter()
