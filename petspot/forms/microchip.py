from dataclasses import dataclass

from petspot.core.flow_state import sanitize_microchip
from petspot.core.flow_steps import FlowStep
from petspot.core.intents import UpdateChipNumber
from petspot.forms.base import StepForm


@dataclass
class MicrochipDraft:
    microchipNumber: str = ""


class MicrochipForm(StepForm):
    """First step. The number is optional, so Continue always advances."""

    step = FlowStep.MICROCHIP

    def __init__(self, flow_state, effects):
        super().__init__(flow_state, effects)
        self.draft = MicrochipDraft()

    def on_enter(self) -> None:
        self.draft = MicrochipDraft(microchipNumber=self.flow_state.current_snapshot().microchipNumber)

    def _handle(self, intent):
        if isinstance(intent, UpdateChipNumber):
            self.draft.microchipNumber = sanitize_microchip(intent.value)
            return None
        return super()._handle(intent)

    def on_continue(self):
        self.flow_state.update_microchip_number(self.draft.microchipNumber)
        self._advance()
        return None
