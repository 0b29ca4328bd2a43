from enum import Enum
from typing import Optional


class FlowStep(str, Enum):
    # Optional microchip number, digits only. Back from here leaves the flow.
    MICROCHIP = "MICROCHIP"

    # Mandatory photo of the animal (required to move forward, not to go back)
    PHOTO = "PHOTO"

    # Species, breed, sex, age, last-seen date and place, free text
    DESCRIPTION = "DESCRIPTION"

    # Phone and/or email plus reward; Continue here submits the announcement
    CONTACT = "CONTACT"

    # Terminal: shows the management password
    SUMMARY = "SUMMARY"


STEP_ORDER = (
    FlowStep.MICROCHIP,
    FlowStep.PHOTO,
    FlowStep.DESCRIPTION,
    FlowStep.CONTACT,
    FlowStep.SUMMARY,
)

FIRST_STEP = STEP_ORDER[0]
TERMINAL_STEP = STEP_ORDER[-1]


def next_step(step: FlowStep) -> Optional[FlowStep]:
    """Step after `step`, or None from the terminal step."""
    idx = STEP_ORDER.index(FlowStep(step))
    if idx + 1 >= len(STEP_ORDER):
        return None
    return STEP_ORDER[idx + 1]


def previous_step(step: FlowStep) -> Optional[FlowStep]:
    """Step before `step`, or None from the first step."""
    idx = STEP_ORDER.index(FlowStep(step))
    if idx == 0:
        return None
    return STEP_ORDER[idx - 1]


def step_number(step: FlowStep) -> int:
    """1-based position, as shown in the "Step n/4" header."""
    return STEP_ORDER.index(FlowStep(step)) + 1
