from petspot.core.effects import EffectQueue, ExitFlow, NavigateToStep
from petspot.core.flow_state import FlowState
from petspot.core.flow_steps import FlowStep
from petspot.core.intents import BackClicked, ContinueClicked, UpdateChipNumber
from petspot.forms.microchip import MicrochipForm


def _form():
    fs = FlowState("f")
    q = EffectQueue()
    form = MicrochipForm(fs, q)
    form.on_enter()
    return form, fs, q


def test_input_is_kept_to_fifteen_digits():
    form, _, _ = _form()
    form.handle_intent(UpdateChipNumber("123-456 789.012 345 678"))
    assert form.draft.microchipNumber == "123456789012345"


def test_continue_merges_and_advances():
    form, fs, q = _form()
    form.handle_intent(UpdateChipNumber("985141000123456"))
    form.handle_intent(ContinueClicked())
    assert fs.current_snapshot().microchipNumber == "985141000123456"
    assert q.drain() == [NavigateToStep(FlowStep.PHOTO)]


def test_empty_number_is_allowed():
    form, fs, q = _form()
    form.handle_intent(ContinueClicked())
    assert q.drain() == [NavigateToStep(FlowStep.PHOTO)]
    assert fs.current_snapshot().microchipNumber == ""


def test_back_on_first_step_exits_without_saving():
    form, fs, q = _form()
    form.handle_intent(UpdateChipNumber("123"))
    form.handle_intent(BackClicked())
    assert q.drain() == [ExitFlow()]
    assert fs.current_snapshot().microchipNumber == ""


def test_on_enter_restores_saved_number():
    form, fs, _ = _form()
    fs.update_microchip_number("42")
    form.on_enter()
    assert form.draft.microchipNumber == "42"
