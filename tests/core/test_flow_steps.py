from petspot.core.flow_steps import FIRST_STEP, STEP_ORDER, TERMINAL_STEP, FlowStep, next_step, previous_step, step_number


def test_step_order_is_linear():
    assert STEP_ORDER == (
        FlowStep.MICROCHIP,
        FlowStep.PHOTO,
        FlowStep.DESCRIPTION,
        FlowStep.CONTACT,
        FlowStep.SUMMARY,
    )
    assert FIRST_STEP == FlowStep.MICROCHIP
    assert TERMINAL_STEP == FlowStep.SUMMARY


def test_next_and_previous():
    assert next_step(FlowStep.MICROCHIP) == FlowStep.PHOTO
    assert next_step(FlowStep.CONTACT) == FlowStep.SUMMARY
    assert next_step(FlowStep.SUMMARY) is None
    assert previous_step(FlowStep.PHOTO) == FlowStep.MICROCHIP
    assert previous_step(FlowStep.MICROCHIP) is None


def test_step_number_is_one_based():
    assert step_number(FlowStep.MICROCHIP) == 1
    assert step_number(FlowStep.SUMMARY) == 5
