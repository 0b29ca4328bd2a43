"""
Flow-scoped state holder for one "report missing pet" journey.

Not a singleton: the controller creates one FlowState per flow and threads it
through each step form. All mutation goes through the update_* operations below,
which swap in a new immutable FlowData snapshot and enforce the data rules
(breed cleared on species change, text limits, digits-only microchip, ...).
"""

from dataclasses import replace
from datetime import date
from typing import Optional

from petspot.core.flow_steps import FlowStep
from petspot.core.validators import extract_digits
from petspot.observability.logging import log
from petspot.settings import settings
from petspot.store.models import AnnouncementResult, FlowData, PhotoAttachment
from petspot.utils.time import is_future, today


def truncate_description(text: str) -> str:
    return (text or "")[: settings.DESCRIPTION_MAX_CHARS]


def truncate_reward(text: str) -> str:
    return (text or "")[: settings.REWARD_MAX_CHARS]


def sanitize_microchip(value: str) -> str:
    return extract_digits(value)[: settings.MICROCHIP_MAX_DIGITS]


class FlowState:
    def __init__(self, flow_id: str = ""):
        self.flow_id = flow_id
        self._data = self._initial()

    @staticmethod
    def _initial() -> FlowData:
        return FlowData(lastSeenDate=today())

    def _apply(self, **changes) -> FlowData:
        self._data = replace(self._data, **changes)
        return self._data

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def current_snapshot(self) -> FlowData:
        return self._data

    @property
    def current_step(self) -> FlowStep:
        return self._data.currentStep

    # ------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------

    def reset(self) -> FlowData:
        self._data = self._initial()
        log(event="flow_state_reset", flowId=self.flow_id)
        return self._data

    def update_current_step(self, step: FlowStep) -> FlowData:
        step = FlowStep(step)
        if step != self._data.currentStep:
            log(event="flow_step_changed", flowId=self.flow_id,
                fromStep=self._data.currentStep.value, toStep=step.value)
        return self._apply(currentStep=step)

    # ------------------------------------------------------------
    # Step 1 - microchip
    # ------------------------------------------------------------

    def update_microchip_number(self, value: str) -> FlowData:
        return self._apply(microchipNumber=sanitize_microchip(value))

    # ------------------------------------------------------------
    # Step 2 - photo
    # ------------------------------------------------------------

    def update_photo(self, photo: PhotoAttachment) -> FlowData:
        return self._apply(photo=photo)

    def clear_photo(self) -> FlowData:
        return self._apply(photo=None)

    # ------------------------------------------------------------
    # Step 3 - animal description
    # ------------------------------------------------------------

    def update_last_seen_date(self, value: date) -> FlowData:
        if value is None:
            raise ValueError("lastSeenDate is required")
        if is_future(value):
            raise ValueError("lastSeenDate cannot be in the future")
        return self._apply(lastSeenDate=value)

    def update_pet_name(self, name: str) -> FlowData:
        return self._apply(petName=name or "")

    def update_species(self, species: str) -> FlowData:
        species = species or ""
        if species != self._data.species:
            # breed only makes sense for the species it was typed for
            return self._apply(species=species, breed="")
        return self._data

    def update_breed(self, breed: str) -> FlowData:
        return self._apply(breed=breed or "")

    def update_sex(self, sex: Optional[str]) -> FlowData:
        return self._apply(sex=sex or None)

    def update_age(self, age: Optional[int]) -> FlowData:
        if age is not None and (isinstance(age, bool) or int(age) < 0):
            raise ValueError("age must be a non-negative integer")
        return self._apply(age=None if age is None else int(age))

    def update_description(self, text: str) -> FlowData:
        return self._apply(description=truncate_description(text))

    def update_location(self, latitude: Optional[float], longitude: Optional[float]) -> FlowData:
        return self._apply(latitude=latitude, longitude=longitude)

    def update_animal_description(
        self,
        last_seen_date: Optional[date],
        pet_name: str,
        species: str,
        breed: str,
        sex: Optional[str],
        age: Optional[int],
        latitude: Optional[float],
        longitude: Optional[float],
        description: str,
    ) -> FlowData:
        """
        Merge the whole description draft in one step.
        The draft's breed is authoritative: a species change inside the draft
        has already cleared it there, so it is written after the species.
        """
        if last_seen_date is not None:
            self.update_last_seen_date(last_seen_date)
        self.update_species(species)
        self.update_breed(breed)
        self.update_pet_name(pet_name)
        self.update_sex(sex)
        self.update_age(age)
        self.update_location(latitude, longitude)
        return self.update_description(description)

    # ------------------------------------------------------------
    # Step 4 - contact
    # ------------------------------------------------------------

    def update_email(self, email: str) -> FlowData:
        return self._apply(email=email or "")

    def update_phone(self, phone: str) -> FlowData:
        return self._apply(phone=phone or "")

    def update_reward(self, reward: str) -> FlowData:
        return self._apply(reward=truncate_reward(reward))

    def update_contact(self, phone: str, email: str, reward: str) -> FlowData:
        return self._apply(
            phone=phone or "",
            email=email or "",
            reward=truncate_reward(reward),
        )

    # ------------------------------------------------------------
    # Post-submission
    # ------------------------------------------------------------

    def update_submission_result(self, result: AnnouncementResult) -> FlowData:
        return self._apply(announcementId=result.id, managementPassword=result.managementPassword)
