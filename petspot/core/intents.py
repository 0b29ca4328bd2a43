"""User intents understood by the report flow, grouped by the step that handles them."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from petspot.core.flow_steps import FlowStep


# ------------------------------------------------------------
# Shared by every step
# ------------------------------------------------------------

@dataclass(frozen=True)
class ContinueClicked:
    pass


@dataclass(frozen=True)
class BackClicked:
    pass


# ------------------------------------------------------------
# Flow level (handled by the controller itself)
# ------------------------------------------------------------

@dataclass(frozen=True)
class NavigateNext:
    pass


@dataclass(frozen=True)
class NavigateBackIntent:
    pass


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class UpdateCurrentStep:
    step: FlowStep


# ------------------------------------------------------------
# Microchip
# ------------------------------------------------------------

@dataclass(frozen=True)
class UpdateChipNumber:
    value: str


# ------------------------------------------------------------
# Photo
# ------------------------------------------------------------

@dataclass(frozen=True)
class OpenPhotoPicker:
    pass


@dataclass(frozen=True)
class PhotoSelected:
    uri: str


@dataclass(frozen=True)
class PhotoPickerCancelled:
    pass


@dataclass(frozen=True)
class RemovePhoto:
    pass


# ------------------------------------------------------------
# Animal description
# ------------------------------------------------------------

@dataclass(frozen=True)
class UpdateDate:
    date: date


@dataclass(frozen=True)
class UpdatePetName:
    name: str


@dataclass(frozen=True)
class UpdateSpecies:
    species: str


@dataclass(frozen=True)
class UpdateBreed:
    breed: str


@dataclass(frozen=True)
class UpdateSex:
    sex: Optional[str]


@dataclass(frozen=True)
class UpdateAge:
    age: str


@dataclass(frozen=True)
class UpdateLatitude:
    latitude: str


@dataclass(frozen=True)
class UpdateLongitude:
    longitude: str


@dataclass(frozen=True)
class UpdateDescription:
    description: str


@dataclass(frozen=True)
class RequestGpsPosition:
    pass


@dataclass(frozen=True)
class OpenDatePicker:
    pass


@dataclass(frozen=True)
class DismissDatePicker:
    pass


# ------------------------------------------------------------
# Contact
# ------------------------------------------------------------

@dataclass(frozen=True)
class UpdatePhone:
    phone: str


@dataclass(frozen=True)
class UpdateEmail:
    email: str


@dataclass(frozen=True)
class UpdateReward:
    reward: str


@dataclass(frozen=True)
class RetryClicked:
    pass


# ------------------------------------------------------------
# Summary
# ------------------------------------------------------------

@dataclass(frozen=True)
class CopyPasswordClicked:
    pass


@dataclass(frozen=True)
class CloseClicked:
    pass
