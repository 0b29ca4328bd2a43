import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from petspot.capabilities import (
    PERMISSION_DENIED,
    PERMISSION_GRANTED,
    PERMISSION_PROMPT,
    PERMISSION_RESTRICTED,
    GeolocationCapability,
)
from petspot.core import validators
from petspot.core.effects import OpenLocationSettings, ShowToast
from petspot.core.flow_state import truncate_description
from petspot.core.flow_steps import FlowStep
from petspot.core.intents import (
    DismissDatePicker,
    OpenDatePicker,
    RequestGpsPosition,
    UpdateAge,
    UpdateBreed,
    UpdateDate,
    UpdateDescription,
    UpdateLatitude,
    UpdateLongitude,
    UpdatePetName,
    UpdateSex,
    UpdateSpecies,
)
from petspot.forms.base import StepForm, cancel_task
from petspot.observability.logging import log
from petspot.settings import settings
from petspot.utils.time import is_future, today

MSG_LOCATION_DENIED = "Location permission is required to use your current position"
MSG_LOCATION_UNAVAILABLE = "Could not determine your current location"
SETTINGS_ACTION_LABEL = "Settings"


def limit_decimals(text: str, decimals: int) -> str:
    head, dot, frac = (text or "").partition(".")
    if not dot:
        return text or ""
    return f"{head}.{frac[:decimals]}"


def format_coordinate(value: Optional[float]) -> str:
    return "" if value is None else str(value)


def parse_coordinate(text: str) -> Optional[float]:
    try:
        return float((text or "").strip())
    except ValueError:
        return None


def parse_age(text: str) -> Optional[int]:
    s = (text or "").strip()
    return int(s) if validators.is_digits_only(s) else None


@dataclass
class DescriptionDraft:
    lastSeenDate: Optional[date] = None
    petName: str = ""
    species: str = ""
    breed: str = ""
    sex: Optional[str] = None
    age: str = ""
    latitude: str = ""
    longitude: str = ""
    description: str = ""
    isDatePickerVisible: bool = False
    isGpsLoading: bool = False
    errors: dict = field(default_factory=dict)


class DescriptionForm(StepForm):
    step = FlowStep.DESCRIPTION

    def __init__(self, flow_state, effects, geolocation: GeolocationCapability):
        super().__init__(flow_state, effects)
        self.geolocation = geolocation
        self.draft = DescriptionDraft()
        self._gps: Optional[asyncio.Task] = None

    def on_enter(self) -> None:
        snap = self.flow_state.current_snapshot()
        self.draft = DescriptionDraft(
            lastSeenDate=snap.lastSeenDate or today(),
            petName=snap.petName,
            species=snap.species,
            breed=snap.breed,
            sex=snap.sex,
            age="" if snap.age is None else str(snap.age),
            latitude=format_coordinate(snap.latitude),
            longitude=format_coordinate(snap.longitude),
            description=snap.description,
        )

    def _clear_error(self, *names: str) -> None:
        for name in names:
            self.draft.errors.pop(name, None)

    def _handle(self, intent):
        d = self.draft
        if isinstance(intent, UpdateDate):
            d.isDatePickerVisible = False
            if intent.date is None or is_future(intent.date):
                d.errors["lastSeenDate"] = validators.last_seen_date_error(intent.date)
                return None
            d.lastSeenDate = intent.date
            self._clear_error("lastSeenDate")
        elif isinstance(intent, UpdatePetName):
            d.petName = intent.name or ""
        elif isinstance(intent, UpdateSpecies):
            species = intent.species or ""
            if species != d.species:
                d.breed = ""
            d.species = species
            self._clear_error("species")
        elif isinstance(intent, UpdateBreed):
            d.breed = intent.breed or ""
            self._clear_error("breed")
        elif isinstance(intent, UpdateSex):
            d.sex = intent.sex or None
            self._clear_error("sex")
        elif isinstance(intent, UpdateAge):
            d.age = intent.age or ""
            self._clear_error("age")
        elif isinstance(intent, UpdateLatitude):
            d.latitude = limit_decimals(intent.latitude, settings.COORDINATE_DECIMALS)
            self._clear_error("latitude")
        elif isinstance(intent, UpdateLongitude):
            d.longitude = limit_decimals(intent.longitude, settings.COORDINATE_DECIMALS)
            self._clear_error("longitude")
        elif isinstance(intent, UpdateDescription):
            d.description = truncate_description(intent.description)
        elif isinstance(intent, OpenDatePicker):
            d.isDatePickerVisible = True
        elif isinstance(intent, DismissDatePicker):
            d.isDatePickerVisible = False
        elif isinstance(intent, RequestGpsPosition):
            return self._request_gps()
        else:
            return super()._handle(intent)
        return None

    # ------------------------------------------------------------
    # GPS
    # ------------------------------------------------------------

    def _request_gps(self) -> asyncio.Task:
        cancel_task(self._gps)
        self.draft.isGpsLoading = True
        self._gps = asyncio.get_running_loop().create_task(self._fetch_position())
        return self._gps

    async def _fetch_position(self) -> None:
        try:
            state = await self.geolocation.current_permission_state()
            if state == PERMISSION_PROMPT:
                state = await self.geolocation.request_permission()
            if state in (PERMISSION_DENIED, PERMISSION_RESTRICTED):
                log(event="gps_permission_denied", flowId=self.flow_id, permission=state)
                self.effects.emit(ShowToast(MSG_LOCATION_DENIED, SETTINGS_ACTION_LABEL))
                self.effects.emit(OpenLocationSettings())
                self.draft.isGpsLoading = False
                return
            coords = await self.geolocation.current_coordinates() if state == PERMISSION_GRANTED else None
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log(event="gps_failed", flowId=self.flow_id, errorType=type(e).__name__, error=str(e)[:200])
            coords = None

        self.draft.isGpsLoading = False
        if coords is None:
            self.effects.emit(ShowToast(MSG_LOCATION_UNAVAILABLE))
            return
        places = settings.COORDINATE_DECIMALS
        self.draft.latitude = f"{coords.lat:.{places}f}"
        self.draft.longitude = f"{coords.lng:.{places}f}"
        self._clear_error("latitude", "longitude")
        log(event="gps_position_filled", flowId=self.flow_id)

    def cancel_pending(self) -> None:
        cancel_task(self._gps)
        self._gps = None
        self.draft.isGpsLoading = False

    # ------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------

    def validate(self) -> dict:
        d = self.draft
        checks = {
            "lastSeenDate": validators.last_seen_date_error(d.lastSeenDate),
            "species": validators.species_error(d.species),
            "breed": validators.breed_error(d.breed),
            "sex": validators.sex_error(d.sex),
            "age": validators.age_error(d.age),
        }
        checks["latitude"], checks["longitude"] = validators.coordinate_errors(d.latitude, d.longitude)
        return {k: v for k, v in checks.items() if v}

    def _merge(self) -> None:
        d = self.draft
        self.flow_state.update_animal_description(
            last_seen_date=d.lastSeenDate,
            pet_name=d.petName,
            species=d.species,
            breed=d.breed,
            sex=d.sex,
            age=parse_age(d.age),
            latitude=parse_coordinate(d.latitude),
            longitude=parse_coordinate(d.longitude),
            description=d.description,
        )

    def save_draft(self) -> None:
        self._merge()

    def on_continue(self):
        errors = self.validate()
        if errors:
            self.draft.errors = errors
            self._reject(errors)
            return None
        self.draft.errors = {}
        self.cancel_pending()
        self._merge()
        self._advance()
        return None
