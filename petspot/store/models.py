from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from petspot.core.flow_steps import FlowStep


class Species(str, Enum):
    DOG = "DOG"
    CAT = "CAT"
    BIRD = "BIRD"
    RABBIT = "RABBIT"
    OTHER = "OTHER"


class Sex(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    UNKNOWN = "UNKNOWN"


class PhotoStatus(str, Enum):
    EMPTY = "EMPTY"
    LOADING = "LOADING"
    CONFIRMED = "CONFIRMED"


class AnnouncementStatus(str, Enum):
    MISSING = "MISSING"
    FOUND = "FOUND"


@dataclass(frozen=True)
class PhotoAttachment:
    # Path (or URI) of the picked file; the client reads bytes from here on upload
    rawFileHandle: str
    filename: str
    sizeBytes: int = 0
    mimeType: str = "application/octet-stream"
    # Whatever the UI uses to render a thumbnail (data URL, cache key, ...)
    previewReference: Optional[str] = None


@dataclass(frozen=True)
class FlowData:
    """
    Immutable snapshot of everything collected by the report flow.
    Only FlowState produces new instances; callers never mutate one in place.
    """
    currentStep: FlowStep = FlowStep.MICROCHIP

    # Step 1 - microchip
    microchipNumber: str = ""

    # Step 2 - photo
    photo: Optional[PhotoAttachment] = None

    # Step 3 - animal description
    lastSeenDate: Optional[date] = None
    petName: str = ""
    species: str = ""
    breed: str = ""
    sex: Optional[str] = None
    age: Optional[int] = None
    description: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # Step 4 - contact
    email: str = ""
    phone: str = ""
    reward: str = ""

    # Assigned after a successful submission
    announcementId: Optional[str] = None
    managementPassword: Optional[str] = None


@dataclass(frozen=True)
class AnnouncementResult:
    id: str
    managementPassword: str


@dataclass
class Announcement:
    """Announcement as served by the list/detail endpoints."""
    id: str
    species: str
    sex: str
    lastSeenDate: str
    status: str
    locationLatitude: float
    locationLongitude: float
    petName: Optional[str] = None
    breed: Optional[str] = None
    age: Optional[int] = None
    description: Optional[str] = None
    microchipNumber: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    reward: Optional[str] = None
    photoUrl: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Announcement":
        known = {k for k in cls.__dataclass_fields__ if k != "extra"}
        kwargs = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        return cls(extra=extra, **kwargs)
