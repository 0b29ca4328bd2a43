"""
Narrow contracts for the platform services the report flow leans on.

Real implementations live with the UI surface; tests hand in small fakes.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

PERMISSION_GRANTED = "granted"
PERMISSION_DENIED = "denied"
PERMISSION_PROMPT = "prompt"
PERMISSION_RESTRICTED = "restricted"


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class PhotoMetadata:
    filename: str
    sizeBytes: int
    mimeType: Optional[str] = None


class GeolocationCapability(Protocol):
    async def current_permission_state(self) -> str: ...

    async def request_permission(self) -> str: ...

    async def current_coordinates(self) -> Optional[Coordinates]: ...


class PhotoMetadataCapability(Protocol):
    async def extract_metadata(self, raw_file_handle: str) -> PhotoMetadata: ...


class ClipboardCapability(Protocol):
    def copy_text(self, text: str) -> None: ...
