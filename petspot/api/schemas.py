from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Species = Literal["DOG", "CAT", "BIRD", "RABBIT", "OTHER"]
Sex = Literal["MALE", "FEMALE", "UNKNOWN"]
Status = Literal["MISSING", "FOUND"]


class CreateAnnouncementBody(BaseModel):
    species: Species
    sex: Sex
    lastSeenDate: str  # YYYY-MM-DD
    status: Status
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


class AnnouncementOut(CreateAnnouncementBody):
    id: str
    photoUrl: Optional[str] = None
    createdAt: str
    updatedAt: str


class CreatedAnnouncementOut(AnnouncementOut):
    # Plain text only in this response; the store keeps a hash
    managementPassword: str


class AnnouncementListOut(BaseModel):
    data: List[AnnouncementOut] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    code: str
    message: str
    field: Optional[str] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
