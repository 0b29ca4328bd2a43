from typing import Optional

VALIDATION = "validation"
DUPLICATE_MICROCHIP = "duplicate-microchip"
NETWORK = "network"
SERVER = "server"

ERROR_TYPES = (VALIDATION, DUPLICATE_MICROCHIP, NETWORK, SERVER)

MSG_VALIDATION = "Some of the details you entered were rejected. Please review them and try again."
MSG_DUPLICATE_MICROCHIP = (
    "An announcement with this microchip number already exists. "
    "Use your management password to update the existing announcement instead."
)
MSG_NETWORK = "Could not reach the server. Please check your internet connection and try again."
MSG_SERVER = "Something went wrong on our side. Please try again later."


class SubmissionError(Exception):
    """Closed error taxonomy surfaced by the submission pipeline to the UI."""

    def __init__(self, type: str, message: str, statusCode: Optional[int] = None):
        if type not in ERROR_TYPES:
            raise ValueError(f"unknown submission error type: {type}")
        self.type = type
        self.message = message
        self.statusCode = statusCode
        super().__init__(message)

    @classmethod
    def validation(cls, message: Optional[str] = None, statusCode: Optional[int] = 400) -> "SubmissionError":
        return cls(VALIDATION, message or MSG_VALIDATION, statusCode)

    @classmethod
    def duplicate_microchip(cls) -> "SubmissionError":
        return cls(DUPLICATE_MICROCHIP, MSG_DUPLICATE_MICROCHIP, 409)

    @classmethod
    def network(cls) -> "SubmissionError":
        return cls(NETWORK, MSG_NETWORK)

    @classmethod
    def server(cls, statusCode: int) -> "SubmissionError":
        return cls(SERVER, MSG_SERVER, statusCode)

    def to_dict(self) -> dict:
        out = {"type": self.type, "message": self.message}
        if self.statusCode is not None:
            out["statusCode"] = self.statusCode
        return out

    def __repr__(self) -> str:
        return f"SubmissionError(type={self.type!r}, statusCode={self.statusCode!r})"
