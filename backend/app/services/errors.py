from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(eq=False)
class ServiceError(Exception):
    """Service-layer exception carrying the HTTP error envelope."""

    status_code: int
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:  # pragma: no cover - convenience for logging
        return f"{self.status_code} {self.code}: {self.message} | {self.details}"

    def to_envelope(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message, "details": self.details}}

    @classmethod
    def validation(cls, field_name: str, reason: str) -> "ServiceError":
        return cls(400, "VALIDATION_ERROR", "Invalid request payload.", {"field": field_name, "reason": reason})

    @classmethod
    def not_found(cls, message: str, **details: Any) -> "ServiceError":
        return cls(404, "NOT_FOUND", message, details)
