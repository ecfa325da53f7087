"""
Emergency Access Models

Token issued to a clinician after a QR scan, and the audit entry recorded
for every issuance.
"""

from datetime import datetime, timedelta
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


READ_ONLY = "read-only"
DEFAULT_EMERGENCY_LEVEL = "critical"

# Opaque to the controller; shape is owned by the snapshot provider
PatientSnapshot = dict[str, Any]


class EmergencyToken(BaseModel):
    """
    Time-boxed, read-only grant to a patient's medical snapshot.

    Frozen after issuance. Becomes unusable once expires_at passes or the
    doctor is revoked; there is no explicit delete.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., min_length=1, description="Opaque random value")
    doctor_id: str = Field(..., min_length=1, description="Requesting clinician")
    patient_masked_id: str = Field(..., min_length=1, description="Pseudonymous patient handle")

    issued_at: datetime
    expires_at: datetime

    access_type: Literal["read-only"] = READ_ONLY
    emergency_level: str = DEFAULT_EMERGENCY_LEVEL

    @model_validator(mode="after")
    def _check_window(self) -> "EmergencyToken":
        if self.expires_at <= self.issued_at:
            raise ValueError("expires_at must be after issued_at")
        return self

    @property
    def window(self) -> timedelta:
        return self.expires_at - self.issued_at

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def remaining(self, now: datetime) -> timedelta:
        """Time left before expiry, never negative."""
        return max(self.expires_at - now, timedelta(0))


class AccessContext(BaseModel):
    """Request metadata captured alongside an issuance."""

    model_config = ConfigDict(frozen=True)

    ip_address: str | None = None
    location: str | None = None


class AccessLogEntry(EmergencyToken):
    """
    Audit record of one emergency token issuance.

    Carries every token field plus where the request came from.
    Entries are append-only.
    """

    ip_address: str | None = None
    location: str | None = None

    @classmethod
    def from_token(
        cls,
        token: EmergencyToken,
        context: AccessContext | None = None,
    ) -> "AccessLogEntry":
        context = context or AccessContext()
        return cls(**token.model_dump(), **context.model_dump())

    def to_token(self) -> EmergencyToken:
        return EmergencyToken(**self.model_dump(exclude={"ip_address", "location"}))
