"""Emergency Access Errors"""
from datetime import datetime


class EmergencyAccessError(Exception):
    """Base class for emergency access failures."""
    pass


class DoctorNotAuthorized(EmergencyAccessError):
    """Doctor failed the authorization check at issuance."""

    def __init__(self, doctor_id: str):
        self.doctor_id = doctor_id
        super().__init__(f"Doctor {doctor_id!r} not authorized for emergency access")


class TokenExpired(EmergencyAccessError):
    """Emergency token is past its expiry."""

    def __init__(self, expires_at: datetime):
        self.expires_at = expires_at
        super().__init__(f"Emergency access token expired at {expires_at.isoformat()}")


class DoctorAuthorizationRevoked(EmergencyAccessError):
    """Doctor is no longer active at verification time."""

    def __init__(self, doctor_id: str):
        self.doctor_id = doctor_id
        super().__init__(f"Doctor {doctor_id!r} authorization revoked")


class PatientNotFound(EmergencyAccessError):
    """Snapshot provider has no record for the masked id."""

    def __init__(self, patient_masked_id: str):
        self.patient_masked_id = patient_masked_id
        super().__init__(f"No patient record for {patient_masked_id!r}")


class MalformedScanCode(EmergencyAccessError):
    """Scanned code does not carry a patient handle."""

    def __init__(self, scanned_code: str):
        self.scanned_code = scanned_code
        super().__init__(f"Cannot extract a patient id from scanned code {scanned_code!r}")


class TokenNotRecognized(EmergencyAccessError):
    """Token was not issued by this controller, or was altered."""
    pass


class CollaboratorTimeout(EmergencyAccessError):
    """An external collaborator did not answer in time."""

    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} timed out after {timeout}s")


class AccessLogWriteError(EmergencyAccessError):
    """Issuance aborted because the audit entry could not be persisted."""
    pass


class SecureRandomUnavailable(EmergencyAccessError):
    """No cryptographic randomness and the insecure fallback is disabled."""
    pass
