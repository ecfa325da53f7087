"""QR-triggered emergency access to patient medical snapshots"""
from sanjeevani.access.models import AccessContext, AccessLogEntry, EmergencyToken, PatientSnapshot
from sanjeevani.access.collaborators import (
    CredentialChecker,
    InMemorySnapshotProvider,
    QRDecoder,
    SeparatorQRDecoder,
    SnapshotProvider,
    StaticCredentialChecker,
)
from sanjeevani.access.tokens import SecureTokenGenerator
from sanjeevani.access.exceptions import (
    AccessLogWriteError,
    CollaboratorTimeout,
    DoctorAuthorizationRevoked,
    DoctorNotAuthorized,
    EmergencyAccessError,
    MalformedScanCode,
    PatientNotFound,
    SecureRandomUnavailable,
    TokenExpired,
    TokenNotRecognized,
)
from sanjeevani.access.emergency import EmergencyAccessController

__all__ = [
    "AccessContext",
    "AccessLogEntry",
    "EmergencyToken",
    "PatientSnapshot",
    "CredentialChecker",
    "QRDecoder",
    "SnapshotProvider",
    "StaticCredentialChecker",
    "SeparatorQRDecoder",
    "InMemorySnapshotProvider",
    "SecureTokenGenerator",
    "EmergencyAccessController",
    "EmergencyAccessError",
    "DoctorNotAuthorized",
    "TokenExpired",
    "DoctorAuthorizationRevoked",
    "PatientNotFound",
    "MalformedScanCode",
    "TokenNotRecognized",
    "CollaboratorTimeout",
    "AccessLogWriteError",
    "SecureRandomUnavailable",
]
