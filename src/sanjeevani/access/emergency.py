"""
Emergency Access Controller

Gates and audits QR-triggered access to a patient's medical snapshot.

Flow:
1. A doctor scans a patient's QR code -> `issue_access` returns a
   read-only token valid for the emergency window, and logs the issuance.
2. The portal hands the token back -> `verify_and_access` checks expiry and
   the doctor's current status, then returns the patient snapshot.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable
import asyncio

import structlog

from sanjeevani.access.collaborators import (
    CredentialChecker,
    QRDecoder,
    SeparatorQRDecoder,
    SnapshotProvider,
)
from sanjeevani.access.exceptions import (
    AccessLogWriteError,
    CollaboratorTimeout,
    DoctorAuthorizationRevoked,
    DoctorNotAuthorized,
    PatientNotFound,
    TokenExpired,
    TokenNotRecognized,
)
from sanjeevani.access.models import (
    DEFAULT_EMERGENCY_LEVEL,
    READ_ONLY,
    AccessContext,
    AccessLogEntry,
    EmergencyToken,
    PatientSnapshot,
)
from sanjeevani.access.tokens import SecureTokenGenerator
from sanjeevani.audit.store import (
    AccessLogStore,
    AccessLogStoreError,
    InMemoryAccessLogStore,
    JsonFileAccessLogStore,
)
from sanjeevani.config import get_settings
from sanjeevani.observability.logging import redact_token

logger = structlog.get_logger(__name__)

DEFAULT_EMERGENCY_WINDOW = timedelta(minutes=15)
DEFAULT_COLLABORATOR_TIMEOUT = 5.0

# Bound on regenerations when a fresh value collides with an issued one
_MAX_TOKEN_ATTEMPTS = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EmergencyAccessController:
    """
    Issues and verifies emergency access tokens.

    Args:
        credentials: Doctor authorization and status checks
        decoder: Scanned code -> patient masked id
        snapshots: Patient snapshot source
        log_store: Append-only issuance log
        emergency_window: Token lifetime
        collaborator_timeout: Seconds allowed per collaborator call
        token_generator: Callable returning a fresh token value
        clock: Callable returning the current aware datetime
        verify_issued_tokens: Reject tokens this controller did not issue
    """

    def __init__(
        self,
        credentials: CredentialChecker,
        decoder: QRDecoder,
        snapshots: SnapshotProvider,
        log_store: AccessLogStore,
        *,
        emergency_window: timedelta = DEFAULT_EMERGENCY_WINDOW,
        collaborator_timeout: float = DEFAULT_COLLABORATOR_TIMEOUT,
        token_generator: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
        verify_issued_tokens: bool = False,
        default_context: AccessContext | None = None,
    ):
        if emergency_window <= timedelta(0):
            raise ValueError("emergency_window must be positive")
        if collaborator_timeout <= 0:
            raise ValueError("collaborator_timeout must be positive")

        self.credentials = credentials
        self.decoder = decoder
        self.snapshots = snapshots
        self.log_store = log_store
        self.emergency_window = emergency_window
        self.collaborator_timeout = collaborator_timeout
        self.verify_issued_tokens = verify_issued_tokens
        self.default_context = default_context or AccessContext()

        self._generate_token = token_generator or SecureTokenGenerator()
        self._clock = clock or _utcnow

        # token value -> issued token, live tokens only
        self._issued: dict[str, EmergencyToken] = {}

    @classmethod
    def from_settings(
        cls,
        credentials: CredentialChecker,
        snapshots: SnapshotProvider,
        *,
        decoder: QRDecoder | None = None,
        log_store: AccessLogStore | None = None,
        **kwargs,
    ) -> "EmergencyAccessController":
        """Build a controller from `get_settings()`; explicit kwargs win."""
        settings = get_settings().emergency

        if decoder is None:
            decoder = SeparatorQRDecoder(fallback_id=settings.qr_fallback_patient_id)
        if log_store is None:
            if settings.log_store_path:
                log_store = JsonFileAccessLogStore(
                    settings.log_store_path, slot=settings.log_store_slot
                )
            else:
                log_store = InMemoryAccessLogStore()

        kwargs.setdefault("emergency_window", settings.emergency_window)
        kwargs.setdefault("collaborator_timeout", settings.collaborator_timeout_seconds)
        kwargs.setdefault("verify_issued_tokens", settings.verify_issued_tokens)
        kwargs.setdefault(
            "token_generator",
            SecureTokenGenerator(
                allow_insecure_fallback=settings.allow_insecure_token_fallback
            ),
        )
        kwargs.setdefault(
            "default_context",
            AccessContext(
                ip_address=settings.default_ip_address,
                location=settings.default_location,
            ),
        )

        return cls(credentials, decoder, snapshots, log_store, **kwargs)

    # ==================== ISSUANCE ====================

    async def issue_access(
        self,
        doctor_id: str,
        scanned_code: str,
        context: AccessContext | None = None,
        emergency_level: str = DEFAULT_EMERGENCY_LEVEL,
    ) -> EmergencyToken:
        """
        Grant a doctor time-boxed read-only access to the scanned patient.

        Args:
            doctor_id: Requesting clinician
            scanned_code: Raw string from the QR workflow
            context: Request metadata for the audit entry
            emergency_level: Triage tag carried on the token

        Returns:
            The issued token, already recorded in the access log

        Raises:
            DoctorNotAuthorized: Doctor failed the authorization check
            MalformedScanCode: No patient handle in the scanned code
            AccessLogWriteError: Audit entry could not be persisted
            CollaboratorTimeout: Credential check did not answer in time
        """
        if not doctor_id:
            raise ValueError("doctor_id must be non-empty")
        if not isinstance(scanned_code, str):
            raise TypeError("scanned_code must be a string")

        authorized = await self._call(
            "credential check", self.credentials.is_authorized(doctor_id)
        )
        if not authorized:
            logger.warning("Emergency access denied", doctor_id=doctor_id)
            raise DoctorNotAuthorized(doctor_id)

        patient_masked_id = self.decoder.decode(scanned_code)

        now = self._clock()
        self._prune_expired(now)
        token = EmergencyToken(
            token=self._new_token_value(),
            doctor_id=doctor_id,
            patient_masked_id=patient_masked_id,
            issued_at=now,
            expires_at=now + self.emergency_window,
            access_type=READ_ONLY,
            emergency_level=emergency_level,
        )

        entry = AccessLogEntry.from_token(token, context or self.default_context)
        try:
            await self.log_store.append(entry)
        except AccessLogStoreError as e:
            logger.error(
                "Emergency access log write failed, token withheld",
                doctor_id=doctor_id,
                patient=patient_masked_id,
                error=str(e),
            )
            raise AccessLogWriteError(str(e)) from e

        self._issued[token.token] = token

        logger.warning(
            "Emergency access granted",
            token=redact_token(token.token),
            doctor_id=doctor_id,
            patient=patient_masked_id,
            expires_at=token.expires_at.isoformat(),
            location=entry.location,
        )
        return token

    # ==================== VERIFICATION ====================

    async def verify_and_access(self, token: EmergencyToken) -> PatientSnapshot:
        """
        Exchange a live token for the patient's medical snapshot.

        The token may be used any number of times until it expires.

        Raises:
            TokenExpired: Current time is past expires_at
            TokenNotRecognized: Unknown token while verify_issued_tokens is on
            DoctorAuthorizationRevoked: Doctor is no longer active
            PatientNotFound: Provider has no record for the patient
            CollaboratorTimeout: A collaborator did not answer in time
        """
        if token.is_expired(self._clock()):
            logger.info(
                "Emergency token expired",
                token=redact_token(token.token),
                doctor_id=token.doctor_id,
            )
            raise TokenExpired(token.expires_at)

        if self.verify_issued_tokens and self._issued.get(token.token) != token:
            logger.warning("Unrecognized emergency token", doctor_id=token.doctor_id)
            raise TokenNotRecognized("Token was not issued by this controller")

        active = await self._call(
            "doctor status check", self.credentials.is_active(token.doctor_id)
        )
        if not active:
            logger.warning("Emergency access revoked", doctor_id=token.doctor_id)
            raise DoctorAuthorizationRevoked(token.doctor_id)

        snapshot = await self._call(
            "patient snapshot fetch",
            self.snapshots.get_snapshot(token.patient_masked_id, token.doctor_id),
        )
        if snapshot is None:
            raise PatientNotFound(token.patient_masked_id)

        logger.info(
            "Emergency snapshot served",
            doctor_id=token.doctor_id,
            patient=token.patient_masked_id,
        )
        return snapshot

    # ==================== AUDIT ====================

    async def get_access_logs(self) -> list[AccessLogEntry]:
        """All issuance records, oldest first."""
        return await self.log_store.entries()

    async def get_recent_access_logs(self, limit: int = 5) -> list[AccessLogEntry]:
        """The newest `limit` issuance records, oldest first."""
        return await self.log_store.query(limit=limit)

    # ==================== HELPERS ====================

    def _prune_expired(self, now: datetime) -> None:
        expired = [value for value, t in self._issued.items() if t.is_expired(now)]
        for value in expired:
            del self._issued[value]

    def _new_token_value(self) -> str:
        for _ in range(_MAX_TOKEN_ATTEMPTS):
            value = self._generate_token()
            if value not in self._issued:
                return value
            logger.error("Token collision, regenerating")
        raise RuntimeError("Token generator keeps returning issued values")

    async def _call(self, operation: str, awaitable: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.collaborator_timeout)
        except asyncio.TimeoutError as e:
            logger.error(
                "Collaborator call timed out",
                operation=operation,
                timeout=self.collaborator_timeout,
            )
            raise CollaboratorTimeout(operation, self.collaborator_timeout) from e
