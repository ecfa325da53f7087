"""
External Collaborators

Interfaces the emergency access controller depends on, plus in-process
implementations for development and tests. Production deployments replace
these with clients for the credential registry and the patient data service.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Mapping

import structlog

from sanjeevani.access.exceptions import MalformedScanCode
from sanjeevani.access.models import PatientSnapshot

logger = structlog.get_logger(__name__)

# Handle the legacy decoder substituted for unreadable codes
PLACEHOLDER_PATIENT_ID = "PAT001"


class CredentialChecker(ABC):
    """
    Answers whether a clinician may use emergency access.

    A False from either method is authoritative.
    """

    @abstractmethod
    async def is_authorized(self, doctor_id: str) -> bool:
        """Whether the doctor may request emergency access at all."""
        pass

    @abstractmethod
    async def is_active(self, doctor_id: str) -> bool:
        """Whether the doctor's authorization is still in force."""
        pass


class QRDecoder(ABC):
    """Maps a scanned code to a patient masked identifier."""

    @abstractmethod
    def decode(self, scanned_code: str) -> str:
        """
        Extract the patient handle.

        Must be deterministic for a given input.

        Raises:
            MalformedScanCode: If no handle can be extracted
        """
        pass


class SnapshotProvider(ABC):
    """Source of masked patient medical summaries."""

    @abstractmethod
    async def get_snapshot(
        self,
        patient_masked_id: str,
        doctor_id: str,
    ) -> PatientSnapshot | None:
        """
        Fetch the snapshot for a patient.

        Args:
            patient_masked_id: Pseudonymous patient handle
            doctor_id: Requesting clinician, for the provider's own audit

        Returns:
            The snapshot, or None if the patient is unknown
        """
        pass


# ==================== DEVELOPMENT IMPLEMENTATIONS ====================


class StaticCredentialChecker(CredentialChecker):
    """
    In-memory credential checker.

    With `authorized=None` every doctor is authorized, matching the portal's
    mock. Revocation only affects `is_active`.
    """

    def __init__(
        self,
        authorized: Iterable[str] | None = None,
        revoked: Iterable[str] = (),
    ):
        self._authorized = set(authorized) if authorized is not None else None
        self._revoked = set(revoked)

    async def is_authorized(self, doctor_id: str) -> bool:
        if self._authorized is None:
            return True
        return doctor_id in self._authorized

    async def is_active(self, doctor_id: str) -> bool:
        return doctor_id not in self._revoked

    def revoke(self, doctor_id: str) -> None:
        self._revoked.add(doctor_id)

    def reinstate(self, doctor_id: str) -> None:
        self._revoked.discard(doctor_id)


class SeparatorQRDecoder(QRDecoder):
    """
    Decodes codes of the form "QR-<id>".

    The handle is the second segment after splitting on `separator`, so
    "QR-PAT100" yields "PAT100". A missing or empty segment is malformed.

    Setting `fallback_id` restores the legacy behavior of substituting a
    fixed placeholder for malformed codes. That can open the wrong patient's
    record; it is known-weak and off by default.
    """

    def __init__(self, separator: str = "-", fallback_id: str | None = None):
        if not separator:
            raise ValueError("separator must be non-empty")
        self.separator = separator
        self.fallback_id = fallback_id

    def decode(self, scanned_code: str) -> str:
        segments = scanned_code.split(self.separator)
        handle = segments[1] if len(segments) > 1 else ""
        if handle:
            return handle

        if self.fallback_id is None:
            raise MalformedScanCode(scanned_code)

        logger.warning(
            "Malformed scan code, substituting placeholder patient",
            placeholder=self.fallback_id,
        )
        return self.fallback_id


class InMemorySnapshotProvider(SnapshotProvider):
    """Snapshot provider backed by a dict of masked id to snapshot."""

    def __init__(self, records: Mapping[str, PatientSnapshot] | None = None):
        self._records: dict[str, PatientSnapshot] = dict(records or {})

    def add(self, patient_masked_id: str, snapshot: PatientSnapshot) -> None:
        self._records[patient_masked_id] = snapshot

    async def get_snapshot(
        self,
        patient_masked_id: str,
        doctor_id: str,
    ) -> PatientSnapshot | None:
        return self._records.get(patient_masked_id)
