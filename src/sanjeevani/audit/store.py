"""
Access Log Storage

Append-only audit trail of emergency token issuances.
Entries are never edited or deleted here; retention is an external concern.
"""

from abc import ABC, abstractmethod
from pathlib import Path
import asyncio
import json
import os
import tempfile

import structlog
from pydantic import ValidationError

from sanjeevani.access.models import AccessLogEntry

logger = structlog.get_logger(__name__)

LOG_SCHEMA_VERSION = 1
# Storage key the browser portal wrote its log under
DEFAULT_SLOT = "emergencyLogs"

# Version 0 field names, as the browser portal stored them
_LEGACY_FIELDS = {
    "doctorId": "doctor_id",
    "patientMaskedId": "patient_masked_id",
    "timestamp": "issued_at",
    "expiresAt": "expires_at",
    "accessType": "access_type",
    "emergencyLevel": "emergency_level",
    "ipAddress": "ip_address",
}


def migrate_legacy_entry(item: dict) -> dict:
    """Rename version 0 keys. Millisecond epoch timestamps are left to pydantic."""
    migrated = {_LEGACY_FIELDS.get(key, key): value for key, value in item.items()}
    if migrated.get("doctor_id") is not None:
        migrated["doctor_id"] = str(migrated["doctor_id"])
    return migrated


class AccessLogStoreError(Exception):
    """Access log could not be read or written."""
    pass


class AccessLogStore(ABC):
    """
    Append-only access log.

    Implementations must serialize appends so concurrent writers lose nothing.
    """

    @abstractmethod
    async def append(self, entry: AccessLogEntry) -> None:
        """Persist one entry. Raises AccessLogStoreError on failure."""
        pass

    @abstractmethod
    async def entries(self) -> list[AccessLogEntry]:
        """All entries in insertion order."""
        pass

    async def query(
        self,
        doctor_id: str | None = None,
        patient_masked_id: str | None = None,
        limit: int | None = None,
    ) -> list[AccessLogEntry]:
        """Filter the log, keeping insertion order. `limit` keeps the newest."""
        results = await self.entries()

        if doctor_id:
            results = [e for e in results if e.doctor_id == doctor_id]
        if patient_masked_id:
            results = [e for e in results if e.patient_masked_id == patient_masked_id]

        if limit is not None:
            results = results[-limit:] if limit > 0 else []
        return results


class InMemoryAccessLogStore(AccessLogStore):
    """In-memory access log for development and tests."""

    def __init__(self):
        self._entries: list[AccessLogEntry] = []
        self._lock = asyncio.Lock()

    async def append(self, entry: AccessLogEntry) -> None:
        async with self._lock:
            self._entries.append(entry)

    async def entries(self) -> list[AccessLogEntry]:
        return list(self._entries)


class JsonFileAccessLogStore(AccessLogStore):
    """
    Access log persisted as JSON in a file.

    The file is an object of named slots, like a key/value host storage.
    The log lives under one slot as:

        {"version": 1, "entries": [...]}

    A bare list under the slot is the unversioned legacy layout; it is read
    as version 0 and rewritten in the current layout on the next append.
    """

    def __init__(self, path: str | Path, slot: str = DEFAULT_SLOT):
        self.path = Path(path)
        self.slot = slot
        self._lock = asyncio.Lock()

    # ==================== FILE I/O ====================

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise AccessLogStoreError(f"Cannot read access log {self.path}: {e}") from e

        if not isinstance(document, dict):
            raise AccessLogStoreError(f"Access log {self.path} is not a JSON object")
        return document

    def _write_document(self, document: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2)
                os.replace(tmp, self.path)
            except BaseException:
                os.unlink(tmp)
                raise
        except OSError as e:
            raise AccessLogStoreError(f"Cannot write access log {self.path}: {e}") from e

    # ==================== SLOT CODEC ====================

    def _load_raw_entries(self, document: dict) -> list[dict]:
        payload = document.get(self.slot)
        if payload is None:
            return []

        if isinstance(payload, list):
            version, raw = 0, payload
        elif isinstance(payload, dict):
            version, raw = payload.get("version"), payload.get("entries", [])
        else:
            raise AccessLogStoreError(f"Unrecognized access log payload in slot {self.slot!r}")

        if version not in (0, LOG_SCHEMA_VERSION):
            raise AccessLogStoreError(f"Unsupported access log version {version!r}")
        if version == 0:
            logger.info("Migrating legacy access log", slot=self.slot, count=len(raw))
            raw = [migrate_legacy_entry(item) for item in raw]
        return raw

    def _parse(self, raw: list[dict]) -> list[AccessLogEntry]:
        try:
            return [AccessLogEntry.model_validate(item) for item in raw]
        except ValidationError as e:
            raise AccessLogStoreError(f"Corrupt access log entry in {self.path}: {e}") from e

    # ==================== STORE API ====================

    async def append(self, entry: AccessLogEntry) -> None:
        async with self._lock:
            document = await asyncio.to_thread(self._read_document)
            raw = self._load_raw_entries(document)
            raw.append(entry.model_dump(mode="json"))
            document[self.slot] = {"version": LOG_SCHEMA_VERSION, "entries": raw}
            await asyncio.to_thread(self._write_document, document)

    async def entries(self) -> list[AccessLogEntry]:
        async with self._lock:
            document = await asyncio.to_thread(self._read_document)
            return self._parse(self._load_raw_entries(document))
