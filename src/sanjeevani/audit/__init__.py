"""Append-only emergency access log"""
from sanjeevani.audit.store import (
    AccessLogStore,
    AccessLogStoreError,
    InMemoryAccessLogStore,
    JsonFileAccessLogStore,
)

__all__ = ["AccessLogStore", "AccessLogStoreError", "InMemoryAccessLogStore", "JsonFileAccessLogStore"]
