"""
Sanjeevani Emergency Access

Time-boxed, read-only emergency access to a patient's medical summary:
- QR-triggered token issuance for clinicians
- Expiry and doctor-status gated verification
- Append-only audit log of every issuance
"""

from sanjeevani.access import (
    AccessContext,
    AccessLogEntry,
    EmergencyAccessController,
    EmergencyToken,
)
from sanjeevani.config import get_settings

__version__ = "0.1.0"

__all__ = [
    "AccessContext",
    "AccessLogEntry",
    "EmergencyAccessController",
    "EmergencyToken",
    "get_settings",
]
