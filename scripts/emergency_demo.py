#!/usr/bin/env python3
"""
Sanjeevani Emergency Access Demo

Walks through the doctor portal flow: scan a patient's QR code, receive an
emergency token, open the patient's snapshot, list recent access logs.

Usage:
    python scripts/emergency_demo.py

    # Or with options
    python scripts/emergency_demo.py --doctor doc1 --qr QR-PAT200 --log-file data/emergency_access.json
"""
import argparse
import asyncio
import json

import structlog

from sanjeevani.access import AccessContext, EmergencyAccessController, EmergencyAccessError
from sanjeevani.audit import InMemoryAccessLogStore, JsonFileAccessLogStore
from sanjeevani.config import get_settings
from sanjeevani.demo import (
    DEMO_DOCTOR_ID,
    DEMO_IP_ADDRESS,
    DEMO_LOCATION,
    demo_credential_checker,
    demo_snapshot_provider,
    qr_code_for,
)
from sanjeevani.observability import configure_logging

logger = structlog.get_logger(__name__)


async def run(doctor_id: str, qr_code: str, log_file: str | None) -> int:
    log_store = JsonFileAccessLogStore(log_file) if log_file else InMemoryAccessLogStore()
    controller = EmergencyAccessController.from_settings(
        demo_credential_checker(),
        demo_snapshot_provider(),
        log_store=log_store,
    )
    context = AccessContext(ip_address=DEMO_IP_ADDRESS, location=DEMO_LOCATION)

    try:
        token = await controller.issue_access(doctor_id, qr_code, context=context)
        snapshot = await controller.verify_and_access(token)
    except EmergencyAccessError as e:
        logger.error("Emergency access failed", error=str(e), kind=type(e).__name__)
        return 1

    print(f"Token for {token.patient_masked_id} valid until {token.expires_at.isoformat()}")
    print(json.dumps(snapshot, indent=2))

    print("\nRecent emergency accesses:")
    for entry in await controller.get_recent_access_logs():
        print(
            f"  {entry.issued_at:%Y-%m-%d %H:%M:%S} "
            f"patient={entry.patient_masked_id} doctor={entry.doctor_id} "
            f"location={entry.location or 'unknown'}"
        )
    return 0


def main():
    parser = argparse.ArgumentParser(description="Emergency access walkthrough")
    parser.add_argument("--doctor", default=DEMO_DOCTOR_ID, help="Doctor id")
    parser.add_argument("--qr", default=qr_code_for("PAT100"), help="Scanned QR code")
    parser.add_argument("--log-file", default=None, help="Persist the access log to this JSON file")
    args = parser.parse_args()

    settings = get_settings().emergency
    configure_logging(settings.log_level, settings.log_format)

    raise SystemExit(asyncio.run(run(args.doctor, args.qr, args.log_file)))


if __name__ == "__main__":
    main()
