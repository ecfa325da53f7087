"""
Demo patients and collaborators for the doctor portal walkthrough.

Masked ids follow the portal's QR scheme: patient PAT100 is scanned as
"QR-PAT100".
"""

from sanjeevani.access.collaborators import InMemorySnapshotProvider, StaticCredentialChecker
from sanjeevani.access.models import PatientSnapshot


DEMO_DOCTOR_ID = "doc1"
DEMO_IP_ADDRESS = "192.168.1.1"
DEMO_LOCATION = "Apollo Hospital, Delhi"

DEMO_PATIENTS: dict[str, PatientSnapshot] = {
    "PAT100": {
        "id": "PAT100",
        "name": "John Doe",
        "age": 32,
        "bloodGroup": "O+",
        "allergies": ["Penicillin", "Peanuts"],
        "medications": ["Lisinopril 10mg", "Metformin 500mg"],
        "conditions": ["Hypertension", "Type 2 Diabetes"],
        "lastVisit": "2024-01-15",
        "emergencyContacts": ["Jane Doe: +91 9876543210"],
    },
    "PAT200": {
        "id": "PAT200",
        "name": "Sarah Smith",
        "age": 45,
        "bloodGroup": "A-",
        "allergies": ["Penicillin"],
        "medications": ["Metformin"],
        "conditions": ["Diabetes"],
        "lastVisit": "2024-01-10",
        "emergencyContacts": [],
    },
    "PAT300": {
        "id": "PAT300",
        "name": "Michael Chen",
        "age": 28,
        "bloodGroup": "B+",
        "allergies": [],
        "medications": ["Albuterol"],
        "conditions": ["Asthma"],
        "lastVisit": "2024-01-05",
        "emergencyContacts": [],
    },
    "PAT400": {
        "id": "PAT400",
        "name": "Emma Wilson",
        "age": 65,
        "bloodGroup": "AB+",
        "allergies": [],
        "medications": ["Aspirin"],
        "conditions": ["Cardiac"],
        "lastVisit": "2023-12-20",
        "emergencyContacts": [],
    },
    "PAT500": {
        "id": "PAT500",
        "name": "Robert Brown",
        "age": 52,
        "bloodGroup": "O-",
        "allergies": [],
        "medications": ["Ibuprofen"],
        "conditions": ["Arthritis"],
        "lastVisit": "2023-12-15",
        "emergencyContacts": [],
    },
}


def qr_code_for(patient_masked_id: str) -> str:
    return f"QR-{patient_masked_id}"


def demo_snapshot_provider() -> InMemorySnapshotProvider:
    return InMemorySnapshotProvider(DEMO_PATIENTS)


def demo_credential_checker() -> StaticCredentialChecker:
    return StaticCredentialChecker(authorized=[DEMO_DOCTOR_ID])
