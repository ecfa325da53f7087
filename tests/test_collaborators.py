import pytest

from sanjeevani.access import (
    InMemorySnapshotProvider,
    MalformedScanCode,
    SeparatorQRDecoder,
    StaticCredentialChecker,
)
from sanjeevani.access.collaborators import PLACEHOLDER_PATIENT_ID


def test_decode_takes_segment_after_separator():
    assert SeparatorQRDecoder().decode("QR-PAT100") == "PAT100"


def test_decode_is_deterministic():
    decoder = SeparatorQRDecoder()
    assert decoder.decode("QR-PAT300") == decoder.decode("QR-PAT300")


def test_decode_only_second_segment():
    assert SeparatorQRDecoder().decode("QR-PAT-100") == "PAT"


@pytest.mark.parametrize("code", ["PAT100", "", "QR-"])
def test_decode_without_handle_is_malformed(code):
    with pytest.raises(MalformedScanCode) as exc_info:
        SeparatorQRDecoder().decode(code)
    assert exc_info.value.scanned_code == code


@pytest.mark.parametrize("code", ["PAT100", "QR-"])
def test_placeholder_fallback_is_known_weak(code):
    # Any unreadable code maps to the same patient
    decoder = SeparatorQRDecoder(fallback_id=PLACEHOLDER_PATIENT_ID)
    assert decoder.decode(code) == "PAT001"


def test_custom_separator():
    assert SeparatorQRDecoder(separator=":").decode("QR:PAT200") == "PAT200"


def test_empty_separator_rejected():
    with pytest.raises(ValueError):
        SeparatorQRDecoder(separator="")


@pytest.mark.asyncio
async def test_open_credential_checker_allows_everyone():
    checker = StaticCredentialChecker()
    assert await checker.is_authorized("anyone") is True
    assert await checker.is_active("anyone") is True


@pytest.mark.asyncio
async def test_revocation_only_affects_status():
    checker = StaticCredentialChecker(authorized=["doc1"], revoked=["doc1"])
    assert await checker.is_authorized("doc1") is True
    assert await checker.is_active("doc1") is False
    assert await checker.is_authorized("doc2") is False


@pytest.mark.asyncio
async def test_snapshot_provider_lookup():
    provider = InMemorySnapshotProvider({"PAT100": {"name": "John Doe"}})
    assert await provider.get_snapshot("PAT100", "doc1") == {"name": "John Doe"}
    assert await provider.get_snapshot("PAT999", "doc1") is None
