"""
Custom assertions and verification helpers for tests.
"""

from typing import Any

from clinicops.domains.treatments.domain.entities.patient_treatment import PatientTreatment


def assert_error_envelope(body: dict[str, Any], status_code: int, code: str | None = None) -> None:
    """
    Assert that a response body is the standard error envelope.

    Args:
        body: Decoded JSON response
        status_code: Expected HTTP status
        code: Expected machine-readable error code, if any
    """
    assert body["error"] is True, "Error envelope must set error=True"
    assert body["status_code"] == status_code
    assert isinstance(body["message"], str) and body["message"], "Error envelope needs a message"
    if code is not None:
        assert body["code"] == code, f"Expected code {code}, got {body.get('code')}"


def assert_single_active(treatments: list[PatientTreatment], now) -> PatientTreatment:
    """
    Assert that exactly one of `treatments` is active at `now` and return it.
    """
    active = [t for t in treatments if t.is_active(now)]
    assert len(active) == 1, f"Expected one active treatment, found {len(active)}: {[t.id for t in active]}"
    return active[0]
