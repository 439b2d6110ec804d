"""
Unit tests for verification metrics (outcomes + HTTP + DB).
"""

import pytest

from checkpoint.crosscutting.metrics import (
    _normalize_endpoint,
    _status_bucket,
    get_metrics_response,
    observe_db_query_duration,
    record_request_metrics,
    record_revocation_outcome,
    record_verification_outcome,
)

pytestmark = pytest.mark.unit


def _payload() -> str:
    body, _ = get_metrics_response()
    return body.decode("utf-8")


def test_outcome_metrics_are_exposed():
    record_verification_outcome("success")
    record_verification_outcome("ALREADY_VERIFIED")
    record_revocation_outcome("ALREADY_REVERTED")

    payload = _payload()

    assert "checkpoint_verifications_total" in payload
    assert 'outcome="already_verified"' in payload
    assert "checkpoint_revocations_total" in payload
    assert 'outcome="already_reverted"' in payload


def test_request_metrics_use_low_cardinality_labels():
    record_request_metrics(
        "/v1/participants/3f2b8c1e-1111-4a2b-9c3d-0123456789ab/verifications",
        "GET",
        404,
        0.02,
    )

    payload = _payload()

    assert 'endpoint="/v1/participants/{id}/verifications"' in payload
    assert 'status="4xx"' in payload


def test_db_query_duration_is_exposed():
    observe_db_query_duration("select", 0.003)
    assert 'kind="SELECT"' in _payload()


def test_content_type_is_prometheus_text():
    _, content_type = get_metrics_response()
    assert content_type.startswith("text/plain")


@pytest.mark.parametrize(
    "code, bucket", [(200, "2xx"), (409, "4xx"), (503, "5xx"), (302, "other")]
)
def test_status_bucket(code, bucket):
    assert _status_bucket(code) == bucket


def test_numeric_ids_are_normalized():
    assert _normalize_endpoint("/v1/events/42/verifications") == "/v1/events/{id}/verifications"
