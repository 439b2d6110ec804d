"""
Name: Verification Error Mapping Tests

Responsibilities:
  - Every engine error code maps to exactly one HTTP category
  - errors[0] carries the engine kind and structured details
"""

import pytest

from checkpoint.application.usecases.verification import (
    VerificationError,
    VerificationErrorCode,
)
from checkpoint.crosscutting.error_responses import AppHTTPException, ErrorCode
from checkpoint.interfaces.api.http.error_mapping import (
    raise_verification_error,
    to_http_exception,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "code, status, category",
    [
        (VerificationErrorCode.INVALID_INPUT, 422, ErrorCode.VALIDATION_ERROR),
        (VerificationErrorCode.INVALID_CREDENTIAL, 422, ErrorCode.VALIDATION_ERROR),
        (VerificationErrorCode.PARTICIPANT_NOT_FOUND, 404, ErrorCode.NOT_FOUND),
        (VerificationErrorCode.ACTION_NOT_FOUND, 404, ErrorCode.NOT_FOUND),
        (VerificationErrorCode.EVENT_NOT_FOUND, 404, ErrorCode.NOT_FOUND),
        (VerificationErrorCode.VERIFICATION_NOT_FOUND, 404, ErrorCode.NOT_FOUND),
        (VerificationErrorCode.VERIFIER_NOT_FOUND, 401, ErrorCode.UNAUTHORIZED),
        (VerificationErrorCode.PAYMENT_REQUIRED, 409, ErrorCode.CONFLICT),
        (VerificationErrorCode.ALREADY_VERIFIED, 409, ErrorCode.CONFLICT),
        (VerificationErrorCode.ACTION_INACTIVE, 409, ErrorCode.CONFLICT),
        (VerificationErrorCode.ALREADY_REVERTED, 409, ErrorCode.CONFLICT),
        (VerificationErrorCode.EVENT_MISMATCH, 403, ErrorCode.FORBIDDEN),
        (VerificationErrorCode.EVENT_NOT_STARTED, 403, ErrorCode.FORBIDDEN),
        (VerificationErrorCode.PERMISSION_DENIED, 403, ErrorCode.FORBIDDEN),
        (VerificationErrorCode.NOT_IMPLEMENTED, 501, ErrorCode.NOT_IMPLEMENTED),
        (VerificationErrorCode.PERSISTENCE_ERROR, 503, ErrorCode.DATABASE_ERROR),
    ],
)
def test_code_to_transport_category(code, status, category):
    exc = to_http_exception(VerificationError(code=code, message="boom"))

    assert exc.status_code == status
    assert exc.code == category
    assert exc.detail == "boom"
    assert exc.errors == [{"kind": code.value}]


def test_every_code_is_mapped():
    for code in VerificationErrorCode:
        exc = to_http_exception(VerificationError(code=code, message="x"))
        assert exc.code != ErrorCode.INTERNAL_ERROR


def test_details_are_merged_after_kind():
    error = VerificationError(
        code=VerificationErrorCode.PAYMENT_REQUIRED,
        message="Payment required. Current status: unpaid",
        details={"payment_status": "unpaid"},
    )

    with pytest.raises(AppHTTPException) as exc_info:
        raise_verification_error(error)

    assert exc_info.value.errors == [
        {"kind": "PAYMENT_REQUIRED", "payment_status": "unpaid"}
    ]
