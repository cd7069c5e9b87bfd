"""Error Hierarchy — status classification and the kind → outcome table.

Invariants:
    - Every ErrorKind has exactly one HttpOutcome
    - Redirect kinds carry a location; page kinds do not
    - BulkImportError inherits the failing row's kind
"""

import pytest

from gui.core.errors import (
    ERROR_OUTCOMES, AuthenticationError, BulkImportError, ErrorKind,
    LoginFailedError, MalformedDataError, NoCookieError, SDKError,
    SDKErrorKind, UnsupportedFileError, classify_status,
)


@pytest.mark.parametrize("status,data_plane,kind", [
    (401, False, ErrorKind.AUTHENTICATION),
    (403, False, ErrorKind.UNAUTHORIZED_ACCESS),
    (403, True, ErrorKind.PERMISSION_DENIED),
    (400, False, ErrorKind.MALFORMED_DATA),
    (415, False, ErrorKind.MALFORMED_DATA),
    (422, False, ErrorKind.MALFORMED_DATA),
    (404, False, ErrorKind.BACKEND_UNAVAILABLE),
    (500, False, ErrorKind.BACKEND_UNAVAILABLE),
    (None, False, ErrorKind.BACKEND_UNAVAILABLE),
])
def test_classify_status(status, data_plane, kind):
    assert classify_status(status, data_plane) == kind


def test_every_kind_has_an_outcome():
    assert set(ERROR_OUTCOMES) == set(ErrorKind)


@pytest.mark.parametrize("error,status,location", [
    (NoCookieError(), 302, "/login"),
    (LoginFailedError(), 302, "/login"),
    (AuthenticationError(), 303, "/refresh_token"),
    (MalformedDataError(), 400, None),
    (SDKError(SDKErrorKind.FETCH_FAILED, 403), 403, None),
    (SDKError(SDKErrorKind.FETCH_FAILED, None), 503, None),
])
def test_outcomes(error, status, location):
    assert error.http_status == status
    assert error.outcome.location == location


def test_unsupported_file_is_malformed():
    err = UnsupportedFileError("users.txt")
    assert err.kind == ErrorKind.MALFORMED_DATA
    assert err.code == "UNSUPPORTED_FILE"
    assert "users.txt" in err.message


def test_sdk_error_message_includes_backend_detail():
    err = SDKError(SDKErrorKind.CREATION_FAILED, 409, "entity already exists")
    assert err.message == "failed to create entity in the db: entity already exists"
    assert err.to_response()["status"] == 503


def test_bulk_import_error_takes_cause_kind():
    cause = MalformedDataError("missing identity")
    err = BulkImportError(cause, row=2, total=3, created=["u1"])

    assert err.kind == ErrorKind.MALFORMED_DATA
    assert err.http_status == 400
    assert err.row == 2
    assert err.created == ["u1"]
    assert "row 2 of 3" in err.message
