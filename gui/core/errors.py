"""Error Hierarchy — typed error kinds and the single kind → HTTP outcome table.

Invariants:
    - Every error has a code (str), kind (ErrorKind), severity (ErrorSeverity)
    - http_status / location are derived from ERROR_OUTCOMES, never set ad hoc
    - SDKError derives its kind from the backend status code (classify_status)
    - No internal details or credentials leaked in user-facing messages

Design Decisions:
    - Tagged kind + lookup table instead of error-equality checks at the edge
    - SDKError lives here (not in sdk/) so the transport layer depends on core only
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorKind(str, Enum):
    """Transport-level error kinds. Each maps to exactly one HTTP outcome."""
    NO_COOKIE = "no_cookie"
    LOGIN_FAILED = "login_failed"
    MALFORMED_DATA = "malformed_data"
    MALFORMED_SUBTOPIC = "malformed_subtopic"
    UNAUTHORIZED_ACCESS = "unauthorized_access"
    AUTHENTICATION = "authentication"
    PERMISSION_DENIED = "permission_denied"
    BACKEND_UNAVAILABLE = "backend_unavailable"
    INTERNAL = "internal"


class SDKErrorKind(str, Enum):
    """Which API-client operation family failed."""
    CREATION_FAILED = "failed to create entity in the db"
    LIST_FAILED = "failed to list entities"
    UPDATE_FAILED = "failed to update entity"
    FETCH_FAILED = "failed to fetch entity"
    REMOVAL_FAILED = "failed to remove entity"
    ENABLE_FAILED = "failed to enable client"
    DISABLE_FAILED = "failed to disable client"
    INVALID_TOKEN = "invalid JWT"


@dataclass(frozen=True)
class HttpOutcome:
    """Status code plus optional redirect target."""
    status: int
    location: str | None = None


LOGIN_PATH = "/login"
REFRESH_TOKEN_PATH = "/refresh_token"

ERROR_OUTCOMES: dict[ErrorKind, HttpOutcome] = {
    ErrorKind.NO_COOKIE: HttpOutcome(302, LOGIN_PATH),
    ErrorKind.LOGIN_FAILED: HttpOutcome(302, LOGIN_PATH),
    ErrorKind.MALFORMED_DATA: HttpOutcome(400),
    ErrorKind.MALFORMED_SUBTOPIC: HttpOutcome(400),
    ErrorKind.UNAUTHORIZED_ACCESS: HttpOutcome(403),
    ErrorKind.AUTHENTICATION: HttpOutcome(303, REFRESH_TOKEN_PATH),
    ErrorKind.PERMISSION_DENIED: HttpOutcome(403),
    ErrorKind.BACKEND_UNAVAILABLE: HttpOutcome(503),
    ErrorKind.INTERNAL: HttpOutcome(500),
}

_MALFORMED_STATUSES = frozenset({400, 415, 422})


def classify_status(status_code: int | None, data_plane: bool = False) -> ErrorKind:
    """Map a backend HTTP status (None = unreachable) to an ErrorKind."""
    if status_code == 401:
        return ErrorKind.AUTHENTICATION
    if status_code == 403:
        return (
            ErrorKind.PERMISSION_DENIED if data_plane
            else ErrorKind.UNAUTHORIZED_ACCESS
        )
    if status_code in _MALFORMED_STATUSES:
        return ErrorKind.MALFORMED_DATA
    return ErrorKind.BACKEND_UNAVAILABLE


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    path: str | None = None
    operation: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class GuiError(Exception):
    """Base exception for all GUI service errors."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.severity = severity
        self.context = context or ErrorContext()

    @property
    def outcome(self) -> HttpOutcome:
        return ERROR_OUTCOMES[self.kind]

    @property
    def http_status(self) -> int:
        return self.outcome.status

    def to_response(self) -> dict:
        """Convert to the context dict rendered by error.html."""
        return {
            "code": self.code,
            "message": self.context.user_message or self.message,
            "kind": self.kind.value,
            "status": self.http_status,
            "timestamp": self.context.timestamp.isoformat(),
        }


# ─── Transport Errors ───────────────────────────────────────────

class NoCookieError(GuiError):
    """Required auth cookie is absent or empty."""
    def __init__(self, cookie: str = "token", context: ErrorContext | None = None):
        super().__init__(
            f"failed to read {cookie} cookie", "NO_COOKIE",
            ErrorKind.NO_COOKIE, ErrorSeverity.INFO, context,
        )
        self.cookie = cookie


class LoginFailedError(GuiError):
    """Credentials rejected by the backend."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "failed to login", "LOGIN_FAILED",
            ErrorKind.LOGIN_FAILED, ErrorSeverity.WARNING, context,
        )


class MalformedDataError(GuiError):
    """Request form, JSON body or upload could not be decoded or validated."""
    def __init__(self, message: str = "malformed request data", context: ErrorContext | None = None):
        super().__init__(
            message, "MALFORMED_DATA", ErrorKind.MALFORMED_DATA,
            ErrorSeverity.WARNING, context,
        )


class UnsupportedFileError(MalformedDataError):
    """Upload without a .csv suffix."""
    def __init__(self, filename: str, context: ErrorContext | None = None):
        super().__init__(f"unsupported file type: {filename!r}", context)
        self.code = "UNSUPPORTED_FILE"
        self.filename = filename


class MalformedSubtopicError(GuiError):
    """Publish subtopic contains an invalid wildcard segment."""
    def __init__(self, subtopic: str, context: ErrorContext | None = None):
        super().__init__(
            f"malformed subtopic: {subtopic!r}", "MALFORMED_SUBTOPIC",
            ErrorKind.MALFORMED_SUBTOPIC, ErrorSeverity.WARNING, context,
        )


class UnauthorizedAccessError(GuiError):
    """Backend refused the operation for this user."""
    def __init__(self, message: str = "missing or invalid credentials provided", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED_ACCESS", ErrorKind.UNAUTHORIZED_ACCESS,
            ErrorSeverity.WARNING, context,
        )


class AuthenticationError(GuiError):
    """Access token expired or invalid; the client should refresh it."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "failed to perform authentication over the entity",
            "AUTHENTICATION", ErrorKind.AUTHENTICATION,
            ErrorSeverity.INFO, context,
        )


class PermissionDeniedError(GuiError):
    """Data-plane adapter denied the thing key."""
    def __init__(self, message: str = "permission denied", context: ErrorContext | None = None):
        super().__init__(
            message, "PERMISSION_DENIED", ErrorKind.PERMISSION_DENIED,
            ErrorSeverity.WARNING, context,
        )


# ─── API Client Errors ──────────────────────────────────────────

class SDKError(GuiError):
    """Backend call returned an unexpected status or could not be made."""
    def __init__(
        self,
        op_kind: SDKErrorKind,
        status_code: int | None = None,
        message: str = "",
        data_plane: bool = False,
        context: ErrorContext | None = None,
    ):
        detail = f"{op_kind.value}: {message}" if message else op_kind.value
        kind = classify_status(status_code, data_plane)
        severity = (
            ErrorSeverity.CRITICAL if kind == ErrorKind.BACKEND_UNAVAILABLE
            else ErrorSeverity.ERROR
        )
        super().__init__(detail, "SDK_ERROR", kind, severity, context)
        self.op_kind = op_kind
        self.status_code = status_code
        self.backend_message = message


class BulkImportError(GuiError):
    """Sequential bulk import stopped at a failing row; earlier rows remain."""
    def __init__(
        self,
        cause: GuiError,
        row: int,
        total: int,
        created: list,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"bulk import stopped at row {row} of {total} "
            f"({len(created)} created): {cause.message}",
            "BULK_IMPORT_FAILED", cause.kind, cause.severity, context,
        )
        self.cause = cause
        self.row = row
        self.total = total
        self.created = created
