"""Error types surfaced by the API.

Each error knows the HTTP status it maps to and renders as
``{"error": ..., "details": ...}``.
"""


class InboxLensError(Exception):
    """Base class for errors returned to API callers."""

    status_code = 500

    def __init__(self, error: str, details: str | None = None):
        super().__init__(error if details is None else f"{error}: {details}")
        self.error = error
        self.details = details

    def to_dict(self) -> dict[str, str]:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class DatabaseNotConfiguredError(InboxLensError):
    """No connection string was provided."""

    def __init__(self):
        super().__init__(
            "Database configuration missing. Please set DATABASE_URL in the environment or .env"
        )


class QueryFailedError(InboxLensError):
    """A query or the processing of its results failed."""


class MalformedResponseError(InboxLensError):
    """A stored response value could not be decoded as JSON."""

    def __init__(self, sender_id: str, created_at: object, reason: str):
        super().__init__(
            "Malformed response payload",
            f"row sender_id={sender_id} created_at={created_at}: {reason}",
        )
        self.sender_id = sender_id
        self.created_at = created_at


class TraceNotFoundError(InboxLensError):
    status_code = 404


class MissingParameterError(InboxLensError):
    status_code = 400

    def __init__(self, *names: str):
        super().__init__(f"Missing required parameters: {' and '.join(names)}")
        self.names = names
