"""Custom jaap exceptions."""


class JaapError(Exception):
    """Base exception for jaap errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class RemoteAPIError(JaapError):
    """Exception raised for remote service communication errors.

    This typically occurs when:
    - The backend is unreachable (connection refused, DNS failure)
    - The backend answers with a non-2xx status
    - The response body is not the expected JSON envelope
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class SheetsAuthError(JaapError):
    """Exception raised when the spreadsheet session cannot be authorized.

    This typically occurs when:
    - Client id or secret are missing
    - The user rejects the consent screen
    - Stored credentials are corrupt and cannot be refreshed
    """

    pass
