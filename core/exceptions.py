"""
Telofy sync exception definitions.

Hierarchy of every known error in the system:
- TelofyError: base class for all expected errors
- ConfigError: configuration file errors
- AuthRequiredError: an operation needs an authenticated session
- ApiError: remote store call failures (NetworkError / ServerError / ParseError)
- SyncInProgressError: a second reconciliation pass was requested mid-pass
"""
from typing import Optional


class TelofyError(Exception):
    """Base exception for Telofy sync.

    Catching this class handles every anticipated failure mode.
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        """
        Args:
            message: error description
            hint: suggested action for the user
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def get_user_message(self) -> str:
        """Return a user-facing error message."""
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class ConfigError(TelofyError):
    """Configuration file error.

    Raised when a config file is malformed or holds illegal values.
    """

    def __init__(self, message: str, config_path: Optional[str] = None):
        hint = f"Check config file: {config_path}" if config_path else "Check config file format"
        super().__init__(message, hint)
        self.config_path = config_path


class AuthRequiredError(TelofyError):
    """The session is not authenticated."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, hint="Sign in with 'telofy-sync login <email>'")


class ApiError(TelofyError):
    """Base class for remote store call failures.

    Carries the endpoint the failing call targeted.
    """

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message, hint)
        self.endpoint = endpoint


class NetworkError(ApiError):
    """The remote store could not be reached."""

    def __init__(self, endpoint: Optional[str] = None):
        super().__init__(
            "Unable to connect to server. Please check your internet connection.",
            endpoint=endpoint,
            hint="Check the API URL and that the server is running",
        )


class ServerError(ApiError):
    """The remote store answered with a non-2xx status."""

    def __init__(self, status: int, message: str, endpoint: Optional[str] = None):
        super().__init__(message, endpoint=endpoint)
        self.status = status
        if status == 401:
            self.hint = "Session expired, sign in again"
        elif status >= 500:
            self.hint = "The server failed, try again later"


class ParseError(ApiError):
    """The response body was malformed or did not match its schema."""

    def __init__(
        self,
        message: str = "Server returned an invalid response. Please try again.",
        endpoint: Optional[str] = None,
    ):
        super().__init__(message, endpoint=endpoint)


class SyncInProgressError(TelofyError):
    """A reconciliation pass is already running on this orchestrator."""

    def __init__(self):
        super().__init__(
            "Sync already in progress",
            hint="Wait for the running sync to finish",
        )
