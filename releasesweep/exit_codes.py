"""
Standard exit codes for releasesweep.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors

# Application-specific exit codes (64-113 are typically available)
API_ERROR = 65           # GitHub API call failed
CONFIG_ERROR = 66        # Invalid inputs
NETWORK_ERROR = 68       # Network connection failed
AUTH_ERROR = 69          # Authentication/authorization failed
DATA_ERROR = 70          # Data format or validation error
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'ValueError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that carries the exit code the run should end with.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when the inputs are invalid. Always raised before any API call."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class APIError(CommandError):
    """Raised when a GitHub API call fails."""
    def __init__(self, message: str, status: Optional[int] = None, exit_code: int = API_ERROR):
        super().__init__(message, exit_code)
        self.status = status


class AuthenticationError(APIError):
    """Raised when GitHub rejects the token (401/403)."""
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, status=status, exit_code=AUTH_ERROR)
