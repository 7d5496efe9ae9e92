"""
Standard exit codes for upforgrabs commands.

The scheduler running these commands (GitHub Actions) treats the
inconclusive code as neither success nor failure.
"""

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors

# Application-specific exit codes (sysexits.h values)
MISSING_INPUT = 66       # Required run-time input is absent (EX_NOINPUT)
INCONCLUSIVE = 78        # Stopped early by the GitHub API rate limit
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class RateLimitExhausted(CommandError):
    """Raised when the GitHub API budget for this run has run out."""
    def __init__(self, message: str = "This script is currently rate-limited by the GitHub API"):
        super().__init__(message, INCONCLUSIVE)


class MissingInputError(CommandError):
    """Raised when a required run-time input (file, env var) is absent."""
    def __init__(self, message: str):
        super().__init__(message, MISSING_INPUT)


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, GENERAL_ERROR)
