"""
Standard exit codes and error types for trenza commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import List, Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
DISCOVERY_ERROR = 64     # Scanning the root for repositories failed
INIT_ERROR = 65          # Destination repository could not be created
BRANCH_ERROR = 66        # Merge ref could not be resolved in a source repository
REMOTE_ERROR = 67        # remote add / fetch / merge failed in the destination
RELOCATION_ERROR = 68    # Moving merged content into its alias directory failed
CONFIG_ERROR = 69        # Configuration file error
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': GENERAL_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Command errors carry their own code; anything else is looked up by
    class name.
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


def format_error_chain(exc: BaseException) -> List[str]:
    """
    Render an exception and its ``__cause__`` chain as message lines.

    The first line is the outermost context, e.g.
    ``failed to merge repositories``; each following line is prefixed
    with ``Caused by:``.
    """
    lines = []
    current: Optional[BaseException] = exc
    seen = set()
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        message = str(current) or current.__class__.__name__
        lines.append(message if not lines else f"Caused by: {message}")
        current = current.__cause__
    return lines


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class JoinError(CommandError):
    """Raised by the join service to add context to a failing stage."""


class DiscoveryError(CommandError):
    """Raised when the root cannot be scanned for repositories."""
    def __init__(self, message: str):
        super().__init__(message, DISCOVERY_ERROR)


class InitializationError(CommandError):
    """Raised when the destination exists already or `git init` fails."""
    def __init__(self, message: str):
        super().__init__(message, INIT_ERROR)


class BranchResolutionError(CommandError):
    """Raised when no merge ref can be determined for a repository."""
    def __init__(self, message: str):
        super().__init__(message, BRANCH_ERROR)


class RemoteError(CommandError):
    """Raised when registering, fetching or merging a source repository fails."""
    def __init__(self, message: str):
        super().__init__(message, REMOTE_ERROR)


class RelocationError(CommandError):
    """Raised when merged content cannot be moved into its alias directory."""
    def __init__(self, message: str):
        super().__init__(message, RELOCATION_ERROR)


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)
