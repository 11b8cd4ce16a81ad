"""
Enom Client Exceptions

Exception hierarchy for registrar API operations.
"""

from typing import List, Optional


class EnomError(Exception):
    """Base exception for all Enom client errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class EnomConnectionError(EnomError):
    """HTTP transport failure."""
    pass


class CommandNotFound(EnomError):
    """Unknown CLI command."""

    def __init__(self, command: str):
        super().__init__(f"Command not found: {command}. Run 'enom help' for usage.")
        self.command = command


class InvalidCredentials(EnomError):
    """Credentials missing or rejected by the registrar."""

    def __init__(self, message: str = "Please provide a username/password to use the Enom API"):
        super().__init__(message)


class InterfaceError(EnomError):
    """
    Response did not have the expected structure.

    Attributes:
        errors: Error messages reported by the registrar, if any
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = errors or []
        if self.errors:
            message = f"{message}: {', '.join(self.errors)}"
        super().__init__(message)


class DateParseError(InterfaceError, ValueError):
    """Date field is absent or malformed."""
    pass


class InvalidNameServerCount(EnomError, ValueError):
    """Nameserver list outside the registrar's 2..12 bounds."""

    def __init__(self, count: int):
        super().__init__(f"Invalid nameserver count: {count} (must be between 2 and 12)")
        self.count = count


class InvalidDomainName(EnomError, ValueError):
    """Domain name has no recognizable public suffix."""

    def __init__(self, name: str):
        super().__init__(f"Invalid domain name: {name!r}")
        self.name = name
