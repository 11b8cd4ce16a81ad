"""
Enom Client Toolkit

Python client for the Enom reseller API.
"""

__version__ = "1.0.0"

from enom_client.client import ClientConfig, EnomClient
from enom_client.domain import Domain
from enom_client.models import CommandStatus, DomainRecord, LazyValue, RenewalResult
from enom_client.exceptions import (
    EnomError,
    EnomConnectionError,
    CommandNotFound,
    InvalidCredentials,
    InterfaceError,
    DateParseError,
    InvalidNameServerCount,
    InvalidDomainName,
)

__all__ = [
    # Client
    "ClientConfig",
    "EnomClient",
    # Domain
    "Domain",
    # Models
    "CommandStatus",
    "DomainRecord",
    "LazyValue",
    "RenewalResult",
    # Exceptions
    "EnomError",
    "EnomConnectionError",
    "CommandNotFound",
    "InvalidCredentials",
    "InterfaceError",
    "DateParseError",
    "InvalidNameServerCount",
    "InvalidDomainName",
]
