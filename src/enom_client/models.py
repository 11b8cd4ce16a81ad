"""
Enom Client Models

Data classes for normalized registrar responses.
"""

from dataclasses import dataclass
from datetime import date
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


# =============================================================================
# Lazy Attributes
# =============================================================================

class LazyValue(Generic[T]):
    """
    Attribute holder with explicit resolved/unresolved state.

    Values are memoized once set and never invalidated. A resolved value
    may legitimately be None or False, so callers check is_resolved
    rather than the value itself.
    """

    __slots__ = ("_value", "_resolved")

    def __init__(self) -> None:
        self._value: Optional[T] = None
        self._resolved = False

    @property
    def is_resolved(self) -> bool:
        return self._resolved

    def get(self) -> T:
        if not self._resolved:
            raise LookupError("Value has not been resolved")
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self._resolved = True

    def __repr__(self) -> str:
        if self._resolved:
            return f"LazyValue({self._value!r})"
        return "LazyValue(<unresolved>)"


# =============================================================================
# Response Models
# =============================================================================

@dataclass
class DomainRecord:
    """
    Domain attributes normalized from GetDomainInfo or GetAllDomains.

    nameservers and registration_status are only present when the
    source payload carried extended attributes (services and status).
    """
    name: str
    expiration_date: date
    nameservers: Optional[List[str]] = None
    registration_status: Optional[str] = None

    @property
    def has_extended_attributes(self) -> bool:
        return self.nameservers is not None and self.registration_status is not None


@dataclass
class RenewalResult:
    """Extend response."""
    registry_expiration_date: date
    order_id: Optional[str] = None


@dataclass
class CommandStatus:
    """Generic error count and messages from any response."""
    err_count: int
    errors: List[str]
    rrp_code: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.err_count == 0
