"""Entity models — Artist, Customer, Commission.

All entities are frozen value objects. Stores hand out fresh instances on
every read and lifecycle transitions return new instances, so callers can
never mutate persisted state by aliasing.

Creation-time validation lives beside the models as plain functions that
collect every problem into a :class:`ValidationResult` instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from commctl.domain.lifecycle import CommissionStatus

UINT64_MAX = 2**64 - 1
DEFAULT_MAX_REVISION_BUDGET = 127


# ---------------------------------------------------------------------------
# Validation result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValidationResult:
    """Result of an entity validation check."""

    valid: bool
    errors: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class Artist(BaseModel):
    """An artist taking commissions at a fixed price and revision budget."""

    model_config = {"frozen": True}

    id: str
    name: str
    price: int = Field(gt=0, le=UINT64_MAX)
    revision_budget: int = Field(ge=0)


class Customer(BaseModel):
    """A customer requesting commissions."""

    model_config = {"frozen": True}

    id: str
    name: str


class Commission(BaseModel):
    """One commission request linking a customer to an artist.

    ``price`` and ``remaining_revisions`` are snapshots taken from the
    artist at creation time and are never re-read from the artist.
    """

    model_config = {"frozen": True}

    id: str
    customer_id: str
    artist_id: str
    price: int = Field(ge=0, le=UINT64_MAX)
    remaining_revisions: int = Field(ge=0)
    artwork_url: str = ""
    status: CommissionStatus = CommissionStatus.PENDING

    @classmethod
    def request(cls, commission_id: str, *, artist: Artist, customer: Customer) -> Commission:
        """Open a new pending commission from *customer* to *artist*."""
        return cls(
            id=commission_id,
            customer_id=customer.id,
            artist_id=artist.id,
            price=artist.price,
            remaining_revisions=artist.revision_budget,
        )


# ---------------------------------------------------------------------------
# Creation validation
# ---------------------------------------------------------------------------


def _check_name(name: str, errors: list[str]) -> None:
    if not name or not name.strip():
        errors.append("name must not be empty")


def validate_artist(
    name: str,
    price: int,
    revision_budget: int,
    *,
    max_revision_budget: int = DEFAULT_MAX_REVISION_BUDGET,
) -> ValidationResult:
    """Check artist creation fields."""
    errors: list[str] = []
    _check_name(name, errors)
    if price <= 0:
        errors.append("price must be greater than zero")
    elif price > UINT64_MAX:
        errors.append(f"price must not exceed {UINT64_MAX}")
    if revision_budget < 0:
        errors.append("revision budget must not be negative")
    elif revision_budget > max_revision_budget:
        errors.append(f"revision budget must not exceed {max_revision_budget}")
    return ValidationResult(valid=not errors, errors=errors)


def validate_customer(name: str) -> ValidationResult:
    """Check customer creation fields."""
    errors: list[str] = []
    _check_name(name, errors)
    return ValidationResult(valid=not errors, errors=errors)
