"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class IntegrityViolation(DomainError):
    """A write referenced a row that does not exist; the atomic unit was rolled back."""


def not_found(entity: str, entity_id: int | str) -> str:
    """Return message for a missing entity."""
    return f"{entity} not found: {entity_id}"


def unknown_account_class(account_class: int) -> str:
    """Return message for an account class code outside the known set."""
    return f"Unknown account class {account_class}"
