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


class HierarchyOrderError(ValidationError):
    """Account list is not sorted parent-before-descendants."""


class AccumulationCancelled(DomainError):
    """A transaction accumulation was superseded before it finished."""


def account_order_violation(name: str, expected_parent: str) -> str:
    """Return message for an account listed before its ancestor."""
    return f"Account '{name}' must come after its ancestor '{expected_parent}'"


def template_not_found(name: str) -> str:
    """Return message for missing template by name."""
    return f"Template '{name}' not found"


def no_template_matched() -> str:
    """Return message when no template matches the given text."""
    return "No template matched the given text"
