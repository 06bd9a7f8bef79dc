"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity or currency does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class InvalidDate(ValidationError):
    """Calendar date components are out of range or malformed."""


class InvalidArgument(ValidationError):
    """A ledger entry field violates its invariant."""


class TagLimitExceeded(ValidationError):
    """Entry already carries the maximum number of tags."""


class UnsupportedCurrency(ValidationError):
    """Currency is not present in the exchange rate table."""


class DuplicateId(ConflictError):
    """An entry with the same id already exists in the account."""


class DuplicateName(ConflictError):
    """An account with the same name already exists."""


class DuplicateTag(ConflictError):
    """Tag is already attached to the entry."""


class UnknownCurrency(NotFoundError):
    """Conversion referenced a currency missing from the rate table."""


class UnknownAccount(NotFoundError):
    """Account name is not present in the ledger."""


class LastAccountError(DependencyError):
    """The last remaining account cannot be deleted."""


class PersistenceError(DomainError):
    """Stored data could not be read or written."""


class RateSourceError(DomainError):
    """External rate source could not deliver rates."""


def account_not_found(name: str) -> str:
    """Return message for missing account."""
    return f"Account '{name}' not found"


def duplicate_account_name(name: str) -> str:
    """Return message for an account name that is already taken."""
    return f"Account with name '{name}' already exists"


def duplicate_entry_id(entry_id: int, account_name: str) -> str:
    """Return message for duplicate entry id inside one account."""
    return f"Entry {entry_id} already exists in account '{account_name}'"


def unknown_currency(code: str) -> str:
    """Return message for a currency missing from the rate table."""
    return f"Currency '{code}' is not in the exchange rate table"


def last_account(name: str) -> str:
    """Return message when deleting would leave the ledger empty."""
    return f"Cannot delete account '{name}': it is the only account left"
