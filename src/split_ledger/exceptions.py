"""Custom exceptions for SplitLedger."""


class SplitLedgerError(Exception):
    """Base exception for all SplitLedger errors."""

    pass


class ConfigurationError(SplitLedgerError):
    """Raised when configuration is invalid or missing."""

    pass


class LedgerFileError(SplitLedgerError):
    """Raised when a ledger file cannot be read or parsed."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"Could not load ledger from {path}")


class SplitValidationError(SplitLedgerError):
    """Base class for split inputs that cannot produce a valid allocation.

    ``code`` is a stable identifier the expense-creation flow can branch on
    without parsing the message.
    """

    code = "split_validation_error"


class InvalidAmount(SplitValidationError):
    """Raised when the expense amount is not a positive number."""

    code = "invalid_amount"


class InvalidSplitMethod(SplitValidationError):
    """Raised when the split method is not one of equal/exact/percent/shares."""

    code = "invalid_split_method"


class NoParticipants(SplitValidationError):
    """Raised when an expense is split between nobody."""

    code = "no_participants"


class InvalidSplitValue(SplitValidationError):
    """Raised when an exact amount, percentage or share count is not a finite number."""

    code = "invalid_split_value"

    def __init__(self, member_id: str, value):
        self.member_id = member_id
        self.value = value
        super().__init__(f"Split value for {member_id} must be a number (got {value})")


class NegativeSplitValue(SplitValidationError):
    """Raised when an exact amount, percentage or share count is negative."""

    code = "negative_split_value"

    def __init__(self, member_id: str, value, message: str | None = None):
        self.member_id = member_id
        self.value = value
        super().__init__(
            message or f"Split value for {member_id} cannot be negative (got {value})"
        )


class MismatchedSplitTotal(SplitValidationError):
    """Raised when exact split amounts don't add up to the expense total."""

    code = "mismatched_split_total"


class InvalidPercentTotal(SplitValidationError):
    """Raised when split percentages don't add up to 100."""

    code = "invalid_percent_total"


class NoSharesAssigned(SplitValidationError):
    """Raised when every share count is zero."""

    code = "no_shares_assigned"
