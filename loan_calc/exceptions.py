"""Exceptions raised by the loan calculator."""

from typing import Dict, Optional


class LoanCalcError(Exception):
    """Base exception for loan calculator errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(LoanCalcError, ValueError):
    """Raised when user supplied loan parameters are invalid.

    ``errors`` maps each offending field name to its message. Every invalid
    field is reported, not only the first one found.
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid loan parameters: {fields}", self.errors)

    def __str__(self):
        return "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
