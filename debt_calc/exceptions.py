"""Exceptions raised by the debt calculator."""

from typing import Optional


class DebtCalcError(Exception):
    """Base exception for all debt calculator errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class InvalidInput(DebtCalcError, ValueError):
    """Raised when a calculation receives a value outside its domain."""

    def __init__(self, field: str, value: object, reason: str):
        super().__init__(f"Invalid {field}: {reason}", {field: value})
        self.field = field
        self.value = value


class NoConvergence(DebtCalcError):
    """Raised when the implied interest rate cannot be determined."""

    def __init__(self, principal, installment_count, installment_amount):
        details = {
            'principal': principal,
            'installment_count': installment_count,
            'installment_amount': installment_amount,
        }
        super().__init__("Interest rate could not be determined", details)


class InsufficientPayment(DebtCalcError):
    """Raised when an installment payment does not cover accruing interest."""

    def __init__(self, payment, interest_due):
        details = {
            'payment': payment,
            'interest_due': interest_due,
        }
        message = f"Payment {payment} does not cover the interest due ({interest_due})"
        super().__init__(message, details)
        self.payment = payment
        self.interest_due = interest_due
