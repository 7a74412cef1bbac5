"""
Error taxonomy for the pharmacy core.

Every failure a caller can act on is one of three kinds:

- not_found  -> the referenced sale / line / medicine / record does not exist
- validation -> the request is well-formed but breaks a business rule
- duplicate  -> the write would create a second copy of a unique entity

Callers branch on the class (or `kind`) and read structured fields from
`details` (e.g. `available_quantity`) instead of parsing messages. No error is
raised after a partial write: every check runs before the first save.
"""

from __future__ import annotations


class PharmacyError(Exception):
    """Base class for caller-visible failures."""

    kind = "error"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind, **self.details}


class StorageError(Exception):
    """Backing store could not be read or written."""


# =============================================================================
# NOT FOUND
# =============================================================================

class NotFoundError(PharmacyError):
    kind = "not_found"


class SaleNotFound(NotFoundError):
    def __init__(self, sale_id: str):
        super().__init__("Sale not found", {"sale_id": sale_id})


class ItemNotInSale(NotFoundError):
    def __init__(self, sale_id: str, medicine_id: str):
        super().__init__(
            "Item not found in sale",
            {"sale_id": sale_id, "medicine_id": medicine_id},
        )


class MedicineNotFound(NotFoundError):
    def __init__(self, medicine_id: str):
        super().__init__("Medicine not found", {"medicine_id": medicine_id})


class CreditRecordNotFound(NotFoundError):
    def __init__(self, credit_id: str):
        super().__init__("Udhar record not found", {"credit_id": credit_id})


class ExpenseNotFound(NotFoundError):
    def __init__(self, expense_id: str):
        super().__init__("Expense not found", {"expense_id": expense_id})


class UserNotFound(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User not found", {"user_id": user_id})


# =============================================================================
# VALIDATION
# =============================================================================

class ValidationFailure(PharmacyError):
    kind = "validation"


class FullyRefunded(ValidationFailure):
    def __init__(self):
        super().__init__(
            "All items have already been refunded",
            {"available_quantity": 0},
        )

    @property
    def available_quantity(self) -> int:
        return 0


class ExceedsAvailable(ValidationFailure):
    def __init__(self, available_quantity: int, requested_quantity: int):
        super().__init__(
            f"Only {available_quantity} items available for refund",
            {
                "available_quantity": available_quantity,
                "requested_quantity": requested_quantity,
            },
        )

    @property
    def available_quantity(self) -> int:
        return self.details["available_quantity"]


class MissingReason(ValidationFailure):
    def __init__(self, message: str = "Please select a reason for the refund"):
        super().__init__(message)


class EmptyCart(ValidationFailure):
    def __init__(self):
        super().__init__("Add items to cart before checkout")


class InsufficientCash(ValidationFailure):
    def __init__(self, total: float, cash_received: float):
        super().__init__(
            "Cash received is less than total amount",
            {"total": total, "cash_received": cash_received},
        )


class InsufficientStock(ValidationFailure):
    def __init__(self, medicine_id: str, available_stock: int, requested_quantity: int):
        super().__init__(
            f"Only {available_stock} in stock",
            {
                "medicine_id": medicine_id,
                "available_stock": available_stock,
                "requested_quantity": requested_quantity,
            },
        )


class InvalidQuantity(ValidationFailure):
    def __init__(self, quantity):
        super().__init__("Quantity must be a positive whole number", {"quantity": quantity})


class InvalidField(ValidationFailure):
    def __init__(self, field: str, message: str):
        super().__init__(message, {"field": field})


class LastAdminRequired(ValidationFailure):
    def __init__(self):
        super().__init__("Cannot delete the last admin user")


# =============================================================================
# DUPLICATES
# =============================================================================

class DuplicateEntity(PharmacyError):
    kind = "duplicate"


class DuplicateMedicine(DuplicateEntity):
    def __init__(self, name: str, company: str):
        super().__init__(
            "Medicine with same name and company already exists",
            {"name": name, "company": company},
        )


class DuplicateUser(DuplicateEntity):
    def __init__(self, email: str):
        super().__init__("User with this email already exists", {"email": email})
