from .inventory import MedicineRow
from .sales import SaleRow, RefundRow
from .ledger import CreditRow, ExpenseRow
from .settings import SettingsRow, UserRow

# Record-store collection name -> table model
COLLECTION_MODELS = {
    "medicines": MedicineRow,
    "sales": SaleRow,
    "refunds": RefundRow,
    "udhar": CreditRow,
    "expenses": ExpenseRow,
    "settings": SettingsRow,
    "users": UserRow,
}

__all__ = [
    'MedicineRow', 'SaleRow', 'RefundRow', 'CreditRow', 'ExpenseRow',
    'SettingsRow', 'UserRow', 'COLLECTION_MODELS',
]
