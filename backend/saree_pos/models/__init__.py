from .kv import KeyValueEntry
from .inventory import Item, ITEM_STATUS_AVAILABLE, ITEM_STATUS_SOLD
from .sales import Sale, PAYMENT_CASH, PAYMENT_UPI, VALID_PAYMENT_METHODS

__all__ = [
    'KeyValueEntry',
    'Item', 'ITEM_STATUS_AVAILABLE', 'ITEM_STATUS_SOLD',
    'Sale', 'PAYMENT_CASH', 'PAYMENT_UPI', 'VALID_PAYMENT_METHODS',
]
