# Overview: Dashboard figures computed from the ledger's in-memory collections.

from __future__ import annotations

from ..models import ITEM_STATUS_AVAILABLE, ITEM_STATUS_SOLD, VALID_PAYMENT_METHODS
from saree_pos.validation import to_amount
from .ledger_service import Ledger


def dashboard_summary(ledger: Ledger) -> dict:
    """
    Counts and revenue for the exhibition dashboard.

    Revenue is the sum of recorded sale prices, so returned items (whose
    sales were erased) no longer contribute.
    """
    items = ledger.list_items()
    sales = ledger.list_sales()

    by_method = {method: 0 for method in VALID_PAYMENT_METHODS}
    for sale in sales:
        by_method[sale.paymentMethod] = to_amount(by_method.get(sale.paymentMethod, 0) + sale.salePrice)

    return {
        "total_items": len(items),
        "available_count": sum(1 for i in items if i.status == ITEM_STATUS_AVAILABLE),
        "sold_count": sum(1 for i in items if i.status == ITEM_STATUS_SOLD),
        "sales_count": len(sales),
        "revenue": to_amount(sum(sale.salePrice for sale in sales)),
        "revenue_by_payment_method": by_method,
        "stock_value": to_amount(sum(i.listPrice for i in items if i.status == ITEM_STATUS_AVAILABLE)),
    }
