# Overview: Point-of-sale session; the cart plus the exclusively owned scanner handle.

"""
POS Session

Scan mode owns two transient things: the cart and (at most) one open camera
scanner. Whenever the operator leaves scan mode, switches tab, or a scan
decodes successfully, the scanner is stopped. Stopping is attempted and a
failure is logged, never raised: a stuck camera must not block a sale.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ..models import PAYMENT_CASH, Sale
from .cart_service import Cart, CartResult
from .identifier_service import normalize_code
from .ledger_service import Ledger


logger = logging.getLogger(__name__)


class Scanner(Protocol):
    def stop(self) -> None: ...


class PosSession:
    def __init__(self, ledger: Ledger):
        self.ledger = ledger
        self.cart = Cart()
        self.scanner: Scanner | None = None

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    def add_code(self, raw_code: str) -> CartResult:
        code = normalize_code(raw_code)
        return self.cart.add(self.ledger.get_item(code), code=code)

    def checkout(self, payment_method: str = PAYMENT_CASH) -> list[Sale]:
        return self.ledger.checkout(self.cart, payment_method)

    # ------------------------------------------------------------------
    # Scanner lifecycle
    # ------------------------------------------------------------------

    @property
    def scanning(self) -> bool:
        return self.scanner is not None

    def attach_scanner(self, scanner: Scanner) -> None:
        """Take ownership of a freshly opened scanner, closing any previous one."""
        self.stop_scanner()
        self.scanner = scanner

    def stop_scanner(self) -> None:
        scanner, self.scanner = self.scanner, None
        if scanner is None:
            return
        try:
            scanner.stop()
        except Exception:
            logger.exception("Failed to stop scanner")

    def on_decoded(self, decoded_text: str) -> CartResult:
        """Scanner callback: stage the decoded code and release the camera."""
        try:
            return self.add_code(decoded_text)
        finally:
            self.stop_scanner()

    def switch_mode(self) -> None:
        """Leaving scan mode: drop the cart and release the camera."""
        self.cart.clear()
        self.stop_scanner()
