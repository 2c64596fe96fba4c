"""
Domain exceptions for the stall ledger.

Every error carries a stable ``code`` so routes and the CLI can classify the
outcome without string matching.
"""


class LedgerError(ValueError):
    """Base class for recoverable ledger failures."""

    code = "LEDGER_ERROR"


class DuplicateCodeError(LedgerError):
    code = "DUPLICATE_CODE"

    def __init__(self, item_code: str):
        super().__init__(f"Code {item_code} already exists in inventory")
        self.item_code = item_code


class ItemNotFoundError(LedgerError):
    code = "NOT_FOUND"

    def __init__(self, item_code: str):
        super().__init__(f"Code {item_code} not found in inventory")
        self.item_code = item_code


class AlreadySoldError(LedgerError):
    code = "ALREADY_SOLD"

    def __init__(self, item_code: str):
        super().__init__(f"{item_code} is already marked as SOLD")
        self.item_code = item_code


class AlreadyAvailableError(LedgerError):
    code = "ALREADY_AVAILABLE"

    def __init__(self, item_code: str):
        super().__init__(f"{item_code} is already available in stock")
        self.item_code = item_code


class InvalidPaymentMethodError(LedgerError):
    code = "INVALID_PAYMENT_METHOD"


class IncorrectPinError(LedgerError):
    code = "INCORRECT_PIN"

    def __init__(self):
        super().__init__("Incorrect PIN")


class NothingToExportError(LedgerError):
    code = "NOTHING_TO_EXPORT"


class ImportValidationError(LedgerError):
    code = "IMPORT_ERROR"


class MissingRequiredColumnError(ImportValidationError):
    code = "MISSING_REQUIRED_COLUMN"

    def __init__(self, column: str):
        super().__init__(f"Import file must contain a {column} column")
        self.column = column


class StorageUnavailable(RuntimeError):
    """Raised (on a future) when the durable store cannot be read or written."""

    code = "STORAGE_UNAVAILABLE"
