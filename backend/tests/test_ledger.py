"""
Ledger invariants: code uniqueness, sell/return state machine, checkout batch
law, persistence requests and factory reset.
"""

import pytest

from saree_pos.models import ITEM_STATUS_AVAILABLE, ITEM_STATUS_SOLD, PAYMENT_CASH, PAYMENT_UPI
from saree_pos.services.cart_service import Cart, PRICE_ALTERNATE, PRICE_CUSTOM
from saree_pos.services.exceptions import (
    AlreadyAvailableError,
    AlreadySoldError,
    DuplicateCodeError,
    IncorrectPinError,
    InvalidPaymentMethodError,
    ItemNotFoundError,
    NothingToExportError,
)
from saree_pos.services.ledger_service import Ledger, COLLECTION_INVENTORY, COLLECTION_SALES

from conftest import MemoryStore, TEST_PIN


class TestAddItem:
    def test_code_is_upper_cased_and_item_available(self, ledger):
        item = ledger.add_item({"code": "  sar101 ", "name": "Red Floral Silk", "listPrice": "500"})

        assert item.code == "SAR101"
        assert item.status == ITEM_STATUS_AVAILABLE
        assert item.listPrice == 500
        assert item.dateAdded.endswith("Z")
        assert ledger.get_item("sar101") is item

    def test_missing_fields_get_defaults(self, ledger):
        item = ledger.add_item({"code": "SAR102", "costPrice": "abc"})

        assert item.shopName == "Unknown Shop"
        assert item.shopCode == "N/A"
        assert item.costPrice == 0
        assert item.listPrice == 0
        assert item.altPrice == 0

    def test_duplicate_code_fails_and_leaves_collection_unchanged(self, ledger, add_saree):
        add_saree("SAR101")
        before = [i.to_dict() for i in ledger.items]

        with pytest.raises(DuplicateCodeError):
            ledger.add_item({"code": "sar101", "name": "Other"})

        assert [i.to_dict() for i in ledger.items] == before

    def test_codes_stay_unique_across_many_adds(self, ledger):
        for code in ["A1", "a1", "B2", " b2", "C3", "A1 "]:
            try:
                ledger.add_item({"code": code})
            except DuplicateCodeError:
                pass

        codes = [i.code for i in ledger.items]
        assert sorted(codes) == ["A1", "B2", "C3"]

    def test_newest_first(self, ledger, add_saree):
        add_saree("FIRST")
        add_saree("SECOND")
        assert [i.code for i in ledger.items] == ["SECOND", "FIRST"]

    def test_blank_code_is_generated_from_type(self, ledger):
        item = ledger.add_item({"name": "Plain", "type": "Cotton", "listPrice": 900})
        assert item.code.startswith("SAR-COT-")
        assert len(item.code.split("-")[-1]) == 4

    def test_add_requests_inventory_persist(self, ledger, memory_store):
        ledger.add_item({"code": "SAR101"})
        assert memory_store.data["saree_inventory"][0]["code"] == "SAR101"


class TestSellAndReturn:
    def test_second_sell_is_already_sold(self, ledger, add_saree):
        add_saree("SAR101")
        ledger.sell("SAR101")

        with pytest.raises(AlreadySoldError):
            ledger.sell("sar101")

    def test_sell_unknown_code(self, ledger):
        with pytest.raises(ItemNotFoundError):
            ledger.sell("NOPE")

    def test_sell_produces_checkout_shaped_sale(self, ledger, add_saree):
        add_saree("SAR101", list_price=500)
        sale = ledger.sell("SAR101", PAYMENT_UPI)

        assert set(sale.to_dict()) == {"id", "sareeCode", "salePrice", "paymentMethod", "saleDate"}
        assert sale.sareeCode == "SAR101"
        assert sale.salePrice == 500
        assert sale.paymentMethod == PAYMENT_UPI

    def test_return_restores_stock_and_erases_sales(self, ledger, add_saree):
        add_saree("SAR101")
        add_saree("SAR102")
        ledger.sell("SAR101")
        ledger.sell("SAR102")

        item = ledger.process_return("sar101")

        assert item.status == ITEM_STATUS_AVAILABLE
        assert ledger.list_sales("SAR101") == []
        assert [s.sareeCode for s in ledger.sales] == ["SAR102"]

        with pytest.raises(AlreadyAvailableError):
            ledger.process_return("SAR101")

    def test_return_unknown_code(self, ledger):
        with pytest.raises(ItemNotFoundError):
            ledger.process_return("NOPE")

    def test_return_of_available_item(self, ledger, add_saree):
        add_saree("SAR101")
        with pytest.raises(AlreadyAvailableError):
            ledger.process_return("SAR101")

    def test_removed_item_keeps_its_sales(self, ledger, add_saree):
        add_saree("SAR101")
        ledger.sell("SAR101")

        ledger.remove_item("SAR101")

        assert ledger.get_item("SAR101") is None
        assert len(ledger.list_sales("SAR101")) == 1


class TestCheckout:
    def test_concrete_list_price_cash_scenario(self, ledger, add_saree):
        """
        SCENARIO: SAR101 (list 500, alternate 400) sold at list price for cash
        EXPECTED: one 500 Cash sale, item sold, available count down by one
        """
        add_saree("SAR101", list_price=500, alt_price=400)
        available_before = len(ledger.list_items(ITEM_STATUS_AVAILABLE))
        sales_before = len(ledger.sales)

        cart = Cart()
        assert cart.add(ledger.get_item("SAR101")).ok
        sales = ledger.checkout(cart, PAYMENT_CASH)

        assert len(sales) == 1
        assert sales[0].salePrice == 500
        assert sales[0].paymentMethod == "Cash"
        assert ledger.get_item("SAR101").status == ITEM_STATUS_SOLD
        assert len(ledger.list_items(ITEM_STATUS_AVAILABLE)) == available_before - 1
        assert len(ledger.sales) == sales_before + 1

    def test_batch_of_n_items(self, ledger, add_saree):
        codes = ["A1", "B2", "C3", "D4"]
        for code in codes:
            add_saree(code)
        cart = Cart()
        for code in codes:
            cart.add(ledger.get_item(code))

        sales = ledger.checkout(cart, PAYMENT_UPI)

        assert len(sales) == 4
        assert sorted(s.sareeCode for s in sales) == sorted(codes)
        assert all(ledger.get_item(c).status == ITEM_STATUS_SOLD for c in codes)
        assert len({s.saleDate for s in sales}) == 1
        assert {s.paymentMethod for s in sales} == {PAYMENT_UPI}
        assert cart.is_empty()

    def test_price_tiers(self, ledger, add_saree):
        add_saree("A1", list_price=500, alt_price=400)
        add_saree("B2", list_price=800, alt_price=600)
        add_saree("C3", list_price=900, alt_price=700)
        cart = Cart()
        for code in ["A1", "B2", "C3"]:
            cart.add(ledger.get_item(code))
        cart.update_selection(1, PRICE_ALTERNATE)
        cart.update_selection(2, PRICE_CUSTOM, "not-a-number")

        sales = ledger.checkout(cart, PAYMENT_CASH)

        prices = {s.sareeCode: s.salePrice for s in sales}
        assert prices == {"A1": 500, "B2": 600, "C3": 0}

    def test_new_sales_are_prepended(self, ledger, add_saree):
        add_saree("OLD")
        add_saree("NEW")
        ledger.sell("OLD")
        ledger.sell("NEW")
        assert [s.sareeCode for s in ledger.sales] == ["NEW", "OLD"]

    def test_empty_cart_changes_nothing(self, ledger, add_saree, memory_store):
        add_saree("SAR101")
        writes_before = list(memory_store.writes)

        assert ledger.checkout(Cart(), PAYMENT_CASH) == []
        assert ledger.sales == []
        assert memory_store.writes == writes_before

    def test_empty_cart_ignores_payment_method(self, ledger):
        assert ledger.checkout(Cart(), "Card") == []
        assert ledger.sales == []

    def test_stale_line_aborts_whole_batch(self, ledger, add_saree):
        add_saree("A1")
        add_saree("B2")
        cart = Cart()
        cart.add(ledger.get_item("A1"))
        cart.add(ledger.get_item("B2"))
        ledger.sell("B2")

        with pytest.raises(AlreadySoldError):
            ledger.checkout(cart, PAYMENT_CASH)

        assert ledger.get_item("A1").status == ITEM_STATUS_AVAILABLE
        assert len(ledger.sales) == 1
        assert len(cart) == 2

    def test_invalid_payment_method(self, ledger, add_saree):
        add_saree("A1")
        cart = Cart()
        cart.add(ledger.get_item("A1"))

        with pytest.raises(InvalidPaymentMethodError):
            ledger.checkout(cart, "Card")
        assert ledger.get_item("A1").status == ITEM_STATUS_AVAILABLE

    def test_checkout_persists_both_collections(self, ledger, add_saree, memory_store):
        add_saree("A1")
        ledger.sell("A1")

        assert memory_store.data["saree_inventory"][0]["status"] == "sold"
        assert memory_store.data["saree_sales"][0]["sareeCode"] == "A1"


class TestPersistence:
    def test_no_writes_before_load(self, ledger_config):
        store = MemoryStore()
        ledger = Ledger(ledger_config, store)

        ledger.add_item({"code": "EARLY"})

        assert store.writes == []
        assert "saree_inventory" not in store.data

    def test_failed_writes_do_not_block_selling(self, ledger_config, caplog):
        store = MemoryStore(fail_writes=True)
        ledger = Ledger(ledger_config, store)
        ledger.load()

        ledger.add_item({"code": "A1", "listPrice": 100})
        sale = ledger.sell("A1")

        assert sale.salePrice == 100
        assert ledger.get_item("A1").status == ITEM_STATUS_SOLD
        assert "Failed to persist" in caplog.text

    def test_failed_load_starts_empty_and_loaded(self, ledger_config, caplog):
        ledger = Ledger(ledger_config, MemoryStore(fail_reads=True))
        ledger.load()

        assert ledger.loaded
        assert ledger.items == []
        assert "Database load error" in caplog.text

    def test_unreadable_sales_keep_stored_inventory(self, ledger_config, caplog):
        """
        SCENARIO: inventory reads fine, the sales read fails
        EXPECTED: inventory is loaded, and later writes never touch sales
        """
        store = MemoryStore(
            {
                "saree_inventory": [{"id": "1", "code": "A"}, {"id": "2", "code": "B"}],
                "saree_sales": [{"id": "9", "sareeCode": "X", "salePrice": 100}],
            },
            unreadable={"saree_sales"},
        )
        ledger = Ledger(ledger_config, store)
        ledger.load()

        assert ledger.loaded
        assert [i.code for i in ledger.items] == ["A", "B"]
        assert "Database load error" in caplog.text

        ledger.add_item({"code": "C"})
        ledger.sell("A")

        assert [d["code"] for d in store.data["saree_inventory"]] == ["C", "A", "B"]
        assert store.data["saree_sales"] == [{"id": "9", "sareeCode": "X", "salePrice": 100}]
        assert "saree_sales" not in store.writes

    def test_unreadable_inventory_is_never_overwritten(self, ledger_config):
        store = MemoryStore({"saree_inventory": [{"id": "1", "code": "A"}]}, unreadable={"saree_inventory"})
        ledger = Ledger(ledger_config, store)
        ledger.load()

        ledger.add_item({"code": "C"})

        assert store.data["saree_inventory"] == [{"id": "1", "code": "A"}]
        assert store.writes == []

    def test_factory_reset_rewrites_unreadable_collections(self, ledger_config):
        store = MemoryStore({"saree_sales": [{"id": "9"}]}, unreadable={"saree_sales"})
        ledger = Ledger(ledger_config, store)
        ledger.load()

        ledger.factory_reset(TEST_PIN)
        ledger.add_item({"code": "C"})
        ledger.sell("C")

        assert [s["sareeCode"] for s in store.data["saree_sales"]] == ["C"]

    def test_load_reads_existing_collections(self, ledger_config):
        store = MemoryStore({
            "saree_inventory": [{"id": "1", "code": "SAR101", "status": "sold", "listPrice": 500}],
            "saree_sales": [{"id": "9", "sareeCode": "SAR101", "salePrice": 500, "paymentMethod": "UPI", "saleDate": "x"}],
        })
        ledger = Ledger(ledger_config, store)
        ledger.load()

        assert ledger.get_item("SAR101").status == ITEM_STATUS_SOLD
        assert ledger.sales[0].paymentMethod == PAYMENT_UPI
        assert store.writes == []


class TestExport:
    def test_export_inventory_filename_and_header(self, ledger, add_saree):
        add_saree("SAR101")
        filename, text = ledger.export(COLLECTION_INVENTORY)

        assert filename.startswith("Inventory_Master_")
        assert filename.endswith(".csv")
        assert "/" not in filename
        assert text.splitlines()[0].startswith('"id","code","name"')

    def test_export_empty_sales(self, ledger):
        with pytest.raises(NothingToExportError):
            ledger.export(COLLECTION_SALES)


class TestFactoryReset:
    def test_wrong_pin_changes_nothing(self, ledger, add_saree):
        add_saree("SAR101")
        with pytest.raises(IncorrectPinError):
            ledger.factory_reset("0000")
        with pytest.raises(IncorrectPinError):
            ledger.factory_reset("not-a-pin")
        assert len(ledger.items) == 1

    def test_reset_clears_memory_store_and_legacy(self, ledger, add_saree, memory_store, legacy_store):
        legacy_store.set("saree_inventory", "[]")
        legacy_store.set("saree_sales", "[]")
        add_saree("SAR101")
        ledger.sell("SAR101")

        ledger.factory_reset(str(TEST_PIN))

        assert ledger.items == [] and ledger.sales == []
        assert memory_store.data["saree_inventory"] == []
        assert memory_store.data["saree_sales"] == []
        assert legacy_store.get("saree_inventory") is None
        assert legacy_store.get("saree_sales") is None
