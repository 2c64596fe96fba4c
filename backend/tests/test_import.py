"""
Bulk import: delimiter detection, column resolution, row planning and the
ledger's all-or-nothing commit.
"""

import pytest

from saree_pos.models import ITEM_STATUS_AVAILABLE, ITEM_STATUS_SOLD
from saree_pos.services.exceptions import ImportValidationError, MissingRequiredColumnError
from saree_pos.services.import_service import (
    decode_table,
    detect_delimiter,
    parse_table,
    plan_import,
    resolve_columns,
)


class TestParsing:
    def test_pipe_wins_when_present(self):
        assert detect_delimiter("code|mrp\nA|1") == "|"
        assert detect_delimiter("code,mrp\nA,1") == ","

    def test_quoted_cells_with_doubled_quotes(self):
        header, rows = parse_table('code,shop name\nA1,"Lakshmi ""Silks"", Pune"\n\n')

        assert header == ["code", "shop name"]
        assert rows == [["A1", 'Lakshmi "Silks", Pune']]

    def test_quoted_cells_with_pipe_delimiter(self):
        header, rows = parse_table('product_code|shop_name\nA1|"Kala | Co"\n')
        assert rows == [["A1", "Kala | Co"]]

    def test_empty_input(self):
        with pytest.raises(ImportValidationError):
            parse_table("   \n")


class TestColumnResolution:
    def test_synonyms_are_case_insensitive(self):
        columns = resolve_columns(["Shop Name", "SHOPCODE", "Product Code", "Cost Price", "MRP", "ASP60%", "Stock Status"])

        assert columns.shop_name == 0
        assert columns.shop_code == 1
        assert columns.code == 2
        assert columns.cost_price == 3
        assert columns.list_price == 4
        assert columns.alt_price == 5
        assert columns.status == 6

    def test_short_headers(self):
        columns = resolve_columns(["code", "cp", "asp"])
        assert (columns.code, columns.cost_price, columns.alt_price) == (0, 1, 2)
        assert columns.list_price is None
        assert columns.status is None

    def test_list_price_header_must_be_exact(self):
        columns = resolve_columns(["code", "MRP (old)", "mrp"])
        assert columns.list_price == 2

        assert resolve_columns(["code", "mrp_2023"]).list_price is None

    def test_code_column_is_required(self):
        with pytest.raises(MissingRequiredColumnError):
            resolve_columns(["shop_name", "mrp"])


class TestPlanning:
    def test_duplicates_within_batch_and_against_stock(self):
        columns = resolve_columns(["code", "mrp"])
        rows = [["a1", "100"], ["A1", "200"], ["B2", "300"], ["", "5"], ['"C3"', "400"]]

        plan = plan_import(rows, columns, existing_codes={"B2"})

        assert [i.code for i in plan.items] == ["A1", "C3"]
        assert plan.items[0].listPrice == 100
        assert plan.duplicates == 2
        assert plan.blank == 1

    def test_defaults_for_absent_columns(self):
        plan = plan_import([["A1"]], resolve_columns(["code"]), existing_codes=())
        item = plan.items[0]

        assert item.shopName == "Unknown Shop"
        assert item.shopCode == "N/A"
        assert (item.costPrice, item.listPrice, item.altPrice) == (0, 0, 0)
        assert item.status == ITEM_STATUS_AVAILABLE


class TestLedgerImport:
    def test_status_text_scenario(self, ledger):
        """
        SCENARIO: CODE_A has no status value, CODE_B says "Sold - floor 2"
        EXPECTED: CODE_A available, CODE_B sold
        """
        text = "product_code,status\nCODE_A,\nCODE_B,Sold - floor 2\n"

        plan = ledger.import_table(text)

        assert plan.added == 2
        assert ledger.get_item("CODE_A").status == ITEM_STATUS_AVAILABLE
        assert ledger.get_item("CODE_B").status == ITEM_STATUS_SOLD

    def test_batch_prepended_in_reverse_row_order(self, ledger, add_saree):
        add_saree("EXISTING")

        ledger.import_table("code\nR1\nR2\nR3\n")

        assert [i.code for i in ledger.items] == ["R3", "R2", "R1", "EXISTING"]

    def test_same_code_twice_counts_one_duplicate(self, ledger):
        plan = ledger.import_table("code|mrp\nDUP|100\nDUP|200\n")

        assert plan.added == 1
        assert plan.duplicates == 1
        assert len([i for i in ledger.items if i.code == "DUP"]) == 1

    def test_code_in_stock_adds_nothing(self, ledger, add_saree):
        add_saree("SAR101", list_price=500)

        plan = ledger.import_table("code,mrp\nsar101,999\n")

        assert plan.added == 0
        assert plan.duplicates == 1
        assert ledger.get_item("SAR101").listPrice == 500

    def test_missing_code_column_imports_nothing(self, ledger, memory_store):
        with pytest.raises(MissingRequiredColumnError):
            ledger.import_table("shop_name,mrp\nKala,100\n")

        assert ledger.items == []
        assert "saree_inventory" not in memory_store.data

    def test_import_persists_once(self, ledger, memory_store):
        ledger.import_table("code\nA\nB\nC\n")

        assert memory_store.writes.count("saree_inventory") == 1
        assert [d["code"] for d in memory_store.data["saree_inventory"]] == ["C", "B", "A"]


class TestDecoding:
    def test_bom_is_dropped(self):
        assert decode_table(b"\xef\xbb\xbfcode\nA1\n") == "code\nA1\n"

    def test_non_utf8_bytes(self):
        with pytest.raises(ImportValidationError, match="UTF-8"):
            decode_table("code,name\nA1,Café\n".encode("cp1252"))
