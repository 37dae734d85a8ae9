"""Tests for row_classifier — entity detection from header signatures."""

import pytest

from app.application.services.row_classifier import (
    EntityType,
    canonical_header,
    classify_row,
    detect_entity_type,
    normalize_fields,
)


class TestDetection:
    """One signature per entity, tried in priority order."""

    def test_client_row(self):
        row = classify_row(2, {"FirstName": "Ana", "LastName": "Gomez", "Email": "ana@example.com"})
        assert row.entity_type == EntityType.CLIENT

    def test_client_needs_only_one_name(self):
        assert detect_entity_type({"LastName": "Gomez", "Email": "ana@example.com"}) == EntityType.CLIENT

    def test_product_row(self):
        row = classify_row(3, {"Name": "Cement 50kg", "UnitPrice": "12.50", "Stock": "40"})
        assert row.entity_type == EntityType.PRODUCT

    def test_product_with_stock_only(self):
        assert detect_entity_type({"Name": "Sand", "Stock": "3"}) == EntityType.PRODUCT

    def test_sale_row(self):
        row = classify_row(4, {"InvoiceNumber": "INV-1", "ClientEmail": "ana@example.com", "Total": "10"})
        assert row.entity_type == EntityType.SALE

    def test_sale_item_row(self):
        row = classify_row(5, {"InvoiceNumber": "INV-1", "ProductName": "Sand", "Quantity": "2"})
        assert row.entity_type == EntityType.SALE_ITEM

    def test_sale_item_by_ids(self):
        assert detect_entity_type({"SalesId": "1", "ProductId": "2", "Quantity": "1"}) == EntityType.SALE_ITEM

    def test_unknown_row(self):
        assert classify_row(6, {"Notes": "hello"}).entity_type == EntityType.UNKNOWN

    def test_client_excluded_by_invoice(self):
        fields = {"FirstName": "Ana", "Email": "ana@example.com", "InvoiceNumber": "INV-1"}
        assert detect_entity_type(fields) != EntityType.CLIENT

    def test_sale_with_product_id_is_not_a_sale(self):
        fields = {"InvoiceNumber": "INV-1", "ClientId": "1", "ProductId": "3", "Quantity": "1"}
        assert detect_entity_type(fields) == EntityType.SALE_ITEM


class TestPresence:
    """Blank values do not count as present."""

    def test_blank_values_are_absent(self):
        fields = {"FirstName": "Ana", "Email": "   ", "Name": "Sand", "UnitPrice": "3"}
        assert detect_entity_type(fields) == EntityType.PRODUCT

    def test_all_blank_is_unknown(self):
        assert detect_entity_type({"FirstName": "", "Email": ""}) == EntityType.UNKNOWN


class TestHeaders:

    @pytest.mark.parametrize("header", ["email", " EMAIL ", "Email"])
    def test_case_insensitive(self, header):
        assert canonical_header(header) == "Email"

    def test_unknown_header_kept(self):
        assert canonical_header(" Colour ") == "Colour"

    def test_normalize_trims_and_drops_blank_headers(self):
        fields = normalize_fields({" firstname ": " Ana ", "": "x", "Stock": None})
        assert fields == {"FirstName": "Ana", "Stock": ""}

    def test_row_accessors(self):
        row = classify_row(7, {"name": "Sand", "unitprice": "3"})
        assert row.row_number == 7
        assert row.get("Name") == "Sand"
        assert row.has("UnitPrice")
        assert not row.has("Stock")
        assert row.get("Stock") == ""
