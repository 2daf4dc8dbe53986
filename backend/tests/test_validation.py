# Overview: Pytest coverage for request payload validation and payment details.

import pytest

from backoffice.payment_details import PaymentDetail
from backoffice.validation import (
    MAX_QUANTITY,
    InsufficientStockError,
    ValidationError,
    coerce_int,
    parse_document_header,
    parse_line_items,
    required_id,
)
from conftest import document_payload, line


class TestCoerceInt:
    @pytest.mark.parametrize("value,expected", [(5, 5), ("12", 12), (" -3 ", -3)])
    def test_accepts(self, value, expected):
        assert coerce_int(value, "quantity") == expected

    @pytest.mark.parametrize("value", [True, 1.5, "1e3", "2.0", "", None, "abc"])
    def test_rejects(self, value):
        with pytest.raises(ValidationError):
            coerce_int(value, "quantity")


class TestLineItems:
    def test_keeps_array_order(self):
        lines = parse_line_items({"products": [line(1, 3, 2), line(1, 2, 1)]})
        assert [item.key for item in lines] == [(1, 3), (1, 2)]

    def test_empty_products(self):
        with pytest.raises(ValidationError):
            parse_line_items({"products": []})

    def test_missing_products(self):
        with pytest.raises(ValidationError):
            parse_line_items({})

    def test_zero_quantity(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_line_items({"products": [line(1, 2, 0)]})
        assert "products[0].quantity" in str(exc_info.value)

    def test_repeated_variant(self):
        with pytest.raises(ValidationError):
            parse_line_items({"products": [line(1, 2, 1), line(1, 2, 4)]})

    def test_missing_field_names_the_line(self):
        bad = line(1, 3, 1)
        del bad["gst_rate_bps"]
        with pytest.raises(ValidationError) as exc_info:
            parse_line_items({"products": [line(1, 2, 1), bad]})
        assert "products[1].gst_rate_bps" in str(exc_info.value)

    @pytest.mark.parametrize("field", ["unit", "carton", "quantity"])
    def test_counts_are_capped(self, field):
        item = line(1, 2, 1)
        item[field] = MAX_QUANTITY + 1
        with pytest.raises(ValidationError) as exc_info:
            parse_line_items({"products": [item]})
        assert f"products[0].{field} cannot exceed" in str(exc_info.value)

    def test_quantity_at_cap(self):
        item = line(1, 2, 1)
        item["quantity"] = MAX_QUANTITY
        assert parse_line_items({"products": [item]})[0].quantity == MAX_QUANTITY

    def test_oversized_id(self):
        with pytest.raises(ValidationError):
            parse_line_items({"products": [line(2**63, 2, 1)]})


class TestDocumentHeader:
    def test_payment_method_required_for_sales(self):
        payload = document_payload([line(1, 2, 1)])
        del payload["payment_method"]
        with pytest.raises(ValidationError):
            parse_document_header(payload, require_payment_method=True)

        header = parse_document_header(payload, require_payment_method=False)
        assert header["payment_method"] is None

    def test_negative_round_off_allowed(self):
        payload = document_payload([line(1, 2, 1)], round_off_cents=-40)
        assert parse_document_header(payload, require_payment_method=True)["round_off_cents"] == -40

    def test_no_payment_detail(self):
        payload = document_payload([line(1, 2, 1)])
        assert parse_document_header(payload, require_payment_method=True)["payment_detail"] is None


class TestPaymentDetail:
    def test_flat_field(self):
        detail = PaymentDetail.from_payload({"cheque_number": " 000123 "})
        assert detail == PaymentDetail(kind="cheque", reference="000123")

    def test_explicit_object(self):
        detail = PaymentDetail.from_payload({"payment_detail": {"kind": "gateway", "reference": "pay_9"}})
        assert detail.to_dict() == {"kind": "gateway", "reference": "pay_9"}

    def test_blank_fields_are_ignored(self):
        assert PaymentDetail.from_payload({"card_number": "", "upi_transaction_id": None}) is None

    def test_more_than_one_reference(self):
        with pytest.raises(ValueError):
            PaymentDetail.from_payload({"card_number": "4111", "bank_reference_number": "NEFT1"})

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            PaymentDetail.from_payload({"payment_detail": {"kind": "crypto", "reference": "x"}})

    def test_from_columns(self):
        assert PaymentDetail.from_columns(None, None) is None
        assert PaymentDetail.from_columns("upi", "U1") == PaymentDetail(kind="upi", reference="U1")


def test_required_id():
    assert required_id({"customer_id": "7"}, "customer_id") == 7
    with pytest.raises(ValidationError):
        required_id({"customer_id": 0}, "customer_id")
    with pytest.raises(ValidationError):
        required_id(None, "customer_id")


def test_insufficient_stock_is_a_validation_error():
    error = InsufficientStockError("short", product_id=1, variant_id=2, requested=5, available=3)
    assert isinstance(error, ValidationError)
    assert error.details == {"product_id": 1, "variant_id": 2, "requested": 5, "available": 3}
