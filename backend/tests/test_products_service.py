# Overview: Pytest coverage for product catalogue edits and soft delete.

import pytest

from backoffice.models import StockMovement
from backoffice.services import products_service, sales_service
from backoffice.validation import NotFoundError, ValidationError
from conftest import current_quantity


def _variant_payload(variant=None, **overrides):
    payload = {
        "packing_size": "1kg",
        "sku": "BAS-1kg",
        "retail_price_cents": 12000,
        "wholesale_price_cents": 11000,
        "purchase_price_cents": 9000,
        "tax_rate_bps": 500,
        "min_stock_level": 5,
    }
    if variant is not None:
        payload["id"] = variant.id
    payload.update(overrides)
    return payload


def _update(owner, product, payload):
    return products_service.update_product(owner_id=owner.id, product_id=product.id, payload=payload)


def test_update_prices_and_minimum(db_session, owner, product, variant):
    _update(owner, product, {
        "name": "Basmati Rice Premium",
        "variants": [_variant_payload(variant, retail_price_cents=13500, min_stock_level=8)],
    })

    assert product.name == "Basmati Rice Premium"
    assert variant.retail_price_cents == 13500
    assert variant.min_stock_level == 8
    assert current_quantity(variant.id) == 10


def test_update_ignores_quantity(db_session, owner, product, variant):
    _update(owner, product, {"variants": [_variant_payload(variant, quantity=500)]})

    assert current_quantity(variant.id) == 10
    assert db_session.query(StockMovement).count() == 0


def test_new_variant_starts_empty(db_session, owner, product, variant):
    _update(owner, product, {
        "variants": [_variant_payload(packing_size="5kg", sku="BAS-5kg", quantity=40)],
    })

    assert [(v.packing_size, v.quantity, v.position) for v in product.variants] == [
        ("1kg", 10, 0),
        ("5kg", 0, 1),
    ]


def test_omitted_variants_are_kept(db_session, owner, make_product):
    product = make_product(variants=(("1kg", 10, 5), ("5kg", 4, 2)))

    _update(owner, product, {"unit": "sack"})

    assert product.unit == "sack"
    assert len(product.variants) == 2


def test_unknown_variant_id(db_session, owner, product, variant):
    with pytest.raises(NotFoundError):
        _update(owner, product, {"variants": [_variant_payload(sku="X-1", id=99999)]})


def test_duplicate_sku_changes_nothing(db_session, owner, make_product):
    product = make_product(variants=(("1kg", 10, 5), ("5kg", 4, 2)))
    small, large = product.variants

    with pytest.raises(ValidationError):
        _update(owner, product, {
            "name": "Renamed",
            "variants": [_variant_payload(large, packing_size="5kg", sku=small.sku)],
        })

    db_session.refresh(product)
    assert product.name == "Basmati Rice"
    assert large.sku == "BAS-5kg"


def test_blank_name_is_rejected(db_session, owner, product):
    with pytest.raises(ValidationError):
        _update(owner, product, {"name": "  "})


def test_other_owner_cannot_update(db_session, other_owner, product, variant):
    with pytest.raises(NotFoundError):
        _update(other_owner, product, {"name": "Taken"})


def test_deleted_product_is_hidden(db_session, owner, user, product, variant, order_payload):
    products_service.delete_product(owner.id, product.id)

    assert products_service.list_products(owner.id) == []
    with pytest.raises(NotFoundError):
        products_service.get_product(owner.id, product.id)
    with pytest.raises(NotFoundError):
        sales_service.create_order(
            owner_id=owner.id, user_id=user.id, payload=order_payload([(product.id, variant.id, 1)])
        )
    with pytest.raises(NotFoundError):
        products_service.delete_product(owner.id, product.id)


def test_deleted_product_leaves_low_stock_list(db_session, owner, make_product):
    product = make_product(variants=(("1kg", 1, 5),))
    assert len(products_service.list_low_stock_variants(owner.id)) == 1

    products_service.delete_product(owner.id, product.id)

    assert products_service.list_low_stock_variants(owner.id) == []
