"""
Pytest fixtures for back-office backend tests.

Provides an in-memory database, a per-test table wipe, owner/user/party/
product fixtures and a bearer-token helper for route tests.
"""

import pytest

from backoffice import create_app
from backoffice.extensions import db
from backoffice.models import Owner, User, Customer, Supplier, Product, ProductVariant
from backoffice.services.auth_service import hash_password
from backoffice.services.session_service import create_session


TEST_PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()
        db.session.remove()


@pytest.fixture(scope='function')
def owner(db_session):
    owner = Owner(name="Sharma General Store", code="sharma", is_active=True)
    db_session.add(owner)
    db_session.commit()
    return owner


@pytest.fixture(scope='function')
def other_owner(db_session):
    owner = Owner(name="Beta Wholesale", code="beta", is_active=True)
    db_session.add(owner)
    db_session.commit()
    return owner


def _make_user(db_session, owner, username, name):
    user = User(
        owner_id=owner.id,
        username=username,
        email=f"{username}@{owner.code}.test",
        name=name,
        password_hash=hash_password(TEST_PASSWORD),
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def user(db_session, owner):
    return _make_user(db_session, owner, "ravi", "Ravi Sharma")


@pytest.fixture(scope='function')
def other_user(db_session, other_owner):
    return _make_user(db_session, other_owner, "ben", "Ben Beta")


@pytest.fixture(scope='function')
def customer(db_session, owner, user):
    customer = Customer(
        owner_id=owner.id,
        user_id=user.id,
        name="Asha Traders",
        number="9800000001",
        customer_type="retail",
    )
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture(scope='function')
def supplier(db_session, owner, user):
    supplier = Supplier(
        owner_id=owner.id,
        user_id=user.id,
        name="Northern Distributors",
        number="9800000002",
        gst_number="27AAAAA0000A1Z5",
    )
    db_session.add(supplier)
    db_session.commit()
    return supplier


@pytest.fixture(scope='function')
def make_product(db_session, owner, user):
    """Factory: make_product(name, [(packing_size, quantity, min_stock_level), ...])."""
    def _make(name="Basmati Rice", variants=(("1kg", 10, 5),), product_owner=None):
        product_owner = product_owner or owner
        product = Product(owner_id=product_owner.id, user_id=user.id, name=name, unit="bag")
        for position, (packing_size, quantity, min_stock_level) in enumerate(variants):
            product.variants.append(ProductVariant(
                position=position,
                packing_size=packing_size,
                sku=f"{name[:3].upper()}-{packing_size}",
                retail_price_cents=12000,
                wholesale_price_cents=11000,
                purchase_price_cents=9000,
                tax_rate_bps=500,
                min_stock_level=min_stock_level,
                quantity=quantity,
            ))
        db_session.add(product)
        db_session.commit()
        return product
    return _make


@pytest.fixture(scope='function')
def product(make_product):
    """Basmati Rice 1kg: quantity 10, minimum 5."""
    return make_product()


@pytest.fixture(scope='function')
def variant(product):
    return product.variants[0]


def line(product_id, variant_id, quantity, unit_price_cents=12000):
    gst = unit_price_cents * quantity * 5 // 100
    return {
        "product_id": product_id,
        "variant_id": variant_id,
        "unit": 1,
        "carton": 1,
        "quantity": quantity,
        "mrp_cents": unit_price_cents,
        "unit_price_cents": unit_price_cents,
        "gst_rate_bps": 500,
        "gst_amount_cents": gst,
        "line_total_cents": unit_price_cents * quantity + gst,
    }


def document_payload(lines, **extra):
    sub_total = sum(item["unit_price_cents"] * item["quantity"] for item in lines)
    gst = sum(item["gst_amount_cents"] for item in lines)
    payload = {
        "products": lines,
        "sub_total_cents": sub_total,
        "total_gst_cents": gst,
        "round_off_cents": 0,
        "total_cents": sub_total + gst,
        "payment_method": "cash",
        "payment_status": "paid",
    }
    payload.update(extra)
    return payload


@pytest.fixture(scope='function')
def order_payload(customer):
    """Factory: order_payload([(product_id, variant_id, quantity), ...], **extra)."""
    def _build(items, **extra):
        extra.setdefault("customer_id", customer.id)
        return document_payload([line(*item) for item in items], **extra)
    return _build


@pytest.fixture(scope='function')
def purchase_payload(supplier):
    def _build(items, **extra):
        extra.setdefault("supplier_id", supplier.id)
        return document_payload([line(*item, unit_price_cents=9000) for item in items], **extra)
    return _build


@pytest.fixture(scope='function')
def auth_headers(user):
    """Authorization header for `user`."""
    _, token = create_session(user.id)
    return {"Authorization": f"Bearer {token}"}


def current_quantity(variant_id):
    """Fresh read of a variant's quantity, bypassing the identity map."""
    return db.session.query(ProductVariant.quantity).filter(ProductVariant.id == variant_id).scalar()
