# Overview: Pytest coverage for the flask CLI command groups.

from backoffice.models import Owner, User
from conftest import TEST_PASSWORD


def test_system_init_is_idempotent(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["system", "init", "--owner", "Demo Store", "--owner-code", "Demo"])
    assert result.exit_code == 0, result.output
    assert "Created owner: Demo Store" in result.output

    result = runner.invoke(args=["system", "init", "--owner-code", "demo"])
    assert result.exit_code == 0, result.output
    assert "User already exists: admin" in result.output

    assert db_session.query(Owner).count() == 1
    assert db_session.query(User).filter_by(username="admin").count() == 1


def test_users_create_rejects_weak_password(app, db_session, owner):
    runner = app.test_cli_runner()
    result = runner.invoke(args=[
        "users", "create",
        "--owner-id", str(owner.id),
        "--username", "clerk",
        "--email", "clerk@sharma.test",
        "--password", "weak",
    ])

    assert result.exit_code != 0
    assert "Password validation failed" in result.output


def test_users_create_and_list(app, db_session, owner):
    runner = app.test_cli_runner()
    result = runner.invoke(args=[
        "users", "create",
        "--owner-id", str(owner.id),
        "--username", "clerk",
        "--email", "clerk@sharma.test",
        "--password", TEST_PASSWORD,
    ])
    assert result.exit_code == 0, result.output

    result = runner.invoke(args=["users", "list", "--owner-id", str(owner.id)])
    assert "clerk" in result.output


def test_stock_low(app, db_session, owner, make_product):
    make_product(variants=(("1kg", 2, 5), ("5kg", 50, 5)))
    runner = app.test_cli_runner()

    result = runner.invoke(args=["stock", "low", "--owner-id", str(owner.id)])

    assert result.exit_code == 0, result.output
    assert "Basmati Rice 1kg: 2 (min 5)" in result.output
    assert "5kg" not in result.output
