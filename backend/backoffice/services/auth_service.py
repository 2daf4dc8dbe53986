# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service with Owner Scoping

Every order, payment and stock movement is attributed to a user, and every
user belongs to exactly one owner (the tenant). Username and email are
unique within an owner.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Minimum 8 characters with upper, lower, digit and special character
- Session tokens are managed separately (see session_service.py)
"""

import re

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import Owner, User
from ..validation import NotFoundError
from backoffice.time_utils import utcnow


class PasswordValidationError(Exception):
    """Raised when password doesn't meet strength requirements."""
    pass


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Raises PasswordValidationError if requirements not met.
    """
    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', password):
        raise PasswordValidationError("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', password):
        raise PasswordValidationError("Password must contain at least one lowercase letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")

    if not re.search(r"[!@#$%^&*(),.'\":{}|<>]", password):
        raise PasswordValidationError("Password must contain at least one special character")


def hash_password(password: str) -> str:
    """Validate strength, then hash with bcrypt using the configured cost."""
    validate_password_strength(password)
    rounds = int(current_app.config.get("BCRYPT_ROUNDS", 12))
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds))
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt check. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def create_owner(name: str, code: str) -> Owner:
    """Create a tenant. Codes are stored lower-case and must be unique."""
    name = (name or "").strip()
    code = (code or "").strip().lower()
    if not name or not code:
        raise ValueError("Owner name and code are required")

    if db.session.query(Owner.id).filter_by(code=code).first():
        raise ValueError(f"Owner code '{code}' already exists")

    owner = Owner(name=name, code=code, is_active=True)
    db.session.add(owner)
    db.session.commit()
    return owner


def create_user(
    username: str,
    email: str,
    password: str,
    owner_id: int,
    name: str | None = None,
) -> User:
    """
    Create new user with bcrypt password hashing.

    Raises:
        ValueError: If owner doesn't exist or is inactive, or user exists
        PasswordValidationError: If password doesn't meet requirements
    """
    owner = db.session.query(Owner).filter_by(id=owner_id).first()
    if not owner:
        raise ValueError("Owner not found")
    if not owner.is_active:
        raise ValueError("Owner is not active")

    existing = db.session.query(User).filter(
        User.owner_id == owner_id,
        db.or_(User.username == username, User.email == email)
    ).first()
    if existing:
        raise ValueError("Username or email already exists for this owner")

    user = User(
        owner_id=owner_id,
        username=username,
        email=email,
        name=name,
        password_hash=hash_password(password),
    )

    db.session.add(user)
    db.session.commit()
    return user


def authenticate(username: str, password: str, owner_code: str | None = None) -> User | None:
    """
    Authenticate with username (or email) and password.

    When owner_code is given the lookup is scoped to that owner. Without it
    the identifier must match exactly one active user across all owners.

    Returns User if credentials valid, None otherwise. Updates last_login_at.
    """
    query = (
        db.session.query(User)
        .join(Owner, Owner.id == User.owner_id)
        .filter(
            db.or_(User.username == username, User.email == username),
            User.is_active.is_(True),
            Owner.is_active.is_(True),
        )
    )
    if owner_code:
        query = query.filter(Owner.code == owner_code.strip().lower())

    candidates = query.limit(2).all()
    if len(candidates) != 1:
        return None
    user = candidates[0]

    if verify_password(password, user.password_hash):
        user.last_login_at = utcnow()
        db.session.commit()
        return user

    return None


def get_owner_user(owner_id: int, user_id: int) -> User:
    """The acting user of a workflow; must exist under the same owner."""
    user = db.session.query(User).filter_by(id=user_id, owner_id=owner_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user
