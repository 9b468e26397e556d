from __future__ import annotations

from typing import Any

import bcrypt

from ..entitlements.models import SubscriptionTier

# username, password, role, plan
DEMO_ACCOUNTS: list[tuple[str, str, str, SubscriptionTier]] = [
    ("free", "free123", "user", SubscriptionTier.free),
    ("plus", "plus123", "user", SubscriptionTier.plus),
    ("pro", "pro123", "user", SubscriptionTier.pro),
    ("admin", "admin123", "admin", SubscriptionTier.pro),
]

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _seed_users() -> None:
    """Seed one demo account per plan, plus an admin."""
    for username, password, role, tier in DEMO_ACCOUNTS:
        _users[username] = {
            "password_hash": _hash_password(password),
            "role": role,
            "tier": tier,
        }


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Check credentials and return the session payload ``{username, role, tier}``."""
    record = _users.get(username)
    if record is None or not _verify_password(password, record["password_hash"]):
        return None
    return {"username": username, "role": record["role"], "tier": record["tier"].value}


_seed_users()
