"""Runtime configuration profiles for walletstore."""
from __future__ import annotations

import os
from typing import Dict

PROFILE = os.getenv("WALLETSTORE_PROFILE", "default")

PROFILES: Dict[str, Dict[str, str]] = {
    "default": {
        "WALLETSTORE_ENDPOINT": "http://127.0.0.1:8080",
        "WALLETSTORE_REQUEST_TIMEOUT": "30",
        "WALLETSTORE_USE_MSGPACK": "0",
        "WALLETSTORE_MISSING_CATEGORY_POLICY": "abort_batch",
        "WALLETSTORE_VERBOSE": "0",
        "WALLETSTORE_CURRENCY_UNIT": "XZC",
    },
    "debug": {
        "WALLETSTORE_ENDPOINT": "http://127.0.0.1:8080",
        "WALLETSTORE_REQUEST_TIMEOUT": "5",
        "WALLETSTORE_USE_MSGPACK": "0",
        "WALLETSTORE_MISSING_CATEGORY_POLICY": "skip_transaction",
        "WALLETSTORE_VERBOSE": "1",
        "WALLETSTORE_CURRENCY_UNIT": "XZC",
    },
}


def apply_profile() -> None:
    profile = os.getenv("WALLETSTORE_PROFILE", PROFILE)
    if not profile:
        return
    settings = PROFILES.get(profile)
    if not settings:
        return
    for key, value in settings.items():
        os.environ.setdefault(key, value)


def get_endpoint() -> str:
    return os.getenv("WALLETSTORE_ENDPOINT", "http://127.0.0.1:8080").rstrip("/")


def get_request_timeout() -> float:
    try:
        timeout = float(os.getenv("WALLETSTORE_REQUEST_TIMEOUT", "30"))
    except ValueError:
        return 30.0
    return timeout if timeout > 0 else 30.0


def use_msgpack() -> bool:
    return bool(int(os.getenv("WALLETSTORE_USE_MSGPACK", "0") or "0"))


def get_missing_category_policy() -> str:
    return os.getenv("WALLETSTORE_MISSING_CATEGORY_POLICY", "abort_batch").strip().lower()
