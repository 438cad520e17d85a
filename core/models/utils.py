"""ID generation utilities."""

import hashlib
import secrets


def gen_id(prefix: str) -> str:
    """Generate a fresh random ID: msg_xxx, todo_xxx, run_xxx"""
    return f"{prefix}{secrets.token_urlsafe(12)}"


def stable_id(prefix: str, *parts: object) -> str:
    """Derive a repeatable ID from the given parts.

    Used where an item lacks an ID but is reported again on every snapshot,
    so the same item keeps the same ID across snapshots.
    """
    digest = hashlib.sha1("\x1f".join(str(p) for p in parts).encode("utf-8"))
    return f"{prefix}{digest.hexdigest()[:16]}"
