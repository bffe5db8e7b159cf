"""
Canonical identifier helpers.

Canonical identifiers are version-4 UUID strings. A local identifier that
already has UUID shape is reused verbatim; anything else gets a fresh one.
"""
import re
import uuid

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value: str) -> bool:
    return bool(value) and _UUID_RE.match(value) is not None


def new_canonical_id() -> str:
    return str(uuid.uuid4())


def mint_canonical_id(local_id: str) -> str:
    """Reuse ``local_id`` if it is UUID-shaped, otherwise generate a new UUID."""
    if is_valid_uuid(local_id):
        return local_id
    return new_canonical_id()
