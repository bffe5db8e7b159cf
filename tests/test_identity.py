import uuid

from core.sync_engine.identity import IdentityResolver, ReconciliationContext
from core.sync_engine.ids import is_valid_uuid, mint_canonical_id


def test_register_overwrites_and_resolves():
    resolver = IdentityResolver()
    resolver.register("local-1", "canon-1")
    resolver.register("local-1", "canon-2")
    resolver.register("local-2", "canon-2")

    assert resolver.resolve("local-1") == "canon-2"
    assert resolver.resolve("local-2") == "canon-2"
    assert resolver.resolve("missing") is None
    assert len(resolver) == 2
    assert "local-1" in resolver


def test_snapshot_is_a_copy():
    resolver = IdentityResolver()
    resolver.register("a", "b")
    snap = resolver.snapshot()
    snap["a"] = "tampered"

    assert resolver.resolve("a") == "b"


def test_each_context_starts_with_an_empty_mapping():
    first = ReconciliationContext()
    first.resolver.register("a", "b")

    assert len(ReconciliationContext().resolver) == 0


def test_uuid_shape_detection():
    assert is_valid_uuid(str(uuid.uuid4()))
    assert is_valid_uuid("0B6C8E0E-3F57-4C8E-9F0E-6F1F2A3B4C5D")
    assert not is_valid_uuid("obj_1700000000")
    assert not is_valid_uuid("")


def test_mint_reuses_uuid_shaped_ids_only():
    existing = str(uuid.uuid4())
    assert mint_canonical_id(existing) == existing

    minted = mint_canonical_id("pillar-local-3")
    assert minted != "pillar-local-3"
    assert uuid.UUID(minted).version == 4
