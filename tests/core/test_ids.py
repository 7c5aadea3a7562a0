import random

from txroles.core.ids import (
    SequenceIdGenerator,
    TimestampIdGenerator,
    has_prefix,
    matches_format,
    prefix_of,
)


def test_timestamp_ids_unique_within_same_millisecond():
    gen = TimestampIdGenerator("proposal", clock=lambda: 1700000000000, rng=random.Random(7))
    ids = [gen.next() for _ in range(200)]
    assert len(set(ids)) == 200
    assert all(matches_format(i, "proposal") for i in ids)


def test_timestamp_ids_never_go_backwards():
    ticks = iter([5000, 4000, 4000, 6000])
    gen = TimestampIdGenerator("auth", clock=lambda: next(ticks), rng=random.Random(1))
    stamps = [int(gen.next().split("-")[1]) for _ in range(4)]
    assert stamps == [5000, 5001, 5002, 6000]


def test_sequence_generator_is_deterministic():
    gen = SequenceIdGenerator("tx", stamp=123)
    assert [gen.next() for _ in range(3)] == ["tx-123-1", "tx-123-2", "tx-123-3"]


def test_has_prefix():
    assert has_prefix("proposal-123-1", "proposal")
    assert has_prefix("proposal-anything", "proposal")
    assert not has_prefix("bad-id", "proposal")
    assert not has_prefix("proposal", "proposal")
    assert not has_prefix("", "proposal")
    assert not has_prefix(None, "proposal")
    assert not has_prefix(12345, "auth")


def test_matches_format_is_strict():
    assert matches_format("auth-123-1", "auth")
    assert not matches_format("auth-abc-1", "auth")
    assert not matches_format("auth-123", "auth")
    assert not matches_format("xauth-123-1", "auth")


def test_prefix_of():
    assert prefix_of("proposal-1-2") == "proposal"
    assert prefix_of("auth-1-2") == "auth"
    assert prefix_of("tx-1-2") == "tx"
    assert prefix_of("other-1-2") is None
