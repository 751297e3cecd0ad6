import pytest

from orrery.data_models import Body
from orrery.trails import TrailBank, TrailBuffer


def body_at(x, body_id="b"):
    return Body(body_id, body_id.upper(), 0.0, (x, 0.0, 0.0))


def test_new_buffer_is_prefilled():
    buf = TrailBuffer(4, (1.0, 2.0, 3.0))
    assert len(buf) == 4
    assert buf.linearize() == [(1.0, 2.0, 3.0)] * 4


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        TrailBuffer(0)


def test_wraparound_linearizes_oldest_to_newest():
    k = 5
    buf = TrailBuffer(k, (0.0, 0.0, 0.0))
    for n in range(1, k + 6):
        buf.push((float(n), 0.0, 0.0))
    assert buf.cursor == (k + 5) % k
    assert [p[0] for p in buf.linearize()] == [6.0, 7.0, 8.0, 9.0, 10.0]


def test_partial_fill_keeps_prefill_at_the_old_end():
    buf = TrailBuffer(4, (9.0, 9.0, 9.0))
    buf.push((1.0, 0.0, 0.0))
    buf.push((2.0, 0.0, 0.0))
    assert buf.linearize() == [(9.0, 9.0, 9.0), (9.0, 9.0, 9.0),
                               (1.0, 0.0, 0.0), (2.0, 0.0, 0.0)]


def test_bank_records_with_configured_lengths():
    bank = TrailBank(default_length=10)
    bodies = [body_at(1.0, "a"), body_at(2.0, "b")]
    bank.record(bodies, {"a": 3})
    assert bank.get("a").capacity == 3
    assert bank.get("b").capacity == 10
    assert bank.paths()["a"] == [(1.0, 0.0, 0.0)] * 3


def test_length_change_reallocates_prefilled_at_current_position():
    bank = TrailBank()
    bank.record([body_at(1.0)], {"b": 4})
    bank.record([body_at(2.0)], {"b": 4})
    assert (1.0, 0.0, 0.0) in bank.paths()["b"]

    bank.record([body_at(3.0)], {"b": 6})
    path = bank.paths()["b"]
    assert len(path) == 6
    assert set(path) == {(3.0, 0.0, 0.0)}


def test_zero_length_drops_the_buffer():
    bank = TrailBank()
    bank.record([body_at(1.0)], {"b": 4})
    bank.sync([body_at(1.0)], {"b": 0})
    assert "b" not in bank
    bank.record([body_at(1.0)], {"b": 0})
    assert bank.paths() == {}


def test_discard_and_clear():
    bank = TrailBank(default_length=2)
    bank.record([body_at(0.0, "a"), body_at(0.0, "b"), body_at(0.0, "c")])
    assert sorted(bank.paths()) == ["a", "b", "c"]
    bank.discard("a")
    bank.discard("missing")
    assert len(bank) == 2
    bank.clear()
    assert len(bank) == 0
