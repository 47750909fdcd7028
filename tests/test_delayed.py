"""
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep Tests
======================

test for latency-annotated signals and BlackBox pipelines

* signals of different latencies cannot be combined
* a BlackBox output appears latency cycles after its inputs
* while the enable is low every pipeline stage holds
"""

from lockstep import (
    BlackBox, DSignal, LatencyMismatch, UnBoundClock, UnDefined,
    clock_gen, delayed_delay, delayed_lift, from_delayed, from_list, pure,
    sample_n, sample_n_lazy, to_delayed,
)
import cli
import logging
import operator
import pytest


def test_to_and_from_delayed():
    s = from_list([1, 2, 3])
    d = to_delayed(s)
    assert d.latency == 0
    assert from_delayed(d) is s
    assert to_delayed(d) is d
    assert d.map(operator.neg).latency == 0
    assert sample_n(3, from_delayed(d.map(operator.neg))) == [-1, -2, -3]


def test_latency_mismatch():
    a = DSignal(pure(1), 1)
    b = DSignal(pure(2), 2)
    with pytest.raises(LatencyMismatch, match = r'latencies \[1, 2\]'):
        delayed_lift(operator.add, a, b)
    with pytest.raises(LatencyMismatch):
        BlackBox('add', operator.add, 1)(a, b, clock = clock_gen())

    same = delayed_lift(operator.add, a, DSignal(pure(5), 1))
    assert same.latency == 1
    assert sample_n(2, from_delayed(same)) == [6, 6]


@pytest.mark.parametrize('latency', [-1, 1.5, True, '2', None])
def test_bad_latency(latency):
    with pytest.raises(LatencyMismatch):
        BlackBox('bad', abs, latency)
    with pytest.raises(LatencyMismatch):
        DSignal(pure(0), latency)


def test_delayed_delay_accumulates():
    def circuit():
        return delayed_delay(2, DSignal(from_list([1, 2, 3, 4]), 1))

    assert sample_n_lazy(4, lambda: from_delayed(circuit())) == [UnDefined, UnDefined, 1, 2]
    assert delayed_delay(2, DSignal(pure(1), 1), clock = clock_gen()).latency == 3
    cli.expect_undef(lambda: from_delayed(circuit()), 0)


def test_black_box_latency():
    box = BlackBox('mul', operator.mul, 3, config = {'arch': 'speed'})
    a = [1, 2, 3, 4, 5, 6]
    b = [2, 3, 4, 5, 6, 7]

    def circuit():
        return from_delayed(box(from_list(a), from_list(b)))

    expected = [UnDefined] * 3 + [x * y for x,y in zip(a, b)][:3]
    assert sample_n_lazy(6, circuit) == expected
    cli.expect_undef(circuit, 0)


def test_black_box_adds_latency():
    box = BlackBox('add', operator.add, 3)
    result = box(DSignal(pure(1), 2), DSignal(pure(2), 2), clock = clock_gen())
    assert result.latency == 5
    zero = BlackBox('same', operator.add, 0)(pure(1), pure(2), clock = clock_gen())
    assert zero.latency == 0
    assert sample_n(2, from_delayed(zero)) == [3, 3]


def test_black_box_stall():
    box = BlackBox('inc', lambda x: x + 1, 2)

    def circuit():
        enable = from_list([True, True, False, True, True, True])
        source = from_list([10, 20, 30, 40, 50, 60])
        return from_delayed(box(source, enable = enable))

    # the value in the first stage at the stall (21) is not lost
    assert sample_n_lazy(6, circuit) == [UnDefined, UnDefined, 11, 11, 21, 41]


def test_black_box_needs_a_clock():
    box = BlackBox('inc', lambda x: x + 1, 1)
    with pytest.raises(UnBoundClock):
        box(pure(1))


def test_black_box_repr_and_logging(caplog):
    box = BlackBox('mul', operator.mul, 3, config = {'arch': 'speed'})
    assert repr(box) == "<BlackBox mul latency=3 config={'arch': 'speed'}>"

    caplog.set_level(logging.DEBUG, logger = 'lockstep.delayed')
    box(pure(1), pure(2), clock = clock_gen())
    assert any('instantiating' in record.getMessage() for record in caplog.records)
