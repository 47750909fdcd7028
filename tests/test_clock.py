"""
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep Tests
======================

test for Domain, Clock, Reset and ClockDomain

checks
    domain classes are cached by parameters and compared by identity
    clock kinds and gating
    reset conversions
    implicit routing: nesting, partial bindings, nothing bound
"""

from lockstep import (
    Clock, ClockDomain, ClockKind, Domain, DomainMismatch, Edge, InvalidArgument, Reset, ResetKind,
    System, UnBoundClock, async_reset_gen, clock_gate, clock_gen, delay, from_list,
    from_sync_reset, has_clock, has_reset, is_domain, pure, register, sample_n,
    sync_reset_gen, system_clock, system_reset, to_sync_reset, unsafe_from_async_reset,
    unsafe_to_async_reset, with_clock, with_clock_reset, with_reset,
)
import pytest


def test_domain_cache():
    assert Domain['System', 10000] is System
    assert Domain['System'] is System
    assert Domain(name = 'System') is System
    assert Domain['System', 10000, Edge.Falling] is not System
    assert Domain['Fast', 2500] is Domain['Fast', 2500]
    assert is_domain(System)
    assert not is_domain(Clock(System))
    assert System.describe() == 'System(10000ps, rising)'


def test_domain_is_a_tag():
    with pytest.raises(AssertionError):
        System()
    with pytest.raises(InvalidArgument):
        Domain['Broken', -1]
    with pytest.raises(InvalidArgument):
        Domain['']
    with pytest.raises(InvalidArgument):
        Domain['Broken', 1000, 'rising']
    with pytest.raises(InvalidArgument):
        Clock('System')
    with pytest.raises(InvalidArgument):
        Reset(System, False, kind = 'sync')


def test_clock_kinds():
    clk = clock_gen()
    assert clk.kind is ClockKind.Source
    assert clk.domain is System
    gated = clock_gate(clk, pure(True))
    assert gated.kind is ClockKind.Gated
    assert gated.domain is System
    assert system_clock().kind is ClockKind.Source


def test_clock_enable_domain():
    Fast = Domain['Fast', 2500]
    fast_signal = delay(pure(True), clock = Clock(Fast))
    with pytest.raises(DomainMismatch):
        clock_gate(Clock(System), fast_signal)


def test_reset_generators():
    assert system_reset().kind is ResetKind.Asynchronous
    assert async_reset_gen().kind is ResetKind.Asynchronous
    assert sync_reset_gen(Domain['Fast', 2500]).kind is ResetKind.Synchronous
    assert sample_n(4, unsafe_from_async_reset(async_reset_gen())) == [True, False, False, False]
    assert sample_n(4, from_sync_reset(sync_reset_gen())) == [True, False, False, False]


def test_reset_conversions():
    level = from_list([False, True, True, False])
    reset = unsafe_to_async_reset(level, System)
    assert reset.kind is ResetKind.Asynchronous and reset.domain is System
    assert sample_n(4, unsafe_from_async_reset(reset)) == [False, True, True, False]

    reset = to_sync_reset(level, System)
    assert reset.kind is ResetKind.Synchronous
    assert sample_n(4, from_sync_reset(reset)) == [False, True, True, False]

    # the domain is taken from the signal when it has one
    reset = to_sync_reset(delay(pure(False), clock = clock_gen()))
    assert reset.domain is System

    # active-low resets convert to active-high levels
    low = Reset(System, level, active_high = False)
    assert sample_n(4, unsafe_from_async_reset(low)) == [True, False, False, True]

    with pytest.raises(InvalidArgument, match = 'not synchronous'):
        from_sync_reset(unsafe_to_async_reset(level, System))
    with pytest.raises(InvalidArgument, match = 'not asynchronous'):
        unsafe_from_async_reset(to_sync_reset(level, System))
    with pytest.raises(DomainMismatch):
        unsafe_to_async_reset(level)


def test_nothing_bound():
    assert not ClockDomain.stack
    with pytest.raises(UnBoundClock):
        has_clock()
    with pytest.raises(UnBoundClock):
        has_reset()
    with pytest.raises(UnBoundClock):
        register(0, pure(1))


def test_nested_clock_domains():
    Fast = Domain['Fast', 2500]
    fast_clock = Clock(Fast)
    fast_reset = async_reset_gen(Fast)

    with with_clock_reset(system_clock(), system_reset()) as outer:
        assert has_clock() is outer.clock
        assert has_reset() is outer.reset
        with with_clock(Clock(System)) as inner:
            # a clock-only binding leaves the outer reset visible
            assert has_clock() is inner.clock
            assert has_reset() is outer.reset
            assert register(0, pure(1)).clock is inner.clock
        with with_reset(sync_reset_gen()) as inner:
            assert has_clock() is outer.clock
            assert has_reset() is inner.reset
        with ClockDomain(fast_clock, fast_reset):
            assert register(0, pure(1)).domain is Fast
        assert has_clock() is outer.clock
    assert not ClockDomain.stack


def test_clock_domain_exits_on_error():
    with pytest.raises(ValueError):
        with ClockDomain(clock_gen(), system_reset()):
            raise ValueError('in construction')
    assert not ClockDomain.stack


def test_clock_domain_mismatch():
    with pytest.raises(DomainMismatch):
        ClockDomain(Clock(Domain['Fast', 2500]), system_reset())


def test_explicit_arguments_win():
    explicit = Clock(System)
    with ClockDomain(clock_gen(), system_reset()):
        assert register(0, pure(1), clock = explicit).clock is explicit
        assert delay(pure(1), clock = explicit).clock is explicit
