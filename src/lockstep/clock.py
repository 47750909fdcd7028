''''
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep implementation
======================

Lockstep Clock and Reset types


Objects of type Clock belong to one domain
A Source clock ticks every cycle; a Gated clock ticks only in cycles where its
enable signal is True, and stateful elements on it hold their value otherwise

Objects of type Reset belong to one domain and carry a boolean signal
An Asynchronous reset forces a register's output in the same cycle
A Synchronous reset is acted on at the next active clock edge

Stateful elements find their clock and reset either as explicit arguments or from
the innermost ClockDomain context, which exists only for the duration of a
circuit-construction call:

    with ClockDomain(clock_gen(Fast), async_reset_gen(Fast)):
        counter = fix(lambda c: register(0, c + 1))
'''

import enum

from . import common, domain, logic, signal


ClockKind = enum.Enum('ClockKind', 'Source Gated')
ResetKind = enum.Enum('ResetKind', 'Synchronous Asynchronous')


class Clock:
    def __init__(self, clock_domain, enable = None):
        common.InvalidArgument.insist(domain.is_domain(clock_domain), f'{clock_domain} is not a domain')
        if enable is not None:
            enable = signal.as_signal(enable)
            domain.common_domain(clock_domain, enable.domain, what = 'a clock and its enable')
        self.domain = clock_domain
        self.enable = enable

    def __repr__(self):
        return f'<Clock {self.domain.name} {self.kind.name}>'

    @property
    def kind(self):
        return ClockKind.Source if self.enable is None else ClockKind.Gated

    def signals(self):
        return () if self.enable is None else (self.enable,)

    def active(self, cycle):
        '''generator: whether the clock ticks at the end of the cycle

        returns UnDefined if the enable is undefined in that cycle
        '''
        if self.enable is None:
            return True
        enabled = yield self.enable, cycle
        if enabled is common.UnDefined:
            return enabled
        return bool(enabled)


def clock_gate(clock, enable):
    'gated clock ticking only when the parent ticks and enable is True'
    if clock.enable is not None:
        enable = logic.and_(clock.enable, enable)
    return Clock(clock.domain, enable)


class Reset:
    def __init__(self, reset_domain, reset_signal, kind = ResetKind.Asynchronous, active_high = True):
        common.InvalidArgument.insist(domain.is_domain(reset_domain), f'{reset_domain} is not a domain')
        common.InvalidArgument.insist(isinstance(kind, ResetKind), f'{kind!r} is not a ResetKind')
        reset_signal = signal.as_signal(reset_signal)
        domain.common_domain(reset_domain, reset_signal.domain, what = 'a reset and its signal')
        self.domain = reset_domain
        self.signal = reset_signal
        self.kind = kind
        self.active_high = active_high

    def __repr__(self):
        level = 'high' if self.active_high else 'low'
        return f'<Reset {self.domain.name} {self.kind.name} active-{level}>'

    def signals(self):
        return (self.signal,)

    def asserted(self, cycle):
        'generator: whether the reset is asserted in the cycle, or UnDefined'
        level = yield self.signal, cycle
        if level is common.UnDefined:
            return level
        return bool(level) == self.active_high


class ClockDomain:
    ''' binds a clock and/or a reset for implicit routing

    a context manager; the binding lasts only for the body of the with-statement
    inner bindings hide outer ones, and a ClockDomain with only a clock (or only a
    reset) leaves the other one visible from further out
    '''
    stack = []

    def __init__(self, clock = None, reset = None):
        if clock is not None and reset is not None:
            domain.common_domain(clock.domain, reset.domain, what = 'a clock and a reset')
        self.clock = clock
        self.reset = reset

    def __repr__(self):
        return f'ClockDomain({self.clock!r}, {self.reset!r})'

    def __enter__(self):
        ClockDomain.stack.append(self)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        popped = ClockDomain.stack.pop(-1)
        assert popped is self, 'clock domains exited out of order'

    @classmethod
    def current_clock(cls):
        for bound in reversed(cls.stack):
            if bound.clock is not None:
                return bound.clock
        raise common.UnBoundClock('no clock bound; pass clock= or use "with ClockDomain(...)"')

    @classmethod
    def current_reset(cls):
        for bound in reversed(cls.stack):
            if bound.reset is not None:
                return bound.reset
        raise common.UnBoundClock('no reset bound; pass reset= or use "with ClockDomain(...)"')


def has_clock():
    return ClockDomain.current_clock()


def has_reset():
    return ClockDomain.current_reset()


def with_clock(clock):
    return ClockDomain(clock = clock)


def with_reset(reset):
    return ClockDomain(reset = reset)


def with_clock_reset(clock, reset):
    return ClockDomain(clock, reset)


def clock_or_hidden(clock):
    return has_clock() if clock is None else clock


def reset_or_hidden(reset):
    return has_reset() if reset is None else reset


# testbench generators (not synthesisable)

def clock_gen(clock_domain = domain.System):
    return Clock(clock_domain)


def async_reset_gen(clock_domain = domain.System):
    'asserted in cycle 0 only'
    return Reset(clock_domain, signal.cons(True, False), ResetKind.Asynchronous)


def sync_reset_gen(clock_domain = domain.System):
    'asserted in cycle 0 only'
    return Reset(clock_domain, signal.cons(True, False), ResetKind.Synchronous)


def system_clock():
    return clock_gen(domain.System)


def system_reset():
    return async_reset_gen(domain.System)


# conversions between resets and plain boolean signals (active-high)

def reset_level(reset):
    return reset.signal if reset.active_high else logic.not_(reset.signal)


def unsafe_from_async_reset(reset):
    common.InvalidArgument.insist(reset.kind is ResetKind.Asynchronous, f'{reset!r} is not asynchronous')
    return reset_level(reset)


def from_sync_reset(reset):
    common.InvalidArgument.insist(reset.kind is ResetKind.Synchronous, f'{reset!r} is not synchronous')
    return reset_level(reset)


def signal_domain(s, reset_domain):
    found = domain.common_domain(reset_domain, s.domain, what = 'a reset and its signal')
    common.DomainMismatch.insist(found is not None, f'cannot infer a domain for a reset from {s!r}')
    return found


def unsafe_to_async_reset(s, reset_domain = None):
    s = signal.as_signal(s)
    return Reset(signal_domain(s, reset_domain), s, ResetKind.Asynchronous)


def to_sync_reset(s, reset_domain = None):
    s = signal.as_signal(s)
    return Reset(signal_domain(s, reset_domain), s, ResetKind.Synchronous)
