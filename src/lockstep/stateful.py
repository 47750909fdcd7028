'''
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep implementation
======================

basic circuit functions: the stateful elements

Delay is the one primitive that refers to the previous cycle
    out(0) = UnDefined
    out(n) = in(n-1) if the clock ticked at the end of cycle n-1, else out(n-1)

Register adds a reset and a defined value at cycle 0, st(0) = initial
    asynchronous reset
        out(n)   = initial if reset asserted in cycle n, else st(n)
        st(n+1)  = in(n) if the clock ticks, else out(n)
    synchronous reset
        out(n)   = st(n)
        st(n+1)  = (initial if reset asserted in cycle n, else in(n)) if the clock ticks, else st(n)

Neither reads its input in the current cycle, which is what makes a feedback loop
through them productive

An undefined enable or reset level gives an undefined output rather than a guess
'''

from . import common, domain, signal
from . import clock as clocks


class Delay(signal.Signal):
    def __init__(self, delay_clock, source):
        self.clock = delay_clock
        self.source = signal.as_signal(source)
        self.domain = domain.common_domain(delay_clock.domain, self.source.domain,
            what = 'a delay and its input')

    def inputs(self):
        return (*self.clock.signals(), self.source)

    def evaluate(self, cycle):
        if cycle == 0:
            return common.UnDefined
        ticked = yield from self.clock.active(cycle - 1)
        if ticked is common.UnDefined:
            return ticked
        if ticked:
            return (yield self.source, cycle - 1)
        return (yield self, cycle - 1)


class Register(signal.Signal):
    def __init__(self, register_clock, reset, initial, source):
        self.clock = register_clock
        self.reset = reset
        self.initial = initial
        self.source = signal.as_signal(source)
        self.domain = domain.common_domain(
            register_clock.domain, reset.domain, self.source.domain,
            what = 'a register, its clock, reset and input')

    @property
    def name(self):
        return f'register({self.initial!r})'

    def inputs(self):
        return (*self.clock.signals(), *self.reset.signals(), self.source)

    def evaluate(self, cycle):
        if cycle == 0:
            return self.initial
        if self.reset.kind is clocks.ResetKind.Asynchronous:
            return (yield from self.evaluate_async(cycle))
        else:
            return (yield from self.evaluate_sync(cycle))

    def evaluate_async(self, cycle):
        asserted = yield from self.reset.asserted(cycle)
        if asserted is common.UnDefined:
            return asserted
        if asserted:
            return self.initial
        ticked = yield from self.clock.active(cycle - 1)
        if ticked is common.UnDefined:
            return ticked
        if ticked:
            return (yield self.source, cycle - 1)
        # holds the previous output, which includes any reset
        return (yield self, cycle - 1)

    def evaluate_sync(self, cycle):
        ticked = yield from self.clock.active(cycle - 1)
        if ticked is common.UnDefined:
            return ticked
        if not ticked:
            return (yield self, cycle - 1)
        asserted = yield from self.reset.asserted(cycle - 1)
        if asserted is common.UnDefined:
            return asserted
        if asserted:
            return self.initial
        return (yield self.source, cycle - 1)


def delay(source, clock = None):
    '''delays the values of source by one cycle; the value at cycle 0 is UnDefined

    sample_n_lazy(3, lambda: delay(from_list([1, 2, 3, 4])))  ->  [UnDefined, 1, 2]
    '''
    return Delay(clocks.clock_or_hidden(clock), source)


def delay_n(count, source, clock = None):
    'count delays in series, sharing one clock'
    common.LatencyMismatch.insist(isinstance(count, int) and not isinstance(count, bool) and count >= 0,
        f'cannot delay by {count!r} cycles')
    delay_clock = clocks.clock_or_hidden(clock)
    for _ in range(count):
        source = Delay(delay_clock, source)
    return signal.as_signal(source)


def register(initial, source, clock = None, reset = None):
    '''delays the values of source by one cycle; the value at cycle 0 is initial

    the reset is active-high by default: while asserted the output is initial

    sample_n(3, lambda: register(8, from_list([1, 2, 3, 4])))  ->  [8, 1, 2]
    '''
    return Register(clocks.clock_or_hidden(clock), clocks.reset_or_hidden(reset), initial, source)


def reg_en(initial, enable, source, clock = None, reset = None):
    ''' register which only takes a new value in cycles where enable is True

    oscillate = fix(lambda o: register(False, not_(o)))
    count = fix(lambda c: reg_en(0, oscillate, c + 1))
    sample_n(8, count) -> [0, 0, 1, 1, 2, 2, 3, 3]
    '''
    gated = clocks.clock_gate(clocks.clock_or_hidden(clock), enable)
    return Register(gated, clocks.reset_or_hidden(reset), initial, source)


def is_present(value):
    return value is not None


def reg_maybe(initial, source, clock = None, reset = None):
    ''' register which only takes a new value in cycles where source is not None

    None is the "no value" marker, so None itself cannot be stored
    '''
    source = signal.as_signal(source)
    present = signal.Map(is_present, (source,), name = 'is_present')
    gated = clocks.clock_gate(clocks.clock_or_hidden(clock), present)
    return Register(gated, clocks.reset_or_hidden(reset), initial, source)


def reset_synchroniser(sync_clock, reset):
    ''' reset which asserts with the given reset but de-asserts on the clock

    two registers in series, both forced to True by the reset, shifting in False
    '''
    first = Register(sync_clock, reset, True, False)
    second = Register(sync_clock, reset, True, first)
    return clocks.Reset(sync_clock.domain, second, clocks.ResetKind.Asynchronous)
