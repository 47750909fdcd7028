'''
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep implementation
======================

signals annotated with their latency, and opaque pipelined components

A DSignal is a signal together with the number of cycles it lags the inputs of
the circuit; operands combined point-wise must have the same latency

A BlackBox is a pipelined operator whose insides are not modelled, eg a
vendor floating-point core; it is known only by its function, its latency
and a configuration record that the simulation does not look at
    output at cycle n + latency = function(operands at cycle n)
    while the enable is low the whole pipeline holds
'''

import logging

from . import common, signal
from . import clock as clocks
from . import stateful

logger = logging.getLogger(__name__)


def check_latency(latency, what):
    common.LatencyMismatch.insist(
        isinstance(latency, int) and not isinstance(latency, bool) and latency >= 0,
        f'{what} must be a non-negative integer number of cycles, not {latency!r}')


class DSignal:
    def __init__(self, source, latency = 0):
        check_latency(latency, 'latency')
        self.signal = signal.as_signal(source)
        self.latency = latency

    def __repr__(self):
        return f'DSignal({self.signal!r}, latency = {self.latency})'

    @property
    def domain(self):
        return self.signal.domain

    def map(self, function, name = None):
        return DSignal(self.signal.map(function, name), self.latency)


def to_delayed(source):
    return source if isinstance(source, DSignal) else DSignal(source, 0)


def from_delayed(delayed):
    return delayed.signal


def delayed_lift(function, *operands, name = None):
    'point-wise function of operands which all have the same latency'
    operands = [to_delayed(d) for d in operands]
    latencies = {d.latency for d in operands}
    common.LatencyMismatch.insist(len(latencies) <= 1,
        f'cannot combine signals of latencies {sorted(latencies)}')
    latency = latencies.pop() if latencies else 0
    return DSignal(signal.lift(function, *(d.signal for d in operands), name = name), latency)


def delayed_delay(count, delayed, clock = None):
    check_latency(count, 'delay')
    delayed = to_delayed(delayed)
    return DSignal(stateful.delay_n(count, delayed.signal, clock), delayed.latency + count)


class BlackBox:
    def __init__(self, name, function, latency, config = None):
        check_latency(latency, f'latency of {name}')
        self.name = name
        self.function = function
        self.latency = latency
        self.config = config

    def __repr__(self):
        return f'<BlackBox {self.name} latency={self.latency} config={self.config!r}>'

    def __call__(self, *operands, clock = None, enable = None):
        pipeline_clock = clocks.clock_or_hidden(clock)
        if enable is not None:
            pipeline_clock = clocks.clock_gate(pipeline_clock, enable)
        logger.debug('instantiating %r on %r', self, pipeline_clock)
        computed = delayed_lift(self.function, *operands, name = self.name)
        return delayed_delay(self.latency, computed, pipeline_clock)
