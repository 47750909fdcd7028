'''
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep implementation
======================

simulator classes and the sampling functions (none of this is synthesisable)

elaboration
    collect every signal reachable from the one being sampled into an arena,
    one index per signal, with Feedback placeholders sharing the index of the
    signal they are bound to

evaluation
    a value is identified by (index, cycle) and computed at most once while it
    stays in the memo
    each signal's evaluate() generator asks for the values it needs; requests are
    served from the memo or by pushing that signal's generator onto an explicit
    stack, so long chains of earlier cycles never exhaust the Python stack
    asking for a value which is already on the stack is a combinational loop

evaluation policy
    Strict  each sampled value is forced: an UnDefined anywhere in it raises
            ReadUnDefined at that cycle, and a failing evaluation raises at once
    Lazy    sampled values are returned as they are, UnDefined markers included;
            an exception while evaluating a cycle is kept in a Deferred marker and
            raised again only when that value is used

memo window
    delays and registers only read the previous cycle, so when stepping forward
    the memo keeps the last two cycles only
    a value() request for an older cycle is recomputed from the inputs

default environment for the sampling functions
    System clock, always ticking
    asynchronous reset, asserted in cycle 0 only
'''

import enum
import itertools
import logging

from . import common, signal
from . import clock as clocks

logger = logging.getLogger(__name__)

Evaluation = enum.Enum('Evaluation', 'Strict Lazy')


class Elaboration:
    def __init__(self, root):
        self.nodes = []
        self.index_of = {}
        pending = [root]
        while pending:
            node = pending.pop(-1)
            if node in self.index_of:
                continue
            target = signal.resolve(node)
            if target not in self.index_of:
                self.index_of[target] = len(self.nodes)
                self.nodes.append(target)
                pending.extend(target.inputs())
            self.index_of[node] = self.index_of[target]
        self.root = signal.resolve(root)

    def __len__(self):
        return len(self.nodes)

    def key(self, node, cycle):
        index = self.index_of.get(node, None)
        assert index is not None, f'{node!r} is read but not listed in any inputs()'
        return index, cycle


class Simulator:
    def __init__(self, root, evaluation = Evaluation.Strict):
        common.InvalidArgument.insist(isinstance(evaluation, Evaluation),
            f'unknown evaluation policy {evaluation!r}')
        self.elaboration = Elaboration(root)
        self.evaluation = evaluation
        self.memo = dict()
        self.cycle = 0
        self.num_evaluations = 0
        logger.debug('elaborated %d signals from %r (%s evaluation)',
            len(self.elaboration), self.elaboration.root, evaluation.name)

    def value(self, node, cycle):
        'value of a signal of the circuit at a cycle, without forcing'
        common.InvalidArgument.insist(cycle >= 0, f'no cycle {cycle}')
        nodes = self.elaboration.nodes
        root_key = self.elaboration.key(node, cycle)
        if root_key in self.memo:
            return self.memo[root_key]

        in_progress = {root_key}
        stack = [(root_key, nodes[root_key[0]].evaluate(cycle))]
        reply = None
        while stack:
            key, coroutine = stack[-1]
            try:
                wanted, wanted_cycle = coroutine.send(reply)
            except StopIteration as stop:
                stack.pop(-1)
                in_progress.discard(key)
                self.memo[key] = reply = stop.value
                self.num_evaluations += 1
                continue

            assert wanted_cycle >= 0, f'{nodes[key[0]]!r} asked for cycle {wanted_cycle}'
            wanted_key = self.elaboration.key(wanted, wanted_cycle)
            if wanted_key in self.memo:
                reply = self.memo[wanted_key]
                continue
            common.CombinationalLoop.insist(wanted_key not in in_progress,
                f'{nodes[wanted_key[0]]!r} depends on itself within cycle {wanted_cycle}; '
                'every feedback path needs a delay or register')
            in_progress.add(wanted_key)
            stack.append((wanted_key, nodes[wanted_key[0]].evaluate(wanted_cycle)))
            reply = None

        return self.memo[root_key]

    def sample(self, cycle):
        if self.evaluation is Evaluation.Strict:
            return common.force(self.value(self.elaboration.root, cycle), cycle)
        try:
            return self.value(self.elaboration.root, cycle)
        except Exception as error:
            logger.debug('cycle %d deferred: %r', cycle, error)
            return common.Deferred(error, cycle)

    def forget_before(self, cycle):
        'drop memoised values of cycles before the one given'
        stale = [key for key in self.memo if key[1] < cycle]
        for key in stale:
            del self.memo[key]

    def run_one_step(self, show_print = False, print_headers = True):
        'infinite generator of samples, continuing from the last cycle sampled'
        while True:
            value = self.sample(self.cycle)
            if show_print:
                if print_headers:
                    print(f'cycle {self.cycle}', '::', value)
                else:
                    print(value)
            self.forget_before(self.cycle - 1)
            self.cycle += 1
            yield value

    def run(self, cycles, show_print = False, print_headers = True):
        logger.debug('running %d cycles from cycle %d', cycles, self.cycle)
        steps = self.run_one_step(show_print, print_headers)
        return list(itertools.islice(steps, cycles))


def default_clock_domain():
    return clocks.ClockDomain(clocks.system_clock(), clocks.system_reset())


def build(circuit, *args):
    ''' a signal, either given or made by calling circuit(*args)

    the call is made with the default clock and reset bound, so that stateful
    elements inside circuit find them implicitly
    '''
    if isinstance(circuit, signal.Signal):
        common.InvalidArgument.insist(not args, 'arguments given for a signal which is already built')
        return circuit
    with default_clock_domain():
        return signal.as_signal(circuit(*args))


def sample(circuit):
    'infinite generator of the values of a signal, each forced'
    return Simulator(build(circuit)).run_one_step()


def sample_lazy(circuit):
    return Simulator(build(circuit), Evaluation.Lazy).run_one_step()


def sample_n(n, circuit):
    'list of the first n values of a signal, each forced'
    return Simulator(build(circuit)).run(n)


def sample_n_lazy(n, circuit):
    return Simulator(build(circuit), Evaluation.Lazy).run(n)


def simulate_with(function, inputs, cycles, evaluation):
    inputs = list(inputs)
    cycles = len(inputs) if cycles is None else cycles
    output = build(function, signal.from_list(inputs))
    return Simulator(output, evaluation).run(cycles)


def simulate(function, inputs, cycles = None):
    ''' outputs of a signal-to-signal function given a list of input values

    one output per input unless cycles says otherwise; reading the inputs beyond
    the end of the list raises InputExhausted
        simulate(lambda s: register(8, s), [1, 2, 3])  ->  [8, 1, 2]
    '''
    return simulate_with(function, inputs, cycles, Evaluation.Strict)


def simulate_lazy(function, inputs, cycles = None):
    return simulate_with(function, inputs, cycles, Evaluation.Lazy)


def simulate_b_with(function, inputs, cycles, evaluation):
    inputs = [tuple(x) for x in inputs]
    if not inputs:
        return []
    width = len(inputs[0])
    common.InvalidArgument.insist(all(len(x) == width for x in inputs),
        'input tuples of different widths')

    def bundled(source):
        result = function(*signal.unbundle(source, width))
        if isinstance(result, tuple):
            return signal.bundle(*result)
        return result

    return simulate_with(bundled, inputs, cycles, evaluation)


def simulate_b(function, inputs, cycles = None):
    ''' as simulate, for a function taking and returning tuples of signals

    inputs and outputs are lists of tuples
        simulate_b(lambda a, b: (register(0, b), register(0, a)), [(1, 2), (3, 4)])  ->  [(0, 0), (2, 1)]
    '''
    return simulate_b_with(function, inputs, cycles, Evaluation.Strict)


def simulate_b_lazy(function, inputs, cycles = None):
    return simulate_b_with(function, inputs, cycles, Evaluation.Lazy)


def test_for(n, circuit):
    'True if the first n values of a boolean signal are all True'
    return all(sample_n(n, circuit))

# keep pytest from collecting the helper when it is imported into a test module
test_for.__test__ = False
