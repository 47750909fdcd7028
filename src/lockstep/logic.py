'''
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep implementation
======================

boolean connectives and comparisons lifted to signals, and the multiplexer

the connectives follow the left-to-right short-circuit of "and"/"or":
a defined left operand can decide the result even when the right one is undefined
'''

from . import common, domain, signal


def logical_and(a, b):
    if a is common.UnDefined:
        return common.UnDefined
    if not a:
        return False
    return b if b is common.UnDefined else bool(b)


def logical_or(a, b):
    if a is common.UnDefined:
        return common.UnDefined
    if a:
        return True
    return b if b is common.UnDefined else bool(b)


def logical_not(a):
    return not a


def and_(a, b):
    return signal.Map(logical_and, (a, b), propagate_undefined = False, name = 'and')


def or_(a, b):
    return signal.Map(logical_or, (a, b), propagate_undefined = False, name = 'or')


def not_(a):
    return signal.Map(logical_not, (a,), name = 'not')


def eq(a, b):
    return signal.as_signal(a).eq(b)


def ne(a, b):
    return signal.as_signal(a).ne(b)


def lt(a, b):
    return signal.as_signal(a).lt(b)


def le(a, b):
    return signal.as_signal(a).le(b)


def gt(a, b):
    return signal.as_signal(a).gt(b)


def ge(a, b):
    return signal.as_signal(a).ge(b)


class Mux(signal.Signal):
    'only the selected operand is evaluated at each cycle'
    def __init__(self, select, when_true, when_false):
        self.select = signal.as_signal(select)
        self.when_true = signal.as_signal(when_true)
        self.when_false = signal.as_signal(when_false)
        self.domain = domain.common_domain(
            self.select.domain, self.when_true.domain, self.when_false.domain,
            what = 'multiplexer operands')

    def inputs(self):
        return (self.select, self.when_true, self.when_false)

    def evaluate(self, cycle):
        selected = yield self.select, cycle
        if selected is common.UnDefined:
            return common.UnDefined
        return (yield (self.when_true if selected else self.when_false), cycle)


def mux(select, when_true, when_false):
    return Mux(select, when_true, when_false)
