'''
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep implementation
======================

Lockstep Signal type


A Signal is an immutable description of a stream with one value per clock cycle
It holds no values and no state; values only exist inside a Simulator run

Every Signal subclass provides
    inputs()            the signals it reads, used for elaboration
    evaluate(cycle)     a generator which yields (signal, cycle) requests,
                        is sent back the requested values, and returns the value

The simulator steps the evaluate() generators on an explicit stack, so a request
never recurses on the Python stack; see simulator.py

Self-referential streams are built with a Feedback placeholder which is bound
once the signal it stands for exists (or with fix, which does both steps)
'''

import operator

from . import common, domain


class Signal:
    domain = None

    def __init__(self, *args, **kwargs):
        assert False, 'attempt to create a base class object'

    @property
    def name(self):
        return type(self).__name__.lower()

    def __repr__(self):
        domain_name = '' if self.domain is None else f' @{self.domain.name}'
        return f'<{type(self).__name__} {self.name}{domain_name}>'

    def __bool__(self):
        raise TypeError(f'{self!r} is a stream and has no truth value; use mux')

    def inputs(self):
        return ()

    def evaluate(self, cycle):
        assert False, 'abstract base method called; not an evaluable signal'

    @classmethod
    def pure(cls, value):
        return Constant(value)

    def map(self, function, name = None):
        return Map(function, (self,), name = name)

    # point-wise comparisons, returning boolean signals
    def eq(self, other):
        return lift(operator.eq, self, other)

    def ne(self, other):
        return lift(operator.ne, self, other)

    def lt(self, other):
        return lift(operator.lt, self, other)

    def le(self, other):
        return lift(operator.le, self, other)

    def gt(self, other):
        return lift(operator.gt, self, other)

    def ge(self, other):
        return lift(operator.ge, self, other)

    # symmetrical binary operators are applied cycle by cycle
    def __add__(self, other, op = operator.add):
        return lift(op, self, other)

    def __sub__(self, other, op = operator.sub):
        return lift(op, self, other)

    def __mul__(self, other, op = operator.mul):
        return lift(op, self, other)

    def __floordiv__(self, other, op = operator.floordiv):
        return lift(op, self, other)

    def __truediv__(self, other, op = operator.truediv):
        return lift(op, self, other)

    def __mod__(self, other, op = operator.mod):
        return lift(op, self, other)

    def __pow__(self, other, op = operator.pow):
        return lift(op, self, other)

    def __and__(self, other, op = operator.and_):
        return lift(op, self, other)

    def __or__(self, other, op = operator.or_):
        return lift(op, self, other)

    def __xor__(self, other, op = operator.xor):
        return lift(op, self, other)

    def __lshift__(self, other, op = operator.lshift):
        return lift(op, self, other)

    def __rshift__(self, other, op = operator.rshift):
        return lift(op, self, other)

    # right-side binary operators keep the operand order
    def __radd__(self, other, op = operator.add):
        return lift(op, other, self)

    def __rsub__(self, other, op = operator.sub):
        return lift(op, other, self)

    def __rmul__(self, other, op = operator.mul):
        return lift(op, other, self)

    def __rfloordiv__(self, other, op = operator.floordiv):
        return lift(op, other, self)

    def __rtruediv__(self, other, op = operator.truediv):
        return lift(op, other, self)

    def __rmod__(self, other, op = operator.mod):
        return lift(op, other, self)

    def __rand__(self, other, op = operator.and_):
        return lift(op, other, self)

    def __ror__(self, other, op = operator.or_):
        return lift(op, other, self)

    def __rxor__(self, other, op = operator.xor):
        return lift(op, other, self)

    def __rpow__(self, other, op = operator.pow):
        return lift(op, other, self)

    def __rlshift__(self, other, op = operator.lshift):
        return lift(op, other, self)

    def __rrshift__(self, other, op = operator.rshift):
        return lift(op, other, self)

    # unary operators
    def __neg__(self, op = operator.neg):
        return self.map(op)

    def __pos__(self, op = operator.pos):
        return self.map(op)

    def __abs__(self, op = operator.abs):
        return self.map(op)

    def __invert__(self, op = operator.invert):
        return self.map(op)

    # signals are graph nodes, hashed by identity; == would read as a point-wise
    # comparison, so it is refused like the truth value
    def __eq__(self, other):
        raise TypeError(f'{self!r} is a stream and cannot be compared with ==; use .eq()')

    def __ne__(self, other):
        raise TypeError(f'{self!r} is a stream and cannot be compared with !=; use .ne()')

    __hash__ = object.__hash__


class Constant(Signal):
    def __init__(self, value):
        self.value = value

    @property
    def name(self):
        return repr(self.value)

    def evaluate(self, cycle):
        yield from ()
        return self.value


class FromList(Signal):
    'test fixture: reading past the end of the list raises InputExhausted'
    def __init__(self, values):
        self.values = tuple(values)

    @property
    def name(self):
        return f'from_list[{len(self.values)}]'

    def evaluate(self, cycle):
        yield from ()
        common.InputExhausted.insist(cycle < len(self.values),
            f'input list of length {len(self.values)} read at cycle {cycle}')
        return self.values[cycle]


class Cons(Signal):
    'head at cycle 0, then the tail stream shifted by one cycle (no clock involved)'
    def __init__(self, head, tail):
        self.head = head
        self.tail = as_signal(tail)
        self.domain = self.tail.domain

    def inputs(self):
        return (self.tail,)

    def evaluate(self, cycle):
        if cycle == 0:
            return self.head
        return (yield self.tail, cycle - 1)


class Map(Signal):
    ''' point-wise application of a function to one or more signals

    an undefined operand makes the result undefined without calling the function,
    unless propagate_undefined is False (eg for bundling into a tuple)
    '''
    def __init__(self, function, operands, propagate_undefined = True, name = None):
        self.function = function
        self.operands = tuple(as_signal(s) for s in operands)
        self.propagate_undefined = propagate_undefined
        self.function_name = name or getattr(function, '__name__', 'function')
        self.domain = domain.common_domain(*(s.domain for s in self.operands),
            what = f'operands of {self.function_name}')

    @property
    def name(self):
        return self.function_name

    def inputs(self):
        return self.operands

    def evaluate(self, cycle):
        values = []
        for s in self.operands:
            values.append((yield s, cycle))
        if self.propagate_undefined and any(v is common.UnDefined for v in values):
            return common.UnDefined
        return self.function(*values)


class Feedback(Signal):
    ''' forward declaration of a signal, for self-referential definitions

        count = Feedback()
        count.bind(register(0, count + 1))

    the simulator replaces a bound feedback by its target during elaboration
    '''
    def __init__(self, domain = None, name = 'feedback'):
        self.declared_domain = domain
        self.target = None
        self.feedback_name = name

    @property
    def name(self):
        return self.feedback_name

    @property
    def domain(self):
        return self.declared_domain if self.target is None else self.target.domain

    def bind(self, target):
        common.UnBoundSignal.insist(self.target is None, f'{self!r} is already bound')
        target = as_signal(target)
        placeholder = target
        while isinstance(placeholder, Feedback):
            common.CombinationalLoop.insist(placeholder is not self,
                f'{self.name} is bound only to other placeholders')
            placeholder = placeholder.target
        domain.common_domain(self.declared_domain, target.domain,
            what = f'{self.name} and its binding')
        self.target = target
        return target

    def inputs(self):
        return () if self.target is None else (self.target,)

    def evaluate(self, cycle):
        common.UnBoundSignal.insist(self.target is not None, f'{self!r} read before it was bound')
        return (yield self.target, cycle)


def resolve(s):
    'follow feedback placeholders to the signal they stand for'
    while isinstance(s, Feedback):
        common.UnBoundSignal.insist(s.target is not None, f'{s!r} is never bound')
        s = s.target
    return s


def as_signal(value):
    return value if isinstance(value, Signal) else Constant(value)


def pure(value):
    return Constant(value)

constant = pure


def from_list(values):
    return FromList(values)


def cons(head, tail):
    return Cons(head, tail)


def lift(function, *signals, name = None):
    return Map(function, signals, name = name)


def fix(function, domain = None, name = 'feedback'):
    ''' explicit fixed point: the signal s such that s = function(s)

    function receives a placeholder for its own result
    well-defined only if every path from the placeholder to the result passes
    through a delay element
    '''
    loop = Feedback(domain, name)
    return loop.bind(function(loop))


def make_tuple(*values):
    return values


def bundle(*signals):
    'signal of tuples from a tuple of signals; undefined fields stay in place'
    return Map(make_tuple, signals, propagate_undefined = False, name = 'bundle')


def unbundle(s, width):
    'tuple of signals from a signal of tuples'
    return tuple(Map(operator.itemgetter(i), (s,), name = f'field_{i}') for i in range(width))
