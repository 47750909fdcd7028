'''
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep implementation
======================

constant (singleton) objects used in Lockstep

exception classes

forcing of sampled values to normal form
'''


class FixedConstant:
    def __init__(self, name):
        self.name = name

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.name

    def __hash__(self):
        return hash(self.name)

    def __bool__(self):
        # an undefined value has no truth; callers must test with "is"
        raise ReadUnDefined(f'truth value of {self.name} requested')

UnDefined = FixedConstant('UnDefined')


class Deferred(FixedConstant):
    ''' lazily sampled value whose evaluation raised an exception

    the exception is raised again when the value is used: truth-tested or forced
    '''
    def __init__(self, error, cycle):
        super().__init__(f'Deferred({type(error).__name__} at cycle {cycle})')
        self.error = error
        self.cycle = cycle

    def __bool__(self):
        raise self.error

    def force(self):
        raise self.error


class LockstepException(Exception):
    @classmethod
    def insist(cls, condition, *args):
        if not condition:
            raise cls(*args)

    @classmethod
    def subclass(cls, class_name):
        return type(cls)(class_name, (cls,), {})

ReadUnDefined = LockstepException.subclass('ReadUnDefined')
DomainMismatch = LockstepException.subclass('DomainMismatch')
LatencyMismatch = LockstepException.subclass('LatencyMismatch')
InputExhausted = LockstepException.subclass('InputExhausted')
CombinationalLoop = LockstepException.subclass('CombinationalLoop')
UnBoundSignal = LockstepException.subclass('UnBoundSignal')
UnBoundClock = LockstepException.subclass('UnBoundClock')
InvalidArgument = LockstepException.subclass('InvalidArgument')


def contains_undefined(value):
    'deep search of containers for the undefined marker'
    if value is UnDefined:
        return True
    if isinstance(value, (tuple, list, set, frozenset)):
        return any(contains_undefined(v) for v in value)
    if isinstance(value, dict):
        return any(contains_undefined(v) for v in value.values())
    return False


def force(value, cycle):
    ''' bring a sampled value to normal form

    a Deferred value raises its exception again; otherwise forcing only has to
    check that nothing in the value is still undefined
    '''
    if isinstance(value, Deferred):
        value.force()
    ReadUnDefined.insist(not contains_undefined(value),
        f'Error reading undefined value at cycle {cycle}: {value!r}')
    return value
