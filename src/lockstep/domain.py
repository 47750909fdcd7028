'''
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep implementation
======================

Lockstep clock domains

A domain is a class, not an object: Domain['Fast', 2500] creates (once) a
subclass of DomainBase carrying the name, nominal period and active edge.
Equal parameters give the identical class, so domains are compared with "is".

The period is only a label; simulation is indexed by cycle, not by time.
'''

import enum

from . import common, parameterise


Edge = enum.Enum('Edge', 'Rising Falling')


class DomainBase:
    name = None
    period_ps = None
    edge = None

    def __init__(self, *args, **kwargs):
        assert False, 'domains are tags and are never instantiated'

    @classmethod
    def describe(cls):
        return f'{cls.name}({cls.period_ps}ps, {cls.edge.name.lower()})'


@parameterise.Generic
def Domain(name, period_ps = 10000, edge = Edge.Rising):
    ''' domain tag class

    parameter variants:
    - Domain['Name'] means a 10ns rising-edge domain
    - Domain['Name', period_ps]
    - Domain['Name', period_ps, Edge.Falling]
    '''
    common.InvalidArgument.insist(isinstance(name, str) and name,
        'domain name must be a non-empty string')
    common.InvalidArgument.insist(isinstance(period_ps, int) and period_ps > 0,
        'domain period must be a positive integer')
    common.InvalidArgument.insist(isinstance(edge, Edge), f'{edge!r} is not an Edge')

    params = dict(name = name, period_ps = period_ps, edge = edge)
    return type(f'Domain_{name}', (DomainBase,), params)


System = Domain['System', 10000]


def is_domain(candidate):
    return isinstance(candidate, type) and issubclass(candidate, DomainBase)


def common_domain(*domains, what = 'signals'):
    ''' the single domain shared by all the given domains

    None is a domain-agnostic wildcard (constants, list fixtures)
    '''
    found = None
    for d in domains:
        if d is None:
            continue
        if found is None:
            found = d
        else:
            common.DomainMismatch.insist(d is found,
                f'cannot combine {what} from domains {found.describe()} and {d.describe()}')
    return found
