'''
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep implementation
======================

cycle-level models of synchronous circuits as streams of per-cycle values

    from lockstep import *

    def counter():
        return fix(lambda count: register(0, count + 1))

    sample_n(4, counter)  ->  [0, 1, 2, 3]

lint is not fully clean and probably cannot be, but valuable
    ruff check src --exclude __init__.py
    ruff check tests

FIXME
    domain checks are made at composition time, so a signal built on an unbound
    Feedback cannot be checked against the domain of its later binding
    sub-cycle reset timing is not modelled; asynchronous resets act in the cycle
    they are asserted and synchronous resets at the next active edge
    multi-clock circuits: each domain is simulated in cycles of its own clock,
    there is no conversion between domains with different periods
'''

from .__about__ import __version__

from .common import *
from .domain import *
from .signal import *
from .logic import *
from .clock import *
from .stateful import *
from .delayed import *
from .simulator import *
