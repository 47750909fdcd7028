"""
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep Tests
======================

pytest options
    --quick     fewer iterations in the randomised tests
"""

import pytest


def pytest_addoption(parser):
    parser.addoption("--quick", action="store_true", default=False,
        help="run fewer iterations of the randomised tests")


@pytest.fixture(scope="session")
def quick(pytestconfig):
    return pytestconfig.getoption("quick")


@pytest.fixture(scope="session")
def iterations(quick):
    return 5 if quick else 50
