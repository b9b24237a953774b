"""Shared zones for the test suite.

Zones 2 and 3 fold a few hundred Bragg planes, so they are built once per
session.
"""

from __future__ import annotations

import numpy as np
import pytest

from nth_brillouin import build_zone

SIMPLE_CUBIC = np.eye(3)
FCC = np.array([[0.0, 0.5, 0.5], [0.5, 0.0, 0.5], [0.5, 0.5, 0.0]])
BCC = np.array([[-0.5, 0.5, 0.5], [0.5, -0.5, 0.5], [0.5, 0.5, -0.5]])


@pytest.fixture(scope="session")
def cubic_zone1():
    return build_zone(SIMPLE_CUBIC, 1)


@pytest.fixture(scope="session")
def cubic_zone2():
    return build_zone(SIMPLE_CUBIC, 2)


@pytest.fixture(scope="session")
def cubic_zone3():
    return build_zone(SIMPLE_CUBIC, 3)


@pytest.fixture(scope="session")
def fcc_zone1():
    return build_zone(FCC, 1)


@pytest.fixture(scope="session")
def bcc_zone1():
    return build_zone(BCC, 1)


@pytest.fixture(scope="session")
def fcc_zone2():
    return build_zone(FCC, 2)
