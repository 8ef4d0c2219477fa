"""
공용 픽스처
===========

SRS 생성과 키 생성은 비싸므로 세션 범위로 한 번만 만든다.
"""

import pytest

from plonkish import config
from plonkish.backend.keygen import generate_keys
from plonkish.backend.srs import SRS
from plonkish.circuit import CubicCircuit


@pytest.fixture(scope="session")
def srs():
    """k = 4 격자용 결정론적 SRS."""
    return SRS.for_k(config.DEFAULT_K, seed=config.DEFAULT_SRS_SEED)


@pytest.fixture(scope="session")
def keys(srs):
    """x³ + x + 5 회로의 (ProvingKey, VerifyingKey)."""
    return generate_keys(CubicCircuit(), srs, config.DEFAULT_K)
