"""
Structured Reference String (SRS)
=================================

KZG 커밋먼트용 범용(universal) 공개 파라미터.

  SRS = {
      G1 powers: [G1, τ·G1, τ²·G1, ..., τ^d·G1]
      G2 powers: [G2, τ·G2]
  }

격자 크기 k 의 회로는 블라인딩된 다항식 (차수 ≤ n - 1 + BLINDING_FACTORS) 을
커밋하므로 d ≥ n + SRS_DEGREE_HEADROOM 이어야 한다.

τ 는 교육용으로 seed 에서 결정론적으로 유도한다. 실제 시스템에서는 MPC 로 생성한다.

사용 예시:
    >>> srs = SRS.for_k(4, seed=42)
    >>> srs.max_degree   # 16 + 3
"""

import hashlib
import logging
import secrets

from plonkish import config
from plonkish.backend.field import FR, G1, G2, ec_mul, CURVE_ORDER

logger = logging.getLogger(__name__)


class SRS:
    """KZG 공개 파라미터.

    속성:
        g1_powers: [G1, τ·G1, ..., τ^d·G1]
        g2_powers: [G2, τ·G2]
        max_degree: d
    """

    def __init__(self, g1_powers, g2_powers, max_degree):
        self.g1_powers = g1_powers
        self.g2_powers = g2_powers
        self.max_degree = max_degree

    @classmethod
    def generate(cls, max_degree, seed=None):
        """차수 max_degree 까지 지원하는 SRS 를 만든다.

        Args:
            max_degree: 커밋 가능한 최대 다항식 차수
            seed: 결정론적 τ 유도용 시드. None 이면 난수 τ.
        """
        if seed is not None:
            h = hashlib.sha256(str(seed).encode()).digest()
            tau_int = int.from_bytes(h, "big") % CURVE_ORDER
        else:
            tau_int = secrets.randbelow(CURVE_ORDER - 1) + 1
        tau = FR(tau_int)

        g1_powers = []
        tau_power = FR(1)
        for _ in range(max_degree + 1):
            g1_powers.append(ec_mul(G1, tau_power))
            tau_power = tau_power * tau

        g2_powers = [G2, ec_mul(G2, tau)]

        logger.info("SRS generated: max_degree=%d", max_degree)
        return cls(g1_powers, g2_powers, max_degree)

    @classmethod
    def for_k(cls, k, seed=None):
        """2^k 행 격자에 맞는 SRS."""
        return cls.generate((1 << k) + config.SRS_DEGREE_HEADROOM, seed=seed)
