"""
Prover Round 1: advice 열 다항식 커밋
=====================================

  ┌─────────────────────────────────────────────────┐
  │  Prover → Verifier: [advice_0]₁, [advice_1]₁, … │
  └─────────────────────────────────────────────────┘

**과정**:
  1. instance 열 보간 (커밋하지 않음, 제약식 구성용)
  2. advice 열 값을 IFFT 로 보간
  3. 블라인딩: a'(x) = a(x) + (b₀ + b₁·x + b₂·x²)·Z_H(x)
     Z_H 는 도메인 위에서 0 이므로 격자 값은 변하지 않는다.
  4. KZG 커밋 + 트랜스크립트 흡수
"""

from plonkish import config
from plonkish.backend.field import FR, CURVE_ORDER
from plonkish.backend.kzg import commit
from plonkish.backend.polynomial import Polynomial
from plonkish.backend.utils import instance_polynomial


def execute(state):
    """Round 1 을 실행한다.

    Args:
        state: ProverState. assignment 를 읽고 advice_polys, instance_polys 와
               advice 커밋먼트를 기록한다.
    """
    n = state.n
    omega = state.omega
    cs = state.pk.cs

    # ── 1. instance 다항식 ──
    state.instance_polys = [
        instance_polynomial(values, n, omega) for values in state.instances
    ]

    # ── 2. advice 다항식 보간 + 블라인딩 ──
    zh = Polynomial.vanishing(n)
    state.advice_polys = []
    for column in cs.advice_columns():
        poly = Polynomial.from_evaluations(state.assignment.column_values(column), omega)
        state.advice_polys.append(add_blinding(poly, zh, state.rng))

    # ── 3. 커밋 ──
    for i, poly in enumerate(state.advice_polys):
        comm = commit(poly, state.pk.srs)
        state.proof.advice_comms.append(comm)
        state.transcript.append_point(f"advice_{i}".encode(), comm)


def add_blinding(poly, zh, rng, num_blinds=config.BLINDING_FACTORS):
    """poly + (r₀ + r₁·x + ...)·Z_H(x). rᵢ 는 rng 에서 뽑는다."""
    blind = Polynomial([FR(rng.randrange(CURVE_ORDER)) for _ in range(num_blinds)])
    return poly + blind * zh
