"""
Prover Round 3: 몫 다항식 t(x) 커밋
===================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: α                           │
  │  Prover → Verifier: [t_0]₁, ..., [t_{c-1}]₁     │
  └─────────────────────────────────────────────────┘

**제약 다항식 C(x)**: 게이트 다항식 G 개와 순열 제약 두 개를 α 거듭제곱으로 묶는다.

  C(x) = Σ_j α^j · gate_j(x)
       + α^G     · (z(x)·분자(x) - z(ωx)·분모(x))
       + α^{G+1} · (z(x) - 1)·L₀(x)

  게이트 다항식은 표현식 트리를 다항식 위에서 평가해 얻는다.
  질의 (열, 회전 r) 은 열 다항식 p(ω^r·x) 가 된다.

**t(x) = C(x) / Z_H(x)**:
  격자가 모든 제약을 만족하면 나머지가 0 이다.
  나머지가 0 이 아니면 경고만 남기고 계속한다. 그런 증명은 Verifier 가 거부한다.

**조각 분할**:
  t(x) = Σ_i x^{i·n} · t_i(x),  조각 수는 VerifyingKey.num_t_chunks
"""

import logging

from plonkish.backend.field import FR
from plonkish.backend.kzg import commit
from plonkish.backend.permutation import grand_product_terms
from plonkish.backend.polynomial import Polynomial, poly_div
from plonkish.backend.utils import rotation_factor

logger = logging.getLogger(__name__)


def execute(state):
    """Round 3 을 실행한다.

    Args:
        state: ProverState. Round 1, 2 결과를 읽고 t_chunks 와 커밋먼트를 기록한다.
    """
    # ── 1. α 챌린지 ──
    state.alpha = state.transcript.challenge_scalar(b"alpha")

    pk = state.pk
    n = state.n
    omega = state.omega
    alpha = state.alpha

    # ── 2. 게이트 항 ──
    rotated = {}

    def query(column, rotation):
        key = (column, rotation)
        if key not in rotated:
            factor = rotation_factor(omega, n, rotation)
            rotated[key] = state.column_poly(column).rotate(factor)
        return rotated[key]

    constraint = Polynomial.zero()
    alpha_power = FR(1)
    for gate in pk.cs.gates:
        for poly in gate.polys:
            gate_poly = poly.evaluate(
                lambda c: Polynomial([c]),
                lambda s: pk.selector_polys[s.index],
                query,
            )
            constraint = constraint + gate_poly * alpha_power
            alpha_power = alpha_power * alpha

    # ── 3. 순열 항 ──
    z = state.z_poly
    z_omega = z.rotate(omega)
    column_polys = [state.column_poly(c) for c in pk.cs.permutation_columns]
    numerator, denominator = grand_product_terms(
        column_polys, pk.sigma_polys, state.beta, state.gamma
    )
    constraint = constraint + (z * numerator - z_omega * denominator) * alpha_power
    alpha_power = alpha_power * alpha

    # ── 4. 경계 항: z(ω⁰) = 1 ──
    constraint = constraint + (z - FR(1)) * pk.l0_poly * alpha_power

    # ── 5. Z_H 로 나누기 ──
    t_poly, remainder = poly_div(constraint, Polynomial.vanishing(n))
    if not remainder.is_zero():
        logger.warning(
            "Constraint polynomial is not divisible by Z_H; "
            "the witness does not satisfy the circuit and the proof will not verify"
        )

    # ── 6. 조각 분할 + 커밋 ──
    state.t_chunks = t_poly.chunks(n, pk.vk.num_t_chunks)
    for i, chunk in enumerate(state.t_chunks):
        comm = commit(chunk, pk.srs)
        state.proof.t_comms.append(comm)
        state.transcript.append_point(f"t_{i}".encode(), comm)
    logger.debug("Round 3: deg t = %d, %d chunks", t_poly.degree, len(state.t_chunks))
