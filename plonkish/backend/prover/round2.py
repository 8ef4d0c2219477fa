"""
Prover Round 2: 순열 누적자 z(x) 커밋
=====================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: β, γ                        │
  │  Prover → Verifier: [z]₁                        │
  └─────────────────────────────────────────────────┘

  z(ω⁰) = 1
  z(ωⁱ⁺¹) = z(ωⁱ) · ∏_j (v_j + β·k_j·ωⁱ + γ) / (v_j + β·σ_j(ωⁱ) + γ)

  v_j 는 순열 열 j (advice, fixed, instance 어느 종류든) 의 격자 값이다.
"""

from plonkish.backend.kzg import commit
from plonkish.backend.permutation import compute_accumulator
from plonkish.backend.polynomial import Polynomial
from plonkish.backend.prover.round1 import add_blinding


def execute(state):
    """Round 2 를 실행한다.

    Args:
        state: ProverState. 격자 값과 σ 를 읽고 z_poly 와 [z]₁ 을 기록한다.
    """
    # ── 1. β, γ 챌린지 ──
    state.beta = state.transcript.challenge_scalar(b"beta")
    state.gamma = state.transcript.challenge_scalar(b"gamma")

    # ── 2. 누적자 평가값 ──
    column_values = [
        state.assignment.column_values(column)
        for column in state.pk.cs.permutation_columns
    ]
    z_evals = compute_accumulator(
        column_values, state.pk.sigma_evals, state.n, state.domain,
        state.beta, state.gamma,
    )

    # ── 3. 보간 + 블라인딩 + 커밋 ──
    z_poly = Polynomial.from_evaluations(z_evals, state.omega)
    state.z_poly = add_blinding(z_poly, Polynomial.vanishing(state.n), state.rng)

    state.proof.z_comm = commit(state.z_poly, state.pk.srs)
    state.transcript.append_point(b"z_comm", state.proof.z_comm)
