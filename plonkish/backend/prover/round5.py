"""
Prover Round 5: 회전별 일괄 KZG 열기 증명
=========================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: v                           │
  │  Prover → Verifier: [W_r]₁  (열기 일정의 r 마다) │
  └─────────────────────────────────────────────────┘

선형화 없이 모든 다항식을 직접 연다. 같은 점에서 여는 다항식들은 v 거듭제곱으로 묶는다.

  F_r(x) = Σ_i v^i · p_i(x)                 (일정 r 의 i 번째 다항식)
  W_r(x) = (F_r(x) - F_r(ζω^r)) / (x - ζω^r)

Verifier 는 커밋먼트의 같은 선형결합 [F_r]₁ 과 평가값의 결합 E_r 로 확인한다.
"""

from plonkish.backend.kzg import batch_open
from plonkish.backend.prover.round4 import polynomial_for
from plonkish.backend.utils import rotation_factor


def execute(state):
    """Round 5 를 실행한다.

    Args:
        state: ProverState. Round 1~4 결과를 읽고 opening_comms 를 기록한다.
    """
    state.v = state.transcript.challenge_scalar(b"v")

    for rotation, keys in state.pk.vk.schedule:
        point = state.zeta * rotation_factor(state.omega, state.n, rotation)
        polys = [polynomial_for(state, key) for key in keys]
        witness = batch_open(polys, point, state.v, state.pk.srs)
        state.proof.opening_comms.append(witness)
        state.transcript.append_point(f"W@{rotation}".encode(), witness)
