"""
Prover Round 4: 평가값 산출
===========================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: ζ                           │
  │  Prover → Verifier: 열기 일정의 모든 평가값      │
  └─────────────────────────────────────────────────┘

  회전 r 마다 점 ζ·ω^r 에서 일정에 적힌 다항식을 평가한다.

    r = 0 : advice_*, fixed_*, selector_*, sigma_*, z, t_*
    r = 1 : advice_0 (게이트의 out 질의), z

  Verifier 는 이 값들로 C(ζ) 를 다시 계산하고 t(ζ)·Z_H(ζ) 와 비교한다.
"""

from plonkish.backend.utils import rotation_factor


def polynomial_for(state, key):
    """평가값 키 → Prover 가 가진 다항식."""
    pk = state.pk
    if key == "z":
        return state.z_poly
    kind, _, index = key.rpartition("_")
    index = int(index)
    if kind == "advice":
        return state.advice_polys[index]
    if kind == "fixed":
        return pk.fixed_polys[index]
    if kind == "selector":
        return pk.selector_polys[index]
    if kind == "sigma":
        return pk.sigma_polys[index]
    if kind == "t":
        return state.t_chunks[index]
    raise KeyError(key)


def execute(state):
    """Round 4 를 실행한다.

    Args:
        state: ProverState. 모든 다항식을 읽고 proof.evals 를 채운다.
    """
    state.zeta = state.transcript.challenge_scalar(b"zeta")

    for rotation, keys in state.pk.vk.schedule:
        point = state.zeta * rotation_factor(state.omega, state.n, rotation)
        for key in keys:
            value = polynomial_for(state, key).evaluate(point)
            state.proof.evals[(rotation, key)] = value
            state.transcript.append_scalar(f"{key}@{rotation}".encode(), value)
