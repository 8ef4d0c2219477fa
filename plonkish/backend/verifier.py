"""
Verifier
========

증명을 검증한다.

**검증 과정**:
  1. 증명 모양 확인 (커밋먼트 수, 평가값 키)
  2. Fiat-Shamir 트랜스크립트 재생 → β, γ, α, ζ, v, u 복원
  3. 열린 평가값으로 C(ζ) 재계산
     - advice/fixed/selector/σ/z 는 Prover 가 준 값
     - instance 는 공개 입력으로 직접 계산 (PI 가 바뀌면 여기서 달라진다)
  4. C(ζ) == t(ζ)·Z_H(ζ),  t(ζ) = Σ ζ^{i·n}·t_i(ζ)
  5. 일괄 페어링 검사

**핵심 방정식**:
  회전 r 의 열기 점 x_r = ζ·ω^r 에서

    [F_r]₁ = Σ_i v^i · [p_i]₁,    E_r = Σ_i v^i · p_i(x_r)
    e(W_r, [τ - x_r]₂) = e([F_r]₁ - E_r·G₁, G₂)

  ⇔ e(W_r, [τ]₂) = e(x_r·W_r + [F_r]₁ - E_r·G₁, G₂)

  회전마다의 식을 u 거듭제곱으로 묶어 페어링 두 번으로 확인한다.

    e(Σ u^r·W_r, [τ]₂) == e(Σ u^r·(x_r·W_r + [F_r]₁ - E_r·G₁), G₂)

사용 예시:
    >>> verify_proof(vk, [[35]], proof)   # True
    >>> verify_proof(vk, [[73]], proof)   # False
"""

import logging

from plonkish.backend.field import (
    FR, G1, G2, ec_add, ec_mul, ec_neg, ec_pairing, is_on_curve,
)
from plonkish.backend.keygen import column_key
from plonkish.backend.permutation import grand_product_evals
from plonkish.backend.prover import absorb_public, check_instances
from plonkish.backend.transcript import Transcript
from plonkish.backend.utils import (
    instance_poly_eval,
    lagrange_basis_eval,
    rotation_factor,
    vanishing_poly_eval,
)
from plonkish.layout import ColumnKind

logger = logging.getLogger(__name__)


def verify_proof(vk, instances, proof):
    """증명을 검증한다.

    Args:
        vk: VerifyingKey
        instances: [[공개 입력, ...], ...]
        proof: Proof

    Returns:
        bool: 검증 성공 여부
            개수가 맞지 않거나 곡선 밖의 점이 있는 증명도 False 이다.

    Raises:
        ValueError: 공개 입력 모양이 회로와 다를 때
    """
    check_instances(vk, instances)
    n = vk.n
    omega = vk.omega
    cs = vk.cs

    # ── Step 1: 증명 모양 ──
    if not _well_formed(vk, proof):
        logger.info("Proof rejected: malformed proof")
        return False

    # ── Step 2: 트랜스크립트 재생 ──
    transcript = Transcript()
    absorb_public(transcript, vk, instances)

    for i, comm in enumerate(proof.advice_comms):
        transcript.append_point(f"advice_{i}".encode(), comm)
    beta = transcript.challenge_scalar(b"beta")
    gamma = transcript.challenge_scalar(b"gamma")

    transcript.append_point(b"z_comm", proof.z_comm)
    alpha = transcript.challenge_scalar(b"alpha")

    for i, comm in enumerate(proof.t_comms):
        transcript.append_point(f"t_{i}".encode(), comm)
    zeta = transcript.challenge_scalar(b"zeta")

    for rotation, keys in vk.schedule:
        for key in keys:
            transcript.append_scalar(f"{key}@{rotation}".encode(), proof.evals[(rotation, key)])
    v = transcript.challenge_scalar(b"v")

    for (rotation, _), witness in zip(vk.schedule, proof.opening_comms):
        transcript.append_point(f"W@{rotation}".encode(), witness)
    u = transcript.challenge_scalar(b"u")

    # ── Step 3: C(ζ) 재계산 ──
    def query(column, rotation):
        if column.kind is ColumnKind.INSTANCE:
            point = zeta * rotation_factor(omega, n, rotation)
            return instance_poly_eval(instances[column.index], n, omega, point)
        return proof.evals[(rotation, column_key(column))]

    constraint = FR(0)
    alpha_power = FR(1)
    for gate in cs.gates:
        for poly in gate.polys:
            value = poly.evaluate(
                lambda c: c,
                lambda s: proof.evals[(0, f"selector_{s.index}")],
                query,
            )
            constraint = constraint + value * alpha_power
            alpha_power = alpha_power * alpha

    column_evals = [query(c, 0) for c in cs.permutation_columns]
    sigma_evals = [proof.evals[(0, f"sigma_{j}")] for j in range(len(cs.permutation_columns))]
    numerator, denominator = grand_product_evals(column_evals, sigma_evals, beta, gamma, zeta)
    z_eval = proof.evals[(0, "z")]
    z_omega_eval = proof.evals[(1, "z")]
    constraint = constraint + (z_eval * numerator - z_omega_eval * denominator) * alpha_power
    alpha_power = alpha_power * alpha

    l0_eval = lagrange_basis_eval(0, n, omega, zeta)
    constraint = constraint + (z_eval - FR(1)) * l0_eval * alpha_power

    # ── Step 4: C(ζ) == t(ζ)·Z_H(ζ) ──
    t_eval = FR(0)
    zeta_n = zeta ** n
    zeta_power = FR(1)
    for i in range(vk.num_t_chunks):
        t_eval = t_eval + proof.evals[(0, f"t_{i}")] * zeta_power
        zeta_power = zeta_power * zeta_n

    if constraint != t_eval * vanishing_poly_eval(n, zeta):
        logger.info("Proof rejected: constraint identity does not hold at zeta")
        return False

    # ── Step 5: 일괄 페어링 ──
    commitments = _commitment_table(vk, proof)
    lhs = None
    rhs = None
    u_power = FR(1)
    for (rotation, keys), witness in zip(vk.schedule, proof.opening_comms):
        point = zeta * rotation_factor(omega, n, rotation)

        f_comm = None
        e_eval = FR(0)
        v_power = FR(1)
        for key in keys:
            f_comm = ec_add(f_comm, ec_mul(commitments[key], v_power))
            e_eval = e_eval + proof.evals[(rotation, key)] * v_power
            v_power = v_power * v

        term = ec_add(ec_mul(witness, point), ec_add(f_comm, ec_neg(ec_mul(G1, e_eval))))
        lhs = ec_add(lhs, ec_mul(witness, u_power))
        rhs = ec_add(rhs, ec_mul(term, u_power))
        u_power = u_power * u

    valid = ec_pairing(vk.srs.g2_powers[1], lhs) == ec_pairing(G2, rhs)
    if valid:
        logger.info("Proof verified")
    else:
        logger.info("Proof rejected: pairing check failed")
    return valid


def _well_formed(vk, proof):
    if len(proof.advice_comms) != vk.cs.num_advice_columns:
        return False
    if len(proof.t_comms) != vk.num_t_chunks:
        return False
    if len(proof.opening_comms) != len(vk.schedule):
        return False
    for rotation, keys in vk.schedule:
        for key in keys:
            if (rotation, key) not in proof.evals:
                return False
    points = list(proof.advice_comms) + list(proof.t_comms) + list(proof.opening_comms)
    points.append(proof.z_comm)
    # 곡선 밖의 점은 페어링에서 예외를 낸다
    return all(is_on_curve(p) for p in points)


def _commitment_table(vk, proof):
    """평가값 키 → 커밋먼트."""
    table = vk.committed_points()
    for i, comm in enumerate(proof.advice_comms):
        table[f"advice_{i}"] = comm
    for i, comm in enumerate(proof.t_comms):
        table[f"t_{i}"] = comm
    table["z"] = proof.z_comm
    return table
