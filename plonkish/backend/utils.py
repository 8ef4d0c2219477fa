"""
백엔드 공유 유틸리티
====================

  - vanishing_poly_eval: Z_H(ζ) = ζ^n - 1
  - lagrange_basis_eval: L_i(ζ)
  - instance_polynomial / instance_poly_eval: 공개 입력(instance) 열의 다항식

**instance 열 처리**:
  instance 열은 커밋되지 않는다. Prover 는 열 값을 보간한 다항식을 제약식에
  그대로 쓰고, Verifier 는 공개 입력만으로 같은 값을 ζ·ω^r 에서 직접 계산한다.

    p(x) = Σᵢ wᵢ · Lᵢ(x)   (i < 공개 입력 수, 나머지 행은 0)
"""

from plonkish.backend.field import FR, to_fr
from plonkish.backend.polynomial import Polynomial


def vanishing_poly_eval(n, zeta):
    """Z_H(ζ) = ζ^n - 1."""
    return zeta ** n - FR(1)


def lagrange_basis_eval(i, n, omega, zeta):
    """L_i(ζ) = (ω^i / n) · (ζ^n - 1) / (ζ - ω^i).

    ζ 가 도메인 점이면 크로네커 델타 값을 돌려준다.
    """
    zeta = to_fr(zeta)
    omega_i = omega ** i
    denominator = zeta - omega_i
    if denominator == FR(0):
        return FR(1)
    return vanishing_poly_eval(n, zeta) * omega_i / (FR(n) * denominator)


def instance_polynomial(values, n, omega):
    """instance 열 값(앞쪽 행부터)을 보간한 다항식."""
    if not values:
        return Polynomial.zero()
    evals = [FR(0)] * n
    for i, val in enumerate(values):
        evals[i] = to_fr(val)
    return Polynomial.from_evaluations(evals, omega)


def instance_poly_eval(values, n, omega, point):
    """instance 다항식을 다항식 구성 없이 point 에서 평가한다."""
    result = FR(0)
    for i, val in enumerate(values):
        result = result + to_fr(val) * lagrange_basis_eval(i, n, omega, point)
    return result


def rotation_factor(omega, n, rotation):
    """ω^rotation. 음수 회전은 n 을 법으로 감는다."""
    return omega ** (rotation % n)
