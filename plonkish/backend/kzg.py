"""
KZG 다항식 커밋먼트
===================

  커밋:       C = p(τ)·G1 = Σ cᵢ·[τⁱ]₁
  열기 증명:  p(z) = y 일 때 q(x) = (p(x) - y)/(x - z),  π = [q(τ)]₁
  검증:       e(C - y·G1, G2) == e(π, [τ - z]₂)

Prover 는 같은 점에서 여러 다항식을 열 때 v 거듭제곱으로 묶은 결합 다항식
하나의 열기 증명만 만든다 (``batch_open``).

사용 예시:
    >>> C = commit(poly, srs)
    >>> proof = create_witness(poly, FR(7), srs)
    >>> verify_opening(C, proof, FR(7), poly.evaluate(FR(7)), srs)  # True
"""

from plonkish.backend.field import FR, G1, to_fr, ec_mul, ec_add, ec_neg, ec_pairing
from plonkish.backend.polynomial import Polynomial, poly_div


def commit(poly, srs):
    """C = Σ cᵢ · [τⁱ]₁.

    Raises:
        ValueError: 다항식 차수가 SRS 최대 차수를 초과할 때
    """
    if poly.degree > srs.max_degree:
        raise ValueError(
            f"다항식 차수 {poly.degree}가 SRS 최대 차수 {srs.max_degree}를 초과합니다"
        )

    result = None
    for i, coeff in enumerate(poly.coeffs):
        if coeff == FR(0):
            continue
        result = ec_add(result, ec_mul(srs.g1_powers[i], coeff))
    return result


def quotient_at(poly, point):
    """(p(x) - p(point)) / (x - point)."""
    point = to_fr(point)
    numerator = poly - poly.evaluate(point)
    quotient, _ = poly_div(numerator, Polynomial([FR(0) - point, FR(1)]))
    return quotient


def create_witness(poly, point, srs):
    """단일 다항식의 열기 증명 π = [(p(x) - p(z))/(x - z)]₁."""
    return commit(quotient_at(poly, point), srs)


def batch_open(polys, point, v, srs):
    """같은 점 z 에서 여러 다항식을 한 번에 연다.

    W(x) = Σ_i v^i · (p_i(x) - p_i(z)) / (x - z)

    Returns:
        G1 점: [W]₁
    """
    combined = Polynomial.zero()
    v_power = FR(1)
    for poly in polys:
        combined = combined + poly * v_power
        v_power = v_power * v
    return create_witness(combined, point, srs)


def verify_opening(commitment, proof, point, evaluation, srs):
    """e(C - y·G1, G2) == e(π, [τ - z]₂) 를 확인한다."""
    point = to_fr(point)
    evaluation = to_fr(evaluation)

    z_g2 = ec_mul(srs.g2_powers[0], point)
    tau_minus_z_g2 = ec_add(srs.g2_powers[1], ec_neg(z_g2))
    c_minus_y = ec_add(commitment, ec_neg(ec_mul(G1, evaluation)))

    lhs = ec_pairing(srs.g2_powers[0], c_minus_y)
    rhs = ec_pairing(tau_minus_z_g2, proof)
    return lhs == rhs
