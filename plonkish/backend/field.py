"""
백엔드 기반: 유한체 FR 과 bn128 곡선 연산
==========================================

회로 코어는 필드를 직접 구현하지 않고 이 모듈의 ``FR`` 을 소비한다.
셀 값, 셀렉터, 고정 상수, 공개 입력이 모두 ``FR`` 원소이다.

**FR**: bn128 스칼라 필드 (p ≈ 2^254, p - 1 = 2^28 · m).
  도메인 H = {1, ω, ..., ω^(n-1)} 는 n = 2^k (k ≤ 28) 까지 지원된다.

**곡선 연산**: KZG 커밋먼트 / 페어링 검증용 G1, G2 연산.

사용 예시:
    >>> from plonkish.backend.field import FR, get_root_of_unity
    >>> FR(3) * FR(3) * FR(3) + FR(3) + FR(5)   # FR(35)
    >>> omega = get_root_of_unity(16)
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128


class FR(FQ):
    """bn128 스칼라 필드 원소.

    py_ecc 의 FQ 를 상속하며 +, -, *, /, ** 를 그대로 사용한다.
    주의: 진리값(bool) 판정은 정의되어 있지 않으므로 ``== FR(0)`` 으로 비교한다.
    """
    field_modulus = bn128.curve_order


CURVE_ORDER = bn128.curve_order

# 곱셈군 FR* 의 생성자. 단위근 계산에 사용한다.
MULTIPLICATIVE_GENERATOR = FR(5)

G1 = bn128.G1
G2 = bn128.G2

# G1 항등원 (py_ecc 는 무한원점을 None 으로 표현한다)
Z1 = None


def to_fr(value):
    """정수 또는 FR 을 FR 로 맞춘다."""
    if isinstance(value, FR):
        return value
    return FR(int(value))


def ec_mul(point, scalar):
    """scalar · point (scalar 는 정수 또는 FR)."""
    if isinstance(scalar, FR):
        scalar = int(scalar)
    return bn128.multiply(point, scalar % CURVE_ORDER)


def ec_add(p1, p2):
    """p1 + p2."""
    return bn128.add(p1, p2)


def ec_neg(point):
    """-point."""
    return bn128.neg(point)


def is_on_curve(point):
    """G1 점이 bn128 곡선 y² = x³ + 3 위에 있는지 확인한다.

    무한원점(None)은 유효한 점이다. 좌표가 FQ 두 개가 아니면 False.
    """
    if point is None:
        return True
    if not isinstance(point, tuple) or len(point) != 2:
        return False
    # FR 도 FQ 하위 클래스이므로 정확한 타입을 본다
    if not all(type(c) is FQ for c in point):
        return False
    return bn128.is_on_curve(point, bn128.b)


def ec_pairing(g2_point, g1_point):
    """e(G1, G2) → GT. py_ecc 의 인자 순서는 (G2, G1) 이다."""
    return bn128.pairing(g2_point, g1_point)


def get_root_of_unity(n):
    """n차 원시 단위근 ω 를 반환한다.

    ω = g^((p-1)/n) 이고 g 는 ``MULTIPLICATIVE_GENERATOR`` 이다.

    Args:
        n: 도메인 크기 (2의 거듭제곱, ≤ 2^28)

    Raises:
        ValueError: n 이 2의 거듭제곱이 아니거나 2^28 을 초과할 때
    """
    if n < 1 or (n & (n - 1)) != 0:
        raise ValueError(f"n은 2의 거듭제곱이어야 합니다: {n}")
    if n > (1 << 28):
        raise ValueError(f"n은 2^28 이하여야 합니다: {n}")
    if n == 1:
        return FR(1)
    return MULTIPLICATIVE_GENERATOR ** ((CURVE_ORDER - 1) // n)


def get_roots_of_unity(n):
    """도메인 [1, ω, ω², ..., ω^(n-1)] 을 반환한다."""
    omega = get_root_of_unity(n)
    roots = []
    current = FR(1)
    for _ in range(n):
        roots.append(current)
        current = current * omega
    return roots
