"""
순열 인자 (Permutation Argument)
================================

복사 제약을 순열 σ 로 인코딩하고 Grand Product 로 증명한다.

**코셋 식별자**:
  순열 열이 m 개이면 m·n 개의 셀 위치가 있다. 열 j 의 셀들은 코셋 k_j·H 에 놓인다.

    열 0: {1·ω⁰, 1·ω¹, ..., 1·ω^{n-1}}
    열 1: {2·ω⁰, 2·ω¹, ..., 2·ω^{n-1}}
    열 j: {(j+1)·ω⁰, ...}

  σ_j(ωⁱ) 는 위치 j·n + i 가 가리키는 다음 셀의 코셋 원소이다.

**Grand Product (누적자 z(x))**:
  z(ω⁰) = 1
  z(ωⁱ⁺¹) = z(ωⁱ) · ∏_j (v_j(ωⁱ) + β·k_j·ωⁱ + γ) / (v_j(ωⁱ) + β·σ_j(ωⁱ) + γ)

  σ 가 셀 값과 일치하면 (같은 그룹의 셀들이 같은 값이면) 분자·분모가
  상쇄되어 z(ω^n) = 1 이 된다.

사용 예시:
    >>> sigma = assignment.equality.build_sigma(cs.permutation_columns, n)
    >>> sigma_evals, sigma_polys = build_permutation_polynomials(sigma, m, n, omega)
"""

from plonkish.backend.field import FR, get_roots_of_unity
from plonkish.backend.polynomial import Polynomial


def coset_shift(j):
    """순열 열 j 의 코셋 식별자 k_j = j + 1."""
    return FR(j + 1)


def build_permutation_polynomials(sigma, num_columns, n, omega):
    """평탄화된 σ 를 열별 평가값과 다항식으로 바꾼다.

    Args:
        sigma: 길이 num_columns·n 의 정수 리스트 (EqualityGraph.build_sigma)
        num_columns: 순열 열 수 m
        n: 행 수
        omega: n차 원시 단위근

    Returns:
        tuple: (sigma_evals, sigma_polys). 각각 길이 m 의 리스트.
    """
    domain = get_roots_of_unity(n)

    def position_to_value(pos):
        return coset_shift(pos // n) * domain[pos % n]

    sigma_evals = []
    for j in range(num_columns):
        sigma_evals.append([position_to_value(sigma[j * n + i]) for i in range(n)])

    sigma_polys = [Polynomial.from_evaluations(evals, omega) for evals in sigma_evals]
    return sigma_evals, sigma_polys


def compute_accumulator(column_values, sigma_evals, n, domain, beta, gamma):
    """누적자 z 의 도메인 평가값 [z(ω⁰)=1, z(ω¹), ..., z(ω^{n-1})].

    Args:
        column_values: 순열 열마다 길이 n 의 FR 리스트
        sigma_evals: 순열 열마다 σ_j(ωⁱ) 리스트
        domain: [ω⁰, ..., ω^{n-1}]
        beta, gamma: 챌린지
    """
    z_evals = [FR(1)]
    for i in range(n - 1):
        num = FR(1)
        den = FR(1)
        for j, values in enumerate(column_values):
            num = num * (values[i] + beta * coset_shift(j) * domain[i] + gamma)
            den = den * (values[i] + beta * sigma_evals[j][i] + gamma)
        z_evals.append(z_evals[-1] * num / den)
    return z_evals


def grand_product_terms(column_polys, sigma_polys, beta, gamma):
    """제약식에 쓰이는 분자·분모 다항식.

      분자(x) = ∏_j (v_j(x) + β·k_j·x + γ)
      분모(x) = ∏_j (v_j(x) + β·σ_j(x) + γ)
    """
    x = Polynomial([FR(0), FR(1)])
    numerator = Polynomial.one()
    denominator = Polynomial.one()
    for j, poly in enumerate(column_polys):
        numerator = numerator * (poly + x * (beta * coset_shift(j)) + gamma)
        denominator = denominator * (poly + sigma_polys[j] * beta + gamma)
    return numerator, denominator


def grand_product_evals(column_evals, sigma_evals_at_zeta, beta, gamma, zeta):
    """grand_product_terms 의 ζ 에서의 값 (Verifier 용)."""
    numerator = FR(1)
    denominator = FR(1)
    for j, value in enumerate(column_evals):
        numerator = numerator * (value + beta * coset_shift(j) * zeta + gamma)
        denominator = denominator * (value + beta * sigma_evals_at_zeta[j] + gamma)
    return numerator, denominator
