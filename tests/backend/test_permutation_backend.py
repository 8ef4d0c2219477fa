"""
Permutation argument tests
==========================

Covers:
- σ 다항식: 항등 셀은 자기 코셋 원소, 그룹은 사이클
- 누적자 z: z(ω⁰) = 1, 전체 곱 = 1 (복사 제약 만족 시)
- 공개 입력이 틀리면 전체 곱 ≠ 1
- grand_product_terms 와 grand_product_evals 의 일치
"""

import pytest

from plonkish.backend.field import FR, get_root_of_unity, get_roots_of_unity
from plonkish.backend.permutation import (
    build_permutation_polynomials,
    compute_accumulator,
    coset_shift,
    grand_product_evals,
    grand_product_terms,
)
from plonkish.backend.polynomial import Polynomial
from plonkish.circuit import CubicCircuit
from plonkish.region import configure, synthesize

K = 4
N = 1 << K
BETA = FR(1234567)
GAMMA = FR(7654321)


def _assignment(x, result):
    cs, config = configure(CubicCircuit)
    return synthesize(CubicCircuit(x=x), cs, config, N, [[result]], witness_required=True)


def _full_product(assignment):
    """∏_i ∏_j (v + β·k_j·ωⁱ + γ) / (v + β·σ_j(ωⁱ) + γ)"""
    cs = assignment.cs
    omega = get_root_of_unity(N)
    domain = get_roots_of_unity(N)
    m = len(cs.permutation_columns)
    sigma = assignment.equality.build_sigma(cs.permutation_columns, N)
    sigma_evals, _ = build_permutation_polynomials(sigma, m, N, omega)
    values = [assignment.column_values(c) for c in cs.permutation_columns]

    z = compute_accumulator(values, sigma_evals, N, domain, BETA, GAMMA)
    last = N - 1
    num = FR(1)
    den = FR(1)
    for j in range(m):
        num = num * (values[j][last] + BETA * coset_shift(j) * domain[last] + GAMMA)
        den = den * (values[j][last] + BETA * sigma_evals[j][last] + GAMMA)
    return z, z[-1] * num / den


@pytest.fixture(scope="module")
def satisfied():
    return _assignment(3, 35)


class TestSigma:
    def test_identity_cells_map_to_own_coset(self, satisfied):
        cs = satisfied.cs
        omega = get_root_of_unity(N)
        domain = get_roots_of_unity(N)
        m = len(cs.permutation_columns)
        sigma = satisfied.equality.build_sigma(cs.permutation_columns, N)
        sigma_evals, sigma_polys = build_permutation_polynomials(sigma, m, N, omega)

        assert len(sigma_evals) == m == 4
        # instance 열 행 5 는 어떤 그룹에도 없다
        assert sigma_evals[0][5] == coset_shift(0) * domain[5]
        # σ 다항식은 평가값을 보간한다
        for j in range(m):
            assert sigma_polys[j].evaluate(domain[3]) == sigma_evals[j][3]

    def test_result_cycle(self, satisfied):
        """result 셀 (a₀, 9) 과 instance[0] 은 서로를 가리킨다."""
        cs = satisfied.cs
        sigma = satisfied.equality.build_sigma(cs.permutation_columns, N)
        # 순열 열 순서: instance(0), constant(1), a₀(2), a₁(3)
        p_inst = 0 * N + 0
        p_result = 2 * N + 9
        assert sigma[p_inst] == p_result
        assert sigma[p_result] == p_inst

    def test_sigma_is_permutation(self, satisfied):
        cs = satisfied.cs
        sigma = satisfied.equality.build_sigma(cs.permutation_columns, N)
        assert sorted(sigma) == list(range(len(cs.permutation_columns) * N))


class TestAccumulator:
    def test_starts_at_one(self, satisfied):
        z, _ = _full_product(satisfied)
        assert len(z) == N
        assert z[0] == FR(1)

    def test_product_closes_when_satisfied(self, satisfied):
        _, total = _full_product(satisfied)
        assert total == FR(1)

    def test_product_breaks_on_wrong_public_input(self):
        _, total = _full_product(_assignment(4, 35))
        assert total != FR(1)

    def test_terms_match_evals(self, satisfied):
        cs = satisfied.cs
        omega = get_root_of_unity(N)
        m = len(cs.permutation_columns)
        sigma = satisfied.equality.build_sigma(cs.permutation_columns, N)
        _, sigma_polys = build_permutation_polynomials(sigma, m, N, omega)
        column_polys = [
            Polynomial.from_evaluations(satisfied.column_values(c), omega)
            for c in cs.permutation_columns
        ]

        numerator, denominator = grand_product_terms(column_polys, sigma_polys, BETA, GAMMA)
        zeta = FR(424242)
        expected = grand_product_evals(
            [p.evaluate(zeta) for p in column_polys],
            [p.evaluate(zeta) for p in sigma_polys],
            BETA, GAMMA, zeta,
        )
        assert (numerator.evaluate(zeta), denominator.evaluate(zeta)) == expected
