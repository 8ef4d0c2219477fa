"""
Tests for SRS, KZG, Fiat-Shamir transcript.

Covers:
- SRS: 결정론, 길이, for_k 의 차수 여유
- KZG: 커밋 선형성, 차수 초과, 단일 열기, 일괄 열기
- Transcript: 결정론, 흡수 순서/레이블 민감도, 무한원점 흡수
"""

import pytest

from plonkish import config
from plonkish.backend.field import FR, G1, G2, ec_add, ec_mul, ec_neg, ec_pairing
from plonkish.backend.kzg import batch_open, commit, create_witness, verify_opening
from plonkish.backend.polynomial import Polynomial
from plonkish.backend.srs import SRS
from plonkish.backend.transcript import Transcript


@pytest.fixture(scope="module")
def srs_small():
    """작은 SRS (max_degree=8)."""
    return SRS.generate(max_degree=8, seed=42)


# ─────────────────────────────────────────────────────────────────────
# SRS
# ─────────────────────────────────────────────────────────────────────

class TestSRS:
    def test_lengths(self, srs_small):
        assert len(srs_small.g1_powers) == 9
        assert len(srs_small.g2_powers) == 2
        assert srs_small.g1_powers[0] == G1
        assert srs_small.g2_powers[0] == G2

    def test_deterministic_with_seed(self):
        assert SRS.generate(4, seed=7).g1_powers == SRS.generate(4, seed=7).g1_powers
        assert SRS.generate(4, seed=7).g1_powers != SRS.generate(4, seed=8).g1_powers

    def test_for_k_headroom(self):
        srs = SRS.for_k(2, seed=1)
        assert srs.max_degree == 4 + config.SRS_DEGREE_HEADROOM


# ─────────────────────────────────────────────────────────────────────
# KZG
# ─────────────────────────────────────────────────────────────────────

class TestKZG:
    def test_commit_constant(self, srs_small):
        assert commit(Polynomial([5]), srs_small) == ec_mul(G1, 5)

    def test_commit_zero_is_infinity(self, srs_small):
        assert commit(Polynomial.zero(), srs_small) is None

    def test_commit_linear(self, srs_small):
        a = Polynomial([1, 2, 3])
        b = Polynomial([4, 0, 0, 5])
        assert commit(a + b, srs_small) == ec_add(commit(a, srs_small), commit(b, srs_small))

    def test_degree_overflow(self, srs_small):
        with pytest.raises(ValueError):
            commit(Polynomial([1] * 10), srs_small)

    def test_open_valid(self, srs_small):
        poly = Polynomial([3, 1, 4, 1, 5])
        point = FR(7)
        proof = create_witness(poly, point, srs_small)
        assert verify_opening(commit(poly, srs_small), proof, point, poly.evaluate(point), srs_small)

    def test_open_wrong_value(self, srs_small):
        poly = Polynomial([3, 1, 4, 1, 5])
        point = FR(7)
        proof = create_witness(poly, point, srs_small)
        wrong = poly.evaluate(point) + FR(1)
        assert not verify_opening(commit(poly, srs_small), proof, point, wrong, srs_small)

    def test_batch_open(self, srs_small):
        """W = Σ vⁱ·qᵢ 는 결합 커밋먼트 Σ vⁱ·Cᵢ 의 열기 증명이다."""
        polys = [Polynomial([1, 2, 3]), Polynomial([0, 0, 0, 9]), Polynomial([4])]
        point = FR(11)
        v = FR(13)
        witness = batch_open(polys, point, v, srs_small)

        combined_comm = None
        combined_eval = FR(0)
        v_power = FR(1)
        for poly in polys:
            combined_comm = ec_add(combined_comm, ec_mul(commit(poly, srs_small), v_power))
            combined_eval = combined_eval + poly.evaluate(point) * v_power
            v_power = v_power * v
        assert verify_opening(combined_comm, witness, point, combined_eval, srs_small)

    def test_pairing_identity(self, srs_small):
        """e(τ·G1, G2) == e(G1, τ·G2)"""
        lhs = ec_pairing(G2, srs_small.g1_powers[1])
        rhs = ec_pairing(srs_small.g2_powers[1], G1)
        assert lhs == rhs
        assert ec_add(G1, ec_neg(G1)) is None


# ─────────────────────────────────────────────────────────────────────
# Transcript
# ─────────────────────────────────────────────────────────────────────

class TestTranscript:
    def _challenge(self, *messages):
        t = Transcript()
        for label, value in messages:
            t.append_scalar(label, value)
        return t.challenge_scalar(b"c")

    def test_deterministic(self):
        assert self._challenge((b"a", FR(1))) == self._challenge((b"a", FR(1)))

    def test_order_sensitive(self):
        first = self._challenge((b"a", FR(1)), (b"b", FR(2)))
        second = self._challenge((b"b", FR(2)), (b"a", FR(1)))
        assert first != second

    def test_value_sensitive(self):
        assert self._challenge((b"pi", FR(35))) != self._challenge((b"pi", FR(73)))

    def test_chaining(self):
        t = Transcript()
        first = t.challenge_scalar(b"beta")
        second = t.challenge_scalar(b"beta")
        assert first != second

    def test_append_point_and_infinity(self):
        t1 = Transcript()
        t1.append_point(b"p", G1)
        t2 = Transcript()
        t2.append_point(b"p", None)
        assert t1.challenge_scalar(b"c") != t2.challenge_scalar(b"c")

    def test_domain_label(self):
        assert Transcript().challenge_scalar(b"c") != Transcript(b"other").challenge_scalar(b"c")
