"""
백엔드 기반: 다항식(Polynomial) 과 FFT
=======================================

회로의 각 열(column)은 도메인 H 위의 평가값으로 주어지고,
IFFT 로 보간되어 계수 표현 다항식이 된다.

  열 값 [v₀, v₁, ..., v_{n-1}]  ──IFFT──▶  p(x),  p(ωⁱ) = vᵢ

**회전(rotation)**:
  게이트가 "다음 행" 셀을 읽으면 p(ω·x) 가 필요하다.
  p(ω·x) = Σ cᵢ·ωⁱ·xⁱ 이므로 계수에 ωⁱ 을 곱하면 된다 (``rotate``).

**나눗셈**:
  몫 다항식 t(x) = C(x) / Z_H(x) 와 KZG 열기 증명 (p(x) - y)/(x - z) 에 쓰인다.

주의:
  FR * Polynomial 은 py_ecc 가 TypeError 를 내므로 항상 Polynomial 을 왼쪽에 둔다.
"""

from plonkish.backend.field import FR, to_fr


class Polynomial:
    """FR 계수 다항식. coeffs = [c₀, c₁, ...] → c₀ + c₁x + c₂x² + ...

    예시:
        >>> p = Polynomial([FR(1), FR(2)])   # 1 + 2x
        >>> (p * p).evaluate(FR(2))          # 25
    """

    def __init__(self, coeffs=None):
        if coeffs is None:
            self.coeffs = [FR(0)]
        else:
            self.coeffs = [to_fr(c) for c in coeffs] or [FR(0)]
        self._trim()

    def _trim(self):
        """최고차 0 계수 제거. 예: [1, 2, 0, 0] → [1, 2]"""
        while len(self.coeffs) > 1 and self.coeffs[-1] == FR(0):
            self.coeffs.pop()

    @property
    def degree(self):
        """차수. 영 다항식은 0 으로 정의한다."""
        return len(self.coeffs) - 1

    def is_zero(self):
        return len(self.coeffs) == 1 and self.coeffs[0] == FR(0)

    def evaluate(self, point):
        """Horner 법으로 p(point) 를 계산한다."""
        point = to_fr(point)
        result = FR(0)
        for coeff in reversed(self.coeffs):
            result = result * point + coeff
        return result

    def rotate(self, factor):
        """p(factor · x) 를 반환한다.

        factor = ω^r 이면 도메인 위에서 r 행만큼 이동한 열을 나타낸다.
        """
        shifted = []
        power = FR(1)
        for coeff in self.coeffs:
            shifted.append(coeff * power)
            power = power * factor
        return Polynomial(shifted)

    def chunks(self, size, count):
        """계수를 size 개씩 잘라 count 개의 다항식으로 나눈다.

        p(x) = Σ_i x^(i·size) · chunk_i(x). 남는 계수는 마지막 조각에 붙는다.
        """
        coeffs = list(self.coeffs)
        while len(coeffs) < size * count:
            coeffs.append(FR(0))
        parts = [Polynomial(coeffs[i * size:(i + 1) * size]) for i in range(count - 1)]
        parts.append(Polynomial(coeffs[(count - 1) * size:]))
        return parts

    def __add__(self, other):
        if not isinstance(other, Polynomial):
            other = Polynomial([other])
        max_len = max(len(self.coeffs), len(other.coeffs))
        result = []
        for i in range(max_len):
            a = self.coeffs[i] if i < len(self.coeffs) else FR(0)
            b = other.coeffs[i] if i < len(other.coeffs) else FR(0)
            result.append(a + b)
        return Polynomial(result)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        if not isinstance(other, Polynomial):
            other = Polynomial([other])
        return self + (-other)

    def __rsub__(self, other):
        return Polynomial([other]) - self

    def __neg__(self):
        return Polynomial([FR(0) - c for c in self.coeffs])

    def __mul__(self, other):
        """다항식 곱 (O(n²) 컨볼루션) 또는 스칼라 곱."""
        if not isinstance(other, Polynomial):
            other = to_fr(other)
            return Polynomial([c * other for c in self.coeffs])
        result = [FR(0)] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            if a == FR(0):
                continue
            for j, b in enumerate(other.coeffs):
                result[i + j] = result[i + j] + a * b
        return Polynomial(result)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __eq__(self, other):
        if not isinstance(other, Polynomial):
            if isinstance(other, (int, FR)):
                other = Polynomial([other])
            else:
                return False
        return self.coeffs == other.coeffs

    def __repr__(self):
        terms = []
        for i, c in enumerate(self.coeffs):
            if c == FR(0):
                continue
            if i == 0:
                terms.append(str(int(c)))
            elif i == 1:
                terms.append(f"{int(c)}*x")
            else:
                terms.append(f"{int(c)}*x^{i}")
        return "Poly(" + " + ".join(terms) + ")" if terms else "Poly(0)"

    def __len__(self):
        return len(self.coeffs)

    @classmethod
    def zero(cls):
        return cls([FR(0)])

    @classmethod
    def one(cls):
        return cls([FR(1)])

    @classmethod
    def vanishing(cls, n):
        """Z_H(x) = x^n - 1. 도메인 H 의 모든 점에서 0 이다."""
        coeffs = [FR(0)] * (n + 1)
        coeffs[0] = FR(-1)
        coeffs[n] = FR(1)
        return cls(coeffs)

    @classmethod
    def from_evaluations(cls, evals, omega):
        """도메인 평가값에서 다항식을 보간한다 (IFFT)."""
        return cls(ifft([to_fr(e) for e in evals], omega))


def fft(coeffs, omega):
    """재귀 radix-2 Cooley-Tukey NTT: 계수 → [p(1), p(ω), ..., p(ω^{n-1})]."""
    n = len(coeffs)
    if n == 1:
        return [to_fr(coeffs[0])]

    even_vals = fft(coeffs[0::2], omega * omega)
    odd_vals = fft(coeffs[1::2], omega * omega)

    result = [FR(0)] * n
    omega_k = FR(1)
    half = n // 2
    for k in range(half):
        t = omega_k * odd_vals[k]
        result[k] = even_vals[k] + t
        result[k + half] = even_vals[k] - t
        omega_k = omega_k * omega
    return result


def ifft(evals, omega):
    """역 NTT: ω^{-1} 로 FFT 한 뒤 1/n 을 곱한다."""
    n = len(evals)
    coeffs = fft(evals, FR(1) / omega)
    n_inv = FR(1) / FR(n)
    return [c * n_inv for c in coeffs]


def poly_div(a, b):
    """긴 나눗셈: a(x) = b(x)·q(x) + r(x). (q, r) 를 반환한다.

    Raises:
        ValueError: 제수가 영 다항식일 때
    """
    if b.is_zero():
        raise ValueError("0으로 나눌 수 없습니다")

    remainder = list(a.coeffs)
    divisor = b.coeffs
    deg_b = len(divisor) - 1
    deg_a = len(remainder) - 1
    if deg_a < deg_b:
        return Polynomial.zero(), Polynomial(remainder)

    quotient = [FR(0)] * (deg_a - deg_b + 1)
    lead_inv = FR(1) / divisor[-1]
    for i in range(deg_a - deg_b, -1, -1):
        coeff = remainder[i + deg_b] * lead_inv
        quotient[i] = coeff
        if coeff == FR(0):
            continue
        for j in range(deg_b + 1):
            remainder[i + j] = remainder[i + j] - coeff * divisor[j]

    return Polynomial(quotient), Polynomial(remainder[:deg_b] or [FR(0)])


def lagrange_basis(domain, i):
    """L_i(x) = ∏_{j≠i} (x - d_j) / (d_i - d_j). L_i(d_j) = δ_ij."""
    result = Polynomial.one()
    denominator = FR(1)
    for j, point in enumerate(domain):
        if j == i:
            continue
        result = result * Polynomial([FR(0) - point, FR(1)])
        denominator = denominator * (domain[i] - point)
    return result * (FR(1) / denominator)
