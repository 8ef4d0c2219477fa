"""
키 생성 (Key Generation)
========================

witness 없이 회로를 한 번 합성해 격자 모양을 얻고, 회로마다 고정된 다항식을 커밋한다.

  circuit.without_witnesses()
        │  구조 패스 (advice = unknown)
        ▼
  Assignment ──▶ fixed 열, 셀렉터, 복사 그룹
        │
        ├─ fixed_j(x)    : fixed 열 보간          → [fixed_j]₁
        ├─ selector_s(x) : 0/1 셀렉터 열 보간     → [selector_s]₁
        └─ σ_j(x)        : 복사 사이클 인코딩     → [σ_j]₁

**열기 일정 (opening schedule)**:
  Verifier 가 ζ·ω^r 마다 어떤 다항식의 평가값을 받을지 정한다.

    r = 0 : 모든 advice, fixed, selector, σ, z, t 조각
    r ≠ 0 : 게이트가 회전 r 로 질의한 advice/fixed 열 (+ r = 1 이면 z)

  instance 열은 커밋하지 않는다. Verifier 가 공개 입력으로 직접 계산한다.

**몫 조각 수**:
  제약 다항식의 최대 차수 배수 d 는 게이트 차수와 순열 차수(m + 1) 중 큰 값이다.
  블라인딩된 다항식 차수가 n + 2 이므로 deg C ≤ d·(n + 2) 이고
  t 의 계수 수는 d·(n + 2) - n + 1 이하이다. 이를 n 개씩 자른다.

사용 예시:
    >>> srs = SRS.for_k(4, seed=42)
    >>> pk, vk = generate_keys(CubicCircuit(x=3), srs, 4)
"""

import logging

from plonkish import config
from plonkish.backend.field import get_root_of_unity, get_roots_of_unity
from plonkish.backend.kzg import commit
from plonkish.backend.permutation import build_permutation_polynomials
from plonkish.backend.polynomial import Polynomial
from plonkish.layout import ColumnKind
from plonkish.region import configure, synthesize

logger = logging.getLogger(__name__)


def column_key(column):
    """열을 평가값 키로. 예: advice 0 → "advice_0"."""
    return f"{column.kind.value}_{column.index}"


class VerifyingKey:
    """Verifier 가 필요한 공개 정보.

    속성:
        k, n, omega: 도메인
        cs: ConstraintSystem (게이트 재계산용)
        num_public_inputs: 공개 입력 수
        fixed_comms, selector_comms, sigma_comms: G1 점 리스트
        schedule: [(회전, [다항식 키, ...]), ...]
        num_t_chunks: 몫 조각 수
        srs: SRS
    """

    def __init__(self, k, cs, num_public_inputs, fixed_comms, selector_comms,
                 sigma_comms, num_t_chunks, srs):
        self.k = k
        self.n = 1 << k
        self.omega = get_root_of_unity(self.n)
        self.cs = cs
        self.num_public_inputs = num_public_inputs
        self.fixed_comms = fixed_comms
        self.selector_comms = selector_comms
        self.sigma_comms = sigma_comms
        self.num_t_chunks = num_t_chunks
        self.srs = srs
        self.schedule = opening_schedule(cs, num_t_chunks)

    def committed_points(self):
        """회로에 고정된 다항식 키 → 커밋먼트."""
        points = {}
        for i, comm in enumerate(self.fixed_comms):
            points[f"fixed_{i}"] = comm
        for i, comm in enumerate(self.selector_comms):
            points[f"selector_{i}"] = comm
        for i, comm in enumerate(self.sigma_comms):
            points[f"sigma_{i}"] = comm
        return points


class ProvingKey:
    """Prover 가 필요한 정보: VerifyingKey + 다항식 원본.

    속성:
        vk: VerifyingKey
        circuit_cls, config: configure() 결과
        domain: [1, ω, ..., ω^{n-1}]
        fixed_polys, selector_polys, sigma_polys: Polynomial 리스트
        sigma_evals: 순열 열마다 σ_j(ωⁱ) 리스트
        l0_poly: L₀(x)
    """

    def __init__(self, vk, circuit_cls, circuit_config, fixed_polys, selector_polys,
                 sigma_polys, sigma_evals):
        self.vk = vk
        self.circuit_cls = circuit_cls
        self.config = circuit_config
        self.domain = get_roots_of_unity(vk.n)
        self.fixed_polys = fixed_polys
        self.selector_polys = selector_polys
        self.sigma_polys = sigma_polys
        self.sigma_evals = sigma_evals
        l0_evals = [0] * vk.n
        l0_evals[0] = 1
        self.l0_poly = Polynomial.from_evaluations(l0_evals, vk.omega)

    @property
    def cs(self):
        return self.vk.cs

    @property
    def srs(self):
        return self.vk.srs


def opening_schedule(cs, num_t_chunks):
    """[(회전, [키, ...]), ...]. 회전 0 이 항상 처음이다."""
    at_zeta = [column_key(c) for c in cs.advice_columns()]
    at_zeta += [column_key(c) for c in cs.fixed_columns()]
    at_zeta += [f"selector_{i}" for i in range(cs.num_selectors)]
    at_zeta += [f"sigma_{j}" for j in range(len(cs.permutation_columns))]
    at_zeta += ["z"]
    at_zeta += [f"t_{i}" for i in range(num_t_chunks)]

    rotated = {}
    for column, rotations in cs.queried_rotations().items():
        if column.kind is ColumnKind.INSTANCE:
            continue
        for rotation in rotations:
            if rotation != 0:
                rotated.setdefault(rotation, []).append(column_key(column))
    rotated.setdefault(1, []).append("z")

    schedule = [(0, at_zeta)]
    for rotation in sorted(rotated):
        schedule.append((rotation, sorted(rotated[rotation], key=_key_order)))
    return schedule


def _key_order(key):
    # advice → fixed → z 순서, 같은 종류는 인덱스 순서
    kind_order = {"advice": 0, "fixed": 1, "z": 2}
    kind, _, index = key.partition("_")
    return kind_order[kind], int(index or 0)


def max_degree_multiple(cs):
    """제약 다항식 차수의 배수 d = max(게이트 차수, 순열 열 수 + 1, 2)."""
    return max(cs.degree(), len(cs.permutation_columns) + 1, 2)


def quotient_chunk_count(cs, n):
    d = max_degree_multiple(cs)
    num_coeffs = d * (n + config.BLINDING_FACTORS - 1) - n + 1
    return -(-num_coeffs // n)


def generate_keys(circuit, srs, k):
    """구조 패스로 격자 모양을 얻고 ProvingKey, VerifyingKey 를 만든다.

    Args:
        circuit: 회로 인스턴스 (witness 는 사용하지 않는다)
        srs: SRS
        k: 격자 크기 지수 (n = 2^k)

    Raises:
        ValueError: SRS 가 블라인딩된 다항식을 커밋하기에 작을 때
    """
    n = 1 << k
    if srs.max_degree < n + config.SRS_DEGREE_HEADROOM:
        raise ValueError(
            f"SRS 최대 차수 {srs.max_degree}가 필요한 차수 "
            f"{n + config.SRS_DEGREE_HEADROOM}보다 작습니다"
        )
    omega = get_root_of_unity(n)
    circuit_cls = type(circuit)

    # ── 1. 구조 패스 ──
    cs, circuit_config = configure(circuit_cls)
    assignment = synthesize(circuit.without_witnesses(), cs, circuit_config, n)
    logger.debug("Keygen: %d regions laid out on %d rows", len(assignment.regions), n)

    # ── 2. fixed / 셀렉터 다항식 ──
    fixed_polys = [
        Polynomial.from_evaluations(assignment.column_values(c), omega)
        for c in cs.fixed_columns()
    ]
    selector_polys = [
        Polynomial.from_evaluations(assignment.selector_values(s), omega)
        for s in cs.selectors()
    ]

    # ── 3. 순열 다항식 ──
    m = len(cs.permutation_columns)
    sigma = assignment.equality.build_sigma(cs.permutation_columns, n)
    sigma_evals, sigma_polys = build_permutation_polynomials(sigma, m, n, omega)

    # ── 4. 커밋 ──
    vk = VerifyingKey(
        k, cs, circuit.num_public_inputs,
        [commit(p, srs) for p in fixed_polys],
        [commit(p, srs) for p in selector_polys],
        [commit(p, srs) for p in sigma_polys],
        quotient_chunk_count(cs, n),
        srs,
    )
    pk = ProvingKey(vk, circuit_cls, circuit_config, fixed_polys, selector_polys,
                    sigma_polys, sigma_evals)

    logger.info("Keys generated: k=%d, %d permutation columns, %d quotient chunks",
                k, m, vk.num_t_chunks)
    return pk, vk
