"""
Prover: 5-라운드 프로토콜 오케스트레이터
========================================

격자 할당을 받아 KZG 커밋먼트 기반 증명을 만든다.

  ┌─────────────────────────────────────────────────────┐
  │  Round 1: advice 열 다항식 커밋                      │
  │  공개 입력 흡수 → [advice_i]₁                       │
  ├─────────────────────────────────────────────────────┤
  │  Round 2: 순열 누적자 z(x) 커밋                     │
  │  Verifier → Prover: β, γ  (Fiat-Shamir)           │
  │  Prover → Verifier: [z]₁                           │
  ├─────────────────────────────────────────────────────┤
  │  Round 3: 몫 다항식 t(x) 커밋                       │
  │  Verifier → Prover: α                              │
  │  Prover → Verifier: [t_0]₁, ..., [t_{c-1}]₁        │
  ├─────────────────────────────────────────────────────┤
  │  Round 4: 열기 일정에 따른 평가값                    │
  │  Verifier → Prover: ζ                              │
  ├─────────────────────────────────────────────────────┤
  │  Round 5: 회전별 일괄 KZG 열기 증명                  │
  │  Verifier → Prover: v                              │
  │  Prover → Verifier: [W_r]₁ (r 마다 하나)            │
  └─────────────────────────────────────────────────────┘

사용 예시:
    >>> pk, vk = generate_keys(CubicCircuit(), srs, 4)
    >>> proof = create_proof(pk, CubicCircuit(x=3), [[35]], rng=random.Random(7))
"""

import logging
import secrets

from plonkish.backend.prover import round1, round2, round3, round4, round5
from plonkish.backend.transcript import Transcript
from plonkish.layout import ColumnKind
from plonkish.region import synthesize

logger = logging.getLogger(__name__)


class Proof:
    """증명 데이터 컨테이너.

    Round 1: advice_comms: advice 열마다 G1 점
    Round 2: z_comm: G1 점
    Round 3: t_comms: 몫 조각마다 G1 점
    Round 4: evals: {(회전, 다항식 키): FR}
    Round 5: opening_comms: 열기 일정의 회전마다 G1 점
    """

    def __init__(self):
        self.advice_comms = []
        self.z_comm = None
        self.t_comms = []
        self.evals = {}
        self.opening_comms = []

    def __eq__(self, other):
        if not isinstance(other, Proof):
            return NotImplemented
        return (self.advice_comms == other.advice_comms
                and self.z_comm == other.z_comm
                and self.t_comms == other.t_comms
                and self.evals == other.evals
                and self.opening_comms == other.opening_comms)


class ProverState:
    """라운드 간 공유되는 Prover 상태.

    속성 (입력):
        pk: ProvingKey
        assignment: 값 패스로 채워진 Assignment
        instances: 공개 입력 (instance 열마다 리스트)
        rng: 블라인딩 난수원 (randrange 를 제공하는 객체)

    속성 (라운드 간 생성):
        advice_polys, instance_polys: 열 다항식 (Round 1)
        z_poly: 누적자 (Round 2)
        t_chunks: 몫 조각 (Round 3)
        beta, gamma, alpha, zeta, v: 챌린지
    """

    def __init__(self, pk, assignment, instances, rng):
        self.pk = pk
        self.assignment = assignment
        self.instances = instances
        self.rng = rng

        self.transcript = Transcript()

        self.n = pk.vk.n
        self.omega = pk.vk.omega
        self.domain = pk.domain

        self.advice_polys = None
        self.instance_polys = None
        self.z_poly = None
        self.t_chunks = None

        self.beta = None
        self.gamma = None
        self.alpha = None
        self.zeta = None
        self.v = None

        self.proof = Proof()

    def column_poly(self, column):
        """열 하나의 다항식 (advice 는 블라인딩된 것)."""
        if column.kind is ColumnKind.ADVICE:
            return self.advice_polys[column.index]
        if column.kind is ColumnKind.FIXED:
            return self.pk.fixed_polys[column.index]
        return self.instance_polys[column.index]


def absorb_public(transcript, vk, instances):
    """회로 커밋먼트와 공개 입력을 트랜스크립트에 흡수한다 (Prover/Verifier 공통)."""
    for key, point in vk.committed_points().items():
        transcript.append_point(key.encode(), point)
    for values in instances:
        for value in values:
            transcript.append_scalar(b"instance", value)


def check_instances(vk, instances):
    """공개 입력 모양을 확인한다.

    Raises:
        ValueError: instance 열 수 또는 공개 입력 수가 회로와 다를 때
    """
    if len(instances) != vk.cs.num_instance_columns:
        raise ValueError(
            f"instance 열은 {vk.cs.num_instance_columns}개인데 {len(instances)}개가 주어졌습니다"
        )
    for values in instances:
        if len(values) != vk.num_public_inputs:
            raise ValueError(
                f"공개 입력은 {vk.num_public_inputs}개여야 합니다: {len(values)}개 주어짐"
            )


def create_proof(pk, circuit, instances, rng=None):
    """값 패스를 실행하고 5-라운드 프로토콜로 증명을 만든다.

    Args:
        pk: ProvingKey
        circuit: witness 가 채워진 회로
        instances: [[공개 입력, ...], ...] (instance 열마다)
        rng: 블라인딩 난수원. 같은 시드의 rng 는 같은 증명을 만든다.
             None 이면 secrets.SystemRandom().

    Returns:
        Proof

    Raises:
        SynthesisError: witness 가 없을 때
        ValueError: 공개 입력 모양이 맞지 않을 때
    """
    check_instances(pk.vk, instances)
    if rng is None:
        rng = secrets.SystemRandom()

    assignment = synthesize(circuit, pk.cs, pk.config, pk.vk.n, instances,
                            witness_required=True)
    state = ProverState(pk, assignment, instances, rng)
    absorb_public(state.transcript, pk.vk, instances)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 1: advice 다항식 커밋                         │
    # └─────────────────────────────────────────────────────┘
    round1.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 2: β, γ → z(x) → [z]₁                       │
    # └─────────────────────────────────────────────────────┘
    round2.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 3: α → t(x) = C(x)/Z_H(x) → 조각 커밋        │
    # └─────────────────────────────────────────────────────┘
    round3.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 4: ζ → 평가값                                 │
    # └─────────────────────────────────────────────────────┘
    round4.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 5: v → 회전별 열기 증명                       │
    # └─────────────────────────────────────────────────────┘
    round5.execute(state)

    logger.info("Proof created: %d advice commitments, %d quotient chunks",
                len(state.proof.advice_comms), len(state.proof.t_comms))
    return state.proof
