"""
E2E 데모: x³ + x + 5 = 35 (x = 3)
=================================

실행:
    python -m plonkish.example

흐름:
    1. Mock prover 로 격자 검사
    2. SRS 생성 (trusted setup)
    3. 키 생성 (구조 패스)
    4. 증명 생성 (5-라운드)
    5. 증명 검증 (올바른 공개 입력 / 틀린 공개 입력)
"""

import random

from plonkish import config
from plonkish.backend.keygen import generate_keys
from plonkish.backend.prover import create_proof
from plonkish.backend.serialization import serialize_proof
from plonkish.backend.srs import SRS
from plonkish.backend.verifier import verify_proof
from plonkish.circuit import CubicCircuit
from plonkish.dev import MockProver
from plonkish.logging_config import setup_logging


def main(x=3, k=config.DEFAULT_K):
    circuit = CubicCircuit(x=x)
    result = int(circuit.expected_result().assign())

    print("=" * 60)
    print("  PLONKish Zero-Knowledge Proof Demo")
    print(f"  회로: x³ + x + {circuit.constant} = {result} (x = {x})")
    print("=" * 60)

    # ── 1. Mock prover ──
    print("\n[1] Mock prover 로 격자 검사...")
    prover = MockProver.run(k, circuit, [[result]])
    for region in prover.assignment.regions:
        print(f"    행 {region.start:2d}..{region.start + region.rows - 1:2d}: {region.name}")
    failures = prover.verify()
    print(f"    실패: {len(failures)}개")

    wrong = MockProver.run(k, circuit, [[result + 1]]).verify()
    print(f"    공개 입력 {result + 1} 로 검사 → 실패 {len(wrong)}개 (예상대로 실패)")

    # ── 2. SRS ──
    print("\n[2] SRS 생성 (trusted setup)...")
    srs = SRS.for_k(k, seed=config.DEFAULT_SRS_SEED)
    print(f"    최대 다항식 차수: {srs.max_degree}")

    # ── 3. 키 생성 ──
    print("\n[3] 키 생성...")
    pk, vk = generate_keys(circuit, srs, k)
    print(f"    도메인 크기 n: {vk.n}")
    print(f"    순열 열 수: {len(vk.sigma_comms)}")
    print(f"    몫 조각 수: {vk.num_t_chunks}")

    # ── 4. 증명 생성 ──
    print("\n[4] 증명 생성 (5-라운드)...")
    proof = create_proof(pk, circuit, [[result]], rng=random.Random(0))
    print(f"    증명 크기: {len(serialize_proof(proof))} bytes")
    for rotation, keys in vk.schedule:
        print(f"    ζ·ω^{rotation} 에서 연 다항식: {', '.join(keys)}")

    # ── 5. 검증 ──
    print("\n[5] 증명 검증...")
    ok = verify_proof(vk, [[result]], proof)
    print(f"    공개 입력 {result}: {'성공 ✓' if ok else '실패 ✗'}")
    forged = verify_proof(vk, [[result + 38]], proof)
    print(f"    공개 입력 {result + 38}: {'성공 ✓' if forged else '실패 ✗ (예상대로 실패)'}")

    print("\n" + "=" * 60)
    if ok and not forged and not failures and wrong:
        print("  데모 완료: 모든 테스트 통과!")
    else:
        print("  데모 완료: 일부 테스트 실패")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    setup_logging()
    main()
