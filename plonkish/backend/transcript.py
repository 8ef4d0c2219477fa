"""
Fiat-Shamir 트랜스크립트
========================

Prover 와 Verifier 가 같은 순서로 메시지를 흡수하면 같은 챌린지를 얻는다.

  공개 입력            → (흡수)
  [advice_i]₁          → β, γ
  [z]₁                 → α
  [t_i]₁               → ζ
  평가값들             → v
  [W_r]₁               → u
"""

import hashlib

from plonkish import config
from plonkish.backend.field import FR, CURVE_ORDER


class Transcript:
    """SHA-256 기반 트랜스크립트.

    속성:
        state: 지금까지 흡수한 바이트열
    """

    def __init__(self, label=None):
        self.state = bytearray()
        self.state.extend(config.TRANSCRIPT_LABEL if label is None else label)

    def append_scalar(self, label, scalar):
        """FR 원소를 32바이트 빅엔디안으로 흡수한다."""
        self.state.extend(label)
        self.state.extend((int(scalar) % CURVE_ORDER).to_bytes(32, "big"))

    def append_point(self, label, point):
        """G1 점을 흡수한다. 무한원점(None)은 64바이트의 0."""
        self.state.extend(label)
        if point is None:
            self.state.extend(b"\x00" * 64)
        else:
            x, y = point
            self.state.extend(int(x).to_bytes(32, "big"))
            self.state.extend(int(y).to_bytes(32, "big"))

    def challenge_scalar(self, label):
        """현재 상태의 해시로 챌린지를 만들고, 해시를 다시 흡수한다 (체이닝)."""
        self.state.extend(label)
        h = hashlib.sha256(bytes(self.state)).digest()
        self.state.extend(h)
        return FR(int.from_bytes(h, "big") % CURVE_ORDER)
