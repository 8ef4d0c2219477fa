"""
증명 직렬화/역직렬화
====================

Proof 를 JSON 호환 dict 로, 그리고 바이트열로 변환한다.
dict 형태는 웹 데모의 TinyDB 저장에도 그대로 쓰인다.

  FR        → str(int)
  G1 점     → [str(x), str(y)]  또는 None (무한원점)
  evals     → [[회전, 키, str(값)], ...]  (열기 일정 순서)

사용 예시:
    >>> data = serialize_proof(proof)      # bytes
    >>> deserialize_proof(data) == proof   # True
"""

import json

from py_ecc.fields import bn128_FQ as FQ

from plonkish.backend.field import FR
from plonkish.backend.prover import Proof


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR"""
    return FR(int(s))


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def deserialize_g1(data):
    """[str, str] or None → G1 point

    곡선 위에 있는지는 보지 않는다. 검증기가 거부한다.
    """
    if data is None:
        return None
    return (FQ(int(data[0])), FQ(int(data[1])))


def g1_short(point):
    """표시용 축약 문자열."""
    if point is None:
        return "O (infinity)"
    x = str(int(point[0]))
    return f"({x[:8]}...{x[-4:]}, ...)"


# ─── Proof ───

def proof_to_dict(proof):
    return {
        "advice_comms": [serialize_g1(p) for p in proof.advice_comms],
        "z_comm": serialize_g1(proof.z_comm),
        "t_comms": [serialize_g1(p) for p in proof.t_comms],
        "evals": [
            [rotation, key, serialize_fr(value)]
            for (rotation, key), value in proof.evals.items()
        ],
        "opening_comms": [serialize_g1(p) for p in proof.opening_comms],
    }


def proof_from_dict(data):
    """dict → Proof.

    Raises:
        ValueError: 필드가 없거나 형식이 맞지 않을 때
    """
    try:
        proof = Proof()
        proof.advice_comms = [deserialize_g1(p) for p in data["advice_comms"]]
        proof.z_comm = deserialize_g1(data["z_comm"])
        proof.t_comms = [deserialize_g1(p) for p in data["t_comms"]]
        proof.evals = {
            (int(rotation), key): deserialize_fr(value)
            for rotation, key, value in data["evals"]
        }
        proof.opening_comms = [deserialize_g1(p) for p in data["opening_comms"]]
    except (KeyError, TypeError, IndexError) as exc:
        raise ValueError(f"증명 데이터 형식이 올바르지 않습니다: {exc}") from exc
    return proof


def serialize_proof(proof):
    """Proof → bytes (UTF-8 JSON). 같은 증명은 항상 같은 바이트열이 된다."""
    return json.dumps(proof_to_dict(proof), sort_keys=True, separators=(",", ":")).encode()


def deserialize_proof(data):
    """bytes → Proof.

    Raises:
        ValueError: JSON 이 아니거나 형식이 맞지 않을 때
    """
    return proof_from_dict(json.loads(data))
