"""
Cubic 회로 Flask Blueprint
==========================

x³ + x + c = result 회로의 setup / prove / verify 를 JSON 엔드포인트로 노출한다.

  POST /cubic/setup    {"k": 4, "seed": 12345, "constant": 5}
  POST /cubic/prove    {"x": 3, "seed": 7}          → {"id": 1, "result": "35", "proof": {...}}
  POST /cubic/verify   {"result": 35, "proof_id": 1}  또는 {"result": 35, "proof": {...}}
  GET  /cubic/proofs

키(ProvingKey / VerifyingKey)는 파이썬 객체라 프로세스 메모리에 두고,
setup 정보와 증명은 TinyDB 에 저장한다.

실행:
    flask --app plonkish.web:create_app run
"""

import logging
import random

from flask import Blueprint, Flask, jsonify, request
from tinydb import Query, TinyDB
from tinydb.storages import MemoryStorage

from plonkish import config
from plonkish.backend.keygen import generate_keys
from plonkish.backend.prover import create_proof
from plonkish.backend.serialization import g1_short, proof_from_dict, proof_to_dict
from plonkish.backend.srs import SRS
from plonkish.backend.verifier import verify_proof
from plonkish.circuit import CubicCircuit
from plonkish.errors import PlonkishError
from plonkish.logging_config import setup_logging

logger = logging.getLogger(__name__)

cubic_bp = Blueprint('cubic', __name__, url_prefix='/cubic')

DATA = Query()

# DB 는 create_app() 에서 주입
DB = None

# 현재 setup 의 키. {"pk": ..., "vk": ..., "constant": ...}
KEYS = {}


def init_cubic_bp(db):
    """DB 를 주입하고 메모리의 키를 비운다."""
    global DB
    DB = db
    KEYS.clear()


# ─── DB 헬퍼 ───

def db_get(key):
    """DB 에서 키로 데이터를 조회한다."""
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """DB 에 키로 데이터를 저장한다."""
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def db_search_prefix(prefix):
    """prefix 로 시작하는 모든 레코드."""
    return DB.search(DATA.type.test(lambda t: t.startswith(prefix)))


def error(message, status=400):
    return jsonify({"error": message}), status


def int_field(body, name, default=None):
    value = body.get(name, default)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"'{name}' 은 정수여야 합니다")
    return value


# ──────────────────────────────────────────────────────────────
# Setup
# ──────────────────────────────────────────────────────────────

@cubic_bp.route("/setup", methods=["POST"])
def setup():
    """SRS 를 만들고 키를 생성한다."""
    body = request.get_json(silent=True) or {}
    try:
        k = int_field(body, "k", config.DEFAULT_K)
        if not config.MIN_K <= k <= config.MAX_K:
            raise ValueError(f"'k' 는 {config.MIN_K} 이상 {config.MAX_K} 이하여야 합니다")
        seed = int_field(body, "seed", config.DEFAULT_SRS_SEED)
        constant = int_field(body, "constant", config.DEFAULT_CONSTANT)
        srs = SRS.for_k(k, seed=seed)
        pk, vk = generate_keys(CubicCircuit(constant=constant), srs, k)
    except (ValueError, PlonkishError) as exc:
        return error(str(exc))

    KEYS.update({"pk": pk, "vk": vk, "constant": constant})

    setup_info = {
        "k": k,
        "n": vk.n,
        "seed": seed,
        "constant": constant,
        "num_t_chunks": vk.num_t_chunks,
        "fixed_comms": [g1_short(p) for p in vk.fixed_comms],
        "sigma_comms": [g1_short(p) for p in vk.sigma_comms],
    }
    db_set("cubic.setup", setup_info)
    logger.info("Setup complete: k=%d, constant=%d", k, constant)
    return jsonify(setup_info)


# ──────────────────────────────────────────────────────────────
# Prove
# ──────────────────────────────────────────────────────────────

@cubic_bp.route("/prove", methods=["POST"])
def prove():
    """비공개 x 로 증명을 만들고 저장한다."""
    if not KEYS:
        return error("setup 이 먼저 필요합니다", 409)

    body = request.get_json(silent=True) or {}
    try:
        x = int_field(body, "x")
        rng = random.Random(int_field(body, "seed")) if "seed" in body else None
        circuit = CubicCircuit(x=x, constant=KEYS["constant"])
        result = circuit.expected_result().assign()
        proof = create_proof(KEYS["pk"], circuit, [[result]], rng=rng)
    except (ValueError, PlonkishError) as exc:
        return error(str(exc))

    proof_id = len(db_search_prefix("cubic.proof.")) + 1
    record = {"id": proof_id, "result": str(int(result)), "proof": proof_to_dict(proof)}
    db_set(f"cubic.proof.{proof_id}", record)
    return jsonify(record)


# ──────────────────────────────────────────────────────────────
# Verify
# ──────────────────────────────────────────────────────────────

@cubic_bp.route("/verify", methods=["POST"])
def verify():
    """저장된 증명 또는 요청에 담긴 증명을 공개 입력 result 로 검증한다."""
    if not KEYS:
        return error("setup 이 먼저 필요합니다", 409)

    body = request.get_json(silent=True) or {}
    try:
        result = int_field(body, "result")
        if "proof_id" in body:
            record = db_get(f"cubic.proof.{int_field(body, 'proof_id')}")
            if record is None:
                return error("증명을 찾을 수 없습니다", 404)
            proof_data = record["proof"]
        else:
            proof_data = body.get("proof")
            if proof_data is None:
                raise ValueError("'proof' 또는 'proof_id' 가 필요합니다")
        proof = proof_from_dict(proof_data)
        valid = verify_proof(KEYS["vk"], [[result]], proof)
    except ValueError as exc:
        return error(str(exc))

    return jsonify({"result": str(result), "valid": valid})


@cubic_bp.route("/proofs")
def proofs():
    """저장된 증명 목록."""
    records = sorted((r["data"] for r in db_search_prefix("cubic.proof.")),
                     key=lambda d: d["id"])
    return jsonify([{"id": d["id"], "result": d["result"]} for d in records])


def create_app(db=None):
    """Flask 앱 팩토리. db 가 없으면 config.DB_PATH (없으면 메모리) 를 쓴다."""
    setup_logging()
    if db is None:
        db = TinyDB(config.DB_PATH) if config.DB_PATH else TinyDB(storage=MemoryStorage)

    app = Flask(__name__)
    init_cubic_bp(db.table("cubic"))
    app.register_blueprint(cubic_bp)
    return app
