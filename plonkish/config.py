"""
설정 상수
=========

회로 크기, 신뢰 설정(SRS) 시드, 트랜스크립트 레이블 등 전역 상수를 모아 둔다.
웹 데모의 TinyDB 경로와 로그 설정은 환경 변수로 바꿀 수 있다.

Exports:
    DEFAULT_K (int): 기본 격자 크기 지수. 행 수 n = 2^k.
    MIN_K, MAX_K (int): 웹 데모 setup 이 받는 k 범위.
    DEFAULT_CONSTANT (int): x³ + x + c 의 상수 c.
    DEFAULT_SRS_SEED (int): 교육용 결정론적 SRS 시드.
    SRS_DEGREE_HEADROOM (int): SRS 최대 차수 = n + 이 값.
    BLINDING_FACTORS (int): advice/누적자 다항식에 더하는 Z_H 배수의 계수 수.
    TRANSCRIPT_LABEL (bytes): Fiat-Shamir 도메인 분리 레이블.
    DB_PATH (str | None): 웹 데모 TinyDB 파일 경로. None 이면 메모리 저장소.
    LOG_LEVEL (str): plonkish 로거 레벨 이름.
    LOG_FILE (str | None): 로그를 함께 남길 파일 경로.
"""
import os
from typing import Optional

DEFAULT_K: int = 4
# 회로가 10 행을 쓰므로 2^4 = 16 행이 최소. SRS 생성은 n 에 비례해 느려진다.
MIN_K: int = 4
MAX_K: int = 8
DEFAULT_CONSTANT: int = 5
DEFAULT_SRS_SEED: int = 12345

# 블라인딩된 advice / z 다항식의 최대 차수는 n - 1 + BLINDING_FACTORS.
BLINDING_FACTORS: int = 3
SRS_DEGREE_HEADROOM: int = BLINDING_FACTORS

TRANSCRIPT_LABEL: bytes = b"plonkish"

DB_PATH: Optional[str] = os.environ.get("PLONKISH_DB_PATH") or None
LOG_LEVEL: str = os.environ.get("PLONKISH_LOG_LEVEL", "INFO")
LOG_FILE: Optional[str] = os.environ.get("PLONKISH_LOG_FILE") or None
