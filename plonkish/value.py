"""
셀 값(Value): 알려진 값 또는 알 수 없는 값
==========================================

같은 회로 프로그램이 두 가지 맥락에서 실행된다.

  - 증명(prover) 맥락:  witness 가 있으므로 모든 셀 값이 구체적인 FR
  - 구조(keygen) 맥락:  witness 가 없으므로 advice 셀 값은 "알 수 없음"

Value 는 이 둘을 하나의 타입으로 표현하고, 산술을 그 위로 끌어올린다.
피연산자 중 하나라도 알 수 없으면 결과도 알 수 없다.

  | a         | b         | a * b       |
  |-----------|-----------|-------------|
  | known(3)  | known(9)  | known(27)   |
  | known(3)  | unknown   | unknown     |
  | unknown   | unknown   | unknown     |

사용 예시:
    >>> x = Value.known(3)
    >>> (x * x * x + x + Value.known(5)).assign()   # FR(35)
    >>> (Value.unknown() * x).is_known()            # False
"""

from plonkish.backend.field import FR, to_fr
from plonkish.errors import SynthesisError


class Value:
    """Known(F) | Unknown 태그드 값. 생성 후 변경되지 않는다."""

    __slots__ = ("_inner",)

    def __init__(self, inner=None):
        self._inner = None if inner is None else to_fr(inner)

    @classmethod
    def known(cls, value):
        if value is None:
            raise ValueError("Value.known 에 None 을 줄 수 없습니다. Value.unknown() 을 쓰세요")
        return cls(value)

    @classmethod
    def unknown(cls):
        return cls(None)

    @classmethod
    def of(cls, value):
        """None 이면 unknown, Value 면 그대로, 그 외에는 known."""
        if isinstance(value, Value):
            return value
        return cls(value)

    def is_known(self):
        return self._inner is not None

    def assign(self):
        """구체적인 FR 을 꺼낸다.

        Raises:
            SynthesisError: 값이 알 수 없음일 때
        """
        if self._inner is None:
            raise SynthesisError("값이 필요한 맥락에서 알 수 없는 값이 할당되었습니다")
        return self._inner

    def map(self, fn):
        if self._inner is None:
            return Value.unknown()
        return Value(fn(self._inner))

    def zip_with(self, other, fn):
        other = Value.of(other)
        if self._inner is None or other._inner is None:
            return Value.unknown()
        return Value(fn(self._inner, other._inner))

    def __add__(self, other):
        return self.zip_with(other, lambda a, b: a + b)

    def __sub__(self, other):
        return self.zip_with(other, lambda a, b: a - b)

    def __mul__(self, other):
        return self.zip_with(other, lambda a, b: a * b)

    def __neg__(self):
        return self.map(lambda a: FR(0) - a)

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        if self._inner is None or other._inner is None:
            return self._inner is None and other._inner is None
        return self._inner == other._inner

    def __hash__(self):
        return hash(None if self._inner is None else int(self._inner))

    def __repr__(self):
        if self._inner is None:
            return "Value(unknown)"
        return f"Value({int(self._inner)})"
