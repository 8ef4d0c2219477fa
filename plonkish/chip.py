"""
산술 칩 (Arithmetic Chip)
=========================

회로 작성자가 프로그래밍하는 연산 집합. 각 연산은 정확히 하나의 영역을 만든다.

  | 연산            | 영역 이름        | 내용                                           |
  |-----------------|------------------|------------------------------------------------|
  | load_private    | "load private"   | a₀[0] ← v                                       |
  | load_constant   | "load constant"  | a₀[0] ← c, 상수 열에 고정                       |
  | mul             | "mul"            | s_mul[0] = 1, a₀[0] ≡ a, a₁[0] ≡ b, a₀[1] ← a·b |
  | add             | "add"            | s_add[0] = 1, a₀[0] ≡ a, a₁[0] ≡ b, a₀[1] ← a+b |
  | expose_public   | (없음)           | cell ≡ instance[row]                            |

  (≡ 는 복사 제약)

**게이트 "mul/add"**:

    lhs = a₀[cur], rhs = a₁[cur], out = a₀[next]

    s_mul · (lhs · rhs - out) = 0
    s_add · (lhs + rhs - out) = 0

  mul 영역은 2행을 쓴다:

    offset | a₀   | a₁ | s_mul
    -------|------|----|------
       0   | a    | b  |  1
       1   | a·b  |    |  0
"""

from collections import namedtuple

from plonkish.layout import Rotation

# configure() 가 돌려주는 열/셀렉터 핸들 묶음
ArithmeticConfig = namedtuple(
    "ArithmeticConfig", ["advice", "instance", "constant", "s_mul", "s_add"]
)


class ArithmeticChip:
    """load / mul / add / expose 연산을 영역으로 구현하는 칩."""

    def __init__(self, config):
        self.config = config

    @staticmethod
    def configure(meta, advice, instance, constant):
        """열에 equality 와 상수 바인딩을 켜고, 셀렉터 두 개와 게이트를 등록한다.

        Args:
            meta: ConstraintSystem
            advice: advice 열 두 개 [a₀, a₁]
            instance: 공개 입력 열
            constant: 상수용 fixed 열

        Returns:
            ArithmeticConfig
        """
        meta.enable_equality(instance)
        meta.enable_constant(constant)
        for column in advice:
            meta.enable_equality(column)

        s_mul = meta.selector()
        s_add = meta.selector()

        def mul_add_gate(vc):
            lhs = vc.query_advice(advice[0], Rotation.CUR)
            rhs = vc.query_advice(advice[1], Rotation.CUR)
            out = vc.query_advice(advice[0], Rotation.NEXT)
            return [
                ("mul", vc.query_selector(s_mul) * (lhs * rhs - out)),
                ("add", vc.query_selector(s_add) * (lhs + rhs - out)),
            ]

        meta.create_gate("mul/add", mul_add_gate)

        return ArithmeticConfig(tuple(advice), instance, constant, s_mul, s_add)

    def load_private(self, layouter, value):
        """비공개 값 하나를 a₀ 에 싣는다. value 가 None 이면 unknown."""
        with layouter.assign_region("load private") as region:
            return region.assign_advice("private input", self.config.advice[0], 0, value)

    def load_constant(self, layouter, constant):
        """상수를 a₀ 에 싣고 상수 열과 묶는다."""
        with layouter.assign_region("load constant") as region:
            return region.assign_advice_from_constant(
                "constant", self.config.advice[0], 0, constant
            )

    def mul(self, layouter, a, b):
        return self._binary(layouter, "mul", self.config.s_mul, a, b, lambda x, y: x * y)

    def add(self, layouter, a, b):
        return self._binary(layouter, "add", self.config.s_add, a, b, lambda x, y: x + y)

    def _binary(self, layouter, name, selector, a, b, op):
        advice = self.config.advice
        with layouter.assign_region(name) as region:
            selector.enable(region, 0)
            lhs = a.copy_advice("lhs", region, advice[0], 0)
            rhs = b.copy_advice("rhs", region, advice[1], 0)
            return region.assign_advice("out", advice[0], 1, op(lhs.value, rhs.value))

    def expose_public(self, layouter, cell, row):
        """cell 을 instance 열의 row 행에 공개한다."""
        layouter.constrain_instance(cell, self.config.instance, row)
