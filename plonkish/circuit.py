"""
회로 프로그램: x³ + x + c = result
==================================

  x         = load_private(x)
  k         = load_constant(c)
  x2        = mul(x, x)
  x3        = mul(x2, x)
  x3_plus_x = add(x3, x)
  result    = add(x3_plus_x, k)
  expose_public(result, row=0)

분기도 반복도 없는 직선 프로그램이므로 x 를 알든 모르든 같은 격자 모양이 나온다.

격자 배치 (c = 5, x = 3). 각 단계는 이름 공간으로 감싸여 영역 이름이 "단계/연산" 이 된다.

  행 | 영역                        | a₀  | a₁ | s_mul | s_add
  ---|-----------------------------|-----|----|-------|------
   0 | load x/load private         |  3  |    |       |
   1 | load constant/load constant |  5  |    |       |
   2 | x2/mul                      |  3  | 3  |   1   |
   3 |                             |  9  |    |       |
   4 | x3/mul                      |  9  | 3  |   1   |
   5 |                             | 27  |    |       |
   6 | x3_x/add                    | 27  | 3  |       |   1
   7 |                             | 30  |    |       |
   8 | x3_x_5/add                  | 30  | 5  |       |   1
   9 |                             | 35  |    |       |

사용 예시:
    >>> circuit = CubicCircuit(x=3)
    >>> circuit.expected_result()   # FR(35)
    >>> circuit.without_witnesses() # CubicCircuit(x=unknown, constant=5)
"""

from plonkish import config as settings
from plonkish.chip import ArithmeticChip
from plonkish.value import Value


class CubicCircuit:
    """x³ + x + constant 를 계산해 공개하는 회로.

    Args:
        x: 비공개 입력. None 이면 unknown (구조 패스용).
        constant: 회로에 박히는 상수. 격자 모양의 일부이다.
    """

    # instance 열 하나, 공개 입력 하나 (result)
    num_public_inputs = 1

    def __init__(self, x=None, constant=settings.DEFAULT_CONSTANT):
        self.x = Value.of(x)
        self.constant = constant

    def without_witnesses(self):
        # 하위 클래스의 구조 패스도 자기 synthesize 를 타야 한다
        return type(self)(x=None, constant=self.constant)

    @classmethod
    def configure(cls, meta):
        advice = [meta.advice_column(), meta.advice_column()]
        instance = meta.instance_column()
        constant = meta.fixed_column()
        return ArithmeticChip.configure(meta, advice, instance, constant)

    def synthesize(self, config, layouter):
        chip = ArithmeticChip(config)

        with layouter.namespace("load x"):
            x = chip.load_private(layouter, self.x)
        with layouter.namespace("load constant"):
            k = chip.load_constant(layouter, self.constant)

        with layouter.namespace("x2"):
            x2 = chip.mul(layouter, x, x)
        with layouter.namespace("x3"):
            x3 = chip.mul(layouter, x2, x)
        with layouter.namespace("x3_x"):
            x3_plus_x = chip.add(layouter, x3, x)
        with layouter.namespace("x3_x_5"):
            result = chip.add(layouter, x3_plus_x, k)

        with layouter.namespace("expose res"):
            chip.expose_public(layouter, result, 0)

    def expected_result(self):
        """x 가 주어졌을 때의 공개 출력 x³ + x + constant (Value)."""
        return self.x * self.x * self.x + self.x + Value.known(self.constant)

    def __repr__(self):
        x = int(self.x.assign()) if self.x.is_known() else "unknown"
        return f"CubicCircuit(x={x}, constant={self.constant})"
