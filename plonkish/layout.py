"""
격자 레이아웃 (Grid Layout)
============================

회로의 "모양"을 witness 없이 한 번만 선언한다.

**격자(grid)**:
  n = 2^k 개의 행과 여러 개의 열로 이루어진 표. 열의 종류는 세 가지이다.

  | 종류     | 내용                                   | Verifier 가 아는가 |
  |----------|----------------------------------------|--------------------|
  | advice   | witness 에서 유도된 값 (비공개)         | 아니오 (커밋만)    |
  | instance | 공개 입력                               | 예                 |
  | fixed    | 회로에 박힌 상수 (셀렉터 포함)          | 예 (keygen 시 커밋)|

**게이트(gate)**:
  셀 질의(query)로 만든 다항식 표현식. 셀렉터가 켜진 행마다 0 이어야 한다.
  질의는 (열, 회전) 쌍이며, 회전 0 은 현재 행, +1 은 다음 행이다.

    s_mul · (a₀[cur] · a₁[cur] - a₀[next]) = 0
    s_add · (a₀[cur] + a₁[cur] - a₀[next]) = 0

**복사(equality) 가능 열**:
  ``enable_equality`` 된 열의 셀들만 등식 제약에 참여할 수 있다.
  ``enable_constant`` 된 fixed 열은 상수를 advice 셀에 묶는 데 쓰인다.

사용 예시:
    >>> meta = ConstraintSystem()
    >>> a = meta.advice_column()
    >>> s = meta.selector()
    >>> meta.create_gate("square", lambda vc: [
    ...     vc.query_selector(s) * (vc.query_advice(a, Rotation.CUR) ** 2
    ...                             - vc.query_advice(a, Rotation.NEXT))])
"""

from enum import Enum

from plonkish.backend.field import FR, to_fr
from plonkish.errors import ConfigurationError


class ColumnKind(Enum):
    ADVICE = "advice"
    INSTANCE = "instance"
    FIXED = "fixed"


class Column:
    """격자의 한 열. (index, kind) 로 식별되며 변경되지 않는다."""

    __slots__ = ("index", "kind")

    def __init__(self, index, kind):
        self.index = index
        self.kind = kind

    def __eq__(self, other):
        if not isinstance(other, Column):
            return NotImplemented
        return self.index == other.index and self.kind == other.kind

    def __hash__(self):
        return hash((self.index, self.kind))

    def __repr__(self):
        return f"Column({self.kind.value}[{self.index}])"


class Selector:
    """0/1 fixed 열. 게이트를 특정 행에서 켠다."""

    __slots__ = ("index",)

    def __init__(self, index):
        self.index = index

    def enable(self, region, offset):
        """region 의 offset 행에서 이 셀렉터를 켠다."""
        region.enable_selector(self, offset)

    def __eq__(self, other):
        if not isinstance(other, Selector):
            return NotImplemented
        return self.index == other.index

    def __hash__(self):
        return hash(("selector", self.index))

    def __repr__(self):
        return f"Selector({self.index})"


class Rotation:
    """질의 회전: 현재 행 기준 상대 행 번호."""
    PREV = -1
    CUR = 0
    NEXT = 1


# ─────────────────────────────────────────────────────────────────────
# 표현식 (Expression)
# ─────────────────────────────────────────────────────────────────────

class Expression:
    """셀 질의 위의 다항식 표현식.

    ``evaluate`` 는 잎(leaf)마다 콜백을 호출하고 +, *, - 로 접는다.
    콜백이 FR 을 돌려주면 한 행의 값을, Polynomial 을 돌려주면 제약 다항식을 얻는다.
    """

    def evaluate(self, constant, selector, query):
        raise NotImplementedError

    def degree(self):
        raise NotImplementedError

    def queries(self):
        """표현식이 읽는 (열, 회전) 쌍들."""
        return []

    def __add__(self, other):
        return Sum(self, _to_expression(other))

    def __radd__(self, other):
        return Sum(_to_expression(other), self)

    def __sub__(self, other):
        return Sum(self, Negated(_to_expression(other)))

    def __rsub__(self, other):
        return Sum(_to_expression(other), Negated(self))

    def __mul__(self, other):
        return Product(self, _to_expression(other))

    def __rmul__(self, other):
        return Product(_to_expression(other), self)

    def __neg__(self):
        return Negated(self)

    def __pow__(self, exponent):
        if not isinstance(exponent, int) or exponent < 1:
            raise ConfigurationError(f"표현식 거듭제곱 지수는 1 이상의 정수여야 합니다: {exponent}")
        result = self
        for _ in range(exponent - 1):
            result = result * self
        return result


class Constant(Expression):
    def __init__(self, value):
        self.value = to_fr(value)

    def evaluate(self, constant, selector, query):
        return constant(self.value)

    def degree(self):
        return 0

    def __repr__(self):
        return f"Constant({int(self.value)})"


class SelectorQuery(Expression):
    def __init__(self, selector):
        self.selector = selector

    def evaluate(self, constant, selector, query):
        return selector(self.selector)

    def degree(self):
        return 1

    def __repr__(self):
        return f"{self.selector!r}"


class CellQuery(Expression):
    def __init__(self, column, rotation):
        self.column = column
        self.rotation = rotation

    def evaluate(self, constant, selector, query):
        return query(self.column, self.rotation)

    def degree(self):
        return 1

    def queries(self):
        return [(self.column, self.rotation)]

    def __repr__(self):
        return f"{self.column!r}@{self.rotation:+d}"


class Sum(Expression):
    def __init__(self, left, right):
        self.left = left
        self.right = right

    def evaluate(self, constant, selector, query):
        return (self.left.evaluate(constant, selector, query)
                + self.right.evaluate(constant, selector, query))

    def degree(self):
        return max(self.left.degree(), self.right.degree())

    def queries(self):
        return self.left.queries() + self.right.queries()

    def __repr__(self):
        return f"({self.left!r} + {self.right!r})"


class Product(Expression):
    def __init__(self, left, right):
        self.left = left
        self.right = right

    def evaluate(self, constant, selector, query):
        return (self.left.evaluate(constant, selector, query)
                * self.right.evaluate(constant, selector, query))

    def degree(self):
        return self.left.degree() + self.right.degree()

    def queries(self):
        return self.left.queries() + self.right.queries()

    def __repr__(self):
        return f"({self.left!r} * {self.right!r})"


class Negated(Expression):
    def __init__(self, inner):
        self.inner = inner

    def evaluate(self, constant, selector, query):
        return -self.inner.evaluate(constant, selector, query)

    def degree(self):
        return self.inner.degree()

    def queries(self):
        return self.inner.queries()

    def __repr__(self):
        return f"-{self.inner!r}"


def _to_expression(value):
    if isinstance(value, Expression):
        return value
    if isinstance(value, (int, FR)):
        return Constant(value)
    raise TypeError(f"표현식으로 변환할 수 없는 값입니다: {value!r}")


# ─────────────────────────────────────────────────────────────────────
# 게이트와 제약 시스템
# ─────────────────────────────────────────────────────────────────────

class Gate:
    """이름 붙은 제약 다항식 묶음.

    속성:
        name: 게이트 이름 (예: "mul/add")
        constraint_names: 각 다항식의 이름
        polys: Expression 리스트
    """

    def __init__(self, name, constraint_names, polys):
        self.name = name
        self.constraint_names = constraint_names
        self.polys = polys

    def degree(self):
        return max(p.degree() for p in self.polys)

    def __repr__(self):
        return f"Gate({self.name!r}, {self.constraint_names})"


class VirtualCells:
    """create_gate 콜백에 전달되는 질의 도우미."""

    def __init__(self, meta):
        self.meta = meta

    def query_advice(self, column, rotation=Rotation.CUR):
        return self._query(column, ColumnKind.ADVICE, rotation)

    def query_fixed(self, column, rotation=Rotation.CUR):
        return self._query(column, ColumnKind.FIXED, rotation)

    def query_instance(self, column, rotation=Rotation.CUR):
        return self._query(column, ColumnKind.INSTANCE, rotation)

    def query_selector(self, selector):
        self.meta.check_selector(selector)
        return SelectorQuery(selector)

    def _query(self, column, kind, rotation):
        if column.kind is not kind:
            raise ConfigurationError(f"{column!r} 은 {kind.value} 열이 아닙니다")
        self.meta.check_column(column)
        return CellQuery(column, rotation)


class ConstraintSystem:
    """열, 셀렉터, 게이트, 복사 가능 열을 선언하는 저장소.

    configure() 단계에서 한 번 채워지고 이후에는 읽기만 한다.
    """

    def __init__(self):
        self.num_advice_columns = 0
        self.num_instance_columns = 0
        self.num_fixed_columns = 0
        self.num_selectors = 0
        self.gates = []
        # 복사 제약(순열)에 참여하는 열, 활성화 순서대로
        self.permutation_columns = []
        # 상수 바인딩이 허용된 fixed 열
        self.constants = []

    # ── 선언 ──

    def advice_column(self):
        column = Column(self.num_advice_columns, ColumnKind.ADVICE)
        self.num_advice_columns += 1
        return column

    def instance_column(self):
        column = Column(self.num_instance_columns, ColumnKind.INSTANCE)
        self.num_instance_columns += 1
        return column

    def fixed_column(self):
        column = Column(self.num_fixed_columns, ColumnKind.FIXED)
        self.num_fixed_columns += 1
        return column

    def selector(self):
        selector = Selector(self.num_selectors)
        self.num_selectors += 1
        return selector

    def enable_equality(self, column):
        """column 을 복사 제약에 참여시킨다.

        enable_constant 로 이미 켜진 상수 열이면 아무것도 하지 않는다.

        Raises:
            ConfigurationError: 이미 활성화된 열이거나 선언되지 않은 열일 때
        """
        self.check_column(column)
        if column in self.constants:
            return
        if column in self.permutation_columns:
            raise ConfigurationError(f"{column!r} 의 equality 가 이미 활성화되어 있습니다")
        self.permutation_columns.append(column)

    def enable_constant(self, column):
        """fixed 열을 상수 바인딩용으로 지정한다 (equality 도 함께 켠다)."""
        if column.kind is not ColumnKind.FIXED:
            raise ConfigurationError(f"상수 바인딩은 fixed 열에만 가능합니다: {column!r}")
        self.check_column(column)
        if column in self.constants:
            raise ConfigurationError(f"{column!r} 은 이미 상수 열입니다")
        self.constants.append(column)
        if column not in self.permutation_columns:
            self.permutation_columns.append(column)

    def create_gate(self, name, constraints_fn):
        """게이트를 등록한다.

        Args:
            name: 게이트 이름 (중복 불가)
            constraints_fn: VirtualCells 를 받아 Expression 또는
                            (이름, Expression) 의 리스트를 돌려주는 함수
        """
        if any(g.name == name for g in self.gates):
            raise ConfigurationError(f"게이트 이름이 중복되었습니다: {name!r}")

        constraints = list(constraints_fn(VirtualCells(self)))
        if not constraints:
            raise ConfigurationError(f"게이트 {name!r} 에 제약이 없습니다")

        names, polys = [], []
        for i, item in enumerate(constraints):
            if isinstance(item, tuple):
                constraint_name, poly = item
            else:
                constraint_name, poly = f"constraint {i}", item
            if not isinstance(poly, Expression):
                raise ConfigurationError(f"게이트 {name!r} 의 제약이 표현식이 아닙니다: {poly!r}")
            names.append(constraint_name)
            polys.append(poly)

        self.gates.append(Gate(name, names, polys))

    # ── 조회 ──

    def check_column(self, column):
        counts = {
            ColumnKind.ADVICE: self.num_advice_columns,
            ColumnKind.INSTANCE: self.num_instance_columns,
            ColumnKind.FIXED: self.num_fixed_columns,
        }
        if not 0 <= column.index < counts[column.kind]:
            raise ConfigurationError(f"선언되지 않은 열입니다: {column!r}")

    def check_selector(self, selector):
        if not 0 <= selector.index < self.num_selectors:
            raise ConfigurationError(f"선언되지 않은 셀렉터입니다: {selector!r}")

    def degree(self):
        """게이트 다항식의 최대 차수 (질의 개수 기준)."""
        return max((g.degree() for g in self.gates), default=1)

    def queried_rotations(self):
        """열 → 게이트에서 질의된 회전들의 정렬 리스트."""
        rotations = {}
        for gate in self.gates:
            for poly in gate.polys:
                for column, rotation in poly.queries():
                    rotations.setdefault(column, set()).add(rotation)
        return {column: sorted(rots) for column, rots in rotations.items()}

    def advice_columns(self):
        return [Column(i, ColumnKind.ADVICE) for i in range(self.num_advice_columns)]

    def instance_columns(self):
        return [Column(i, ColumnKind.INSTANCE) for i in range(self.num_instance_columns)]

    def fixed_columns(self):
        return [Column(i, ColumnKind.FIXED) for i in range(self.num_fixed_columns)]

    def selectors(self):
        return [Selector(i) for i in range(self.num_selectors)]
