"""
영역 빌더 (Region Builder)
==========================

연산 칩은 격자의 절대 행 번호를 모른다. 대신 이름 붙은 영역(region)을 열고
영역 안의 상대 offset 에 셀을 할당한다. Layouter 가 영역을 격자에 배치한다.

**배치 규칙 (floor planning)**:
  영역은 열린 순서대로 첫 번째 빈 행부터 차례로 놓인다. 영역끼리 행을 공유하지 않는다.

    행 0      "load private"    (1행)
    행 1      "load constant"   (1행)
    행 2..3   "mul"             (2행)
    행 4..5   "mul"             (2행)
    ...

  ``assign_advice_from_constant`` 로 묶인 상수들은 모든 영역 배치가 끝난 뒤
  (``finish``) 상수 열의 행 0, 1, ... 에 하나씩 놓이고 해당 advice 셀과 복사 제약으로 묶인다.

사용 예시:
    >>> layouter = Layouter(assignment, instance_arity=1)
    >>> with layouter.assign_region("load private") as region:
    ...     cell = region.assign_advice("x", advice, 0, Value.known(3))
    >>> layouter.constrain_instance(cell, instance, 0)
    >>> layouter.finish()
"""

from contextlib import contextmanager

from plonkish.assignment import Assignment
from plonkish.errors import SynthesisError
from plonkish.layout import ColumnKind, ConstraintSystem
from plonkish.value import Value


class AssignedCell:
    """할당된 셀의 핸들: 값(Value)과 위치 (열, 절대 행)."""

    __slots__ = ("value", "cell")

    def __init__(self, value, cell):
        self.value = value
        self.cell = cell

    @property
    def column(self):
        return self.cell[0]

    @property
    def row(self):
        return self.cell[1]

    def copy_advice(self, annotation, region, column, offset):
        """이 셀의 값을 region 의 (column, offset) 에 다시 쓰고 복사 제약으로 묶는다."""
        copied = region.assign_advice(annotation, column, offset, self.value)
        region.constrain_equal(self, copied)
        return copied

    def __repr__(self):
        column, row = self.cell
        return f"AssignedCell({column!r}, row={row}, {self.value!r})"


class Region:
    """열린 영역. 모든 offset 은 영역 시작 행 기준이다."""

    def __init__(self, layouter, name, start):
        self.layouter = layouter
        self.name = name
        self.start = start
        self.rows = 0

    @property
    def assignment(self):
        return self.layouter.assignment

    def _absolute(self, offset):
        if offset < 0:
            raise SynthesisError(f"영역 {self.name!r}: 음수 offset {offset}")
        self.rows = max(self.rows, offset + 1)
        return self.start + offset

    def assign_advice(self, annotation, column, offset, value):
        """advice 셀을 할당한다.

        Args:
            annotation: 셀 설명 (오류 메시지용)
            column: advice 열
            offset: 영역 내 상대 행
            value: Value, 또는 Value 로 바꿀 수 있는 값 (None 은 unknown)

        Raises:
            SynthesisError: 값 패스에서 value 가 unknown 이거나, 격자를 넘어설 때
        """
        value = Value.of(value)
        row = self._absolute(offset)
        try:
            self.assignment.assign_advice(column, row, value)
        except SynthesisError as exc:
            raise SynthesisError(f"영역 {self.name!r} 의 {annotation!r}: {exc}") from exc
        return AssignedCell(value, (column, row))

    def assign_advice_from_constant(self, annotation, column, offset, constant):
        """상수를 advice 셀에 쓰고, 상수 열에 묶이도록 예약한다."""
        cell = self.assign_advice(annotation, column, offset, Value.known(constant))
        self.layouter.constants.append((cell.value.assign(), cell.cell))
        return cell

    def enable_selector(self, selector, offset):
        self.assignment.enable_selector(selector, self._absolute(offset))

    def constrain_equal(self, cell_a, cell_b):
        self.assignment.copy(cell_a.cell, cell_b.cell)


class Layouter:
    """영역을 격자에 순서대로 배치하는 floor planner.

    Args:
        assignment: 채울 Assignment
        instance_arity: constrain_instance 가 허용하는 instance 행 수
    """

    def __init__(self, assignment, instance_arity=0):
        self.assignment = assignment
        self.instance_arity = instance_arity
        self.next_row = 0
        self.constants = []
        self._namespace = []

    @contextmanager
    def namespace(self, name):
        """영역 이름 앞에 붙는 이름 공간. 예: "cubic/mul"."""
        self._namespace.append(name)
        try:
            yield self
        finally:
            self._namespace.pop()

    @contextmanager
    def assign_region(self, name):
        """다음 빈 행에서 영역을 연다. with 블록이 끝나면 사용한 행만큼 전진한다."""
        full_name = "/".join(self._namespace + [name])
        region = Region(self, full_name, self.next_row)
        yield region
        self.assignment.record_region(full_name, region.start, region.rows)
        self.next_row += region.rows

    def constrain_instance(self, cell, column, row):
        """cell 을 instance 열의 row 행과 같도록 묶는다.

        Raises:
            SynthesisError: column 이 instance 열이 아니거나 row 가 공개 입력 수 이상일 때
        """
        if column.kind is not ColumnKind.INSTANCE:
            raise SynthesisError(f"{column!r} 은 instance 열이 아닙니다")
        if not 0 <= row < self.instance_arity:
            raise SynthesisError(
                f"공개 입력 행 {row} 이 공개 입력 수 {self.instance_arity} 를 벗어났습니다"
            )
        self.assignment.copy(cell.cell, (column, row))

    def finish(self):
        """예약된 상수들을 상수 열에 배치한다."""
        if not self.constants:
            return
        if not self.assignment.cs.constants:
            raise SynthesisError("상수 바인딩이 활성화된 fixed 열이 없습니다")
        constant_column = self.assignment.cs.constants[0]
        for row, (value, cell) in enumerate(self.constants):
            self.assignment.assign_fixed(constant_column, row, value)
            self.assignment.copy(cell, (constant_column, row))


def configure(circuit_cls):
    """회로 클래스의 configure 를 새 ConstraintSystem 위에서 실행한다."""
    meta = ConstraintSystem()
    config = circuit_cls.configure(meta)
    return meta, config


def synthesize(circuit, cs, config, n, instances=None, witness_required=False):
    """합성 패스 한 번을 실행해 채워진 Assignment 를 돌려준다."""
    assignment = Assignment(cs, n, instances, witness_required=witness_required)
    layouter = Layouter(assignment, instance_arity=circuit.num_public_inputs)
    circuit.synthesize(config, layouter)
    layouter.finish()
    return assignment
