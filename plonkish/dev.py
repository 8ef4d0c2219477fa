"""
개발용 Mock Prover
==================

증명을 만들지 않고 격자를 행 단위로 직접 검사한다. 회로 작성 중 디버깅용.

  1. 게이트 검사: 모든 행 r 과 모든 게이트 다항식 g 에 대해 g(r) = 0 인지 확인한다.
     회전은 n 을 법으로 감기고, 비어 있는 셀은 0 으로 읽는다.
  2. 복사 검사: 복사 그룹마다 모든 셀 값이 같은지 확인한다.
     instance 셀과의 복사 제약도 여기서 검사된다 (공개 입력 불일치).

사용 예시:
    >>> prover = MockProver.run(4, CubicCircuit(x=3), [[35]])
    >>> prover.verify()          # []
    >>> prover.assert_satisfied()

    >>> MockProver.run(4, CubicCircuit(x=4), [[35]]).verify()
    [EqualityNotSatisfied(...)]
"""

import logging

from plonkish.backend.field import FR
from plonkish.errors import VerificationFailure
from plonkish.layout import ColumnKind
from plonkish.region import configure, synthesize

logger = logging.getLogger(__name__)


class ConstraintNotSatisfied:
    """게이트 제약 위반 한 건."""

    def __init__(self, gate, constraint, row, region, value):
        self.gate = gate
        self.constraint = constraint
        self.row = row
        self.region = region
        self.value = value

    def __eq__(self, other):
        if not isinstance(other, ConstraintNotSatisfied):
            return NotImplemented
        return (self.gate, self.constraint, self.row) == (other.gate, other.constraint, other.row)

    def __repr__(self):
        return (f"ConstraintNotSatisfied(gate={self.gate!r}, constraint={self.constraint!r}, "
                f"row={self.row}, region={self.region!r}, value={int(self.value)})")


class EqualityNotSatisfied:
    """복사 제약 위반 한 건: 같아야 할 두 셀의 값이 다르다."""

    def __init__(self, cell_a, value_a, cell_b, value_b, region):
        self.cell_a = cell_a
        self.value_a = value_a
        self.cell_b = cell_b
        self.value_b = value_b
        self.region = region

    def __repr__(self):
        (col_a, row_a), (col_b, row_b) = self.cell_a, self.cell_b
        return (f"EqualityNotSatisfied({col_a!r}[{row_a}]={int(self.value_a)} != "
                f"{col_b!r}[{row_b}]={int(self.value_b)}, region={self.region!r})")


class MockProver:
    """값 패스 하나를 실행해 둔 검사기.

    속성:
        cs: ConstraintSystem
        assignment: 채워진 Assignment
        n: 행 수
    """

    def __init__(self, cs, assignment):
        self.cs = cs
        self.assignment = assignment
        self.n = assignment.n

    @classmethod
    def run(cls, k, circuit, instances):
        """회로를 2^k 행 격자에 합성한다.

        Raises:
            SynthesisError: witness 가 없거나 격자를 벗어날 때
            ValueError: instances 의 열 개수가 맞지 않을 때
        """
        cs, config = configure(type(circuit))
        assignment = synthesize(circuit, cs, config, 1 << k, instances, witness_required=True)
        return cls(cs, assignment)

    def verify(self):
        """실패 목록을 돌려준다. 빈 리스트면 모든 제약이 만족된다."""
        failures = self._check_gates() + self._check_equality()
        if failures:
            logger.info("Mock prover: %d failure(s)", len(failures))
        else:
            logger.debug("Mock prover: all constraints satisfied")
        return failures

    def assert_satisfied(self):
        failures = self.verify()
        if failures:
            raise VerificationFailure(failures)

    # ── 1. 게이트 ──

    def _check_gates(self):
        failures = []
        for row in range(self.n):
            for gate in self.cs.gates:
                for name, poly in zip(gate.constraint_names, gate.polys):
                    value = poly.evaluate(
                        lambda c: c,
                        lambda s: self.assignment.selector_value(s, row),
                        lambda column, rot: self.assignment.cell_value(column, (row + rot) % self.n),
                    )
                    if value != FR(0):
                        failures.append(ConstraintNotSatisfied(
                            gate.name, name, row, self.assignment.region_name_at(row), value))
        return failures

    # ── 2. 복사 ──

    def _check_equality(self):
        failures = []
        for cells in self.assignment.equality.groups():
            first = cells[0]
            first_value = self.assignment.cell_value(*first)
            for cell in cells[1:]:
                value = self.assignment.cell_value(*cell)
                if value != first_value:
                    region = self._region_of(cell) or self._region_of(first)
                    failures.append(EqualityNotSatisfied(first, first_value, cell, value, region))
        return failures

    def _region_of(self, cell):
        column, row = cell
        if column.kind is not ColumnKind.ADVICE:
            return None
        return self.assignment.region_name_at(row)
