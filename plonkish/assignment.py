"""
할당 격자 (Assignment)
======================

한 번의 합성(synthesis) 패스가 채우는 2차원 셀 저장소.

  행 \\ 열 | advice[0] | advice[1] | instance | constant | s_mul | s_add
  ---------|-----------|-----------|----------|----------|-------|------
     0     |    x      |           |   35     |    5     |   0   |   0
     1     |    5      |           |          |          |   0   |   0
     2     |    x      |    x      |          |          |   1   |   0
     3     |    x²     |           |          |          |   0   |   0
    ...

패스 종류:
  - 구조 패스 (keygen):     witness_required=False. advice 값은 unknown 이어도 된다.
  - 값 패스 (prover, mock): witness_required=True. unknown 을 쓰면 SynthesisError.

셀은 한 번만 쓸 수 있다 (write-once). 비어 있는 셀은 검사 시 0 으로 읽힌다.
"""

from plonkish.backend.field import FR, to_fr
from plonkish.equality import EqualityGraph
from plonkish.errors import SynthesisError
from plonkish.layout import ColumnKind


class RegionRecord:
    """배치된 영역 한 개의 기록 (이름, 시작 행, 행 수)."""

    def __init__(self, name, start, rows):
        self.name = name
        self.start = start
        self.rows = rows

    def contains(self, row):
        return self.start <= row < self.start + self.rows

    def __eq__(self, other):
        if not isinstance(other, RegionRecord):
            return NotImplemented
        return (self.name, self.start, self.rows) == (other.name, other.start, other.rows)

    def __repr__(self):
        return f"RegionRecord({self.name!r}, start={self.start}, rows={self.rows})"


class Assignment:
    """격자 크기 n 의 셀 저장소.

    Args:
        cs: ConstraintSystem (열 개수와 순열 열 정보)
        n: 행 수 (2^k)
        instances: instance 열마다 공개 입력 리스트. None 이면 모두 비어 있음.
        witness_required: True 이면 unknown advice 할당을 거부한다.

    Raises:
        ValueError: instances 의 열 개수가 맞지 않거나 값이 n 개를 넘을 때
    """

    def __init__(self, cs, n, instances=None, witness_required=False):
        self.cs = cs
        self.n = n
        self.witness_required = witness_required

        if instances is None:
            instances = [[] for _ in range(cs.num_instance_columns)]
        if len(instances) != cs.num_instance_columns:
            raise ValueError(
                f"instance 열은 {cs.num_instance_columns}개인데 "
                f"공개 입력 열이 {len(instances)}개 주어졌습니다"
            )
        self.instance = []
        for values in instances:
            if len(values) > n:
                raise ValueError(f"공개 입력 {len(values)}개가 행 수 {n}을 초과합니다")
            column = [FR(0)] * n
            for i, val in enumerate(values):
                column[i] = to_fr(val)
            self.instance.append(column)

        self.advice = [[None] * n for _ in range(cs.num_advice_columns)]
        self.fixed = [[None] * n for _ in range(cs.num_fixed_columns)]
        self.selectors = [[False] * n for _ in range(cs.num_selectors)]
        self.equality = EqualityGraph()
        self.regions = []

    # ── 쓰기 ──

    def _check_row(self, row, what):
        if not 0 <= row < self.n:
            raise SynthesisError(f"{what}: 행 {row} 이 격자 범위 [0, {self.n}) 를 벗어났습니다")

    def assign_advice(self, column, row, value):
        """advice 셀에 Value 를 쓴다."""
        if column.kind is not ColumnKind.ADVICE:
            raise SynthesisError(f"{column!r} 은 advice 열이 아닙니다")
        self._check_row(row, f"{column!r}")
        if self.advice[column.index][row] is not None:
            raise SynthesisError(f"셀 ({column!r}, {row}) 은 이미 할당되었습니다")
        if self.witness_required:
            value.assign()
        self.advice[column.index][row] = value

    def assign_fixed(self, column, row, value):
        if column.kind is not ColumnKind.FIXED:
            raise SynthesisError(f"{column!r} 은 fixed 열이 아닙니다")
        self._check_row(row, f"{column!r}")
        if self.fixed[column.index][row] is not None:
            raise SynthesisError(f"셀 ({column!r}, {row}) 은 이미 할당되었습니다")
        self.fixed[column.index][row] = to_fr(value)

    def enable_selector(self, selector, row):
        self._check_row(row, f"{selector!r}")
        self.selectors[selector.index][row] = True

    def copy(self, cell_a, cell_b):
        """두 셀 사이에 복사 제약을 건다. 두 열 모두 equality 가 활성화되어 있어야 한다."""
        for column, row in (cell_a, cell_b):
            if column not in self.cs.permutation_columns:
                raise SynthesisError(f"{column!r} 은 equality 가 활성화되지 않은 열입니다")
            self._check_row(row, f"{column!r}")
        self.equality.add(cell_a, cell_b)

    def record_region(self, name, start, rows):
        self.regions.append(RegionRecord(name, start, rows))

    # ── 읽기 ──

    def region_name_at(self, row):
        for region in self.regions:
            if region.contains(row):
                return region.name
        return None

    def advice_value(self, column, row):
        """advice 셀 값 (FR). 비어 있으면 0, unknown 이면 SynthesisError."""
        value = self.advice[column.index][row]
        if value is None:
            return FR(0)
        return value.assign()

    def fixed_value(self, column, row):
        value = self.fixed[column.index][row]
        return FR(0) if value is None else value

    def selector_value(self, selector, row):
        return FR(1) if self.selectors[selector.index][row] else FR(0)

    def instance_value(self, column, row):
        return self.instance[column.index][row]

    def cell_value(self, column, row):
        """종류에 관계없이 셀 값을 FR 로 읽는다."""
        if column.kind is ColumnKind.ADVICE:
            return self.advice_value(column, row)
        if column.kind is ColumnKind.FIXED:
            return self.fixed_value(column, row)
        return self.instance_value(column, row)

    def column_values(self, column):
        return [self.cell_value(column, row) for row in range(self.n)]

    def selector_values(self, selector):
        return [self.selector_value(selector, row) for row in range(self.n)]

    def shape(self):
        """witness 와 무관한 격자 모양.

        영역 배치, 셀렉터, fixed 값, 복사 그룹, 그리고 어떤 advice 셀이
        할당되었는지를 담는다. 구조 패스와 값 패스의 결과가 같아야 한다.
        """
        return {
            "regions": [(r.name, r.start, r.rows) for r in self.regions],
            "selectors": [list(col) for col in self.selectors],
            "fixed": [[None if v is None else int(v) for v in col] for col in self.fixed],
            "advice_assigned": [[v is not None for v in col] for col in self.advice],
            "equality": [
                [(column.kind.value, column.index, row) for column, row in group]
                for group in self.equality.groups()
            ],
        }
