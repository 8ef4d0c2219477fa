"""
복사 제약 그래프 (Equality Graph)
=================================

``constrain_equal(a, b)`` 로 선언된 셀들을 union-find 로 묶는다.
같은 집합(그룹)에 속한 셀들은 모두 같은 값을 가져야 한다.

  x ─── mul.a ─── mul.b ─── mul2.b ─── add.b          (그룹 하나)
  result ─── instance[0]                              (그룹 하나)

**σ 순열**:
  순열 열 j 의 행 i 는 평탄화된 위치 j·n + i 를 가진다.
  그룹마다 위치를 정렬해 하나의 사이클로 잇는다.

    그룹 {p₀, p₁, p₂}  →  σ(p₀) = p₁, σ(p₁) = p₂, σ(p₂) = p₀

  그룹에 속하지 않는 셀은 σ(p) = p (자기 자신).
  사이클로 잇기 때문에 같은 쌍이 두 번 선언되어도 σ 가 깨지지 않는다.
"""

from plonkish.errors import SynthesisError


class EqualityGraph:
    """(열, 행) 셀 위의 union-find."""

    def __init__(self):
        self.parent = {}
        # 처음 등장한 순서를 기억해 groups() 결과를 결정론적으로 만든다
        self.order = []

    def _touch(self, cell):
        if cell not in self.parent:
            self.parent[cell] = cell
            self.order.append(cell)

    def find(self, cell):
        self._touch(cell)
        root = cell
        while self.parent[root] != root:
            root = self.parent[root]
        # 경로 압축
        while self.parent[cell] != root:
            self.parent[cell], cell = root, self.parent[cell]
        return root

    def add(self, cell_a, cell_b):
        """두 셀을 같은 그룹으로 합친다."""
        root_a = self.find(cell_a)
        root_b = self.find(cell_b)
        if root_a != root_b:
            self.parent[root_b] = root_a

    def connected(self, cell_a, cell_b):
        return self.find(cell_a) == self.find(cell_b)

    def groups(self):
        """크기 2 이상인 그룹들. 각 그룹은 등장 순서대로 정렬된 셀 리스트."""
        by_root = {}
        for cell in self.order:
            by_root.setdefault(self.find(cell), []).append(cell)
        return [cells for cells in by_root.values() if len(cells) > 1]

    def build_sigma(self, columns, n):
        """평탄화된 σ 배열을 만든다.

        Args:
            columns: 순열 열 리스트 (활성화 순서)
            n: 행 수

        Returns:
            길이 len(columns)·n 의 정수 리스트. sigma[p] 는 p 다음 위치.

        Raises:
            SynthesisError: 순열 열이 아닌 셀이 그룹에 있을 때
        """
        position_of_column = {column: j for j, column in enumerate(columns)}
        sigma = list(range(len(columns) * n))

        for cells in self.groups():
            positions = []
            for column, row in cells:
                if column not in position_of_column:
                    raise SynthesisError(f"{column!r} 은 equality 가 활성화되지 않은 열입니다")
                positions.append(position_of_column[column] * n + row)
            positions.sort()
            for i, pos in enumerate(positions):
                sigma[pos] = positions[(i + 1) % len(positions)]

        return sigma
