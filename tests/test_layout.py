"""
Grid Layout tests: ConstraintSystem, 표현식, 게이트, 칩 configure
"""
import pytest

from plonkish.backend.field import FR
from plonkish.chip import ArithmeticChip
from plonkish.circuit import CubicCircuit
from plonkish.errors import ConfigurationError
from plonkish.layout import (
    CellQuery, Column, ColumnKind, Constant, ConstraintSystem, Rotation, Selector,
)


def _eval_const(expr, cells, selectors=None):
    """행 하나의 값으로 표현식을 평가한다. cells: {(열, 회전): 정수}"""
    selectors = selectors or {}
    return expr.evaluate(
        lambda c: c,
        lambda s: FR(selectors.get(s.index, 0)),
        lambda column, rot: FR(cells[(column, rot)]),
    )


# ─────────────────────────────────────────────────────────────────────
# 선언
# ─────────────────────────────────────────────────────────────────────

class TestDeclarations:
    def test_column_indices(self):
        meta = ConstraintSystem()
        a0 = meta.advice_column()
        a1 = meta.advice_column()
        inst = meta.instance_column()
        fixed = meta.fixed_column()
        assert a0 == Column(0, ColumnKind.ADVICE)
        assert a1 == Column(1, ColumnKind.ADVICE)
        assert inst == Column(0, ColumnKind.INSTANCE)
        assert fixed == Column(0, ColumnKind.FIXED)
        assert a0 != inst

    def test_selectors(self):
        meta = ConstraintSystem()
        assert meta.selector() == Selector(0)
        assert meta.selector() == Selector(1)
        assert meta.selectors() == [Selector(0), Selector(1)]

    def test_enable_equality_order(self):
        meta = ConstraintSystem()
        a = meta.advice_column()
        inst = meta.instance_column()
        meta.enable_equality(inst)
        meta.enable_equality(a)
        assert meta.permutation_columns == [inst, a]

    def test_enable_constant_also_enables_equality(self):
        meta = ConstraintSystem()
        fixed = meta.fixed_column()
        meta.enable_constant(fixed)
        assert meta.constants == [fixed]
        assert fixed in meta.permutation_columns

    def test_equality_on_constant_column_is_noop(self):
        """상수 열에 equality 를 다시 켜도 순열 열은 한 번만 들어간다."""
        meta = ConstraintSystem()
        fixed = meta.fixed_column()
        meta.enable_constant(fixed)
        meta.enable_equality(fixed)
        assert meta.permutation_columns == [fixed]

    def test_equality_then_constant(self):
        meta = ConstraintSystem()
        fixed = meta.fixed_column()
        meta.enable_equality(fixed)
        meta.enable_constant(fixed)
        assert meta.permutation_columns == [fixed]
        assert meta.constants == [fixed]


class TestConfigurationErrors:
    def test_equality_enabled_twice(self):
        meta = ConstraintSystem()
        a = meta.advice_column()
        meta.enable_equality(a)
        with pytest.raises(ConfigurationError):
            meta.enable_equality(a)

    def test_constant_on_advice_column(self):
        meta = ConstraintSystem()
        a = meta.advice_column()
        with pytest.raises(ConfigurationError):
            meta.enable_constant(a)

    def test_foreign_column(self):
        meta = ConstraintSystem()
        meta.advice_column()
        with pytest.raises(ConfigurationError):
            meta.enable_equality(Column(3, ColumnKind.ADVICE))

    def test_query_wrong_kind(self):
        meta = ConstraintSystem()
        inst = meta.instance_column()
        with pytest.raises(ConfigurationError):
            meta.create_gate("bad", lambda vc: [vc.query_advice(inst, Rotation.CUR)])

    def test_undeclared_selector(self):
        meta = ConstraintSystem()
        a = meta.advice_column()
        with pytest.raises(ConfigurationError):
            meta.create_gate("bad", lambda vc: [
                vc.query_selector(Selector(0)) * vc.query_advice(a)])

    def test_empty_gate(self):
        meta = ConstraintSystem()
        with pytest.raises(ConfigurationError):
            meta.create_gate("empty", lambda vc: [])

    def test_duplicate_gate_name(self):
        meta = ConstraintSystem()
        a = meta.advice_column()
        meta.create_gate("g", lambda vc: [vc.query_advice(a)])
        with pytest.raises(ConfigurationError):
            meta.create_gate("g", lambda vc: [vc.query_advice(a)])

    def test_non_expression_constraint(self):
        meta = ConstraintSystem()
        with pytest.raises(ConfigurationError):
            meta.create_gate("g", lambda vc: [42])


# ─────────────────────────────────────────────────────────────────────
# 표현식
# ─────────────────────────────────────────────────────────────────────

class TestExpression:
    def setup_method(self):
        self.meta = ConstraintSystem()
        self.a = self.meta.advice_column()
        self.b = self.meta.advice_column()
        self.s = self.meta.selector()

    def test_degree(self):
        captured = {}

        def gate(vc):
            lhs = vc.query_advice(self.a, Rotation.CUR)
            rhs = vc.query_advice(self.b, Rotation.CUR)
            out = vc.query_advice(self.a, Rotation.NEXT)
            captured["expr"] = vc.query_selector(self.s) * (lhs * rhs - out)
            return [captured["expr"]]

        self.meta.create_gate("mul", gate)
        assert captured["expr"].degree() == 3
        assert self.meta.degree() == 3
        assert Constant(5).degree() == 0

    def test_evaluate(self):
        lhs = self._query(self.a, Rotation.CUR)
        rhs = self._query(self.b, Rotation.CUR)
        out = self._query(self.a, Rotation.NEXT)
        expr = lhs * rhs - out + 2
        cells = {(self.a, 0): 3, (self.b, 0): 4, (self.a, 1): 12}
        assert _eval_const(expr, cells) == FR(2)

    def test_pow(self):
        x = self._query(self.a, Rotation.CUR)
        assert _eval_const(x ** 3, {(self.a, 0): 3}) == FR(27)
        with pytest.raises(ConfigurationError):
            x ** 0

    def test_queries(self):
        lhs = self._query(self.a, Rotation.CUR)
        out = self._query(self.a, Rotation.NEXT)
        assert set((lhs * out).queries()) == {(self.a, 0), (self.a, 1)}

    def _query(self, column, rotation):
        return CellQuery(column, rotation)


# ─────────────────────────────────────────────────────────────────────
# 칩 configure
# ─────────────────────────────────────────────────────────────────────

class TestArithmeticConfigure:
    def setup_method(self):
        self.meta = ConstraintSystem()
        self.config = CubicCircuit.configure(self.meta)

    def test_columns(self):
        assert self.meta.num_advice_columns == 2
        assert self.meta.num_instance_columns == 1
        assert self.meta.num_fixed_columns == 1
        assert self.meta.num_selectors == 2

    def test_equality_columns(self):
        cfg = self.config
        assert self.meta.permutation_columns == [
            cfg.instance, cfg.constant, cfg.advice[0], cfg.advice[1]]
        assert self.meta.constants == [cfg.constant]

    def test_single_gate_two_constraints(self):
        assert len(self.meta.gates) == 1
        gate = self.meta.gates[0]
        assert gate.name == "mul/add"
        assert gate.constraint_names == ["mul", "add"]
        assert gate.degree() == 3

    def test_queried_rotations(self):
        cfg = self.config
        rotations = self.meta.queried_rotations()
        assert rotations[cfg.advice[0]] == [0, 1]
        assert rotations[cfg.advice[1]] == [0]

    def test_gate_semantics(self):
        """s_mul·(lhs·rhs - out) + s_add·(lhs + rhs - out)"""
        cfg = self.config
        mul, add = self.meta.gates[0].polys
        a0, a1 = cfg.advice
        cells = {(a0, 0): 3, (a1, 0): 4, (a0, 1): 12}
        assert _eval_const(mul, cells, {cfg.s_mul.index: 1}) == FR(0)
        assert _eval_const(add, cells, {cfg.s_add.index: 1}) == FR(-5)
        # 셀렉터가 꺼지면 어떤 값이든 0
        assert _eval_const(add, cells) == FR(0)

    def test_config_is_immutable(self):
        with pytest.raises(AttributeError):
            self.config.s_mul = None

    def test_configure_twice_on_same_system_fails(self):
        meta = ConstraintSystem()
        advice = [meta.advice_column(), meta.advice_column()]
        inst = meta.instance_column()
        const = meta.fixed_column()
        ArithmeticChip.configure(meta, advice, inst, const)
        with pytest.raises(ConfigurationError):
            ArithmeticChip.configure(meta, advice, inst, const)
