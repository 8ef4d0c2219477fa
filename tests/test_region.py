"""
Region Builder tests: EqualityGraph, Assignment, Layouter / Region / AssignedCell
"""
import pytest

from plonkish.assignment import Assignment
from plonkish.backend.field import FR
from plonkish.equality import EqualityGraph
from plonkish.errors import SynthesisError
from plonkish.layout import ConstraintSystem
from plonkish.region import Layouter
from plonkish.value import Value


def _system():
    """advice 2개, instance 1개, 상수 열 1개, 셀렉터 1개."""
    meta = ConstraintSystem()
    a0 = meta.advice_column()
    a1 = meta.advice_column()
    inst = meta.instance_column()
    const = meta.fixed_column()
    meta.enable_equality(inst)
    meta.enable_constant(const)
    meta.enable_equality(a0)
    s = meta.selector()
    return meta, a0, a1, inst, const, s


# ─────────────────────────────────────────────────────────────────────
# EqualityGraph
# ─────────────────────────────────────────────────────────────────────

class TestEqualityGraph:
    def test_groups(self):
        g = EqualityGraph()
        g.add("a", "b")
        g.add("c", "d")
        g.add("b", "c")
        g.add("x", "y")
        assert g.groups() == [["a", "b", "c", "d"], ["x", "y"]]
        assert g.connected("a", "d")
        assert not g.connected("a", "x")

    def test_sigma_identity_without_groups(self):
        meta, a0, a1, inst, const, s = _system()
        sigma = EqualityGraph().build_sigma(meta.permutation_columns, 4)
        assert sigma == list(range(3 * 4))

    def test_sigma_cycle(self):
        """그룹 {p₀, p₁, p₂} → σ(p₀)=p₁, σ(p₁)=p₂, σ(p₂)=p₀"""
        meta, a0, a1, inst, const, s = _system()
        n = 4
        g = EqualityGraph()
        g.add((a0, 0), (a0, 2))
        g.add((a0, 2), (inst, 1))
        sigma = g.build_sigma(meta.permutation_columns, n)
        # 순열 열 순서: inst(0), const(1), a0(2)
        p_inst1, p_a0_0, p_a0_2 = 0 * n + 1, 2 * n + 0, 2 * n + 2
        assert sigma[p_inst1] == p_a0_0
        assert sigma[p_a0_0] == p_a0_2
        assert sigma[p_a0_2] == p_inst1
        assert sorted(sigma) == list(range(3 * n))

    def test_duplicate_pair_keeps_permutation(self):
        meta, a0, *_ = _system()
        g = EqualityGraph()
        g.add((a0, 0), (a0, 1))
        g.add((a0, 1), (a0, 0))
        sigma = g.build_sigma(meta.permutation_columns, 4)
        assert sorted(sigma) == list(range(12))
        assert sigma[8] == 9 and sigma[9] == 8

    def test_non_permutation_column(self):
        meta, a0, a1, *_ = _system()
        g = EqualityGraph()
        g.add((a0, 0), (a1, 0))
        with pytest.raises(SynthesisError):
            g.build_sigma(meta.permutation_columns, 4)


# ─────────────────────────────────────────────────────────────────────
# Assignment
# ─────────────────────────────────────────────────────────────────────

class TestAssignment:
    def test_instance_padding(self):
        meta, a0, a1, inst, const, s = _system()
        assignment = Assignment(meta, 4, [[35]])
        assert assignment.column_values(inst) == [FR(35), FR(0), FR(0), FR(0)]

    def test_instance_arity(self):
        meta, *_ = _system()
        with pytest.raises(ValueError):
            Assignment(meta, 4, [[1], [2]])
        with pytest.raises(ValueError):
            Assignment(meta, 4, [[1, 2, 3, 4, 5]])

    def test_write_once(self):
        meta, a0, *_ = _system()
        assignment = Assignment(meta, 4)
        assignment.assign_advice(a0, 0, Value.known(1))
        with pytest.raises(SynthesisError):
            assignment.assign_advice(a0, 0, Value.known(2))

    def test_row_out_of_range(self):
        meta, a0, *_ = _system()
        assignment = Assignment(meta, 4)
        with pytest.raises(SynthesisError):
            assignment.assign_advice(a0, 4, Value.known(1))

    def test_wrong_kind(self):
        meta, a0, a1, inst, const, s = _system()
        assignment = Assignment(meta, 4)
        with pytest.raises(SynthesisError):
            assignment.assign_advice(const, 0, Value.known(1))
        with pytest.raises(SynthesisError):
            assignment.assign_fixed(a0, 0, 1)

    def test_witness_required(self):
        meta, a0, *_ = _system()
        with pytest.raises(SynthesisError):
            Assignment(meta, 4, witness_required=True).assign_advice(a0, 0, Value.unknown())
        # 구조 패스에서는 허용
        Assignment(meta, 4).assign_advice(a0, 0, Value.unknown())

    def test_copy_requires_equality(self):
        meta, a0, a1, *_ = _system()
        assignment = Assignment(meta, 4)
        with pytest.raises(SynthesisError):
            assignment.copy((a0, 0), (a1, 0))

    def test_unassigned_reads_zero(self):
        meta, a0, a1, inst, const, s = _system()
        assignment = Assignment(meta, 4)
        assert assignment.cell_value(a1, 3) == FR(0)
        assert assignment.cell_value(const, 3) == FR(0)
        assert assignment.selector_value(s, 3) == FR(0)


# ─────────────────────────────────────────────────────────────────────
# Layouter / Region
# ─────────────────────────────────────────────────────────────────────

class TestLayouter:
    def setup_method(self):
        self.meta, self.a0, self.a1, self.inst, self.const, self.s = _system()
        self.assignment = Assignment(self.meta, 8, [[7]], witness_required=True)
        self.layouter = Layouter(self.assignment, instance_arity=1)

    def test_regions_placed_back_to_back(self):
        with self.layouter.assign_region("first") as region:
            region.assign_advice("v", self.a0, 0, 1)
            region.assign_advice("w", self.a0, 1, 2)
        with self.layouter.assign_region("second") as region:
            cell = region.assign_advice("v", self.a0, 0, 3)
        assert cell.row == 2
        assert [(r.name, r.start, r.rows) for r in self.assignment.regions] == [
            ("first", 0, 2), ("second", 2, 1)]

    def test_namespace(self):
        with self.layouter.namespace("cubic"):
            with self.layouter.assign_region("mul") as region:
                region.assign_advice("v", self.a0, 0, 1)
        assert self.assignment.regions[0].name == "cubic/mul"

    def test_selector_enabled_at_absolute_row(self):
        with self.layouter.assign_region("pad") as region:
            region.assign_advice("v", self.a0, 0, 1)
        with self.layouter.assign_region("gate") as region:
            self.s.enable(region, 0)
            region.assign_advice("v", self.a0, 1, 1)
        assert self.assignment.selector_values(self.s)[:4] == [FR(0), FR(1), FR(0), FR(0)]

    def test_copy_advice(self):
        with self.layouter.assign_region("load") as region:
            x = region.assign_advice("x", self.a0, 0, 5)
        with self.layouter.assign_region("use") as region:
            y = x.copy_advice("x", region, self.a0, 0)
        assert y.value == x.value
        assert self.assignment.equality.connected(x.cell, y.cell)

    def test_constants_placed_after_regions(self):
        with self.layouter.assign_region("c1") as region:
            c1 = region.assign_advice_from_constant("c", self.a0, 0, 5)
        with self.layouter.assign_region("c2") as region:
            c2 = region.assign_advice_from_constant("c", self.a0, 0, 9)
        assert self.assignment.fixed_value(self.const, 0) == FR(0)
        self.layouter.finish()
        assert self.assignment.fixed_value(self.const, 0) == FR(5)
        assert self.assignment.fixed_value(self.const, 1) == FR(9)
        assert self.assignment.equality.connected(c1.cell, (self.const, 0))
        assert self.assignment.equality.connected(c2.cell, (self.const, 1))

    def test_constrain_instance(self):
        with self.layouter.assign_region("out") as region:
            out = region.assign_advice("out", self.a0, 0, 7)
        self.layouter.constrain_instance(out, self.inst, 0)
        assert self.assignment.equality.connected(out.cell, (self.inst, 0))

    def test_constrain_instance_row_out_of_range(self):
        with self.layouter.assign_region("out") as region:
            out = region.assign_advice("out", self.a0, 0, 7)
        with pytest.raises(SynthesisError):
            self.layouter.constrain_instance(out, self.inst, 1)

    def test_constrain_instance_wrong_column(self):
        with self.layouter.assign_region("out") as region:
            out = region.assign_advice("out", self.a0, 0, 7)
        with pytest.raises(SynthesisError):
            self.layouter.constrain_instance(out, self.a0, 0)

    def test_grid_overflow(self):
        with pytest.raises(SynthesisError):
            with self.layouter.assign_region("big") as region:
                region.assign_advice("v", self.a0, 8, 1)

    def test_unknown_value_in_prover_pass(self):
        with pytest.raises(SynthesisError, match="x"):
            with self.layouter.assign_region("load") as region:
                region.assign_advice("x", self.a0, 0, None)
