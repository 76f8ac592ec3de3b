"""Tests for the dependency graph and its rendering."""

import pytest

from selective_testing.graph import DependencyGraph, render_graph
from selective_testing.models import TargetIdentity


# ── Helpers ───────────────────────────────────────────────────

def _t(name, project="Demo"):
    return TargetIdentity.project(f"/ws/{project}.project.json", name)


A, B, C, D = _t("A"), _t("B"), _t("C"), _t("D")


# ── Insert ────────────────────────────────────────────────────

class TestInsert:
    def test_creates_entry(self):
        graph = DependencyGraph()
        graph.insert(A, B)
        assert graph.depends_on == {A: {B}}

    def test_idempotent(self):
        once = DependencyGraph()
        once.insert(A, B)
        twice = DependencyGraph()
        twice.insert(A, B)
        twice.insert(A, B)
        assert once == twice
        assert twice.edges() == {(A, B)}

    def test_unions_into_existing_set(self):
        graph = DependencyGraph()
        graph.insert(A, B)
        graph.insert(A, C)
        assert graph.dependencies(A) == {B, C}

    def test_self_loop_ignored(self):
        graph = DependencyGraph()
        graph.insert(A, A)
        assert graph.depends_on == {}
        assert DependencyGraph({A: {A, B}}).depends_on == {A: {B}}

    def test_missing_key_means_no_dependencies(self):
        graph = DependencyGraph.from_edges([(A, B)])
        assert graph.dependencies(B) == set()
        assert graph.all_targets() == {A, B}


# ── Merge ─────────────────────────────────────────────────────

class TestMerge:
    @pytest.fixture
    def graphs(self):
        g1 = DependencyGraph.from_edges([(A, B), (B, C)])
        g2 = DependencyGraph.from_edges([(A, C), (D, A)])
        g3 = DependencyGraph.from_edges([(B, D), (A, B)])
        return g1, g2, g3

    def test_union_of_edges(self, graphs):
        g1, g2, _ = graphs
        merged = g1.merging(g2)
        assert merged.edges() == {(A, B), (B, C), (A, C), (D, A)}
        assert merged.dependencies(A) == {B, C}

    def test_commutative(self, graphs):
        g1, g2, _ = graphs
        assert g1.merging(g2) == g2.merging(g1)

    def test_associative(self, graphs):
        g1, g2, g3 = graphs
        assert g1.merging(g2).merging(g3) == g1.merging(g2.merging(g3))
        assert g1.merging(g2).merging(g3) == g1.merging(g3).merging(g2)

    def test_inputs_not_mutated(self, graphs):
        g1, g2, _ = graphs
        before = g1.edges(), g2.edges()
        merged = g1.merging(g2)
        merged.insert(C, D)
        assert (g1.edges(), g2.edges()) == before


def test_dependents_inverts_edges():
    graph = DependencyGraph.from_edges([(A, C), (B, C), (C, D)])
    assert graph.dependents() == {C: {A, B}, D: {C}}


# ── Name lookup ───────────────────────────────────────────────

class TestFindTarget:
    def test_full_description(self):
        graph = DependencyGraph.from_edges([(A, B)])
        assert graph.find_target(A.description) == A

    def test_simple_description(self):
        graph = DependencyGraph.from_edges([(A, B)])
        assert graph.find_target("Demo:B") == B

    def test_bare_name(self):
        graph = DependencyGraph.from_edges([(A, B)])
        assert graph.find_target("B") == B

    def test_no_match_returns_none(self):
        graph = DependencyGraph.from_edges([(A, B)])
        assert graph.find_target("Nope") is None

    def test_ambiguous_bare_name_is_deterministic(self):
        first = _t("Shared", project="Alpha")
        second = _t("Shared", project="Beta")
        forward = DependencyGraph.from_edges([(A, second), (B, first)])
        backward = DependencyGraph.from_edges([(B, first), (A, second)])
        assert forward.find_target("Shared") == first
        assert backward.find_target("Shared") == first
        assert forward.find_target("Beta:Shared") == second

    def test_simple_description_beats_bare_name(self):
        # A target literally named "Demo:X" would only match the bare tier
        odd = TargetIdentity.project("/ws/Aaa.project.json", "Demo:X")
        x = _t("X")
        graph = DependencyGraph.from_edges([(odd, x)])
        assert graph.find_target("Demo:X") == x

    def test_extra_targets_are_searched(self):
        lonely = _t("Lonely")
        assert DependencyGraph().find_target("Lonely", extra=[lonely]) == lonely


# ── Rendering ─────────────────────────────────────────────────

class TestRender:
    def test_tree(self):
        graph = DependencyGraph.from_edges([(A, B), (B, C), (A, D)])
        assert render_graph(graph) == "\n".join([
            "Demo:A",
            "├── Demo:B",
            "│   └── Demo:C",
            "└── Demo:D",
        ])

    def test_cycle_terminates(self):
        graph = DependencyGraph.from_edges([(A, B), (B, A)])
        text = render_graph(graph)
        assert "(cycle)" in text

    def test_empty(self):
        assert render_graph(DependencyGraph()) == "(empty graph)"

    def test_does_not_modify_graph(self):
        graph = DependencyGraph.from_edges([(A, B), (B, C)])
        before = graph.edges()
        render_graph(graph)
        assert graph.edges() == before
