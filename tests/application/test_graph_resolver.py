"""Tests for the subject prerequisite graph."""

import logging

from cardstack.application.graph_resolver import (
    build_prerequisite_graph,
    detect_cycles,
    missing_prerequisites,
    topological_order,
)
from cardstack.domain.graph import PrerequisiteGraph
from cardstack.domain.models import Subject


def make_subject(subject_id, *required):
    return Subject(id=subject_id, data={"required_subjects": list(required)})


class TestPrerequisiteGraph:
    def test_add_requires(self):
        graph = PrerequisiteGraph()
        graph.add_node(make_subject("a"))
        graph.add_node(make_subject("b"))
        graph.add_requires("a", "b")
        graph.add_requires("a", "b")

        assert graph.get_prerequisites("a") == ["b"]
        assert graph.get_dependents("b") == ["a"]
        assert graph.get_prerequisites("b") == []


def test_build_from_subjects():
    graph = build_prerequisite_graph([make_subject("a"), make_subject("b", "a")])
    assert set(graph.nodes) == {"a", "b"}
    assert graph.get_prerequisites("b") == ["a"]
    assert graph.get_dependents("a") == ["b"]


def test_missing_prerequisites():
    graph = build_prerequisite_graph([make_subject("a", "ghost", "b"), make_subject("b")])
    assert missing_prerequisites(graph) == {"a": ["ghost"]}


class TestCycles:
    def test_acyclic(self):
        graph = build_prerequisite_graph(
            [make_subject("a"), make_subject("b", "a"), make_subject("c", "b", "a")]
        )
        assert detect_cycles(graph) == []

    def test_cycle(self):
        graph = build_prerequisite_graph(
            [make_subject("a", "c"), make_subject("b", "a"), make_subject("c", "b")]
        )
        cycles = detect_cycles(graph)
        assert len(cycles) == 1
        assert set(cycles[0]) == {"a", "b", "c"}

    def test_missing_prerequisite_is_not_a_cycle(self):
        graph = build_prerequisite_graph([make_subject("a", "ghost")])
        assert detect_cycles(graph) == []

    def test_every_cycle_is_reported(self):
        graph = build_prerequisite_graph(
            [
                make_subject("a", "b"),
                make_subject("b", "a"),
                make_subject("c", "d"),
                make_subject("d", "c"),
                make_subject("e"),
            ]
        )
        cycles = detect_cycles(graph)
        assert sorted(sorted(set(cycle)) for cycle in cycles) == [["a", "b"], ["c", "d"]]
        assert all(cycle[0] == cycle[-1] for cycle in cycles)

    def test_self_requirement(self):
        graph = build_prerequisite_graph([make_subject("a", "a")])
        assert detect_cycles(graph) == [["a", "a"]]

    def test_cycle_reached_from_many_subjects_reported_once(self):
        graph = build_prerequisite_graph(
            [
                make_subject("x", "a"),
                make_subject("y", "b"),
                make_subject("a", "b"),
                make_subject("b", "a"),
            ]
        )
        assert detect_cycles(graph) == [["a", "b", "a"]]


class TestTopologicalOrder:
    def test_prerequisites_first(self):
        graph = build_prerequisite_graph(
            [make_subject("c", "b"), make_subject("b", "a"), make_subject("a")]
        )
        assert topological_order(graph, ["c", "b", "a"]) == ["a", "b", "c"]

    def test_subset_and_unknown_ids(self):
        graph = build_prerequisite_graph(
            [make_subject("a"), make_subject("b", "a"), make_subject("c", "b")]
        )
        assert topological_order(graph, ["c", "a", "zzz"]) in (["c", "a"], ["a", "c"])

    def test_cycle_keeps_order(self, caplog):
        graph = build_prerequisite_graph([make_subject("a", "b"), make_subject("b", "a")])
        with caplog.at_level(logging.WARNING):
            assert topological_order(graph, ["b", "a"]) == ["b", "a"]
        assert "Cycle" in caplog.text
