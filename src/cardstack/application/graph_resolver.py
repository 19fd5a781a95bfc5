"""
Graph resolver for subject prerequisites.

Builds the prerequisite graph from `data["required_subjects"]` and provides
diagnostics (missing prerequisites, cycles) and ordering utilities.
"""

import logging
from collections.abc import Iterable
from graphlib import CycleError, TopologicalSorter

from cardstack.domain.graph import PrerequisiteGraph
from cardstack.domain.models import Subject

logger = logging.getLogger(__name__)


def build_prerequisite_graph(subjects: Iterable[Subject]) -> PrerequisiteGraph:
    graph = PrerequisiteGraph()
    for subject in subjects:
        graph.add_node(subject)
        for prereq_id in subject.required_subjects:
            graph.add_requires(subject.id, prereq_id)
    return graph


def missing_prerequisites(graph: PrerequisiteGraph) -> dict[str, list[str]]:
    """
    Map each subject to the prerequisites it names that are not in the graph.

    Such subjects can never become learnable under prerequisite gating.
    """
    missing: dict[str, list[str]] = {}
    for subject_id in graph.nodes:
        absent = [p for p in graph.get_prerequisites(subject_id) if p not in graph.nodes]
        if absent:
            missing[subject_id] = absent
    return missing


def detect_cycles(graph: PrerequisiteGraph) -> list[list[str]]:
    """
    Find every prerequisite cycle among known subjects.

    Walks "requires" edges depth-first; each back edge closes one cycle,
    reported as a path that repeats its first id at the end
    (`["a", "b", "a"]`). A cycle is reported once however many subjects
    lead into it. Returns an empty list when the graph is acyclic.
    """
    cycles: list[list[str]] = []
    reported: set[frozenset[str]] = set()
    finished: set[str] = set()

    for root in graph.nodes:
        if root in finished:
            continue
        path = [root]
        on_path = {root}
        frontier = [iter(_known_prerequisites(graph, root))]
        while frontier:
            prereq_id = next(frontier[-1], None)
            if prereq_id is None:
                frontier.pop()
                done = path.pop()
                on_path.discard(done)
                finished.add(done)
            elif prereq_id in on_path:
                cycle = path[path.index(prereq_id) :]
                if frozenset(cycle) not in reported:
                    reported.add(frozenset(cycle))
                    cycles.append(cycle + [prereq_id])
            elif prereq_id not in finished:
                path.append(prereq_id)
                on_path.add(prereq_id)
                frontier.append(iter(_known_prerequisites(graph, prereq_id)))

    return cycles


def _known_prerequisites(graph: PrerequisiteGraph, subject_id: str) -> list[str]:
    return [p for p in graph.get_prerequisites(subject_id) if p in graph.nodes]


def topological_order(graph: PrerequisiteGraph, subject_ids: Iterable[str]) -> list[str]:
    """
    Order a subset of subjects so prerequisites come before dependents.

    On a cycle the given order is kept and a warning is logged.
    """
    requested = [sid for sid in subject_ids if sid in graph.nodes]
    valid_ids = set(requested)

    sorter = TopologicalSorter[str]()
    for subject_id in requested:
        prereqs = [p for p in graph.get_prerequisites(subject_id) if p in valid_ids]
        sorter.add(subject_id, *prereqs)

    try:
        return list(sorter.static_order())
    except CycleError:
        logger.warning("Cycle detected in subject prerequisites, keeping the given order")
        return requested
