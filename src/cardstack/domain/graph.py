"""Prerequisite graph between subjects."""

from collections import defaultdict
from dataclasses import dataclass, field

from .models import Subject


@dataclass
class PrerequisiteGraph:
    """
    Directed "requires" edges: `requires[a]` lists the subjects `a` depends on.
    """

    nodes: dict[str, Subject] = field(default_factory=dict)
    requires: dict[str, list[str]] = field(default_factory=lambda: defaultdict(list))
    required_by: dict[str, list[str]] = field(default_factory=lambda: defaultdict(list))

    def add_node(self, subject: Subject) -> None:
        self.nodes[subject.id] = subject

    def add_requires(self, subject_id: str, prereq_id: str) -> None:
        if prereq_id not in self.requires[subject_id]:
            self.requires[subject_id].append(prereq_id)
            self.required_by[prereq_id].append(subject_id)

    def get_prerequisites(self, subject_id: str) -> list[str]:
        return list(self.requires.get(subject_id, []))

    def get_dependents(self, subject_id: str) -> list[str]:
        return list(self.required_by.get(subject_id, []))
