"""
YAML deck loader.

A deck file lists the static subjects of a deck:

    subjects:
      - id: kanji-one
        learn_cards: [meaning]
        quiz_cards: [meaning, reading]
        data: {level: 1, position: 0, required_subjects: [radical-one]}
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml  # type: ignore
from pydantic import BaseModel, Field, ValidationError, field_validator

from cardstack.application.graph_resolver import (
    build_prerequisite_graph,
    detect_cycles,
    missing_prerequisites,
)
from cardstack.domain.errors import DeckFormatError
from cardstack.domain.models import Subject

logger = logging.getLogger(__name__)


class SubjectSpec(BaseModel):
    id: str = Field(min_length=1)
    learn_cards: list[str] = Field(default_factory=list)
    quiz_cards: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)
    hidden_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        # YAML turns bare numeric ids into ints
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def to_subject(self) -> Subject:
        return Subject(
            id=self.id,
            learn_cards=tuple(self.learn_cards),
            quiz_cards=tuple(self.quiz_cards),
            data=self.data,
            hidden_at=self.hidden_at,
        )


class DeckSpec(BaseModel):
    subjects: list[SubjectSpec] = Field(default_factory=list)

    @field_validator("subjects")
    @classmethod
    def unique_ids(cls, v: list[SubjectSpec]) -> list[SubjectSpec]:
        seen: set[str] = set()
        for spec in v:
            if spec.id in seen:
                raise ValueError(f"duplicate subject id: {spec.id}")
            seen.add(spec.id)
        return v


@dataclass
class DeckLoadResult:
    """Result of loading a deck."""

    subjects: list[Subject]
    missing_prereqs: dict[str, list[str]] = field(default_factory=dict)
    cycles: list[list[str]] = field(default_factory=list)


def parse_deck(text: str, source: str = "<string>") -> DeckLoadResult:
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DeckFormatError(f"{source}: invalid YAML: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise DeckFormatError(f"{source}: expected a mapping with a 'subjects' list")

    try:
        deck = DeckSpec.model_validate(raw)
    except ValidationError as e:
        raise DeckFormatError(f"{source}: {e}") from e

    subjects = [spec.to_subject() for spec in deck.subjects]
    graph = build_prerequisite_graph(subjects)
    missing = missing_prerequisites(graph)
    cycles = detect_cycles(graph)

    for subject_id, absent in missing.items():
        logger.warning(f"{source}: {subject_id} requires unknown subjects {absent}")
    for cycle in cycles:
        logger.warning(f"{source}: prerequisite cycle {' -> '.join(cycle)}")

    logger.debug(f"{source}: loaded {len(subjects)} subjects")
    return DeckLoadResult(subjects=subjects, missing_prereqs=missing, cycles=cycles)


def load_deck(path: Path) -> DeckLoadResult:
    """
    Load and validate a YAML deck file.

    Raises:
        DeckFormatError: The file is not valid YAML or does not match the deck schema.
    """
    text = path.read_text(encoding="utf-8")
    return parse_deck(text, source=str(path))
