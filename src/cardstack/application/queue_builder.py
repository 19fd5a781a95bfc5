"""
Queue builder for study sessions.

Builds the ordered card queue for a session by:
1. Applying daily caps and the optional session size to eligible subjects
2. Expanding each subject into one entry per facet (learn or quiz cards)
3. Ordering entries by the configured card sort method
"""

import logging
import random
from collections.abc import Iterable, Mapping, Sequence
from typing import NamedTuple

from cardstack.application.utils import clock
from cardstack.domain.models import Assignment, CardSortMethod, StudyMode, Subject

logger = logging.getLogger(__name__)


class PendingCard(NamedTuple):
    subject_id: str
    card_type: str


def studied_today_count(assignments: Iterable[Assignment], mode: StudyMode) -> int:
    """
    Count assignments already used against today's cap.

    Learn counts subjects started today; Quiz counts subjects reviewed today.
    """
    if mode is StudyMode.LEARN:
        return sum(1 for a in assignments if clock.is_today(a.started_at))
    return sum(1 for a in assignments if clock.is_today(a.last_studied_at))


def apply_limits(
    subjects: Sequence[Subject],
    assignments: Mapping[str, Assignment],
    mode: StudyMode,
    daily_limit: int,
    session_size: int | None = None,
) -> list[Subject]:
    """Trim an already-prioritized subject list to the remaining daily cap and session size."""
    remaining = max(0, daily_limit - studied_today_count(assignments.values(), mode))
    if session_size is not None:
        remaining = min(remaining, session_size)
    if len(subjects) > remaining:
        logger.debug(f"[queue] Capped {len(subjects)} {mode.value} subjects to {remaining}")
    return list(subjects[:remaining])


def expand_cards(subjects: Iterable[Subject], mode: StudyMode) -> list[PendingCard]:
    is_learn_mode = mode is StudyMode.LEARN
    return [
        PendingCard(subject.id, card_type)
        for subject in subjects
        for card_type in subject.cards_for(is_learn_mode)
    ]


def order_cards(
    cards: Sequence[PendingCard],
    method: CardSortMethod,
    card_order: Sequence[str] | None = None,
    rng: random.Random | None = None,
) -> list[PendingCard]:
    """
    Order queue entries.

    Paired: stable sort by subject id, so a subject's facets are adjacent.
    Sequential: by position in `card_order` (unknown types last); without an
        explicit order, group by facet type in first-seen order and shuffle
        within each group.
    Random: full shuffle.
    """
    rng = rng or random.Random()
    ordered = list(cards)

    if method is CardSortMethod.PAIRED:
        ordered.sort(key=lambda card: card.subject_id)
    elif method is CardSortMethod.SEQUENTIAL and card_order:
        rank = {card_type: i for i, card_type in enumerate(card_order)}
        ordered.sort(key=lambda card: rank.get(card.card_type, len(rank)))
    elif method is CardSortMethod.SEQUENTIAL:
        groups: dict[str, list[PendingCard]] = {}
        for card in ordered:
            groups.setdefault(card.card_type, []).append(card)
        ordered = []
        for group in groups.values():
            rng.shuffle(group)
            ordered.extend(group)
    elif method is CardSortMethod.RANDOM:
        rng.shuffle(ordered)
    else:
        raise ValueError(f"Unknown card sort method: {method!r}")

    return ordered
