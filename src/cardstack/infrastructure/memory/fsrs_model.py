"""
FSRS memory model: infrastructure adapter for the `fsrs` library.

Implements MemoryModel by replaying the card through `fsrs.Scheduler` once
per rating. Difficulty crosses the boundary rescaled: cardstack stores it
normalized to 0-1, the library works on a 1-10 scale.
"""

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fsrs import Card, Rating, Scheduler, State

from cardstack.domain.constants import (
    FSRS_DEFAULT_MAXIMUM_INTERVAL,
    FSRS_DEFAULT_RETENTION,
    FSRS_DIFFICULTY_SCALE,
    SECONDS_PER_DAY,
)
from cardstack.domain.ports import MemoryCandidate, MemoryCard, MemoryModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FsrsParams:
    """
    Attributes:
        w: Model weights; None uses the library defaults.
        request_retention: Target probability of recall at review time.
        maximum_interval: Longest interval the model may schedule, in days.
    """

    w: tuple[float, ...] | None = None
    request_retention: float = FSRS_DEFAULT_RETENTION
    maximum_interval: int = FSRS_DEFAULT_MAXIMUM_INTERVAL


class FsrsMemoryModel(MemoryModel):
    def __init__(self, params: FsrsParams | None = None):
        self.params = params or FsrsParams()
        options = {
            "desired_retention": self.params.request_retention,
            "maximum_interval": self.params.maximum_interval,
            "enable_fuzzing": False,
        }
        if self.params.w is not None:
            options["parameters"] = tuple(self.params.w)
        self._scheduler = Scheduler(**options)
        logger.debug(
            f"FSRS model ready: retention={self.params.request_retention} "
            f"maximum_interval={self.params.maximum_interval}"
        )

    def repeat(self, card: MemoryCard, now: datetime) -> Mapping[int, MemoryCandidate]:
        now = _as_utc(now)
        fsrs_card = self._to_fsrs_card(card, now)

        candidates: dict[int, MemoryCandidate] = {}
        for rating in Rating:
            reviewed, _ = self._scheduler.review_card(
                copy.deepcopy(fsrs_card), rating, review_datetime=now
            )
            scheduled_days = (reviewed.due - now).total_seconds() / SECONDS_PER_DAY
            candidates[int(rating)] = MemoryCandidate(
                stability=float(reviewed.stability),
                difficulty=float(reviewed.difficulty) / FSRS_DIFFICULTY_SCALE,
                scheduled_days=max(0.0, scheduled_days),
            )
        return candidates

    def _to_fsrs_card(self, card: MemoryCard, now: datetime) -> Card:
        if card.state == 0 or card.stability <= 0:
            return Card(due=now)

        difficulty = card.difficulty * FSRS_DIFFICULTY_SCALE
        return Card(
            state=State.Review,
            stability=card.stability,
            difficulty=min(FSRS_DIFFICULTY_SCALE, max(1.0, difficulty)),
            due=now,
            last_review=now - timedelta(days=card.elapsed_days),
        )


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
