from datetime import datetime, timedelta, timezone

import pytest

from cardstack.application.utils import clock
from cardstack.domain.models import Subject


class FrozenClock:
    """Controllable stand-in for `clock.utcnow`."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def frozen_clock(monkeypatch):
    """Freezes cardstack's clock at noon UTC on a fixed day."""
    fake = FrozenClock(datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc))
    monkeypatch.setattr(clock, "utcnow", fake)
    return fake


@pytest.fixture
def subject():
    return Subject(
        id="kanji-one",
        learn_cards=["meaning"],
        quiz_cards=["meaning", "reading"],
        data={"level": 1, "position": 0, "srs_id": 1},
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keeps SessionSettings from reading the developer's env or config files."""
    import cardstack.application.config as config

    monkeypatch.setattr(config, "CONFIG_FILES", [tmp_path / "missing.toml"])
    for name in (
        "LEARN_LIMIT",
        "REVIEW_LIMIT",
        "SESSION_SIZE",
        "CARD_SORT_METHOD",
        "CARD_ORDER",
        "ALLOW_REDOS",
    ):
        monkeypatch.delenv(f"CARDSTACK_{name}", raising=False)
    return tmp_path
