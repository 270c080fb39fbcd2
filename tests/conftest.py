"""Shared fixtures: player/team builders, snapshot dumps, scripted randomness."""

import gzip
import json
import uuid

import pytest

from blaseball.config import reset_config
from blaseball.db.models import Player, Team

RATINGS = (
    "anticapitalism",
    "base_thirst",
    "buoyancy",
    "chasiness",
    "cinnamon",
    "coldness",
    "continuation",
    "divinity",
    "ground_friction",
    "indulgence",
    "laserlikeness",
    "martyrdom",
    "moxie",
    "musclitude",
    "omniscience",
    "overpowerment",
    "patheticism",
    "pressurization",
    "ruthlessness",
    "shakespearianism",
    "tenaciousness",
    "thwackability",
    "tragicness",
    "unthwackability",
    "watchfulness",
)


class ScriptedRng:
    """Stand-in for numpy.random.Generator that replays fixed draws.

    `random()` pops from `draws` and raises IndexError when they run out,
    so tests also catch unexpected extra draws. `integers()` pops from
    `picks`, defaulting to `low`.
    """

    def __init__(self, draws=(), picks=()):
        self.draws = list(draws)
        self.picks = list(picks)

    def random(self) -> float:
        return self.draws.pop(0)

    def integers(self, low: int, high: int) -> int:
        if self.picks:
            pick = self.picks.pop(0)
            assert low <= pick < high
            return pick
        return low


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Point the cache at a temp dir and drop the config singleton around each test."""
    monkeypatch.setenv("CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.delenv("DATA_DIR", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("ENV", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def make_player():
    """Build a Player with every rating at 0.5 unless overridden."""

    def _make(name: str = "Test Player", player_id: uuid.UUID | None = None, **ratings) -> Player:
        values = {rating: 0.5 for rating in RATINGS}
        values.update(ratings)
        return Player(id=player_id or uuid.uuid4(), name=name, **values)

    return _make


@pytest.fixture
def make_team():
    """Build a Team from nine lineup and five rotation player ids."""

    def _make(lineup, rotation=None, nickname: str = "Testers", team_id: uuid.UUID | None = None) -> Team:
        if rotation is None:
            rotation = [uuid.uuid4() for _ in range(5)]
        return Team(
            id=team_id or uuid.uuid4(),
            nickname=nickname,
            lineup=list(lineup),
            rotation=list(rotation),
        )

    return _make


@pytest.fixture
def write_dump():
    """Write records as a gzip-compressed newline-delimited JSON dump."""

    def _write(path, records) -> None:
        lines = []
        for record in records:
            lines.append(record if isinstance(record, str) else json.dumps(record))
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    return _write


def players_record(players, timestamp: int) -> dict:
    return {
        "endpoint": "players",
        "data": [p.model_dump(mode="json", by_alias=True) for p in players],
        "clientMeta": {"timestamp": timestamp},
    }


def teams_record(teams, timestamp: int) -> dict:
    return {
        "endpoint": "allTeams",
        "data": [t.model_dump(mode="json", by_alias=True) for t in teams],
        "clientMeta": {"timestamp": timestamp},
    }


@pytest.fixture
def records():
    """Builders for `players` and `allTeams` dump records."""
    return {"players": players_record, "teams": teams_record}


@pytest.fixture
def scripted_rng():
    return ScriptedRng
