"""Pitch-by-pitch game state machine.

A Game descriptor is resolved once against the Database into a Playable:
both lineups and starting pitchers, day-adjusted, at the game's start time.
`simulate` then plays the Playable to a final score using a generator
seeded from (game id, seed), so identical inputs replay identically and
distinct seeds are independent samples.

Runners on base are stored as lineup slots of the hitting side, not as
player objects; the Playable is never modified during a simulation.
"""

import hashlib
import logging
import math
from dataclasses import dataclass, field
from typing import Sequence, assert_never
from uuid import UUID

import numpy as np
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from blaseball.db.database import Database
from blaseball.db.models import Team
from blaseball.models.ratings import RatedPlayer
from blaseball.schedule import game_time
from blaseball.simulation.pitch import Pitch, roll, simulate_pitch
from blaseball.util import AwayHome, rescale_clamp

logger = logging.getLogger(__name__)

LINEUP_SIZE = 9
OUTS_PER_INNING = 3
REGULATION_INNINGS = 9

# Base index a runner must reach to score (0 = first base)
HOME = 3

# Hit → (min bases, max bases) for runners already on, and the batter's base
HIT_ADVANCE: dict[Pitch, tuple[int, int, int]] = {
    Pitch.SINGLE: (1, 2, 0),
    Pitch.DOUBLE: (2, 3, 1),
    Pitch.TRIPLE: (3, 3, 2),
}


class Game(BaseModel):
    """Scheduled game descriptor."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: UUID = Field(validation_alias=AliasChoices("id", "_id"))
    season: int = Field(ge=0)  # 0-based
    day: int = Field(ge=0)  # 0-based
    away_team: UUID
    home_team: UUID
    away_pitcher: UUID
    home_pitcher: UUID
    away_odds: float | None = None
    home_odds: float | None = None

    def timestamp(self) -> int:
        """Scheduled start time (epoch ms)."""
        return game_time(self.season, self.day)

    def __repr__(self) -> str:
        return (
            f"Game(id={self.id}, season={self.season + 1}, day={self.day + 1}, "
            f"away_team={self.away_team}, home_team={self.home_team})"
        )


@dataclass(frozen=True)
class Playable:
    """A game resolved to concrete, day-adjusted players."""

    game_id: UUID
    lineups: AwayHome[tuple[RatedPlayer, ...]]
    pitchers: AwayHome[RatedPlayer]


def prepare(game: Game, database: Database, timestamp: int | None = None) -> Playable | None:
    """Resolve a game's teams and players as of its start time.

    Args:
        game: Game descriptor
        database: Loaded snapshot database
        timestamp: Resolution time in epoch ms (None = game's scheduled start)

    Returns:
        Playable, or None if any team or player has no snapshot at that time
    """
    if timestamp is None:
        timestamp = game.timestamp()

    def rated(player_id: UUID) -> RatedPlayer | None:
        player = database.player_at(player_id, timestamp)
        if player is None:
            return None
        return RatedPlayer.for_day(player, game.day)

    def lineup(team: Team) -> tuple[RatedPlayer, ...] | None:
        players = []
        for player_id in team.lineup:
            player = rated(player_id)
            if player is None:
                return None
            players.append(player)
        if len(players) != LINEUP_SIZE:
            return None
        return tuple(players)

    teams = AwayHome(game.away_team, game.home_team).map_opt(
        lambda team_id: database.team_at(team_id, timestamp)
    )
    if teams is None:
        logger.debug(f"{game!r}: team missing at {timestamp}")
        return None

    lineups = teams.map_opt(lineup)
    pitchers = AwayHome(game.away_pitcher, game.home_pitcher).map_opt(rated)
    if lineups is None or pitchers is None:
        logger.debug(f"{game!r}: player missing at {timestamp}")
        return None

    return Playable(game_id=game.id, lineups=lineups, pitchers=pitchers)


@dataclass
class Score:
    """Final (or running) score of a game."""

    inning: int = 0  # 0-based
    bottom: bool = False
    runs: AwayHome[int] = field(default_factory=lambda: AwayHome(away=0, home=0))

    @property
    def away(self) -> int:
        return self.runs.away

    @property
    def home(self) -> int:
        return self.runs.home


@dataclass
class GameState:
    """Mutable state of one simulation."""

    score: Score = field(default_factory=Score)
    # Lineup slot of the hitting side's runner on first, second, third
    bases: list[int | None] = field(default_factory=lambda: [None, None, None])
    position: AwayHome[int] = field(default_factory=lambda: AwayHome(away=0, home=0))
    outs: int = 0
    balls: int = 0
    strikes: int = 0

    def is_top(self) -> bool:
        return not self.score.bottom

    def is_bottom(self) -> bool:
        return self.score.bottom

    def hitting(self, pair: AwayHome):
        return pair.away if self.is_top() else pair.home

    def fielding(self, pair: AwayHome):
        return pair.home if self.is_top() else pair.away

    def is_complete(self) -> bool:
        """Whether the game is over.

        Only checked between half-innings. From the ninth inning on, any
        lead ends the game; a tie keeps it going.
        """
        if self.score.inning < REGULATION_INNINGS - 1:
            return False
        runs = self.score.runs
        if self.is_top() and runs.home > runs.away:
            return True
        return runs.away != runs.home

    def add_runs(self, n: int) -> None:
        if self.is_top():
            self.score.runs.away += n
        else:
            self.score.runs.home += n

    def next_batter(self) -> None:
        self.balls = 0
        self.strikes = 0
        if self.is_top():
            self.position.away = (self.position.away + 1) % LINEUP_SIZE
        else:
            self.position.home = (self.position.home + 1) % LINEUP_SIZE

    def next_half_inning(self) -> None:
        self.bases = [None, None, None]
        self.outs = 0
        self.balls = 0
        self.strikes = 0
        if self.score.bottom:
            self.score.bottom = False
            self.score.inning += 1
        else:
            self.score.bottom = True

    def has_runners(self) -> bool:
        return any(slot is not None for slot in self.bases)

    def remove_lead_runner(self) -> int | None:
        """Take the runner closest to home off the bases."""
        for base in reversed(range(HOME)):
            slot = self.bases[base]
            if slot is not None:
                self.bases[base] = None
                return slot
        return None

    def walk(self, slot: int) -> int:
        """Put the batter on first, pushing only forced runners.

        Returns:
            Runs scored
        """
        runs = 0
        if self.bases[0] is not None:
            if self.bases[1] is not None:
                if self.bases[2] is not None:
                    runs = 1
                self.bases[2] = self.bases[1]
            self.bases[1] = self.bases[0]
        self.bases[0] = slot
        self.add_runs(runs)
        return runs

    def advance_runners(
        self,
        min_bases: int,
        max_bases: int,
        lineup: Sequence[RatedPlayer],
        rng: np.random.Generator,
    ) -> int:
        """Move every runner ahead by between min_bases and max_bases.

        Runners are processed from third base back to first. A runner with
        more open bases in front than min_bases rolls on baserunning to take
        the extra bases, but never passes the base claimed by the runner
        ahead of them.

        Returns:
            Runs scored
        """
        bases: list[int | None] = [None, None, None]
        runs = 0
        claimed: int | None = None  # base taken by the nearest runner ahead

        for base in reversed(range(HOME)):
            slot = self.bases[base]
            if slot is None:
                continue

            in_front = math.inf if claimed is None else claimed - base - 1
            advance = min_bases
            if in_front > min_bases:
                if roll(rng, rescale_clamp(lineup[slot].baserunning, 0.0, 0.5)):
                    advance = min(max_bases, in_front)

            target = base + advance
            if target >= HOME:
                runs += 1
            else:
                bases[target] = slot
                claimed = target

        self.bases = bases
        self.add_runs(runs)
        return runs

    def fielding_play(
        self,
        slot: int,
        lineup: Sequence[RatedPlayer],
        defense: Sequence[RatedPlayer],
        rng: np.random.Generator,
    ) -> None:
        """Try for a double play, then a fielder's choice, on a batted-ball out."""
        first = defense[rng.integers(0, len(defense))]
        second = defense[rng.integers(0, len(defense))]
        double_play_p = rescale_clamp(first.defense, 0.0, 0.075) + rescale_clamp(
            second.defense, 0.0, 0.075
        )
        if roll(rng, double_play_p):
            self.remove_lead_runner()
            self.outs += 1
            if self.outs < OUTS_PER_INNING:
                self.advance_runners(0, 1, lineup, rng)
            return

        defender = defense[rng.integers(0, len(defense))]
        if roll(rng, rescale_clamp(defender.defense, 0.0, 0.75)):
            self.remove_lead_runner()
            self.advance_runners(1, 1, lineup, rng)
            self.bases[0] = slot

    def apply(
        self,
        pitch: Pitch,
        slot: int,
        lineup: Sequence[RatedPlayer],
        defense: Sequence[RatedPlayer],
        rng: np.random.Generator,
    ) -> bool:
        """Apply one pitch to the state.

        Args:
            pitch: Outcome of the pitch
            slot: Batter's lineup slot
            lineup: Hitting side's lineup
            defense: Fielding side's lineup
            rng: Simulation generator

        Returns:
            True if the plate appearance is over
        """
        if pitch is Pitch.BALL:
            self.balls += 1
            if self.balls == 4:
                self.walk(slot)
                return True
            return False

        elif pitch is Pitch.STRIKE:
            self.strikes += 1
            if self.strikes == 3:
                self.outs += 1
                return True
            return False

        elif pitch is Pitch.FOUL:
            if self.strikes < 2:
                self.strikes += 1
            return False

        elif pitch is Pitch.OUT:
            self.outs += 1
            if self.outs < OUTS_PER_INNING and self.has_runners():
                self.fielding_play(slot, lineup, defense, rng)
            return True

        elif pitch is Pitch.SINGLE or pitch is Pitch.DOUBLE or pitch is Pitch.TRIPLE:
            min_bases, max_bases, batter_base = HIT_ADVANCE[pitch]
            self.advance_runners(min_bases, max_bases, lineup, rng)
            self.bases[batter_base] = slot
            return True

        elif pitch is Pitch.HOME_RUN:
            self.advance_runners(HOME, HOME, lineup, rng)
            self.add_runs(1)
            return True

        else:
            assert_never(pitch)

    def plate_appearance(
        self,
        pitcher: RatedPlayer,
        lineup: Sequence[RatedPlayer],
        defense: Sequence[RatedPlayer],
        rng: np.random.Generator,
    ) -> None:
        """Pitch to the current batter until they are out or on base."""
        slot = self.hitting(self.position)
        batter = lineup[slot]
        self.balls = 0
        self.strikes = 0
        while True:
            pitch = simulate_pitch(pitcher, batter, defense, rng)
            if self.apply(pitch, slot, lineup, defense, rng):
                break
        self.next_batter()


def make_rng(game_id: UUID, seed: int) -> np.random.Generator:
    """Generator seeded from a stable hash of (game id, seed)."""
    digest = hashlib.blake2b(f"{game_id}:{seed}".encode("utf-8"), digest_size=16).digest()
    return np.random.default_rng(int.from_bytes(digest, "big"))


def simulate(playable: Playable, seed: int) -> Score:
    """Play one game to completion.

    Safe to call concurrently on the same Playable: all mutable state,
    including the generator, belongs to this call.

    Args:
        playable: Resolved game
        seed: Trial seed

    Returns:
        Final Score
    """
    rng = make_rng(playable.game_id, seed)
    state = GameState()

    while not state.is_complete():
        pitcher = state.fielding(playable.pitchers)
        defense = state.fielding(playable.lineups)
        lineup = state.hitting(playable.lineups)

        while state.outs < OUTS_PER_INNING:
            state.plate_appearance(pitcher, lineup, defense, rng)

        state.next_half_inning()

    logger.debug(
        f"Game {playable.game_id} seed {seed}: "
        f"away {state.score.away} - home {state.score.home} "
        f"(ended before inning {state.score.inning + 1})"
    )
    return state.score
