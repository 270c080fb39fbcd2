"""Unit tests for the single-pitch outcome model."""

import math
from collections import Counter

import numpy as np
import pytest

from blaseball.models.ratings import RatedPlayer
from blaseball.simulation.pitch import Pitch, simulate_pitch
from blaseball.util import rescale_clamp


@pytest.fixture
def matchup(make_player):
    """Average pitcher, batter and defense (every rating 0.5)."""
    pitcher = RatedPlayer.from_player(make_player(name="Pitcher"))
    batter = RatedPlayer.from_player(make_player(name="Batter"))
    defense = tuple(RatedPlayer.from_player(make_player(name=f"Fielder {i}")) for i in range(9))
    return pitcher, batter, defense


# ========== rescale_clamp ==========


@pytest.mark.parametrize(
    "x, low, high, expected",
    [
        (0.0, 0.1, 0.9, 0.1),
        (0.5, 0.1, 0.9, 0.5),
        (1.1, 0.1, 0.9, 0.98),
        (0.5, 0.1, 0.5, 0.3),
        (2.0, 0.2, 0.8, 1.0),
        (-1.0, 0.2, 0.8, 0.0),
    ],
)
def test_rescale_clamp(x, low, high, expected):
    assert rescale_clamp(x, low, high) == pytest.approx(expected)


def test_rescale_clamp_requires_ordered_bounds():
    with pytest.raises(ValueError):
        rescale_clamp(0.5, 0.4, 0.4)
    with pytest.raises(ValueError):
        rescale_clamp(0.5, 0.6, 0.2)


def test_rescale_clamp_nan_is_zero():
    """Undefined composite scores clamp to 0."""
    assert rescale_clamp(math.nan, 0.2, 0.6) == 0.0


# ========== Decision sequence ==========


@pytest.mark.parametrize(
    "draws, expected",
    [
        # in zone, no swing
        ([0.0, 0.99], Pitch.STRIKE),
        # out of zone, no swing
        ([0.99, 0.99], Pitch.BALL),
        # in zone, swing, miss
        ([0.0, 0.0, 0.99], Pitch.STRIKE),
        # contact, foul
        ([0.0, 0.0, 0.0, 0.0], Pitch.FOUL),
        # fair, home run
        ([0.0, 0.0, 0.0, 0.5, 0.0], Pitch.HOME_RUN),
        # in play, fielded
        ([0.0, 0.0, 0.0, 0.5, 0.5, 0.0], Pitch.OUT),
        # in play, single
        ([0.0, 0.0, 0.0, 0.5, 0.5, 0.99, 0.0], Pitch.SINGLE),
        # in play, triple
        ([0.0, 0.0, 0.0, 0.5, 0.5, 0.99, 0.99, 0.0], Pitch.TRIPLE),
        # in play, double
        ([0.0, 0.0, 0.0, 0.5, 0.5, 0.99, 0.99, 0.99], Pitch.DOUBLE),
    ],
)
def test_decision_sequence(matchup, scripted_rng, draws, expected):
    """Each step consumes exactly one draw and stops at the first success."""
    pitcher, batter, defense = matchup
    rng = scripted_rng(draws=draws)

    assert simulate_pitch(pitcher, batter, defense, rng) is expected
    assert rng.draws == []


def test_out_of_zone_swing_rarely_connects(matchup, scripted_rng):
    """Chasing a ball uses the low out-of-zone contact baseline."""
    pitcher, batter, defense = matchup
    # out of zone (0.99), swing (0.1 < 0.275), contact p = 0.025 → 0.1 misses
    rng = scripted_rng(draws=[0.99, 0.1, 0.1])

    assert simulate_pitch(pitcher, batter, defense, rng) is Pitch.STRIKE


def test_fielding_uses_chosen_defender(make_player, matchup, scripted_rng):
    """The randomly picked defender's defense decides the out roll."""
    pitcher, batter, defense = matchup
    glove = RatedPlayer.from_player(
        make_player(
            name="Glove",
            omniscience=1.0,
            tenaciousness=1.0,
            watchfulness=1.0,
            anticapitalism=1.0,
            chasiness=1.0,
        )
    )
    defense = defense[:4] + (glove,) + defense[5:]
    # out p with glove = 0.6 + 0.1 = 0.7; average fielder ≈ 0.546
    draws = [0.0, 0.0, 0.0, 0.5, 0.5, 0.65]

    assert simulate_pitch(pitcher, batter, defense, scripted_rng(draws=list(draws), picks=[4])) is Pitch.OUT
    assert simulate_pitch(pitcher, batter, defense, scripted_rng(draws=list(draws) + [0.99, 0.99], picks=[0])) is Pitch.DOUBLE


def test_divine_batter_homers_more(make_player, matchup):
    """Higher divinity raises the home run rate."""
    pitcher, _, defense = matchup
    mortal = RatedPlayer.from_player(make_player(divinity=0.0))
    divine = RatedPlayer.from_player(make_player(divinity=1.0))
    rng = np.random.default_rng(7)

    mortal_hr = sum(simulate_pitch(pitcher, mortal, defense, rng) is Pitch.HOME_RUN for _ in range(5000))
    divine_hr = sum(simulate_pitch(pitcher, divine, defense, rng) is Pitch.HOME_RUN for _ in range(5000))

    assert mortal_hr == 0
    assert divine_hr > 0


def test_outcome_mix_with_real_generator(matchup):
    """With a real generator every outcome appears and the mix is plausible."""
    pitcher, batter, defense = matchup
    rng = np.random.default_rng(2020)

    counts = Counter(simulate_pitch(pitcher, batter, defense, rng) for _ in range(20_000))

    assert set(counts) == set(Pitch)
    assert counts[Pitch.BALL] > counts[Pitch.HOME_RUN]
    assert counts[Pitch.SINGLE] > counts[Pitch.TRIPLE]


def test_same_seed_same_pitches(matchup):
    pitcher, batter, defense = matchup
    rng_a = np.random.default_rng(3)
    rng_b = np.random.default_rng(3)
    first = [simulate_pitch(pitcher, batter, defense, rng_a) for _ in range(200)]
    second = [simulate_pitch(pitcher, batter, defense, rng_b) for _ in range(200)]

    assert first == second
