"""Tests for the equity calculator."""

import random
from unittest.mock import patch

import pytest

from poker_advisor.core.equity_calculator import (
    EquityCalculator,
    EquityResult,
    calculate_pot_odds,
    compare_hands,
    is_call_profitable,
    quick_equity_estimate,
)
from poker_advisor.core.hand_evaluator import HandEvaluator
from poker_advisor.utils.card import Card


def _cards(s: str) -> list[Card]:
    return [Card.from_str(c) for c in s.split()]


class TestEquityResult:
    def test_from_counts(self) -> None:
        result = EquityResult.from_counts(50, 0, 50)
        assert result.samples == 100
        assert result.equity == 0.5
        # 1 - 2 * sqrt(0.25 / 100)
        assert result.confidence == pytest.approx(0.9)

    def test_ties_count_half(self) -> None:
        result = EquityResult.from_counts(1, 2, 1)
        assert result.equity == 0.5
        assert result.tie_pct == 50.0

    def test_zero_samples(self) -> None:
        result = EquityResult.from_counts(0, 0, 0)
        assert result.equity == 0.0
        assert result.confidence == 0.0
        assert result.tie_pct == 0.0

    def test_certain_result_has_full_confidence(self) -> None:
        assert EquityResult.from_counts(10, 0, 0).confidence == 1.0

    def test_str(self) -> None:
        assert "Equity: 50.0%" in str(EquityResult.from_counts(50, 0, 50))


class TestCompareHands:
    def test_higher_category_wins(self) -> None:
        flush = HandEvaluator.evaluate(_cards("Ah 2h"), _cards("Kh 9h 4h 7c 8d"))
        trips = HandEvaluator.evaluate(_cards("Kc Kd"), _cards("Kh 9h 4h 7c 8d"))
        assert compare_hands(flush, trips) == 1
        assert compare_hands(trips, flush) == -1

    def test_kicker_difference_is_a_tie(self) -> None:
        # Strength carries the pair rank, not the kickers
        board = _cards("As 7c 5d 3h 2s")
        hero = HandEvaluator.evaluate(_cards("Ah Kd"), board)
        villain = HandEvaluator.evaluate(_cards("Ac Qd"), board)
        assert compare_hands(hero, villain) == 0


class TestVsRandom:
    def test_aces_preflop(self) -> None:
        result = EquityCalculator.vs_random(
            _cards("Ah As"), iterations=20_000, rng=random.Random(2024)
        )
        # AA vs a random hand is ~85%
        assert 0.80 <= result.equity <= 0.86

    def test_counts_add_up(self) -> None:
        result = EquityCalculator.vs_random(
            _cards("7h 2c"), _cards("Kd 9s 4c"), iterations=300,
            rng=random.Random(1),
        )
        assert result.wins + result.ties + result.losses == result.samples
        assert result.samples == 300
        assert 0.0 <= result.equity <= 1.0

    def test_seeded_runs_repeat(self) -> None:
        first = EquityCalculator.vs_random(
            _cards("Jh Ts"), iterations=200, rng=random.Random(7)
        )
        second = EquityCalculator.vs_random(
            _cards("Jh Ts"), iterations=200, rng=random.Random(7)
        )
        assert first == second

    def test_royal_flush_on_river_always_wins(self) -> None:
        result = EquityCalculator.vs_random(
            _cards("Ah Kh"), _cards("Qh Jh Th 2c 3d"), iterations=200,
            rng=random.Random(3),
        )
        assert result.equity == 1.0


class TestVsRange:
    def test_aces_vs_kings(self) -> None:
        result = EquityCalculator.vs_range(
            _cards("Ah As"), villain_range=["KK"], iterations=1_000,
            rng=random.Random(11),
        )
        # AA vs KK is ~82%
        assert 0.75 < result.equity < 0.90

    def test_empty_range_falls_back_to_random(self) -> None:
        result = EquityCalculator.vs_range(
            _cards("Ah As"), villain_range=[], iterations=200,
            rng=random.Random(4),
        )
        assert result.samples == 200

    def test_fully_blocked_range_falls_back_to_random(self) -> None:
        with patch.object(
            EquityCalculator, "vs_random", wraps=EquityCalculator.vs_random
        ) as vs_random:
            result = EquityCalculator.vs_range(
                _cards("Ah As"), _cards("Ad 7c 2s"), ["AA"], iterations=100,
                rng=random.Random(4),
            )
        vs_random.assert_called_once()
        assert result.samples == 100

    def test_blocked_combos_are_excluded(self) -> None:
        # Hero holds the nuts against every AK combo it does not block
        result = EquityCalculator.vs_range(
            _cards("Ah Kh"), _cards("Qh Jh Th"), ["AKo", "AKs"],
            iterations=100, rng=random.Random(5),
        )
        assert result.samples == 100
        assert result.equity == 1.0

    def test_invalid_token_raises(self) -> None:
        with pytest.raises(ValueError):
            EquityCalculator.vs_range(_cards("Ah As"), villain_range=["ZZ"])


class TestParallelEquity:
    def test_small_runs_stay_in_process(self) -> None:
        with patch(
            "poker_advisor.core.equity_calculator.ProcessPoolExecutor"
        ) as pool:
            result = EquityCalculator.parallel_equity(
                _cards("Ah As"), iterations=100, rng=random.Random(1)
            )
        pool.assert_not_called()
        assert result.samples == 100

    def test_small_runs_use_range(self) -> None:
        result = EquityCalculator.parallel_equity(
            _cards("Ah As"), villain_range=["KK"], iterations=100,
            rng=random.Random(1),
        )
        assert result.samples == 100

    def test_split_across_workers(self) -> None:
        result = EquityCalculator.parallel_equity(
            _cards("Ah As"), villain_range=["KK", "QQ"], iterations=600,
            max_workers=2, rng=random.Random(8),
        )
        assert result.samples == 600
        assert 0.70 < result.equity < 0.95

    def test_seeded_parallel_runs_repeat(self) -> None:
        kwargs = dict(iterations=500, max_workers=2)
        first = EquityCalculator.parallel_equity(
            _cards("9h 9d"), rng=random.Random(21), **kwargs
        )
        second = EquityCalculator.parallel_equity(
            _cards("9h 9d"), rng=random.Random(21), **kwargs
        )
        assert first == second


class TestQuickEstimate:
    def test_preflop_blends_toward_half(self) -> None:
        # Pair of aces strength 0.32, 5 cards to come
        assert quick_equity_estimate(_cards("Ah Ad")) == pytest.approx(
            0.32 * 0.6 + 0.5 * 0.4
        )

    def test_river_equals_strength(self) -> None:
        hero, board = _cards("Ah Kh"), _cards("Qh Jh Th 2c 3d")
        assert quick_equity_estimate(hero, board) == 1.0


class TestPotOdds:
    def test_pot_odds(self) -> None:
        assert calculate_pot_odds(100, 50) == pytest.approx(1 / 3)

    def test_no_bet(self) -> None:
        assert calculate_pot_odds(100, 0) == 1.0
        assert calculate_pot_odds(100, -5) == 1.0

    def test_profitable_call(self) -> None:
        analysis = is_call_profitable(0.4, 100, 50)
        assert analysis.profitable
        assert analysis.ev == pytest.approx(30.0)
        assert analysis.pot_odds == pytest.approx(1 / 3)

    def test_unprofitable_call(self) -> None:
        analysis = is_call_profitable(0.2, 100, 50)
        assert not analysis.profitable
        assert analysis.ev == pytest.approx(-10.0)
