"""Tests for spot analysis and action grading."""

import random
from unittest.mock import patch

import pytest

from poker_advisor.core.equity_calculator import EquityCalculator
from poker_advisor.interface.trainer import (
    BET_SIZE_OPTIONS,
    Betting,
    TrainerStats,
    analyze_spot,
    deal_betting,
    grade_action,
    grade_preflop,
    hero_investment,
    recommended_bet_size,
)
from poker_advisor.strategy.postflop_rules import Recommendation
from poker_advisor.utils.card import Card
from poker_advisor.utils.constants import (
    BetSizing,
    HandRanking,
    Position,
    PostflopAction,
    PreflopAction,
    Street,
    TablePosition,
)


def _cards(s: str) -> list[Card]:
    return [Card.from_str(c) for c in s.split()]


def _rec(
    action: PostflopAction,
    sizing: BetSizing | None = None,
    confidence: float = 0.8,
) -> Recommendation:
    return Recommendation(action, sizing, confidence, "Because.")


class TestRecommendedBetSize:
    def test_mapping(self) -> None:
        assert recommended_bet_size(BetSizing.SMALL) == 33
        assert recommended_bet_size(BetSizing.MEDIUM) == 50
        assert recommended_bet_size(BetSizing.LARGE) == 100
        assert recommended_bet_size(None) == 50

    def test_options(self) -> None:
        assert BET_SIZE_OPTIONS == (33, 50, 75, 100, 150)


class TestGradeAction:
    def test_matching_action(self) -> None:
        grade = grade_action(_rec(PostflopAction.CHECK), PostflopAction.CHECK)
        assert grade.correct
        assert grade.recommended_size is None

    def test_wrong_action(self) -> None:
        grade = grade_action(_rec(PostflopAction.CHECK), PostflopAction.BET, 50)
        assert not grade.correct
        assert not grade.action_correct

    def test_size_within_one_step(self) -> None:
        rec = _rec(PostflopAction.BET, BetSizing.MEDIUM)
        assert grade_action(rec, PostflopAction.BET, 75).correct
        assert grade_action(rec, PostflopAction.BET, 33).correct

    def test_size_too_far(self) -> None:
        rec = _rec(PostflopAction.BET, BetSizing.MEDIUM)
        grade = grade_action(rec, PostflopAction.BET, 150)
        assert grade.action_correct
        assert not grade.sizing_correct
        assert not grade.correct
        assert grade.recommended_size == 50
        assert "(Sizing: 50% pot recommended)" in grade.reasoning

    def test_close_spot_accepts_any_action(self) -> None:
        rec = _rec(PostflopAction.FOLD, confidence=0.55)
        grade = grade_action(rec, PostflopAction.CALL)
        assert grade.correct
        assert grade.recommended_action == PostflopAction.FOLD

    def test_close_spot_still_checks_sizing(self) -> None:
        rec = _rec(PostflopAction.BET, BetSizing.SMALL, confidence=0.4)
        grade = grade_action(rec, PostflopAction.BET, 150)
        assert not grade.correct

    def test_raise_without_size(self) -> None:
        rec = _rec(PostflopAction.RAISE, BetSizing.LARGE)
        assert grade_action(rec, PostflopAction.RAISE).correct

    def test_invalid_size_raises(self) -> None:
        with pytest.raises(ValueError):
            grade_action(_rec(PostflopAction.BET), PostflopAction.BET, 40)


class TestTrainerStats:
    def test_empty(self) -> None:
        stats = TrainerStats()
        assert stats.accuracy == 0.0
        assert str(stats) == "0/0 (0%)"

    def test_record(self) -> None:
        stats = TrainerStats()
        rec = _rec(PostflopAction.CHECK)
        stats.record(grade_action(rec, PostflopAction.CHECK))
        stats.record(grade_action(rec, PostflopAction.BET, 50))
        assert stats.correct == 1
        assert stats.total == 2
        assert str(stats) == "1/2 (50%)"


class TestAnalyzeSpot:
    def test_nut_hand_on_wet_flop(self) -> None:
        analysis = analyze_spot(
            _cards("Ah Kh"), _cards("Qh Jh Th"), Position.IP, Street.FLOP, False
        )
        assert analysis.evaluation.rank == HandRanking.ROYAL_FLUSH
        assert analysis.texture.is_monotone
        assert analysis.recommendation.action == PostflopAction.BET
        assert analysis.recommendation.sizing == BetSizing.LARGE
        # Strength 1.0 with two cards to come
        assert analysis.equity == pytest.approx(0.92)
        assert analysis.call is None

    def test_call_analysis_when_facing_bet(self) -> None:
        analysis = analyze_spot(
            _cards("6h 6d"), _cards("Kc 9s 2d"), Position.OOP, Street.FLOP, True,
            pot_size=100, to_call=50,
        )
        assert analysis.call is not None
        assert analysis.call.pot_odds == pytest.approx(1 / 3)

    def test_monte_carlo_equity(self) -> None:
        analysis = analyze_spot(
            _cards("Ah Kh"), _cards("Qh Jh Th"), Position.IP, Street.FLOP, False,
            equity_iterations=100, rng=random.Random(2),
        )
        assert analysis.equity == 1.0
        assert not analysis.vs_range

    def test_equity_against_range(self) -> None:
        # Top set against overpairs and big aces
        analysis = analyze_spot(
            _cards("Kh Kd"), _cards("Ks 7c 2d"), Position.OOP, Street.FLOP, False,
            equity_iterations=200, villain_range=["QQ+", "AK"],
            rng=random.Random(5),
        )
        assert analysis.vs_range
        assert analysis.equity > 0.85

    def test_settings_reach_simulation(self) -> None:
        with patch(
            "poker_advisor.interface.trainer.EquityCalculator.parallel_equity",
            wraps=EquityCalculator.parallel_equity,
        ) as sim:
            analyze_spot(
                _cards("Ah Kh"), _cards("Qh Jh Th"), Position.IP, Street.FLOP,
                False, equity_iterations=50, villain_range=("JJ+",),
                max_workers=3, parallel_threshold=2000,
            )
        args, kwargs = sim.call_args
        assert args[2] == ["JJ+"]
        assert args[3] == 50
        assert kwargs["max_workers"] == 3
        assert kwargs["parallel_threshold"] == 2000

    def test_quick_estimate_skips_simulation(self) -> None:
        with patch(
            "poker_advisor.interface.trainer.EquityCalculator.parallel_equity"
        ) as sim:
            analysis = analyze_spot(
                _cards("Ah Kh"), _cards("Qh Jh Th"), Position.IP, Street.FLOP,
                False, villain_range=("JJ+",),
            )
        sim.assert_not_called()
        assert not analysis.vs_range


class TestBetting:
    def test_new_hand_pot(self) -> None:
        rng = random.Random(6)
        for _ in range(20):
            betting = deal_betting(rng)
            assert betting.pot_size in (50, 100, 150, 200)
            if betting.facing_bet:
                assert 0 < betting.to_call <= betting.pot_size
            else:
                assert betting.to_call == 0

    def test_keeps_running_pot(self) -> None:
        assert deal_betting(random.Random(1), pot_size=275).pot_size == 275

    def test_hero_investment(self) -> None:
        betting = Betting(pot_size=100, facing_bet=True, to_call=50)
        assert hero_investment(PostflopAction.CALL, betting) == 50
        assert hero_investment(PostflopAction.RAISE, betting, 100) == 150
        assert hero_investment(PostflopAction.FOLD, betting) == 0
        unopened = Betting(pot_size=100, facing_bet=False)
        assert hero_investment(PostflopAction.BET, unopened, 75) == 75
        assert hero_investment(PostflopAction.CHECK, unopened) == 0


class TestGradePreflop:
    def test_always_open(self) -> None:
        grade = grade_preflop(TablePosition.UTG, "AA", PreflopAction.RAISE)
        assert grade.correct
        assert grade.optimal
        assert grade.raise_frequency == 1.0

    def test_folding_an_always_open_hand(self) -> None:
        grade = grade_preflop(TablePosition.UTG, "AA", PreflopAction.FOLD)
        assert not grade.correct
        assert not grade.optimal

    def test_mixed_hand_accepts_both(self) -> None:
        # UTG opens A5s three times in four
        raised = grade_preflop(TablePosition.UTG, "A5s", PreflopAction.RAISE)
        folded = grade_preflop(TablePosition.UTG, "A5s", PreflopAction.FOLD)
        assert raised.correct and raised.optimal
        assert folded.correct and not folded.optimal
        assert folded.raise_frequency == 0.75

    def test_trash_is_a_fold(self) -> None:
        grade = grade_preflop(TablePosition.UTG, "72o", PreflopAction.FOLD)
        assert grade.correct
        assert grade.optimal
        assert grade.raise_frequency == 0.0

    def test_counts_in_stats(self) -> None:
        stats = TrainerStats()
        stats.record(grade_preflop(TablePosition.BTN, "KK", PreflopAction.RAISE))
        stats.record(grade_preflop(TablePosition.BTN, "KK", PreflopAction.FOLD))
        assert str(stats) == "1/2 (50%)"
