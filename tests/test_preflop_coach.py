"""Tests for the interactive preflop coach."""

from unittest.mock import patch

from poker_advisor.interface.preflop_coach import (
    _ask_preflop_action,
    print_range,
    run,
)
from poker_advisor.strategy.preflop_ranges import range_percentage
from poker_advisor.utils.config import AdvisorConfig
from poker_advisor.utils.constants import PreflopAction, TablePosition

_CONFIG = AdvisorConfig(seed=3)


def _run(inputs: list[str], hand: str = "A5s") -> None:
    with patch("builtins.input", side_effect=inputs), patch(
        "poker_advisor.interface.preflop_coach.random_playable_hand",
        return_value=hand,
    ):
        run(_CONFIG)


class TestAskPreflopAction:
    def test_default_is_fold(self) -> None:
        with patch("builtins.input", side_effect=[""]):
            assert _ask_preflop_action() == PreflopAction.FOLD

    def test_case_insensitive(self) -> None:
        with patch("builtins.input", side_effect=["RAISE"]):
            assert _ask_preflop_action() == PreflopAction.RAISE

    def test_call_is_not_offered(self, capsys) -> None:
        with patch("builtins.input", side_effect=["call", "limp", "raise"]):
            assert _ask_preflop_action() == PreflopAction.RAISE
        out = capsys.readouterr().out
        assert "You can't call here" in out
        assert "Unknown action 'limp'." in out


class TestPrintRange:
    def test_grid_and_percentage(self, capsys) -> None:
        print_range(TablePosition.UTG)
        out = capsys.readouterr().out
        assert f"{range_percentage(TablePosition.UTG):.1f}% of hands" in out
        assert "AA #" in out
        assert "A5s+" in out
        assert "A8s-" in out
        assert "72o " in out
        # Header, 13 rows and the legend
        assert len(out.strip().splitlines()) == 15


class TestRun:
    def test_quit(self, capsys) -> None:
        with patch("builtins.input", side_effect=["4"]):
            run(_CONFIG)
        out = capsys.readouterr().out
        assert "PREFLOP COACH" in out
        assert "Session score: 0/0 (0%)" in out

    def test_eof_quits(self, capsys) -> None:
        with patch("builtins.input", side_effect=EOFError):
            run(_CONFIG)
        assert "Session score" in capsys.readouterr().out

    def test_raise_mixed_hand_is_best(self, capsys) -> None:
        _run(["1", "UTG", "raise", "4"])
        out = capsys.readouterr().out
        assert "-- UTG --" in out
        assert "Hand:       A5s" in out
        assert "Correct!  Best play.  Raise 75%  |  Fold 25%" in out
        assert "Session score: 1/1 (100%)" in out

    def test_fold_mixed_hand_is_correct_not_best(self, capsys) -> None:
        _run(["1", "UTG", "fold", "4"])
        out = capsys.readouterr().out
        assert "Correct!  Raise 75%" in out
        assert "Best play." not in out
        assert "Session score: 1/1 (100%)" in out

    def test_folding_premium_is_wrong(self, capsys) -> None:
        _run(["1", "btn", "fold", "3", "4"], hand="AA")
        out = capsys.readouterr().out
        assert "-- BTN --" in out
        assert "Wrong.  Raise 100%  |  Fold 0%" in out
        assert "Score: 0/1 (0%)" in out

    def test_bad_position_reprompts(self, capsys) -> None:
        _run(["1", "MP", "CO", "raise", "4"], hand="AKs")
        out = capsys.readouterr().out
        assert "Invalid position." in out
        assert "-- CO --" in out

    def test_view_range(self, capsys) -> None:
        _run(["2", "BB", "4"])
        out = capsys.readouterr().out
        assert "-- BB opening range:" in out
        assert "Session score: 0/0 (0%)" in out

    def test_drill_deals_from_chosen_seat(self) -> None:
        with patch("builtins.input", side_effect=["1", "SB", "raise", "4"]), patch(
            "poker_advisor.interface.preflop_coach.random_playable_hand",
            return_value="KK",
        ) as dealt:
            run(_CONFIG)
        assert dealt.call_args.args[0] == TablePosition.SB
