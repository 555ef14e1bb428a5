"""Interactive preflop opening drill.

Deals a hand from a seat's opening range and asks whether to raise first
in or fold. The answer is graded against the range: any action the range
plays at some frequency counts as correct. The range view prints the
seat's 13x13 grid with the share of hands it opens.

Usage:
    python -m poker_advisor.interface.preflop_coach

Example session:
    ==================================================
      PREFLOP COACH
    ==================================================

      1. Drill hand
      2. View range
      3. Session stats
      4. Quit
      > [4]: 1
      Position (UTG/HJ/CO/BTN/SB/BB) [CO]: UTG

    -- UTG --
      Hand:       A5s
      Action (raise/fold) [fold]: raise

      Correct!  Best play.  Raise 75%  |  Fold 25%
"""

from __future__ import annotations

import logging
import random

from poker_advisor.interface.postflop_coach import _DIVIDER, _prompt
from poker_advisor.interface.trainer import PreflopGrade, TrainerStats, grade_preflop
from poker_advisor.strategy.preflop_ranges import (
    ALL_HANDS,
    random_playable_hand,
    range_matrix,
    range_percentage,
)
from poker_advisor.utils.config import AdvisorConfig, load_config, make_rng
from poker_advisor.utils.constants import PreflopAction, TablePosition

logger = logging.getLogger("poker_advisor.coach")

_DRILL_ACTIONS = (PreflopAction.RAISE, PreflopAction.FOLD)


def _cell_mark(frequency: float) -> str:
    if frequency >= 1.0:
        return "#"
    if frequency >= 0.5:
        return "+"
    if frequency > 0.0:
        return "-"
    return " "


def _ask_table_position(rng: random.Random) -> TablePosition:
    default = rng.choice(list(TablePosition))
    choices = "/".join(p.value for p in TablePosition)
    while True:
        raw = _prompt(f"Position ({choices})", default.value).upper()
        try:
            return TablePosition(raw)
        except ValueError:
            print("    Invalid position.")


def _ask_preflop_action() -> PreflopAction:
    choices = "/".join(a.value.lower() for a in _DRILL_ACTIONS)
    while True:
        raw = _prompt(f"Action ({choices})", "fold")
        try:
            action = PreflopAction(raw.capitalize())
        except ValueError:
            print(f"    Unknown action '{raw}'.")
            continue
        if action not in _DRILL_ACTIONS:
            print(f"    You can't {raw} here, nobody has opened.")
            continue
        return action


def print_range(position: TablePosition) -> None:
    """Print the opening grid for ``position`` and the share it opens."""
    grid = range_matrix(position)
    print()
    print(f"-- {position} opening range: {range_percentage(position):.1f}% of hands --")
    for i in range(13):
        cells = (
            f"{ALL_HANDS[i * 13 + j]:<3}{_cell_mark(grid[i, j])}"
            for j in range(13)
        )
        print("  " + " ".join(cells))
    print("  # always  + half or more  - less than half  (blank) fold")


def _print_grade(grade: PreflopGrade) -> None:
    print()
    verdict = "Correct!" if grade.correct else "Wrong."
    best = "  Best play." if grade.optimal else ""
    raise_pct = f"{grade.raise_frequency:.0%}"
    fold_pct = f"{1.0 - grade.raise_frequency:.0%}"
    print(f"  {verdict}{best}  Raise {raise_pct}  |  Fold {fold_pct}")


def _drill_hand(rng: random.Random, stats: TrainerStats) -> None:
    position = _ask_table_position(rng)
    hand = random_playable_hand(position, rng)

    print()
    print(f"-- {position} --")
    print(f"  Hand:       {hand}")

    action = _ask_preflop_action()
    grade = grade_preflop(position, hand, action)
    stats.record(grade)
    logger.debug(
        "%s %s: %s correct=%s optimal=%s",
        position, hand, action, grade.correct, grade.optimal,
    )
    _print_grade(grade)


def _view_range(rng: random.Random) -> None:
    print_range(_ask_table_position(rng))


def run(config: AdvisorConfig | None = None) -> None:
    """Main entry point for the preflop coach."""
    config = config or load_config()
    logging.basicConfig(level=config.log_level)
    rng = make_rng(config)
    stats = TrainerStats()

    print()
    print(_DIVIDER)
    print("  PREFLOP COACH")
    print(_DIVIDER)

    while True:
        print()
        print("  1. Drill hand")
        print("  2. View range")
        print("  3. Session stats")
        print("  4. Quit")
        choice = _prompt(">", "4")

        if choice == "1":
            _drill_hand(rng, stats)
        elif choice == "2":
            _view_range(rng)
        elif choice == "3":
            print(f"  Score: {stats}")
        elif choice == "4":
            print(f"  Session score: {stats}")
            break


if __name__ == "__main__":
    run()
