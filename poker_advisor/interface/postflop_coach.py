"""Interactive postflop training drill.

Deals a random hand and runout, then walks the player through flop, turn
and river. At each street villain either checks or bets, the player picks
an action, and the coach grades it against the recommendation.

Usage:
    python -m poker_advisor.interface.postflop_coach

Example session:
    ==================================================
      POSTFLOP COACH
    ==================================================

      1. New hand
      2. Session stats
      3. Quit
      > [3]: 1
      Position (IP/OOP) [IP]: OOP

    -- Flop --
      Hand:       Ah Kd
      Board:      Ks 7h 2c
      Pot:        100  |  Villain bets 50
      Action (fold/call/raise) [fold]: raise
      Raise size, % pot (33/50/75/100/150) [50]: 75

      Correct!  You: raise 75%  |  Recommended: raise
      Made hand:  Pair of Kings (strength 0.31)
      Board:      K-high, Rainbow, Disconnected (safe, wetness 0.15)
      ...
"""

from __future__ import annotations

import logging
import random

from poker_advisor.interface.trainer import (
    BET_SIZE_OPTIONS,
    Betting,
    GradeResult,
    SpotAnalysis,
    TrainerStats,
    analyze_spot,
    deal_betting,
    grade_action,
    hero_investment,
)
from poker_advisor.utils.card import Card, deal_postflop_scenario
from poker_advisor.utils.config import AdvisorConfig, load_config, make_rng
from poker_advisor.utils.constants import Position, PostflopAction, Street

logger = logging.getLogger("poker_advisor.coach")

_DIVIDER = "=" * 50

_POSTFLOP_STREETS = (Street.FLOP, Street.TURN, Street.RIVER)


# ---------------------------------------------------------------------------
# Prompt helpers
# ---------------------------------------------------------------------------


def _prompt(msg: str, default: str = "") -> str:
    """Print a prompt and read user input."""
    suffix = f" [{default}]" if default else ""
    try:
        val = input(f"  {msg}{suffix}: ").strip()
    except (EOFError, KeyboardInterrupt):
        print()
        return default
    return val if val else default


def _cards_display(cards: list[Card] | tuple[Card, ...]) -> str:
    return " ".join(str(c) for c in cards)


def _legal_actions(facing_bet: bool) -> tuple[PostflopAction, ...]:
    if facing_bet:
        return (PostflopAction.FOLD, PostflopAction.CALL, PostflopAction.RAISE)
    return (PostflopAction.CHECK, PostflopAction.BET)


def _ask_action(facing_bet: bool) -> tuple[PostflopAction, int | None]:
    """Prompt until the player picks a legal action (and size, if needed)."""
    legal = _legal_actions(facing_bet)
    choices = "/".join(a.value for a in legal)

    while True:
        raw = _prompt(f"Action ({choices})", legal[0].value).lower()
        try:
            action = PostflopAction(raw)
        except ValueError:
            print(f"    Unknown action '{raw}'.")
            continue
        if action not in legal:
            print(f"    You can't {action} here.")
            continue
        break

    if action not in (PostflopAction.BET, PostflopAction.RAISE):
        return action, None

    sizes = "/".join(str(s) for s in BET_SIZE_OPTIONS)
    while True:
        raw = _prompt(f"{action.value.capitalize()} size, % pot ({sizes})", "50")
        try:
            size = int(raw.rstrip("%"))
        except ValueError:
            print(f"    Invalid number '{raw}'.")
            continue
        if size not in BET_SIZE_OPTIONS:
            print(f"    Pick one of {sizes}.")
            continue
        return action, size


def _ask_position(rng: random.Random) -> Position:
    default = rng.choice(list(Position))
    while True:
        raw = _prompt("Position (IP/OOP)", default.value).upper()
        try:
            return Position(raw)
        except ValueError:
            print("    Invalid position.")


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def _print_result(grade: GradeResult, analysis: SpotAnalysis) -> None:
    rec = analysis.recommendation
    yours = grade.action.value
    if grade.bet_size is not None:
        yours += f" {grade.bet_size}%"
    advised = rec.action.value
    if rec.sizing is not None:
        advised += f" ({rec.sizing})"

    print()
    verdict = "Correct!" if grade.correct else "Not optimal"
    print(f"  {verdict}  You: {yours}  |  Recommended: {advised}")
    print(
        f"  Made hand:  {analysis.evaluation.description} "
        f"(strength {analysis.evaluation.strength:.2f})"
    )
    texture = analysis.texture
    print(
        f"  Board:      {texture.texture_label} "
        f"({texture.danger_level}, wetness {texture.wetness:.2f})"
    )
    opponent = "villain's range" if analysis.vs_range else "a random hand"
    print(f"  Equity:     {analysis.equity:.0%} vs {opponent}")
    if analysis.call is not None:
        call = analysis.call
        verdict = "profitable" if call.profitable else "unprofitable"
        print(
            f"  Pot odds:   {call.pot_odds:.0%} needed, call is {verdict} "
            f"(EV {call.ev:+.1f})"
        )
    print(f"  Confidence: {rec.confidence:.0%}")
    print()
    print("  -- Why? --")
    print(f"  {grade.reasoning}")


# ---------------------------------------------------------------------------
# Drill
# ---------------------------------------------------------------------------


def _play_hand(
    rng: random.Random, stats: TrainerStats, config: AdvisorConfig
) -> None:
    """Play one scenario from flop to river, or until the player folds."""
    scenario = deal_postflop_scenario(rng)
    position = _ask_position(rng)
    pot: int | None = None

    for street in _POSTFLOP_STREETS:
        betting: Betting = deal_betting(rng, pot)
        pot = betting.pot_size
        board = scenario.board_for(street)

        print()
        print(f"-- {street.value.capitalize()} --")
        print(f"  Hand:       {_cards_display(scenario.hero_hand)}")
        print(f"  Board:      {_cards_display(board)}")
        villain = f"Villain bets {betting.to_call}" if betting.facing_bet else "Checked to you"
        print(f"  Pot:        {pot}  |  {villain}")

        action, size = _ask_action(betting.facing_bet)
        analysis = analyze_spot(
            scenario.hero_hand,
            board,
            position,
            street,
            betting.facing_bet,
            pot_size=pot,
            to_call=betting.to_call,
            equity_iterations=(
                config.range_iterations if config.villain_range
                else config.random_iterations
            ),
            villain_range=config.villain_range,
            max_workers=config.max_workers,
            parallel_threshold=config.parallel_threshold,
            rng=rng,
        )
        grade = grade_action(analysis.recommendation, action, size)
        stats.record(grade)
        logger.debug(
            "%s: %s vs %s (%s) correct=%s",
            street, action, analysis.recommendation.action,
            analysis.recommendation.rule, grade.correct,
        )
        _print_result(grade, analysis)

        if action == PostflopAction.FOLD:
            print("  Hand over.")
            return
        pot += betting.to_call + hero_investment(action, betting, size)

    print()
    print(f"  Showdown. Final pot: {pot}")


def run(config: AdvisorConfig | None = None) -> None:
    """Main entry point for the postflop coach."""
    config = config or load_config()
    logging.basicConfig(level=config.log_level)
    rng = make_rng(config)
    stats = TrainerStats()

    print()
    print(_DIVIDER)
    print("  POSTFLOP COACH")
    print(_DIVIDER)

    while True:
        print()
        print("  1. New hand")
        print("  2. Session stats")
        print("  3. Quit")
        choice = _prompt(">", "3")

        if choice == "1":
            _play_hand(rng, stats, config)
        elif choice == "2":
            print(f"  Score: {stats}")
        elif choice == "3":
            print(f"  Session score: {stats}")
            break


if __name__ == "__main__":
    run()
