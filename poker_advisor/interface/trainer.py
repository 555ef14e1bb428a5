"""Trainer logic: spot analysis and grading of hero's decisions.

Ties the evaluator, board analyzer, equity calculator and rule table
together for one postflop decision point, and scores a player's choice
against the recommendation. Preflop open-or-fold choices are graded
against the opening ranges.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from poker_advisor.core.equity_calculator import (
    PARALLEL_THRESHOLD,
    CallAnalysis,
    EquityCalculator,
    is_call_profitable,
    quick_equity_estimate,
)
from poker_advisor.core.hand_evaluator import HandEvaluation, HandEvaluator
from poker_advisor.strategy.board_analyzer import BoardTexture, analyze_board
from poker_advisor.strategy.postflop_rules import Recommendation, recommend
from poker_advisor.strategy.preflop_ranges import get_opening_strategy
from poker_advisor.utils.card import Card
from poker_advisor.utils.constants import (
    BetSizing,
    Position,
    PostflopAction,
    PreflopAction,
    Street,
    TablePosition,
)

# Bet sizes offered to the player, as a percentage of the pot
BET_SIZE_OPTIONS: tuple[int, ...] = (33, 50, 75, 100, 150)

# Sizes villain picks from when leading into hero
VILLAIN_BET_SIZES: tuple[int, ...] = (33, 50, 75, 100)


@dataclass(frozen=True)
class SpotAnalysis:
    """Everything the trainer shows after a decision."""

    evaluation: HandEvaluation
    texture: BoardTexture
    equity: float
    recommendation: Recommendation
    call: CallAnalysis | None = None  # Only when facing a bet
    vs_range: bool = False  # Equity was simulated against a villain range


def analyze_spot(
    hero: Sequence[Card],
    board: Sequence[Card],
    position: Position,
    street: Street,
    facing_bet: bool,
    *,
    pot_size: float = 0.0,
    to_call: float = 0.0,
    equity_iterations: int = 0,
    villain_range: Iterable[str] | None = None,
    max_workers: int | None = None,
    parallel_threshold: int = PARALLEL_THRESHOLD,
    rng: random.Random | None = None,
) -> SpotAnalysis:
    """Evaluate hero's hand and board, and recommend an action.

    Args:
        hero: Hero's hole cards.
        board: Community cards visible on ``street``.
        position: IP or OOP.
        street: Flop, turn or river.
        facing_bet: Whether villain has bet.
        pot_size: Pot before villain's bet, for the call analysis.
        to_call: Villain's bet, for the call analysis.
        equity_iterations: Monte Carlo samples; 0 uses the quick estimate
            instead.
        villain_range: Hand tokens for villain, or None for a random hand.
        max_workers: Worker processes for large simulations.
        parallel_threshold: Smallest sample count run across processes.
        rng: Random source for the simulation.

    Returns:
        SpotAnalysis for the decision point.
    """
    evaluation = HandEvaluator.evaluate(hero, board)
    texture = analyze_board(board)

    tokens = list(villain_range) if villain_range else None
    if equity_iterations > 0:
        equity = EquityCalculator.parallel_equity(
            hero,
            board,
            tokens,
            equity_iterations,
            max_workers=max_workers,
            rng=rng,
            parallel_threshold=parallel_threshold,
        ).equity
    else:
        equity = quick_equity_estimate(hero, board)

    call = None
    if facing_bet and to_call > 0:
        call = is_call_profitable(equity, pot_size, to_call)

    return SpotAnalysis(
        evaluation=evaluation,
        texture=texture,
        equity=equity,
        recommendation=recommend(
            evaluation.strength, texture, position, street, facing_bet
        ),
        call=call,
        vs_range=bool(tokens) and equity_iterations > 0,
    )


def recommended_bet_size(sizing: BetSizing | None) -> int:
    """Pot percentage matching a sizing tier."""
    if sizing == BetSizing.SMALL:
        return 33
    if sizing == BetSizing.LARGE:
        return 100
    return 50


@dataclass(frozen=True)
class GradeResult:
    """Outcome of comparing hero's decision with the recommendation."""

    correct: bool
    action_correct: bool
    sizing_correct: bool
    action: PostflopAction
    recommended_action: PostflopAction
    bet_size: int | None = None
    recommended_size: int | None = None
    reasoning: str = ""


def grade_action(
    recommendation: Recommendation,
    action: PostflopAction,
    bet_size: int | None = None,
) -> GradeResult:
    """Grade hero's action and optional bet size.

    Sizing counts as correct within one step of the recommended size.
    When the recommendation has confidence below 0.6 the spot is close,
    so any action is accepted; sizing still has to be close.

    Raises:
        ValueError: If ``bet_size`` is not one of BET_SIZE_OPTIONS.
    """
    if bet_size is not None and bet_size not in BET_SIZE_OPTIONS:
        raise ValueError(
            f"Bet size must be one of {BET_SIZE_OPTIONS}, got {bet_size}"
        )

    action_correct = action == recommendation.action

    sizing_correct = True
    recommended_size = None
    if action in (PostflopAction.BET, PostflopAction.RAISE) and bet_size is not None:
        recommended_size = recommended_bet_size(recommendation.sizing)
        step = abs(
            BET_SIZE_OPTIONS.index(bet_size)
            - BET_SIZE_OPTIONS.index(recommended_size)
        )
        sizing_correct = step <= 1

    if not action_correct and recommendation.confidence < 0.6:
        action_correct = True

    reasoning = recommendation.reasoning
    if recommended_size is not None and not sizing_correct:
        reasoning += f" (Sizing: {recommended_size}% pot recommended)"

    return GradeResult(
        correct=action_correct and sizing_correct,
        action_correct=action_correct,
        sizing_correct=sizing_correct,
        action=action,
        recommended_action=recommendation.action,
        bet_size=bet_size,
        recommended_size=recommended_size,
        reasoning=reasoning,
    )


@dataclass(frozen=True)
class PreflopGrade:
    """Outcome of an open-or-fold decision."""

    correct: bool  # The chosen action is played at some frequency
    optimal: bool  # The chosen action is the most frequent one
    action: PreflopAction
    raise_frequency: float


def grade_preflop(
    position: TablePosition, hand: str, action: PreflopAction
) -> PreflopGrade:
    """Grade an open-or-fold choice against the opening range."""
    strategy = get_opening_strategy(position, hand)
    chosen = next((a.frequency for a in strategy if a.action == action), 0.0)
    best = max(strategy, key=lambda a: a.frequency)
    raise_frequency = next(
        (a.frequency for a in strategy if a.action == PreflopAction.RAISE), 0.0
    )
    return PreflopGrade(
        correct=chosen > 0,
        optimal=action == best.action,
        action=action,
        raise_frequency=raise_frequency,
    )


@dataclass
class TrainerStats:
    """Running score for a training session."""

    correct: int = 0
    total: int = 0

    def record(self, grade: GradeResult | PreflopGrade) -> None:
        self.total += 1
        if grade.correct:
            self.correct += 1

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0

    def __str__(self) -> str:
        return f"{self.correct}/{self.total} ({self.accuracy:.0%})"


@dataclass(frozen=True)
class Betting:
    """Pot and villain action for one street."""

    pot_size: int
    facing_bet: bool
    to_call: int = 0


def deal_betting(rng: random.Random, pot_size: int | None = None) -> Betting:
    """Roll villain's action: a coin flip to bet, sized off the pot.

    A fresh hand starts with a pot of 50, 100, 150 or 200.
    """
    if pot_size is None:
        pot_size = rng.randint(1, 4) * 50
    if rng.random() > 0.5:
        percent = rng.choice(VILLAIN_BET_SIZES)
        return Betting(pot_size, True, pot_size * percent // 100)
    return Betting(pot_size, False)


def hero_investment(
    action: PostflopAction, betting: Betting, bet_size: int | None = None
) -> int:
    """Chips hero puts in with ``action``, added to the pot."""
    if action == PostflopAction.CALL:
        return betting.to_call
    if action == PostflopAction.BET and bet_size:
        return betting.pot_size * bet_size // 100
    if action == PostflopAction.RAISE and bet_size:
        return betting.to_call + betting.pot_size * bet_size // 100
    return 0
