"""Monte Carlo equity calculator for Texas Hold'em.

Estimates hero's equity (win probability plus half the tie probability)
against a random hand or an explicit range by simulating the unknown
villain cards and board runout.

Includes a parallel variant (parallel_equity) that splits iterations
across worker processes for larger runs.
"""

from __future__ import annotations

import logging
import math
import os
import random
from collections.abc import Iterable, Sequence
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass

from poker_advisor.core.hand_evaluator import HandEvaluation, HandEvaluator
from poker_advisor.strategy.preflop_ranges import HandCombo, expand_range
from poker_advisor.utils.card import (
    Card,
    create_deck,
    parse_cards,
    remove_cards,
    shuffle_deck,
)

logger = logging.getLogger("poker_advisor.equity")

# CPU count minus one for the main process, between 1 and 4 workers
_MAX_WORKERS = max(1, min(4, (os.cpu_count() or 2) - 1))

PARALLEL_THRESHOLD = 500


@dataclass(frozen=True)
class EquityResult:
    """Result of an equity calculation."""

    wins: int
    ties: int
    losses: int
    samples: int  # Valid samples, wins + ties + losses
    equity: float  # [0, 1]
    confidence: float  # [0, 1], sample-stability heuristic

    @classmethod
    def from_counts(cls, wins: int, ties: int, losses: int) -> EquityResult:
        samples = wins + ties + losses
        if samples == 0:
            return cls(0, 0, 0, 0, equity=0.0, confidence=0.0)
        equity = (wins + ties * 0.5) / samples
        std_error = math.sqrt(equity * (1 - equity) / samples)
        confidence = max(0.0, min(1.0, 1 - 2 * std_error))
        return cls(wins, ties, losses, samples, equity, confidence)

    @property
    def win_pct(self) -> float:
        return self.equity * 100

    @property
    def tie_pct(self) -> float:
        return (self.ties / self.samples) * 100 if self.samples else 0.0

    def __str__(self) -> str:
        return (
            f"Equity: {self.win_pct:.1f}% "
            f"(W: {self.wins}, T: {self.ties}, L: {self.losses}, "
            f"samples: {self.samples}, confidence: {self.confidence:.2f})"
        )


def compare_hands(hero: HandEvaluation, villain: HandEvaluation) -> int:
    """Return 1 if hero wins, -1 if villain wins, 0 on a tie.

    Hands are ordered by category, then by ``strength``. Strength only
    encodes the deciding rank, so kicker-level differences inside the
    same band compare as ties.
    """
    if hero.key > villain.key:
        return 1
    if hero.key < villain.key:
        return -1
    return 0


def _simulate(
    hero: Sequence[Card],
    board: Sequence[Card],
    combos: Sequence[HandCombo] | None,
    iterations: int,
    rng: random.Random,
) -> tuple[int, int, int]:
    """Run ``iterations`` samples and return (wins, ties, losses).

    With ``combos`` None the villain holds two random cards; otherwise a
    combo is drawn uniformly each iteration and overlapping draws are
    skipped without counting.
    """
    board = list(board)
    cards_needed = 5 - len(board)
    known = set(hero) | set(board)
    remaining = remove_cards(create_deck(), known)

    wins = ties = losses = 0
    for _ in range(iterations):
        if combos is None:
            deck = shuffle_deck(remaining, rng)
            villain = deck[:2]
            runout = board + deck[2:2 + cards_needed]
        else:
            combo = rng.choice(combos)
            if combo.blocked_by(known):
                continue
            villain = list(combo.cards)
            deck = shuffle_deck(remove_cards(remaining, villain), rng)
            runout = board + deck[:cards_needed]

        result = compare_hands(
            HandEvaluator.evaluate(hero, runout),
            HandEvaluator.evaluate(villain, runout),
        )
        if result > 0:
            wins += 1
        elif result == 0:
            ties += 1
        else:
            losses += 1

    return wins, ties, losses


def _simulate_chunk(
    hero: list[str],
    board: list[str],
    combos: list[tuple[str, str]] | None,
    iterations: int,
    seed: int,
) -> tuple[int, int, int]:
    """Worker function for parallel Monte Carlo.

    Arguments are plain strings so they pickle cheaply into the worker;
    Card objects are rebuilt on the other side.
    """
    hand_combos = None
    if combos is not None:
        hand_combos = [
            HandCombo(Card.from_str(c1), Card.from_str(c2)) for c1, c2 in combos
        ]
    return _simulate(
        parse_cards(hero), parse_cards(board), hand_combos,
        iterations, random.Random(seed),
    )


class EquityCalculator:
    """Monte Carlo equity calculator."""

    @staticmethod
    def vs_random(
        hero: Sequence[Card],
        board: Sequence[Card] = (),
        iterations: int = 1000,
        rng: random.Random | None = None,
    ) -> EquityResult:
        """Calculate hero's equity against one random hand.

        Args:
            hero: Hero's hole cards (2 cards).
            board: Community cards already dealt (0-5 cards).
            iterations: Number of Monte Carlo samples.
            rng: Random source; a fresh unseeded one when omitted.

        Returns:
            EquityResult for hero.
        """
        rng = rng or random.Random()
        result = EquityResult.from_counts(
            *_simulate(hero, board, None, iterations, rng)
        )
        logger.info("Equity vs random: %s", result)
        return result

    @staticmethod
    def vs_range(
        hero: Sequence[Card],
        board: Sequence[Card] = (),
        villain_range: Iterable[str] = (),
        iterations: int = 500,
        rng: random.Random | None = None,
    ) -> EquityResult:
        """Calculate hero's equity against a range of hand tokens.

        Tokens are expanded with hero and board cards as blockers. An empty
        range, a fully blocked range, or a run with no valid samples falls
        back to vs_random.

        Args:
            hero: Hero's hole cards (2 cards).
            board: Community cards already dealt (0-5 cards).
            villain_range: Hand tokens such as "AA", "AKs", "KQo".
            iterations: Number of Monte Carlo samples requested.
            rng: Random source; a fresh unseeded one when omitted.

        Returns:
            EquityResult for hero.

        Raises:
            ValueError: If a token is not valid hand notation.
        """
        rng = rng or random.Random()
        tokens = list(villain_range)
        combos = expand_range(tokens, [*hero, *board]) if tokens else []
        if not combos:
            logger.debug("No usable combos in %s, using random villain", tokens)
            return EquityCalculator.vs_random(hero, board, iterations, rng)

        result = EquityResult.from_counts(
            *_simulate(hero, board, combos, iterations, rng)
        )
        if result.samples == 0:
            logger.debug("No valid samples against range, using random villain")
            return EquityCalculator.vs_random(hero, board, iterations, rng)

        logger.info("Equity vs %d combos: %s", len(combos), result)
        return result

    @staticmethod
    def parallel_equity(
        hero: Sequence[Card],
        board: Sequence[Card] = (),
        villain_range: Iterable[str] | None = None,
        iterations: int = 1000,
        max_workers: int | None = None,
        rng: random.Random | None = None,
        parallel_threshold: int = PARALLEL_THRESHOLD,
    ) -> EquityResult:
        """Calculate equity using Monte Carlo across worker processes.

        Below ``parallel_threshold`` iterations the process overhead is not
        worth it and the sequential path runs instead. Each chunk gets its
        own seed derived from ``rng``, so a seeded rng gives reproducible
        totals for a fixed worker count.

        Args:
            hero: Hero's hole cards (2 cards).
            board: Community cards already dealt (0-5 cards).
            villain_range: Hand tokens, or None for a random villain.
            iterations: Total Monte Carlo samples requested.
            max_workers: Max worker processes (defaults to _MAX_WORKERS).
            rng: Random source used to derive chunk seeds.
            parallel_threshold: Smallest iteration count worth splitting.

        Returns:
            EquityResult for hero.
        """
        rng = rng or random.Random()
        tokens = list(villain_range) if villain_range is not None else []

        if iterations < parallel_threshold:
            if tokens:
                return EquityCalculator.vs_range(hero, board, tokens, iterations, rng)
            return EquityCalculator.vs_random(hero, board, iterations, rng)

        combos_payload: list[tuple[str, str]] | None = None
        if tokens:
            combos = expand_range(tokens, [*hero, *board])
            if combos:
                combos_payload = [(str(c.card1), str(c.card2)) for c in combos]
            else:
                logger.debug("No usable combos in %s, using random villain", tokens)

        hero_payload = [str(c) for c in hero]
        board_payload = [str(c) for c in board]

        workers = max(1, min(max_workers or _MAX_WORKERS, iterations))
        chunk_size, remainder = divmod(iterations, workers)
        chunks = [chunk_size + (1 if i < remainder else 0) for i in range(workers)]
        base_seed = rng.randrange(2**31)

        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(
                    _simulate_chunk,
                    hero_payload, board_payload, combos_payload,
                    chunk_iterations, base_seed + i,
                )
                for i, chunk_iterations in enumerate(chunks)
            ]
            results = [f.result() for f in futures]

        result = EquityResult.from_counts(
            sum(r[0] for r in results),
            sum(r[1] for r in results),
            sum(r[2] for r in results),
        )
        if result.samples == 0:
            logger.debug("No valid samples against range, using random villain")
            return EquityCalculator.vs_random(hero, board, iterations, rng)

        logger.info("Parallel equity over %d workers: %s", workers, result)
        return result


def quick_equity_estimate(
    hero: Sequence[Card], board: Sequence[Card] = ()
) -> float:
    """Cheap equity guess from made-hand strength, no sampling.

    Strength is pulled toward 0.5 by 0.08 for every board card still to
    come.
    """
    strength = HandEvaluator.evaluate(hero, board).strength
    uncertainty = max(0, 5 - len(board)) * 0.08
    estimate = strength * (1 - uncertainty) + 0.5 * uncertainty
    return max(0.0, min(1.0, estimate))


def calculate_pot_odds(pot_size: float, bet_to_call: float) -> float:
    """Share of the final pot hero must put in to call."""
    if bet_to_call <= 0:
        return 1.0
    return bet_to_call / (pot_size + bet_to_call)


@dataclass(frozen=True)
class CallAnalysis:
    profitable: bool
    ev: float
    pot_odds: float


def is_call_profitable(
    equity: float, pot_size: float, bet_to_call: float
) -> CallAnalysis:
    """Compare equity with pot odds and report the call's expected value."""
    pot_odds = calculate_pot_odds(pot_size, bet_to_call)
    ev = equity * (pot_size + bet_to_call) - (1 - equity) * bet_to_call
    return CallAnalysis(profitable=equity > pot_odds, ev=ev, pot_odds=pot_odds)
