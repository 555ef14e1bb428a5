"""Texas Hold'em hand evaluation engine.

Picks the best 5-card hand from hole cards plus board and scores it with a
``strength`` in [0, 1]. Each hand category owns a band of that interval, so
comparing ``(rank_value, strength)`` orders hands by category first and by
the deciding rank inside a category.

Fewer than five cards (preflop, or an incomplete board) go through a
separate partial path that only looks at rank multiplicities.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from poker_advisor.utils.card import Card
from poker_advisor.utils.constants import (
    RANK_PLURALS,
    VALUE_RANKS,
    HandRanking,
    Rank,
    StrengthTier,
)


@dataclass(frozen=True)
class HandEvaluation:
    """Result of evaluating a poker hand."""

    rank: HandRanking
    strength: float  # [0, 1], banded by category
    description: str
    kickers: tuple[Rank, ...] = ()
    made_hand: tuple[Card, ...] = ()

    @property
    def rank_value(self) -> int:
        """Category as 1 (high card) through 10 (royal flush)."""
        return int(self.rank)

    @property
    def key(self) -> tuple[int, float]:
        """Comparison key: category, then strength."""
        return (self.rank_value, self.strength)

    @property
    def tier(self) -> StrengthTier:
        return strength_tier(self.strength)


def strength_tier(strength: float) -> StrengthTier:
    """Bucket a [0, 1] strength into monster/strong/medium/weak/air."""
    if strength >= 0.85:
        return StrengthTier.MONSTER
    if strength >= 0.65:
        return StrengthTier.STRONG
    if strength >= 0.45:
        return StrengthTier.MEDIUM
    if strength >= 0.25:
        return StrengthTier.WEAK
    return StrengthTier.AIR


def _band(base: float, value: int, width: float) -> float:
    """Place a deciding rank value (2-14) inside a category band."""
    return base + (value / 14) * width


def _by_value(cards: Sequence[Card]) -> list[Card]:
    return sorted(cards, key=lambda c: c.value, reverse=True)


class HandEvaluator:
    """Evaluates poker hands and determines the best 5-card combination."""

    @staticmethod
    def evaluate(
        hole_cards: Sequence[Card], board: Sequence[Card] = ()
    ) -> HandEvaluation:
        """Evaluate the best hand from hole cards and board.

        Args:
            hole_cards: Hero's hole cards (normally 2).
            board: 0 to 5 community cards.

        Returns:
            HandEvaluation. Never raises; callers must pass distinct cards.
        """
        cards = [*hole_cards, *board]
        if len(cards) < 5:
            return HandEvaluator._evaluate_partial(cards)
        return HandEvaluator._evaluate_full(cards)

    @staticmethod
    def _evaluate_full(cards: list[Card]) -> HandEvaluation:
        """Evaluate 5 to 7 cards."""
        sorted_cards = _by_value(cards)
        rank_counts = Counter(c.value for c in sorted_cards)
        # Highest multiplicity first, then highest rank
        groups = sorted(
            rank_counts.items(), key=lambda kv: (kv[1], kv[0]), reverse=True
        )
        flush_cards = HandEvaluator._flush_cards(sorted_cards)

        if flush_cards:
            straight_flush = HandEvaluator._best_straight(flush_cards)
            if straight_flush:
                high = straight_flush[0]
                if high == 14:
                    return HandEvaluation(
                        rank=HandRanking.ROYAL_FLUSH,
                        strength=1.0,
                        description="Royal Flush",
                        made_hand=tuple(straight_flush[1]),
                    )
                return HandEvaluation(
                    rank=HandRanking.STRAIGHT_FLUSH,
                    strength=_band(0.95, high, 0.04),
                    description=f"Straight Flush, {VALUE_RANKS[high]} high",
                    made_hand=tuple(straight_flush[1]),
                )

        top_value, top_count = groups[0]

        if top_count == 4:
            quads = [c for c in sorted_cards if c.value == top_value]
            kicker = next(c for c in sorted_cards if c.value != top_value)
            rank = VALUE_RANKS[top_value]
            return HandEvaluation(
                rank=HandRanking.FOUR_OF_A_KIND,
                strength=_band(0.9, top_value, 0.05),
                description=f"Four of a Kind, {RANK_PLURALS[rank]}",
                kickers=(kicker.rank,),
                made_hand=(*quads, kicker),
            )

        if top_count == 3:
            # Next best group of two or more fills the house; a second
            # set of trips counts as the pair.
            pair_value = max(
                (v for v, n in rank_counts.items() if n >= 2 and v != top_value),
                default=None,
            )
            if pair_value is not None:
                trips = [c for c in sorted_cards if c.value == top_value][:3]
                pair = [c for c in sorted_cards if c.value == pair_value][:2]
                return HandEvaluation(
                    rank=HandRanking.FULL_HOUSE,
                    strength=_band(0.85, top_value, 0.04),
                    description=(
                        f"Full House, {RANK_PLURALS[VALUE_RANKS[top_value]]} "
                        f"full of {RANK_PLURALS[VALUE_RANKS[pair_value]]}"
                    ),
                    made_hand=(*trips, *pair),
                )

        if flush_cards:
            best = flush_cards[:5]
            return HandEvaluation(
                rank=HandRanking.FLUSH,
                strength=_band(0.75, best[0].value, 0.08),
                description=f"Flush, {best[0].rank} high",
                kickers=tuple(c.rank for c in best[1:]),
                made_hand=tuple(best),
            )

        straight = HandEvaluator._best_straight(sorted_cards)
        if straight:
            high, run = straight
            return HandEvaluation(
                rank=HandRanking.STRAIGHT,
                strength=_band(0.65, high, 0.08),
                description=f"Straight, {VALUE_RANKS[high]} high",
                made_hand=tuple(run),
            )

        if top_count == 3:
            trips = [c for c in sorted_cards if c.value == top_value]
            kickers = [c for c in sorted_cards if c.value != top_value][:2]
            rank = VALUE_RANKS[top_value]
            return HandEvaluation(
                rank=HandRanking.THREE_OF_A_KIND,
                strength=_band(0.5, top_value, 0.1),
                description=f"Three of a Kind, {RANK_PLURALS[rank]}",
                kickers=tuple(c.rank for c in kickers),
                made_hand=(*trips, *kickers),
            )

        pair_values = [v for v, n in groups if n == 2]

        if len(pair_values) >= 2:
            high_pair, low_pair = pair_values[0], pair_values[1]
            pairs = [c for c in sorted_cards if c.value in (high_pair, low_pair)]
            kicker = next(
                c for c in sorted_cards if c.value not in (high_pair, low_pair)
            )
            return HandEvaluation(
                rank=HandRanking.TWO_PAIR,
                strength=_band(0.35, high_pair, 0.1),
                description=(
                    f"Two Pair, {RANK_PLURALS[VALUE_RANKS[high_pair]]} "
                    f"and {RANK_PLURALS[VALUE_RANKS[low_pair]]}"
                ),
                kickers=(kicker.rank,),
                made_hand=(*pairs, kicker),
            )

        if pair_values:
            pair_value = pair_values[0]
            pair = [c for c in sorted_cards if c.value == pair_value]
            kickers = [c for c in sorted_cards if c.value != pair_value][:3]
            return HandEvaluation(
                rank=HandRanking.PAIR,
                strength=_band(0.2, pair_value, 0.12),
                description=f"Pair of {RANK_PLURALS[VALUE_RANKS[pair_value]]}",
                kickers=tuple(c.rank for c in kickers),
                made_hand=(*pair, *kickers),
            )

        best = sorted_cards[:5]
        return HandEvaluation(
            rank=HandRanking.HIGH_CARD,
            strength=_band(0.05, best[0].value, 0.12),
            description=f"High Card, {best[0].rank}",
            kickers=tuple(c.rank for c in best[1:]),
            made_hand=tuple(best),
        )

    @staticmethod
    def _evaluate_partial(cards: list[Card]) -> HandEvaluation:
        """Best-effort classification of fewer than 5 cards."""
        made = tuple(cards)
        if not cards:
            return HandEvaluation(
                rank=HandRanking.HIGH_CARD,
                strength=_band(0.05, 14, 0.12),
                description="High Card",
            )

        rank_counts = Counter(c.value for c in cards)
        top_value, top_count = max(rank_counts.items(), key=lambda kv: (kv[1], kv[0]))
        plural = RANK_PLURALS[VALUE_RANKS[top_value]]

        if top_count == 4:
            return HandEvaluation(
                rank=HandRanking.FOUR_OF_A_KIND,
                strength=0.9,
                description=f"Four of a Kind, {plural}",
                made_hand=made,
            )
        if top_count == 3:
            return HandEvaluation(
                rank=HandRanking.THREE_OF_A_KIND,
                strength=_band(0.5, top_value, 0.1),
                description=f"Three of a Kind, {plural}",
                made_hand=made,
            )
        if sum(1 for n in rank_counts.values() if n >= 2) >= 2:
            return HandEvaluation(
                rank=HandRanking.TWO_PAIR,
                strength=0.35,
                description="Two Pair",
                made_hand=made,
            )
        if top_count == 2:
            return HandEvaluation(
                rank=HandRanking.PAIR,
                strength=_band(0.2, top_value, 0.12),
                description=f"Pair of {plural}",
                made_hand=made,
            )
        return HandEvaluation(
            rank=HandRanking.HIGH_CARD,
            strength=_band(0.05, top_value, 0.12),
            description=f"High Card, {VALUE_RANKS[top_value]}",
            made_hand=made,
        )

    @staticmethod
    def _flush_cards(sorted_cards: list[Card]) -> list[Card]:
        """Cards of a suit with five or more members, high to low (or [])."""
        suit_counts = Counter(c.suit for c in sorted_cards)
        for suit, count in suit_counts.items():
            if count >= 5:
                return [c for c in sorted_cards if c.suit == suit]
        return []

    @staticmethod
    def _best_straight(sorted_cards: list[Card]) -> tuple[int, list[Card]] | None:
        """Return (high value, five cards) of the best straight, or None.

        Handles the A-2-3-4-5 wheel as the lowest straight (high card 5).
        """
        by_value: dict[int, Card] = {}
        for c in sorted_cards:
            by_value.setdefault(c.value, c)
        if 14 in by_value:
            by_value[1] = by_value[14]

        for high in range(14, 4, -1):
            run = range(high, high - 5, -1)
            if all(v in by_value for v in run):
                return high, [by_value[v] for v in run]
        return None


def evaluate_hand(
    hole_cards: Sequence[Card], board: Sequence[Card] = ()
) -> HandEvaluation:
    """Module-level shortcut for HandEvaluator.evaluate."""
    return HandEvaluator.evaluate(hole_cards, board)
