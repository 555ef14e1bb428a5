"""Board texture analysis.

Classifies a flop, turn or river by pairing, suit distribution, straight
potential and high cards, and condenses them into a ``wetness`` score and
a three-level danger classification. Hole cards play no part here.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from poker_advisor.utils.card import Card
from poker_advisor.utils.constants import (
    BROADWAY_RANKS,
    RANK_VALUES,
    DangerLevel,
    Rank,
)

logger = logging.getLogger("poker_advisor.board")

# Five-rank straight windows, ace-high down to six-high, then the wheel
_STRAIGHT_WINDOWS: tuple[frozenset[int], ...] = tuple(
    frozenset(range(high, high - 5, -1)) for high in range(14, 4, -1)
) + (frozenset({14, 2, 3, 4, 5}),)


@dataclass(frozen=True)
class BoardTexture:
    """Analysis of the community card texture."""

    wetness: float = 0.0  # 0 = bone dry, 1 = soaking wet
    is_paired: bool = False
    is_trips: bool = False
    is_monotone: bool = False  # Flop only: three of one suit
    is_two_tone: bool = False  # Flop only: exactly two of one suit
    is_rainbow: bool = True  # Every card a different suit
    is_connected: bool = False  # Two ranks within 2, or ace plus a wheel card
    has_open_ended_draw: bool = False  # Some window holds 4 board ranks
    has_gutshot: bool = False  # Some window holds 3 board ranks
    has_straight_possible: bool = False  # A full window is on board
    has_flush_draw: bool = False  # Two or more of a suit
    has_flush_possible: bool = False  # Three or more of a suit
    high_card: Rank = Rank.ACE
    has_ace: bool = False
    has_broadway: bool = False
    broadway_count: int = 0
    texture_label: str = "No board"
    danger_level: DangerLevel = DangerLevel.SAFE

    @property
    def has_draw_completion(self) -> bool:
        """A flush or straight is already possible with this board."""
        return self.has_flush_possible or self.has_straight_possible


EMPTY_TEXTURE = BoardTexture()


def _straight_draws(values: set[int]) -> tuple[bool, bool, bool]:
    """Return (straight, open_ended, gutshot) flags over all windows."""
    straight = open_ended = gutshot = False
    for window in _STRAIGHT_WINDOWS:
        hits = len(window & values)
        if hits >= 5:
            straight = True
        elif hits >= 4:
            open_ended = True
        elif hits >= 3:
            gutshot = True
    return straight, open_ended, gutshot


def _is_connected(values: Sequence[int], max_gap: int = 2) -> bool:
    ordered = sorted(values, reverse=True)
    for a, b in zip(ordered, ordered[1:]):
        if a - b <= max_gap:
            return True
    return 14 in ordered and any(v <= 5 for v in ordered)


def _texture_label(
    *,
    is_paired: bool,
    is_trips: bool,
    is_monotone: bool,
    is_two_tone: bool,
    straight: bool,
    connected: bool,
    high_card: Rank,
    broadway_count: int,
) -> str:
    parts: list[str] = []

    if broadway_count >= 2:
        parts.append("Broadway")
    elif RANK_VALUES[high_card] >= 10:
        parts.append(f"{high_card}-high")
    else:
        parts.append("Low")

    if is_monotone:
        parts.append("Monotone")
    elif is_two_tone:
        parts.append("Two-tone")
    else:
        parts.append("Rainbow")

    if is_trips:
        parts.append("Trips")
    elif is_paired:
        parts.append("Paired")

    if straight:
        parts.append("Straight possible")
    elif connected:
        parts.append("Connected")
    else:
        parts.append("Disconnected")

    return ", ".join(parts)


def _danger_level(
    wetness: float, is_monotone: bool, is_two_tone: bool,
    straight: bool, open_ended: bool,
) -> DangerLevel:
    if wetness >= 0.5 or is_monotone or straight:
        return DangerLevel.DANGEROUS
    if wetness >= 0.25 or is_two_tone or open_ended:
        return DangerLevel.MODERATE
    return DangerLevel.SAFE


def analyze_board(board: Sequence[Card]) -> BoardTexture:
    """Analyze the texture of 3 to 5 community cards.

    Boards with fewer than 3 cards return EMPTY_TEXTURE.
    """
    if len(board) < 3:
        return EMPTY_TEXTURE

    values = [c.value for c in board]
    rank_counts = Counter(c.rank for c in board)
    suit_counts = Counter(c.suit for c in board)
    size = len(board)

    max_rank_count = max(rank_counts.values())
    is_paired = max_rank_count >= 2
    is_trips = max_rank_count >= 3

    max_suit_count = max(suit_counts.values())
    is_monotone = max_suit_count >= 3 and size == 3
    is_two_tone = max_suit_count == 2 and size == 3
    is_rainbow = max_suit_count == 1

    straight, open_ended, gutshot = _straight_draws(set(values))
    connected = _is_connected(values)

    high_card = max(board, key=lambda c: c.value).rank
    broadway_count = sum(1 for c in board if c.rank in BROADWAY_RANKS)

    wetness = 0.0
    if is_monotone:
        wetness += 0.35
    elif is_two_tone:
        wetness += 0.15

    if straight:
        wetness += 0.25
    elif open_ended:
        wetness += 0.2
    elif gutshot:
        wetness += 0.1

    if connected:
        wetness += 0.1

    if is_paired:
        wetness -= 0.15
    if is_trips:
        wetness -= 0.25

    wetness += (broadway_count / size) * 0.15
    wetness = max(0.0, min(1.0, wetness))

    texture = BoardTexture(
        wetness=wetness,
        is_paired=is_paired,
        is_trips=is_trips,
        is_monotone=is_monotone,
        is_two_tone=is_two_tone,
        is_rainbow=is_rainbow,
        is_connected=connected,
        has_open_ended_draw=open_ended,
        has_gutshot=gutshot,
        has_straight_possible=straight,
        has_flush_draw=max_suit_count >= 2,
        has_flush_possible=max_suit_count >= 3,
        high_card=high_card,
        has_ace=Rank.ACE in rank_counts,
        has_broadway=broadway_count > 0,
        broadway_count=broadway_count,
        texture_label=_texture_label(
            is_paired=is_paired,
            is_trips=is_trips,
            is_monotone=is_monotone,
            is_two_tone=is_two_tone,
            straight=straight,
            connected=connected,
            high_card=high_card,
            broadway_count=broadway_count,
        ),
        danger_level=_danger_level(
            wetness, is_monotone, is_two_tone, straight, open_ended
        ),
    )
    logger.debug(
        "%s -> %s (wetness=%.2f, %s)",
        " ".join(str(c) for c in board),
        texture.texture_label,
        texture.wetness,
        texture.danger_level,
    )
    return texture


def describe_board(texture: BoardTexture) -> str:
    """Lowercase board phrase used inside recommendation reasoning."""
    parts: list[str] = []

    if texture.is_monotone:
        parts.append("monotone (flush possible)")
    elif texture.is_two_tone:
        parts.append("two-tone (flush draw possible)")
    else:
        parts.append("rainbow")

    if texture.has_straight_possible:
        parts.append("with a straight on board")
    elif texture.has_open_ended_draw:
        parts.append("with straight draw possibilities")
    elif texture.has_gutshot:
        parts.append("with gutshot possibilities")

    if texture.is_paired:
        parts.append("paired")

    return ", ".join(parts)
