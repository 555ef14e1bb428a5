"""Hand notation, range expansion and preflop opening ranges.

Hand notation:
  - "AA"   → pocket pair (6 combos)
  - "AKs"  → suited (4 combos)
  - "AKo"  → offsuit (12 combos)
  - "AK"   → both suited and offsuit (16 combos)
  - "JJ+"  → JJ, QQ, KK, AA
  - "ATs+" → ATs, AJs, AQs, AKs
  - "A5s-A2s" → A5s, A4s, A3s, A2s

The opening tables are read-only: they are built once at import into
immutable mappings keyed by table position, then hand label.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from itertools import combinations
from types import MappingProxyType

import numpy as np

from poker_advisor.utils.card import Card
from poker_advisor.utils.constants import PreflopAction, Rank, Suit, TablePosition

# Ranks ordered high to low for range expansion
_RANKS_DESCENDING: list[Rank] = list(reversed(Rank))

_RANK_INDEX: dict[Rank, int] = {r: i for i, r in enumerate(_RANKS_DESCENDING)}

TOTAL_COMBOS = 1326


class HandType(StrEnum):
    PAIR = "pair"
    SUITED = "suited"
    OFFSUIT = "offsuit"


@dataclass(frozen=True)
class HandCombo:
    """A specific 2-card hand (e.g. AhKh)."""

    card1: Card
    card2: Card

    @property
    def cards(self) -> tuple[Card, Card]:
        return (self.card1, self.card2)

    def blocked_by(self, dead: Iterable[Card]) -> bool:
        """True if either card is already known."""
        dead = set(dead)
        return self.card1 in dead or self.card2 in dead

    def __str__(self) -> str:
        return f"{self.card1}{self.card2}"


@dataclass(frozen=True)
class HandNotation:
    """A hand in standard poker notation (e.g. AKs, JJ, T9o)."""

    rank1: Rank
    rank2: Rank
    hand_type: HandType

    @classmethod
    def from_str(cls, s: str) -> HandNotation:
        """Parse notation like 'AKs', 'JJ', 'T9o'.

        Raises:
            ValueError: If notation is invalid.
        """
        if len(s) < 2 or len(s) > 3:
            raise ValueError(f"Invalid hand notation: '{s}'")

        try:
            r1 = Rank(s[0].upper())
            r2 = Rank(s[1].upper())
        except ValueError:
            raise ValueError(f"Invalid hand notation: '{s}'")

        if r1 == r2:
            if len(s) == 3:
                raise ValueError(f"Pocket pairs take no suit indicator: '{s}'")
            return cls(rank1=r1, rank2=r2, hand_type=HandType.PAIR)

        # Ensure rank1 is the higher rank
        if _RANK_INDEX[r1] > _RANK_INDEX[r2]:
            r1, r2 = r2, r1

        if len(s) == 3:
            if s[2] == "s":
                return cls(rank1=r1, rank2=r2, hand_type=HandType.SUITED)
            if s[2] == "o":
                return cls(rank1=r1, rank2=r2, hand_type=HandType.OFFSUIT)
            raise ValueError(f"Invalid suit indicator: '{s[2]}'")

        # 2-char non-pair means both; expand_notation splits it
        return cls(rank1=r1, rank2=r2, hand_type=HandType.OFFSUIT)

    def to_combos(self) -> list[HandCombo]:
        """Expand this notation into all specific card combinations."""
        suits = list(Suit)

        if self.hand_type == HandType.PAIR:
            return [
                HandCombo(Card(self.rank1, s1), Card(self.rank2, s2))
                for s1, s2 in combinations(suits, 2)
            ]

        if self.hand_type == HandType.SUITED:
            return [
                HandCombo(Card(self.rank1, s), Card(self.rank2, s))
                for s in suits
            ]

        return [
            HandCombo(Card(self.rank1, s1), Card(self.rank2, s2))
            for s1 in suits
            for s2 in suits
            if s1 != s2
        ]

    @property
    def combo_count(self) -> int:
        if self.hand_type == HandType.PAIR:
            return 6
        if self.hand_type == HandType.SUITED:
            return 4
        return 12

    def __str__(self) -> str:
        r = f"{self.rank1.value}{self.rank2.value}"
        if self.hand_type == HandType.PAIR:
            return r
        if self.hand_type == HandType.SUITED:
            return r + "s"
        return r + "o"


def expand_hand_notation(
    token: str, blockers: Iterable[Card] = ()
) -> list[HandCombo]:
    """Expand one hand token ('AA', 'AKs', 'AKo', 'AK') into concrete combos.

    Combos sharing a card with ``blockers`` are dropped.

    Raises:
        ValueError: If the token is not valid hand notation.
    """
    dead = set(blockers)
    return [
        combo
        for hand in expand_notation(token)
        for combo in hand.to_combos()
        if not combo.blocked_by(dead)
    ]


def expand_range(
    tokens: Iterable[str], blockers: Iterable[Card] = ()
) -> list[HandCombo]:
    """Expand a list of hand tokens into concrete, unblocked combos."""
    dead = set(blockers)
    combos: list[HandCombo] = []
    for token in tokens:
        combos.extend(expand_hand_notation(token, dead))
    return combos


def expand_notation(notation: str) -> list[HandNotation]:
    """Expand range notation into a list of HandNotation objects.

    Supports:
      - Single hands: "AKs", "JJ", "T9o", "AK"
      - Plus notation: "JJ+" → JJ,QQ,KK,AA
      - Plus on non-pairs: "ATs+" → ATs,AJs,AQs,AKs
      - Dash ranges: "JJ-88" → JJ,TT,99,88
      - Dash on non-pairs: "A5s-A2s" → A5s,A4s,A3s,A2s
    """
    notation = notation.strip()

    if "-" in notation:
        parts = notation.split("-")
        if len(parts) != 2:
            raise ValueError(f"Invalid range notation: '{notation}'")
        return _expand_dash_range(parts[0].strip(), parts[1].strip())

    if notation.endswith("+"):
        return _expand_plus(notation[:-1])

    hand = HandNotation.from_str(notation)
    if len(notation) == 2 and hand.hand_type != HandType.PAIR:
        return [
            HandNotation(hand.rank1, hand.rank2, HandType.SUITED),
            HandNotation(hand.rank1, hand.rank2, HandType.OFFSUIT),
        ]
    return [hand]


def _expand_plus(base: str) -> list[HandNotation]:
    """Expand 'JJ+' or 'ATs+' style notation."""
    hand = HandNotation.from_str(base)

    if hand.hand_type == HandType.PAIR:
        idx = _RANK_INDEX[hand.rank1]
        return [
            HandNotation(_RANKS_DESCENDING[i], _RANKS_DESCENDING[i], HandType.PAIR)
            for i in range(idx + 1)
        ]

    # ATs+ → ATs, AJs, AQs, AKs (kicker climbs toward rank1)
    high_idx = _RANK_INDEX[hand.rank1]
    low_idx = _RANK_INDEX[hand.rank2]
    return [
        HandNotation(hand.rank1, _RANKS_DESCENDING[i], hand.hand_type)
        for i in range(high_idx + 1, low_idx + 1)
    ]


def _expand_dash_range(start: str, end: str) -> list[HandNotation]:
    """Expand 'JJ-88' or 'A5s-A2s' style notation."""
    h_start = HandNotation.from_str(start)
    h_end = HandNotation.from_str(end)

    if h_start.hand_type == HandType.PAIR and h_end.hand_type == HandType.PAIR:
        lo, hi = sorted([_RANK_INDEX[h_start.rank1], _RANK_INDEX[h_end.rank1]])
        return [
            HandNotation(_RANKS_DESCENDING[i], _RANKS_DESCENDING[i], HandType.PAIR)
            for i in range(lo, hi + 1)
        ]

    if h_start.rank1 != h_end.rank1:
        raise ValueError(
            f"Non-pair dash ranges must share the high card: '{start}-{end}'"
        )
    if h_start.hand_type != h_end.hand_type:
        raise ValueError(
            f"Dash range endpoints must have same type (s/o): '{start}-{end}'"
        )

    lo, hi = sorted([_RANK_INDEX[h_start.rank2], _RANK_INDEX[h_end.rank2]])
    return [
        HandNotation(h_start.rank1, _RANKS_DESCENDING[i], h_start.hand_type)
        for i in range(lo, hi + 1)
    ]


def parse_range(notation: str) -> list[str]:
    """Flatten comma-separated range notation into single hand tokens."""
    tokens: list[str] = []
    for part in notation.split(","):
        part = part.strip()
        if part:
            tokens.extend(str(h) for h in expand_notation(part))
    return tokens


# ---------------------------------------------------------------------------
# Opening ranges (RFI, raise first in)
#
# 6-max cash, 100bb effective, 2.5bb open (3bb from the SB). Hands are
# grouped by raise frequency; anything unlisted is a pure fold.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ActionFrequency:
    action: PreflopAction
    frequency: float  # [0, 1]


_OPENING_TIERS: dict[TablePosition, dict[float, str]] = {
    TablePosition.UTG: {
        1.0: "77+,ATs+,KTs+,QTs+,JTs,AJo+,KQo",
        0.75: "66,A5s,T9s,ATo,KJo",
        0.5: "55,A9s,A4s,J9s,98s,QJo",
        0.25: "44,A8s-A6s,A3s,A2s,K9s,Q9s,87s,76s,KTo",
    },
    TablePosition.HJ: {
        1.0: "66+,A9s+,A5s,KTs+,QTs+,JTs,T9s,98s,ATo+,KJo+",
        0.75: "55,A8s,A4s,K9s,Q9s,J9s,87s,KTo,QJo",
        0.5: "44,A7s,A6s,A3s,A2s,T8s,76s,65s,A9o,QTo",
        0.25: "33,22,K8s-K6s,Q8s,J8s,97s,86s,54s,JTo",
    },
    TablePosition.CO: {
        1.0: "44+,A2s+,K9s+,Q9s+,J9s+,T8s+,98s,87s,76s,65s,A9o+,KTo+,QJo",
        0.75: "33,22,K8s,K7s,Q8s,J8s,97s,86s,54s,A8o,K9o,QTo,JTo",
        0.5: "K6s,K5s,Q7s,Q6s,J7s,T7s,96s,75s,64s,A7o,A5o,Q9o,T9o",
        0.25: "K4s-K2s,Q5s,J6s,T6s,85s,53s,43s,A6o,A4o,K8o,J9o,98o",
    },
    TablePosition.BTN: {
        1.0: (
            "22+,A2s+,K4s+,Q6s+,J7s+,T7s+,96s+,86s+,75s+,64s+,54s,"
            "A2o+,K8o+,Q9o+,J9o+,T9o"
        ),
        0.75: "K3s,K2s,Q5s,Q4s,J6s,T6s,85s,53s,43s,K7o,K6o,Q8o,J8o,T8o,98o,87o",
        0.5: "Q3s,Q2s,J5s,J4s,T5s,95s,84s,74s,63s,32s,K5o,K4o,Q7o,J7o,97o,76o,65o",
        0.25: "J3s,J2s,T4s,94s,73s,52s,42s,K3o,K2o,Q6o,T7o,86o,54o",
    },
    TablePosition.SB: {
        1.0: (
            "44+,A2s+,K4s+,Q7s+,J8s+,T8s+,97s+,86s+,76s,65s,54s,"
            "A4o+,K9o+,QTo+,JTo,T9o"
        ),
        0.75: (
            "33,22,K3s,K2s,Q6s,Q5s,J7s,T7s,96s,75s,64s,"
            "A3o,A2o,K8o,K7o,Q9o,J9o,98o"
        ),
        0.5: "Q4s,Q3s,J6s,J5s,T6s,85s,53s,43s,K6o,K5o,Q8o,J8o,T8o,87o",
        0.25: "Q2s,J4s,T5s,95s,84s,74s,63s,32s,K4o,K3o,Q7o,97o,76o,65o",
    },
    TablePosition.BB: {
        1.0: (
            "22+,A2s+,K2s+,Q2s+,J4s+,T5s+,95s+,85s+,75s+,64s+,53s+,43s,"
            "A2o+,K5o+,Q8o+,J9o+,T8o+,98o,87o"
        ),
        0.75: (
            "J3s,J2s,T4s,94s,84s,74s,63s,32s,"
            "K4o,K3o,Q7o,Q6o,J8o,J7o,T7o,97o,86o,76o,65o"
        ),
        0.5: (
            "T3s,T2s,93s,83s,73s,62s,52s,42s,"
            "K2o,Q5o,Q4o,J6o,T6o,96o,85o,75o,64o,54o"
        ),
        0.25: "92s,82s,72s,Q3o,Q2o,J5o,J4o,T5o,95o,84o,74o,53o,43o",
    },
}


def _build_opening_table(tiers: dict[float, str]) -> Mapping[str, float]:
    table: dict[str, float] = {}
    for frequency, notation in tiers.items():
        for token in parse_range(notation):
            table[token] = frequency
    return MappingProxyType(table)


OPENING_RANGES: Mapping[TablePosition, Mapping[str, float]] = MappingProxyType({
    position: _build_opening_table(tiers)
    for position, tiers in _OPENING_TIERS.items()
})


def _generate_all_hands() -> list[str]:
    """All 169 starting-hand labels in 13x13 matrix order.

    Row i, column j: pairs on the diagonal, suited above it, offsuit below.
    """
    hands: list[str] = []
    for i, r1 in enumerate(_RANKS_DESCENDING):
        for j, r2 in enumerate(_RANKS_DESCENDING):
            if i < j:
                hands.append(f"{r1}{r2}s")
            elif i > j:
                hands.append(f"{r2}{r1}o")
            else:
                hands.append(f"{r1}{r2}")
    return hands


ALL_HANDS: tuple[str, ...] = tuple(_generate_all_hands())


def _normalize_hand(hand: str) -> str:
    return str(HandNotation.from_str(hand))


def get_opening_strategy(
    position: TablePosition, hand: str
) -> tuple[ActionFrequency, ...]:
    """Raise/fold frequencies for opening ``hand`` from ``position``."""
    frequency = OPENING_RANGES[position].get(_normalize_hand(hand), 0.0)
    if frequency <= 0.0:
        return (ActionFrequency(PreflopAction.FOLD, 1.0),)
    if frequency >= 1.0:
        return (ActionFrequency(PreflopAction.RAISE, 1.0),)
    return (
        ActionFrequency(PreflopAction.RAISE, frequency),
        ActionFrequency(PreflopAction.FOLD, 1.0 - frequency),
    )


def range_matrix(position: TablePosition) -> np.ndarray:
    """13x13 grid of raise frequencies, laid out like ALL_HANDS."""
    table = OPENING_RANGES[position]
    freqs = np.array([table.get(h, 0.0) for h in ALL_HANDS], dtype=float)
    return freqs.reshape(13, 13)


def _combo_matrix() -> np.ndarray:
    """Combos per matrix cell: 6 on the diagonal, 4 suited, 12 offsuit."""
    grid = np.full((13, 13), 12.0)
    grid[np.triu_indices(13, k=1)] = 4.0
    np.fill_diagonal(grid, 6.0)
    return grid


_COMBOS_PER_CELL = _combo_matrix()


def range_percentage(position: TablePosition) -> float:
    """Share of all 1326 combos opened from ``position``, in percent."""
    weighted = float(np.sum(range_matrix(position) * _COMBOS_PER_CELL))
    return weighted / TOTAL_COMBOS * 100


def random_playable_hand(
    position: TablePosition, rng: random.Random | None = None
) -> str:
    """Pick a hand that opens from ``position`` at least some of the time."""
    rng = rng or random.Random()
    playable = [h for h in ALL_HANDS if OPENING_RANGES[position].get(h, 0.0) > 0]
    if not playable:
        return "AA"
    return rng.choice(playable)
