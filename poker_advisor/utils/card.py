"""Card and deck helpers for poker.

Decks are plain lists of Card values. Every operation returns a new list;
nothing here mutates its input. Randomness always comes from an optional
``random.Random`` so simulations can be seeded.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import total_ordering

from poker_advisor.utils.constants import (
    RANK_VALUES,
    STREET_BOARD_SIZE,
    Rank,
    Street,
    Suit,
)


@total_ordering
@dataclass(frozen=True)
class Card:
    """Represents a single playing card."""

    rank: Rank
    suit: Suit

    @classmethod
    def from_str(cls, s: str) -> Card:
        """Create a Card from a 2-character string like 'Ah' or 'Td'.

        Args:
            s: A 2-character string where the first char is the rank
               and the second is the suit.

        Returns:
            A new Card instance.

        Raises:
            ValueError: If the string is not exactly 2 characters or
                       contains invalid rank/suit characters.
        """
        if len(s) != 2:
            raise ValueError(f"Card string must be 2 characters, got '{s}'")
        try:
            rank = Rank(s[0].upper())
        except ValueError:
            raise ValueError(f"Invalid rank character: '{s[0]}'")
        try:
            suit = Suit(s[1].lower())
        except ValueError:
            raise ValueError(f"Invalid suit character: '{s[1]}'")
        return cls(rank=rank, suit=suit)

    @property
    def value(self) -> int:
        """Numeric value of the card's rank (2-14)."""
        return RANK_VALUES[self.rank]

    def __str__(self) -> str:
        return f"{self.rank.value}{self.suit.value}"

    def __repr__(self) -> str:
        return f"Card('{self}')"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.value < other.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank == other.rank and self.suit == other.suit

    def __hash__(self) -> int:
        return hash((self.rank, self.suit))


def parse_cards(cards: str | Iterable[str | Card]) -> list[Card]:
    """Parse 'AhKs', 'Ah Ks' or an iterable of strings/Cards into Cards."""
    if isinstance(cards, str):
        s = cards.strip()
        if not s:
            return []
        if " " in s or "," in s:
            return [Card.from_str(c) for c in s.replace(",", " ").split()]
        if len(s) % 2 != 0:
            raise ValueError(f"Invalid card string: '{s}' (odd length)")
        return [Card.from_str(s[i:i + 2]) for i in range(0, len(s), 2)]
    return [c if isinstance(c, Card) else Card.from_str(c) for c in cards]


def create_deck() -> list[Card]:
    """Return the 52 cards, suit-major (s, h, d, c) then ace down to deuce."""
    return [Card(rank=rank, suit=suit) for suit in Suit for rank in reversed(Rank)]


def shuffle_deck(
    deck: Sequence[Card], rng: random.Random | None = None
) -> list[Card]:
    """Return a uniformly shuffled copy of the deck (Fisher-Yates)."""
    rng = rng or random.Random()
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def remove_cards(deck: Sequence[Card], to_remove: Iterable[Card]) -> list[Card]:
    """Return the deck without any of ``to_remove``, keeping survivor order."""
    dead = set(to_remove)
    return [c for c in deck if c not in dead]


def deal_cards(
    deck: Sequence[Card], count: int, rng: random.Random | None = None
) -> tuple[list[Card], list[Card]]:
    """Shuffle and split the deck into (dealt, remaining).

    Raises:
        ValueError: If not enough cards remain.
    """
    if count > len(deck):
        raise ValueError(f"Cannot deal {count} cards, only {len(deck)} remaining")
    shuffled = shuffle_deck(deck, rng)
    return shuffled[:count], shuffled[count:]


@dataclass(frozen=True)
class PostflopScenario:
    """A hero hand plus a full runout, revealed street by street."""

    hero_hand: tuple[Card, Card]
    flop: tuple[Card, Card, Card]
    turn: Card
    river: Card

    def board_for(self, street: Street) -> list[Card]:
        """Community cards visible on the given street."""
        runout = [*self.flop, self.turn, self.river]
        return runout[:STREET_BOARD_SIZE[street]]


def deal_postflop_scenario(rng: random.Random | None = None) -> PostflopScenario:
    """Deal hero's hole cards, flop, turn and river from a fresh deck."""
    deck = shuffle_deck(create_deck(), rng)
    return PostflopScenario(
        hero_hand=(deck[0], deck[1]),
        flop=(deck[2], deck[3], deck[4]),
        turn=deck[5],
        river=deck[6],
    )
