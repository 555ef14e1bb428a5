"""Constants for the poker advisor."""

from enum import IntEnum, StrEnum


class Suit(StrEnum):
    SPADES = "s"
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"


class Rank(StrEnum):
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "T"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"


RANK_VALUES: dict[Rank, int] = {
    Rank.TWO: 2,
    Rank.THREE: 3,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.EIGHT: 8,
    Rank.NINE: 9,
    Rank.TEN: 10,
    Rank.JACK: 11,
    Rank.QUEEN: 12,
    Rank.KING: 13,
    Rank.ACE: 14,
}

VALUE_RANKS: dict[int, Rank] = {v: r for r, v in RANK_VALUES.items()}

# Plural names for hand descriptions ("Pair of Sixes")
RANK_PLURALS: dict[Rank, str] = {
    Rank.TWO: "Twos",
    Rank.THREE: "Threes",
    Rank.FOUR: "Fours",
    Rank.FIVE: "Fives",
    Rank.SIX: "Sixes",
    Rank.SEVEN: "Sevens",
    Rank.EIGHT: "Eights",
    Rank.NINE: "Nines",
    Rank.TEN: "Tens",
    Rank.JACK: "Jacks",
    Rank.QUEEN: "Queens",
    Rank.KING: "Kings",
    Rank.ACE: "Aces",
}

BROADWAY_RANKS: frozenset[Rank] = frozenset(
    {Rank.ACE, Rank.KING, Rank.QUEEN, Rank.JACK, Rank.TEN}
)


class HandRanking(IntEnum):
    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10

    @property
    def slug(self) -> str:
        """Lowercase identifier, e.g. 'three_of_a_kind'."""
        return self.name.lower()


class StrengthTier(StrEnum):
    """Hand-strength buckets used by the recommendation table."""

    MONSTER = "Monster"
    STRONG = "Strong"
    MEDIUM = "Medium"
    WEAK = "Weak"
    AIR = "Bluff"


class Position(StrEnum):
    """Relative postflop position."""

    IP = "IP"
    OOP = "OOP"


class TablePosition(StrEnum):
    """6-max seat, used by the opening-range tables."""

    UTG = "UTG"
    HJ = "HJ"
    CO = "CO"
    BTN = "BTN"
    SB = "SB"
    BB = "BB"


class Street(StrEnum):
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"


# Board size once a street has been dealt
STREET_BOARD_SIZE: dict[Street, int] = {
    Street.PREFLOP: 0,
    Street.FLOP: 3,
    Street.TURN: 4,
    Street.RIVER: 5,
}


class PostflopAction(StrEnum):
    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    BET = "bet"
    RAISE = "raise"

    @property
    def aggression(self) -> int:
        """Ordering fold < check < call < bet < raise."""
        return _AGGRESSION[self]


_AGGRESSION: dict[PostflopAction, int] = {
    PostflopAction.FOLD: 0,
    PostflopAction.CHECK: 1,
    PostflopAction.CALL: 2,
    PostflopAction.BET: 3,
    PostflopAction.RAISE: 4,
}


class BetSizing(StrEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class DangerLevel(StrEnum):
    SAFE = "safe"
    MODERATE = "moderate"
    DANGEROUS = "dangerous"


class PreflopAction(StrEnum):
    RAISE = "Raise"
    CALL = "Call"
    FOLD = "Fold"
