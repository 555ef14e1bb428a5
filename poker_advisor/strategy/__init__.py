"""Board reading, ranges and postflop advice.

Key public API:
    analyze_board      -- Board texture (wetness, draws, danger level)
    recommend          -- Rule-table postflop recommendation
    Recommendation     -- Advised action, sizing, confidence, reasoning
    expand_range       -- Hand tokens to concrete, unblocked combos
    OPENING_RANGES     -- Preflop raise frequencies by seat
"""

from poker_advisor.strategy.board_analyzer import BoardTexture, analyze_board
from poker_advisor.strategy.postflop_rules import Recommendation, recommend
from poker_advisor.strategy.preflop_ranges import (
    OPENING_RANGES,
    expand_hand_notation,
    expand_range,
    get_opening_strategy,
)

__all__ = [
    "BoardTexture",
    "analyze_board",
    "Recommendation",
    "recommend",
    "OPENING_RANGES",
    "expand_hand_notation",
    "expand_range",
    "get_opening_strategy",
]
