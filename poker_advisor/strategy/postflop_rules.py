"""Rule-based postflop recommendation engine.

A decision table, not a search. Rules are ordered by hand-strength tier,
then refined by facing-bet, board danger, street, position and draw flags.
The first rule whose condition holds decides the action, sizing and a
fixed confidence.

Architecture:
  hand strength + BoardTexture + Position + Street + facing_bet
    → Spot
    → first matching Rule in RULES
    → Recommendation(action, sizing, confidence, reasoning, rule)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from poker_advisor.core.hand_evaluator import strength_tier
from poker_advisor.strategy.board_analyzer import BoardTexture, describe_board
from poker_advisor.utils.constants import (
    BetSizing,
    DangerLevel,
    Position,
    PostflopAction,
    Street,
    StrengthTier,
)

logger = logging.getLogger("poker_advisor.rules")


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Recommendation:
    """The engine's advised action with reasoning."""

    action: PostflopAction
    sizing: BetSizing | None  # Only for bet and raise
    confidence: float  # [0, 1]
    reasoning: str
    rule: str = ""  # Name of the rule that fired


@dataclass(frozen=True)
class Spot:
    """Everything a rule may look at."""

    strength: float
    texture: BoardTexture
    position: Position
    street: Street
    facing_bet: bool

    @property
    def tier(self) -> StrengthTier:
        return strength_tier(self.strength)

    @property
    def danger(self) -> DangerLevel:
        return self.texture.danger_level

    @property
    def draws_complete(self) -> bool:
        return self.texture.has_draw_completion

    @property
    def in_position(self) -> bool:
        return self.position == Position.IP

    @property
    def board(self) -> str:
        return describe_board(self.texture)

    @property
    def where(self) -> str:
        if self.in_position:
            return "in position (acting last)"
        return "out of position (acting first)"

    @property
    def street_name(self) -> str:
        return self.street.value.capitalize()


@dataclass(frozen=True)
class Rule:
    """One row of the decision table."""

    name: str
    when: Callable[[Spot], bool]
    action: PostflopAction
    confidence: float
    explain: Callable[[Spot], str]
    sizing: BetSizing | Callable[[Spot], BetSizing] | None = None

    def sizing_for(self, spot: Spot) -> BetSizing | None:
        if callable(self.sizing):
            return self.sizing(spot)
        return self.sizing


# ---------------------------------------------------------------------------
# Decision table
# ---------------------------------------------------------------------------

_MONSTER = StrengthTier.MONSTER
_STRONG = StrengthTier.STRONG
_MEDIUM = StrengthTier.MEDIUM
_WEAK = StrengthTier.WEAK
_AIR = StrengthTier.AIR


def _facing(tier: StrengthTier, extra: Callable[[Spot], bool] | None = None):
    def check(spot: Spot) -> bool:
        if not spot.facing_bet or spot.tier != tier:
            return False
        return extra is None or extra(spot)
    return check


def _unopened(tier: StrengthTier, extra: Callable[[Spot], bool] | None = None):
    def check(spot: Spot) -> bool:
        if spot.facing_bet or spot.tier != tier:
            return False
        return extra is None or extra(spot)
    return check


def _strong_call_reason(s: Spot) -> str:
    reason = (
        f"Strong hand, but the {s.board} board carries enough risk that "
        f"calling keeps the pot manageable."
    )
    if s.in_position:
        reason += " Being in position lets you control the size of later streets."
    return reason


def _medium_call_reason(s: Spot) -> str:
    reason = (
        f"Medium strength on the {s.street_name}, {s.where}. Good enough "
        f"to call a bet but not to raise."
    )
    if s.street == Street.RIVER:
        return reason + " At showdown it wins often enough to pay off one bet."
    return reason + " Re-evaluate when the next card and villain's action come."


def _drawing_call_reason(s: Spot) -> str:
    reason = (
        f"Weak made hand, but the {s.board} board leaves enough "
        f"possibilities to justify a call at the right price."
    )
    if s.street == Street.RIVER:
        return reason + " With no cards to come the call is marginal."
    return reason + " With cards still to come you can realize that equity."


def _float_reason(s: Spot) -> str:
    reason = (
        f"No made hand, but the {s.board} board gives you something to "
        f"continue with if the price is right."
    )
    if s.street == Street.RIVER:
        return reason + (
            " On the river a draw is worth nothing unless it is already made."
        )
    return reason + " Count your outs against the pot odds before calling."


def _monster_bet_reason(s: Spot) -> str:
    reason = f"Very strong hand on a {s.board} board. Build the pot."
    if s.texture.wetness > 0.4:
        reason += (
            " Draws are around, so bet large to charge them and get calls "
            "from second-best hands."
        )
    else:
        reason += (
            " The board is dry, so a medium size keeps villain's calling "
            "range wide."
        )
    if s.in_position:
        return reason + (
            " You could check to trap, but betting extracts value more reliably."
        )
    return reason + (
        " Leading out denies a free card and puts the decision on villain."
    )


def _protect_reason(s: Spot) -> str:
    reason = (
        f"Strong hand on a dangerous {s.board} board. Bet big to charge "
        f"draws and still get called by worse made hands."
    )
    if s.street == Street.FLOP:
        return reason + " With two cards to come, free cards are costly."
    return reason + (
        " One card remains, so charge the draws before they hit or miss."
    )


def _strong_bet_reason(s: Spot) -> str:
    reason = f"Strong hand {s.where}. A medium bet gets value from worse hands"
    if s.in_position:
        return reason + ", and you can call a check-raise or bet again when called."
    return reason + (
        " and takes the initiative so villain can't realize equity for free."
    )


def _thin_value_reason(s: Spot) -> str:
    reason = (
        f"Medium strength on a {s.board} board. Bet for thin value on "
        f"the {s.street_name}."
    )
    if s.texture.is_paired:
        reason += " The paired board makes full houses possible, so keep it small."
    if s.in_position:
        return reason + " Position lets you control the action if villain raises."
    return reason + " It still pays despite acting first."


def _semi_bluff_reason(s: Spot) -> str:
    reason = (
        f"No made hand, but the {s.board} board makes a medium bluff "
        f"believable."
    )
    if s.street == Street.FLOP:
        return reason + " Two streets remain to complete a draw if called."
    if s.street == Street.TURN:
        return reason + (
            " The turn is the last chance to win with fold equity before "
            "the river."
        )
    return reason + " Any draw has missed by the river, so this is a pure bluff."


RULES: tuple[Rule, ...] = (
    # Facing a bet
    Rule(
        name="monster_raise",
        when=_facing(_MONSTER),
        action=PostflopAction.RAISE,
        sizing=BetSizing.LARGE,
        confidence=0.9,
        explain=lambda s: (
            f"Very strong hand on a {s.board} board. Raise big for value "
            f"while worse hands can still pay you off."
        ),
    ),
    Rule(
        name="strong_raise_safe_board",
        when=_facing(_STRONG, lambda s: s.danger == DangerLevel.SAFE),
        action=PostflopAction.RAISE,
        sizing=BetSizing.MEDIUM,
        confidence=0.75,
        explain=lambda s: (
            f"Strong hand on a {s.board} board with little to fear. "
            f"Raise for value and to deny cheap cards."
        ),
    ),
    Rule(
        name="strong_call",
        when=_facing(_STRONG),
        action=PostflopAction.CALL,
        confidence=0.8,
        explain=_strong_call_reason,
    ),
    Rule(
        name="medium_fold_dangerous_river",
        when=_facing(
            _MEDIUM,
            lambda s: s.street == Street.RIVER and s.danger == DangerLevel.DANGEROUS,
        ),
        action=PostflopAction.FOLD,
        confidence=0.55,
        explain=lambda s: (
            f"Medium strength on a {s.board} river. A bet here usually means "
            f"a draw got there, so let it go."
        ),
    ),
    Rule(
        name="medium_call",
        when=_facing(_MEDIUM),
        action=PostflopAction.CALL,
        confidence=0.65,
        explain=_medium_call_reason,
    ),
    Rule(
        name="weak_call_with_draws",
        when=_facing(_WEAK, lambda s: s.draws_complete),
        action=PostflopAction.CALL,
        confidence=0.5,
        explain=_drawing_call_reason,
    ),
    Rule(
        name="weak_fold_river",
        when=_facing(_WEAK, lambda s: s.street == Street.RIVER),
        action=PostflopAction.FOLD,
        confidence=0.7,
        explain=lambda s: (
            "Weak hand facing a river bet with nothing left to draw to. Fold."
        ),
    ),
    Rule(
        name="weak_fold",
        when=_facing(_WEAK),
        action=PostflopAction.FOLD,
        confidence=0.6,
        explain=lambda s: (
            f"Weak hand facing a bet on the {s.street_name}. Folding avoids "
            f"paying off better hands."
        ),
    ),
    Rule(
        name="air_float_draws",
        when=_facing(_AIR, lambda s: s.draws_complete),
        action=PostflopAction.CALL,
        confidence=0.45,
        explain=_float_reason,
    ),
    Rule(
        name="air_fold",
        when=_facing(_AIR),
        action=PostflopAction.FOLD,
        confidence=0.75,
        explain=lambda s: "Nothing to continue with against a bet. Fold.",
    ),
    # Checked to hero, or hero acts first
    Rule(
        name="monster_value_bet",
        when=_unopened(_MONSTER),
        action=PostflopAction.BET,
        sizing=lambda s: (
            BetSizing.LARGE if s.texture.wetness > 0.4 else BetSizing.MEDIUM
        ),
        confidence=0.9,
        explain=_monster_bet_reason,
    ),
    Rule(
        name="strong_protect_dangerous",
        when=_unopened(
            _STRONG,
            lambda s: s.danger == DangerLevel.DANGEROUS and s.street != Street.RIVER,
        ),
        action=PostflopAction.BET,
        sizing=BetSizing.LARGE,
        confidence=0.8,
        explain=_protect_reason,
    ),
    Rule(
        name="strong_value_bet",
        when=_unopened(_STRONG),
        action=PostflopAction.BET,
        sizing=BetSizing.MEDIUM,
        confidence=0.85,
        explain=_strong_bet_reason,
    ),
    Rule(
        name="medium_pot_control_ip",
        when=_unopened(
            _MEDIUM,
            lambda s: s.danger == DangerLevel.DANGEROUS and s.in_position,
        ),
        action=PostflopAction.CHECK,
        confidence=0.6,
        explain=lambda s: (
            f"Medium strength on a {s.board} board. Check behind {s.where} "
            f"to keep the pot small."
        ),
    ),
    Rule(
        name="medium_small_bet_dangerous",
        when=_unopened(_MEDIUM, lambda s: s.danger == DangerLevel.DANGEROUS),
        action=PostflopAction.BET,
        sizing=BetSizing.SMALL,
        confidence=0.55,
        explain=lambda s: (
            f"Medium strength {s.where} on a {s.board} board. A small bet "
            f"sets the price instead of giving free cards."
        ),
    ),
    Rule(
        name="medium_value_bet",
        when=_unopened(_MEDIUM),
        action=PostflopAction.BET,
        sizing=lambda s: (
            BetSizing.SMALL if s.texture.is_paired else BetSizing.MEDIUM
        ),
        confidence=0.7,
        explain=_thin_value_reason,
    ),
    Rule(
        name="weak_check_ip",
        when=_unopened(_WEAK, lambda s: s.in_position),
        action=PostflopAction.CHECK,
        confidence=0.7,
        explain=lambda s: (
            f"Weak hand {s.where}. Take the free card and see the next street."
        ),
    ),
    Rule(
        name="weak_stab_dry",
        when=_unopened(
            _WEAK,
            lambda s: s.texture.wetness < 0.3 and not s.draws_complete,
        ),
        action=PostflopAction.BET,
        sizing=BetSizing.SMALL,
        confidence=0.5,
        explain=lambda s: (
            f"Weak hand on a dry {s.board} board. A small stab can take the "
            f"pot down."
        ),
    ),
    Rule(
        name="weak_check",
        when=_unopened(_WEAK),
        action=PostflopAction.CHECK,
        confidence=0.65,
        explain=lambda s: (
            f"Weak hand {s.where} on a {s.board} board. Check and keep the "
            f"pot small."
        ),
    ),
    Rule(
        name="air_give_up_wet_flop",
        when=_unopened(
            _AIR,
            lambda s: (
                not s.in_position
                and s.street == Street.FLOP
                and s.texture.wetness > 0.4
            ),
        ),
        action=PostflopAction.CHECK,
        confidence=0.75,
        explain=lambda s: (
            f"Nothing on a wet {s.board} flop {s.where}. Check and give up "
            f"unless you improve."
        ),
    ),
    Rule(
        name="air_semi_bluff",
        when=_unopened(_AIR, lambda s: s.draws_complete),
        action=PostflopAction.BET,
        sizing=BetSizing.MEDIUM,
        confidence=0.4,
        explain=_semi_bluff_reason,
    ),
    Rule(
        name="air_check",
        when=_unopened(_AIR),
        action=PostflopAction.CHECK,
        confidence=0.6,
        explain=lambda s: (
            f"Nothing to bet for value on the {s.street_name}. Check."
        ),
    ),
)


def recommend(
    hand_strength: float,
    texture: BoardTexture,
    position: Position,
    street: Street,
    facing_bet: bool = False,
) -> Recommendation:
    """Advise a postflop action from the decision table.

    Args:
        hand_strength: Made-hand strength in [0, 1].
        texture: Board texture from analyze_board.
        position: IP or OOP relative to the opponent.
        street: Flop, turn or river.
        facing_bet: Whether hero is facing a bet.

    Returns:
        Recommendation from the first matching rule.
    """
    spot = Spot(hand_strength, texture, position, street, facing_bet)
    rule = next(r for r in RULES if r.when(spot))
    sizing = None
    if rule.action in (PostflopAction.BET, PostflopAction.RAISE):
        sizing = rule.sizing_for(spot)

    logger.debug(
        "%s %.2f %s %s facing_bet=%s -> %s (%s)",
        spot.tier, hand_strength, position, street, facing_bet,
        rule.action, rule.name,
    )
    return Recommendation(
        action=rule.action,
        sizing=sizing,
        confidence=rule.confidence,
        reasoning=rule.explain(spot),
        rule=rule.name,
    )
