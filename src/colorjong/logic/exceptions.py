"""Typed domain exceptions for game rule violations.

Domain functions (turn.py, reach.py, wall.py) raise subclasses of
GameRuleError when an action breaks the rules. The reducer in
action_handlers.py catches them and returns the state unchanged, so no
exception crosses a transition.
"""


class GameRuleError(Exception):
    """Base exception for game rule violations."""


class InvalidActionError(GameRuleError):
    """Action is not valid in the current phase or for the acting seat."""


class InvalidDiscardError(GameRuleError):
    """Tile cannot be discarded (not in hand, reach restriction, etc.)."""


class InvalidReachError(GameRuleError):
    """Reach declaration conditions not met."""


class InvalidRuleError(GameRuleError):
    """Rule entry cannot be normalized into a playable rule set."""
