"""
Tactical Position Analysis.

Scores the tiles of a generated battlemap so adversary groups can be seated
on defensible or flanking positions.

Modules:
- position_scorer: Cover, flanking and mobility scoring of grid tiles
"""
from .position_scorer import (
    TacticalPosition,
    TacticalPositionScorer,
    tactical_tags,
    tactical_value,
)

__all__ = [
    'TacticalPosition',
    'TacticalPositionScorer',
    'tactical_tags',
    'tactical_value',
]
