"""
Trefoil Worlds: six worlds glued along a knotted membrane.

Entities move through one shared ambient space; whenever a straight-line step
passes underneath the trefoil-shaped membrane, the entity's world index is
reflected through the label of the arc it passed under.
"""
from trefoilworlds.portal.travel import Crossing, find_crossings, travel

__version__ = "0.1.0"

__all__ = [
    "Crossing",
    "find_crossings",
    "travel",
]
