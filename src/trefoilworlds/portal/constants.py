"""
Membrane Constants
==================
The single set of numbers shared by the host-side transition engine and the
shading replica. Both execution paths must classify the same geometric input
identically, so nothing in the portal package re-derives these values locally.

The boundary of the trefoil portal is parameterized by

    (sin(s) + 2 sin(2s), cos(s) - 2 cos(2s), sin(3s))

Its projection onto the xy-plane is the solution set of

    4 rr rr - 12 rr y + 16 y y y - 27 rr + 27 = 0      (rr == x x + y y)

and the knot lies on the (topological) torus

    z z = 1 - (rr - 5)^2 / 16

The xy-plane is divided into twelve regions by four inequalities:

    1.) x > 0
    2.) x < y sqrt(3)
    3.) x < -y sqrt(3)
    4.) r > 1.5

For a point on the trefoil, z is positive whenever an even number of them hold.
They also tell which arc of the knot diagram contains the point:

                           |  (4) holds  | (4) doesn't
    -----------------------+-------------+------------
    (2) holds, (1) doesn't |    Arc A    |    Arc C
    (1) holds, (3) doesn't |    Arc B    |    Arc A
    (3) holds, (2) doesn't |    Arc C    |    Arc B

(A = top left, B = right, C = bottom)

Passing under an arc switches worlds by reflecting the world index through the
arc's label: world -> label - world (mod 6).

          [1] ---C--- [2]
          / \         / \
         A   B       A   B
        /     \     /     \
    [0] ---C---\---/---C--- [3]
        \     / \ /     /
         B   A   X     A
          \ /     \   /
          [5] ---C--- [4]
"""
from __future__ import annotations

import math
from enum import IntEnum

NUM_WORLDS: int = 6

SQRT_3: float = math.sqrt(3.0)

# Projected outline: 4 rr^2 - 12 rr y + 16 y^3 - 27 rr + 27
OUTLINE_RR2: float = 4.0
OUTLINE_RRY: float = 12.0
OUTLINE_Y3: float = 16.0
OUTLINE_RR: float = 27.0
OUTLINE_CONST: float = 27.0

# Torus carrying the knot: zz = 1 - (rr - TORUS_RR_CENTER)^2 / TORUS_RR_SCALE
TORUS_RR_CENTER: float = 5.0
TORUS_RR_SCALE: float = 16.0

# Test (4) uses r > 1.5, compared squared
INNER_RR: float = 2.25

# Offset added to the arc label when test (4) fails
INNER_ARC_OFFSET: int = 2

# Squared resolvent root below which the quartic's pivot t is taken as zero
PIVOT_EPSILON: float = 1e-12


class Arc(IntEnum):
    """Base transition labels of the three strands of the knot diagram."""
    A = 1
    C = 3
    B = 5


def arc_of_label(label: int) -> Arc:
    """
    Return the strand a transition label belongs to.

    Inside r = 1.5 each sector holds the next strand, which is what the inner
    offset encodes. Labels only matter mod 6, so 7 (sector of arc B, inside
    the disk) is arc A.
    """
    if label not in (1, 3, 5, 7):
        raise ValueError(f"Not an arc label: {label}. Expected one of 1, 3, 5, 7.")
    return Arc(label % NUM_WORLDS)
