"""
The PORTAL layer holds the crossing math: the closed-form polynomial solver,
the membrane classifier and the transition engine, plus the array replica used
for shading. It has no knowledge of entities or visualization.
"""
