"""
The MODEL layer contains the entities and the scene geometry.
It has NO knowledge of the Visualization (PyVista).
"""
