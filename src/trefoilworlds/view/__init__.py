"""
The VIEW layer turns the model into PyVista objects for display.
"""
