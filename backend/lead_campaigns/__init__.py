"""
Lead acquisition campaign engine.
"""
__version__ = "1.0.0"
