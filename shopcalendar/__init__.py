"""
Shop availability and special-date scheduling engine.
"""

__version__ = "0.1.0"
