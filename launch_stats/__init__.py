"""
Launch statistics service: aggregates SpaceX launch history into chart-ready views.
"""

__version__ = "1.0.0"
