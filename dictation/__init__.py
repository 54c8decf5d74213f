"""
Dictation Solar System Simulation

A deterministic, headless resource-management simulation. The player moves
water, food, energy and people between orbiting planets; each day the
planets mine, consume and grow, and standing transfers carry resources
between them.

Architecture: the simulation is the source of truth. Presenters are consumers.
"""

__version__ = "0.1.0"
