"""
Exceptions raised for caller-supplied input the simulation rejects.

All of them are raised before any state changes, so the simulation can
always continue after one is reported.
"""


class SimulationError(Exception):
    """Base class for recoverable simulation input errors"""
    pass


class InvalidCommand(SimulationError):
    """Unknown planet or resource name, or a non-numeric amount"""
    pass


class OutOfRangeParameter(SimulationError):
    """Numeric parameter outside its allowed range (e.g. day count <= 0)"""
    pass
