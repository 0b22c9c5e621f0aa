from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class CriticalPoint:
    """
    Breakpoint of a piecewise-linear cost curve.

    ``x`` is the operating quantity (e.g. kW) and ``cost`` the price at that
    point. Ordering compares ``x`` first.
    """
    x: float
    cost: float = 0.0
