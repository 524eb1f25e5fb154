"""
TOU Household Energy Simulator

Estimates what a household's appliances cost and emit under a Time-of-Use
tariff and recommends the cheapest hours to run them.
"""

from energysim.optimization.simulator import HouseholdSimulator
from energysim.history import ComparisonHistory, ComparisonSnapshot

__all__ = [
    "HouseholdSimulator",
    "ComparisonHistory",
    "ComparisonSnapshot",
]

__version__ = "1.0.0"
