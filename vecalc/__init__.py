"""Interactive scalar/vector calculator."""

from vecalc.commands import Calculator
from vecalc.errors import CalculatorError
from vecalc.session import Session
from vecalc.values import Number, Value, Vector

__version__ = "0.1.0"

__all__ = ["Calculator", "CalculatorError", "Number", "Session", "Value", "Vector"]
