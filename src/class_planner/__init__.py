"""Reformer class planner: sequence exercises into a timed class plan."""

__version__ = "0.1.0"
