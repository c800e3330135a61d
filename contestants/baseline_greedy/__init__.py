"""
Baseline Greedy Agent Package

A heuristic agent that steers toward the item while avoiding walls and its
own body. Serves as a benchmark and example.
"""

from .agent import SnakeAgent

__all__ = ["SnakeAgent"]
