"""Play agent implementations for headless battle simulation.

Re-exports the base class and all concrete agents so consumers can do::

    from ember_combat.sim.play_agents import PlayAgent, RandomAgent
"""

from .base import PlayAgent
from .heuristic_agent import HeuristicAgent
from .random_agent import RandomAgent

__all__ = ["HeuristicAgent", "PlayAgent", "RandomAgent"]
