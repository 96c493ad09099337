from ember_combat.sim.content.registry import ContentRegistry

__all__ = ["ContentRegistry"]
