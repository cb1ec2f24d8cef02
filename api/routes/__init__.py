"""API routes package"""

from . import users, meals, nutrition, goals, health

__all__ = ["users", "meals", "nutrition", "goals", "health"]
