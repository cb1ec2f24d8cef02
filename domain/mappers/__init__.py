"""
Domain mappers package.
Handles transformation between ORM models and DTOs (Data Transfer Objects).
"""

from domain.mappers.meal_mapper import MealMapper
from domain.mappers.summary_mapper import SummaryMapper

__all__ = ["MealMapper", "SummaryMapper"]
