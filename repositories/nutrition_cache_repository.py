"""
Nutrition Cache Repository - stores validated estimates by normalized description
"""

from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import NutritionCacheEntry, utcnow


class NutritionCacheRepository(BaseRepository[NutritionCacheEntry]):
    """Repository for cached nutrition estimates"""

    def __init__(self, db: Session):
        super().__init__(db, NutritionCacheEntry)

    def get_by_id(self, cache_key: str) -> Optional[NutritionCacheEntry]:
        """Get cache entry by key"""
        return (
            self.db.query(NutritionCacheEntry)
            .filter(NutritionCacheEntry.cache_key == cache_key)
            .first()
        )

    def get_fresh(self, cache_key: str, not_before: datetime) -> Optional[NutritionCacheEntry]:
        """Get the entry for a key if it was stored at or after ``not_before``"""
        return (
            self.db.query(NutritionCacheEntry)
            .filter(
                NutritionCacheEntry.cache_key == cache_key,
                NutritionCacheEntry.created_at >= not_before,
            )
            .first()
        )

    def store(
        self, cache_key: str, description: str, quantity: Optional[str], payload: str
    ) -> NutritionCacheEntry:
        """Insert or overwrite the entry for a key"""
        entry = self.get_by_id(cache_key)
        if entry is None:
            entry = NutritionCacheEntry(cache_key=cache_key)
            self.db.add(entry)
        entry.description = description
        entry.quantity = quantity
        entry.payload = payload
        entry.created_at = utcnow()
        self.db.commit()
        return entry
