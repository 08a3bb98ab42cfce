"""
Domain Repository Interfaces

Abstract repository interfaces that define the contract for data persistence.
Implementations work with fully built PromotionApplication aggregates; turning
stored or wire data into aggregates is the implementation's concern.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import PromotionApplication


class PromotionApplicationRepositoryInterface(ABC):
    """
    Repository interface for the PromotionApplication aggregate.

    Callers load, mutate and save one application per unit of work.
    """

    @abstractmethod
    async def save(self, application: PromotionApplication) -> PromotionApplication:
        """Save an application (create or update)."""
        pass

    @abstractmethod
    async def find_by_id(self, apply_seq: int) -> Optional[PromotionApplication]:
        """Get an application by its apply sequence, or None."""
        pass

    @abstractmethod
    async def find_all(self) -> List[PromotionApplication]:
        """Get every stored application."""
        pass

    @abstractmethod
    async def delete(self, apply_seq: int) -> bool:
        """Delete an application. Returns False when nothing was deleted."""
        pass
