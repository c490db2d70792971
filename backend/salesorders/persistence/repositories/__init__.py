# =============================================================================
# SALES ORDERS v1.0 - REPOSITORIES
# =============================================================================

from .base import BaseRepository
from .orders import OrdersRepository, orders_repository

__all__ = [
    'BaseRepository',
    'OrdersRepository',
    'orders_repository',
]
