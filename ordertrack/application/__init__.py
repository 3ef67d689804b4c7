"""Application services."""

from .orders import OrderBoardService, get_order_service, reset_order_state

__all__ = [
    "OrderBoardService",
    "get_order_service",
    "reset_order_state",
]
