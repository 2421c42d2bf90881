"""
Services Module

Business logic behind the payment and redemption endpoints:
- catalog / code_generator: static plan data, code format
- code_store: order and code persistence (database or JSON files)
- orders: order lifecycle (create, admin confirm, cancel, query)
- redemption: code -> subscription activation
- notifier: redemption code mail (Resend)
- limits: per-tier feature limits and effective subscription status
- subscriptions: user-initiated subscription cancellation
"""

from .code_store import CodeStore, DbCodeStore, JsonFileCodeStore, get_code_store
from .orders import OrderService
from .redemption import RedemptionService

__all__ = [
    "CodeStore",
    "DbCodeStore",
    "JsonFileCodeStore",
    "get_code_store",
    "OrderService",
    "RedemptionService",
]
