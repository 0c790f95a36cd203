"""
Client-side real-time support.

Routes server events into a query cache so cached results are refetched
after the data behind them changes.
"""

from exteriorcrm.client.cache import QueryCache, QueryKey
from exteriorcrm.client.http import CRMClient
from exteriorcrm.client.listener import EventListener
from exteriorcrm.client.router import INVALIDATION_RULES, ClientEventRouter, RoutedMessage

__all__ = [
    "INVALIDATION_RULES",
    "CRMClient",
    "ClientEventRouter",
    "EventListener",
    "QueryCache",
    "QueryKey",
    "RoutedMessage",
]
