"""
Broadcast of course change messages to subscribers.
"""

import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


Receiver = Callable[[str], None]


class NotificationHub:
    """Delivers text messages to subscribers in subscription order.

    Subscribers are keyed by id, so subscribing the same id twice keeps a
    single delivery slot. Delivery is synchronous and best-effort: a receiver
    that raises is logged and skipped, and the rest still get the message.
    """
    
    def __init__(self):
        self._subscribers: Dict[str, Receiver] = {}
    
    def subscribe(self, subscriber_id: str, receiver: Receiver) -> None:
        self._subscribers[subscriber_id] = receiver
    
    def unsubscribe(self, subscriber_id: str) -> None:
        self._subscribers.pop(subscriber_id, None)
    
    def notify(self, message: str) -> int:
        """Send a message to every current subscriber; return the number delivered."""
        delivered = 0
        # Snapshot so a receiver may (un)subscribe while being notified.
        for subscriber_id, receiver in list(self._subscribers.items()):
            try:
                receiver(message)
            except Exception:
                logger.exception("Delivery to subscriber %s failed", subscriber_id)
            else:
                delivered += 1
        return delivered
    
    def subscribers(self) -> List[str]:
        return list(self._subscribers)
    
    def __contains__(self, subscriber_id: str) -> bool:
        return subscriber_id in self._subscribers
    
    def __len__(self) -> int:
        return len(self._subscribers)
