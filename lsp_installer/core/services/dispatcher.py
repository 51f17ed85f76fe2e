"""
ReadyDispatcher — "server is ready" pub/sub with replay-on-subscribe.

Consumers register a callback once and are told about every server
that is (or becomes) installed and usable:

- ``register()`` stores the callback and schedules a replay of the
  servers installed right now.  The replay runs on the next scheduler
  drain, never inside ``register()`` itself.
- ``dispatch()`` delivers a freshly installed server to every
  registered callback.

Delivery model
──────────────
Each subscription remembers the server names it has been shown.  Replay
and live dispatch both go through ``_deliver()``, which skips names
already delivered, so a callback sees each ready server exactly once no
matter how replay and live installs interleave.  ``forget()`` clears a
name after the server is uninstalled so a reinstall is delivered again.

A callback that raises is logged and does not stop delivery to the
other subscribers.  Subscriptions live as long as the dispatcher.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from lsp_installer.core.engine.scheduler import Scheduler

if TYPE_CHECKING:
    from lsp_installer.adapters.base import Server

logger = logging.getLogger(__name__)

ReadyCallback = Callable[["Server"], None]


@dataclass
class Subscription:
    token: int
    callback: ReadyCallback
    delivered: set[str] = field(default_factory=set)


class ReadyDispatcher:
    """Delivers ready events to registered callbacks, once per server each."""

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._lock = threading.Lock()
        self._tokens = itertools.count(1)
        self._subscriptions: dict[int, Subscription] = {}

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def register(
        self,
        callback: ReadyCallback,
        installed_servers: Callable[[], Iterable[Server]] | None = None,
    ) -> int:
        """Add a subscriber and schedule the replay of installed servers.

        Args:
            callback: Called with each ready server.
            installed_servers: Returns the currently installed servers.
                Evaluated when the replay runs, not at registration.

        Returns:
            The subscription token.
        """
        with self._lock:
            token = next(self._tokens)
            sub = Subscription(token=token, callback=callback)
            self._subscriptions[token] = sub

        if installed_servers is not None:
            self._scheduler.schedule(lambda: self._replay(sub, installed_servers))

        logger.debug("Registered ready callback #%d", token)
        return token

    def dispatch(self, server: Server) -> int:
        """Deliver ``server`` to every subscriber that has not seen it.

        Returns the number of callbacks invoked.
        """
        with self._lock:
            subs = list(self._subscriptions.values())
        delivered = sum(1 for sub in subs if self._deliver(sub, server))
        logger.debug("Dispatched ready event for %s to %d callbacks", server.name, delivered)
        return delivered

    def forget(self, server_name: str) -> None:
        """Allow ``server_name`` to be delivered again (after uninstall)."""
        with self._lock:
            for sub in self._subscriptions.values():
                sub.delivered.discard(server_name)

    def forget_all(self) -> None:
        with self._lock:
            for sub in self._subscriptions.values():
                sub.delivered.clear()

    def _replay(self, sub: Subscription, installed_servers: Callable[[], Iterable[Server]]) -> None:
        servers = list(installed_servers())
        logger.debug("Replaying %d installed servers to callback #%d", len(servers), sub.token)
        for server in servers:
            self._deliver(sub, server)

    def _deliver(self, sub: Subscription, server: Server) -> bool:
        with self._lock:
            if server.name in sub.delivered:
                return False
            sub.delivered.add(server.name)
        try:
            sub.callback(server)
        except Exception:
            logger.exception("Ready callback #%d failed for %s", sub.token, server.name)
        return True
