"""
Reconnection policy for the cache store.

The cache client calls the policy after every failed connection attempt and
acts on the returned decision. The policy is a pure function of the context it
receives, so one instance can be shared by any number of clients.

Decision order (first match wins):

1. Connection refused by the server: stop, the address is wrong.
2. Retrying for longer than an hour: stop.
3. Connected successfully more than 10 times already: hand back to the
   client's built-in terminal behaviour, the link is flapping.
4. Otherwise wait ``attempt * 100`` ms, never less than 3 seconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from codepush.exceptions import CacheStoreReconnectError
from codepush.utils.logging import get_logger

logger = get_logger("codepush.config.reconnect")

CONNECTION_REFUSED = "ECONNREFUSED"


class ReconnectAction(str, Enum):
    """What the cache client should do after a failed connection."""

    STOP = "stop"  # fatal, flush pending commands with the decision's reason
    DEFAULT = "default"  # defer to the client's built-in terminal behaviour
    RETRY = "retry"  # reconnect after delay_ms


@dataclass(frozen=True)
class ReconnectContext:
    """State reported by the cache client for one failed connection."""

    attempt: int = 1
    error_code: str | None = None
    total_retry_time_ms: float = 0
    times_connected: int = 0


@dataclass(frozen=True)
class ReconnectDecision:
    """Outcome of a ``ReconnectPolicy`` call."""

    action: ReconnectAction
    delay_ms: int | None = None
    reason: str | None = None

    @property
    def should_retry(self) -> bool:
        return self.action is ReconnectAction.RETRY

    def as_error(self, error_code: str | None = None) -> CacheStoreReconnectError | None:
        """Error a client should fail pending commands with, if any."""
        if self.action is not ReconnectAction.STOP:
            return None
        return CacheStoreReconnectError(self.reason or "Reconnect stopped", error_code=error_code)


@dataclass(frozen=True)
class ReconnectPolicy:
    """
    Linear backoff with a floor, bounded by total retry time.

    Examples:
        >>> policy = ReconnectPolicy()
        >>> policy(ReconnectContext(attempt=1)).delay_ms
        3000
        >>> policy(ReconnectContext(attempt=50)).delay_ms
        5000
        >>> policy(ReconnectContext(error_code="ECONNREFUSED")).action
        <ReconnectAction.STOP: 'stop'>
    """

    refused_code: str = CONNECTION_REFUSED
    max_retry_time_ms: int = 1000 * 60 * 60
    max_times_connected: int = 10
    unit_ms: int = 100
    min_delay_ms: int = 3000

    def __call__(self, context: ReconnectContext) -> ReconnectDecision:
        decision = self.decide(context)
        logger.debug(
            "Cache store reconnect decision",
            extra={
                "event": "cache.reconnect",
                "attempt": context.attempt,
                "error_code": context.error_code,
                "action": decision.action.value,
                "delay_ms": decision.delay_ms,
            },
        )
        return decision

    def decide(self, context: ReconnectContext) -> ReconnectDecision:
        if context.error_code == self.refused_code:
            return ReconnectDecision(ReconnectAction.STOP, reason="The server refused the connection")
        if context.total_retry_time_ms > self.max_retry_time_ms:
            return ReconnectDecision(ReconnectAction.STOP, reason="Retry time exhausted")
        if context.times_connected > self.max_times_connected:
            return ReconnectDecision(ReconnectAction.DEFAULT)
        return ReconnectDecision(ReconnectAction.RETRY, delay_ms=self.get_delay(context.attempt))

    def get_delay(self, attempt: int) -> int:
        """Delay in milliseconds before reconnect attempt ``attempt``."""
        return max(attempt * self.unit_ms, self.min_delay_ms)


DEFAULT_RECONNECT_POLICY = ReconnectPolicy()
