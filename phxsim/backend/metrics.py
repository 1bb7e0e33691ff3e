"""
backend/metrics.py

Lightweight thread-safe counters for the protocol server.
No external dependencies, uses Python's threading.Lock.

Each ProtocolServer owns its own ServerMetrics, so tests never share counters.

Usage:
    metrics = ServerMetrics()
    metrics.messages_received.inc()
    print(metrics.as_dict())
"""

import threading


class Counter:
    """A thread-safe integer counter."""

    __slots__ = ("_value", "_lock")

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def inc(self, amount: int = 1) -> None:
        with self._lock:
            self._value += amount

    def reset(self) -> None:
        with self._lock:
            self._value = 0

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __repr__(self) -> str:  # pragma: no cover
        return f"{type(self).__name__}({self._value})"


class Gauge(Counter):
    """A counter that can also go down (never below zero)."""

    __slots__ = ()

    def dec(self, amount: int = 1) -> None:
        with self._lock:
            self._value = max(0, self._value - amount)


class ServerMetrics:
    """All counters for one ProtocolServer instance."""

    def __init__(self) -> None:
        # --- Connections ---
        self.connections_total: Counter = Counter()
        """Connections ever accepted."""

        self.connections_open: Gauge = Gauge()
        """Connections currently open."""

        # --- Inbound ---
        self.messages_received: Counter = Counter()
        """Raw frames handed to the codec."""

        self.messages_malformed: Counter = Counter()
        """Frames dropped because they failed to decode."""

        self.unauthorized_events: Counter = Counter()
        """Custom events rejected because the sender had not joined the topic."""

        # --- Outbound ---
        self.replies_sent: Counter = Counter()
        self.broadcasts_sent: Counter = Counter()

        self.send_failures: Counter = Counter()
        """Sends that raised at the transport layer."""

    def as_dict(self) -> dict:
        """Return all counters as a plain dict (safe for JSON serialisation)."""
        return {
            name: attr.value
            for name, attr in vars(self).items()
            if isinstance(attr, Counter)
        }

    def reset_all(self) -> None:
        """Reset every counter to zero (useful in tests)."""
        for attr in vars(self).values():
            if isinstance(attr, Counter):
                attr.reset()
