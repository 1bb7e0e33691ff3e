"""
tests/test_metrics.py

Tests for metrics.py counters.
"""

from __future__ import annotations

from phxsim.backend.metrics import Counter, Gauge, ServerMetrics


class TestCounter:

    def test_inc_and_reset(self):
        c = Counter()
        c.inc()
        c.inc(4)
        assert c.value == 5
        c.reset()
        assert c.value == 0


class TestGauge:

    def test_dec_floors_at_zero(self):
        g = Gauge()
        g.inc(2)
        g.dec()
        assert g.value == 1
        g.dec(5)
        assert g.value == 0


class TestServerMetrics:

    def test_as_dict_lists_every_counter(self):
        m = ServerMetrics()
        assert set(m.as_dict()) == {
            "connections_total", "connections_open", "messages_received",
            "messages_malformed", "unauthorized_events", "replies_sent",
            "broadcasts_sent", "send_failures",
        }

    def test_reset_all(self):
        m = ServerMetrics()
        m.messages_received.inc(3)
        m.connections_open.inc()
        m.reset_all()
        assert all(v == 0 for v in m.as_dict().values())
