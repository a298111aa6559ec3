"""Telemetry 测试"""

from tmuxpanes.telemetry import PaneMetrics, format_session_log


def test_format_session_log_truncates_id():
    assert format_session_log("PaneManager", "ses_0123456789", "tracked") == "[PaneManager:ses_0123] tracked"
    assert format_session_log("PaneManager", "", "x") == "[PaneManager:unknown] x"


def test_pane_metrics_snapshot():
    m = PaneMetrics()
    m.record_spawn(ok=True)
    m.record_spawn(ok=False)
    m.record_close(ok=True)
    m.record_eviction()
    m.record_refusal()
    m.set_tracked(3)

    assert m.snapshot() == {
        "pane.spawn.ok": 1,
        "pane.spawn.fail": 1,
        "pane.close.ok": 1,
        "pane.evicted": 1,
        "decision.refused": 1,
        "sessions.tracked": 3,
    }

    m.reset()
    assert m.snapshot() == {"sessions.tracked": 0}
    assert m.get_counter("pane.spawn.ok") == 0
