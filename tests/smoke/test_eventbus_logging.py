# tests/smoke/test_eventbus_logging.py
import json

from hostagent.services.agent_context import get_ctx
from hostagent.services.eventbus import emit


def test_emit_event_lands_in_log(tmp_path):
    ctx = get_ctx()
    emit(ctx.bus, "demo.started", {"x": 1}, "smoke")
    logfile = tmp_path / "base" / "logs" / "hostagent.log"
    assert logfile.exists()
    records = [json.loads(line) for line in logfile.read_text(encoding="utf-8").splitlines() if line.strip()]
    demo = [r for r in records if r.get("type") == "demo.started"]
    assert demo and demo[0]["payload"] == {"x": 1}
    assert demo[0]["source"] == "smoke"


def test_mailbox_events(tmp_path):
    ctx = get_ctx()
    seen = []
    ctx.bus.subscribe("mailbox.", seen.append)
    entry = ctx.mailbox.submit('{"schemaVersion": "2.0", "mainSteps": [{}]}')
    ctx.mailbox.poll_outcome(entry, 1, 0.0)
    assert [e.type for e in seen] == ["mailbox.submitted", "mailbox.outcome"]
    assert seen[1].payload["status"] == "timed_out"
