# tests/test_commands.py

from __future__ import annotations

from taskboard.cli.commands import CommandRegistry, expire_undo, parse_fields, registry


def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    def handler(state, args):
        called["a"] += 1
        return "a:" + ",".join(args)

    reg.register("a", handler, "a", aliases=["alpha"])

    assert reg.handle(state, "/a x y") == "a:x,y"
    assert reg.handle(state, '/ALPHA "x y"') == "a:x y"
    assert called["a"] == 2


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_parse_fields_maps_keys_and_enum_spellings() -> None:
    fields, rest = parse_fields(["Call", "Acme", "time=3", "status=in-progress", "priority=high", "x=1"])

    assert fields == {"timeTaken": "3", "status": "In Progress", "priority": "High"}
    assert rest == ["Call", "Acme", "x=1"]


def test_list_orders_by_roi(state) -> None:
    out = registry.handle(state, "/list")

    lines = out.splitlines()
    assert len(lines) == 3
    # t-1: 300/h, t-2: 300/h ("Demo..." < "Follow..."), t-3: 0/h
    assert "id=t-2" in lines[0]
    assert "id=t-1" in lines[1]
    assert "id=t-3" in lines[2]

    assert len(registry.handle(state, "/list 1").splitlines()) == 1
    assert "Usage" in registry.handle(state, "/list many")


def test_add_set_done_flow(state) -> None:
    store = state.task_store

    out = registry.handle(state, '/add "Negotiate renewal" revenue=900 time=2 priority=High')
    assert out.startswith("Added: Negotiate renewal")
    task = store.tasks[-1]
    assert task.revenue == 900
    assert task.time_taken == 2

    assert "Updated" in registry.handle(state, f"/set {task.id} notes=called status=in-progress")
    assert store.get_task(task.id).notes == "called"

    assert "Done" in registry.handle(state, f"/done {task.id}")
    assert store.get_task(task.id).completed_at is not None

    assert "Unknown field" in registry.handle(state, f"/set {task.id} colour=red")
    assert "No task" in registry.handle(state, "/done missing")


def test_delete_undo_and_expiry(state) -> None:
    store = state.task_store

    assert "Deleted" in registry.handle(state, "/del t-1")
    assert state.undo_deadline is not None
    assert "Restored" in registry.handle(state, "/undo")
    assert [t.id for t in store.tasks][-1] == "t-1"
    assert "Nothing to undo" in registry.handle(state, "/undo")

    registry.handle(state, "/del t-2")
    assert expire_undo(state, now=state.undo_deadline - 1) is False
    assert store.last_deleted is not None
    assert expire_undo(state, now=state.undo_deadline + 1) is True
    assert store.last_deleted is None
    assert "Nothing to undo" in registry.handle(state, "/undo")


def test_metrics_and_status(state) -> None:
    out = registry.handle(state, "/metrics")
    assert "Total revenue:    4,200.00" in out
    assert "Grade:            Good" in out

    status = registry.handle(state, "/status")
    assert "Tasks: 3" in status
    assert "Load error: none" in status


def test_export_writes_csv(state, settings) -> None:
    out = registry.handle(state, "/export")

    assert "Exported 3 tasks" in out
    text = settings.export_path.read_text("utf-8")
    assert text.startswith("id,title,revenue,timeTaken,priority,status,notes\n")
