# src/taskboard/cli/commands.py

from __future__ import annotations

import logging
import shlex
import time
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.export import write_csv
from ..tasks.metrics import format_roi
from ..tasks.task_models import DerivedTask, Priority, Task, TaskStatus

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            # Unbalanced quotes: fall back to plain whitespace split.
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()

# Console keys -> record keys understood by TaskStore.
_FIELD_KEYS = {
    "title": "title",
    "revenue": "revenue",
    "time": "timeTaken",
    "hours": "timeTaken",
    "timetaken": "timeTaken",
    "time_taken": "timeTaken",
    "priority": "priority",
    "status": "status",
    "notes": "notes",
}


def _loose_enum(raw: str, values: list[str]) -> str:
    """Case/space-insensitive match ("in-progress" -> "In Progress"); unknown values pass through."""
    wanted = raw.replace("-", "").replace("_", "").replace(" ", "").lower()
    for v in values:
        if v.replace(" ", "").lower() == wanted:
            return v
    return raw


def parse_fields(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """
    Split `key=value` args into a record dict.

    Returns (fields, leftovers); leftovers are words without a known key.
    """
    fields: dict[str, str] = {}
    leftovers: list[str] = []
    for arg in args:
        key, sep, value = arg.partition("=")
        target = _FIELD_KEYS.get(key.strip().lower()) if sep else None
        if target is None:
            leftovers.append(arg)
            continue
        if target == "status":
            value = _loose_enum(value, [s.value for s in TaskStatus])
        elif target == "priority":
            value = _loose_enum(value, [p.value for p in Priority])
        fields[target] = value
    return fields, leftovers


def _format_money(value: float) -> str:
    return f"{value:,.2f}"


def _format_row(i: int, t: DerivedTask) -> str:
    return (
        f"{i:>3}. [{t.priority.value:<6}] {t.title}  "
        f"ROI {format_roi(t.roi)}  {t.status.value}  "
        f"rev {_format_money(t.revenue)} / {t.time_taken}h  id={t.id}"
    )


def _format_task(t: Task) -> str:
    lines = [
        f"{t.title} (id={t.id})",
        f"  priority:  {t.priority.value}",
        f"  status:    {t.status.value}",
        f"  revenue:   {_format_money(t.revenue)}",
        f"  time:      {t.time_taken}h",
        f"  created:   {t.created_at}",
    ]
    if t.completed_at:
        lines.append(f"  completed: {t.completed_at}")
    if t.notes:
        lines.append(f"  notes:     {t.notes}")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.task_store
    if store.loading:
        return "Loading tasks..."
    held = store.last_deleted
    return (
        "Status:\n"
        f"  Source: {getattr(state.settings, 'tasks_source', '?')}\n"
        f"  Tasks: {len(store.tasks)}\n"
        f"  Load error: {store.error or 'none'}\n"
        f"  Undo available: {'yes (' + held.title + ')' if held else 'no'}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list      -> all tasks, most important first
    /list 10   -> top 10
    """
    store = state.task_store
    if store.loading:
        return "Loading tasks..."
    if store.error and not store.tasks:
        return f"No tasks (load failed: {store.error})."

    rows = store.derived_sorted
    if args:
        try:
            rows = rows[: max(0, int(args[0]))]
        except ValueError:
            return "Usage: /list [count]"
    if not rows:
        return "No tasks."
    return "\n".join(_format_row(i, t) for i, t in enumerate(rows, start=1))


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    task = state.task_store.get_task(args[0])
    if task is None:
        return f"No task with id={args[0]}."
    return _format_task(task)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Call Acme revenue=1200 time=3 priority=High
    Words without key= are joined into the title.
    """
    fields, words = parse_fields(args)
    if words and "title" not in fields:
        fields["title"] = " ".join(words)
    task = state.task_store.add_task(fields)
    return f"Added: {task.title} (id={task.id})"


def cmd_set(state: AppState, args: list[str]) -> str:
    """/set <id> key=value ..."""
    if len(args) < 2:
        return "Usage: /set <id> key=value [key=value ...]"
    fields, leftovers = parse_fields(args[1:])
    if leftovers:
        return f"Unknown field(s): {', '.join(leftovers)}. Keys: {', '.join(sorted(set(_FIELD_KEYS)))}"
    task = state.task_store.update_task(args[0], fields)
    if task is None:
        return f"No task with id={args[0]}."
    return f"Updated: {task.title} ({task.status.value})"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task = state.task_store.update_task(args[0], {"status": TaskStatus.DONE.value})
    if task is None:
        return f"No task with id={args[0]}."
    return f"Done: {task.title}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <id>"
    task = state.task_store.delete_task(args[0])
    if task is None:
        return f"No task with id={args[0]}."
    window = float(getattr(state.settings, "undo_window_seconds", 10.0))
    state.undo_deadline = time.monotonic() + window
    return f"Deleted: {task.title}. Use /undo within {window:g}s to restore it."


def cmd_undo(state: AppState, args: list[str]) -> str:
    task = state.task_store.undo_delete()
    state.undo_deadline = None
    if task is None:
        return "Nothing to undo."
    return f"Restored: {task.title} (id={task.id})"


def cmd_metrics(state: AppState, args: list[str]) -> str:
    m = state.task_store.metrics
    return (
        "Metrics:\n"
        f"  Total revenue:    {_format_money(m.total_revenue)}\n"
        f"  Total time:       {m.total_time_taken}h\n"
        f"  Time efficiency:  {m.time_efficiency_pct:.1f}%\n"
        f"  Revenue per hour: {_format_money(m.revenue_per_hour)}\n"
        f"  Average ROI:      {m.average_roi:.2f}\n"
        f"  Grade:            {m.performance_grade.value}"
    )


def cmd_export(state: AppState, args: list[str]) -> str:
    target = args[0] if args else getattr(state.settings, "export_path", "tasks.csv")
    try:
        path = write_csv(target, state.task_store.tasks)
    except OSError as e:
        logger.warning("CSV export to %s failed: %s", target, e)
        return f"Export failed: {e}"
    return f"Exported {len(state.task_store.tasks)} tasks to {path}"


def expire_undo(state: AppState, now: float | None = None) -> bool:
    """Drop the pending undo once its window has passed. Returns True if dropped."""
    deadline = state.undo_deadline
    if deadline is None:
        return False
    if now is None:
        now = time.monotonic()
    if now < deadline:
        return False
    state.task_store.clear_last_deleted()
    state.undo_deadline = None
    logger.debug("Undo window expired.")
    return True


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show source, task count and load state.")
registry.register("list", cmd_list, help_text="List tasks by ROI: /list [count].", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register(
    "add", cmd_add, help_text="Add a task: /add <title> revenue=.. time=.. priority=.. status=.. notes=.."
)
registry.register("set", cmd_set, help_text="Update a task: /set <id> key=value ...")
registry.register("done", cmd_done, help_text="Mark a task Done: /done <id>.")
registry.register("del", cmd_delete, help_text="Delete a task (undoable): /del <id>.", aliases=["rm", "delete"])
registry.register("undo", cmd_undo, help_text="Restore the last deleted task.")
registry.register("metrics", cmd_metrics, help_text="Show aggregate metrics.", aliases=["stats"])
registry.register("export", cmd_export, help_text="Export tasks as CSV: /export [path].")
