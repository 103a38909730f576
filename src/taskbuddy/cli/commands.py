# src/taskbuddy/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable
from typing import cast

from ..core.state import AppState
from ..storage.persistence import write_export
from ..tasks.task_models import Category, Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

CATEGORY_NAMES = ", ".join(c.value for c in Category)


class CommandArgs(list[str]):
    """Whitespace-split arguments plus the untouched text after the command name."""

    def __init__(self, parts: list[str], raw: str = "") -> None:
        super().__init__(parts)
        self.raw = raw


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

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

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        body = line[1:].strip()
        parts = body.split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = CommandArgs(parts[1:], raw=body[len(parts[0]) :].strip())

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    created = task.created_at.astimezone().strftime("%b %d, %H:%M")
    return f"[{mark}] {task.id}  {task.text}  ({task.category.value}, {created})"


def format_tasks(tasks: Iterable[Task]) -> str:
    lines = [format_task(t) for t in tasks]
    return "\n".join(lines) if lines else "No tasks to show."


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add text             -> task in the active category
    /add #Work text       -> task in an explicit category
    """
    text = args.raw if isinstance(args, CommandArgs) else " ".join(args)
    category: Category | None = None
    if args and args[0].startswith("#"):
        category = Category.parse(args[0][1:])
        if category is None:
            return f"Unknown category {args[0][1:]!r}. Choose one of: {CATEGORY_NAMES}."
        text = text[len(args[0]) :]

    task = state.store.add_task(text, category)
    if task is None:
        return "Nothing to add: task text is empty or not valid text."
    return f"Added: {format_task(task)}"


def cmd_toggle(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /toggle <id>"
    task = state.store.toggle_task(task_id)
    if task is None:
        return f"No task with id {task_id}."
    return f"{'Completed' if task.completed else 'Reopened'}: {format_task(task)}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /del <id>"
    if not state.store.delete_task(task_id):
        return f"No task with id {task_id}."
    return f"Deleted task {task_id}."


def cmd_clear(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /clear      -> ask for confirmation
    /clear yes  -> delete every task and the saved snapshot
    """
    total = len(state.store.tasks)
    if not args or args[0].lower() != "yes":
        return f"This deletes all {total} tasks and cannot be undone. Type /clear yes to confirm."
    if emit:
        emit(f"Clearing {total} tasks...")
    if not state.store.clear_all():
        return "Could not erase saved tasks; nothing was cleared. See the log for details."
    return "All tasks cleared."


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Current filter: {state.store.filter_category}. Usage: /filter <All|Category>"
    if not state.store.set_filter_category(args[0]):
        return f"Unknown category {args[0]!r}. Choose All or one of: {CATEGORY_NAMES}."
    return f"Filter set to {state.store.filter_category}."


def cmd_category(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Active category: {state.store.active_category.value}."
    if not state.store.set_active_category(args[0]):
        return f"Unknown category {args[0]!r}. Choose one of: {CATEGORY_NAMES}."
    return f"New tasks go to {state.store.active_category.value}."


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Showing {state.store.status_filter.value} tasks. Usage: /show all|active|completed"
    if not state.store.set_status_filter(args[0]):
        return "Usage: /show all|active|completed"
    return f"Showing {state.store.status_filter.value} tasks."


def cmd_search(state: AppState, args: list[str]) -> str:
    state.store.set_search_query(args.raw if isinstance(args, CommandArgs) else " ".join(args))
    if not state.store.search_query:
        return "Search cleared."
    return f"Searching for {state.store.search_query!r}."


def cmd_list(state: AppState, args: list[str]) -> str:
    store = state.store
    header = f"Tasks (category: {store.filter_category}, status: {store.status_filter.value}"
    if store.search_query:
        header += f", search: {store.search_query!r}"
    header += "):"
    return header + "\n" + format_tasks(store.filtered_tasks())


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = state.store.stats()
    lines = [
        "Stats:",
        f"  Total: {s.total}",
        f"  Completed: {s.completed}",
        f"  Remaining: {s.remaining}",
        f"  Progress: {s.completion_percent}%",
    ]
    counts = state.store.category_counts()
    used = [c for c in counts if counts[c] > 0]
    if used:
        lines.append("Categories:")
        lines.extend(f"  {c.value}: {counts[c]}" for c in used)
    return "\n".join(lines)


def cmd_export(state: AppState, args: list[str]) -> str:
    artifact = state.persistence.export_snapshot(state.store.tasks)
    try:
        path = write_export(artifact, state.settings.export_dir)
    except (OSError, ValueError):
        logger.exception("Export failed.")
        return "Export failed. See the log for details."
    return f"Exported {len(state.store.tasks)} tasks to {path}"


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    saved = state.persistence.last_saved_at or "never"
    return (
        "Status:\n"
        f"  Storage: {getattr(settings, 'store_db_path', '?')} (key {state.persistence.key})\n"
        f"  Exports: {getattr(settings, 'export_dir', '?')}\n"
        f"  Active category: {state.store.active_category.value}\n"
        f"  Filter: {state.store.filter_category}\n"
        f"  Last saved: {saved}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add [#Category] text.")
registry.register("toggle", cmd_toggle, help_text="Complete/reopen a task: /toggle <id>.", aliases=["done"])
registry.register("del", cmd_delete, help_text="Delete a task: /del <id>.", aliases=["rm"])
registry.register("clear", cmd_clear, help_text="Delete all tasks: /clear yes.")
registry.register("filter", cmd_filter, help_text="Filter by category: /filter All | /filter Work.")
registry.register("category", cmd_category, help_text="Category for new tasks: /category Health.")
registry.register("show", cmd_show, help_text="Filter by status: /show all | active | completed.")
registry.register("search", cmd_search, help_text="Search task text: /search milk (no text clears).")
registry.register("list", cmd_list, help_text="List tasks matching the current filters.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show totals, progress and per-category counts.")
registry.register("export", cmd_export, help_text="Write a JSON backup to the export directory.")
registry.register("status", cmd_status, help_text="Show storage paths and last save time.")
