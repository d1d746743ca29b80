# src/taskearn/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import cast

from ..core.errors import InsufficientBalanceError, SubmissionError, UnknownProjectTypeError
from ..core.state import AppState
from ..tasks.fallback import FetchState
from ..tasks.maintenance import GEOSPATIAL_FIXES, apply_task_data_fixes
from ..tasks.task_models import ProjectType, Task
from ..wallet.rewards import reward_for

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler4 = Callable[[AppState, list[str], str | None, str | None], CommandResult]
CommandHandler5 = Callable[
    [AppState, list[str], str | None, str | None, CommandEmitter | None], CommandResult
]
CommandHandler = CommandHandler4 | CommandHandler5

logger = logging.getLogger(__name__)

_TYPES_HINT = "text | image | audio | survey | geo"


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /tasks, ...)."""

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

    async def handle(
        self,
        state: AppState,
        line: str,
        user_id: str | None = None,
        room_id: str | None = None,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command. Handlers may be sync or async.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 5

        if nparams >= 5:
            result = cast(CommandHandler5, handler)(state, args, user_id, room_id, emit)
        else:
            result = cast(CommandHandler4, handler)(state, args, user_id, room_id)

        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _ts(epoch: float) -> str:
    return datetime.fromtimestamp(epoch).astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _parse_type(raw: str) -> ProjectType | None:
    try:
        return ProjectType.parse(raw)
    except UnknownProjectTypeError:
        return None


def _task_line(task: Task) -> str:
    d = task.data
    headline = d.get("question") or d.get("title") or d.get("text") or ""
    opts = task.option_values()
    opt_str = f" [{', '.join(opts)}]" if opts else ""
    extra = ""
    if d.get("location_name"):
        extra = f" ({d['location_name']})"
    return f"  #{task.id}: {headline}{extra}{opt_str}"


def cmd_help(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
    emit: CommandEmitter | None = None,
) -> str:
    return registry.build_help()


def cmd_status(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
    emit: CommandEmitter | None = None,
) -> str:
    settings = state.settings
    token_set = "yes" if getattr(settings, "backend_token", "") else "no"
    projects = ", ".join(f"{pt}={spec.project_id}" for pt, spec in state.projects.items())
    return (
        "Status:\n"
        f"  Backend: {getattr(settings, 'backend_url', '?')} (token set: {token_set})\n"
        f"  User: {state.user_id}\n"
        f"  Projects: {projects}\n"
        f"  Cache entries: {state.kv.count()}"
    )


async def cmd_tasks(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
    emit: CommandEmitter | None = None,
) -> str:
    """
    /tasks <type>  -> fetch tasks (backend, then cache, then bundled set)
    """
    if not args:
        return f"Usage: /tasks <{_TYPES_HINT}>"
    pt = _parse_type(args[0])
    if pt is None:
        return f"Unknown project type: {args[0]}. Use one of: {_TYPES_HINT}."

    if emit:
        emit(f"Fetching {pt} tasks...")

    tasks = await state.service.list_tasks(pt)
    now = time.time()
    for t in tasks:
        state.shown_at.setdefault(t.id, now)

    trail = state.service.resolver.last_trail
    if FetchState.STATIC_FALLBACK in trail:
        origin = "bundled fallback"
    elif FetchState.FALLING_BACK in trail:
        origin = "cache (backend unavailable)"
    else:
        origin = "backend" if pt is not ProjectType.SURVEY else "bundled survey set"

    if not tasks:
        return f"No {pt} tasks available."
    lines = [f"{len(tasks)} {pt} task(s) from {origin}:"]
    lines.extend(_task_line(t) for t in tasks)
    return "\n".join(lines)


async def cmd_submit(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
    emit: CommandEmitter | None = None,
) -> str:
    """
    /submit <type> <task_id> <value> [value...]
    """
    if len(args) < 3:
        return f"Usage: /submit <{_TYPES_HINT}> <task_id> <value> [value...]"
    pt = _parse_type(args[0])
    if pt is None:
        return f"Unknown project type: {args[0]}. Use one of: {_TYPES_HINT}."
    try:
        task_id = int(args[1])
    except ValueError:
        return f"Task id must be an integer, got {args[1]!r}."

    values = args[2:]
    value: str | list[str] = values[0] if len(values) == 1 else values

    task = await state.service.find_task(pt, task_id)
    if task is None:
        return f"Task #{task_id} not found for {pt}. Run /tasks {args[0]} first."

    try:
        outcome = await state.service.submit(pt, task, value, started_at=state.shown_at.get(task_id))
    except SubmissionError as e:
        logger.info("Submission failed: %s", e)
        return f"Submission failed: {e}"

    if not outcome.submitted:
        return "Submission blocked:\n" + "\n".join(f"  - {err}" for err in outcome.report.errors)

    state.shown_at.pop(task_id, None)
    amount = reward_for(pt)
    balance = await asyncio.to_thread(
        state.wallet.add_task_reward, state.user_id, amount, f"{pt} task #{task_id}"
    )

    lines = [f"Submitted task #{task_id}. Earned {amount:.2f} USDC (balance {balance.usdc_balance:.2f})."]
    lines.extend(f"  warning: {w}" for w in outcome.report.warnings)
    return "\n".join(lines)


async def cmd_completed(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    done = await state.service.completed_tasks()
    if not done:
        return "No completed tasks recorded."
    ids = sorted(done, key=lambda k: (len(k), k))
    return f"Completed tasks ({len(ids)}): {', '.join(ids)}"


async def cmd_clear(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    if not args:
        return f"Usage: /clear <{_TYPES_HINT}>"
    pt = _parse_type(args[0])
    if pt is None:
        return f"Unknown project type: {args[0]}. Use one of: {_TYPES_HINT}."
    await state.service.clear_cache(pt)
    return f"Cleared cached {pt} tasks."


async def cmd_balance(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    b = await asyncio.to_thread(state.wallet.get_balance, state.user_id)
    return (
        f"Balance for {b.user_id}:\n"
        f"  Available: {b.usdc_balance:.2f} USDC\n"
        f"  Pending: {b.pending_balance:.2f} USDC\n"
        f"  Total earned: {b.total_earned:.2f} USDC"
    )


async def cmd_history(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    limit = 10
    if args:
        try:
            limit = max(1, int(args[0]))
        except ValueError:
            return "Usage: /history [limit]"

    txs = await asyncio.to_thread(state.wallet.list_transactions, state.user_id, limit)
    if not txs:
        return "No transactions yet."
    lines = ["Recent transactions:"]
    for tx in txs:
        lines.append(f"  [{_ts(tx.created_at)}] {tx.type} {tx.amount:.2f} {tx.status} - {tx.description}")
    return "\n".join(lines)


async def cmd_withdraw(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    if len(args) < 2:
        return "Usage: /withdraw <amount> <method>"
    try:
        amount = float(args[0])
    except ValueError:
        return f"Amount must be a number, got {args[0]!r}."
    method = " ".join(args[1:])

    try:
        tx = await asyncio.to_thread(state.wallet.request_withdrawal, state.user_id, amount, method)
    except InsufficientBalanceError as e:
        return f"Withdrawal refused: {e}"
    except ValueError as e:
        return f"Withdrawal refused: {e}"
    return f"Withdrawal of {tx.amount:.2f} USDC via {method} requested (status {tx.status})."


async def cmd_fixgeo(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
    emit: CommandEmitter | None = None,
) -> str:
    if emit:
        emit(f"Updating {len(GEOSPATIAL_FIXES)} geospatial tasks on the backend...")
    ok = await apply_task_data_fixes(state.source, GEOSPATIAL_FIXES)
    return f"Geospatial fixes applied: {ok}/{len(GEOSPATIAL_FIXES)}."


def cmd_exit(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    # The console loop intercepts /exit before dispatch; other connectors have nothing to quit.
    return "Nothing to exit here."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show backend, user and project settings.")
registry.register("tasks", cmd_tasks, help_text=f"List tasks: /tasks <{_TYPES_HINT}>.")
registry.register(
    "submit", cmd_submit, help_text="Submit an answer: /submit <type> <task_id> <value> [value...]."
)
registry.register("completed", cmd_completed, help_text="Show task ids recorded as completed.")
registry.register("clear", cmd_clear, help_text="Drop cached tasks: /clear <type>.")
registry.register("balance", cmd_balance, help_text="Show wallet balance.")
registry.register("history", cmd_history, help_text="Show recent transactions: /history [limit].")
registry.register("withdraw", cmd_withdraw, help_text="Request a withdrawal: /withdraw <amount> <method>.")
registry.register("fixgeo", cmd_fixgeo, help_text="Repair the known geospatial tasks on the backend.")
registry.register("exit", cmd_exit, help_text="Quit the console.", aliases=["quit"])
