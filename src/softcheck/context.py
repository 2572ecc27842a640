from __future__ import annotations

import asyncio
import threading
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import Iterator

from softcheck.ledger import FailureLedger


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    """Result of a single evaluated check.

    Attributes
    ----------
    passed
        Whether the check passed.
    message
        Failure description; ``None`` for passing checks.
    """

    passed: bool
    message: str | None = None


@dataclass(slots=True)
class CheckBatch:
    """Outcomes gathered for the logical check currently being evaluated."""

    outcomes: list[CheckOutcome] = field(default_factory=list)

    def add(self, outcome: CheckOutcome) -> None:
        self.outcomes.append(outcome)

    def failures(self) -> list[CheckOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.passed]

    def first_failure_message(self) -> str | None:
        failed = self.failures()
        if not failed:
            return None
        return failed[0].message or ""

    def reset(self) -> None:
        self.outcomes.clear()


@dataclass(slots=True)
class ExecutionContext:
    """Isolation unit for one running test: its failure ledger and pending batch.

    Attributes
    ----------
    name
        Optional label for the context (e.g., the test node id), used in logs.
    ledger
        Failures recorded since the last flush.
    batch
        Outcomes of the check being evaluated.
    owner
        Task or thread that created the context lazily; ``None`` for contexts
        bound explicitly, which are shared with whatever runs inside the scope.
    """

    name: str | None = None
    ledger: FailureLedger = field(default_factory=FailureLedger)
    batch: CheckBatch = field(default_factory=CheckBatch)
    owner: object | None = field(default=None, repr=False, compare=False)

    def reset(self) -> None:
        self.ledger.clear()
        self.batch.reset()


def current_owner() -> object:
    """Running asyncio task, or the current thread's ident outside a task."""
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    if task is not None:
        return task
    return threading.get_ident()


class ExecutionContextStore:
    """Execution contexts of one engine, kept per thread and per asyncio task.

    asyncio tasks start from a copy of their creator's ``contextvars``, so a
    lazily created context records its owner and is replaced when read from
    another task or thread.
    """

    def __init__(self, name: str = "execution_context") -> None:
        self._current: ContextVar[ExecutionContext | None] = ContextVar(name, default=None)
        self._tokens: ContextVar[tuple[Token[ExecutionContext | None], ...]] = ContextVar(
            f"{name}_tokens", default=()
        )

    def get(self) -> ExecutionContext:
        """Return the bound execution context, creating one on first use."""
        ctx = self._current.get()
        owner = current_owner()
        if ctx is None or (ctx.owner is not None and ctx.owner != owner):
            ctx = ExecutionContext(owner=owner)
            self._current.set(ctx)
        return ctx

    @contextmanager
    def scope(self, ctx: ExecutionContext | None = None) -> Iterator[ExecutionContext]:
        ctx = ctx if ctx is not None else ExecutionContext()
        token = self._current.set(ctx)
        try:
            yield ctx
        finally:
            self._current.reset(token)

    def push(self, ctx: ExecutionContext) -> None:
        """Bind ``ctx`` until the matching :meth:`pop` in the same thread or task."""
        token = self._current.set(ctx)
        self._tokens.set((*self._tokens.get(), token))

    def pop(self) -> None:
        tokens = self._tokens.get()
        if not tokens:
            msg = "No execution context was pushed in this thread or task"
            raise RuntimeError(msg)
        self._tokens.set(tokens[:-1])
        self._current.reset(tokens[-1])
