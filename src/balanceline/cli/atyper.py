"""Typer app that accepts coroutine commands."""

import asyncio
import inspect
from functools import wraps
from typing import Any, Callable

import typer


def run_sync(f: Callable) -> Callable:
    """Wrap a coroutine function so click can call it like a plain command."""
    if not inspect.iscoroutinefunction(f):
        return f

    @wraps(f)
    def runner(*args: Any, **kwargs: Any) -> Any:
        return asyncio.run(f(*args, **kwargs))

    return runner


class ATyper(typer.Typer):
    """Typer subclass whose commands may be ``async def``.

    Each async command gets its own event loop through ``asyncio.run``;
    the resolver closes its HTTP client before the loop ends.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("no_args_is_help", False)
        super().__init__(*args, **kwargs)

    def command(  # type: ignore[override]
        self,
        name: str | None = None,
        **kwargs: Any,
    ) -> Callable[[Callable], Callable]:
        """Register a command, running coroutine functions to completion."""

        def decorator(f: Callable) -> Callable:
            typer.Typer.command(self, name, **kwargs)(run_sync(f))
            return f

        return decorator
