"""Optional LangSmith tracing, injected into the agent as a Tracer.

``NullTracer`` is the disabled path: it awaits the operation and nothing else.
``LangSmithTracer`` registers a run before the operation and closes it with the
outputs or the error message afterwards. Tracing backend failures are logged and
swallowed; the traced operation's result or exception always propagates as is.
Nested ``trace`` calls become child runs of the innermost active run.
"""

from __future__ import annotations

import asyncio
import functools
import itertools
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Protocol, TypeVar

import structlog
from langsmith import Client
from pydantic_core import to_jsonable_python

from research_agent.config import Settings
from research_agent.errors import TracingError
from research_agent.models.trace import RunType, TraceRun

logger = structlog.get_logger()

T = TypeVar("T")

_current_run_id: ContextVar[str | None] = ContextVar("_current_run_id", default=None)


def _jsonable(value: Any) -> Any:
    try:
        return to_jsonable_python(value, fallback=repr)
    except Exception:
        return repr(value)


class Tracer(Protocol):
    enabled: bool

    async def trace(
        self,
        name: str,
        run_type: RunType,
        inputs: dict[str, Any],
        operation: Callable[[], Awaitable[T]],
    ) -> T: ...


class NullTracer:
    enabled = False

    async def trace(
        self,
        name: str,
        run_type: RunType,
        inputs: dict[str, Any],
        operation: Callable[[], Awaitable[T]],
    ) -> T:
        return await operation()


class LangSmithTracer:
    enabled = True

    def __init__(self, client: Client, project_name: str = "financial-research-agent") -> None:
        self.client = client
        self.project_name = project_name

    async def trace(
        self,
        name: str,
        run_type: RunType,
        inputs: dict[str, Any],
        operation: Callable[[], Awaitable[T]],
    ) -> T:
        run = TraceRun(
            name=name,
            run_type=run_type,
            inputs={key: _jsonable(value) for key, value in inputs.items()},
            parent_run_id=_current_run_id.get(),
            project_name=self.project_name,
        )
        created = await self._safely(self._create_run, run)
        token = _current_run_id.set(run.id) if created else None
        try:
            result = await operation()
        except Exception as e:
            if created:
                run.error = str(e) or type(e).__name__
                run.end_time = datetime.now(timezone.utc)
                await self._safely(self._update_run, run)
            raise
        finally:
            if token is not None:
                _current_run_id.reset(token)

        if created:
            run.outputs = {"result": _jsonable(result)}
            run.end_time = datetime.now(timezone.utc)
            await self._safely(self._update_run, run)
        return result

    async def _safely(self, call: Callable[[TraceRun], Awaitable[None]], run: TraceRun) -> bool:
        try:
            await call(run)
            return True
        except TracingError as e:
            logger.warning("tracing_error", run_name=run.name, run_id=run.id, error=str(e))
            return False

    async def _create_run(self, run: TraceRun) -> None:
        try:
            await asyncio.to_thread(
                self.client.create_run,
                name=run.name,
                inputs=run.inputs,
                run_type=run.run_type,
                id=run.id,
                project_name=run.project_name,
                start_time=run.start_time,
                parent_run_id=run.parent_run_id,
            )
        except Exception as e:
            raise TracingError(f"create_run failed: {e}") from e

    async def _update_run(self, run: TraceRun) -> None:
        try:
            await asyncio.to_thread(
                self.client.update_run,
                run.id,
                outputs=run.outputs,
                error=run.error,
                end_time=run.end_time,
            )
        except Exception as e:
            raise TracingError(f"update_run failed: {e}") from e


def traced(
    tracer: Tracer,
    name: str,
    run_type: RunType = "chain",
    inputs: Callable[..., dict[str, Any]] | None = None,
):
    """Decorate an async function so each call is recorded as a run.

    ``inputs`` maps the call arguments to the run inputs; by default they are
    recorded as ``{"args": [...], **kwargs}``. Returns the function unchanged
    when the tracer is disabled.
    """

    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        if not tracer.enabled:
            return fn

        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            run_inputs = inputs(*args, **kwargs) if inputs else {"args": list(args), **kwargs}
            return await tracer.trace(name, run_type, run_inputs, lambda: fn(*args, **kwargs))

        return wrapper

    return decorator


def create_tracer(settings: Settings, api_key: str | None = None) -> Tracer:
    """LangSmith tracer when a key is configured, NullTracer otherwise."""
    key = api_key or settings.LANGSMITH_API_KEY
    if not key:
        return NullTracer()
    try:
        client = Client(api_key=key, api_url=settings.LANGSMITH_ENDPOINT)
    except Exception as e:
        logger.warning("langsmith_init_failed", error=str(e))
        return NullTracer()
    logger.info("langsmith_enabled", project=settings.LANGSMITH_PROJECT)
    return LangSmithTracer(client, project_name=settings.LANGSMITH_PROJECT)


async def verify_langsmith_key(
    api_key: str,
    endpoint: str = "https://api.smith.langchain.com",
) -> tuple[bool, str | None]:
    """Check a LangSmith key by listing one project."""
    try:
        client = Client(api_key=api_key, api_url=endpoint)
        await asyncio.to_thread(lambda: list(itertools.islice(client.list_projects(), 1)))
    except Exception as e:
        return False, str(e) or type(e).__name__
    return True, None
