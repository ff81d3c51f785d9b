from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Iterator, Optional, TypeVar

from ddtrace.llmobs import LLMObs
from ddtrace.llmobs.decorators import workflow

_T = TypeVar("_T")


def llmobs_active() -> bool:
    # # LLMObs calls are only meaningful once LLMObs.enable() ran
    return bool(getattr(LLMObs, "enabled", False))


@contextmanager
def llm_span(model_name: str, model_provider: str = "openai") -> Iterator[Optional[Any]]:
    # # LLMObs llm span around one upstream call, a no-op when disabled
    if not llmobs_active():
        yield None
        return
    with LLMObs.llm(model_name=model_name, model_provider=model_provider) as span:
        yield span


def workflow_span(
    func: Callable[..., Awaitable[_T]],
) -> Callable[..., Awaitable[_T]]:
    # # LLMObs workflow root span for an async route, bypassed while LLMObs is off
    traced = workflow()(func)

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> _T:
        if llmobs_active():
            return await traced(*args, **kwargs)
        return await func(*args, **kwargs)

    return wrapper


def annotate(**fields: Any) -> None:
    # # Annotate the active LLMObs span when observability is on
    if llmobs_active():
        LLMObs.annotate(**fields)
