"""
Runtime contract for generated dispatchers.

Generated ``<Name>Service`` classes satisfy :class:`Service`; generated
``<Name>Proxy`` classes only depend on this protocol, so an alternate service
with real backpressure can be passed to a proxy without regenerating it.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from ezdispatch.result import Err, Ok, Result

_INTERFACE_ATTR = "__ezdispatch_interface__"

C = TypeVar("C", bound=type)


@runtime_checkable
class Service(Protocol):
    """Readiness check plus call operation."""

    async def ready(self) -> Result[None, Any]:
        """Return ``Ok(None)`` when the next ``call`` may be submitted."""
        ...

    async def call(self, request: Any) -> Result[Any, Any]:
        """Dispatch one request value and return the method's own result."""
        ...


async def always_ready() -> Result[None, Any]:
    """Readiness gate that never refuses, the same answer generated services give."""
    return Ok(None)


class GatedService:
    """
    Wrap a service with an extra readiness gate.

    ``gate`` is awaited before the wrapped service's own ``ready``; the first
    ``Err`` wins. Calls are forwarded untouched.
    """

    def __init__(self, inner: Service, gate: Callable[[], Any]) -> None:
        self.inner = inner
        self._gate = gate

    async def ready(self) -> Result[None, Any]:
        outcome = self._gate()
        if inspect.isawaitable(outcome):
            outcome = await outcome
        if isinstance(outcome, Err):
            return outcome
        return await self.inner.ready()

    async def call(self, request: Any) -> Result[Any, Any]:
        return await self.inner.call(request)


def interface(cls: C) -> C:
    """Mark a class as an interface declaration to be picked up by the parser."""
    setattr(cls, _INTERFACE_ATTR, True)
    return cls


__all__ = ["Service", "GatedService", "always_ready", "interface"]
