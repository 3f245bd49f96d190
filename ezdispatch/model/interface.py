"""In-memory model of an interface declaration.

Every type here is immutable once built by the parser and is consumed by the
synthesizers without mutation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from ezdispatch.utils.helpers import to_camel_case


class ReceiverKind(IntEnum):
    """How a method is bound. Ordered from least to most demanding."""

    STATIC = 0
    CLASS = 1
    INSTANCE = 2


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """One named, annotated parameter (receiver excluded)."""

    name: str
    annotation: str
    default: str | None = None

    def declaration(self) -> str:
        """``name: annotation`` (plus ``= default``) usable as a field or a parameter."""
        text = f"{self.name}: {self.annotation}"
        if self.default is not None:
            text += f" = {self.default}"
        return text


@dataclass(frozen=True, slots=True)
class ResultShape:
    """The ``S`` and ``E`` of a ``Result[S, E]`` return annotation."""

    success: str
    error: str

    def annotation(self) -> str:
        return f"Result[{self.success}, {self.error}]"


@dataclass(frozen=True, slots=True)
class MethodSignature:
    """Metadata for one interface method."""

    name: str
    parameters: tuple[ParameterSpec, ...]
    result: ResultShape
    receiver: ReceiverKind = ReceiverKind.STATIC
    is_async: bool = True
    lineno: int = 0

    @property
    def variant_name(self) -> str:
        """Name of the request variant, the method name in CamelCase."""
        return to_camel_case(self.name)

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.parameters)


@dataclass(frozen=True, slots=True)
class InterfaceDescriptor:
    """A named type plus its methods in declaration order."""

    name: str
    methods: tuple[MethodSignature, ...]

    @property
    def receiver(self) -> ReceiverKind:
        """The most demanding receiver among the methods."""
        return max((m.receiver for m in self.methods), default=ReceiverKind.STATIC)

    @property
    def needs_instance(self) -> bool:
        return self.receiver is ReceiverKind.INSTANCE

    @property
    def is_homogeneous(self) -> bool:
        """True when every method declares the same result shape."""
        return len({m.result for m in self.methods}) <= 1

    @property
    def variant_names(self) -> tuple[str, ...]:
        return tuple(m.variant_name for m in self.methods)

    def method(self, name: str) -> MethodSignature:
        for method in self.methods:
            if method.name == name:
                return method
        raise KeyError(name)
