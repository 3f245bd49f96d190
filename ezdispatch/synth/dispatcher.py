"""Dispatcher synthesis.

The generated ``<Name>Service`` exposes the service capability:

- ``ready()``: the pre-call readiness gate, always ``Ok(None)`` here;
- ``call(request)``: an exhaustive ``match`` over the request variants that
  invokes the original method with the variant's fields as positional
  arguments and returns the method's own result.

Nothing is wrapped around the invocation, so ``Err`` values, exceptions and
cancellation reach the caller unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from ezdispatch.config.schema import GeneratorConfig
from ezdispatch.model.interface import InterfaceDescriptor, MethodSignature, ReceiverKind
from ezdispatch.synth.naming import ANY, ASSERT_NEVER, OK, RESULT, GeneratedNames
from ezdispatch.synth.request_type import RequestTypeCode
from ezdispatch.utils.exceptions import SynthesisError


@dataclass(frozen=True, slots=True)
class DispatchArm:
    variant: str
    method: MethodSignature


@dataclass(frozen=True, slots=True)
class DispatcherCode:
    class_name: str
    arms: tuple[DispatchArm, ...]
    source: str


def synthesize_dispatcher(
    interface: InterfaceDescriptor,
    names: GeneratedNames,
    request_type: RequestTypeCode,
    config: GeneratorConfig,
) -> DispatcherCode:
    """Render the dispatcher class for ``interface``."""
    arms = _build_arms(interface, names, request_type)

    if config.result_mode == "uniform":
        response_annotation = f"{RESULT}[{interface.methods[0].result.success}, {interface.methods[0].result.error}]"
    else:
        response_annotation = f"{RESULT}[{ANY}, {ANY}]"

    lines = [
        f"class {names.service}:",
        f'    """Dispatch ``{names.request}`` values to ``{interface.name}`` methods."""',
        "",
    ]
    lines.extend(_render_init(interface))
    lines.extend(
        [
            f"    async def ready(self) -> {RESULT}[None, {ANY}]:",
            f"        return {OK}(None)",
            "",
            f"    async def call(self, request: {names.request}) -> {response_annotation}:",
            "        match request:",
        ]
    )
    for arm in arms:
        lines.append(f"            case {arm.variant}():")
        lines.append(f"                return {_render_invocation(interface, arm.method)}")
    lines.extend(
        [
            "            case _:",
            f"                {ASSERT_NEVER}(request)",
        ]
    )

    logger.debug(f"Synthesized dispatcher {names.service} with {len(arms)} arms")
    return DispatcherCode(class_name=names.service, arms=arms, source="\n".join(lines) + "\n")


def _build_arms(
    interface: InterfaceDescriptor,
    names: GeneratedNames,
    request_type: RequestTypeCode,
) -> tuple[DispatchArm, ...]:
    """Pair every request variant with exactly one method, in variant order."""
    by_variant = {names.variant_for(method.name): method for method in interface.methods}
    arms = tuple(DispatchArm(variant=v, method=by_variant[v]) for v in request_type.variants if v in by_variant)

    missing = [v for v in request_type.variants if v not in by_variant]
    unrouted = [m.name for m in interface.methods if names.variant_for(m.name) not in request_type.variants]
    if missing or unrouted or len(arms) != len(interface.methods):
        raise SynthesisError(
            f"dispatch over {request_type.alias} is not exhaustive "
            f"(variants without a method: {missing or '-'}; methods without a variant: {unrouted or '-'})",
            interface=interface.name,
        )
    return arms


def _render_init(interface: InterfaceDescriptor) -> list[str]:
    if not interface.needs_instance:
        return []
    return [
        f"    def __init__(self, instance: {interface.name} | None = None) -> None:",
        f"        self.instance = instance if instance is not None else {interface.name}()",
        "",
    ]


def _render_invocation(interface: InterfaceDescriptor, method: MethodSignature) -> str:
    target = "self.instance" if method.receiver is ReceiverKind.INSTANCE else interface.name
    arguments = ", ".join(f"request.{name}" for name in method.parameter_names)
    call = f"{target}.{method.name}({arguments})"
    return f"await {call}" if method.is_async else call
