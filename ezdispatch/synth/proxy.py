"""Proxy synthesis: one async method per interface method on a service-holding wrapper."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from ezdispatch.config.schema import GeneratorConfig
from ezdispatch.model.interface import InterfaceDescriptor, MethodSignature
from ezdispatch.synth.naming import CAST, ERR, RESULT, GeneratedNames, fresh_local


@dataclass(frozen=True, slots=True)
class ProxyCode:
    class_name: str
    methods: tuple[str, ...]
    source: str


def synthesize_proxies(
    interface: InterfaceDescriptor,
    names: GeneratedNames,
    config: GeneratorConfig,
) -> ProxyCode:
    """Render the ``<Name>Proxy`` class for ``interface``."""
    lines = [
        f"class {names.proxy}:",
        f'    """Call ``{interface.name}`` methods through a ``{names.service}``-compatible service."""',
        "",
        "    def __init__(self, service=None) -> None:",
        f"        self._service = service if service is not None else {names.service}()",
        "",
    ]
    if interface.needs_instance:
        lines.extend(
            [
                "    @classmethod",
                f'    def from_instance(cls, instance: {interface.name}) -> "{names.proxy}":',
                f"        return cls({names.service}(instance))",
                "",
            ]
        )
    lines.extend(
        [
            "    @property",
            "    def service(self):",
            "        return self._service",
        ]
    )
    for method in interface.methods:
        lines.append("")
        lines.extend(_render_method(method, names.variant_for(method.name), config))

    logger.debug(f"Synthesized {len(interface.methods)} proxy methods on {names.proxy}")
    return ProxyCode(
        class_name=names.proxy,
        methods=tuple(m.name for m in interface.methods),
        source="\n".join(lines) + "\n",
    )


def _render_method(method: MethodSignature, variant: str, config: GeneratorConfig) -> list[str]:
    result_annotation = f"{RESULT}[{method.result.success}, {method.result.error}]"
    parameters = "".join(f", {p.declaration()}" for p in method.parameters)
    fields = ", ".join(f"{name}={name}" for name in method.parameter_names)
    readiness = fresh_local("readiness", method.parameter_names)
    response = f"await self._service.call({variant}({fields}))"
    if config.result_mode == "erased":
        response = f"{CAST}({result_annotation!r}, {response})"

    return [
        f"    async def {method.name}(self{parameters}) -> {result_annotation}:",
        f"        {readiness} = await self._service.ready()",
        f"        if isinstance({readiness}, {ERR}):",
        f"            return {readiness}",
        f"        return {response}",
    ]
