"""Request type synthesis: one frozen dataclass per method plus a Union alias."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from ezdispatch.model.interface import InterfaceDescriptor, MethodSignature
from ezdispatch.synth.naming import DATACLASS, UNION, GeneratedNames


@dataclass(frozen=True, slots=True)
class RequestTypeCode:
    """Rendered request type and the variants it declares, in order."""

    alias: str
    variants: tuple[str, ...]
    source: str


def synthesize_request_type(interface: InterfaceDescriptor, names: GeneratedNames) -> RequestTypeCode:
    """Render the closed request union for ``interface``."""
    blocks = [_render_variant(interface.name, method, names.variant_for(method.name)) for method in interface.methods]
    members = ", ".join(names.variant_classes)
    blocks.append(f"{names.request} = {UNION}[{members}]\n")

    logger.debug(f"Synthesized {len(interface.methods)} request variants for {interface.name}")
    return RequestTypeCode(
        alias=names.request,
        variants=names.variant_classes,
        source="\n\n".join(blocks),
    )


def _render_variant(interface: str, method: MethodSignature, class_name: str) -> str:
    lines = [
        f"@{DATACLASS}(frozen=True, slots=True)",
        f"class {class_name}:",
        f'    """Request for ``{interface}.{method.name}``."""',
    ]
    if method.parameters:
        lines.append("")
        lines.extend(f"    {parameter.declaration()}" for parameter in method.parameters)
    return "\n".join(lines) + "\n"
