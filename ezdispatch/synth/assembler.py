"""Emission assembler: original module + request type + dispatcher + proxies."""

from __future__ import annotations

import ast
import builtins
import hashlib
import re
from dataclasses import dataclass

from loguru import logger

from ezdispatch.config.schema import GeneratorConfig
from ezdispatch.model.interface import InterfaceDescriptor
from ezdispatch.synth.dispatcher import synthesize_dispatcher
from ezdispatch.synth.naming import (
    ANY,
    ASSERT_NEVER,
    CAST,
    DATACLASS,
    ERR,
    OK,
    RESULT,
    UNION,
    GeneratedNames,
    build_names,
)
from ezdispatch.synth.proxy import synthesize_proxies
from ezdispatch.synth.request_type import synthesize_request_type
from ezdispatch.utils.exceptions import ParseError

# shebang and PEP 263 coding lines must stay first
_PREAMBLE_LINE = re.compile(r"^(#!|#.*coding[:=])")
_BUILTIN_NAMES = frozenset(dir(builtins))


@dataclass(frozen=True, slots=True)
class GeneratedModule:
    """Output unit of one transformation."""

    interface: InterfaceDescriptor
    names: GeneratedNames
    source: str

    @property
    def digest(self) -> str:
        return hashlib.sha256(self.source.encode("utf-8")).hexdigest()


def assemble(interface: InterfaceDescriptor, original_source: str, config: GeneratorConfig) -> GeneratedModule:
    """
    Compose the output module.

    Sections, in order: the original module source (untouched), the support
    imports, the request type, the dispatcher and the proxy class.

    Raises:
        ConfigError: Generated names collide with each other.
        ParseError: A generated name is already defined by the original module
            or would shadow a builtin.
        SynthesisError: Dispatch would not be exhaustive.
    """
    names = build_names(interface, config)
    module_names = _module_level_names(original_source)
    clashes = [name for name in names.exports if name in module_names]
    if clashes:
        raise ParseError(
            f"generated names already defined in the module: {', '.join(clashes)}",
            interface=interface.name,
        )
    shadowed = [name for name in names.exports if name in _BUILTIN_NAMES]
    if shadowed:
        raise ParseError(
            f"generated names would shadow builtins: {', '.join(shadowed)}; rename the methods",
            interface=interface.name,
        )

    request_type = synthesize_request_type(interface, names)
    dispatcher = synthesize_dispatcher(interface, names, request_type, config)
    proxies = synthesize_proxies(interface, names, config)

    preamble, body = _split_preamble(original_source)
    sections: list[str] = []
    head = preamble
    if config.emit_header:
        head += _render_header(interface, original_source)
    sections.append(head + body if body.endswith("\n") else head + body + "\n")
    sections.append(_render_support_imports(interface, config))
    sections.extend([request_type.source, dispatcher.source, proxies.source])
    if config.emit_all and "__all__" in module_names:
        exported = ", ".join(repr(name) for name in names.exports)
        sections.append(f"__all__ = [*__all__, {exported}]\n")

    source = "\n\n".join(sections)
    logger.debug(f"Assembled {len(sections)} sections for {interface.name}")
    return GeneratedModule(interface=interface, names=names, source=source)


def _render_header(interface: InterfaceDescriptor, original_source: str) -> str:
    source_digest = hashlib.sha256(original_source.encode("utf-8")).hexdigest()[:16]
    return (
        f"# Generated by ezdispatch from interface `{interface.name}`. Do not edit.\n"
        f"# source digest: {source_digest}\n"
    )


def _render_support_imports(interface: InterfaceDescriptor, config: GeneratorConfig) -> str:
    return (
        f"# ---- ezdispatch: request/dispatch layer for `{interface.name}` ----\n"
        f"from dataclasses import dataclass as {DATACLASS}\n"
        f"from typing import Any as {ANY}, Union as {UNION}, assert_never as {ASSERT_NEVER}, cast as {CAST}\n"
        "\n"
        f"from {config.support_module}.result import Err as {ERR}, Ok as {OK}, Result as {RESULT}\n"
    )


def _split_preamble(source: str) -> tuple[str, str]:
    lines = source.splitlines(keepends=True)
    count = 0
    while count < min(2, len(lines)) and _PREAMBLE_LINE.match(lines[count]):
        count += 1
    return "".join(lines[:count]), "".join(lines[count:])


def _module_level_names(source: str) -> set[str]:
    """Names bound at module level by the original source."""
    names: set[str] = set()
    for stmt in ast.parse(source).body:
        if isinstance(stmt, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
            names.add(stmt.name)
        elif isinstance(stmt, (ast.Import, ast.ImportFrom)):
            for alias in stmt.names:
                names.add((alias.asname or alias.name).split(".")[0])
        elif isinstance(stmt, (ast.Assign, ast.AnnAssign, ast.AugAssign)):
            targets = stmt.targets if isinstance(stmt, ast.Assign) else [stmt.target]
            for target in targets:
                names.update(n.id for n in ast.walk(target) if isinstance(n, ast.Name))
    return names
