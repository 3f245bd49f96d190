"""Entry points running parse -> synthesize -> assemble."""

from __future__ import annotations

import importlib.abc
import importlib.util
import inspect
import sys
import types
from pathlib import Path

from loguru import logger

from ezdispatch.config.schema import GeneratorConfig
from ezdispatch.model.parser import parse_interface
from ezdispatch.synth.assembler import GeneratedModule, assemble
from ezdispatch.utils.exceptions import ParseError


def generate(
    source: str,
    class_name: str | None = None,
    *,
    config: GeneratorConfig | None = None,
) -> GeneratedModule:
    """
    Transform one interface declaration found in ``source``.

    The transformation is pure: the same source and config always produce the
    same output. On any error nothing is produced.
    """
    cfg = config or GeneratorConfig()
    interface = parse_interface(source, class_name, config=cfg)
    module = assemble(interface, source, cfg)
    logger.debug(f"Generated {', '.join(module.names.exports)} for {interface.name}")
    return module


def generate_file(
    path: str | Path,
    output: str | Path | None = None,
    *,
    class_name: str | None = None,
    config: GeneratorConfig | None = None,
) -> GeneratedModule:
    """Transform the interface in ``path``; write the result to ``output`` when given."""
    source = Path(path).read_text(encoding="utf-8")
    module = generate(source, class_name, config=config)
    if output is not None:
        target = Path(output)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(module.source, encoding="utf-8")
        logger.info(f"Wrote {module.names.service} and {module.names.proxy} to {target}")
    return module


def generate_from_class(cls: type, *, config: GeneratorConfig | None = None) -> GeneratedModule:
    """Transform a live, module-level class using the source of its module."""
    owner = inspect.getmodule(cls)
    try:
        source = inspect.getsource(owner) if owner is not None else None
    except (OSError, TypeError) as e:
        raise ParseError(f"source of module {owner.__name__} is not available: {e}", interface=cls.__name__) from e
    if source is None:
        raise ParseError(f"module of {cls.__name__} cannot be determined", interface=cls.__name__)
    return generate(source, cls.__name__, config=config)


class GeneratedSourceLoader(importlib.abc.InspectLoader):
    """Loader serving the source of one :class:`GeneratedModule`."""

    def __init__(self, module: GeneratedModule) -> None:
        self.module = module

    def get_source(self, fullname: str) -> str:
        return self.module.source

    def get_code(self, fullname: str) -> types.CodeType:
        return self.source_to_code(self.get_source(fullname), f"<ezdispatch:{self.module.interface.name}>")

    def is_package(self, fullname: str) -> bool:
        return False


def load_generated(module: GeneratedModule, module_name: str | None = None) -> types.ModuleType:
    """
    Execute generated source as a new module registered in ``sys.modules``.

    Registration is required for dataclasses with postponed annotations. The
    module's ``__loader__`` serves the generated text through ``get_source``.
    """
    name = module_name or f"_ezdispatch_{module.interface.name.lower()}_{module.digest[:12]}"
    loader = GeneratedSourceLoader(module)
    spec = importlib.util.spec_from_loader(name, loader)
    target = importlib.util.module_from_spec(spec)
    sys.modules[name] = target
    try:
        loader.exec_module(target)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    logger.debug(f"Loaded generated module {name}")
    return target
