import ast
import sys
import textwrap

import pytest

from ezdispatch.config.schema import GeneratorConfig
from ezdispatch.synth.pipeline import generate, load_generated
from ezdispatch.utils.exceptions import ConfigError, ParseError


def test_output_is_deterministic(example_source):
    first = generate(example_source)
    second = generate(example_source)
    assert first.source == second.source
    assert first.digest == second.digest


def test_original_module_kept_and_sections_ordered(example_source):
    module = generate(example_source)
    assert example_source in module.source
    assert module.source.startswith("# Generated by ezdispatch from interface `Example`. Do not edit.\n")
    positions = [
        module.source.index(marker)
        for marker in (
            "class Example:",
            "from ezdispatch.result import Err as _ezd_Err",
            "class Echo:",
            "ExampleRequest = _ezd_Union[Echo, Reverse]",
            "class ExampleService:",
            "class ExampleProxy:",
        )
    ]
    assert positions == sorted(positions)
    tree = ast.parse(module.source)
    classes = [node.name for node in tree.body if isinstance(node, ast.ClassDef)]
    assert classes == ["EmptyInput", "Example", "Echo", "Reverse", "ExampleService", "ExampleProxy"]


def test_names_report_exports(example_source):
    names = generate(example_source).names
    assert names.exports == ("Echo", "Reverse", "ExampleRequest", "ExampleService", "ExampleProxy")


def test_header_goes_after_shebang_and_coding(example_source):
    source = "#!/usr/bin/env python\n# -*- coding: utf-8 -*-\n" + example_source
    lines = generate(source).source.splitlines()
    assert lines[0] == "#!/usr/bin/env python"
    assert lines[1] == "# -*- coding: utf-8 -*-"
    assert lines[2].startswith("# Generated by ezdispatch")


def test_header_can_be_disabled(example_source):
    module = generate(example_source, config=GeneratorConfig(emit_header=False))
    assert module.source.startswith(example_source)


def test_all_extended_only_when_module_defines_it(build, example_source):
    assert "__all__" not in generate(example_source).source

    mod = build(example_source + '\n__all__ = ["Example", "EmptyInput"]\n')
    assert mod.__all__ == ["Example", "EmptyInput", "Echo", "Reverse", "ExampleRequest", "ExampleService", "ExampleProxy"]

    quiet = generate(example_source + '\n__all__ = ["Example"]\n', config=GeneratorConfig(emit_all=False))
    assert "[*__all__" not in quiet.source


def test_generated_name_already_in_module(example_source):
    clashing = example_source + "\n\ndef Echo():\n    pass\n"
    with pytest.raises(ParseError, match="already defined in the module: Echo"):
        generate(clashing, "Example")


def test_generated_names_collide_with_each_other(example_source):
    with pytest.raises(ConfigError, match="collides with the service class"):
        generate(example_source, config=GeneratorConfig(service_suffix="Proxy"))


def test_custom_suffixes(build, example_source):
    mod = build(example_source, request_suffix="Call", service_suffix="Dispatcher", proxy_suffix="Client")
    assert hasattr(mod, "ExampleCall")
    assert hasattr(mod, "ExampleDispatcher")
    assert isinstance(mod.ExampleClient().service, mod.ExampleDispatcher)


def test_support_module_is_configurable(example_source):
    module = generate(example_source, config=GeneratorConfig(support_module="myapp.vendor"))
    assert "from myapp.vendor.result import Err as _ezd_Err, Ok as _ezd_Ok, Result as _ezd_Result" in module.source


def test_load_generated_registers_module(example_source):
    module = generate(example_source)
    loaded = load_generated(module, "_ezdispatch_test_registered")
    try:
        assert sys.modules["_ezdispatch_test_registered"] is loaded
        assert loaded.Echo.__module__ == "_ezdispatch_test_registered"
    finally:
        sys.modules.pop("_ezdispatch_test_registered", None)


def test_generated_name_would_shadow_builtin():
    source = textwrap.dedent(
        '''\
        from ezdispatch import Err, Ok, Result


        class Log:
            @staticmethod
            async def exception(message: str) -> Result[None, str]:
                return Ok(None)

            @staticmethod
            async def parse(text: str) -> Result[int, str]:
                try:
                    return Ok(int(text))
                except Exception:
                    return Err("bad")
        '''
    )
    with pytest.raises(ParseError, match="would shadow builtins: Exception"):
        generate(source)

    renamed = source.replace("async def exception(", "async def log_exception(")
    module = generate(renamed)
    assert "class LogException:" in module.source


@pytest.mark.asyncio
async def test_original_methods_still_see_builtins(build):
    source = textwrap.dedent(
        '''\
        from ezdispatch import Err, Ok, Result


        class Log:
            @staticmethod
            async def log_exception(message: str) -> Result[None, str]:
                return Ok(None)

            @staticmethod
            async def parse(text: str) -> Result[int, str]:
                try:
                    return Ok(int(text))
                except ValueError:
                    return Err("bad")
        '''
    )
    mod = build(source)
    assert await mod.Log.parse("x") == mod.Err("bad")
    assert await mod.LogProxy().parse("7") == mod.Ok(7)


def test_loaded_module_serves_its_source(example_source):
    module = generate(example_source)
    loaded = load_generated(module)
    assert loaded.__loader__.get_source(loaded.__name__) == module.source
    assert loaded.__spec__.name == loaded.__name__
