"""Pytest hooks and fixtures."""

import os
import textwrap

import pytest

from ezdispatch.config.schema import GeneratorConfig
from ezdispatch.synth.pipeline import generate, load_generated

EXAMPLE_SOURCE = textwrap.dedent(
    '''\
    from dataclasses import dataclass

    from ezdispatch import Err, Ok, Result, interface


    @dataclass
    class EmptyInput:
        pass


    @interface
    class Example:
        @staticmethod
        async def echo(string: str) -> Result[str, EmptyInput]:
            if not string:
                return Err(EmptyInput())
            return Ok(string)

        @staticmethod
        async def reverse(string: str) -> Result[str, EmptyInput]:
            if not string:
                return Err(EmptyInput())
            return Ok(string[::-1])
    '''
)

MIXED_SOURCE = textwrap.dedent(
    '''\
    from ezdispatch import Err, Ok, Result


    class Mixed:
        @staticmethod
        async def count(text: str) -> Result[int, str]:
            return Ok(len(text))

        @staticmethod
        async def ping() -> Result[None, str]:
            return Ok(None)

        @staticmethod
        async def greet(name: str, punctuation: str = "!") -> Result[str, ValueError]:
            if not name:
                return Err(ValueError("empty name"))
            return Ok(f"hello {name}{punctuation}")
    '''
)

COUNTER_SOURCE = textwrap.dedent(
    '''\
    from ezdispatch import Err, Ok, Result


    class Counter:
        def __init__(self, start: int = 0) -> None:
            self.value = start
            self.calls = 0

        async def add(self, amount: int) -> Result[int, str]:
            self.calls += 1
            if amount < 0:
                return Err("negative")
            self.value += amount
            return Ok(self.value)

        @classmethod
        async def describe(cls) -> Result[str, str]:
            return Ok(cls.__name__)

        def peek(self) -> Result[int, str]:
            return Ok(self.value)
    '''
)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    """Keep EZDISPATCH_* variables from the outer environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("EZDISPATCH_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def build():
    """Generate and import the dispatch layer for a source snippet."""

    def _build(source: str, class_name: str | None = None, **settings):
        module = generate(source, class_name, config=GeneratorConfig(**settings))
        return load_generated(module)

    return _build


@pytest.fixture
def example(build):
    return build(EXAMPLE_SOURCE)


@pytest.fixture
def example_source() -> str:
    return EXAMPLE_SOURCE


@pytest.fixture
def mixed_source() -> str:
    return MIXED_SOURCE


@pytest.fixture
def counter_source() -> str:
    return COUNTER_SOURCE
