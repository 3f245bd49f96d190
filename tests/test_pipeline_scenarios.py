import asyncio
import textwrap

import pytest

from ezdispatch import Err, GatedService, Ok, generate_file, generate_from_class
from ezdispatch.result import Result


class _LiveCalculator:
    @staticmethod
    async def double(x: int) -> Result[int, str]:
        return Ok(x * 2)


@pytest.mark.asyncio
async def test_example_echo_and_reverse(example):
    proxy = example.ExampleProxy()
    assert await proxy.echo("hi") == Ok("hi")
    assert await proxy.echo("") == Err(example.EmptyInput())
    assert await proxy.reverse("abc") == Ok("cba")
    assert await proxy.reverse("") == Err(example.EmptyInput())


@pytest.mark.asyncio
async def test_mixed_results_through_erased_dispatcher(build, mixed_source):
    proxy = build(mixed_source).MixedProxy()
    assert await proxy.count("abcd") == Ok(4)
    assert await proxy.ping() == Ok(None)
    assert await proxy.greet("ada") == Ok("hello ada!")
    assert await proxy.greet("ada", punctuation="?") == Ok("hello ada?")
    failed = await proxy.greet("")
    assert isinstance(failed, Err)
    assert isinstance(failed.error, ValueError)


@pytest.mark.asyncio
async def test_uniform_mode_end_to_end(build, example_source):
    proxy = build(example_source, result_mode="uniform").ExampleProxy()
    assert await proxy.echo("hi") == Ok("hi")


@pytest.mark.asyncio
async def test_instance_receiver(build, counter_source):
    mod = build(counter_source)
    counter = mod.Counter(5)
    proxy = mod.CounterProxy.from_instance(counter)
    assert await proxy.add(2) == Ok(7)
    assert await proxy.add(-1) == Err("negative")
    assert await proxy.peek() == Ok(7)
    assert await proxy.describe() == Ok("Counter")
    assert counter.value == 7

    fresh = mod.CounterProxy()
    assert await fresh.peek() == Ok(0)


@pytest.mark.asyncio
async def test_not_ready_short_circuits_call(build, counter_source):
    mod = build(counter_source)
    counter = mod.Counter()
    proxy = mod.CounterProxy(GatedService(mod.CounterService(counter), lambda: Err("busy")))
    assert await proxy.add(1) == Err("busy")
    assert counter.calls == 0


@pytest.mark.asyncio
async def test_async_gate_passes_through(example):
    async def _gate():
        return Ok(None)

    proxy = example.ExampleProxy(GatedService(example.ExampleService(), _gate))
    assert await proxy.echo("hi") == Ok("hi")


@pytest.mark.asyncio
async def test_concurrent_calls_get_their_own_results(example):
    proxy = example.ExampleProxy()
    words = [f"w{i}" for i in range(50)]
    results = await asyncio.gather(*(proxy.reverse(w) for w in words))
    assert results == [Ok(w[::-1]) for w in words]


@pytest.mark.asyncio
async def test_exceptions_propagate_unchanged(build):
    source = textwrap.dedent(
        '''\
        from ezdispatch import Ok, Result


        class Faulty:
            @staticmethod
            async def explode(reason: str) -> Result[str, str]:
                raise RuntimeError(reason)
        '''
    )
    proxy = build(source).FaultyProxy()
    with pytest.raises(RuntimeError, match="boom"):
        await proxy.explode("boom")


@pytest.mark.asyncio
async def test_cancellation_propagates(build):
    source = textwrap.dedent(
        '''\
        import asyncio

        from ezdispatch import Ok, Result

        EVENTS = []


        class Slow:
            @staticmethod
            async def wait(label: str) -> Result[str, str]:
                EVENTS.append("started")
                try:
                    await asyncio.sleep(3600)
                except asyncio.CancelledError:
                    EVENTS.append("cancelled")
                    raise
                return Ok(label)
        '''
    )
    mod = build(source)
    task = asyncio.create_task(mod.SlowProxy().wait("x"))
    await asyncio.sleep(0)
    assert mod.EVENTS == ["started"]
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert mod.EVENTS == ["started", "cancelled"]


def test_generate_file_writes_output(tmp_path, example_source):
    src = tmp_path / "example.py"
    src.write_text(example_source, encoding="utf-8")
    out = tmp_path / "out" / "example_rpc.py"
    module = generate_file(src, out)
    assert out.read_text(encoding="utf-8") == module.source


def test_generate_file_without_output_writes_nothing(tmp_path, example_source):
    src = tmp_path / "example.py"
    src.write_text(example_source, encoding="utf-8")
    generate_file(src)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["example.py"]


def test_generate_from_live_class():
    module = generate_from_class(_LiveCalculator)
    assert module.names.service == "_LiveCalculatorService"
    assert "case Double():" in module.source


@pytest.mark.asyncio
async def test_class_attribute_default_resolves_in_generated_code(build):
    source = textwrap.dedent(
        '''\
        from ezdispatch import Ok, Result


        class Net:
            TIMEOUT = 5

            @staticmethod
            async def fetch(url: str, timeout: int = TIMEOUT) -> Result[str, str]:
                return Ok(f"{url}:{timeout}")
        '''
    )
    mod = build(source)
    assert mod.Fetch("u").timeout == 5
    proxy = mod.NetProxy()
    assert await proxy.fetch("u") == Ok("u:5")
    assert await proxy.fetch("u", 9) == Ok("u:9")
