"""Integration tests for edge cases of concurrent builds."""

import asyncio

import pytest

from forkable_di import CycleDetectedError, ProviderNotFoundError, Registry


class TestConcurrencyEdgeCases:
    """Test edge cases in the concurrent resolution model."""

    @pytest.mark.asyncio
    async def test_wide_fan_out(self):
        """Test a provider with many concurrent dependencies."""
        registry = Registry()
        names = [f"part_{i}" for i in range(50)]
        for index, name in enumerate(names):
            registry = registry.constant(name, index)
        registry = registry.fn("total", lambda *parts: sum(parts), dependencies=names)

        assert await registry.finalize().build("total") == sum(range(50))

    @pytest.mark.asyncio
    async def test_deep_chain(self):
        """Test a long linear chain of dependencies."""
        registry = Registry().constant("level_0", 0)
        for level in range(1, 200):
            registry = registry.fn(f"level_{level}", lambda previous: previous + 1, dependencies=[f"level_{level - 1}"])

        assert await registry.finalize().build("level_199") == 199

    @pytest.mark.asyncio
    async def test_shared_dependency_across_slow_branches(self):
        """Test that a slow shared dependency is joined, not rebuilt."""
        starts = []

        async def slow_pool():
            starts.append(1)
            await asyncio.sleep(0.01)
            return object()

        async def delayed(pool):
            await asyncio.sleep(0)
            return pool

        injector = (
            Registry()
            .fn("pool", slow_pool)
            .fn("left", delayed, using={"pool": "pool"})
            .fn("right", delayed)
            .fn("both", lambda left, right: left is right)
            .finalize()
        )

        assert await injector.build("both") is True
        assert len(starts) == 1

    @pytest.mark.asyncio
    async def test_concurrent_top_level_builds_are_independent(self):
        """Test that concurrent builds of a non-cacheable provider each construct it."""

        class Request:
            pass

        injector = Registry().ctor("request", Request).finalize()

        first, second = await asyncio.gather(injector.build("request"), injector.build("request"))

        assert first is not second

    @pytest.mark.asyncio
    async def test_cacheable_shared_between_dependents_and_builds(self):
        """Test that a cacheable provider is built once for the injector's lifetime."""
        created = []

        class Pool:
            def __init__(self):
                created.append(self)

        injector = (
            Registry()
            .ctor("pool", Pool, is_cacheable=True)
            .fn("a", lambda pool: pool)
            .fn("b", lambda pool: pool)
            .fn("ab", lambda a, b: (a, b))
            .finalize()
        )

        a, b = await injector.build("ab")
        pool = await injector.build("pool")

        assert a is b is pool
        assert len(created) == 1

    @pytest.mark.asyncio
    async def test_cycle_behind_valid_prefix(self):
        """Test a cycle that does not include the requested root."""
        injector = (
            Registry()
            .fn("root", lambda a: a)
            .fn("a", lambda b: b)
            .fn("b", lambda c: c)
            .fn("c", lambda a: a)
            .finalize()
        )

        with pytest.raises(CycleDetectedError) as exc_info:
            await asyncio.wait_for(injector.build("root"), timeout=1)

        assert exc_info.value.cycle == ("a", "b", "c", "a")

    @pytest.mark.asyncio
    async def test_cycle_does_not_poison_injector(self):
        """Test that unrelated providers still build after a cycle failure."""
        injector = Registry().fn("a", lambda a: a).constant("ok", "fine").finalize()

        with pytest.raises(CycleDetectedError):
            await injector.build("a")

        assert await injector.build("ok") == "fine"

    @pytest.mark.asyncio
    async def test_failure_in_one_branch_with_slow_sibling(self):
        """Test that the first failure surfaces while the sibling keeps running to completion."""
        finished = []

        async def slow():
            await asyncio.sleep(0.05)
            finished.append("slow")
            return "slow"

        injector = (
            Registry().fn("slow", slow, is_cacheable=True).fn("root", lambda slow, missing: None).finalize()
        )

        with pytest.raises(ProviderNotFoundError) as exc_info:
            await injector.build("root")

        assert exc_info.value.chain == ("missing", "root")
        assert finished == []
        assert not injector.is_cached("slow")

        await asyncio.sleep(0.1)

        assert finished == ["slow"]
        assert injector.is_cached("slow")

    @pytest.mark.asyncio
    async def test_missing_dependency_does_not_cache_dependents(self):
        """Test that a failed cacheable provider is retried after registration is fixed."""
        broken = Registry().fn("service", lambda database: database, is_cacheable=True)
        injector = broken.finalize()

        with pytest.raises(ProviderNotFoundError):
            await injector.build("service")
        assert not injector.is_cached("service")

        fixed = broken.constant("database", "db").finalize()
        assert await fixed.build("service") == "db"
