"""Unit tests for the tool registry.

Covers:
- decode_tool_listing: both payload shapes and malformed entries
- merge_tools: static tools always survive, remote overrides by name
- ToolRegistry: TTL fast path, retry with backoff, stale fallback
"""

import pytest

from jetbridge.errors import ToolFetchFailure
from jetbridge.models import ToolDescriptor, ToolRegistrySnapshot
from jetbridge.registry import (
    DEFAULT_TOOLS,
    ToolRegistry,
    decode_tool_listing,
    get_default_tool,
    merge_tools,
)
from tests.helpers import FIRST_PORT, endpoint_at, tool_entry

STATIC = (
    ToolDescriptor("x", "static x"),
    ToolDescriptor("y", "static y"),
)

# ============================================================================
# Tests: Default catalog
# ============================================================================


class TestDefaultCatalog:
    def test_names_are_unique(self):
        names = [tool.name for tool in DEFAULT_TOOLS]
        assert len(names) == len(set(names)) == 30

    def test_schemas_are_objects(self):
        for tool in DEFAULT_TOOLS:
            assert tool.input_schema["type"] == "object"
            for required in tool.input_schema.get("required", []):
                assert required in tool.input_schema["properties"]

    def test_get_default_tool(self):
        tool = get_default_tool("toggle_debugger_breakpoint")
        assert tool.input_schema["properties"]["line"]["type"] == "integer"
        assert tool.input_schema["required"] == ["filePathInProject", "line"]

        with pytest.raises(KeyError):
            get_default_tool("does_not_exist")


# ============================================================================
# Tests: Decoding and merging
# ============================================================================


class TestDecodeToolListing:
    def test_bare_array(self):
        tools = decode_tool_listing([tool_entry("a", "desc a")])
        assert tools == [ToolDescriptor.from_dict(tool_entry("a", "desc a"))]

    def test_wrapped_object(self):
        tools = decode_tool_listing({"tools": [tool_entry("a"), tool_entry("b")]})
        assert [t.name for t in tools] == ["a", "b"]

    @pytest.mark.parametrize("payload", [{"items": []}, {"tools": "nope"}, "text", 42, None])
    def test_other_shapes_rejected(self, payload):
        with pytest.raises(ToolFetchFailure):
            decode_tool_listing(payload)

    def test_malformed_entries_skipped(self):
        tools = decode_tool_listing(
            [tool_entry("good"), {"description": "no name"}, "junk", {"name": 3}]
        )
        assert [t.name for t in tools] == ["good"]

    def test_missing_fields_get_defaults(self):
        (tool,) = decode_tool_listing([{"name": "bare"}])
        assert tool.description == ""
        assert tool.input_schema == {"type": "object", "properties": {}}
        assert tool.to_dict()["inputSchema"] == {"type": "object", "properties": {}}


class TestMergeTools:
    def test_static_tools_survive_empty_remote(self):
        assert merge_tools(STATIC, []) == list(STATIC)

    def test_remote_only_tools_are_appended(self):
        remote = [ToolDescriptor("z", "remote z"), ToolDescriptor("w", "remote w")]
        merged = merge_tools(STATIC, remote)
        assert [t.name for t in merged] == ["x", "y", "z", "w"]

    def test_remote_overrides_static_description(self):
        merged = merge_tools(STATIC, [ToolDescriptor("x", "remote x")])

        by_name = {t.name: t for t in merged}
        assert len([t for t in merged if t.name == "x"]) == 1
        assert by_name["x"].description == "remote x"
        assert by_name["y"].description == "static y"

    def test_identical_duplicate_keeps_static_entry(self):
        merged = merge_tools(STATIC, [ToolDescriptor("x", "static x")])
        assert merged[0] is STATIC[0]

    def test_every_static_name_present_whatever_the_remote(self):
        remotes = [
            [],
            [ToolDescriptor("x", "other")],
            [ToolDescriptor("q", "q"), ToolDescriptor("y", "changed")],
        ]
        for remote in remotes:
            names = {t.name for t in merge_tools(STATIC, remote)}
            assert {"x", "y"} <= names


# ============================================================================
# Tests: ToolRegistry
# ============================================================================


@pytest.fixture
def registry(http_client, state, registry_config, clock, sleep):
    return ToolRegistry(
        http_client, state, registry_config, static_tools=STATIC, clock=clock, sleep=sleep
    )


class TestToolRegistry:
    @pytest.mark.asyncio
    async def test_no_endpoint_returns_static(self, fake_ide, registry):
        tools = await registry.list_tools()

        assert tools == list(STATIC)
        assert fake_ide.requests == []

    @pytest.mark.asyncio
    async def test_fetch_builds_snapshot(self, fake_ide, registry, state, clock):
        fake_ide.serve(FIRST_PORT, [tool_entry("z", "remote z")], wrapped=True)
        state.publish_endpoint(endpoint_at(FIRST_PORT))

        tools = await registry.list_tools()

        assert [t.name for t in tools] == ["x", "y", "z"]
        assert isinstance(state.snapshot, ToolRegistrySnapshot)
        assert set(state.snapshot.entries) == {"z"}
        assert state.snapshot.fetched_at == clock.now

    @pytest.mark.asyncio
    async def test_fast_path_makes_no_requests(self, fake_ide, registry, state, clock):
        fake_ide.serve(FIRST_PORT, [tool_entry("z")])
        state.publish_endpoint(endpoint_at(FIRST_PORT))
        await registry.list_tools()
        requests_after_fetch = len(fake_ide.requests)

        clock.advance(29.9)
        tools = await registry.list_tools()
        await registry.list_tools()

        assert len(fake_ide.requests) == requests_after_fetch
        assert [t.name for t in tools] == ["x", "y", "z"]

    @pytest.mark.asyncio
    async def test_expired_snapshot_refetches(self, fake_ide, registry, state, clock):
        port = fake_ide.serve(FIRST_PORT, [tool_entry("z")])
        state.publish_endpoint(endpoint_at(FIRST_PORT))
        await registry.list_tools()

        port.listing = [tool_entry("w")]
        clock.advance(30.0)
        tools = await registry.list_tools()

        assert len(fake_ide.listing_requests()) == 2
        assert [t.name for t in tools] == ["x", "y", "w"]

    @pytest.mark.asyncio
    async def test_remote_overrides_static_description(self, fake_ide, registry, state):
        fake_ide.serve(FIRST_PORT, [tool_entry("x", "remote x")], wrapped=True)
        state.publish_endpoint(endpoint_at(FIRST_PORT))

        tools = await registry.list_tools()

        xs = [t for t in tools if t.name == "x"]
        assert len(xs) == 1
        assert xs[0].description == "remote x"

    @pytest.mark.asyncio
    async def test_retries_three_times_with_increasing_backoff(
        self, fake_ide, registry, state, sleep
    ):
        fake_ide.serve(FIRST_PORT).listing_status = 500
        state.publish_endpoint(endpoint_at(FIRST_PORT))

        tools = await registry.list_tools()

        assert len(fake_ide.listing_requests()) == 3
        assert sleep.delays == [2.0, 4.0]
        assert tools == list(STATIC)

    @pytest.mark.asyncio
    async def test_recovers_within_retries(self, fake_ide, registry, state, sleep):
        fake_ide.serve(FIRST_PORT, [tool_entry("z")]).listing_failures = 2
        state.publish_endpoint(endpoint_at(FIRST_PORT))

        tools = await registry.list_tools()

        assert len(fake_ide.listing_requests()) == 3
        assert sleep.delays == [2.0, 4.0]
        assert [t.name for t in tools] == ["x", "y", "z"]
        assert state.snapshot is not None

    @pytest.mark.asyncio
    async def test_stale_snapshot_used_when_fetch_fails(
        self, fake_ide, registry, state, clock
    ):
        port = fake_ide.serve(FIRST_PORT, [tool_entry("z")])
        state.publish_endpoint(endpoint_at(FIRST_PORT))
        await registry.list_tools()
        stale = state.snapshot

        clock.advance(120)
        port.listing_status = 500
        tools = await registry.list_tools()

        assert [t.name for t in tools] == ["x", "y", "z"]
        assert state.snapshot is stale

    @pytest.mark.asyncio
    async def test_unrecognized_payload_degrades_to_static(self, fake_ide, registry, state):
        fake_ide.serve(FIRST_PORT).listing = {"unexpected": []}
        state.publish_endpoint(endpoint_at(FIRST_PORT))

        tools = await registry.list_tools()

        assert tools == list(STATIC)
        assert len(fake_ide.listing_requests()) == 3

    @pytest.mark.asyncio
    async def test_invalidate_forces_refetch(self, fake_ide, registry, state):
        fake_ide.serve(FIRST_PORT, [tool_entry("z")])
        state.publish_endpoint(endpoint_at(FIRST_PORT))
        await registry.list_tools()

        registry.invalidate()
        assert state.snapshot is None
        await registry.list_tools()

        assert len(fake_ide.listing_requests()) == 2

    @pytest.mark.asyncio
    async def test_snapshot_not_cached_if_endpoint_changed_mid_fetch(
        self, fake_ide, http_client, state, registry_config, clock
    ):
        fake_ide.serve(FIRST_PORT).listing_failures = 1
        state.publish_endpoint(endpoint_at(FIRST_PORT))

        async def switching_sleep(seconds):
            state.publish_endpoint(endpoint_at(FIRST_PORT + 1))

        registry = ToolRegistry(
            http_client,
            state,
            registry_config,
            static_tools=STATIC,
            clock=clock,
            sleep=switching_sleep,
        )

        tools = await registry.list_tools()

        assert tools == list(STATIC)
        assert state.snapshot is None
