#!/usr/bin/env python3
"""
Example: Basic jetbridge usage without an MCP client

This demonstrates the bridge core:
- Discovering a running JetBrains IDE
- Listing default and IDE-provided tools
- Calling a tool

Usage:
    python examples/basic_usage.py
    IDE_PORT=63342 python examples/basic_usage.py
"""

import asyncio

from jetbridge.config import load_config
from jetbridge.server import BridgeServer


async def main():
    config = load_config()
    server = BridgeServer(config)
    await server.start()

    try:
        print("=" * 70)
        print("🔌 JETBRIDGE DEMO")
        print("=" * 70)

        if server.endpoint is None:
            print("❌ No running IDE found, only default tools are available")
        else:
            print(f"✅ IDE endpoint: {server.endpoint}")

        tools = await server.list_tools()
        print(f"\n🧰 {len(tools)} tools available:")
        for tool in tools:
            print(f"   • {tool.name}: {tool.description}")

        print("\n📄 Currently open file:")
        result = await server.call_tool("get_open_in_editor_file_path", {})
        marker = "❌" if result.is_error else "✅"
        print(f"   {marker} {result.text}")
    finally:
        await server.stop()


if __name__ == "__main__":
    asyncio.run(main())
