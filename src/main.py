"""Main entry point for the JetBrains MCP proxy."""

from jetbridge.mcp_server import create_server, main, run_server

__all__ = ["create_server", "main", "run_server"]

if __name__ == "__main__":
    main()
