"""FastMCP server initialization for wires MCP."""

from mcp.server.fastmcp import FastMCP

from wires_mcp.config import load_settings
from wires_mcp.logging_setup import setup_logging

# Initialize the MCP server
mcp = FastMCP("wires_mcp")


def run() -> None:
    """Run the MCP server over stdio."""
    setup_logging(load_settings().log_level)
    mcp.run()


if __name__ == "__main__":
    run()
