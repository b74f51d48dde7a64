"""
Entry point for ``python -m yt_transcript_mcp``: starts the MCP server on
stdio.  The server blocks until it is terminated by the client.
"""

from yt_transcript_mcp.server import run

if __name__ == "__main__":
    run()
