"""
Docs Server: documentation and source browsing over MCP.

Serves local markdown documentation and the contents of configured GitHub
repositories to Claude Code through a set of Model Context Protocol tools.
"""

__version__ = "1.0.0"
