"""MCP server exposing documentation and repository tools.

Tools read local markdown under the docs root and browse the GitHub
repositories registered in repodata.json.
"""

__version__ = "1.0.0"
