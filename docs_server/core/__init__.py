"""Docs Server core.

- config_store.py: config.json / repodata.json persistence
- github.py: GitHub contents API gateway
- enumerator.py: depth-limited recursive file discovery
- analyzer.py: repository structure analysis
- docs.py: documentation resolution and markdown sections
- search.py: keyword and code-block search
"""

from docs_server.core.analyzer import RepositoryAnalyzer
from docs_server.core.config_store import ConfigStore
from docs_server.core.docs import DocumentationResolver
from docs_server.core.errors import *
from docs_server.core.github import GitHubClient

__all__ = [
    "ConfigStore",
    "GitHubClient",
    "RepositoryAnalyzer",
    "DocumentationResolver",
    "DocsServerError",
    "NotFoundError",
    "ConflictError",
    "GatewayError",
    "RateLimitExceededError",
    "DecodeError",
]
