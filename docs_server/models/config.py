"""Persisted configuration models.

Both documents use camelCase keys on disk; the models accept either the
alias or the field name and always dump by alias.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

REPO_PATTERN = re.compile(r"^[^/]+/[^/]+$")


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RateLimitSettings(_CamelModel):
    """Expected hourly request ceilings. Informational only."""

    unauthenticated: int = 60
    authenticated: int = 5000


class GitHubSettings(_CamelModel):
    """GitHub credential and rate-limit expectations."""

    api_key: str = Field(default="", alias="apiKey")
    rate_limit: RateLimitSettings = Field(
        default_factory=RateLimitSettings, alias="rateLimit"
    )

    @property
    def expected_rate_limit(self) -> int:
        if self.api_key:
            return self.rate_limit.authenticated
        return self.rate_limit.unauthenticated


class CacheSettings(_CamelModel):
    """Reserved cache settings; no caching layer reads them yet."""

    enabled: bool = False
    ttl_minutes: int = Field(default=10, alias="ttlMinutes")


class OperationalConfig(_CamelModel):
    """Contents of config.json."""

    github: GitHubSettings = Field(default_factory=GitHubSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)


class DocsSource(_CamelModel):
    """Documentation hosted in a (possibly different) GitHub repository."""

    repo: str
    branch: str
    paths: list[str] = Field(default_factory=list)

    @field_validator("repo")
    @classmethod
    def validate_repo(cls, v: str) -> str:
        if not REPO_PATTERN.match(v):
            raise ValueError(f"repo must be in 'owner/name' form, got '{v}'")
        return v


class RepositoryEntry(_CamelModel):
    """One library in repodata.json. The registry key is the mapping key."""

    name: str
    description: str = ""
    github: str
    repo: str
    main_branch: str = Field(default="main", alias="mainBranch")
    src_paths: list[str] = Field(default_factory=list, alias="srcPaths")
    example_paths: list[str] = Field(default_factory=list, alias="examplePaths")
    docs: DocsSource | None = None

    @field_validator("repo")
    @classmethod
    def validate_repo(cls, v: str) -> str:
        if not REPO_PATTERN.match(v):
            raise ValueError(f"repo must be in 'owner/name' form, got '{v}'")
        return v


__all__ = [
    "RateLimitSettings",
    "GitHubSettings",
    "CacheSettings",
    "OperationalConfig",
    "DocsSource",
    "RepositoryEntry",
]
