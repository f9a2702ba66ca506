"""Client for the GitHub repository contents API."""

import base64
import binascii
import re
from datetime import datetime, timezone

import httpx
from pydantic import ValidationError

from docs_server.core.config_store import ConfigStore
from docs_server.core.errors import (
    DecodeError,
    DocsServerError,
    GatewayError,
    NotFoundError,
    RateLimitExceededError,
)
from docs_server.core.logging import get_logger
from docs_server.models.content import DirectoryItem, EntryType, FileContent, RemoteEntry

logger = get_logger(__name__)

GITHUB_API_URL = "https://api.github.com"
USER_AGENT = "MCP-Docs-Server/1.0.0"

_URL_PATTERNS = [
    re.compile(r"github\.com/([^/]+/[^/]+)"),  # https://github.com/owner/repo
    re.compile(r"^([^/]+/[^/]+)$"),  # owner/repo
]


def normalize_github_url(url: str) -> tuple[str, str]:
    """Turn a GitHub URL or ``owner/repo`` string into ``(repo, github_url)``."""
    clean_url = url.strip().rstrip("/")
    if clean_url.endswith(".git"):
        clean_url = clean_url[: -len(".git")]

    for pattern in _URL_PATTERNS:
        match = pattern.search(clean_url)
        if match:
            repo = match.group(1)
            return repo, f"https://github.com/{repo}"

    raise ValueError(f"Invalid GitHub URL format: {url}")


def format_reset_time(reset: str | None) -> str:
    """Render an ``X-RateLimit-Reset`` epoch value as a UTC wall-clock time."""
    if not reset:
        return "unknown"
    try:
        moment = datetime.fromtimestamp(int(reset), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return "unknown"
    return moment.strftime("%H:%M:%S UTC")


def decode_file_body(content: str) -> str:
    """Decode a base64 file body as returned by the contents API.

    Bytes that are not valid UTF-8 become replacement characters.

    Raises:
        DecodeError: If the payload is not valid base64
    """
    # The API wraps base64 bodies at 60 columns
    compact = "".join(content.split())
    try:
        raw = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 content: {e}") from e
    return raw.decode("utf-8", errors="replace")


class GitHubClient:
    """Issues one contents-API request per call. No retries, no caching."""

    def __init__(
        self,
        store: ConfigStore,
        api_url: str = GITHUB_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.store = store
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _headers(self, api_key: str) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        if api_key:
            headers["Authorization"] = f"token {api_key}"
        return headers

    async def fetch_content(
        self, repo: str, path: str = "", ref: str = "main"
    ) -> RemoteEntry:
        """Fetch a directory listing or a file descriptor.

        Raises:
            RateLimitExceededError: On HTTP 403
            GatewayError: On any other error status or transport failure
        """
        api_key = self.store.load_operational_config().github.api_key
        url = f"{self.api_url}/repos/{repo}/contents/{path.strip('/')}"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(
                    url, params={"ref": ref}, headers=self._headers(api_key)
                )
        except httpx.TimeoutException as e:
            raise GatewayError(f"Request timeout: {url}") from e
        except httpx.HTTPError as e:
            raise GatewayError(f"Failed to fetch from GitHub: {e}") from e

        if response.status_code == 403:
            raise self._rate_limit_error(response, authenticated=bool(api_key))

        if response.status_code >= 400:
            raise GatewayError(
                f"GitHub API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GatewayError(f"Failed to parse GitHub response: {e}") from e

        logger.debug("Fetched content", repo=repo, path=path or "/", ref=ref)
        return self._parse_entry(data)

    async def read_text_file(
        self, repo: str, path: str, ref: str = "main"
    ) -> tuple[FileContent, str]:
        """Fetch a regular file and return its descriptor and decoded text.

        Raises:
            NotFoundError: If the path is a directory, not a regular file,
                or uses an encoding other than base64
        """
        entry = await self.fetch_content(repo, path, ref)

        if isinstance(entry, list):
            raise NotFoundError(
                f"Path '{path}' is a directory, not a file. "
                "Use browse-repo to explore directories."
            )
        if entry.type != EntryType.FILE:
            raise NotFoundError(f"'{path}' is not a regular file.")
        if entry.encoding != "base64" or entry.content is None:
            raise NotFoundError(
                f"Cannot read file '{path}': unsupported encoding '{entry.encoding}'"
            )

        return entry, decode_file_body(entry.content)

    @staticmethod
    def _rate_limit_error(
        response: httpx.Response, authenticated: bool
    ) -> RateLimitExceededError:
        remaining = response.headers.get("X-RateLimit-Remaining") or "unknown"
        reset_at = format_reset_time(response.headers.get("X-RateLimit-Reset"))
        hint = (
            "Authenticated"
            if authenticated
            else "Consider adding a GitHub API key to config.json for higher rate limits"
        )
        return RateLimitExceededError(
            f"GitHub API rate limit exceeded. Remaining: {remaining}. "
            f"Resets at: {reset_at}. {hint}",
            remaining=remaining,
            reset_at=reset_at,
            authenticated=authenticated,
        )

    @staticmethod
    def _parse_entry(data) -> RemoteEntry:
        try:
            if isinstance(data, list):
                return [DirectoryItem.model_validate(item) for item in data]
            if isinstance(data, dict):
                return FileContent.model_validate(data)
        except ValidationError as e:
            raise GatewayError(f"Unexpected GitHub response shape: {e}") from e
        raise GatewayError("Unexpected GitHub response shape")


async def fetch_first_file(
    client: GitHubClient, repo: str, names: list[str], branches: list[str]
) -> tuple[str, str, str] | None:
    """Return ``(text, name, branch)`` for the first file that can be read."""
    for branch in branches:
        for name in names:
            try:
                entry = await client.fetch_content(repo, name, branch)
                if isinstance(entry, FileContent) and entry.content:
                    return decode_file_body(entry.content), name, branch
            except DocsServerError as e:
                logger.debug("Candidate not readable", repo=repo, path=name, error=e.message)
    return None
