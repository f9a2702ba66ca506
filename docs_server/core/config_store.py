"""JSON-backed settings and repository registry.

Both documents are re-read on every call and rewritten wholesale on every
mutation. There is no locking: concurrent writers race and the last write
wins.
"""

import json
from pathlib import Path

from pydantic import ValidationError

from docs_server.core.errors import ConflictError, NotFoundError
from docs_server.core.logging import get_logger
from docs_server.models.config import OperationalConfig, RepositoryEntry

logger = get_logger(__name__)


class ConfigStore:
    """Loads and persists config.json and repodata.json."""

    def __init__(self, config_path: Path, registry_path: Path):
        self.config_path = Path(config_path)
        self.registry_path = Path(registry_path)

    def load_operational_config(self) -> OperationalConfig:
        """Read config.json, falling back to defaults on any failure."""
        if not self.config_path.exists():
            return OperationalConfig()
        try:
            raw = json.loads(self.config_path.read_text(encoding="utf-8"))
            return OperationalConfig.model_validate(raw)
        except (
            OSError,
            UnicodeDecodeError,
            json.JSONDecodeError,
            ValidationError,
        ) as e:
            logger.warning(
                "Error loading settings, using defaults",
                path=str(self.config_path),
                error=str(e),
            )
            return OperationalConfig()

    def load_registry(self) -> dict[str, RepositoryEntry]:
        """Read repodata.json, returning an empty registry on failure."""
        if not self.registry_path.exists():
            logger.debug("No repository registry", path=str(self.registry_path))
            return {}
        try:
            raw = json.loads(self.registry_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(
                "Error loading repository registry",
                path=str(self.registry_path),
                error=str(e),
            )
            return {}

        if not isinstance(raw, dict):
            logger.warning(
                "Repository registry is not a JSON object",
                path=str(self.registry_path),
            )
            return {}

        registry = {}
        for key, value in raw.items():
            try:
                registry[key] = RepositoryEntry.model_validate(value)
            except ValidationError as e:
                logger.warning("Skipping invalid registry entry", key=key, error=str(e))
        return registry

    def save_registry(self, registry: dict[str, RepositoryEntry]) -> None:
        """Overwrite repodata.json with the given registry."""
        data = {
            key: entry.model_dump(by_alias=True, exclude_none=True)
            for key, entry in registry.items()
        }
        self._write_json(self.registry_path, data)

    def add_entry(self, key: str, entry: RepositoryEntry) -> dict[str, RepositoryEntry]:
        """Add a new registry entry and persist the whole document.

        Raises:
            ConflictError: If the key is already registered
        """
        registry = self.load_registry()
        if key in registry:
            raise ConflictError(
                f"Repository key '{key}' already exists in repodata.json. "
                "Use a different key or update the existing entry manually."
            )

        updated = {**registry, key: entry}
        self.save_registry(updated)
        logger.info("Added repository", key=key, repo=entry.repo)
        return updated

    def remove_entry(
        self, key: str
    ) -> tuple[dict[str, RepositoryEntry], RepositoryEntry]:
        """Remove a registry entry and persist the whole document.

        Returns:
            The updated registry and the removed entry

        Raises:
            NotFoundError: If the key is not registered
        """
        registry = self.load_registry()
        if key not in registry:
            raise NotFoundError(
                f"Repository key '{key}' not found in repodata.json. "
                f"Available keys: {', '.join(registry)}"
            )

        updated = dict(registry)
        removed = updated.pop(key)
        self.save_registry(updated)
        logger.info("Removed repository", key=key, repo=removed.repo)
        return updated, removed

    def ensure_defaults(self) -> list[Path]:
        """Create missing config.json and repodata.json. Never overwrites."""
        created = []
        if not self.config_path.exists():
            self._write_json(
                self.config_path, OperationalConfig().model_dump(by_alias=True)
            )
            created.append(self.config_path)
        if not self.registry_path.exists():
            self._write_json(self.registry_path, {})
            created.append(self.registry_path)
        return created

    def save_operational_config(self, config: OperationalConfig) -> None:
        """Overwrite config.json."""
        self._write_json(self.config_path, config.model_dump(by_alias=True))

    @staticmethod
    def _write_json(path: Path, data: dict) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
