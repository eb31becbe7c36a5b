"""
Space Registry
==============

Synchronous lookup of spaces loaded from a JSON configuration file.

Version: 0.1.0
"""

from functools import lru_cache
from pathlib import Path

from pydantic import TypeAdapter

from shared.config import settings
from shared.logging import get_logger
from shared.spaces.models import Space

logger = get_logger(__name__)

_spaces_adapter = TypeAdapter(list[Space])


class SpaceNotFoundError(LookupError):
    """Raised when no space has the requested slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Space not found: {slug}")
        self.slug = slug


class SpaceRegistry:
    """In-memory index of spaces by slug."""

    def __init__(self, spaces: list[Space]) -> None:
        self._spaces: dict[str, Space] = {}
        for space in spaces:
            if space.slug in self._spaces:
                raise ValueError(f"Duplicate space slug: {space.slug}")
            self._spaces[space.slug] = space

    @classmethod
    def from_file(cls, path: str | Path) -> "SpaceRegistry":
        """
        Load spaces from a JSON file holding a list of spaces.

        Args:
            path: Path to the JSON file

        Returns:
            SpaceRegistry over the loaded spaces
        """
        path = Path(path)
        spaces = _spaces_adapter.validate_json(path.read_bytes())
        logger.info("spaces_loaded", path=str(path), count=len(spaces))
        return cls(spaces)

    def get_space(self, slug: str) -> Space:
        """
        Get a space by slug.

        Raises:
            SpaceNotFoundError: If no space has this slug
        """
        space = self._spaces.get(slug)
        if space is None:
            raise SpaceNotFoundError(slug)
        return space

    def __len__(self) -> int:
        return len(self._spaces)


@lru_cache
def get_space_registry() -> SpaceRegistry:
    """Get the registry loaded from the configured spaces file."""
    return SpaceRegistry.from_file(settings.spaces.config_path)
