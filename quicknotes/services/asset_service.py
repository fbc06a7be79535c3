"""
QuickNotes Backend: Static Asset Service
==========================================

What:  Reads the single client page (index.html) from the static directory.
How:   aiofiles reads the bytes off the event loop; the route returns them
       unchanged (no templating).
Who:   Called by the "/" route.

Security:
    Only names that resolve inside the static directory are served, so a
    crafted asset name cannot reach files elsewhere on disk.
"""

import logging
from pathlib import Path

import aiofiles

from quicknotes.exceptions import AssetMissingError

logger = logging.getLogger(__name__)

INDEX_ASSET = "index.html"


class AssetService:
    """Serves files from one configured static directory."""

    def __init__(self, static_dir: str):
        self.static_dir = Path(static_dir).resolve()

    def _resolve(self, name: str) -> Path:
        path = (self.static_dir / name).resolve()
        if not path.is_relative_to(self.static_dir):
            raise AssetMissingError(asset=name)
        return path

    async def read(self, name: str = INDEX_ASSET) -> bytes:
        """
        Return the raw bytes of a static asset.

        Raises:
            AssetMissingError: the file does not exist, is not a regular file
                or cannot be read.
        """
        path = self._resolve(name)
        if not path.is_file():
            logger.warning("Static asset missing: %s", path)
            raise AssetMissingError(asset=name, context={"path": str(path)})
        try:
            async with aiofiles.open(path, mode="rb") as f:
                return await f.read()
        except OSError as e:
            logger.error("Could not read static asset %s: %s", path, e)
            raise AssetMissingError(asset=name, context={"path": str(path), "error": str(e)}) from e
