"""
Local Filesystem Health Store.
Keeps samples in memory and mirrors them, together with the granted metrics,
to a JSON file on the server's local filesystem.
"""

import json
import logging
import aiofiles
from pathlib import Path
from typing import Callable, TypeVar

from pydantic import ValidationError

from .memory_store import InMemoryHealthStore
from ..core.exceptions import UnknownError
from ..models import HealthSampleBatch, MetricType

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LocalHealthStore(InMemoryHealthStore):
    """
    JSON-file backed health data store.

    File layout::

        {"authorized": ["steps", ...], "samples": {"steps": [...], "heart_rate": [...], ...}}
    """

    def __init__(self, base_dir: str = "./data", filename: str = "health_samples.json",
                 authorize_all: bool = True):
        """
        Initialize local storage with a base directory.

        Args:
            base_dir: Directory holding the data file
            filename: Name of the JSON data file
            authorize_all: Grant every metric when the file does not exist yet
        """
        super().__init__(authorize_all=authorize_all)
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.path = self._get_full_path(filename)

    def _get_full_path(self, filename: str) -> Path:
        full_path = (self.base_dir / filename).resolve()
        if not full_path.is_relative_to(self.base_dir):
            raise ValueError(f"Invalid path: {filename} - path traversal detected")
        return full_path

    async def load(self) -> bool:
        """
        Load samples and grants from disk, replacing what is in memory.

        Returns:
            bool: False when there is no data file yet
        """
        if not self.path.exists():
            logger.info(f"No health data file at {self.path}, starting empty")
            return False

        try:
            async with aiofiles.open(self.path, 'r', encoding='utf-8') as f:
                payload = json.loads(await f.read())
            batch = HealthSampleBatch.model_validate(payload.get("samples", {}))
            authorized = {MetricType(m) for m in payload.get("authorized", [])}
        except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
            logger.error(f"Failed to load health data from {self.path}: {e}", exc_info=True)
            raise UnknownError(f"Could not read health data file: {e}") from e

        self.restore(batch, authorized)
        logger.info(f"Loaded health data from {self.path}")
        return True

    async def save(self) -> None:
        """Write samples and grants to disk."""
        payload = {
            "authorized": sorted(m.value for m in self._authorized),
            "samples": self.snapshot().model_dump(mode="json"),
        }
        try:
            async with aiofiles.open(self.path, 'w', encoding='utf-8') as f:
                await f.write(json.dumps(payload, indent=2, ensure_ascii=False))
        except OSError as e:
            logger.error(f"Failed to save health data to {self.path}: {e}", exc_info=True)
            raise UnknownError(f"Could not write health data file: {e}") from e


    async def apply_and_save(self, change: Callable[[], T]) -> T:
        """
        Apply an in-memory ``change`` and persist the result.

        When the write fails the store is rolled back to its previous state,
        so memory and disk never disagree.

        Args:
            change: Mutation of this store, e.g. ``lambda: store.add_samples(batch)``

        Returns:
            Whatever ``change`` returns

        Raises:
            UnknownError: The data file could not be written
        """
        previous_samples, previous_grants = self.snapshot(), set(self._authorized)
        result = change()
        try:
            await self.save()
        except UnknownError:
            self.restore(previous_samples, previous_grants)
            logger.warning("Health data change rolled back after a failed save")
            raise
        return result
