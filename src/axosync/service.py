"""Request handling between the HTTP layer and the sourcemap/scraper."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from .config import AxosyncConfig, resolve_directory
from .patch import SourcemapSetRequest, apply_patches
from .scraper import scrape_file_paths
from .sourcemap import SourcemapInstance, SourcemapStore, get_sourcemap_path

logger = logging.getLogger(__name__)


@dataclass
class SyncService:
    """Shared state for request handlers.

    Every sourcemap mutation is a full load, patch and save of the document,
    so the whole cycle runs under one lock and batches apply in the order
    they acquire it.
    """

    config: AxosyncConfig
    store: SourcemapStore
    scrape_directory: Path
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @classmethod
    def from_config(cls, config: AxosyncConfig, project_root: Path) -> SyncService:
        """Build the service with directories resolved against ``project_root``."""
        sourcemap_dir = resolve_directory(config.sourcemap_directory, project_root)
        return cls(
            config=config,
            store=SourcemapStore(get_sourcemap_path(sourcemap_dir)),
            scrape_directory=resolve_directory(config.file_paths_scrape_directory, project_root),
        )

    def set_sourcemap(self, requests: list[SourcemapSetRequest]) -> SourcemapInstance:
        """Apply a patch batch to the persisted sourcemap.

        Nothing is written unless every request in the batch succeeds.
        """
        with self._lock:
            tree = self.store.load()
            tree = apply_patches(tree, requests)
            self.store.save(tree)
        logger.info("Applied %d sourcemap operation(s)", len(requests))
        return tree

    def get_sourcemap(self) -> SourcemapInstance:
        """Current persisted sourcemap."""
        with self._lock:
            return self.store.load()

    def get_file_paths(self, relative_to: Path | None = None) -> list[str]:
        """Scrape the configured directory."""
        paths = scrape_file_paths(self.scrape_directory, relative_to)
        logger.debug("Scraped %d path(s) from %s", len(paths), self.scrape_directory)
        return paths

    def get_project_name(self) -> str:
        return self.config.project_name
