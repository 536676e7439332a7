#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Batch prompt sources.

A source lists the items of a folder; each item is exported independently
by the orchestrator's batch mode.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Union

from config.logging_config import get_logger
from config.constants import (
    BATCH_MAX_ITEMS,
    BATCH_STRUCTURED_EXTENSIONS,
    BATCH_TEXT_EXTENSIONS,
)

from .errors import InvalidRequestError
from .types import SourceKind

logger = get_logger(__name__)


@dataclass(frozen=True)
class SourceItem:
    """One prompt read from a batch folder"""
    name: str
    content: str
    source_kind: SourceKind = SourceKind.TEXT


class PromptSource(ABC):
    """Capability contract for batch input"""

    @abstractmethod
    async def list_items(self, folder_id: str) -> List[SourceItem]:
        pass


class LocalFolderSource(PromptSource):
    """
    Reads prompts from ``<base_dir>/<folder_id>``.

    Text files (.txt, .md) become text items, .json files structured items.
    Files are read in name order; other files are ignored.
    """

    def __init__(
        self,
        base_dir: Union[str, Path],
        text_extensions: Sequence[str] = tuple(BATCH_TEXT_EXTENSIONS),
        structured_extensions: Sequence[str] = tuple(BATCH_STRUCTURED_EXTENSIONS),
        max_items: int = BATCH_MAX_ITEMS,
    ):
        self.base_dir = Path(base_dir)
        self.text_extensions = {ext.lower() for ext in text_extensions}
        self.structured_extensions = {ext.lower() for ext in structured_extensions}
        self.max_items = max_items

    def resolve_folder(self, folder_id: str) -> Path:
        """
        Raises:
            InvalidRequestError: Empty id, id escaping the base dir, or missing folder.
        """
        if not folder_id or not str(folder_id).strip():
            raise InvalidRequestError("Folder ID is required")

        base = self.base_dir.resolve()
        folder = (base / str(folder_id).strip()).resolve()
        if folder != base and base not in folder.parents:
            raise InvalidRequestError(f"Invalid folder ID: {folder_id}")
        if not folder.is_dir():
            raise InvalidRequestError(f"Folder not found: {folder_id}")
        return folder

    async def list_items(self, folder_id: str) -> List[SourceItem]:
        folder = self.resolve_folder(folder_id)
        loop = asyncio.get_event_loop()
        items = await loop.run_in_executor(None, self._read_folder, folder)
        logger.info(f"Loaded {len(items)} prompts from folder '{folder_id}'")
        return items

    def _read_folder(self, folder: Path) -> List[SourceItem]:
        items = []
        for path in sorted(folder.iterdir()):
            if not path.is_file():
                continue
            suffix = path.suffix.lower()
            if suffix in self.text_extensions:
                kind = SourceKind.TEXT
            elif suffix in self.structured_extensions:
                kind = SourceKind.STRUCTURED
            else:
                continue

            if len(items) >= self.max_items:
                logger.warning(f"Folder {folder.name} has more than {self.max_items} prompts, truncating")
                break
            items.append(SourceItem(
                name=path.name,
                content=path.read_text(encoding="utf-8", errors="replace"),
                source_kind=kind,
            ))
        return items


class StaticSource(PromptSource):
    """In-memory source keyed by folder id"""

    def __init__(self, folders: dict):
        self.folders = folders

    async def list_items(self, folder_id: str) -> List[SourceItem]:
        if folder_id not in self.folders:
            raise InvalidRequestError(f"Folder not found: {folder_id}")
        return list(self.folders[folder_id])
