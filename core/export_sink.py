#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Export sinks - where rendered files are stored.

The pipeline only needs a place to write bytes and a location back.
Any exception raised by a sink, or an unsuccessful UploadResult, is
reported to the orchestrator as SinkFailure.
"""

import asyncio
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from config.logging_config import get_logger

from .errors import SinkFailure

logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadResult:
    """Location reference returned by a sink"""
    location_url: str
    success: bool = True
    file_id: Optional[str] = None


@dataclass(frozen=True)
class StoredFile:
    """One file kept by MemorySink"""
    file_name: str
    content: bytes
    mime_type: str
    metadata: Dict[str, Any]


class ExportSink(ABC):
    """Capability contract for storing rendered exports"""

    name: str = "base"

    @abstractmethod
    async def upload(
        self,
        file_name: str,
        content: Union[str, bytes],
        mime_type: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> UploadResult:
        pass


def _as_bytes(content: Union[str, bytes]) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else content


class MemorySink(ExportSink):
    """
    Keeps uploaded files in a dict.

    Used for tests and as the default backend when no storage is configured.
    """

    name = "memory"

    def __init__(self):
        self.files: Dict[str, StoredFile] = {}

    async def upload(self, file_name, content, mime_type, metadata=None):
        file_id = uuid.uuid4().hex[:12]
        self.files[file_id] = StoredFile(
            file_name=file_name,
            content=_as_bytes(content),
            mime_type=mime_type,
            metadata=dict(metadata or {}),
        )
        return UploadResult(
            location_url=f"memory://{file_id}/{file_name}",
            success=True,
            file_id=file_id,
        )

    def get(self, file_id: str) -> Optional[StoredFile]:
        return self.files.get(file_id)

    def clear(self):
        self.files.clear()


class LocalFileSink(ExportSink):
    """Writes exports under an output directory, one sub-folder per upload"""

    name = "local"

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    async def upload(self, file_name, content, mime_type, metadata=None):
        file_id = uuid.uuid4().hex[:12]
        target = self.output_dir / file_id / Path(file_name).name
        data = _as_bytes(content)

        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, self._write, target, data)

        logger.debug(f"Wrote {len(data)} bytes to {target}")
        return UploadResult(
            location_url=target.resolve().as_uri(),
            success=True,
            file_id=file_id,
        )

    @staticmethod
    def _write(target: Path, data: bytes):
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)


async def store(
    sink: ExportSink,
    file_name: str,
    content: Union[str, bytes],
    mime_type: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> UploadResult:
    """
    Upload through a sink, normalizing every failure to SinkFailure.

    Raises:
        SinkFailure: The sink raised or reported an unsuccessful upload.
    """
    try:
        result = await sink.upload(file_name, content, mime_type, metadata)
    except SinkFailure:
        raise
    except Exception as e:
        logger.error(f"Sink '{sink.name}' failed to store {file_name}: {e}")
        raise SinkFailure(f"Failed to store {file_name}: {e}", file_name=file_name) from e

    if not result.success or not result.location_url:
        logger.error(f"Sink '{sink.name}' rejected {file_name}")
        raise SinkFailure(f"Failed to store {file_name}", file_name=file_name)
    return result


def get_sink(name: str, output_dir: Optional[Union[str, Path]] = None) -> ExportSink:
    """
    Build a sink by backend name ("memory" or "local").

    Raises:
        ValueError: Unknown backend, or "local" without an output directory.
    """
    backend = (name or "memory").lower()
    if backend == "memory":
        return MemorySink()
    if backend == "local":
        if output_dir is None:
            raise ValueError("Local storage backend requires an output directory")
        return LocalFileSink(output_dir)
    raise ValueError(f"Unknown storage backend: {name}")
