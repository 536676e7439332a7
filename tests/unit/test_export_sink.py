"""
Unit tests for core/export_sink.py - storage backends
"""
import pytest
from unittest.mock import AsyncMock

from core.errors import SinkFailure
from core.export_sink import LocalFileSink, MemorySink, UploadResult, get_sink, store


class TestMemorySink:

    @pytest.mark.asyncio
    async def test_upload_keeps_bytes(self):
        sink = MemorySink()
        result = await sink.upload("prompt.json", '{"prompt": "café"}', "application/json", {"platform": "custom"})

        assert result.success is True
        assert result.location_url == f"memory://{result.file_id}/prompt.json"
        stored = sink.get(result.file_id)
        assert stored.content == '{"prompt": "café"}'.encode("utf-8")
        assert stored.mime_type == "application/json"
        assert stored.metadata == {"platform": "custom"}

    @pytest.mark.asyncio
    async def test_uploads_do_not_collide(self):
        sink = MemorySink()
        first = await sink.upload("same.txt", "a", "text/plain")
        second = await sink.upload("same.txt", "b", "text/plain")
        assert first.file_id != second.file_id
        assert len(sink.files) == 2

        sink.clear()
        assert sink.files == {}


class TestLocalFileSink:

    @pytest.mark.asyncio
    async def test_writes_under_output_dir(self, tmp_path):
        sink = LocalFileSink(tmp_path / "out")
        result = await sink.upload("prompt.txt", "castle\n", "text/plain")

        written = tmp_path / "out" / result.file_id / "prompt.txt"
        assert written.read_text(encoding="utf-8") == "castle\n"
        assert result.location_url.startswith("file://")

    @pytest.mark.asyncio
    async def test_file_name_cannot_escape(self, tmp_path):
        sink = LocalFileSink(tmp_path / "out")
        result = await sink.upload("../../evil.txt", "x", "text/plain")
        assert (tmp_path / "out" / result.file_id / "evil.txt").exists()


class TestStore:
    """Every sink problem surfaces as SinkFailure."""

    @pytest.mark.asyncio
    async def test_exception_wrapped(self):
        sink = AsyncMock()
        sink.name = "broken"
        sink.upload = AsyncMock(side_effect=ConnectionError("unreachable"))

        with pytest.raises(SinkFailure) as exc_info:
            await store(sink, "prompt.json", "{}", "application/json")
        assert exc_info.value.file_name == "prompt.json"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_unsuccessful_result_rejected(self):
        sink = AsyncMock()
        sink.name = "flaky"
        sink.upload = AsyncMock(return_value=UploadResult(location_url="", success=False))

        with pytest.raises(SinkFailure):
            await store(sink, "prompt.json", "{}", "application/json")

    @pytest.mark.asyncio
    async def test_success_passthrough(self):
        result = await store(MemorySink(), "prompt.json", "{}", "application/json")
        assert result.location_url.startswith("memory://")


class TestGetSink:

    def test_backends(self, tmp_path):
        assert isinstance(get_sink("memory"), MemorySink)
        assert isinstance(get_sink("LOCAL", output_dir=tmp_path), LocalFileSink)

    def test_local_requires_output_dir(self):
        with pytest.raises(ValueError):
            get_sink("local")

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown storage backend"):
            get_sink("s3")
