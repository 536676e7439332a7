"""
Unit tests for scripts/export_cli.py
"""
import json
import pytest

from scripts.export_cli import build_parser, main


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("ENHANCEMENT_PROVIDER", "keyword")
    monkeypatch.setenv("INPUT_DIR", str(tmp_path / "input"))
    monkeypatch.delenv("DEFAULT_PLATFORM", raising=False)
    monkeypatch.delenv("DEFAULT_FORMAT", raising=False)


class TestCommands:

    def test_platforms(self, capsys):
        assert main(["platforms"]) == 0
        out = capsys.readouterr().out
        assert "stable_diffusion" in out
        assert "Midjourney" in out

    def test_formats(self, capsys):
        assert main(["formats"]) == 0
        assert "application/xml" in capsys.readouterr().out

    def test_export_json_to_local_storage(self, capsys, tmp_path):
        out_dir = tmp_path / "out"
        code = main([
            "export", "Cinematic urban scene with dramatic lighting",
            "--platform", "midjourney", "--format", "txt",
            "--storage", "local", "--output-dir", str(out_dir), "--json",
        ])
        assert code == 0

        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["validPrompts"] == 1
        assert data["exportUrl"].startswith("file://")
        assert len(list(out_dir.rglob("*.txt"))) == 1

    def test_export_from_file(self, capsys, tmp_path):
        prompt_file = tmp_path / "prompt.txt"
        prompt_file.write_text("a lone robot in a forest", encoding="utf-8")

        assert main(["export", "--input", str(prompt_file), "--no-enhance"]) == 0
        assert "Total: 1" in capsys.readouterr().out

    def test_batch(self, capsys, input_dir):
        code = main(["batch", "scenes", "--input-dir", str(input_dir), "--no-enhance", "--json"])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["summary"]["totalPrompts"] == 3

    def test_export_error_exit_code(self, capsys):
        assert main(["export", "castle", "--platform", "pixelforge"]) == 1
        assert "Unsupported platform: pixelforge" in capsys.readouterr().out

    def test_missing_input_file(self, capsys, tmp_path):
        assert main(["export", "--input", str(tmp_path / "nope.txt")]) == 1

    def test_no_command(self, capsys):
        assert main([]) == 1


class TestParser:

    def test_rejects_unknown_provider(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["export", "x", "--provider", "claude"])

    def test_pipeline_arguments(self):
        args = build_parser().parse_args(["batch", "f", "--strict", "--detail-level", "detailed"])
        assert args.strict is True
        assert args.detail_level == "detailed"
        assert args.folder_id == "f"
