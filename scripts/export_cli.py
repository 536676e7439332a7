#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Prompt Export CLI - Command-line interface for the export pipeline

Usage:
    python scripts/export_cli.py export "Cinematic urban scene" --platform midjourney --format json
    python scripts/export_cli.py export --input prompt.txt --format xml --storage local
    python scripts/export_cli.py batch my_folder --platform stable_diffusion
    python scripts/export_cli.py platforms
    python scripts/export_cli.py formats
"""

import sys
import json
import asyncio
import argparse
from pathlib import Path
from typing import List, Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.logging_config import set_debug
from config.settings import get_settings
from core.errors import ExportError
from core.exporter import (
    BatchRequest,
    EnhancementOptions,
    ExportRequest,
    ExportResult,
    create_exporter,
)
from core.rule_tables import list_formats, list_platforms
from core.types import DetailLevel, FormatId, PlatformId, SourceKind


STATUS_ICONS = {"valid": "✅", "warning": "⚠️ ", "error": "❌"}


def build_exporter(args):
    """Exporter from settings, with command-line overrides applied"""
    overrides = {}
    if getattr(args, "storage", None):
        overrides["storage_backend"] = args.storage
    if getattr(args, "output_dir", None):
        overrides["output_dir"] = Path(args.output_dir)
    if getattr(args, "input_dir", None):
        overrides["input_dir"] = Path(args.input_dir)
    if getattr(args, "provider", None):
        overrides["enhancement_provider"] = args.provider
    if getattr(args, "strict", False):
        overrides["strict_validation"] = True
    return create_exporter(get_settings(**overrides))


def enhancement_options(args) -> EnhancementOptions:
    return EnhancementOptions(
        use_enhancement=False if args.no_enhance else None,
        detail_level=args.detail_level,
        include_metadata=not args.no_metadata,
    )


def print_result(result: ExportResult, as_json: bool = False):
    """Print an export result as a table or as JSON"""
    if as_json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    print("\n" + "=" * 100)
    print(f"{'STATUS':<10} {'NAME':<24} {'PLATFORM':<18} {'FORMAT':<8} {'SIZE':<8} URL")
    print("=" * 100)

    for record in result.exported_prompts:
        status = record.status.value
        print(f"{STATUS_ICONS[status]} {status:<7} {(record.name or '-'):<24} "
              f"{record.platform.value:<18} {record.export_format.value:<8} "
              f"{record.size_bytes:<8} {record.url or '-'}")
        for message in record.validation["errors"] + record.validation["warnings"]:
            print(f"      - {message}")

    summary = result.summary
    print("=" * 100)
    print(f"Total: {summary.total_prompts} | valid: {summary.valid_prompts} | "
          f"warnings: {summary.warning_prompts} | errors: {summary.error_prompts}")
    print(f"Export URL: {result.export_url}")


def cmd_export(args):
    """Export one prompt"""
    if args.input:
        input_file = Path(args.input).resolve()
        if not input_file.exists():
            print(f"❌ Input file not found: {input_file}")
            return 1
        content = input_file.read_text(encoding="utf-8")
    elif args.text:
        content = args.text
    else:
        print("❌ Provide prompt text or --input")
        return 1

    exporter = build_exporter(args)
    request = ExportRequest(
        source_content=content,
        source_type=args.source_type,
        target_platform=args.platform,
        export_format=args.format,
        enhancement_options=enhancement_options(args),
    )

    try:
        result = asyncio.run(exporter.export_prompt(request))
    except ExportError as e:
        print(f"❌ {e}")
        return 1

    print_result(result, as_json=args.json)
    return 0


def cmd_batch(args):
    """Export every prompt of an input folder"""
    exporter = build_exporter(args)
    request = BatchRequest(
        folder_id=args.folder_id,
        target_platform=args.platform,
        export_format=args.format,
        enhancement_options=enhancement_options(args),
    )

    try:
        result = asyncio.run(exporter.batch_process_folder(request))
    except ExportError as e:
        print(f"❌ {e}")
        return 1

    print_result(result, as_json=args.json)
    return 0


def cmd_platforms(args):
    """List supported platforms"""
    print(f"\n{'ID':<18} {'NAME':<18} {'MAX LENGTH':<12} FORMATS")
    print("-" * 70)
    for platform in list_platforms():
        print(f"{platform['id']:<18} {platform['name']:<18} "
              f"{platform['max_content_length']:<12} {', '.join(platform['supported_formats'])}")
    return 0


def cmd_formats(args):
    """List supported export formats"""
    print(f"\n{'ID':<8} {'NAME':<12} {'MIME TYPE':<18} EXTENSION")
    print("-" * 52)
    for fmt in list_formats():
        print(f"{fmt['id']:<8} {fmt['name']:<12} {fmt['mime_type']:<18} {fmt['extension']}")
    return 0


def _add_pipeline_arguments(subparser):
    subparser.add_argument('--platform', '-p', help='Target platform (default: from settings)')
    subparser.add_argument('--format', '-f', help='Export format (default: from settings)')
    subparser.add_argument('--detail-level', choices=[d.value for d in DetailLevel], help='Enhancement detail level')
    subparser.add_argument('--no-enhance', action='store_true', help='Skip enhancement')
    subparser.add_argument('--no-metadata', action='store_true', help='Leave metadata out of the export')
    subparser.add_argument('--provider', choices=['keyword', 'gemini', 'openai', 'none'], help='Enhancement provider')
    subparser.add_argument('--strict', action='store_true', help='Report length/required-element findings as errors')
    subparser.add_argument('--storage', choices=['memory', 'local'], help='Storage backend')
    subparser.add_argument('--output-dir', help='Output directory for local storage')
    subparser.add_argument('--json', action='store_true', help='Print the result as JSON')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Prompt Exporter CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Platforms: {', '.join(p.value for p in PlatformId)}\n"
               f"Formats: {', '.join(f.value for f in FormatId)}",
    )
    parser.add_argument('--debug', action='store_true', help='Verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Export command
    export_parser = subparsers.add_parser('export', help='Export one prompt')
    export_parser.add_argument('text', nargs='?', help='Prompt text')
    export_parser.add_argument('--input', '-i', help='Read the prompt from a file')
    export_parser.add_argument('--source-type', default=SourceKind.TEXT.value,
                               choices=[k.value for k in SourceKind], help='How to interpret the content')
    _add_pipeline_arguments(export_parser)

    # Batch command
    batch_parser = subparsers.add_parser('batch', help='Export every prompt of an input folder')
    batch_parser.add_argument('folder_id', help='Folder name under the input directory')
    batch_parser.add_argument('--input-dir', help='Base input directory (default: from settings)')
    _add_pipeline_arguments(batch_parser)

    subparsers.add_parser('platforms', help='List supported platforms')
    subparsers.add_parser('formats', help='List supported export formats')

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        set_debug(True)

    if not args.command:
        parser.print_help()
        return 1

    # Route to command handlers
    commands = {
        'export': cmd_export,
        'batch': cmd_batch,
        'platforms': cmd_platforms,
        'formats': cmd_formats,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
