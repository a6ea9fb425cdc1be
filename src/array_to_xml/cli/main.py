"""Main CLI entry point for the array-to-xml command-line tool.

Converts JSON documents to XML and checks whether JSON documents are
convertible, one file or a whole directory at a time.
"""

import argparse
import json
import logging
import sys
import time
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from array_to_xml import __version__
from array_to_xml.api.converter import to_string
from array_to_xml.shared.config import ConfigError, ConverterConfig
from array_to_xml.shared.exceptions import ConversionError
from array_to_xml.shared.logging import configure_logging, get_logger

JSON_SUFFIXES = {".json"}


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.converter_config = ConverterConfig()
        self.max_workers = None  # Use system default
        self.output_format = "text"
        self.verbose = False
        self.quiet = False
        self.logging_level = None  # Set only when the config file names one

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file may hold a ``converter`` section in ``ConverterConfig.to_dict()``
        form, a ``preset`` name, ``max_workers`` and ``output_format``. A
        ``logging_level`` in the converter's ``global_`` section is kept in
        ``logging_level`` for the CLI to apply.

        Raises:
            ConfigError: If the file cannot be read or holds invalid settings
        """
        config = cls()
        try:
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e

        if "preset" in data:
            config.converter_config = preset_config(data["preset"])
        if "converter" in data:
            config.converter_config = ConverterConfig.from_dict(data["converter"])
            if "logging_level" in data["converter"].get("global_", {}):
                config.logging_level = config.converter_config.global_.logging_level

        config.max_workers = data.get("max_workers", config.max_workers)
        config.output_format = data.get("output_format", config.output_format)
        return config


def preset_config(name: str) -> ConverterConfig:
    presets = {
        "default": ConverterConfig,
        "compact": ConverterConfig.compact,
        "fragment": ConverterConfig.fragment,
        "untrusted_input": ConverterConfig.untrusted_input,
    }
    if name not in presets:
        raise ConfigError(f"Unknown preset: {name}")
    return presets[name]()


class ProgressTracker:
    """Progress tracking for long-running operations."""

    def __init__(self, total: int, description: str = "Processing"):
        self.total = total
        self.completed = 0
        self.description = description
        self.last_update = 0

    def update(self, increment: int = 1):
        """Update progress and display if needed."""
        self.completed += increment
        current_time = time.time()

        if current_time - self.last_update >= 1.0 or self.completed >= self.total:
            self._display_progress()
            self.last_update = current_time

    def _display_progress(self):
        if self.total == 0:
            return

        percentage = (self.completed / self.total) * 100
        progress_bar = "=" * int(percentage // 2)
        progress_bar += " " * (50 - len(progress_bar))

        print(f"\r{self.description}: [{progress_bar}] "
              f"{percentage:.1f}% ({self.completed}/{self.total})",
              end="", file=sys.stderr)

        if self.completed >= self.total:
            print(file=sys.stderr)


class JSONConverter:
    """Converts JSON files to XML for CLI operations."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.logger = get_logger(__name__, None, "cli_converter")

    def convert_file(self, file_path: Path) -> Dict[str, Any]:
        """Convert one JSON file and return a result record.

        The record holds ``xml`` on success, ``error``, ``error_type`` and
        ``offending_name`` on failure.
        """
        start_time = time.time()
        result: Dict[str, Any] = {"file": str(file_path), "success": False}
        logger = self.logger.bind(file=str(file_path))

        try:
            with file_path.open(encoding="utf-8") as f:
                data = json.load(f)
            result["xml"] = to_string(data, config=self.config.converter_config)
            result["success"] = True
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            result["error"] = f"Cannot read JSON: {e}"
            result["error_type"] = type(e).__name__
        except ConversionError as e:
            result["error"] = str(e)
            result["error_type"] = type(e).__name__
            result["offending_name"] = getattr(e, "name", None)
            logger.warning("Conversion failed", extra={"error_type": type(e).__name__})

        result["processing_time_ms"] = (time.time() - start_time) * 1000
        return result

    def find_json_files(self, path: Path, recursive: bool = True) -> Iterator[Path]:
        """Find JSON files in path."""
        if path.is_file():
            yield path
        elif path.is_dir():
            pattern = "**/*" if recursive else "*"
            for candidate in sorted(path.glob(pattern)):
                if candidate.is_file() and candidate.suffix.lower() in JSON_SUFFIXES:
                    yield candidate

    def batch_convert(self, paths: List[Path], recursive: bool = True) -> List[Dict[str, Any]]:
        """Convert multiple JSON files, in parallel when several are given."""
        all_files: List[Path] = []
        for path in paths:
            if not path.exists():
                all_files.append(path)
                continue
            all_files.extend(self.find_json_files(path, recursive))

        if not all_files:
            return []

        progress = None
        if len(all_files) > 1 and not self.config.quiet:
            progress = ProgressTracker(len(all_files), "Converting JSON files")

        if len(all_files) == 1 or self.config.max_workers == 1:
            results = []
            for file_path in all_files:
                results.append(self.convert_file(file_path))
                if progress:
                    progress.update()
            return results

        with ProcessPoolExecutor(max_workers=self.config.max_workers) as executor:
            results = []
            for result in executor.map(self.convert_file, all_files):
                results.append(result)
                if progress:
                    progress.update()
        return results


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="array-to-xml",
        description="Convert JSON documents to XML using key-encoded element names"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Convert JSON files to XML")
    convert_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="JSON files or directories to convert"
    )
    convert_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    destination = convert_parser.add_mutually_exclusive_group()
    destination.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file for a single input (default: stdout)"
    )
    destination.add_argument(
        "--output-dir", "-d",
        type=Path,
        help="Directory receiving one .xml file per input"
    )
    convert_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    convert_parser.add_argument(
        "--preset",
        choices=["default", "compact", "fragment", "untrusted_input"],
        help="Converter configuration preset"
    )
    convert_parser.add_argument(
        "--no-declare",
        action="store_true",
        help="Omit the XML declaration"
    )
    convert_parser.add_argument(
        "--xml-version",
        help="Version written in the XML declaration (default: 1.0)"
    )
    convert_parser.add_argument(
        "--encoding",
        help="Encoding written in the XML declaration"
    )
    convert_parser.add_argument(
        "--compact",
        action="store_true",
        help="Disable indentation"
    )
    convert_parser.add_argument(
        "--max-depth",
        type=int,
        help="Maximum nesting depth of the input"
    )
    convert_parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Number of parallel workers"
    )

    # Validate command
    validate_parser = subparsers.add_parser(
        "validate", help="Check that JSON files convert without errors"
    )
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="JSON files or directories to check"
    )
    validate_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def build_cli_config(args: argparse.Namespace) -> CLIConfig:
    """Combine the config file, preset and command-line overrides.

    A logging level from the config file applies unless --verbose or
    --quiet was given.
    """
    config = CLIConfig()
    if getattr(args, "config", None):
        config = CLIConfig.from_file(args.config)
        if config.logging_level and not (args.verbose or args.quiet):
            configure_logging(config.logging_level)
    if getattr(args, "preset", None):
        config.converter_config = preset_config(args.preset)

    overrides: Dict[str, Any] = {}
    if getattr(args, "no_declare", False):
        overrides["output__declare"] = False
    if getattr(args, "xml_version", None):
        overrides["output__version"] = args.xml_version
    if getattr(args, "encoding", None):
        overrides["output__encoding"] = args.encoding
    if getattr(args, "compact", False):
        overrides["output__pretty_print"] = False
    if getattr(args, "max_depth", None) is not None:
        overrides["mapping__max_depth"] = args.max_depth
    if overrides:
        config.converter_config = config.converter_config.override(**overrides)

    if getattr(args, "workers", None):
        config.max_workers = args.workers
    config.quiet = args.quiet
    config.verbose = args.verbose
    return config


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format validation results for output."""
    records = [
        {key: value for key, value in result.items() if key != "xml"}
        for result in results
    ]

    if format_type == "json":
        return json.dumps(records, indent=2)

    if not records:
        return "No results to display."

    successful = sum(1 for r in records if r.get("success", False))
    lines = [f"Checked {len(records)} files, {successful} convertible", "-" * 60]
    for record in records:
        status = "OK  " if record.get("success", False) else "FAIL"
        lines.append(f"{status} {record['file']}")
        if not record.get("success", False):
            lines.append(f"     {record.get('error_type', 'Error')}: {record.get('error', '')}")
    return "\n".join(lines)


def write_output(result: Dict[str, Any], args: argparse.Namespace) -> None:
    """Write one converted document to its destination."""
    if args.output_dir:
        output_path = args.output_dir / f"{Path(result['file']).stem}.xml"
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result["xml"], encoding="utf-8")
        print(f"Converted: {result['file']} -> {output_path}", file=sys.stderr)
    elif args.output:
        args.output.write_text(result["xml"], encoding="utf-8")
        print(f"Converted: {result['file']} -> {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(result["xml"])
        if not result["xml"].endswith("\n"):
            sys.stdout.write("\n")


def cmd_convert(args: argparse.Namespace) -> int:
    """Handle convert command."""
    try:
        config = build_cli_config(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    converter = JSONConverter(config)
    results = converter.batch_convert(args.paths, args.recursive)
    if not results:
        print("No JSON files found", file=sys.stderr)
        return 1
    if args.output and len(results) > 1:
        print("--output accepts a single input; use --output-dir", file=sys.stderr)
        return 1

    failures = 0
    for result in results:
        if result["success"]:
            write_output(result, args)
        else:
            failures += 1
            print(f"Failed: {result['file']}: {result['error']}", file=sys.stderr)

    return 0 if failures == 0 else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    config = build_cli_config(args)
    converter = JSONConverter(config)
    results = converter.batch_convert(args.paths, args.recursive)

    print(format_results(results, args.format))

    if not results:
        return 1
    return 0 if all(r["success"] for r in results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        logging.getLogger("array_to_xml").setLevel(logging.WARNING)

    try:
        if args.command == "convert":
            return cmd_convert(args)
        if args.command == "validate":
            return cmd_validate(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
