#!/usr/bin/env python3
"""
secretscan: Find files that are likely to contain secrets

Common usage:
  secretscan
  secretscan path/to/project
  secretscan --verbose --max-depth 2 .
  secretscan --extend-exclude-dir fixtures --include-name .envrc .

Exit status is 0 when nothing is found, 1 when secret files are found, and 2
on errors. Configure patterns in `.secretscan.toml`, `secretscan.toml`, or
`[tool.secretscan]` in `pyproject.toml`, and suppress known files with
`.secretscanignore` (gitignore syntax) in the scan root.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from secretscan.api import ScanSettings, scan_directory
from secretscan.config import (
    ConfigError,
    SecretscanConfig,
    find_config_file,
    load_config,
    merge_cli_with_config,
)
from secretscan.scanner import (
    ClassificationRules,
    ConsoleProgress,
    NullProgress,
    ProgressSink,
    TraversalError,
)

EXIT_CLEAN = 0
EXIT_FOUND = 1
EXIT_ERROR = 2


@dataclass
class Options:
    """Command-line options for the secretscan tool."""

    root: str
    verbose: bool
    max_depth: int
    quiet: bool
    config: str | None
    no_config: bool
    respect_ignore_file: bool
    # Additions on top of the resolved config (named apart from config fields
    # so the config merge never overwrites them)
    extra_exclude_dirs: list[str]
    extra_include_names: list[str]
    extra_include_extensions: list[str]
    extra_include_paths: list[str]
    extra_exclude_names: list[str]
    extra_exclude_extensions: list[str]
    extra_exclude_paths: list[str]
    debug: bool
    version: bool


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)` where `explicit_flags` tracks which
    config-backed flags the user explicitly passed (for config merge precedence).
    """
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="secretscan",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "root",
        nargs="?",
        type=str,
        default=".",
        help="Directory to scan (default: current directory)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Print every directory and file visited"
    )
    parser.add_argument(
        "-d",
        "--max-depth",
        type=int,
        default=0,
        dest="max_depth",
        metavar="N",
        help="With --verbose, only print paths up to N levels below the root "
        "(0 = no limit, default: %(default)s)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress progress and the summary line"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="Use this config file instead of searching from the scan root",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        dest="no_config",
        help="Ignore config files and use built-in defaults",
    )
    parser.add_argument(
        "--no-ignore-file",
        action="store_true",
        dest="no_ignore_file",
        help="Do not apply .secretscanignore",
    )
    parser.add_argument(
        "--extend-exclude-dir",
        action="append",
        default=[],
        dest="extra_exclude_dirs",
        metavar="NAME",
        help="Additional directory name to skip (exact match). Can be repeated",
    )
    for family in ("include", "exclude"):
        for kind, example in (("name", ".envrc"), ("extension", ".crt"), ("path", "secrets/*")):
            parser.add_argument(
                f"--{family}-{kind}",
                action="append",
                default=[],
                dest=f"extra_{family}_{kind}s",
                metavar="PATTERN",
                help=f"Additional {kind} pattern to {family} (e.g., '{example}'). Can be repeated",
            )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging on stderr"
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)
    if opts.max_depth < 0:
        parser.error("--max-depth must be >= 0")

    # Re-parse with sentinel defaults to detect which config-backed flags were
    # actually supplied, rather than comparing against default values.
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("-v", "--verbose", action="store_true", default=_SENTINEL)
    sentinel_parser.add_argument("-q", "--quiet", action="store_true")
    sentinel_parser.add_argument(
        "-d", "--max-depth", type=int, dest="max_depth", default=_SENTINEL
    )
    sentinel_parser.add_argument(
        "--no-ignore-file", action="store_true", dest="respect_ignore_file", default=_SENTINEL
    )
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = {
        name
        for name in ("verbose", "max_depth", "respect_ignore_file")
        if getattr(sentinel_opts, name, _SENTINEL) is not _SENTINEL
    }

    return (
        Options(
            root=opts.root,
            verbose=opts.verbose,
            max_depth=opts.max_depth,
            quiet=opts.quiet,
            config=opts.config,
            no_config=opts.no_config,
            respect_ignore_file=not opts.no_ignore_file,
            extra_exclude_dirs=opts.extra_exclude_dirs,
            extra_include_names=opts.extra_include_names,
            extra_include_extensions=opts.extra_include_extensions,
            extra_include_paths=opts.extra_include_paths,
            extra_exclude_names=opts.extra_exclude_names,
            extra_exclude_extensions=opts.extra_exclude_extensions,
            extra_exclude_paths=opts.extra_exclude_paths,
            debug=opts.debug,
            version=opts.version,
        ),
        explicit_flags,
    )


def _load_config(options: Options) -> SecretscanConfig | None:
    """Find and load the config file, or `None` when disabled or absent."""
    if options.no_config:
        return None
    if options.config:
        return load_config(Path(options.config))
    config_path = find_config_file(Path(options.root))
    if config_path is None:
        return None
    return load_config(config_path)


def _build_settings(options: Options, config: SecretscanConfig | None) -> ScanSettings:
    """Resolve config-file settings, then append patterns given on the command line."""
    base = ScanSettings.from_config(config)
    rules = base.rules
    return ScanSettings(
        rules=ClassificationRules(
            exclude_names=rules.exclude_names + tuple(options.extra_exclude_names),
            exclude_extensions=rules.exclude_extensions + tuple(options.extra_exclude_extensions),
            exclude_paths=rules.exclude_paths + tuple(options.extra_exclude_paths),
            include_names=rules.include_names + tuple(options.extra_include_names),
            include_extensions=rules.include_extensions + tuple(options.extra_include_extensions),
            include_paths=rules.include_paths + tuple(options.extra_include_paths),
        ),
        exclusions=base.exclusions.extended(options.extra_exclude_dirs),
        respect_ignore_file=options.respect_ignore_file,
    )


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the secretscan CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 nothing found, 1 secret files found, 2 errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("secretscan")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return EXIT_CLEAN

    if options.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    try:
        config = _load_config(options)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    merge_cli_with_config(options, config, explicit_flags)
    settings = _build_settings(options, config)

    progress: ProgressSink
    if options.quiet:
        progress = NullProgress()
    else:
        progress = ConsoleProgress(
            options.root, verbose=options.verbose, max_depth=options.max_depth
        )

    try:
        matches = scan_directory(options.root, settings, progress)
    except TraversalError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    for rel_path in matches:
        print(rel_path)

    return EXIT_FOUND if matches else EXIT_CLEAN


if __name__ == "__main__":
    sys.exit(main())
