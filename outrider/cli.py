"""
Command-line interface for outrider.

Provides a CLI for running scans, applying automatic fixes and managing
the configuration file.
"""

import argparse
import logging
import os
import sys
from dataclasses import replace
from typing import Optional, List

from outrider import __version__
from outrider.config import OUTPUT_FORMATS, ScanConfig, create_default_config, load_scan_config
from outrider.core.engine import ScanEngine
from outrider.core.errors import ConfigurationError
from outrider.core.findings import ScanResult
from outrider.formatters import get_formatter
from outrider.remediation import RemediationEngine, fix_description, fixable_rules

DEFAULT_CONFIG_FILE = ".outrider.yaml"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="outrider",
        description="Rule and heuristic based code quality scanner for JavaScript and TypeScript.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  outrider scan ./src                     # Scan a directory
  outrider scan app.js                    # Scan a single file
  outrider scan . -o json                 # Output as JSON
  outrider scan . -o csv --output-file r  # CSV output to file
  outrider init                           # Create config file
  outrider fix ./src --dry-run            # Show fixes without applying
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Scan code for quality issues")
    scan_parser.add_argument(
        "target",
        nargs="?",
        default=".",
        help="Target file or directory to scan (default: current directory)",
    )
    scan_parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
    )
    scan_parser.add_argument(
        "-o", "--output",
        choices=OUTPUT_FORMATS,
        help="Output format (default: from configuration, else console)",
    )
    scan_parser.add_argument(
        "--output-file",
        help="Write the report to a file instead of stdout",
    )
    scan_parser.add_argument(
        "-j", "--jobs",
        type=int,
        help="Number of parallel workers",
    )
    scan_parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    scan_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # Fix command
    fix_parser = subparsers.add_parser("fix", help="Apply automatic fixes")
    fix_parser.add_argument(
        "target",
        nargs="?",
        default=".",
        help="Target file or directory",
    )
    fix_parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
    )
    fix_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show fixes without applying them",
    )
    fix_parser.add_argument(
        "--no-backup",
        action="store_true",
        help="Don't create backup files",
    )
    fix_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # Init command
    init_parser = subparsers.add_parser("init", help="Create a configuration file")
    init_parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Overwrite existing config file",
    )

    # List-rules command
    rules_parser = subparsers.add_parser("list-rules", help="List rules and heuristic categories")
    rules_parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
    )

    return parser


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def _config_start(target: str) -> str:
    return target if os.path.isdir(target) else os.path.dirname(os.path.abspath(target))


def exceeds_thresholds(result: ScanResult, config: ScanConfig) -> bool:
    """Check a finished scan against the configured quality gates."""
    summary = result.summary
    return (summary.errors > config.thresholds.max_errors
            or summary.warnings > config.thresholds.max_warnings)


def cmd_scan(args: argparse.Namespace) -> int:
    """Execute the scan command."""
    config = load_scan_config(args.config, _config_start(args.target))

    # Apply command-line overrides
    if args.jobs is not None:
        config = replace(config, max_workers=args.jobs)
    if args.output:
        config.output = replace(config.output, format=args.output)
    config.validate()

    engine = ScanEngine(config)
    result = engine.scan(args.target)

    output_format = config.output.format
    if output_format == "console":
        formatter = get_formatter(
            output_format,
            use_color=config.output.color and not args.no_color and not args.output_file,
            include_suggestions=config.output.include_suggestions,
            include_stats=config.output.include_stats,
        )
    else:
        formatter = get_formatter(output_format, include_stats=config.output.include_stats)

    output = formatter.format_result(result)

    # Write output
    if args.output_file:
        with open(args.output_file, "w", encoding="utf-8") as f:
            f.write(output)
        print(f"Results written to {args.output_file}")
    else:
        print(output)

    # Return exit code based on the quality gates
    if exceeds_thresholds(result, config):
        return 1
    return 0


def cmd_fix(args: argparse.Namespace) -> int:
    """Execute the fix command."""
    # First, run a scan
    config = load_scan_config(args.config, _config_start(args.target))
    engine = ScanEngine(config)
    # Plan from every finding, not the per-file capped report
    result = engine.scan(args.target, cap=False)

    remediation_engine = RemediationEngine(
        dry_run=args.dry_run,
        backup=not args.no_backup,
    )
    plan = remediation_engine.plan(result.findings)

    if plan.fixable_count == 0:
        print("No fixable issues found!")
        return 0

    remediation_engine.apply(plan)
    print(remediation_engine.format_report(plan))

    if not args.dry_run:
        applied = sum(1 for f in plan.fixes if f.applied)
        print(f"\nApplied fixes to {applied}/{plan.files_changed} files.")

    return 1 if any(f.error_message for f in plan.fixes) else 0


def cmd_init(args: argparse.Namespace) -> int:
    """Execute the init command."""
    config_file = DEFAULT_CONFIG_FILE

    if os.path.exists(config_file) and not args.force:
        print(f"Configuration file {config_file} already exists.")
        print("Use --force to overwrite.")
        return 1

    content = create_default_config()

    with open(config_file, "w", encoding="utf-8") as f:
        f.write(content)

    print(f"Created configuration file: {config_file}")
    return 0


def cmd_list_rules(args: argparse.Namespace) -> int:
    """Execute the list-rules command."""
    engine = ScanEngine(load_scan_config(args.config))
    fixable = set(fixable_rules())

    print("\nRules")
    print("=" * 70)
    for rule in engine.rule_engine.rules.values():
        status = "✓" if rule.enabled else "○"
        fix = " (fixable)" if rule.name in fixable else ""
        print(f"  {status} {rule.name:<28} [{rule.severity.value}] {rule.description}{fix}")

    print("\nHeuristic Categories")
    print("=" * 70)
    for category in engine.heuristic_engine.categories.values():
        status = "✓" if category.enabled else "○"
        print(f"  {status} {category.name:<28} [{category.severity.value}] {category.description}")
        for detector in category.detectors:
            print(f"      - {detector.type}: {detector.message}")

    print("\nAutomatic fixes:")
    for rule in sorted(fixable):
        print(f"  {rule}: {fix_description(rule)}")

    print(f"\nTotal: {len(engine.rule_engine.rules)} rules, "
          f"{len(engine.heuristic_engine.categories)} categories")
    print("✓ = enabled, ○ = disabled")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(getattr(args, "verbose", False))

    try:
        if args.command == "scan":
            return cmd_scan(args)
        elif args.command == "fix":
            return cmd_fix(args)
        elif args.command == "init":
            return cmd_init(args)
        elif args.command == "list-rules":
            return cmd_list_rules(args)
        else:
            parser.print_help()
            return 0

    except KeyboardInterrupt:
        print("\nScan interrupted.")
        return 130
    except (ConfigurationError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if os.environ.get("DEBUG"):
            raise
        return 1


if __name__ == "__main__":
    sys.exit(main())
