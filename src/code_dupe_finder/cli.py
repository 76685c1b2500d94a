# Code Dupe Finder - Find duplicate code blocks and suggest refactorings
# Copyright (C) 2025  Jonathan Louis
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
CLI entry point for code-dupe-finder.

Usage:
    cdf analyze [PATH] [options]
    cdf suggest [--create]
    cdf full [PATH]
    cdf view
    cdf clean
    cdf --help
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from . import __version__
from .config import ConfigError, DupeConfig, config_from_mapping, load_config
from .indexer import SourceRootError
from .pipeline import run_analysis
from .reporter import OutputFormat, extension_format, report_groups, summary_lines
from .store import ReportNotFoundError, clear_report, load_report, save_report
from .suggester import create_utility_files, format_suggestions, generate_utility_templates


logger = logging.getLogger(__name__)


def print_progress(current: int, total: int, message: str, width: int = 30):
    """Print a progress bar with message."""
    filled = int(width * current / max(total, 1))
    bar = "=" * filled + ">" + " " * (width - filled - 1) if filled < width else "=" * width
    # Use \r to overwrite line, \033[K to clear to end of line
    click.echo(f"\r   [{bar}] {current}/{total} {message}\033[K", nl=False)
    if current >= total:
        click.echo()


def build_config(**overrides) -> DupeConfig:
    """
    Defaults, then .cdfrc/.cdf.toml, then explicit CLI options.

    CLI options default to None so only values the user actually passed
    override the config file.
    """
    file_values = load_config(Path.cwd())
    try:
        return config_from_mapping(file_values).replace(**overrides)
    except (ConfigError, TypeError) as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        sys.exit(1)


def _analyze(config: DupeConfig, path: Optional[str], output: Optional[str], quiet: bool):
    """Run the analysis, print the report and persist the artifact."""
    root_path = Path(path or config.src_dir)

    if output:
        output_format = extension_format(Path(output).suffix)
        if output_format is None:
            click.echo(f"❌ Invalid output extension '{Path(output).suffix}'. Valid: .md, .txt, .json", err=True)
            sys.exit(1)

    click.echo("🚀 Starting duplicate code analysis...")
    click.echo(f"🔍 Scanning {root_path} for source files...")

    try:
        report = run_analysis(
            root_path,
            config,
            on_progress=None if quiet else lambda c, t, m: print_progress(c, t, m),
        )
    except SourceRootError as e:
        logger.error(str(e))
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.exception("Error during analysis")
        click.echo(f"❌ Error during analysis: {e}", err=True)
        sys.exit(1)

    click.echo(report_groups(report, OutputFormat.TEXT, config))

    report_path = save_report(Path(config.report_path), report, config)
    click.echo(f"📄 Detailed report saved to: {report_path}")

    if output:
        Path(output).write_text(report_groups(report, output_format, config), encoding="utf-8")
        click.echo(f"   ✅ Report written to: {output}")


def _suggest(config: DupeConfig, create: bool, dry_run: bool):
    """Read the artifact and print (or write) utility stubs."""
    try:
        report = load_report(Path(config.report_path))
    except ReportNotFoundError:
        click.echo("❌ No duplication report found!", err=True)
        click.echo("   Run: cdf analyze first", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"❌ Could not read report: {e}", err=True)
        sys.exit(1)

    click.echo("📖 Reading duplication report...")
    click.echo(f"Found {len(report['duplicates'])} duplicate patterns")

    templates = generate_utility_templates(report)
    click.echo(format_suggestions(report, config.utils_dir, templates))

    if not create:
        click.echo("=" * 80)
        click.echo("💡 To create utility file templates, run:")
        click.echo("   cdf suggest --create")
        click.echo("\n   This will create stub files that you can fill in with the actual refactored code.")
        click.echo("=" * 80)
        return

    click.echo("\n🏗️  Creating utility files...\n")
    for target_path, status in create_utility_files(templates, Path(config.utils_dir), dry_run=dry_run):
        if status == "exists":
            click.echo(f"⚠️  File exists: {target_path} (skipping)")
        elif status == "would create":
            click.echo(f"✨ Would create: {target_path}")
        else:
            click.echo(f"✨ Creating: {target_path}")

    if not dry_run:
        click.echo(f"\n✅ Utility file templates created in {config.utils_dir}/")


@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable debug logging"
)
@click.version_option(version=__version__)
def main(verbose: bool):
    """
    Find duplicate code blocks and suggest refactoring opportunities.

    Workflow:

      # Step 1: Analyze (writes duplication-report.json)
      cdf analyze ./src

      # Step 2: Suggest utilities from the saved report
      cdf suggest

      # Step 3: Write stub files into the utils directory
      cdf suggest --create
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


analyze_options = [
    click.argument("path", type=click.Path(file_okay=False, dir_okay=True), required=False),
    click.option(
        "-b", "--block-size", "block_sizes",
        type=int,
        multiple=True,
        help="Window size in lines (repeatable, default: 5 10 15 20)"
    ),
    click.option("--min-tokens", type=int, default=None, help="Minimum tokens per block (default: 50)"),
    click.option("--min-lines", type=int, default=None, help="Baseline lines per extracted helper (default: 5)"),
    click.option("--max-blocks", type=int, default=None, help="Maximum blocks per file (default: 50)"),
    click.option("-e", "--ext", "extensions", multiple=True, help="File extension to scan (repeatable)"),
    click.option("-x", "--exclude-dir", "exclude_dirs", multiple=True, help="Directory name to skip (repeatable)"),
    click.option("--top", "top_n", type=int, default=None, help="Groups shown in the console report (default: 10)"),
    click.option("--workers", type=int, default=None, help="Parallel file readers (default: 1)"),
    click.option("-r", "--report", "report_path", type=str, default=None, help="Report artifact path"),
    click.option("-o", "--output", type=str, default=None, help="Also write the report (e.g., report.md, report.json)"),
    click.option("-q", "--quiet", is_flag=True, help="Hide the progress bar"),
]


def with_analyze_options(func):
    for option in reversed(analyze_options):
        func = option(func)
    return func


def _analyze_config(
    block_sizes: Tuple[int, ...],
    extensions: Tuple[str, ...],
    exclude_dirs: Tuple[str, ...],
    **values,
) -> DupeConfig:
    return build_config(
        block_sizes=block_sizes or None,
        extensions=extensions or None,
        exclude_dirs=exclude_dirs or None,
        min_tokens=values.get("min_tokens"),
        min_lines=values.get("min_lines"),
        max_blocks_per_file=values.get("max_blocks"),
        top_n=values.get("top_n"),
        workers=values.get("workers"),
        report_path=values.get("report_path"),
    )


@main.command()
@with_analyze_options
def analyze(path, block_sizes, min_tokens, min_lines, max_blocks, extensions,
            exclude_dirs, top_n, workers, report_path, output, quiet):
    """
    Scan PATH for duplicate code blocks and save the report.

    PATH defaults to the configured src_dir (./src).
    """
    config = _analyze_config(
        block_sizes, extensions, exclude_dirs,
        min_tokens=min_tokens, min_lines=min_lines, max_blocks=max_blocks,
        top_n=top_n, workers=workers, report_path=report_path,
    )
    _analyze(config, path, output, quiet)


@main.command()
@click.option("--create", is_flag=True, help="Write utility file templates")
@click.option("--dry-run", is_flag=True, help="With --create, only show what would be written")
@click.option("-r", "--report", "report_path", type=str, default=None, help="Report artifact path")
@click.option("-u", "--utils-dir", type=str, default=None, help="Directory for utility templates")
def suggest(create, dry_run, report_path, utils_dir):
    """Generate refactoring suggestions from the saved report."""
    config = build_config(report_path=report_path, utils_dir=utils_dir)
    _suggest(config, create, dry_run)


@main.command()
@with_analyze_options
def full(path, block_sizes, min_tokens, min_lines, max_blocks, extensions,
         exclude_dirs, top_n, workers, report_path, output, quiet):
    """Analyze, then print refactoring suggestions."""
    config = _analyze_config(
        block_sizes, extensions, exclude_dirs,
        min_tokens=min_tokens, min_lines=min_lines, max_blocks=max_blocks,
        top_n=top_n, workers=workers, report_path=report_path,
    )
    _analyze(config, path, output, quiet)
    _suggest(config, create=False, dry_run=False)


@main.command()
@click.option("-r", "--report", "report_path", type=str, default=None, help="Report artifact path")
def view(report_path):
    """Show the summary of the saved report."""
    config = build_config(report_path=report_path)
    try:
        report = load_report(Path(config.report_path))
    except ReportNotFoundError:
        click.echo("⚠️  No report found. Run analysis first (cdf analyze).")
        return
    except ValueError as e:
        click.echo(f"❌ Could not read report: {e}", err=True)
        sys.exit(1)

    click.echo("📊 Report Summary:")
    click.echo("")
    for line in summary_lines(report):
        click.echo(line)
    click.echo("")
    click.echo(f"Full report: {config.report_path}")


@main.command()
@click.option("-r", "--report", "report_path", type=str, default=None, help="Report artifact path")
def clean(report_path):
    """Delete the saved report."""
    config = build_config(report_path=report_path)
    if clear_report(Path(config.report_path)):
        click.echo("🗑️  Report cleaned")
    else:
        click.echo("   No report to clean")


# Entry point alias for pyproject.toml
cli = main


if __name__ == "__main__":
    main()
