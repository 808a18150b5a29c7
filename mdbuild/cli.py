# cli.py - Command line interface for mdbuild
"""
mdbuild CLI - Build Markdown posts into static assets

COMMANDS:
    mdbuild init                               Write an mdbuild.yaml template
    mdbuild build [--watch] [--base-url URL]   Build posts, images, metadata, sitemap
    mdbuild clean [--dry-run]                  Remove the image cache and build output
    mdbuild info                               Show resolved configuration
    mdbuild version                            Show version information

EXAMPLES:
    # One-off production build
    mdbuild build --base-url https://example.com

    # Rebuild whenever a post changes
    mdbuild build --watch

    # Force every image to be converted again
    mdbuild clean && mdbuild build
"""

import sys
from pathlib import Path
from typing import Optional

import click

from mdbuild import __version__
from mdbuild.build import run_build
from mdbuild.clean import clean_outputs
from mdbuild.config_utils import CONFIG_FILE_NAME, MdBuildConfig, create_config_template, get_config
from mdbuild.errors import ConfigurationError, MdBuildError
from mdbuild.fs_utils import list_subdirectories
from mdbuild.icons import icons, setup_logging
from mdbuild.watch import watch as watch_content


# ============================================================================
# Configuration & Utilities
# ============================================================================

class MdBuildContext:
    """Shared context for CLI commands"""

    def __init__(self, verbosity: int = 0):
        self.project_root = Path.cwd()
        self.verbosity = verbosity

    def load_config(self, **overrides) -> MdBuildConfig:
        config = get_config(self.project_root, overrides)
        issues = config.validate()
        if issues:
            raise ConfigurationError(
                message="Invalid configuration",
                suggestion=f"Fix these settings in {CONFIG_FILE_NAME} or on the command line",
                context={"issues": "; ".join(issues)}
            )
        return config


def _fail(error: MdBuildError) -> None:
    click.echo(f"{icons.ERROR} {error}", err=True)
    sys.exit(1)


# ============================================================================
# Click Group Setup
# ============================================================================

@click.group()
@click.option('--verbose', '-v', count=True, help='Show debug output')
@click.pass_context
def cli(ctx, verbose: int):
    """
    mdbuild - Markdown posts to versioned static assets

    Turns content/posts/<date>--<slug>/index.md folders into HTML modules,
    AVIF/WebP/baseline images, a metadata module and a sitemap.
    """
    setup_logging(verbose)
    ctx.obj = MdBuildContext(verbose)


# ============================================================================
# Build Commands
# ============================================================================

@cli.command()
@click.option('--content-dir', type=click.Path(file_okay=False), help='Directory of <date>--<slug> post folders')
@click.option('--out-dir', type=click.Path(file_okay=False), help='Build output directory')
@click.option('--base-url', help='Public site URL used in sitemap.xml')
@click.option('--watch', is_flag=True, help='Rebuild when content changes')
@click.pass_obj
def build(ctx: MdBuildContext, content_dir: Optional[str], out_dir: Optional[str], base_url: Optional[str], watch: bool):
    """
    Build all posts

    Examples:
        mdbuild build
        mdbuild build --base-url https://example.com
        mdbuild build --watch
    """
    try:
        config = ctx.load_config(content_dir=content_dir, out_dir=out_dir, base_url=base_url)
        if watch:
            click.echo(f"{icons.WATCH} Starting watch mode (Ctrl+C to stop)...")
            watch_content(config, lambda: run_build(config))
            return

        click.echo(f"{icons.BUILD} Building {config.content_path}")
        report = run_build(config)
    except MdBuildError as e:
        _fail(e)
        return

    click.echo(f"{icons.SUCCESS} Built {len(report.posts)} post(s) into {config.out_path}")


@cli.command()
@click.option('--dry-run', is_flag=True, help='Show what would be deleted without deleting')
@click.pass_obj
def clean(ctx: MdBuildContext, dry_run: bool):
    """
    Remove the image cache and generated output

    index.html and robots.txt in the output directory are kept.
    """
    try:
        config = ctx.load_config()
        removed = clean_outputs(ctx.project_root, config.cache_path, config.out_path, dry_run=dry_run)
    except MdBuildError as e:
        _fail(e)
        return

    verb = "Would remove" if dry_run else "Removed"
    click.echo(f"{icons.DELETE} {verb} {len(removed)} item(s)")


# ============================================================================
# Project Commands
# ============================================================================

@cli.command()
@click.option('--force', is_flag=True, help='Overwrite an existing config file')
@click.pass_obj
def init(ctx: MdBuildContext, force: bool):
    """Write an mdbuild.yaml template in the current directory"""
    target = ctx.project_root / CONFIG_FILE_NAME
    if target.exists() and not force:
        click.echo(f"{icons.WARNING} {target} already exists (use --force to overwrite)", err=True)
        sys.exit(1)

    target.write_text(create_config_template(), encoding="utf-8")
    click.echo(f"{icons.SUCCESS} Created: {target}")


@cli.command()
@click.pass_obj
def info(ctx: MdBuildContext):
    """Show resolved configuration and post count"""
    try:
        config = ctx.load_config()
    except MdBuildError as e:
        _fail(e)
        return

    click.echo(f"{icons.FOLDER} Project: {config.project_root}\n")
    rows = [
        ("content_dir", config.content_path),
        ("meta_module", config.meta_module_path),
        ("out_dir", config.out_path),
        ("cache_dir", config.cache_path),
        ("base_url", config.base_url or "(not set)"),
        ("default_language", config.default_language),
        ("image_quality", config.image_quality),
    ]
    for key, value in rows:
        source = config.source_of(key)
        click.echo(f"  {key:<17} {value}  [{source}]")

    if config.content_path.is_dir():
        count = len(list_subdirectories(config.content_path))
        click.echo(f"\n{icons.POST} Posts: {count}")
    else:
        click.echo(f"\n{icons.WARNING} Content directory not found: {config.content_path}")


@cli.command()
def version():
    """Show version information"""
    click.echo(f"mdbuild CLI v{__version__}")
    click.echo(f"Python {sys.version.split()[0]}")


if __name__ == '__main__':
    cli()
