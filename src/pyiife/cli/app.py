# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer
from rich import box
from rich.panel import Panel
from rich.table import Table

from ..bundle.cache import BundleCache
from ..bundle.generator import BundleGenerator
from ..bundle.minify import ClosureCompilerClient
from ..bundle.output import BundleStats
from ..catalog.loader import load_sources, version as catalog_version
from ..compressor import compress_to_json
from ..config import PyIIFEConfig, load_config
from ..errors import (
    InvalidModulesError,
    MissingLoaderModuleError,
    NoModulesError,
    PyIIFEError,
)
from ..logging import configure_logging
from ..resolver.engine import split_module_tokens
from .shared import CLIError, CLILogger, build_cli_logger

NO_MODULES_MESSAGE = "You did not select any modules."
MISSING_LOADER_MESSAGE = "You did not select the css-loader or js-loader module."

app = typer.Typer(
    name="pyiife",
    help="Generate async CSS/JS loader bundles and compress loader configuration.",
    no_args_is_help=True,
    add_completion=False,
)


@dataclass(slots=True)
class CLIState:
    """Global flags shared by every command."""

    verbose: bool = False
    emoji: bool | None = None
    color: bool | None = None


@app.callback()
def _root(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Emit debug logging.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in console output.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured console output.")] = False,
) -> None:
    configure_logging(verbose=verbose)
    ctx.obj = CLIState(
        verbose=verbose,
        emoji=False if no_emoji else None,
        color=False if no_color else None,
    )


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    return state if isinstance(state, CLIState) else CLIState()


def _load(ctx: typer.Context, project_root: Path | None, **overrides: Any) -> PyIIFEConfig:
    state = _state(ctx)
    root_path = overrides.get("root_path")
    if isinstance(root_path, Path):
        overrides["root_path"] = root_path.expanduser().resolve()
    overrides.setdefault("emoji", state.emoji)
    overrides.setdefault("color", state.color)
    return load_config(project_root, overrides)


def _logger(ctx: typer.Context, config: PyIIFEConfig | None = None) -> CLILogger:
    state = _state(ctx)
    use_emoji = config.emoji if config is not None else state.emoji is not False
    use_color = config.color if config is not None else state.color is not False
    return build_cli_logger(emoji=use_emoji, no_color=not use_color)


def _failure_messages(exc: PyIIFEError) -> list[str]:
    if isinstance(exc, NoModulesError):
        return [NO_MODULES_MESSAGE]
    if isinstance(exc, MissingLoaderModuleError):
        return [MISSING_LOADER_MESSAGE]
    if isinstance(exc, InvalidModulesError):
        return list(exc.errors)
    return [str(exc)]


@contextmanager
def _handle_errors(logger: CLILogger) -> Iterator[None]:
    """Translate library and CLI errors into failure output and an exit status."""

    try:
        try:
            yield
        except PyIIFEError as exc:
            raise CLIError("\n".join(_failure_messages(exc))) from exc
    except CLIError as exc:
        for line in str(exc).splitlines():
            logger.fail(line)
        raise typer.Exit(code=exc.exit_code) from exc


def _render_stats(logger: CLILogger, stats: BundleStats, *, debug: bool, compress: bool) -> None:
    mode = "debug" if debug else "release"
    if compress:
        mode += ", minified"
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    table.add_row("Output", str(stats.path))
    table.add_row("Modules", ", ".join(stats.modules))
    table.add_row("Mode", mode)
    table.add_row("Size", f"{stats.size_kb:.2f}kb ({stats.size} bytes)")
    table.add_row("Gzip", f"{stats.gzip_size_kb:.2f}kb ({stats.gzip_size} bytes)")
    logger.console.print(Panel(table, title="Bundle", border_style="green"))
    logger.ok(f"Bundle written to {stats.path}")


@app.command()
def generate(
    ctx: typer.Context,
    modules: Annotated[list[str] | None, typer.Argument(help="Modules to include.")] = None,
    module_list: Annotated[
        str | None,
        typer.Option("--modules", "-m", help="Comma or space separated module list."),
    ] = None,
    compress: Annotated[
        bool | None,
        typer.Option("--compress/--no-compress", "-c", help="Minify the bundle.", show_default=False),
    ] = None,
    format_name: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Bundle wrapper: none, wrap or unary."),
    ] = None,
    debug: Annotated[
        bool | None,
        typer.Option("--debug/--no-debug", "-d", help="Use debug sources.", show_default=False),
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write the bundle to a file.")] = None,
    root_path: Annotated[Path | None, typer.Option("--root-path", "-r", help="Loader source root.")] = None,
    no_cache: Annotated[bool, typer.Option("--no-cache", help="Bypass the bundle cache.")] = False,
    project_root: Annotated[
        Path | None,
        typer.Option("--project-root", help="Directory holding pyproject.toml or .pyiife.toml."),
    ] = None,
) -> None:
    """Resolve MODULES and print or write the loader bundle."""

    with _handle_errors(_logger(ctx)):
        config = _load(
            ctx,
            project_root,
            root_path=root_path,
            format=format_name,
            debug=debug,
            compress=compress,
            cache=False if no_cache else None,
        )
    logger = _logger(ctx, config)

    tokens = list(modules or [])
    if module_list:
        tokens.extend(split_module_tokens(module_list))

    with _handle_errors(logger):
        generator = BundleGenerator(
            config.generate_options(),
            cache=BundleCache(maxsize=config.cache_size),
            minifier=ClosureCompilerClient(url=config.compiler_url, timeout=config.compiler_timeout),
            sources=load_sources(config.root_path),
        )
        if output is None:
            logger.echo(generator.generate(tokens))
            return
        stats = generator.write(tokens, output)
    _render_stats(logger, stats, debug=config.debug, compress=config.compress)


@app.command()
def compress(
    ctx: typer.Context,
    config_text: Annotated[
        str | None,
        typer.Option("--config", "-c", help="Loader configuration as JSON; read from stdin when omitted."),
    ] = None,
    js_config: Annotated[str | None, typer.Option("--js-config", help="JS loader configuration as JSON.")] = None,
    global_base: Annotated[
        str | None,
        typer.Option("--global-base", "-b", help="URL prefix stripped from href/src values."),
    ] = None,
    drop_empty_capture: Annotated[
        bool,
        typer.Option("--drop-empty-capture", help="Remove empty capture slots from the result."),
    ] = False,
    root_path: Annotated[Path | None, typer.Option("--root-path", "-r", help="Loader source root.")] = None,
    project_root: Annotated[
        Path | None,
        typer.Option("--project-root", help="Directory holding pyproject.toml or .pyiife.toml."),
    ] = None,
) -> None:
    """Print the dictionary-indexed form of a loader configuration."""

    with _handle_errors(_logger(ctx)):
        config = _load(ctx, project_root, root_path=root_path, global_base=global_base)
    logger = _logger(ctx, config)

    text = config_text if config_text is not None else sys.stdin.read()
    with _handle_errors(logger):
        if not text.strip():
            raise CLIError("No configuration given.")
        logger.echo(
            compress_to_json(
                text,
                js_config,
                config.global_base,
                root_path=config.root_path,
                drop_empty_capture=drop_empty_capture,
            )
        )


@app.command("modules")
def list_modules(
    ctx: typer.Context,
    root_path: Annotated[Path | None, typer.Option("--root-path", "-r", help="Loader source root.")] = None,
    project_root: Annotated[
        Path | None,
        typer.Option("--project-root", help="Directory holding pyproject.toml or .pyiife.toml."),
    ] = None,
) -> None:
    """List the modules available in the catalog."""

    logger = _logger(ctx)
    with _handle_errors(logger):
        config = _load(ctx, project_root, root_path=root_path)
        sources = load_sources(config.root_path)
        catalog = sources.catalog
    table = Table(title="Modules", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Module", style="bold", no_wrap=True)
    table.add_column("Description", overflow="fold")
    for position, descriptor in enumerate(catalog):
        table.add_row(str(position), descriptor.name, descriptor.description or "-")
    logger.console.print(table)


@app.command("version")
def show_version(
    ctx: typer.Context,
    root_path: Annotated[Path | None, typer.Option("--root-path", "-r", help="Loader source root.")] = None,
    project_root: Annotated[
        Path | None,
        typer.Option("--project-root", help="Directory holding pyproject.toml or .pyiife.toml."),
    ] = None,
) -> None:
    """Print the version of the loader sources."""

    logger = _logger(ctx)
    with _handle_errors(logger):
        config = _load(ctx, project_root, root_path=root_path)
        value = catalog_version(config.root_path)
        if value is None:
            raise CLIError("The loader manifest does not declare a version.")
        logger.echo(value)


def main() -> None:
    """Run the CLI application."""

    app()


__all__ = ["app", "main"]
