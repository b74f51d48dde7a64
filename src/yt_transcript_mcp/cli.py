"""
cli.py — Command-line interface for yt-transcript-mcp.

Provides the `yt-transcript` command group (registered as a console script
in pyproject.toml).  The CLI is organized into subcommands:

    get        Fetch a transcript from YouTube.
    languages  List the caption tracks available for a video.
    serve      Run the MCP server on stdio.
    config     Register the MCP server with local host applications
               (add, remove, verify, list, detect).

Usage examples:
    yt-transcript get "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    yt-transcript get dQw4w9WgXcQ --lang de,en --format json
    yt-transcript languages dQw4w9WgXcQ
    yt-transcript config add --client claude-desktop
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Callable, NoReturn

import click

from yt_transcript_mcp import installer
from yt_transcript_mcp.errors import TranscriptError
from yt_transcript_mcp.extractor import extract, format_tracks, list_transcripts


# ---------------------------------------------------------------------------
# CLI group — the top-level `yt-transcript` command
# ---------------------------------------------------------------------------

@click.group()
@click.option(
    "--verbose", "-v",
    is_flag=True,
    envvar="YT_TRANSCRIPT_MCP_VERBOSE",
    help="Log requests and client fallbacks to stderr.",
)
def main(verbose: bool) -> None:
    """
    YouTube Transcript MCP — fetch transcripts and serve them to MCP clients.
    """
    # stderr only: the MCP stdio transport owns stdout.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Subcommand: get — fetch a transcript from YouTube
# ---------------------------------------------------------------------------

@main.command()
@click.argument("video", metavar="URL_OR_ID")
@click.option(
    "--format", "-f",
    "fmt",                           # avoid shadowing the builtin "format"
    type=click.Choice(["text", "timestamped", "json"], case_sensitive=False),
    default="timestamped",
    show_default=True,
    help="Output format: plain text, [M:SS]-prefixed lines, or JSON with timestamps.",
)
@click.option(
    "--lang", "-l",
    default=None,
    help="Comma-separated language codes in priority order (e.g. 'de,en'). Defaults to English.",
)
@click.option(
    "--preserve-formatting",
    is_flag=True,
    help="Keep inline formatting tags such as <b> and <i>.",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Write output to a file instead of stdout.",
)
def get(
    video: str,
    fmt: str,
    lang: str | None,
    preserve_formatting: bool,
    output: str | None,
) -> None:
    """
    Fetch a YouTube video transcript.

    VIDEO can be a full YouTube URL or an 11-character video ID.
    """
    languages: list[str] | None = None
    if lang:
        languages = [code.strip() for code in lang.split(",") if code.strip()]

    try:
        result = asyncio.run(extract(
            video,
            languages=languages,
            fmt=fmt.lower(),
            preserve_formatting=preserve_formatting,
        ))
    except TranscriptError as exc:
        _fail(exc.message)

    if isinstance(result, dict):
        text = json.dumps(result, indent=2, ensure_ascii=False)
    else:
        text = result

    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.write("\n")
        click.echo(f"Transcript written to {output}", err=True)
    else:
        click.echo(text)


# ---------------------------------------------------------------------------
# Subcommand: languages — list available caption tracks
# ---------------------------------------------------------------------------

@main.command()
@click.argument("video", metavar="URL_OR_ID")
@click.option("--json", "as_json", is_flag=True, help="Print the track list as JSON.")
def languages(video: str, as_json: bool) -> None:
    """
    List the transcript languages available for a video.
    """
    try:
        tracks = asyncio.run(list_transcripts(video))
    except TranscriptError as exc:
        _fail(exc.message)

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in tracks], indent=2, ensure_ascii=False))
    elif not tracks:
        click.echo("No transcripts are available for this video.")
    else:
        click.echo(format_tracks(tracks))


# ---------------------------------------------------------------------------
# Subcommand: serve — run the MCP server
# ---------------------------------------------------------------------------

@main.command()
def serve() -> None:
    """
    Run the MCP server on stdio (for Claude Desktop, Cursor, etc.).
    """
    from yt_transcript_mcp.server import run

    run()


# ---------------------------------------------------------------------------
# Subcommand group: config — host application registration
# ---------------------------------------------------------------------------

_CLIENT_OPTION = click.option(
    "--client", "-c",
    "client_ids",
    multiple=True,
    type=click.Choice(list(installer.CLIENT_NAMES)),
    help="Client to act on (repeatable). Defaults to every installed client.",
)


def _targets(client_ids: tuple[str, ...]) -> list[installer.Detection]:
    if client_ids:
        return [installer.detect_client(client_id) for client_id in client_ids]
    detected = [d for d in installer.detect_all() if d.installed]
    if not detected:
        _fail("No supported MCP clients were detected.")
    return detected


def _apply(
    action: Callable[[installer.Detection], installer.Result],
    detections: list[installer.Detection],
) -> list[installer.Result]:
    """Run `action` for each client; a broken config fails only that client."""
    results = []
    for detection in detections:
        try:
            results.append(action(detection))
        except installer.ConfigFileError as exc:
            results.append(installer.Result(
                detection.client_id, False, str(exc), config_path=detection.config_path,
            ))
    return results


def _report(results: list[installer.Result]) -> None:
    for result in results:
        mark = "✓" if result.success else "✗"
        click.echo(f"{mark} {result.message}")
        if result.changed and result.config_path:
            click.echo(f"  Config: {result.config_path}")
    if not all(result.success for result in results):
        sys.exit(1)


@main.group()
def config() -> None:
    """
    Manage MCP client registration for this server.
    """


@config.command("add")
@_CLIENT_OPTION
def config_add(client_ids: tuple[str, ...]) -> None:
    """Register the server with MCP clients."""
    _report(_apply(installer.register, _targets(client_ids)))


@config.command("remove")
@_CLIENT_OPTION
def config_remove(client_ids: tuple[str, ...]) -> None:
    """Unregister the server from MCP clients."""
    _report(_apply(installer.unregister, _targets(client_ids)))


@config.command("verify")
@_CLIENT_OPTION
def config_verify(client_ids: tuple[str, ...]) -> None:
    """Check that the server entry is present and valid."""
    _report(_apply(installer.verify, _targets(client_ids)))


@config.command("list")
def config_list() -> None:
    """Show the clients this server is registered with."""
    try:
        registered = installer.list_registrations()
    except installer.ConfigFileError as exc:
        _fail(str(exc))

    if not registered:
        click.echo("Not registered with any MCP client. Use 'yt-transcript config add'.")
        return
    for detection in registered:
        click.echo(f"{detection.name}")
        click.echo(f"  Config: {detection.config_path}")


@config.command("detect")
def config_detect() -> None:
    """Show which supported MCP clients are installed."""
    for detection in installer.detect_all():
        if detection.installed:
            click.echo(f"✓ {detection.name}")
            click.echo(f"  Config: {detection.config_path}")
        else:
            click.echo(f"✗ {detection.name} ({detection.reason})")
