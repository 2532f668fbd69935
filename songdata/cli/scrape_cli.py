"""Typer-based command line interface."""

import os

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

from dotenv import load_dotenv

load_dotenv(".env")
load_dotenv(".env.local")

import asyncio

import questionary
import typer

from songdata.config import get_settings
from songdata.services.scraper import TunebatScraper
from songdata.services.track_id import extract_spotify_track_id

app = typer.Typer(help="Scrape musical attributes (key, BPM, energy, ...) for a track.")


def _ask(value: str | None, question: str) -> str:
    """Return value, or prompt for it when missing. Empty answers abort."""
    if value:
        return value
    answer = questionary.text(question).ask()
    if not answer or not answer.strip():
        typer.echo(f"✗ {question} is required", err=True)
        raise typer.Exit(1)
    return answer.strip()


@app.command()
def scrape(
    artist: str = typer.Argument(None, help="Artist name(s)"),
    song: str = typer.Argument(None, help="Song title"),
    track: str = typer.Argument(None, help="Spotify track link, URI or ID"),
):
    """Scrape one track page and print the result as JSON.

    Missing arguments are prompted for.
    """
    artist = _ask(artist, "Artist")
    song = _ask(song, "Song")
    track = _ask(track, "Spotify track link or ID")

    track_id = extract_spotify_track_id(track)
    if track_id is None:
        typer.echo(f"✗ Invalid Spotify link or track ID: {track}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Scraping {song} by {artist} ({track_id})...", err=True)
    result = asyncio.run(TunebatScraper().scrape(artist, song, track_id))

    typer.echo(result.model_dump_json(by_alias=True, indent=2))
    if not result.success:
        typer.echo(f"✗ {result.error}", err=True)
        raise typer.Exit(1)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Interface to bind"),
    port: int = typer.Option(None, help="Port (defaults to PORT setting)"),
):
    """Run the HTTP API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "songdata.main:app",
        host=host,
        port=port or settings.port,
        reload=settings.env == "local",
    )


if __name__ == "__main__":
    app()
