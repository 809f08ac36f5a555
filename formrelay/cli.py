"""Typer CLI for formrelay (render, submit, fetch, upload, notion-schema)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from dotenv import load_dotenv
# load .env immediately so subsequent imports (which read settings at import time)
# pick up values from the .env file
load_dotenv()

# Configure top-level logging early so other modules pick it up.
import logging
from formrelay.settings import settings

log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
handlers = [logging.StreamHandler()]
if settings.LOG_FILE:
    handlers.append(logging.FileHandler(settings.LOG_FILE))
logging.basicConfig(
    level=log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    handlers=handlers,
)

# Quiet noisy third-party loggers while keeping our app logs
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)
logging.getLogger("notion_client").setLevel(logging.WARNING)

from formrelay.format.markdown import format_data_to_markdown
from formrelay.kv.store import KVStore, submission_key
from formrelay.models.submission import SubmissionRecord
from formrelay.notion.io import dump_db_props, get_client
from formrelay.notion.mapping import build_notion_properties
from formrelay.orchestrate import run as orchestrator
from formrelay.settings import validate_required

app = typer.Typer()
console = Console()


def _load_payload(path: Path) -> dict:
    with open(path, "r", encoding="utf8") as fh:
        return json.load(fh)


@app.command()
def render(payload: Path, mode: str = typer.Option("markdown", help="markdown or notion")):
    """Render a submission JSON file without sending it anywhere."""
    try:
        record = SubmissionRecord.model_validate(_load_payload(payload))
        if mode == "notion":
            console.print_json(json.dumps(build_notion_properties(record), ensure_ascii=False))
        elif mode == "markdown":
            console.print(format_data_to_markdown(record), markup=False, highlight=False)
        else:
            raise ValueError(f"unknown mode '{mode}'")
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def submit(payload: Path, sink: str = typer.Option("kv", help="kv or notion")):
    """Submit a JSON payload to the KV store or the Notion database."""
    try:
        validate_required(sink)
        status, body = orchestrator.submit_submission(_load_payload(payload), sink=sink)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    if status != 200:
        console.print(f"[red]Error ({status}):[/red] {body.get('error')}")
        raise typer.Exit(code=1)
    console.print_json(json.dumps(body))


@app.command()
def fetch(submission_id: str):
    """Print what the KV store holds for a submission id."""
    try:
        validate_required("kv")
        value = KVStore.from_settings().get(submission_key(submission_id))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    if value is None:
        console.print(f"No submission stored for '{submission_id}'.")
        raise typer.Exit(code=1)
    console.print(value, markup=False, highlight=False)


@app.command()
def upload(path: Path, filename: Optional[str] = typer.Option(None, help="name to store under")):
    """Upload a local file to blob storage and print the resulting blob."""
    try:
        data = path.read_bytes()
    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    status, body = orchestrator.upload_file(filename or path.name, data)
    if status != 200:
        console.print(f"[red]Error ({status}):[/red] {body.get('error')}")
        raise typer.Exit(code=1)
    console.print_json(json.dumps(body))


@app.command("notion-schema")
def notion_schema(database_id: Optional[str] = None):
    """Show the property names and types of the submissions database."""
    try:
        validate_required("notion")
        out = dump_db_props(get_client(), database_id or settings.NOTION_DATABASE_ID)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print_json(json.dumps(out, ensure_ascii=False))
    expected = {settings.P_TITLE, settings.P_SERVICES, settings.P_SUBMITTED_AT}
    missing = sorted(expected - set(out["properties"]))
    if missing:
        console.print(f"[yellow]Missing fixed properties:[/yellow] {', '.join(missing)}")


if __name__ == "__main__":
    app()
