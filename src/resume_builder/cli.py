"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from resume_builder.config import API_KEY_ENV, get_api_key, load_config
from resume_builder.exceptions import ResumeBuilderError, ResumeSaveError
from resume_builder.export.pdf_renderer import render, render_pdf
from resume_builder.export.templates import get_template, list_templates
from resume_builder.models.profile import CallerIdentity, ProfileSnapshot
from resume_builder.pipeline.orchestrator import ResumeBuilder
from resume_builder.storage.profile_store import ProfileStore
from resume_builder.storage.resume_archive import ResumeArchive

app = typer.Typer(
    name="resume-builder",
    help="AI resume builder: generate resumes tailored to a job description",
    no_args_is_help=True,
)
profile_app = typer.Typer(help="View or edit the stored profile", no_args_is_help=True)
app.add_typer(profile_app, name="profile")
console = Console()

USER_OPTION = typer.Option("local", "--user", "-u", envvar="RESUME_BUILDER_USER", help="User id")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(error: ResumeBuilderError) -> None:
    console.print(f"[red]{error.kind}: {error.message}[/red]")
    raise typer.Exit(1)


@app.command()
def generate(
    jd: Path = typer.Argument(help="Job description text file"),
    user: str = USER_OPTION,
    full_name: str = typer.Option(None, "--name", help="Override profile full name"),
    phone: str = typer.Option(None, "--phone", help="Override profile phone"),
    website: str = typer.Option(None, "--website", help="Override profile website"),
    bio: str = typer.Option(None, "--bio", help="Override profile bio"),
    template: str = typer.Option(None, "--template", "-t", help="Template for --pdf/--html"),
    pdf: Path = typer.Option(None, "--pdf", help="Also write a PDF to this path"),
    html: Path = typer.Option(None, "--html", help="Also write an HTML preview to this path"),
    save: bool = typer.Option(True, "--save/--no-save", help="Store the result in the archive"),
) -> None:
    """Generate a resume for a job description."""
    if not jd.exists():
        console.print(f"[red]Job description file not found: {jd}[/red]")
        raise typer.Exit(1)

    config = load_config()
    template = template or config.render.default_template
    caller = CallerIdentity(user_id=user)
    try:
        get_template(template)
        builder = ResumeBuilder.from_config(config, get_api_key())
        profile = builder.profile_snapshot(caller)
    except ResumeBuilderError as e:
        _fail(e)

    overrides = {
        k: v
        for k, v in {"full_name": full_name, "phone": phone, "website": website, "bio": bio}.items()
        if v is not None
    }
    profile = ProfileSnapshot(**{**profile.model_dump(), **overrides})
    jd_text = jd.read_text(encoding="utf-8")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Generating resume...", total=None)
        try:
            if save:
                result = asyncio.run(builder.build(jd_text, caller, profile))
                resume_text = result.resume.resume_content
                resume_id = result.resume.id
            else:
                resume_text = asyncio.run(builder.generate(jd_text, caller, profile))
                resume_id = None
        except ResumeSaveError as e:
            console.print(f"[yellow]{e.message}[/yellow]")
            resume_text, resume_id = e.resume, None
        except ResumeBuilderError as e:
            _fail(e)

    console.print(Panel(resume_text, title="Generated resume"))
    if resume_id:
        console.print(f"[green]Saved as {resume_id}[/green]")
    try:
        if html:
            html.parent.mkdir(parents=True, exist_ok=True)
            html.write_text(render(resume_text, template).html, encoding="utf-8")
            console.print(f"[green]HTML saved: {html}[/green]")
        if pdf:
            pdf.parent.mkdir(parents=True, exist_ok=True)
            pdf.write_bytes(render_pdf(resume_text, template))
            console.print(f"[green]PDF saved: {pdf}[/green]")
    except ResumeBuilderError as e:
        _fail(e)


@app.command()
def templates() -> None:
    """List available resume templates."""
    for t in list_templates():
        console.print(f"  - {t.id.value} ({t.label})")


@app.command()
def history(
    user: str = USER_OPTION,
    limit: int = typer.Option(None, "--limit", "-n", help="Maximum rows"),
) -> None:
    """List archived resumes, newest first."""
    config = load_config()
    archive = ResumeArchive(config.storage.resolved_db_path)
    resumes = archive.list_for_user(user, limit=limit or config.storage.history_limit)
    if not resumes:
        console.print("[dim]No resumes generated yet.[/dim]")
        return
    table = Table(title="Generated resumes")
    table.add_column("ID")
    table.add_column("Created")
    table.add_column("Job description")
    for r in resumes:
        table.add_row(r.id, r.created_at.strftime("%Y-%m-%d %H:%M"), r.job_description_preview(60))
    console.print(table)


@app.command()
def export(
    resume_id: str = typer.Argument(help="Archived resume id"),
    user: str = USER_OPTION,
    template: str = typer.Option(None, "--template", "-t", help="Template id"),
    fmt: str = typer.Option("pdf", "--format", "-f", help="pdf, html or txt"),
    output: Path = typer.Option(None, "--output", "-o", help="Output path"),
) -> None:
    """Render an archived resume to a file."""
    config = load_config()
    db_path = config.storage.resolved_db_path
    # Rendering needs no provider access, so the builder is wired without the LLM.
    builder = ResumeBuilder(writer=None, profiles=ProfileStore(db_path), archive=ResumeArchive(db_path))
    try:
        download = builder.download(
            CallerIdentity(user_id=user),
            resume_id,
            template or config.render.default_template,
            fmt,
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except ResumeBuilderError as e:
        _fail(e)

    output = output or Path(download.filename)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(download.content)
    console.print(f"[green]Saved: {output}[/green]")


@profile_app.command("show")
def profile_show(user: str = USER_OPTION) -> None:
    """Show the stored profile."""
    store = ProfileStore(load_config().storage.resolved_db_path)
    profile = store.get_or_create(CallerIdentity(user_id=user))
    table = Table(title=f"Profile: {profile.display_name()}", show_header=False)
    for key, value in profile.model_dump(exclude={"created_at", "updated_at"}).items():
        table.add_row(key, "" if value is None else str(getattr(value, "value", value)))
    console.print(table)


@profile_app.command("set")
def profile_set(
    user: str = USER_OPTION,
    full_name: str = typer.Option(None, "--name"),
    username: str = typer.Option(None, "--username"),
    phone: str = typer.Option(None, "--phone"),
    website: str = typer.Option(None, "--website"),
    bio: str = typer.Option(None, "--bio"),
    display_name_preference: str = typer.Option(
        None, "--display-name", help="full_name, first_name or username"
    ),
) -> None:
    """Update profile fields."""
    fields = {
        k: v
        for k, v in {
            "full_name": full_name,
            "username": username,
            "phone": phone,
            "website": website,
            "bio": bio,
            "display_name_preference": display_name_preference,
        }.items()
        if v is not None
    }
    if not fields:
        console.print("[yellow]Nothing to update.[/yellow]")
        raise typer.Exit(1)
    store = ProfileStore(load_config().storage.resolved_db_path)
    try:
        profile = store.update(CallerIdentity(user_id=user), **fields)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Profile updated: {profile.display_name()}[/green]")


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address"),
    port: int = typer.Option(None, "--port", help="Port"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from resume_builder.server.app import create_app

    config = load_config()
    if get_api_key() is None:
        console.print(f"[red]MisconfiguredService: {API_KEY_ENV} is not set[/red]")
        raise typer.Exit(1)
    uvicorn.run(
        create_app(config),
        host=host or config.server.host,
        port=port or config.server.port,
    )


if __name__ == "__main__":
    app()
