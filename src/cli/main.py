"""
Typer CLI for StudySpark.

Commands:
    studyspark serve                    - Run the HTTP API
    studyspark summary NOTES.txt        - Summarize notes (cached for later)
    studyspark topics NOTES.txt         - Extract topics into the progress tracker
    studyspark quiz [NOTES.txt]         - Take a generated quiz in the terminal
    studyspark progress show DOC        - Show topic coverage for a document
    studyspark progress toggle DOC TOPIC
    studyspark progress reset DOC
    studyspark chat "question"          - Ask the study assistant

Usage:
    studyspark --help
    studyspark quiz lecture-3.txt --ai-feedback
    studyspark quiz                     # reuses the cached summary or notes
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.markdown import Markdown

from src.core.errors import (
    GatewayError,
    GatewayTimeout,
    MalformedResponse,
    StudySparkError,
    ValidationError,
)
from src.core.log_setup import configure_logging
from src.gateway import GeminiGateway, GenerationGateway
from src.progress import (
    StateStore,
    StudyMaterialCache,
    TopicCoverageTracker,
    build_state_store,
    register_topics,
    toggle_covered,
)
from src.quiz import QuizSessionManager, reconcile_feedback

from .quiz_runner import QuizRunner, render_feedback, render_progress, render_score

app = typer.Typer(
    help="StudySpark CLI: notes -> summary, quiz, feedback and topic progress",
    no_args_is_help=True,
)
progress_app = typer.Typer(help="Topic coverage per study document", no_args_is_help=True)
app.add_typer(progress_app, name="progress")

console = Console()


def build_gateway() -> GenerationGateway:
    return GeminiGateway()


def build_store() -> StateStore:
    return build_state_store()


def _fail(exc: StudySparkError) -> typer.Exit:
    """Print a user-facing notice for the error category and return an Exit."""
    if isinstance(exc, ValidationError):
        message = str(exc)
    elif isinstance(exc, GatewayTimeout):
        message = "The study assistant took too long to respond. Please try again."
    elif isinstance(exc, MalformedResponse):
        message = "The study assistant returned a response that could not be read."
    elif isinstance(exc, GatewayError):
        message = "The study assistant is unavailable right now."
    else:
        message = str(exc)
    logger.debug(f"Command failed: {exc!r}")
    console.print(f"[red]Error:[/red] {message}")
    return typer.Exit(code=1)


def _read_notes(path: Path) -> str:
    if not path.exists():
        raise ValidationError(f"File not found: {path}")
    if path.suffix.lower() == ".pdf":
        raise ValidationError("PDF files are not read directly; extract the text first.")
    text = path.read_text(encoding="utf-8", errors="replace")
    if not text.strip():
        raise ValidationError("Notes content is required.")
    return text


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    configure_logging(console_level="DEBUG" if verbose else "WARNING")


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default: from config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default: from config)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    from src.api.main import run_server

    run_server(host=host, port=port, reload=reload)


@app.command("summary")
def summary(
    notes_file: Path = typer.Argument(..., help="Text or markdown notes"),
) -> None:
    """Summarize notes; notes and summary are cached for `quiz`."""
    cache = StudyMaterialCache(build_store())
    try:
        notes = _read_notes(notes_file)
        with console.status("Summarizing..."):
            text = asyncio.run(build_gateway().summarize(notes))
    except StudySparkError as exc:
        raise _fail(exc)

    cache.save_material(notes, text, source_name=notes_file.name)
    console.print(Markdown(text))


@app.command("topics")
def topics(
    notes_file: Path = typer.Argument(..., help="Text or markdown notes"),
    document: str | None = typer.Option(None, "--document", "-d", help="Progress key (default: file name)"),
) -> None:
    """Extract topics and add them to the document's progress tracker."""
    doc = document or notes_file.name
    tracker = TopicCoverageTracker(build_store())
    try:
        notes = _read_notes(notes_file)
        with console.status("Extracting topics..."):
            found = asyncio.run(build_gateway().extract_topics(notes))
        state = register_topics(tracker.load_state(doc), found)
        tracker.persist(doc, state)
    except StudySparkError as exc:
        raise _fail(exc)

    console.print(f"[green]Topics loaded for {doc}[/green] ({len(found)} found)")
    render_progress(doc, state, console)


@app.command("quiz")
def quiz(
    notes_file: Path | None = typer.Argument(None, help="Notes file (default: cached summary/notes)"),
    document: str | None = typer.Option(None, "--document", "-d", help="Progress key (default: file name)"),
    ai_feedback: bool = typer.Option(False, "--ai-feedback", help="Ask the assistant to explain results"),
) -> None:
    """Generate a quiz and take it in the terminal."""
    store = build_store()
    cache = StudyMaterialCache(store)
    tracker = TopicCoverageTracker(store)
    gateway = build_gateway()
    manager = QuizSessionManager()

    try:
        if notes_file is not None:
            source = _read_notes(notes_file)
            doc = document or notes_file.name
        else:
            source = cache.quiz_source()
            doc = document or cache.load().source_name
            if not source:
                raise ValidationError("No notes given and nothing cached. Pass a notes file.")

        ticket = manager.begin_request()
        with console.status("Generating quiz..."):
            questions = asyncio.run(gateway.generate_quiz(source))
        manager.start(questions, ticket=ticket)
    except StudySparkError as exc:
        raise _fail(exc)

    if notes_file is not None:
        cache.save_notes(source, source_name=notes_file.name)

    console.print(f"[bold cyan]Quiz generated: {len(questions)} questions[/bold cyan]")
    result = QuizRunner(manager, console).run()
    if result is None:
        console.print("[yellow]Quiz abandoned.[/yellow]")
        manager.reset()
        return

    render_score(result, console)

    if ai_feedback:
        try:
            with console.status("Generating feedback..."):
                feedback = asyncio.run(gateway.score_quiz(questions, manager.session.selected_answers))
            render_feedback(reconcile_feedback(result, feedback), console)
        except StudySparkError as exc:
            # Feedback is optional; the local score above stands
            _fail(exc)

    if doc:
        state = tracker.record_completed_quiz(doc, questions)
        render_progress(doc, state, console)


@app.command("chat")
def chat(
    message: str = typer.Argument(..., help="Question for the assistant"),
    system_instruction: str | None = typer.Option(
        None, "--system", help="Override the assistant's system instruction"
    ),
) -> None:
    """Ask the study assistant a question."""
    try:
        with console.status("Thinking..."):
            reply = asyncio.run(build_gateway().chat(message, system_instruction))
    except StudySparkError as exc:
        raise _fail(exc)
    console.print(Markdown(reply))


# ========================================
# Progress commands
# ========================================


@progress_app.command("show")
def progress_show(document: str = typer.Argument(..., help="Document name")) -> None:
    """Show topic coverage for a document."""
    tracker = TopicCoverageTracker(build_store())
    try:
        state = tracker.load_state(document)
    except StudySparkError as exc:
        raise _fail(exc)
    render_progress(document, state, console)


@progress_app.command("toggle")
def progress_toggle(
    document: str = typer.Argument(..., help="Document name"),
    topic: str = typer.Argument(..., help="Topic to flip"),
) -> None:
    """Mark a topic covered/uncovered by hand."""
    tracker = TopicCoverageTracker(build_store())
    try:
        state = toggle_covered(tracker.load_state(document), topic)
        tracker.persist(document, state)
    except StudySparkError as exc:
        raise _fail(exc)
    render_progress(document, state, console)


@progress_app.command("reset")
def progress_reset(
    document: str = typer.Argument(..., help="Document name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Forget every topic recorded for a document."""
    if not yes and not typer.confirm(f"Reset progress for {document}?"):
        raise typer.Exit(code=0)
    tracker = TopicCoverageTracker(build_store())
    try:
        deleted = tracker.reset(document)
    except StudySparkError as exc:
        raise _fail(exc)
    console.print("[green]Progress reset.[/green]" if deleted else "[dim]Nothing to reset.[/dim]")


def run() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    run()
