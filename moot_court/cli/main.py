"""Moot Court CLI - Simulated courtroom sessions."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="moot-court",
    help="Simulated courtroom sessions with machine-checked judgments.",
    no_args_is_help=True,
)

console = Console()

CLOSE_COMMAND = "/close"
QUIT_COMMAND = "/quit"

STATUS_STYLES = {
    "completed": "green",
    "active": "bold yellow",
    "pending": "dim",
}


def _get_client():
    """Text-generation client used by the commands."""
    from ..llm.ollama_client import get_ollama_client
    return get_ollama_client()


def _resolve_snapshot(ref: str) -> Path:
    """Accept a snapshot path or a session id from the sessions directory."""
    from ..config.settings import get_settings

    path = Path(ref)
    if path.suffix == ".json" or path.exists():
        return path
    return get_settings().sessions_dir / f"{ref}.json"


def _load_machine(ref: str):
    from ..exceptions import SnapshotError
    from ..session import PhaseStateMachine, SessionSnapshot

    path = _resolve_snapshot(ref)
    try:
        snapshot = SessionSnapshot.load(path)
    except SnapshotError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return PhaseStateMachine.restore(snapshot), path


def _print_message(message) -> None:
    style = {"human": "cyan", "system": "dim"}.get(message.category.value, "white")
    console.print(f"[bold {style}]{message.display_name}[/bold {style}]: {message.content}")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging before running a command."""
    from ..config.settings import get_settings
    from ..utils.logging import setup_logging

    settings = get_settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file,
    )


@app.command()
def validate(
    case_file: Path = typer.Argument(..., help="Case file (YAML or JSON)"),
):
    """
    Check a case file for intake problems.
    """
    from ..exceptions import CaseContextError
    from ..models import CaseContext, validate_case_context

    try:
        context = CaseContext.load(case_file)
    except CaseContextError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    problems = validate_case_context(context)
    if problems:
        console.print("[yellow]Case cannot be heard:[/yellow]")
        for problem in problems:
            console.print(f"  - {problem}")
        raise typer.Exit(1)

    console.print(f"[green]Case is valid:[/green] {context.display_title}")


@app.command()
def simulate(
    case_file: Optional[Path] = typer.Argument(None, help="Case file (YAML or JSON)"),
    resume: Optional[str] = typer.Option(
        None,
        "--resume", "-r",
        help="Resume a saved session (snapshot path or session id)",
    ),
    max_turns: Optional[int] = typer.Option(
        None,
        "--max-turns", "-n",
        help="Maximum generated turns between user turns",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Snapshot file (default: sessions directory)",
    ),
):
    """
    Run an interactive session.

    Generated participants speak in turn; you are prompted whenever the
    floor is yours. Type /close to close the session or /quit to save
    and leave.
    """
    from ..exceptions import CaseContextError
    from ..models import CaseContext, validate_case_context
    from ..session import PhaseStateMachine, SessionDriver, TurnStatus

    if resume:
        machine, path = _load_machine(resume)
        output = output or path
        if not machine.started:
            _print_message(machine.start())
    elif case_file is not None:
        try:
            context = CaseContext.load(case_file)
        except CaseContextError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)

        problems = validate_case_context(context)
        if problems:
            console.print("[red]Case cannot be heard:[/red]")
            for problem in problems:
                console.print(f"  - {problem}")
            raise typer.Exit(1)

        machine = PhaseStateMachine(context)
        opening = machine.start()
        _print_message(opening)
    else:
        console.print("[red]Error: Provide a case file or --resume[/red]")
        raise typer.Exit(1)

    driver = SessionDriver(machine, client=_get_client())
    console.print(f"\n[bold]Session {machine.session_id}: {machine.title}[/bold]\n")

    def save() -> Path:
        return machine.snapshot().save(output)

    while not machine.is_closed():
        results = driver.run(max_turns)
        for result in results:
            if result.message is not None:
                _print_message(result.message)
            if result.transition is not None and result.transition.phase_changed:
                console.print(f"\n[bold magenta]== {result.transition.phase.label} ==[/bold magenta]\n")
        save()

        last = results[-1] if results else None
        if last is None or last.status == TurnStatus.CLOSED:
            break
        if last.status in (TurnStatus.FAILED, TurnStatus.REJECTED):
            console.print(f"[red]Turn failed: {last.error}[/red]")
            console.print(f"Session saved to {save()}")
            raise typer.Exit(1)
        if last.status != TurnStatus.AWAITING_HUMAN:
            # Turn limit reached without needing the user
            continue

        text = typer.prompt("أنت")
        if text.strip() == QUIT_COMMAND:
            break
        if text.strip() == CLOSE_COMMAND:
            driver.close()
            break

        result = driver.submit_human_message(text)
        if result.status != TurnStatus.COMPLETED:
            console.print(f"[yellow]{result.error or result.status.value}[/yellow]")
        elif result.transition is not None and result.transition.phase_changed:
            console.print(f"\n[bold magenta]== {result.transition.phase.label} ==[/bold magenta]\n")

    path = save()
    if machine.is_closed():
        console.print("\n[green]Session closed.[/green]")
        console.print(f"Generate the judgment with: moot-court judgment {path}")
    else:
        console.print(f"\nSession saved to {path}")


@app.command()
def status(
    session: str = typer.Argument(..., help="Snapshot path or session id"),
):
    """
    Show the phase timeline of a saved session.
    """
    machine, _ = _load_machine(session)

    console.print(f"\n[bold]Session: {machine.session_id}[/bold] {machine.title}")
    console.print(f"Phase: {machine.phase.label if machine.phase else 'not started'}")
    console.print(f"Turn: {machine.turn}")
    console.print(f"Messages: {len(machine.messages)}")
    if machine.next_speaker is not None:
        from ..session.prompts import display_name
        console.print(f"Next speaker: {display_name(machine.next_speaker, machine.context)}")

    table = Table(title="Timeline")
    table.add_column("#", justify="right")
    table.add_column("Phase", style="cyan")
    table.add_column("Status")

    for i, event in enumerate(machine.timeline, 1):
        style = STATUS_STYLES[event.status.value]
        table.add_row(str(i), event.label, f"[{style}]{event.status.value}[/{style}]")

    console.print(table)


@app.command()
def transcript(
    session: str = typer.Argument(..., help="Snapshot path or session id"),
    phase: Optional[str] = typer.Option(
        None,
        "--phase", "-p",
        help="Only show messages of this phase (e.g. evidence_review)",
    ),
):
    """
    Print the transcript of a saved session.
    """
    from ..models import Phase

    machine, _ = _load_machine(session)

    selected = None
    if phase:
        try:
            selected = Phase(phase)
        except ValueError:
            console.print(f"[red]Error: Unknown phase: {phase}[/red]")
            raise typer.Exit(1)

    current = None
    for message in machine.messages:
        if selected is not None and message.phase != selected:
            continue
        if message.phase != current:
            current = message.phase
            console.print(f"\n[bold magenta]== {current.label} ==[/bold magenta]")
        _print_message(message)


@app.command()
def judgment(
    session: str = typer.Argument(..., help="Snapshot path or session id"),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Write the judgment text to this file",
    ),
    docx: Optional[Path] = typer.Option(
        None,
        "--docx",
        help="Also export the judgment as DOCX",
    ),
    case_number: Optional[str] = typer.Option(None, "--case-number", help="Case number"),
    hijri_date: str = typer.Option("", "--hijri-date", help="Hijri date of the judgment"),
    correct: Optional[Path] = typer.Option(
        None,
        "--correct",
        help="Existing judgment text file to correct instead of drafting anew",
    ),
):
    """
    Decide a saved session and draft its judgment.
    """
    from ..decision import CaseMeta
    from ..drafting import render_judgment

    machine, _ = _load_machine(session)
    if not machine.is_closed():
        console.print("[yellow]Warning: session is still open; judging the transcript so far.[/yellow]")

    current_text = None
    if correct is not None:
        if not correct.exists():
            console.print(f"[red]Error: File not found: {correct}[/red]")
            raise typer.Exit(1)
        current_text = correct.read_text(encoding="utf-8")

    case_meta = CaseMeta.from_context(machine.context, case_number=case_number, hijri_date=hijri_date)

    with console.status("[bold]Deciding and drafting judgment...[/bold]"):
        result = render_judgment(
            machine.context,
            machine.messages,
            client=_get_client(),
            case_meta=case_meta,
            current_text=current_text,
        )

    console.print(f"Decision: [bold]{result.decision.outcome.value}[/bold]")

    if not result.success:
        console.print(f"[red]{result.message}[/red]")
        raise typer.Exit(1)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.text, encoding="utf-8")
        console.print(f"[green]Judgment written to {output}[/green]")
    else:
        console.print(result.text)

    if docx:
        from ..reports import generate_judgment_docx
        generate_judgment_docx(result.text, docx, decision=result.decision)
        console.print(f"[green]DOCX written to {docx}[/green]")


@app.command()
def check():
    """
    Check that the text-generation service is ready.
    """
    from ..llm.ollama_client import check_ollama_ready

    is_ready, message = check_ollama_ready()
    if not is_ready:
        console.print(f"[red]{message}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]{message}[/green]")


@app.command()
def version():
    """Show version information."""
    from .. import __version__

    console.print(f"Moot Court v{__version__}")
    console.print("Simulated Courtroom Sessions")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
