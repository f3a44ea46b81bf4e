"""
Interactive quiz loop and result rendering for the terminal client.

The runner only translates key presses into QuizSessionManager calls. It
applies one UI policy of its own: "next" is refused until the current
question has an answer.
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from src.progress import TopicCoverageState
from src.quiz import CHOICE_KEYS, QuizSessionManager, QuizState, ReconciledFeedback, ScoreResult

NAV_KEYS = ("n", "p", "q")
PROMPT_CHOICES = [k.lower() for k in CHOICE_KEYS] + list(CHOICE_KEYS) + list(NAV_KEYS)


class QuizRunner:
    """Drives a started QuizSessionManager from keyboard input."""

    def __init__(self, manager: QuizSessionManager, console: Console):
        self.manager = manager
        self.console = console

    def render_question(self) -> None:
        session = self.manager.session
        question = session.current_question
        total = len(session.questions)

        body = Text()
        body.append(f"{question.question}\n\n", style="bold")
        for key, option in question.options.items():
            selected = session.current_answer == key
            marker = ">" if selected else " "
            body.append(f"{marker} {key}. {option}\n", style="bold green" if selected else "")

        self.console.print(
            Panel(
                body,
                title=f"Question {session.current_index + 1}/{total}",
                subtitle=question.topic,
                box=box.ROUNDED,
                border_style="cyan",
            )
        )

    def run(self) -> ScoreResult | None:
        """
        Run until the quiz completes.

        Returns:
            The score, or None if the user quit early
        """
        while self.manager.state is QuizState.IN_PROGRESS:
            self.render_question()
            session = self.manager.session
            finish = "finish" if session.is_last_question else "next"
            action = Prompt.ask(
                f"[dim]a-d answer, (n) {finish}, (p) previous, (q) quit[/dim]",
                choices=PROMPT_CHOICES,
                show_choices=False,
                console=self.console,
            ).strip()

            if action.upper() in CHOICE_KEYS:
                self.manager.select_answer(action.upper())
            elif action == "n":
                if session.current_answer is None:
                    self.console.print("[yellow]Select an answer before moving on.[/yellow]")
                    continue
                self.manager.advance()
            elif action == "p":
                self.manager.retreat()
            elif action == "q":
                return None

        return self.manager.result()


def render_score(result: ScoreResult, console: Console) -> None:
    table = Table(title="Quiz Results", box=box.SIMPLE_HEAVY)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Topic")
    table.add_column("Yours", justify="center")
    table.add_column("Correct", justify="center")
    table.add_column("", justify="center")

    for item in result.per_question:
        table.add_row(
            str(item.index + 1),
            item.topic,
            item.user_answer or "-",
            item.correct_answer,
            "[green]✓[/green]" if item.is_correct else "[red]✗[/red]",
        )

    console.print(table)
    console.print(
        f"[bold]Score:[/bold] {result.correct}/{result.total} ({result.display_percentage}%)"
    )

    for item in result.per_question:
        if not item.is_correct:
            console.print(f"[dim]Q{item.index + 1}:[/dim] {item.explanation}")


def render_feedback(feedback: ReconciledFeedback, console: Console) -> None:
    for item, explanation in zip(feedback.result.per_question, feedback.explanations):
        style = "green" if item.is_correct else "red"
        console.print(f"[{style}]Q{item.index + 1}[/{style}] {explanation}")
    if feedback.summary:
        console.print(Panel(feedback.summary, title="Feedback", border_style="magenta"))
    if not feedback.verified:
        console.print("[yellow]The assistant's score disagreed with the answer key; local score shown.[/yellow]")


def render_progress(document: str, state: TopicCoverageState, console: Console) -> None:
    if not state.topics:
        console.print(f"[dim]No topics recorded for {document}.[/dim]")
        return

    table = Table(title=f"Progress: {document}", box=box.SIMPLE)
    table.add_column("", justify="center")
    table.add_column("Topic")
    for topic in state.topics:
        mark = "[green]●[/green]" if state.is_covered(topic) else "[dim]○[/dim]"
        table.add_row(mark, topic)

    console.print(table)
    console.print(
        f"Progress: {state.percentage}% ({state.covered_count} / {len(state.topics)} covered)"
    )
