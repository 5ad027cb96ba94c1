"""Interactive CLI application."""
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from history_review.backup import export_to_file, import_from_file
from history_review.badges import check_badges
from history_review.catalog import load_catalog
from history_review.dashboard import (
    compose_teacher_email, format_study_time, get_analytics, get_progress_summary,
    get_strengths, get_weaknesses, mailto_link, streak_flames,
)
from history_review.db import DEFAULT_DB_PATH
from history_review.flashcards import get_deck, get_unknown_terms, mark_known, reset_vocab_progress
from history_review.mastery import mastery_class
from history_review.quiz import (
    REVIEW_NOTE_SCORE, get_practice_set, grade_test, missed_questions,
    needs_note_review, record_practice_answer,
)
from history_review.review import build_focused_session, get_weak_topics
from history_review.short_answer import (
    get_response, is_substantial_attempt, next_starter, save_response,
)
from history_review.store import ProgressStore
from history_review.sync import CloudSyncError, init_sync, sign_in_with_google
from history_review.timeline import grade_timeline, shuffled_events
from history_review.timer import SessionTimer, TimerState, format_elapsed

console = Console()

EXIT_WORDS = ("q", "menu")
OPTION_KEYS = ["1", "2", "3", "4"]
CLASS_COLORS = {"high": "green", "medium": "yellow", "low": "red"}


class SessionExitRequested(Exception):
    """The user asked to leave the current section."""


def session_prompt(prompt: str, choices: list | None = None, default: str = "") -> str:
    """Ask until a valid answer is given; 'q' or 'menu' leaves the section."""
    hint = f" [dim]({'/'.join(choices)}, q)[/dim]" if choices else ""
    while True:
        answer = Prompt.ask(prompt + hint, default=default, show_default=False).strip()
        if answer.lower() in EXIT_WORDS:
            raise SessionExitRequested()
        if choices and answer.lower() not in choices:
            console.print(f"[red]Please enter one of: {', '.join(choices)}[/red]")
            continue
        return answer.lower() if choices else answer


def session_int_prompt(prompt: str, choices: list) -> int:
    return int(session_prompt(prompt, choices=choices))


def show_welcome():
    console.print(Panel(
        "[bold]Revolutionary War Review[/bold]\n[dim]Causes of the Revolution, 1763-1776[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("vocab", "Vocabulary flashcards"),
        ("practice", "Practice questions"),
        ("test", "Full practice test"),
        ("timeline", "Timeline challenge"),
        ("short", "Short-answer writing"),
        ("focused", "Focused review of weak areas"),
        ("progress", "Progress + analytics dashboard"),
        ("badges", "Achievements"),
        ("email", "Email my teacher"),
        ("export", "Back up progress to a file"),
        ("import", "Restore progress from a file"),
        ("signin", "Sign in to sync progress"),
        ("reset", "Erase all progress"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<12}[/cyan] {desc}")


def announce_badge(badge):
    console.print(Panel(
        f"[bold]{badge.icon} {badge.name}[/bold]\n{badge.description}",
        title="Achievement Unlocked!", border_style="magenta",
    ))


def check_progress(store, catalog) -> list:
    return check_badges(store, catalog, notify=announce_badge)


def pause_session(timer: SessionTimer):
    if timer.toggle() is not TimerState.PAUSED:
        return
    Prompt.ask(f"[yellow]Paused at {timer.display()}[/yellow] [dim]Press Enter to resume[/dim]", default="", show_default=False)
    timer.toggle()


def run_timed_section(store, catalog, timer: SessionTimer, name: str, section) -> None:
    """Run ``section`` while the study timer runs; the time is banked on exit."""
    timer.start(name)
    try:
        section(store, catalog, timer)
    except SessionExitRequested:
        pass
    finally:
        elapsed = timer.stop()
        check_progress(store, catalog)
        console.print(
            f"[dim]Session time {format_elapsed(elapsed)} | "
            f"Total: {format_study_time(store.load_total_study_time())}[/dim]"
        )


def print_question(question, number: str):
    console.print(f"\n[bold]{number}[/bold] {question.stem}\n")
    for i, option in enumerate(question.options, 1):
        console.print(f"  [cyan]{i})[/cyan] {option}")


def run_vocab(store, catalog, timer):
    known = catalog.known_terms(store.load_vocab_progress())
    shuffle = Confirm.ask("Shuffle the cards?", default=False)
    deck = get_deck(catalog, shuffle=shuffle)
    console.print(f"\n[bold]Vocabulary[/bold] - {len(known)}/{catalog.vocab_count} known\n")
    for i, card in enumerate(deck, 1):
        status = " [green](known)[/green]" if card.term in known else ""
        console.print(Panel(f"[bold]{card.term}[/bold]{status}\n[dim]{card.category}[/dim]", title=f"Card {i}/{len(deck)}", border_style="cyan"))
        while session_prompt("[dim]Enter to flip, p to pause[/dim]", choices=["", "p"]) == "p":
            pause_session(timer)
        console.print(Panel(f"{card.definition}\n\n[dim]Example:[/dim] {card.example}", border_style="green"))
        action = session_prompt("k = I know this, Enter = next", choices=["", "k", "p"])
        if action == "p":
            pause_session(timer)
        elif action == "k" and mark_known(store, catalog, card.term):
            known.add(card.term)
            console.print(f"[green]Marked known ({len(known)}/{catalog.vocab_count})[/green]")
            check_progress(store, catalog)


def run_practice(store, catalog, timer):
    questions = get_practice_set(catalog, count=10)
    correct = 0
    console.print(f"\n[bold]Practice[/bold] - {len(questions)} questions\n")
    for i, q in enumerate(questions, 1):
        print_question(q, f"Q{i}/{len(questions)}.")
        answer = session_int_prompt("\nYour answer", choices=OPTION_KEYS) - 1
        if record_practice_answer(store, catalog, q.id, answer):
            console.print("[green]Yes! You got it![/green]")
            correct += 1
        else:
            console.print(f"[red]Not quite.[/red] Answer: [green]{q.options[q.correct]}[/green]")
            if needs_note_review(store, q.id):
                console.print("[yellow]You've missed this one more than once. Update your notes on it![/yellow]")
        console.print(f"[dim]{q.explanation}\nTopic: {q.topic}[/dim]")
        check_progress(store, catalog)
    console.print(f"\n[bold]Practice set complete: {correct}/{len(questions)}[/bold]")


def run_test(store, catalog, timer):
    answers = {}
    total = len(catalog.questions)
    console.print(f"\n[bold]Practice Test[/bold] - {total} questions (s = skip)\n")
    for i, q in enumerate(catalog.questions, 1):
        print_question(q, f"Question {i}.")
        answer = session_prompt("\nYour answer", choices=OPTION_KEYS + ["s"])
        if answer != "s":
            answers[q.id] = int(answer) - 1
    if len(answers) < total and not Confirm.ask(f"You've only answered {len(answers)} of {total}. Submit anyway?"):
        return
    result = grade_test(store, catalog, answers)
    color = "green" if result.score >= 80 else "yellow"
    console.print(Panel(f"[bold]You scored {result.score}%[/bold]", title="Test Complete!", border_style=color))

    table = Table(title="How You Did On Each Topic")
    table.add_column("Topic", style="cyan")
    table.add_column("Score", justify="right")
    for topic, s in result.topic_scores.items():
        table.add_row(topic, f"{s.correct}/{s.total}")
    console.print(table)

    missed = missed_questions(catalog, answers)
    if missed:
        console.print("\n[bold]Questions to Study Again:[/bold]")
        for q in missed:
            console.print(f"  • {q.stem}\n    [green]{q.options[q.correct]}[/green] [dim]({q.topic})[/dim]")
    if result.score < REVIEW_NOTE_SCORE:
        console.print("\n[yellow]Time to review! Write the correct answers and explanations for the questions you missed in your notebook.[/yellow]")
    check_progress(store, catalog)


def run_timeline(store, catalog, timer):
    mode = session_prompt("Mode", choices=["easy", "hard"], default="easy")
    events = shuffled_events(catalog)
    letters = [chr(ord("a") + i) for i in range(len(events))]
    by_letter = dict(zip(letters, events))
    console.print("\n[bold]Put these events in chronological order:[/bold]")
    for letter, event in by_letter.items():
        year = f" ({event.year})" if mode == "easy" else ""
        console.print(f"  [cyan]{letter})[/cyan] {event.title}{year}")
    placements = {}
    for slot in range(1, len(events) + 1):
        remaining = [l for l in letters if by_letter[l].id not in placements.values()]
        letter = session_prompt(f"Position {slot}", choices=remaining)
        placements[slot] = by_letter[letter].id
    grade = grade_timeline(store, catalog, placements)
    console.print(f"\n[bold]Score: {grade.score} out of {len(grade.results)} correct![/bold]")
    if grade.is_perfect:
        console.print("[green]Perfect! You mastered the timeline![/green]")
    else:
        titles = {e.id: e.title for e in catalog.timeline_events}
        for r in grade.results:
            if not r.is_correct:
                placed = titles.get(r.placed_event_id, "(empty)")
                console.print(f"  [yellow]Position {r.slot} should be [bold]{titles[r.correct_event_id]}[/bold], not {placed}[/yellow]")
    p = grade.progress
    console.print(f"[dim]Best: {p.best_score}/{len(grade.results)} | Perfect scores: {p.perfect_count} | Attempts: {p.attempts}[/dim]")
    check_progress(store, catalog)


def run_short_answer(store, catalog, timer):
    for prompt in catalog.short_answers:
        console.print(Panel(f"{prompt.prompt}\n\n[dim]Topic: {prompt.topic}[/dim]", title=f"Question {prompt.id + 1} of {len(catalog.short_answers)}"))
        revealed = 0
        while True:
            saved = get_response(store, prompt.id)
            if saved:
                console.print(f"[dim]Your answer:[/dim] {saved}")
            action = session_prompt("w = write, s = sentence starter, e = example answer, p = pause, n = next", choices=["w", "s", "e", "p", "n"])
            if action == "w":
                save_response(store, prompt.id, Prompt.ask("Write your answer (4-5 sentences)"))
            elif action == "s":
                starter = next_starter(prompt, revealed)
                if starter is None:
                    console.print("[dim]All starters shown.[/dim]")
                else:
                    revealed += 1
                    console.print(f"  • {starter}")
            elif action == "e":
                if not is_substantial_attempt(saved):
                    console.print("[yellow]Challenge yourself first! You'll learn more if you write your own answer before viewing the example.[/yellow]")
                console.print(Panel(prompt.exemplar, title="Example Answer", border_style="green"))
                console.print("[bold]Did you:[/bold]")
                for item in prompt.rubric:
                    console.print(f"  ☐ {item}")
            elif action == "p":
                pause_session(timer)
            else:
                break


def run_focused(store, catalog, timer):
    practice = store.load_practice_progress()
    unknown = get_unknown_terms(store, catalog)
    weak = get_weak_topics(practice, catalog)
    console.print("\n[bold]Your Weak Areas:[/bold]")
    if unknown:
        console.print(f"  Vocabulary: {len(unknown)} terms to master")
    for w in weak:
        console.print(f"  [red]{w['topic']}: {w['percent']}% ({w['correct']}/{w['total']})[/red]")

    session = build_focused_session(store, catalog)
    if not len(session):
        console.print("[green]Great work! You have no weak areas to focus on. Try taking a full practice test![/green]")
        return
    for i, (kind, item) in enumerate(session.items(), 1):
        console.print(f"\n[dim]{i - 1}/{len(session)} completed[/dim]")
        if kind == "vocab":
            console.print(Panel(f"[bold]{item.term}[/bold]\n[dim]{item.category}[/dim]", border_style="cyan"))
            session_prompt("[dim]Enter to see the definition[/dim]", choices=[""])
            console.print(f"{item.definition}\n[dim]Example:[/dim] {item.example}")
            if session_prompt("k = I know this now, Enter = skip", choices=["", "k"]) == "k":
                mark_known(store, catalog, item.term)
                check_progress(store, catalog)
        else:
            print_question(item, f"Question from {item.topic}:")
            answer = session_int_prompt("\nYour answer", choices=OPTION_KEYS) - 1
            if answer == item.correct:
                console.print("[green]Correct![/green]")
            else:
                console.print(f"[red]Not quite.[/red] Answer: [green]{item.options[item.correct]}[/green]")
    console.print("\n[bold green]Focused session complete![/bold green]")
    check_progress(store, catalog)


def print_breakdown(title: str, heading: str, rows: list, label_key: str, count_key: str):
    if not rows:
        return
    table = Table(title=title)
    table.add_column(heading, style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("%", justify="right")
    for row in rows:
        color = CLASS_COLORS[row["class"]]
        table.add_row(row[label_key], f"{row[count_key]}/{row['total']}", f"[{color}]{row['percent']}%[/{color}]")
    console.print(table)


def cmd_progress(store, catalog):
    analytics = get_analytics(store, catalog)
    summary = analytics["summary"]
    color = CLASS_COLORS[mastery_class(summary["overall"])]
    console.print(Panel(
        f"[bold]{summary['label']} Level[/bold] ([{color}]{summary['overall']:.0f}% Overall[/{color}])",
        title="Your Progress", border_style="blue",
    ))
    table = Table()
    table.add_column("Measure", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Vocabulary Mastery", f"{summary['vocab_known']}/{summary['vocab_total']} ({summary['vocab_mastery']}%)")
    table.add_row("Practice Accuracy", f"{summary['practice_correct']}/{summary['practice_attempted']} ({summary['practice_accuracy']}%)")
    table.add_row("Practice Tests Taken", str(summary["tests_taken"]))
    if summary["tests_taken"]:
        table.add_row("Test Average", f"{summary['test_average']}%")
    table.add_row("Total Study Time", summary["study_time"])
    console.print(table)

    if summary["streak_current"]:
        console.print(f"\n  {streak_flames(summary['streak_current'])} [bold]{summary['streak_current']}[/bold] Day Study Streak! [dim](Longest: {summary['streak_longest']} days)[/dim]")
    if summary["recent_badges"]:
        console.print("\n[bold]Recent Achievements:[/bold] " + "  ".join(f"{b.icon} {b.name}" for b in summary["recent_badges"]))

    weaknesses = get_weaknesses(store, catalog)
    if weaknesses["unknown_vocab"] or weaknesses["wrong_topics"]:
        console.print("\n[bold]What You Should Study More:[/bold]")
        unknown = weaknesses["unknown_vocab"]
        for v in unknown[:5]:
            console.print(f"  {v.term} [dim]({v.category})[/dim]")
        if len(unknown) > 5:
            console.print(f"  [dim]...and {len(unknown) - 5} more[/dim]")
        for topic, count in weaknesses["wrong_topics"]:
            console.print(f"  {topic} [red]{count} wrong[/red]")

    strengths = get_strengths(store, catalog)
    if strengths["categories"] or strengths["last_test_topics"]:
        console.print("\n[bold]What You Already Know Really Well:[/bold]")
        for c in strengths["categories"]:
            console.print(f"  {c['category']} [{CLASS_COLORS[c['class']]}]{c['known']}/{c['total']} ({c['percent']}%)[/{CLASS_COLORS[c['class']]}]")
        for t in strengths["last_test_topics"]:
            console.print(f"  {t['topic']} [{CLASS_COLORS[t['class']]}]{t['correct']}/{t['total']} ({t['percent']}%)[/{CLASS_COLORS[t['class']]}]")

    if analytics["challenging_questions"]:
        console.print("\n[bold]Most Challenging Questions:[/bold]")
        for item in analytics["challenging_questions"]:
            console.print(f"  [red]{item['wrong_count']}x[/red] {item['question'].stem}")

    print_breakdown("Vocabulary by Category", "Category", analytics["categories"], "category", "known")
    print_breakdown("Practice by Topic", "Topic", [t for t in analytics["topics"] if t["total"]], "topic", "correct")

    if analytics["test_history"]:
        tests = Table(title="Practice Test History")
        tests.add_column("#", justify="right")
        tests.add_column("Date")
        tests.add_column("Score", justify="right")
        for i, result in enumerate(analytics["test_history"], 1):
            color = CLASS_COLORS[mastery_class(result.score)]
            tests.add_row(str(i), result.date[:10], f"[{color}]{result.score}%[/{color}]")
        console.print(tests)

    timeline = analytics["timeline"]
    if timeline.attempts:
        console.print(
            f"\n[bold]Timeline:[/bold] best {timeline.best_score}/{len(catalog.timeline_events)}, "
            f"{timeline.perfect_count} perfect in {timeline.attempts} attempts"
        )

    if summary["minutes_until_email"]:
        console.print(f"\n[dim]Study for {summary['minutes_until_email']} more minutes to unlock 'Email My Teacher'.[/dim]")


def cmd_badges(store, catalog):
    earned = set(store.load_earned_badges())
    table = Table(title="Achievements")
    table.add_column("")
    table.add_column("Badge")
    table.add_column("How to earn")
    for badge in catalog.badges:
        if badge.id in earned:
            table.add_row(badge.icon, f"[bold]{badge.name}[/bold]", badge.description)
        else:
            table.add_row("🔒", f"[dim]{badge.name}[/dim]", f"[dim]{badge.description}[/dim]")
    console.print(table)


def cmd_email(store, catalog):
    summary = get_progress_summary(store, catalog)
    if not summary["can_email_teacher"]:
        console.print("[yellow]Reach 70% proficiency and study for at least 1 hour to email your teacher.[/yellow]")
        return
    name = Prompt.ask("Your name")
    feedback = Prompt.ask("Anything to tell your teacher?", default="")
    address = Prompt.ask("Teacher's email address")
    subject, body = compose_teacher_email(summary, name, feedback)
    console.print(Panel(body, title=subject))
    console.print(f"\nOpen this link to send it:\n{mailto_link(address, subject, body)}")


def cmd_export(store, catalog):
    file_path = Prompt.ask("Save backup to", default="history_review_backup.json")
    result = export_to_file(store, file_path)
    console.print(f"[green]Saved {result['fields']} progress fields to {result['filename']}[/green]")


def cmd_import(store, catalog):
    file_path = Prompt.ask("Backup file path")
    if import_from_file(store, file_path):
        console.print("[green]Progress restored![/green]")
        check_progress(store, catalog)
    else:
        console.print(f"[red]Could not import {file_path}: not a valid progress backup.[/red]")


def cmd_signin(store, catalog):
    try:
        sign_in_with_google()
    except CloudSyncError as e:
        console.print(f"[yellow]{e}. Your progress is saved on this computer.[/yellow]")


def cmd_reset(store, catalog):
    scope = Prompt.ask("Reset what?", choices=["vocab", "all", "cancel"], default="cancel")
    if scope == "vocab" and Confirm.ask("Forget every vocabulary word you marked as known?"):
        reset_vocab_progress(store)
        console.print("[green]Vocabulary progress reset.[/green]")
    elif scope == "all" and Confirm.ask("[red]Erase ALL progress, streaks and badges?[/red]"):
        store.clear_all()
        console.print("[green]All progress erased.[/green]")


TIMED_SECTIONS = {
    "vocab": run_vocab,
    "practice": run_practice,
    "test": run_test,
    "timeline": run_timeline,
    "short": run_short_answer,
    "focused": run_focused,
}

COMMANDS = {
    "progress": cmd_progress,
    "badges": cmd_badges,
    "email": cmd_email,
    "export": cmd_export,
    "import": cmd_import,
    "signin": cmd_signin,
    "reset": cmd_reset,
}


def main():
    logging.basicConfig(
        level=logging.WARNING, format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    store = ProgressStore(DEFAULT_DB_PATH)
    catalog = load_catalog()
    init_sync()
    timer = SessionTimer(store)

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="vocab").strip().lower()
        try:
            if choice in TIMED_SECTIONS:
                run_timed_section(store, catalog, timer, choice, TIMED_SECTIONS[choice])
            elif choice in COMMANDS:
                COMMANDS[choice](store, catalog)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck on your test![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
