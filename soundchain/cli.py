"""CLI interface using Typer + Rich."""

import uuid

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from soundchain.agents.backends import SingleAgentBackend
from soundchain.agents.state import NegotiationContext, Stage
from soundchain.core import store
from soundchain.core.config import get_settings
from soundchain.core.errors import SoundChainError
from soundchain.core.log import setup_logging
from soundchain.core.orchestrator import BackendFlags, NegotiationOrchestrator
from soundchain.db.seed import seed as seed_db
from soundchain.db.session import get_session, init_db
from soundchain.tools.contract import LicenseContract, generate_contract
from soundchain.tools.pricing import calculate_license_price, format_money
from soundchain.tools.terms import NegotiationRequest

app = typer.Typer(help="SoundChain music license negotiator")
console = Console()


@app.callback()
def main(log_level: str = typer.Option(None, help="Log level (default: LOG_LEVEL)")):
    setup_logging(log_level or get_settings().log_level)


def _contract_panel(contract: LicenseContract) -> Panel:
    lines = [f"[bold]{contract.summary}[/bold]"]
    if contract.breakdown:
        lines.append(
            f"[dim]Formula price: {format_money(contract.breakdown.final_price)}[/dim]"
        )
    if contract.custom_terms:
        lines.append(f"Custom terms: {contract.custom_terms}")
    return Panel(
        "\n".join(lines),
        title="[bold green]License contract[/bold green]",
        border_style="green",
    )


@app.command()
def chat(
    track: str = typer.Option(..., help="Track id (see `seed`)"),
    conversation: str = typer.Option(None, help="Resume an existing conversation id"),
    groq: bool = typer.Option(False, help="Use the fast completion backend"),
    letta: bool = typer.Option(True, help="Use the agent-memory backend"),
):
    """Negotiate a license for a track as the buyer."""
    init_db()
    session = get_session()
    orchestrator = NegotiationOrchestrator()
    flags = BackendFlags(use_letta=letta, use_groq=groq)

    try:
        track_row = store.get_track(session, track)
        if not track_row:
            available = ", ".join(t.track_id for t in store.list_tracks(session))
            console.print(f"[red]Track '{track}' not found.[/red]")
            console.print(f"[dim]Available: {available or 'none, run `seed` first'}[/dim]")
            raise typer.Exit(code=1)

        conv = store.get_or_create_conversation(
            session, conversation or str(uuid.uuid4()), track_row
        )
        session.commit()
        state = store.load_conversation_state(session, conv)
        context = NegotiationContext.from_request(
            conv.conversation_id,
            track_row.track_id,
            store.track_base_terms(track_row),
            {"title": track_row.title, "artist": track_row.artist},
        )

        console.print(
            Panel(
                f"[bold green]{track_row.title}[/bold green] by {track_row.artist}\n"
                f"Conversation: {conv.conversation_id} | "
                f"Backend: {orchestrator.select_backend(flags)}",
                title="SoundChain",
            )
        )
        if state.history:
            console.print(f"[dim]Resumed with {len(state.history)} messages.[/dim]")
        console.print("[dim]Type your message. Ctrl+C or 'exit' to quit.[/dim]\n")

        while True:
            try:
                user_input = Prompt.ask("[bold cyan]You[/bold cyan]")
            except (KeyboardInterrupt, EOFError):
                console.print("\n[dim]Closing...[/dim]")
                break

            if user_input.strip().lower() in ("exit", "quit", "thoát"):
                break
            if not user_input.strip():
                continue

            try:
                with console.status("[bold yellow]Negotiating...[/bold yellow]"):
                    result = orchestrator.negotiate(context, state, user_input, flags)
            except SoundChainError as e:
                console.print(f"[red]{e.message}[/red]")
                continue

            state = result.conversation
            store.save_message(session, conv.id, "user", user_input)
            store.save_message(session, conv.id, "assistant", result.message)
            store.update_conversation_state(session, conv, state)
            if result.contract:
                store.save_license(session, conv.id, result.contract)
            session.commit()

            console.print(
                Panel(
                    result.message,
                    title=f"[bold magenta]Producer[/bold magenta] [dim]{state.stage.value}[/dim]",
                    border_style="magenta",
                )
            )
            if result.contract:
                console.print(_contract_panel(result.contract))
            if state.stage == Stage.FINALIZING:
                console.print("[bold green]Deal finalized.[/bold green]")
                break
    finally:
        session.close()


@app.command()
def quote(
    base_price: float = typer.Option(..., help="Producer minimum price in USD"),
    right: list[str] = typer.Option([], "--right", "-r", help="Usage right (repeatable)"),
    exclusive: bool = typer.Option(False, help="Exclusive license"),
    territory: str = typer.Option("worldwide", help="regional, national or worldwide"),
    duration: int = typer.Option(None, help="Duration in months (omit for perpetual)"),
):
    """Price a license with the pricing formula."""
    request = NegotiationRequest.from_arguments(
        {
            "usageRights": right,
            "exclusivity": exclusive,
            "territory": territory,
            "duration": duration,
        }
    )
    breakdown = calculate_license_price(base_price, request)

    table = Table(title="License quote")
    table.add_column("Factor")
    table.add_column("Value", justify="right")
    table.add_row("Base price", format_money(breakdown.base_price))
    table.add_row("Usage multiplier", f"{breakdown.usage_multiplier:g}x")
    table.add_row("Exclusivity", f"{breakdown.exclusivity_multiplier:g}x")
    table.add_row("Territory", f"{breakdown.territory_multiplier:g}x")
    table.add_row("Duration discount", f"{breakdown.duration_discount:g}x")
    table.add_row("[bold]Final price[/bold]", f"[bold]{format_money(breakdown.final_price)}[/bold]")
    console.print(table)
    console.print(f"[dim]{breakdown.reasoning}[/dim]")


@app.command()
def terms(conversation: str = typer.Argument(..., help="Conversation id")):
    """Extract the agreed terms of a stored conversation and build a contract."""
    init_db()
    session = get_session()
    try:
        conv = store.get_conversation(session, conversation)
        if not conv:
            console.print(f"[red]Conversation '{conversation}' not found.[/red]")
            raise typer.Exit(code=1)

        history = store.get_conversation_history(session, conv.id)
        try:
            with console.status("[bold yellow]Extracting terms...[/bold yellow]"):
                extracted = SingleAgentBackend(get_settings()).extract_final_terms(history)
        except SoundChainError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(code=1)

        if not extracted:
            console.print("[yellow]No agreed terms found in this conversation.[/yellow]")
            return

        contract = generate_contract(extracted, base_price=conv.track.min_price)
        console.print(_contract_panel(contract))
        if extracted.get("agreedTerms"):
            console.print(f"[dim]{extracted['agreedTerms']}[/dim]")
    finally:
        session.close()


@app.command()
def seed():
    """Populate the database with demo tracks."""
    init_db()
    count = seed_db()
    if count:
        console.print(f"[green]{count} tracks inserted.[/green]")
    else:
        console.print("[yellow]Database already has tracks. Nothing inserted.[/yellow]")


@app.command(name="list-conversations")
def list_conversations():
    """List stored conversations."""
    init_db()
    session = get_session()
    try:
        convs = store.list_conversations(session)
        if not convs:
            console.print("[dim]No conversations found.[/dim]")
            return

        for c in convs:
            console.print(
                f"[bold]{c.conversation_id}[/bold] | Track: {c.track.track_id} | "
                f"Stage: {c.stage} | Status: {c.status} | Created: {c.created_at}"
            )
    finally:
        session.close()


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
):
    """Run the negotiation HTTP API."""
    import uvicorn

    uvicorn.run("soundchain.api.app:create_app", factory=True, host=host, port=port)
