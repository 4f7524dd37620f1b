"""Rich terminal rendering for identities, threads and plans."""

from typing import Optional, Sequence

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shared.cleanup import CleanupReport
from modules.admin.models import AdminDashboard
from modules.auth.models import Identity
from modules.billing.models import SUBSCRIPTION_PLANS, SubscriptionStatus
from modules.chat.models import Message, Sender, Thread
from modules.usage.models import UsageStatus

console = Console()

MAX_PREVIEW = 60


def preview(text: str, limit: int = MAX_PREVIEW) -> str:
    """Single-line preview of a message.

    Collapses whitespace and truncates to ``limit`` characters.
    """
    flat = " ".join(text.split())
    if len(flat) > limit:
        return flat[: limit - 3] + "..."
    return flat


def render_identity(identity: Optional[Identity]) -> None:
    if identity is None:
        console.print("[dim]Not signed in[/dim]")
        return

    table = Table(show_header=False, box=None)
    table.add_row("Name", identity.full_name or "-")
    table.add_row("Email", identity.email)
    table.add_row("Company", identity.company or "-")
    table.add_row("Role", identity.role or "-")
    if identity.is_admin:
        table.add_row("Admin", "yes")
    console.print(Panel(table, title="Profile", border_style="blue"))


def render_thread_list(threads: Sequence[Thread], current_id: Optional[str] = None) -> None:
    """Print the thread list, numbered from 1 for ``/open N``."""
    if not threads:
        console.print("[dim]No conversations yet[/dim]")
        return

    table = Table(title="Conversations")
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Messages", justify="right")
    table.add_column("Updated")
    for i, thread in enumerate(threads, start=1):
        marker = "*" if thread.id == current_id else ""
        table.add_row(
            f"{marker}{i}",
            thread.title,
            str(len(thread.messages)),
            thread.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


def render_message(message: Message) -> None:
    if message.sender == Sender.USER:
        console.print(Text(f"You: {message.content}", style="bold"))
        return

    style = "red" if message.is_error else "green"
    console.print(Panel(Markdown(message.content), title="Assistant", border_style=style))


def render_thread(thread: Thread) -> None:
    console.rule(thread.title)
    for message in thread.messages:
        render_message(message)


def render_plan(subscription: SubscriptionStatus, usage: UsageStatus, daily_limit: int) -> None:
    """Print the active plan and, on the free plan, today's remaining queries."""
    plan = SUBSCRIPTION_PLANS[subscription.plan_type]
    lines = [f"[bold]{plan.name}[/bold] ({subscription.status})"]
    if subscription.expires_at:
        lines.append(f"Renews/expires: {subscription.expires_at:%Y-%m-%d}")
    if not subscription.is_paid:
        lines.append(f"Queries today: {usage.queries_today}/{daily_limit}")
        lines.append(f"Remaining: {usage.remaining(daily_limit)}")
    lines.extend(f"- {feature}" for feature in plan.features)
    console.print(Panel("\n".join(lines), title="Plan", border_style="magenta"))


def render_cleanup_report(report: CleanupReport) -> None:
    for step in report.completed:
        console.print(f"[green]done[/green] {step}")
    for warning in report.warnings:
        console.print(f"[yellow]warning[/yellow] {warning}")


def render_dashboard(dashboard: AdminDashboard) -> None:
    stats = dashboard.stats
    console.print(
        f"Users: {stats.total_users}  Conversations: {stats.total_conversations}  "
        f"Messages: {stats.total_messages}  New this month: {stats.users_this_month}"
    )
    table = Table(title="Recent users")
    table.add_column("Email")
    table.add_column("Name")
    table.add_column("Company")
    for user in dashboard.recent_users:
        name = " ".join(p for p in (user.first_name, user.last_name) if p)
        table.add_row(user.email or "", name, user.company or "")
    console.print(table)
