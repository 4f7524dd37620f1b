"""
HRDC Assistant - terminal client for the HR consulting chatbot.

Signs users in against Supabase Auth, keeps their conversation history in
sync with the store, and relays each message to the AI responder webhook.
The Paystack checkout itself runs in the browser; this client records the
pending transaction and asks the trusted backend to verify it.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.logging import RichHandler
from rich.prompt import Confirm, Prompt

from core.app import ClientApp, build_app
from core.display import (
    console,
    render_cleanup_report,
    render_dashboard,
    render_identity,
    render_message,
    render_plan,
    render_thread,
    render_thread_list,
)
from shared.config import get_settings
from shared.exceptions import HRDCError

from modules.auth.models import ProfileUpdate, RegistrationRequest
from modules.usage.exceptions import UsageLimitReachedError

CHAT_HELP = "/new  /list  /open N  /delete  /clear  /quit"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def require_identity(app: ClientApp) -> bool:
    if app.sessions.current is None:
        console.print("[red]Error:[/red] Not signed in. Run the login command first.")
        return False
    return True


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------


async def cmd_register(app: ClientApp, args: argparse.Namespace) -> int:
    request = RegistrationRequest(
        email=args.email,
        password=Prompt.ask("Password", password=True),
        first_name=args.first_name or "",
        last_name=args.last_name or "",
        company=args.company or "",
        role=args.role or "",
    )
    await app.sessions.register(request)
    console.print("[green]Account created.[/green] Check your email to confirm it.")
    return 0


async def cmd_login(app: ClientApp, args: argparse.Namespace) -> int:
    password = Prompt.ask("Password", password=True)
    await app.sessions.login(args.email, password)
    await app.settle()
    render_identity(app.sessions.current)
    return 0


async def cmd_logout(app: ClientApp, args: argparse.Namespace) -> int:
    await app.sessions.logout()
    console.print("Signed out.")
    return 0


async def cmd_profile(app: ClientApp, args: argparse.Namespace) -> int:
    if not require_identity(app):
        return 1

    fields = {
        name: getattr(args, name)
        for name in ("first_name", "last_name", "company", "role")
        if getattr(args, name) is not None
    }
    if fields:
        await app.sessions.update_profile(ProfileUpdate(**fields))

    if args.password:
        await app.sessions.update_password(Prompt.ask("New password", password=True))
        console.print("[green]Password updated.[/green]")

    if args.delete:
        if not Confirm.ask("Delete your account and all conversations?", default=False):
            return 0
        report = await app.sessions.delete_account()
        render_cleanup_report(report)
        return 0 if report.ok else 1

    render_identity(app.sessions.current)
    return 0


async def cmd_reset_password(app: ClientApp, args: argparse.Namespace) -> int:
    await app.sessions.request_password_reset(args.email)
    console.print(f"If an account exists for {args.email}, a reset link is on its way.")
    return 0


async def cmd_history(app: ClientApp, args: argparse.Namespace) -> int:
    if not require_identity(app):
        return 1

    state = app.conversations.state.value
    if args.number is None:
        render_thread_list(state.threads, state.current_thread_id)
        return 0

    thread = _thread_at(app, args.number)
    if thread is None:
        return 1
    render_thread(thread)
    return 0


async def cmd_plan(app: ClientApp, args: argparse.Namespace) -> int:
    identity = app.sessions.current
    if identity is None:
        require_identity(app)
        return 1

    if args.upgrade:
        checkout = await app.billing.initialize_payment(identity, args.upgrade)
        console.print_json(data=checkout.model_dump())
        console.print("Complete the checkout with this reference, then run: plan --verify REF")
        return 0

    if args.verify:
        token = await app.access_token()
        if token is None:
            require_identity(app)
            return 1
        result = await app.billing.verify_payment(args.verify, token)
        style = "green" if result.success else "red"
        console.print(f"[{style}]{result.message}[/{style}]")
        return 0 if result.success else 1

    if args.admin:
        render_dashboard(await app.admin.get_dashboard(identity))
        return 0

    subscription = await app.billing.get_subscription(identity.id)
    usage = await app.usage.check_usage_limit(identity.id)
    render_plan(subscription, usage, app.usage.daily_limit)
    return 0


async def cmd_chat(app: ClientApp, args: argparse.Namespace) -> int:
    """Interactive chat loop."""
    if not require_identity(app):
        return 1

    console.print(f"[dim]{CHAT_HELP}[/dim]")
    while True:
        text = Prompt.ask("[bold]You[/bold]").strip()
        if not text:
            continue

        if text.startswith("/"):
            if not await _chat_command(app, text):
                return 0
            continue

        if not await _check_usage(app):
            continue

        try:
            with console.status("Thinking..."):
                reply = await app.conversations.send_message(text)
        except HRDCError as e:
            # The apology reply was already recorded in the thread
            logging.getLogger(__name__).debug(f"Send failed: {e}")
            thread = app.conversations.current_thread
            if thread and thread.messages:
                render_message(thread.messages[-1])
            continue
        render_message(reply)


async def _chat_command(app: ClientApp, text: str) -> bool:
    """Run one slash command. Returns False to leave the loop."""
    command, _, argument = text.partition(" ")
    state = app.conversations.state.value

    if command == "/quit":
        return False
    if command == "/new":
        await app.conversations.create_thread()
        console.print("[dim]Started a new conversation[/dim]")
    elif command == "/list":
        render_thread_list(state.threads, state.current_thread_id)
    elif command == "/open" and argument.strip().isdigit():
        thread = _thread_at(app, int(argument))
        if thread is not None:
            app.conversations.select_thread(thread.id)
            render_thread(thread)
    elif command == "/delete" and state.current_thread_id:
        await app.conversations.delete_thread(state.current_thread_id)
        console.print("[dim]Conversation deleted[/dim]")
    elif command == "/clear":
        if Confirm.ask("Delete all conversations?", default=False):
            await app.conversations.clear_all()
    else:
        console.print(f"[dim]{CHAT_HELP}[/dim]")
    return True


async def _check_usage(app: ClientApp) -> bool:
    """Count one query on the free plan. False when the daily limit is used up."""
    if not app.settings.enable_usage_limits:
        return True

    identity = app.sessions.current
    subscription = await app.billing.get_subscription(identity.id)
    if subscription.is_paid:
        return True

    try:
        await app.usage.consume_query(identity.id)
    except UsageLimitReachedError as e:
        console.print(f"[yellow]{e.message}.[/yellow] Upgrade with: plan --upgrade standard")
        return False
    return True


def _thread_at(app: ClientApp, number: int):
    threads = app.conversations.threads
    if not 1 <= number <= len(threads):
        console.print(f"[red]Error:[/red] No conversation #{number}")
        return None
    return threads[number - 1]


COMMANDS = {
    "register": cmd_register,
    "login": cmd_login,
    "logout": cmd_logout,
    "profile": cmd_profile,
    "reset-password": cmd_reset_password,
    "history": cmd_history,
    "plan": cmd_plan,
    "chat": cmd_chat,
}


async def run(args: argparse.Namespace) -> int:
    """Build the client, bootstrap the session and run one command."""
    app = await build_app()
    try:
        await app.start()
        return await COMMANDS[args.command](app, args)
    except HRDCError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        return 1
    finally:
        await app.aclose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="HR consulting assistant: chat with the HRDC AI agent from the terminal"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    register = sub.add_parser("register", help="Create an account")
    register.add_argument("email")
    register.add_argument("--first-name")
    register.add_argument("--last-name")
    register.add_argument("--company")
    register.add_argument("--role")

    login = sub.add_parser("login", help="Sign in")
    login.add_argument("email")

    sub.add_parser("logout", help="Sign out and forget the local session")

    profile = sub.add_parser("profile", help="Show or edit your profile")
    profile.add_argument("--first-name")
    profile.add_argument("--last-name")
    profile.add_argument("--company")
    profile.add_argument("--role")
    profile.add_argument("--password", action="store_true", help="Change your password")
    profile.add_argument("--delete", action="store_true", help="Delete your account")

    reset = sub.add_parser("reset-password", help="Email a password reset link")
    reset.add_argument("email")

    history = sub.add_parser("history", help="List conversations or show one")
    history.add_argument("number", nargs="?", type=int, help="Conversation number to show")

    plan = sub.add_parser("plan", help="Show your plan and usage")
    group = plan.add_mutually_exclusive_group()
    group.add_argument("--upgrade", metavar="PLAN", help="Start a checkout for a plan")
    group.add_argument("--verify", metavar="REF", help="Verify a completed checkout")
    group.add_argument("--admin", action="store_true", help="Show the admin dashboard")

    sub.add_parser("chat", help="Chat with the assistant")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging("DEBUG" if args.verbose else settings.log_level)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
