#!/usr/bin/env python
"""
Command-line client for the authentication portal.

Usage:
    portal whoami
    portal --email admin@example.com users --search jane
    portal route /admin --email mod@example.com
    portal forgot-password jane@example.com

The backend session cookie lives only as long as the command, so
commands that need a login take --email and prompt for the password
(and the one-time code when two-factor authentication is on).
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.prompt import Prompt

from app.container import ServiceContainer
from app.display import ConsoleNotifier, console, render_directory, render_navigation, render_session
from modules.login import LoginOutcome
from shared.config import get_settings

logger = logging.getLogger(__name__)

MAX_OTP_ATTEMPTS = 3


async def sign_in(container: ServiceContainer, email: str) -> bool:
    """Interactive login, including the two-factor step when required."""
    flow = container.login_flow
    password = Prompt.ask("Password", password=True, console=console)
    outcome = await flow.submit_credentials(email, password)

    if outcome == LoginOutcome.EMAIL_UNVERIFIED:
        if Prompt.ask("Resend verification email?", choices=["y", "n"], default="n") == "y":
            await flow.resend_verification()
        return False

    if outcome == LoginOutcome.STEP_UP_REQUIRED:
        console.print(f"[dim]Enter the code sent to {flow.masked_email}[/dim]")
        for _ in range(MAX_OTP_ATTEMPTS):
            code = Prompt.ask("6-digit code", console=console)
            if await flow.submit_otp(code.strip()):
                break
        else:
            flow.back_to_login()

    return container.session.session.is_authenticated


async def _establish(container: ServiceContainer, email: Optional[str]) -> bool:
    session = await container.session.bootstrap()
    if email:
        return await sign_in(container, email)
    return session.is_authenticated


async def cmd_whoami(container: ServiceContainer, args: argparse.Namespace) -> int:
    await _establish(container, args.email)
    console.print(render_session(container.session.session))
    return 0


async def cmd_route(container: ServiceContainer, args: argparse.Namespace) -> int:
    await _establish(container, args.email)
    for path in args.paths:
        console.print(render_navigation(container.navigator.resolve(path)))
    return 0


async def cmd_users(container: ServiceContainer, args: argparse.Namespace) -> int:
    if not await _establish(container, args.email):
        console.print("[red]Error:[/red] Login required")
        return 1

    result = container.navigator.resolve("/admin")
    if result.decision.redirect_to:
        console.print("[red]Error:[/red] Admin or moderator role required")
        return 1

    directory = container.directory
    page = await directory.fetch(page=args.page, search=args.search or "")
    if page is None:
        return 1
    console.print(render_directory(page, directory.stats))
    return 0


async def cmd_forgot_password(container: ServiceContainer, args: argparse.Namespace) -> int:
    await container.account.forgot_password(args.address)
    console.print("If that email exists, a reset link was sent.")
    return 0


COMMANDS = {
    "whoami": cmd_whoami,
    "route": cmd_route,
    "users": cmd_users,
    "forgot-password": cmd_forgot_password,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="portal", description="Authentication portal client")
    parser.add_argument("--email", help="Log in with this email before running the command")
    parser.add_argument("--api-url", help="Backend API base URL (default: API_BASE_URL)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("whoami", help="Show the current session")

    route = sub.add_parser("route", help="Show where navigating to a path leads")
    route.add_argument("paths", nargs="+", help="Paths such as /admin or /login")

    users = sub.add_parser("users", help="List users (admin or moderator)")
    users.add_argument("--page", "-p", type=int, default=1, help="Page number (default: 1)")
    users.add_argument("--search", "-s", help="Filter by name or email")

    forgot = sub.add_parser("forgot-password", help="Request a password reset link")
    forgot.add_argument("address", help="Account email")
    return parser


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.api_url:
        settings = settings.model_copy(update={"api_base_url": args.api_url})

    container = ServiceContainer(settings=settings, notifier=ConsoleNotifier())
    try:
        return await COMMANDS[args.command](container, args)
    finally:
        await container.aclose()


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose or settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted[/dim]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
