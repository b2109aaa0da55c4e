"""Rich terminal output for the portal CLI."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from modules.backend_api.models import AdminStats
from modules.directory.models import DirectoryPage
from modules.routing.models import GuardOutcome, NavigationResult
from modules.session.models import Session
from shared.models import User

console = Console()


class ConsoleNotifier:
    """Notifier that prints toast messages to the terminal."""

    def __init__(self, target: Optional[Console] = None):
        self._console = target or console

    def success(self, message: str) -> None:
        self._console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[red]✗[/red] {message}")


def format_role(user: User) -> str:
    """Role label with a colour per role."""
    colours = {"admin": "magenta", "moderator": "cyan", "user": "white"}
    role = user.role.value
    return f"[{colours.get(role, 'white')}]{role}[/]"


def format_status(user: User) -> str:
    if user.is_banned:
        return "[red]banned[/red]"
    if not user.is_active:
        return "[yellow]inactive[/yellow]"
    return "[green]active[/green]"


def render_session(session: Session) -> Panel:
    """Panel describing the current session.

    Shows the user's name, email, role and security flags when
    authenticated, otherwise just the status.
    """
    user = session.user
    if user is None:
        body = Text(session.status.value.replace("_", " "))
        if session.probe_failed:
            body.append("\n(backend unreachable)", style="dim")
        return Panel(body, title="Session")

    lines = [
        f"[bold]{user.full_name}[/bold] <{user.email}>",
        f"Role: {format_role(user)}",
        f"Email verified: {'yes' if user.is_email_verified else 'no'}",
        f"2FA: {'enabled' if user.two_factor_enabled else 'disabled'}",
    ]
    return Panel("\n".join(lines), title="Session")


def render_navigation(result: NavigationResult) -> str:
    decision = result.decision
    if decision.outcome == GuardOutcome.REDIRECT:
        return f"{result.path} [yellow]→ redirect[/yellow] {decision.redirect_to}"
    if decision.outcome == GuardOutcome.LOADING:
        return f"{result.path} [dim]… loading[/dim]"
    name = result.match.route.name if result.match else result.path
    return f"{result.path} [green]→ render[/green] {name}"


def render_directory(page: DirectoryPage, stats: Optional[AdminStats] = None) -> Table:
    """Build the user directory table.

    Args:
        page: The page to show
        stats: Optional counters, rendered in the caption

    Returns:
        Table with one row per user
    """
    title = f"Users (page {page.page} of {max(page.pages, 1)}, {page.total} total)"
    if page.search:
        title += f' matching "{page.search}"'
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Role")
    table.add_column("Status")

    for user in page.users:
        table.add_row(user.id, user.full_name, user.email, format_role(user), format_status(user))

    if stats is not None:
        table.caption = (
            f"{stats.total_users} users · {stats.active_users} active · "
            f"{stats.banned_users} banned · {stats.users_this_month} new this month"
        )
    return table
