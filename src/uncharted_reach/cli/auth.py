"""CLI: reach auth register|login|logout|status|reset-password|change-email|verify"""

import click
from rich.console import Console

from uncharted_reach.config import ReachConfig

console = Console()


def _run(coro):
    from uncharted_reach.cli.main import _run
    return _run(coro)


def _panel_session(cfg: ReachConfig):
    from uncharted_reach.cli.main import panel_session
    return panel_session(cfg)


@click.group()
def auth():
    """Authentication commands."""


@auth.command("register")
@click.option("--email", prompt="Email")
@click.password_option()
@click.pass_obj
def auth_register(cfg: ReachConfig, email: str, password: str):
    """Create an account and sign in."""

    async def _register() -> bool:
        async with _panel_session(cfg) as panel:
            panel.email, panel.password = email, password
            return await panel.click_register()

    if not _run(_register()):
        raise SystemExit(1)


@auth.command("login")
@click.option("--email", prompt="Email")
@click.option("--password", prompt="Password", hide_input=True)
@click.pass_obj
def auth_login(cfg: ReachConfig, email: str, password: str):
    """Sign in with email and password."""

    async def _login() -> bool:
        async with _panel_session(cfg) as panel:
            panel.email, panel.password = email, password
            return await panel.click_login()

    if not _run(_login()):
        raise SystemExit(1)


@auth.command("logout")
@click.pass_obj
def auth_logout(cfg: ReachConfig):
    """Sign out and forget the saved session."""

    async def _logout() -> None:
        async with _panel_session(cfg) as panel:
            await panel.click_logout()

    _run(_logout())


@auth.command("status")
@click.pass_obj
def auth_status(cfg: ReachConfig):
    """Show the saved session."""
    if cfg.refresh_token:
        console.print(f"[green]Signed in[/green] as {cfg.email or 'unknown'} ({cfg.base_url})")
    else:
        console.print("[yellow]Not signed in. Run `reach auth login`.[/yellow]")


@auth.command("reset-password")
@click.option("--email", prompt="Email")
@click.pass_obj
def auth_reset_password(cfg: ReachConfig, email: str):
    """Send a password reset email."""

    async def _reset() -> bool:
        async with _panel_session(cfg) as panel:
            panel.email = email
            return await panel.click_forgot_password()

    if not _run(_reset()):
        raise SystemExit(1)


@auth.command("change-email")
@click.option("--new-email", prompt="New email")
@click.option("--password", prompt="Current password", hide_input=True)
@click.pass_obj
def auth_change_email(cfg: ReachConfig, new_email: str, password: str):
    """Change the signed-in account's email."""

    async def _change() -> bool:
        async with _panel_session(cfg) as panel:
            panel.new_email, panel.password = new_email, password
            return await panel.click_change_email()

    if not _run(_change()):
        raise SystemExit(1)


@auth.command("verify")
@click.pass_obj
def auth_verify(cfg: ReachConfig):
    """Resend the verification email."""

    async def _verify() -> bool:
        async with _panel_session(cfg) as panel:
            return await panel.click_verify()

    if not _run(_verify()):
        raise SystemExit(1)
