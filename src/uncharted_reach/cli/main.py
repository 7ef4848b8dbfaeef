"""
Uncharted Reach CLI: `reach` command.

Commands:
  reach auth register|login|logout     Account sign-in
  reach auth status                    Show saved session
  reach auth reset-password            Send a password reset email
  reach auth change-email              Change the account email
  reach auth verify                    Resend the verification email
  reach profile                        Fetch the player profile
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install uncharted-reach[cli]")

from uncharted_reach.client import AsyncUnchartedReach
from uncharted_reach.config import ReachConfig, load_config, save_config
from uncharted_reach.presentation import AuthPanel

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_status(panel: AuthPanel) -> None:
    style = "red" if panel.is_error else "cyan"
    console.print(panel.status_text, style=style, markup=False, highlight=False)


def _run(coro):
    return asyncio.run(coro)


@asynccontextmanager
async def panel_session(cfg: ReachConfig, echo: bool = True) -> AsyncIterator[AuthPanel]:
    """Start a client, bind an AuthPanel to it, persist the session on exit."""
    if not cfg.api_key:
        console.print("[red]No API key. Pass --api-key or set REACH_API_KEY.[/red]")
        raise SystemExit(1)
    client = AsyncUnchartedReach(api_key=cfg.api_key, base_url=cfg.base_url, refresh_token=cfg.refresh_token)
    panel = AuthPanel(client.auth)
    if echo:
        panel.add_listener(_print_status)
    panel.bind()
    try:
        await client.start()
        yield panel
    finally:
        panel.close()
        user = client.auth.current_user
        save_config(cfg.model_copy(update={
            "refresh_token": client.refresh_token,
            "email": user.email if user else None,
        }))
        await client.close()


@click.group()
@click.version_option("0.1.0")
@click.option("--base-url", envvar="REACH_BASE_URL", default=None, help="Game backend base URL")
@click.option("--api-key", envvar="REACH_API_KEY", default=None, help="Firebase web API key")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def main(ctx: click.Context, base_url: Optional[str], api_key: Optional[str], verbose: bool):
    """Uncharted Reach CLI: manage your player account."""
    _configure_logging(verbose)
    cfg = load_config()
    overrides = {k: v for k, v in {"base_url": base_url, "api_key": api_key}.items() if v}
    ctx.obj = cfg.model_copy(update=overrides)


# Register subcommands from separate modules
from uncharted_reach.cli.auth import auth  # noqa: E402
from uncharted_reach.cli.profile import profile_cmd  # noqa: E402

main.add_command(auth)
main.add_command(profile_cmd)


if __name__ == "__main__":
    main()
