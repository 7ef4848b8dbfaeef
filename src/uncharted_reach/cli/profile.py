"""CLI: reach profile"""

import click
from rich.console import Console
from rich.table import Table

from uncharted_reach.config import ReachConfig

console = Console()


def _run(coro):
    from uncharted_reach.cli.main import _run
    return _run(coro)


def _panel_session(cfg: ReachConfig, echo: bool = True):
    from uncharted_reach.cli.main import panel_session
    return panel_session(cfg, echo=echo)


@click.command("profile")
@click.option("--json-output", "--json", is_flag=True)
@click.pass_obj
def profile_cmd(cfg: ReachConfig, json_output: bool):
    """Fetch the signed-in player's profile."""
    if not cfg.refresh_token:
        console.print("[yellow]Not signed in. Run `reach auth login` first.[/yellow]")
        raise SystemExit(1)

    async def _fetch():
        async with _panel_session(cfg, echo=not json_output) as panel:
            return panel.profile

    profile = _run(_fetch())
    if profile is None:
        raise SystemExit(1)
    if json_output:
        click.echo(profile.model_dump_json(by_alias=True, indent=2))
        return

    table = Table(title=f"{profile.display_name} (ID: {profile.player_id})")
    table.add_column("Resource", style="bold")
    table.add_column("Amount", justify="right")
    for resource in profile.resources:
        table.add_row(resource.type.value, str(resource.amount))
    console.print(table)
    console.print(f"[dim]{profile.email} · created {profile.created_at} · updated {profile.updated_at}[/dim]")
