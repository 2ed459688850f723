"""Status board CLI - live status of Minecraft servers."""

import typer

from statusboard_core.cli.board import check, watch
from statusboard_core.cli.serve import proxy

app = typer.Typer(
    name="statusboard",
    help="Live status, players, version and latency of Minecraft servers",
    no_args_is_help=True,
)

app.command("watch")(watch)
app.command("check")(check)
app.command("proxy")(proxy)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
