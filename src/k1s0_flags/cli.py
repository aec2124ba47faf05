"""k1s0-flags CLI — フラグ状態の確認"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from k1s0_flags.builder import ClientBuilder
from k1s0_flags.client import FlagsClient
from k1s0_flags.config import load_config
from k1s0_flags.exceptions import ConfigError, FlagError
from k1s0_flags.logger import configure_logging
from k1s0_flags.models import Auth

app = typer.Typer(
    name="k1s0-flags",
    help="k1s0 Flags - inspect feature flags (remote and FLAGS_* overrides)",
    no_args_is_help=True,
)


@dataclass
class _Options:
    config: Optional[Path]
    base_url: Optional[str]
    max_retries: Optional[int]
    project_id: Optional[str]
    agent_id: Optional[str]
    environment_id: Optional[str]
    log_level: str
    log_format: str


def _build_client(opts: _Options) -> FlagsClient:
    log = configure_logging(level=opts.log_level, format=opts.log_format)

    def on_error(error: FlagError) -> None:
        log.warning("flag_error", code=error.code, error=str(error))

    builder = ClientBuilder.from_config(load_config(opts.config)) if opts.config else ClientBuilder()
    if opts.base_url is not None:
        builder = builder.with_base_url(opts.base_url)
    if opts.max_retries is not None:
        builder = builder.with_max_retries(opts.max_retries)
    if opts.project_id or opts.agent_id or opts.environment_id:
        builder = builder.with_auth(
            Auth(
                project_id=opts.project_id or "",
                agent_id=opts.agent_id or "",
                environment_id=opts.environment_id or "",
            )
        )
    return builder.with_error_callback(on_error).build()


def _client_or_exit(ctx: typer.Context) -> FlagsClient:
    try:
        return _build_client(ctx.obj)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Flag service base URL"),
    max_retries: Optional[int] = typer.Option(None, "--max-retries", help="Fetch attempts (0-10)"),
    project_id: Optional[str] = typer.Option(None, "--project-id", envvar="K1S0_FLAGS_PROJECT_ID"),
    agent_id: Optional[str] = typer.Option(None, "--agent-id", envvar="K1S0_FLAGS_AGENT_ID"),
    environment_id: Optional[str] = typer.Option(
        None, "--environment-id", envvar="K1S0_FLAGS_ENVIRONMENT_ID"
    ),
    log_level: str = typer.Option("WARNING", "--log-level"),
    log_format: str = typer.Option("text", "--log-format", help="json or text"),
):
    """認証情報を指定しない場合は FLAGS_* 環境変数のオーバーライドのみを使う。"""
    ctx.obj = _Options(
        config=config,
        base_url=base_url,
        max_retries=max_retries,
        project_id=project_id,
        agent_id=agent_id,
        environment_id=environment_id,
        log_level=log_level,
        log_format=log_format,
    )


@app.command("check")
def check_flags(
    ctx: typer.Context,
    names: List[str] = typer.Argument(..., help="Flag names to check"),
):
    """各フラグが有効かどうかを表示する。"""
    client = _client_or_exit(ctx)
    results = asyncio.run(client.get_multiple(names))
    for name in names:
        typer.echo(f"{name}: {str(results[name]).lower()}")


@app.command("list")
def list_flags(ctx: typer.Context):
    """既知のフラグを一覧表示する。"""
    client = _client_or_exit(ctx)
    try:
        flags = asyncio.run(client.list())
    except FlagError as e:
        typer.echo(f"Failed to list flags: {e}", err=True)
        raise typer.Exit(code=1)

    if not flags:
        typer.echo("No flags found")
        return
    for flag in sorted(flags, key=lambda f: f.details.name):
        typer.echo(f"{flag.details.name} ({flag.details.id}): {str(flag.enabled).lower()}")


if __name__ == "__main__":
    app()
