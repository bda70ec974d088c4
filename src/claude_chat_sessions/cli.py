"""Debug command line for inspecting transcript storage."""

import logging
from pathlib import Path

import click

from claude_chat_sessions.errors import StorageUnavailableError
from claude_chat_sessions.services.config_manager import ConfigManager
from claude_chat_sessions.services.project_catalog import ProjectCatalog
from claude_chat_sessions.services.session_loader import SessionLoader


@click.group()
@click.option(
    "--root",
    type=click.Path(path_type=Path),
    default=None,
    help="Projects directory override",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, root: Path | None, verbose: bool) -> None:
    """Inspect projects and sessions recorded by the assistant CLI."""
    config = ConfigManager()
    debug = verbose or config.get_bool("advanced/debugLogging")
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    loader = SessionLoader.from_config(config)
    if root is not None:
        loader = SessionLoader(
            ProjectCatalog(root, transcript_extension=config.transcript_extension()),
            classifier=config.tool_classifier(),
            resume_subtypes=config.resume_subtypes(),
        )
    ctx.obj = {"loader": loader, "config": config}


@cli.command()
@click.pass_context
def projects(ctx: click.Context) -> None:
    """List projects and their session ids."""
    loader: SessionLoader = ctx.obj["loader"]
    try:
        found = loader.list_projects()
    except StorageUnavailableError as e:
        raise click.ClickException(str(e))

    if not found:
        click.echo(f"No projects under {loader.catalog.projects_root}")
        return
    for project in sorted(found, key=lambda p: p.path):
        click.echo(project.path)
        for session_id in sorted(project.session_ids):
            click.echo(f"  - {session_id}")


@cli.command()
@click.argument("project_path")
@click.argument("session_id")
@click.pass_context
def show(ctx: click.Context, project_path: str, session_id: str) -> None:
    """Load one session and print its metrics."""
    loader: SessionLoader = ctx.obj["loader"]
    try:
        session = loader.load_session(project_path, session_id)
    except StorageUnavailableError as e:
        raise click.ClickException(str(e))
    metrics = session.metrics

    click.echo(f"Session {session.id}: {len(session.events)} events")
    if session.parse_error_count:
        click.echo(f"{session.parse_error_count} lines could not be parsed")
    if metrics.first_message_time is not None:
        click.echo(f"Started:        {metrics.first_message_time.isoformat()}")
    click.echo(f"Prompts:        {metrics.prompts_sent}")
    click.echo(f"Tools:          {metrics.tools_executed} run, {metrics.tools_failed} failed")
    click.echo(
        f"Files:          {metrics.files_created} created, "
        f"{metrics.files_modified} modified, {metrics.files_deleted} deleted"
    )
    click.echo(f"MCP calls:      {metrics.mcp_calls}")
    click.echo(f"Code blocks:    {metrics.code_blocks_generated}")
    click.echo(f"Errors:         {metrics.errors_encountered}")
    click.echo(f"Checkpoints:    {metrics.checkpoint_count}")
    click.echo(f"Resumed:        {'yes' if metrics.was_resumed else 'no'}")
    click.echo(f"Models:         {', '.join(metrics.model_changes) or '-'}")
    click.echo(
        f"Tokens:         {metrics.total_input_tokens} in, {metrics.total_output_tokens} out, "
        f"{metrics.cache_read_input_tokens} cache read, "
        f"{metrics.cache_creation_input_tokens} cache created"
    )


@cli.command()
@click.argument("project_path")
@click.option("--limit", type=int, default=None, help="Number of sessions to show")
@click.pass_context
def recent(ctx: click.Context, project_path: str, limit: int | None) -> None:
    """Show the most recently modified sessions of a project."""
    loader: SessionLoader = ctx.obj["loader"]
    config: ConfigManager = ctx.obj["config"]
    if limit is None:
        limit = config.get_int("general/recentLimit")

    try:
        sessions = loader.recent_sessions(project_path, limit=limit)
    except StorageUnavailableError as e:
        raise click.ClickException(str(e))

    for summary in sessions:
        preview = summary.preview or "(no user message)"
        click.echo(f"{summary.id}  [{summary.message_count} messages]  {preview}")
