"""
Command Line Interface for the issue tracker.
"""

from typing import Optional

import typer
import uvicorn
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from sqlalchemy import text
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..config import get_settings
from ..db.base import create_db_engine, get_database_url, init_database
from ..issues import IssueService, IssueTrackerError, SQLAlchemyIssueStore

app = typer.Typer(help="Issue Tracker - project-scoped issue tracking API")
console = Console()


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Host to bind the server to"),
    port: Optional[int] = typer.Option(None, help="Port to run the API server on"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the API server."""
    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    rprint(Panel.fit("Starting Issue Tracker", style="bold blue"))
    console.print(f"🚀 Listening on http://{host}:{port}")
    uvicorn.run(
        "issue_tracker.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=1 if reload else settings.api_workers,
    )


@app.command("init-db")
def init_db(
    url: Optional[str] = typer.Option(None, help="Database URL (default: settings)"),
):
    """Create the issue tables if they do not exist."""
    engine = create_db_engine(get_database_url(url))
    try:
        init_database(engine)
    except SQLAlchemyError as e:
        console.print(f"❌ Failed to initialize database: {escape(str(e))}")
        raise typer.Exit(code=1)
    finally:
        engine.dispose()
    console.print("✅ Database initialized")


@app.command("check-db")
def check_db(
    url: Optional[str] = typer.Option(None, help="Database URL (default: settings)"),
):
    """Check that the configured database accepts connections."""
    raw_url = url or get_settings().database_url
    if not raw_url:
        console.print("❌ No database URL configured (set DATABASE_URL)")
        raise typer.Exit(code=1)

    try:
        engine = create_db_engine(get_database_url(raw_url))
    except ArgumentError as e:
        console.print(f"❌ Invalid database URL: {escape(str(e))}")
        raise typer.Exit(code=1)

    console.print(f"Connecting to {engine.url.render_as_string(hide_password=True)}...")
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        console.print(f"❌ Connection failed: {escape(str(e))}")
        raise typer.Exit(code=1)
    finally:
        engine.dispose()

    console.print("✅ Connected successfully")


@app.command("issues")
def list_issues(
    project: str = typer.Argument(..., help="Project name"),
    url: Optional[str] = typer.Option(None, help="Database URL (default: settings)"),
    open_only: bool = typer.Option(False, "--open", help="Only show open issues"),
):
    """Show a project's issues, most recently updated first."""
    engine = create_db_engine(get_database_url(url))
    db = sessionmaker(bind=engine)()
    try:
        params = {"open": "true"} if open_only else {}
        issues = IssueService(SQLAlchemyIssueStore(db)).list_issues(project, params)
    except IssueTrackerError as e:
        console.print(f"❌ {escape(e.message)}")
        raise typer.Exit(code=1)
    finally:
        db.close()
        engine.dispose()

    if not issues:
        console.print(f"No issues in project '{project}'")
        return

    table = Table(title=f"Issues: {project}", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Assigned To")
    table.add_column("Open")
    table.add_column("Updated")

    for issue in issues:
        table.add_row(
            issue["_id"],
            issue["issue_title"],
            issue["status_text"],
            issue["assigned_to"],
            "🟢" if issue["open"] else "🔴",
            issue["updated_on"],
        )

    console.print(table)


@app.command()
def version():
    """Show version information."""
    from .. import __version__

    rprint(Panel.fit(f"Issue Tracker v{__version__}", style="bold green"))


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
