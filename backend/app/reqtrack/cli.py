from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich import print

from reqtrack.governance import assess_risk
from reqtrack.models.requirement_schemas import RequirementCreate
from reqtrack.services.generation.generator import synthesize_tests

app = typer.Typer(add_completion=False, help="ReqTrack CLI")


# ============================================================
# 小工具：输出
# ============================================================
def _info(msg: str) -> None:
    print(f"[cyan][RT][/cyan] {msg}")


def _ok(msg: str) -> None:
    print(f"[green][RT][OK][/green] {msg}")


def _fail(msg: str, code: int = 1) -> NoReturn:
    print(f"[red][RT][FAIL][/red] {msg}")
    raise typer.Exit(code)


_RISK_COLORS = {"high": "red", "medium": "yellow", "low": "green"}


@app.command()
def serve(host: str = "127.0.0.1", port: int = 8000, reload: bool = False):
    """Run FastAPI server."""
    import uvicorn

    from reqtrack.logging_config import setup_logging

    setup_logging()
    uvicorn.run("reqtrack.main:app", host=host, port=port, reload=reload)


@app.command("init-db")
def init_db_command():
    """Create all tables."""
    from reqtrack.database.config import DATABASE_URL, init_db

    _info(f"Creating tables on {DATABASE_URL}")
    init_db()
    _ok("Tables created")


@app.command()
def generate(
    title: str = typer.Option(..., help="Requirement title"),
    user_story: Optional[str] = typer.Option(None, help="User story"),
    acceptance_criteria: Optional[str] = typer.Option(
        None, help="Acceptance criteria, one per line (use \\n to separate)"
    ),
    description: Optional[str] = typer.Option(None, help="Requirement description"),
    out: Optional[Path] = typer.Option(None, help="Write tests to this JSON file"),
):
    """Preview the tests derived from a requirement."""
    if acceptance_criteria is not None:
        acceptance_criteria = acceptance_criteria.replace("\\n", "\n")
    if not title.strip():
        _fail("title must not be blank")

    req = RequirementCreate(
        title=title,
        user_story=user_story,
        acceptance_criteria=acceptance_criteria,
        description=description,
    )
    tests = synthesize_tests(req)

    if out is not None:
        out.write_text(
            json.dumps([t.model_dump() for t in tests], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        _ok(f"Wrote {len(tests)} tests to {out}")
        return

    for t in tests:
        print(f"[bold]{t.title}[/bold] [dim]({t.type})[/dim]\n  {t.description}")


@app.command()
def risk(
    total: int = typer.Option(..., min=0, help="Total test count"),
    failed: int = typer.Option(0, min=0, help="Failed test count"),
):
    """Score the release risk from test counts."""
    assessment = assess_risk(total, failed)
    level = assessment.risk_level.value
    color = _RISK_COLORS.get(level, "white")
    print(f"[{color}]{level.upper()}[/{color}] {assessment.recommendation}")


if __name__ == "__main__":
    app()
