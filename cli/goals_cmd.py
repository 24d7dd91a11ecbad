"""
CLI command: acelera
Inspect and score goals from the terminal.
"""
import json
import sys
from pathlib import Path
from typing import Optional

import click

# Add the project root to sys.path so core imports work when run as a script
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from core.app_context import create_app_context
from core.exceptions import AceleraError
from core.models import Goal, SmartFeedback
from core.seed_data import seed_goals
from core.smart_validator import evaluate_smart_goal


def _print_feedback(feedback: SmartFeedback):
    click.echo(f"SMART score: {feedback.smart_score}/100 ({feedback.overall_grade})")
    for code, result in feedback.breakdown.items():
        mark = "✅" if result.ok else "⚠️"
        click.echo(f"  {mark} {code} {result.score:>2}  {result.message}")
    click.echo(f"Alignment: {feedback.alignment_score}/100")
    for note in feedback.alignment_notes:
        click.echo(f"  - {note}")


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Data directory (defaults to ACELERA_DATA_DIR or ./data)",
)
@click.pass_context
def goals(ctx, data_dir: Optional[Path]):
    """SMART goal tools"""
    try:
        ctx.obj = create_app_context(data_dir=data_dir)
    except AceleraError as e:
        click.echo(f"❌ {e.get_user_message()}", err=True)
        ctx.exit(1)


@goals.command(name="list")
@click.option("--org-unit", default=None, help="Only goals of this org unit")
@click.pass_obj
def list_goals(context, org_unit: Optional[str]):
    """List goals with their SMART score"""
    items = (
        context.goals.get_goals_by_org_unit(org_unit) if org_unit else context.goals.list_goals()
    )
    if not items:
        click.echo("ℹ️ No goals found")
        return

    for goal in items:
        feedback = context.goal_service.evaluate_goal(goal)
        click.echo(
            f"{goal.id:<12} {goal.status.value:<10} {feedback.smart_score:>3} "
            f"{feedback.overall_grade:<10} {goal.title}"
        )


@goals.command()
@click.argument("goal_id")
@click.option("--json", "as_json", is_flag=True, help="Print the raw feedback JSON")
@click.pass_context
def evaluate(ctx, goal_id: str, as_json: bool):
    """Score a stored goal"""
    context = ctx.obj
    try:
        feedback = context.goal_service.evaluate(goal_id)
    except AceleraError as e:
        click.echo(f"❌ {e.get_user_message()}", err=True)
        ctx.exit(1)

    if as_json:
        click.echo(json.dumps(feedback.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_feedback(feedback)


@goals.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--parent", "parent_id", default=None, help="Parent goal id to align against")
@click.option("--json", "as_json", is_flag=True, help="Print the raw feedback JSON")
@click.pass_context
def check(ctx, file: Path, parent_id: Optional[str], as_json: bool):
    """Score a goal JSON file without storing it"""
    context = ctx.obj
    try:
        raw = json.loads(file.read_text(encoding="utf-8"))
        goal = Goal.from_dict(raw)
    except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as e:
        click.echo(f"❌ Invalid goal file {file}: {e}", err=True)
        ctx.exit(1)

    if parent_id:
        parent = context.goals.get_goal(parent_id)
        if parent is None:
            click.echo(f"⚠️ Parent goal not found: {parent_id}, scoring without parent", err=True)
    else:
        parent = context.goals.resolve_parent(goal)

    feedback = evaluate_smart_goal(goal, parent)
    if as_json:
        click.echo(json.dumps(feedback.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_feedback(feedback)


@goals.command()
@click.option("--force", is_flag=True, help="Replace existing goals")
@click.pass_context
def seed(ctx, force: bool):
    """Reset the goal store to the demo goals"""
    context = ctx.obj
    existing = context.goals.list_goals()
    if existing and not force:
        click.echo(
            f"❌ Store already holds {len(existing)} goals. Use --force to replace them.",
            err=True,
        )
        ctx.exit(1)

    seeded = seed_goals()
    context.goals.set_goals(seeded)
    click.echo(f"✅ Seeded {len(seeded)} goals")


if __name__ == "__main__":
    goals()
