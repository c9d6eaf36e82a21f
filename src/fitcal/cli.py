"""CLI interface using Typer."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from fitcal.calories import estimate_workout_calories
from fitcal.config import get_settings
from fitcal.errors import (
    DEFAULT_RETRY_CONFIGS,
    ErrorCategory,
    ErrorLogger,
)
from fitcal.profiles import (
    ProfileStore,
    UserProfile,
    calculate_profile_completeness,
    cm_to_feet_inches,
    feet_inches_to_cm,
    get_fitness_recommendations,
    kg_to_lbs,
    lbs_to_kg,
    validate_height,
    validate_user_profile,
    validate_weight,
)
from fitcal.profiles.models import (
    VALID_ACTIVITY_LEVELS,
    HeightUnit,
    WeightUnit,
    is_profile_sufficient_for_calculations,
)
from fitcal.storage import SafeAsyncStorage, SqliteKeyValueStore, get_db
from fitcal.tracking import CalorieData, Exercise, WorkoutRecord, WorkoutStore

app = typer.Typer(
    help="Workout calorie estimation with profile-aware MET calculations",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

# Subcommand groups
profile_app = typer.Typer(help="Manage the user profile")
convert_app = typer.Typer(help="Convert between metric and imperial units")
workouts_app = typer.Typer(help="Browse and prune workout history")
errors_app = typer.Typer(help="Inspect the error log")

app.add_typer(profile_app, name="profile")
app.add_typer(convert_app, name="convert")
app.add_typer(workouts_app, name="workouts")
app.add_typer(errors_app, name="errors")


# ============================================================================
# Shared plumbing
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging for every command."""
    level = "DEBUG" if verbose else get_settings().logging.level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def error_log_path() -> Path:
    """The error log lives next to the key-value database."""
    return get_settings().storage.path.parent / "errors.json"


def open_error_logger() -> ErrorLogger:
    """ErrorLogger for this invocation, seeded from the persisted log."""
    error_logger = ErrorLogger(max_errors=get_settings().logging.max_errors)
    path = error_log_path()
    if path.exists():
        try:
            error_logger.restore(path.read_text())
        except (OSError, ValueError, KeyError) as exc:
            logger.warning("Ignoring unreadable error log %s: %s", path, exc)
    return error_logger


def save_error_logger(error_logger: ErrorLogger) -> None:
    path = error_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(error_logger.export_errors())
    except OSError as exc:
        logger.warning("Could not write error log %s: %s", path, exc)


def open_storage(error_logger: ErrorLogger) -> SafeAsyncStorage:
    settings = get_settings()
    return SafeAsyncStorage(
        SqliteKeyValueStore(get_db()),
        retry_config=DEFAULT_RETRY_CONFIGS["storage"].with_overrides(settings.retry.storage),
        max_payload_chars=settings.storage.max_payload_chars,
        error_logger=error_logger,
    )


def load_profile(storage: SafeAsyncStorage, error_logger: ErrorLogger) -> Optional[UserProfile]:
    result = asyncio.run(ProfileStore(storage, error_logger).load())
    if not result.success:
        err_console.print(f"[yellow]Could not load profile: {result.error}[/yellow]")
        return None
    return result.profile


def describe_height(height_cm: float) -> str:
    feet, inches = cm_to_feet_inches(height_cm)
    return f"{height_cm:g} cm ({feet}' {inches}\")"


# ============================================================================
# Profile commands
# ============================================================================


@profile_app.command("show")
def profile_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the stored profile."""
    error_logger = open_error_logger()
    profile = load_profile(open_storage(error_logger), error_logger)
    save_error_logger(error_logger)

    if profile is None:
        if json_output:
            output_json({
                "success": False,
                "command": "profile show",
                "errors": ["No user profile found"],
                "suggestions": ["Create one with: fitcal profile set --age 30 --sex male --weight 70 --height 175"],
            })
        else:
            console.print("[red]No user profile found[/red]")
            console.print("Create one with: fitcal profile set --age 30 --sex male --weight 70 --height 175")
        raise typer.Exit(1)

    completeness = calculate_profile_completeness(profile)
    if json_output:
        data = profile.to_dict()
        data["profileCompleteness"] = completeness
        if is_profile_sufficient_for_calculations(profile):
            data["recommendations"] = get_fitness_recommendations(profile).to_dict()
        output_json({"success": True, "command": "profile show", "data": data})
        return

    console.print("[bold]User Profile[/bold]")
    console.print(f"  Age: {profile.age if profile.age is not None else '-'}")
    console.print(f"  Sex: {profile.sex or '-'}")
    if profile.weight is not None:
        console.print(f"  Weight: {profile.weight:g} {profile.weight_unit}")
    else:
        console.print("  Weight: -")
    if profile.height is not None:
        console.print(f"  Height: {describe_height(profile.height)}")
    else:
        console.print("  Height: -")
    console.print(f"  Activity: {profile.activity_level}")
    console.print(f"  Completeness: {completeness}%")

    if is_profile_sufficient_for_calculations(profile):
        targets = get_fitness_recommendations(profile)
        console.print(
            Panel(
                f"Daily calorie goal: {targets.daily_calorie_goal} kcal\n"
                f"Workout calories: {targets.recommended_workout_calories} kcal/day\n"
                f"Weekly active minutes: {targets.weekly_workout_minutes}",
                title="Recommendations",
                expand=False,
            )
        )


@profile_app.command("set")
def profile_set(
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    sex: Optional[str] = typer.Option(None, "--sex", help="Sex (male/female/other)"),
    weight: Optional[float] = typer.Option(None, "--weight", help="Body weight"),
    weight_unit: Optional[str] = typer.Option(
        None, "--weight-unit", help="Unit for --weight (kg/lbs)"
    ),
    height: Optional[float] = typer.Option(
        None, "--height", help="Height in cm, or feet with --height-unit ft_in"
    ),
    height_unit: Optional[str] = typer.Option(
        None, "--height-unit", help="Unit for --height (cm/ft_in)"
    ),
    inches: int = typer.Option(0, "--inches", help="Inches part when --height-unit is ft_in"),
    activity: Optional[str] = typer.Option(
        None,
        "--activity",
        help=f"Activity level ({'/'.join(VALID_ACTIVITY_LEVELS)})",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Create or update the profile; only the given fields change."""
    error_logger = open_error_logger()
    storage = open_storage(error_logger)
    profile = load_profile(storage, error_logger) or UserProfile()

    errors: list[str] = []
    if age is not None:
        profile.age = age
    if sex is not None:
        profile.sex = sex.lower()
    if weight_unit is not None:
        new_unit = weight_unit.lower()
        # Changing only the unit converts the stored weight
        if weight is None and profile.weight is not None and new_unit != profile.weight_unit:
            if new_unit == WeightUnit.LBS.value:
                profile.weight = round(kg_to_lbs(profile.weight), 1)
            elif new_unit == WeightUnit.KG.value:
                profile.weight = round(lbs_to_kg(profile.weight), 1)
        profile.weight_unit = new_unit
    if weight is not None:
        check = validate_weight(weight, profile.weight_unit)
        errors.extend(check.errors)
        profile.weight = weight
    if height_unit is not None:
        profile.height_unit = height_unit.lower()
    if height is not None:
        if profile.height_unit == HeightUnit.FT_IN.value:
            check = validate_height(height, HeightUnit.FT_IN.value, inches)
            errors.extend(check.errors)
            if check.is_valid:
                profile.height = round(feet_inches_to_cm(height, inches), 1)
        else:
            profile.height = height
    if activity is not None:
        profile.activity_level = activity.lower()

    result = None
    if not errors:
        result = asyncio.run(ProfileStore(storage, error_logger).save(profile))
        errors = list(result.validation.errors)
        if not result.success and not errors and result.error:
            errors.append(result.error)
    save_error_logger(error_logger)

    if errors:
        if json_output:
            output_json({"success": False, "command": "profile set", "errors": errors})
        else:
            console.print("[red]Profile not saved:[/red]")
            for message in errors:
                console.print(f"  - {message}")
        raise typer.Exit(1)

    if json_output:
        output_json({
            "success": True,
            "command": "profile set",
            "data": result.profile.to_dict(),
            "human_summary": "Profile saved",
        })
    else:
        console.print("[green]Profile saved[/green]")


@profile_app.command("validate")
def profile_validate(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Check the stored profile against the validation rules."""
    error_logger = open_error_logger()
    profile = load_profile(open_storage(error_logger), error_logger)
    save_error_logger(error_logger)

    validation = validate_user_profile(profile)
    if json_output:
        output_json({
            "success": validation.is_valid,
            "command": "profile validate",
            "errors": validation.errors,
            "data": {"profileCompleteness": calculate_profile_completeness(profile)},
        })
    elif validation.is_valid:
        console.print("[green]Profile is valid[/green]")
    else:
        console.print("[red]Profile has problems:[/red]")
        for message in validation.errors:
            console.print(f"  - {message}")

    if not validation.is_valid:
        raise typer.Exit(1)


# ============================================================================
# Calorie estimation
# ============================================================================


def read_workout(source: str) -> dict:
    if source == "-":
        text = sys.stdin.read()
    else:
        path = Path(source)
        if not path.exists():
            console.print(f"[red]Workout file not found: {source}[/red]")
            raise typer.Exit(1)
        text = path.read_text()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid workout JSON: {exc}[/red]")
        raise typer.Exit(1)
    if not isinstance(data, dict):
        console.print("[red]Workout JSON must be an object with exercises and duration[/red]")
        raise typer.Exit(1)
    return data


@app.command()
def calories(
    workout_file: str = typer.Argument(
        ..., help="Workout JSON file ({exercises: [...], duration: minutes}), or - for stdin"
    ),
    save: bool = typer.Option(False, "--save", help="Save the workout to history"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes saved with the workout"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Estimate calories burned during a workout."""
    workout = read_workout(workout_file)
    settings = get_settings()

    error_logger = open_error_logger()
    storage = open_storage(error_logger)
    workout_store = WorkoutStore(storage, settings.tracking)
    profile = load_profile(storage, error_logger)
    categories = asyncio.run(workout_store.get_exercise_categories())

    result = estimate_workout_calories(
        workout, profile, categories, settings.calculation, error_logger
    )

    saved_id = None
    save_errors: list[str] = []
    if save and result.success:
        try:
            record = WorkoutRecord(
                exercises=[Exercise.from_dict(item) for item in workout.get("exercises") or []],
                duration=float(workout["duration"]),
                notes=notes,
            )
        except (KeyError, TypeError, ValueError) as exc:
            save_errors.append(f"Workout could not be saved: {exc}")
        else:
            record.calorie_data = CalorieData.from_result(result, profile)
            saved = asyncio.run(workout_store.save_workout(record))
            if saved.success:
                saved_id = record.id
            elif saved.error is not None:
                save_errors.append(saved.error.details.user_message)
    save_error_logger(error_logger)

    if json_output:
        data = result.to_dict()
        if save:
            data["savedWorkoutId"] = saved_id
        output_json({
            "success": result.success and not save_errors,
            "command": "calories",
            "data": data,
            "errors": result.errors + save_errors,
        })
    else:
        _print_calorie_result(result)
        if saved_id:
            console.print(f"[green]Workout saved (ID: {saved_id})[/green]")
        for message in save_errors:
            console.print(f"[red]{message}[/red]")

    if not result.success or save_errors:
        raise typer.Exit(1)


def _print_calorie_result(result) -> None:
    if not result.success:
        console.print("[red]Calorie estimate failed:[/red]")
        for message in result.errors:
            console.print(f"  - {message}")
        return

    if result.exercise_breakdown:
        table = Table(title="Exercise Breakdown")
        table.add_column("Exercise")
        table.add_column("Intensity")
        table.add_column("MET", justify="right")
        table.add_column("kcal", justify="right")
        for entry in result.exercise_breakdown:
            style = "red" if entry.error else None
            table.add_row(
                entry.name,
                entry.intensity,
                f"{entry.met_value:.1f}",
                str(entry.calories),
                style=style,
            )
        console.print(table)

    console.print(
        f"[bold]Total: {result.total_calories} kcal[/bold] "
        f"(average MET {result.average_met:.1f}, "
        f"{result.calculation_method.value}, profile {result.profile_completeness}% complete)"
    )
    for message in result.errors:
        console.print(f"[red]  - {message}[/red]")
    for message in result.warnings:
        console.print(f"[yellow]  ! {message}[/yellow]")
    for message in result.fallbacks_used:
        console.print(f"[dim]  * {message}[/dim]")
    for message in result.recommendations:
        console.print(f"[cyan]{message}[/cyan]")


# ============================================================================
# Unit conversion
# ============================================================================


@convert_app.command("weight")
def convert_weight(
    value: float = typer.Argument(..., help="Weight to convert"),
    from_unit: str = typer.Option(WeightUnit.KG.value, "--from", help="Source unit (kg/lbs)"),
) -> None:
    """Convert a weight between kg and lbs."""
    unit = from_unit.lower()
    if unit == WeightUnit.KG.value:
        console.print(f"{value:g} kg = {kg_to_lbs(value):.1f} lbs")
    elif unit == WeightUnit.LBS.value:
        console.print(f"{value:g} lbs = {lbs_to_kg(value):.1f} kg")
    else:
        console.print("[red]Weight unit must be kg or lbs[/red]")
        raise typer.Exit(1)


@convert_app.command("height")
def convert_height(
    cm: Optional[float] = typer.Option(None, "--cm", help="Height in centimetres"),
    feet: Optional[int] = typer.Option(None, "--feet", help="Feet part of the height"),
    inches: int = typer.Option(0, "--inches", help="Inches part of the height"),
) -> None:
    """Convert a height between cm and feet/inches."""
    if cm is not None:
        result = cm_to_feet_inches(cm)
        console.print(f"{cm:g} cm = {result.feet}' {result.inches}\"")
    elif feet is not None:
        console.print(f"{feet}' {inches}\" = {feet_inches_to_cm(feet, inches):.1f} cm")
    else:
        console.print("[red]Give either --cm or --feet (with optional --inches)[/red]")
        raise typer.Exit(1)


# ============================================================================
# Workout history
# ============================================================================


@workouts_app.command("list")
def workouts_list(
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum workouts to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List saved workouts, newest first."""
    error_logger = open_error_logger()
    store = WorkoutStore(open_storage(error_logger), get_settings().tracking)
    result = asyncio.run(store.list_workouts())
    save_error_logger(error_logger)

    if not result.success:
        console.print(f"[red]{result.error.details.user_message if result.error else 'Unable to load workouts'}[/red]")
        raise typer.Exit(1)

    records = result.data[:limit]
    if json_output:
        output_json({
            "success": True,
            "command": "workouts list",
            "data": [record.to_dict() for record in records],
            "warnings": result.warnings,
        })
        return

    for message in result.warnings:
        console.print(f"[yellow]{message}[/yellow]")
    if not records:
        console.print("[yellow]No workouts saved[/yellow]")
        return

    table = Table(title="Workouts")
    table.add_column("Date")
    table.add_column("Exercises")
    table.add_column("Minutes", justify="right")
    table.add_column("kcal", justify="right")
    table.add_column("ID", style="dim")
    for record in records:
        kcal = str(record.calorie_data.total_calories) if record.calorie_data else "-"
        table.add_row(
            record.performed_at.strftime("%Y-%m-%d %H:%M"),
            ", ".join(exercise.name for exercise in record.exercises) or "-",
            f"{record.duration:g}",
            kcal,
            record.id,
        )
    console.print(table)
    console.print(f"[dim]Showing {len(records)} of {len(result.data)} workouts[/dim]")


@workouts_app.command("prune")
def workouts_prune() -> None:
    """Apply the record-count and retention limits to the history."""
    error_logger = open_error_logger()
    store = WorkoutStore(open_storage(error_logger), get_settings().tracking)
    result = asyncio.run(store.prune())
    save_error_logger(error_logger)

    if not result.success:
        console.print(f"[red]{result.error.details.user_message if result.error else 'Unable to prune workouts'}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Removed {result.data} workout(s)[/green]")


# ============================================================================
# Error log
# ============================================================================


@errors_app.command("show")
def errors_show(
    count: int = typer.Option(10, "--count", "-n", help="Number of recent errors"),
    category: Optional[str] = typer.Option(
        None, "--category", help="Only show one category (VALIDATION/STORAGE/...)"
    ),
) -> None:
    """Show recent errors, newest first."""
    error_logger = open_error_logger()
    if category is not None:
        try:
            selected = ErrorCategory(category.upper())
        except ValueError:
            console.print(f"[red]Unknown category: {category}[/red]")
            raise typer.Exit(1)
        entries = error_logger.get_errors_by_category(selected)[:count]
    else:
        entries = error_logger.get_recent_errors(count)

    if not entries:
        console.print("[green]No errors logged[/green]")
        return

    table = Table(title="Recent Errors")
    table.add_column("Time")
    table.add_column("Severity")
    table.add_column("Category")
    table.add_column("Code")
    table.add_column("Message")
    for details in entries:
        table.add_row(
            details.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            details.severity.value,
            details.category.value,
            details.code,
            details.message,
        )
    console.print(table)


@errors_app.command("export")
def errors_export(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write report to file"),
) -> None:
    """Export the error log as JSON."""
    report = open_error_logger().export_errors()
    if output:
        output.write_text(report)
        console.print(f"[green]Error report written to {output}[/green]")
    else:
        print(report)


@errors_app.command("clear")
def errors_clear() -> None:
    """Delete every logged error."""
    error_logger = open_error_logger()
    error_logger.clear_errors()
    save_error_logger(error_logger)
    console.print("[green]Error log cleared[/green]")


if __name__ == "__main__":
    app()
