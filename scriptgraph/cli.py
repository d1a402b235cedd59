import click
import yaml
from pathlib import Path
from typing import Optional
from rapidfuzz import process, fuzz
from rich.console import Console
from rich.table import Table

from scriptgraph.config import settings, LOG_LEVELS
from scriptgraph.logging_config import setup_logging
from scriptgraph.models import ContinuityRules, KnowledgeGraph
from scriptgraph.pipelines.analyze import analyze_screenplay
from scriptgraph.prompt_builder import build_story_context

console = Console()

SAMPLE_SCREENPLAY = [
    {"id": "1", "type": "scene_heading", "content": "INT. KITCHEN - DAY"},
    {"id": "2", "type": "action", "content": "A cramped kitchen. MARY stands at the stove."},
    {"id": "3", "type": "character", "content": "JOHN"},
    {"id": "4", "type": "dialogue", "content": "Have you seen my keys?"},
    {"id": "5", "type": "action", "content": "JOHN picks up the keys and enters the CAR."},
    {"id": "6", "type": "transition", "content": "CUT TO:"},
    {"id": "7", "type": "scene_heading", "content": "EXT. GAS STATION - NIGHT"},
    {"id": "8", "type": "action", "content": "JOHN exits the TRUCK, holding a map."},
    {"id": "9", "type": "character", "content": "JOHN (V.O.)"},
    {"id": "10", "type": "parenthetical", "content": "to himself"},
    {"id": "11", "type": "dialogue", "content": "Almost there."},
]


def create_workspace(workspace_root: Path):
    """Initialize workspace with starter files."""
    workspace_root.mkdir(exist_ok=True)
    (workspace_root / "scripts").mkdir(exist_ok=True)

    rules_path = workspace_root / "continuity_rules.yaml"
    if not rules_path.exists():
        with open(rules_path, "w") as f:
            yaml.dump(ContinuityRules().model_dump(), f, default_flow_style=False)
        console.print(f"[green]✓[/green] Created {rules_path}")

    sample_path = workspace_root / "scripts" / "sample.yaml"
    if not sample_path.exists():
        with open(sample_path, "w") as f:
            yaml.dump({"elements": SAMPLE_SCREENPLAY}, f, default_flow_style=False, sort_keys=False)
        console.print(f"[green]✓[/green] Created {sample_path}")

    console.print(f"[green]✓[/green] Workspace ready: {workspace_root}")


def _rules_path(rules_file: Optional[str]) -> Optional[Path]:
    if rules_file:
        return Path(rules_file)
    if settings.rules_path.exists():
        return settings.rules_path
    return None


def _print_graph(graph: KnowledgeGraph):
    characters = Table(title="Characters")
    characters.add_column("Name")
    characters.add_column("First")
    characters.add_column("Dialogue")
    characters.add_column("Actions")
    characters.add_column("Location")
    for c in graph.characters.values():
        characters.add_row(
            c.name, str(c.first_appearance), str(len(c.dialogues)),
            str(len(c.actions)), c.current_location or "-",
        )
    console.print(characters)

    locations = Table(title="Locations")
    locations.add_column("Name")
    locations.add_column("Kind")
    locations.add_column("Time")
    locations.add_column("Scenes")
    for loc in graph.locations.values():
        locations.add_row(
            loc.name, loc.kind, loc.time_of_day or "-",
            ", ".join(str(i) for i in loc.scenes),
        )
    console.print(locations)

    if graph.props:
        props = Table(title="Props")
        props.add_column("Name")
        props.add_column("First")
        props.add_column("Last")
        for p in graph.props.values():
            props.add_row(p.name, str(p.first_mention), str(p.last_seen))
        console.print(props)

    scene = graph.current_scene.name if graph.current_scene else "Not in a scene"
    console.print(f"[blue]Current scene:[/blue] {scene}")


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (defaults to SCRIPTGRAPH_LOG_LEVEL)",
)
def cli(log_level):
    """scriptgraph: screenplay knowledge graph and continuity checks."""
    if log_level is None:
        try:
            settings.validate_log_level()
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.exceptions.Exit(1)
        log_level = settings.log_level
    setup_logging(log_level)


@cli.command()
def init():
    """Initialize workspace."""
    try:
        create_workspace(settings.workspace_root)
        console.print("[green]Initialization complete.[/green]")
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.exceptions.Exit(1)


@cli.command()
@click.argument("script_file", type=click.Path(exists=True))
@click.option("--rules", "rules_file", type=click.Path(exists=True), help="Continuity rules YAML")
@click.option("--json", "as_json", is_flag=True, help="Print the parse result as JSON")
@click.option("--strict", is_flag=True, help="Fail if error-severity findings exist")
def analyze(script_file, rules_file, as_json, strict):
    """Build the knowledge graph and report continuity findings."""
    try:
        analysis = analyze_screenplay(Path(script_file), _rules_path(rules_file))
        result = analysis["result"]

        if as_json:
            click.echo(result.model_dump_json(indent=2))
        else:
            _print_graph(result.knowledge_graph)

            if result.errors:
                console.print("\n[bold red]Continuity Findings:[/bold red]")
                for err in result.errors:
                    severity_color = "red" if err.severity == "error" else "yellow"
                    console.print(
                        f"  [{severity_color}]{err.severity.upper()}[/{severity_color}] "
                        f"Element {err.element_index}: {err.message}"
                    )
                console.print(f"\n[yellow]Total findings:[/yellow] {len(result.errors)}")
            else:
                console.print("[green]No continuity findings.[/green]")

        hard_errors = [err for err in result.errors if err.severity == "error"]
        if strict and hard_errors:
            console.print("[red]Strict mode: continuity errors found. Exiting with error.[/red]")
            raise click.exceptions.Exit(1)
    except click.exceptions.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.exceptions.Exit(1)


@cli.command()
@click.argument("script_file", type=click.Path(exists=True))
@click.argument("name")
def character(script_file, name):
    """Show one character's record."""
    try:
        result = analyze_screenplay(Path(script_file), _rules_path(None))["result"]
        graph = result.knowledge_graph
        record = graph.get_character_info(name)

        if record is None:
            console.print(f"[red]Unknown character:[/red] {name}")
            suggestion = process.extractOne(name, list(graph.characters), scorer=fuzz.WRatio)
            if suggestion and suggestion[1] >= 60:
                console.print(f"[yellow]Did you mean:[/yellow] {suggestion[0]}")
            raise click.exceptions.Exit(1)

        console.print(f"[bold]{record.name}[/bold] (first appears at element {record.first_appearance})")
        console.print(f"  Location: {record.current_location or '-'}")
        console.print(f"  Last action: {record.last_action or '-'}")
        console.print("  Dialogue:")
        for line in record.dialogues:
            console.print(f"    - {line}")
        console.print("  Actions:")
        for line in record.actions:
            console.print(f"    - {line}")
    except click.exceptions.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.exceptions.Exit(1)


@cli.command()
@click.argument("script_file", type=click.Path(exists=True))
@click.option("--count", default=None, type=int, help="Number of events to show")
def recent(script_file, count):
    """Show the most recent timeline events."""
    try:
        result = analyze_screenplay(Path(script_file), _rules_path(None))["result"]
        count = settings.recent_events if count is None else count
        events = result.knowledge_graph.get_recent_events(count)

        if not events:
            console.print("[yellow]No timeline events.[/yellow]")
            return

        for event in events:
            where = f" @ {event.location}" if event.location else ""
            console.print(
                f"  [{event.element_index}] {event.kind} {event.character or '?'}{where}: {event.description}"
            )
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.exceptions.Exit(1)


@cli.command()
@click.argument("script_file", type=click.Path(exists=True))
@click.option("--recent", "recent_count", default=None, type=int, help="Number of recent events")
@click.option("--no-screenplay", is_flag=True, help="Omit the raw screenplay section")
def context(script_file, recent_count, no_screenplay):
    """Print story context for a writing assistant."""
    try:
        analysis = analyze_screenplay(Path(script_file), _rules_path(None))
        recent_count = settings.recent_events if recent_count is None else recent_count
        text = build_story_context(
            analysis["result"],
            elements=None if no_screenplay else analysis["elements"],
            recent=recent_count,
        )
        click.echo(text)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.exceptions.Exit(1)


def main():
    cli()


if __name__ == "__main__":
    main()
