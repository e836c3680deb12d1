"""Main CLI interface using Typer."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import get_settings
from ..core import RecommendationReporter, UpgradePlannerService, build_service
from ..lifecycle import DefaultLifecycleProvider, StaticLifecycleProvider
from ..model.report import ReportFormat
from ..utils.logger import get_logger, set_log_level

app = typer.Typer(
    name="upgrade-planner",
    help="Plan operator and cluster upgrades for OpenShift",
    add_completion=True,
)

console = Console()
logger = get_logger(__name__)

HEALTH_STYLES = {"healthy": "green", "warning": "yellow", "critical": "red"}

ContextOption = typer.Option(None, "--context", "-c", help="Kubernetes context to use")
SnapshotOption = typer.Option(
    None,
    "--snapshot-file",
    "-s",
    help="Read the inventory from a JSON/YAML dump instead of the cluster",
)
LifecycleOption = typer.Option(
    None, "--lifecycle-data", "-l", help="YAML file with operator lifecycle facts"
)
FormatOption = typer.Option(
    None, "--format", "-f", help="Output format (defaults to the report_format setting)"
)


def _service(
    context: Optional[str], snapshot_file: Optional[Path], lifecycle_data: Optional[Path]
) -> UpgradePlannerService:
    settings = get_settings()
    set_log_level(settings.log_level)
    if lifecycle_data:
        settings = settings.model_copy(update={"lifecycle_data_file": lifecycle_data})
    return build_service(settings, snapshot_file=snapshot_file, context=context)


def _styled(health: str) -> str:
    style = HEALTH_STYLES.get(health, "white")
    return f"[{style}]{health}[/{style}]"


@app.command()
def status(
    context: Optional[str] = ContextOption,
    snapshot_file: Optional[Path] = SnapshotOption,
    lifecycle_data: Optional[Path] = LifecycleOption,
):
    """Show cluster version and the health of every operator."""
    try:
        with console.status("[bold green]Collecting platform status..."):
            platform = _service(context, snapshot_file, lifecycle_data).get_platform_status()

        cluster = platform.cluster
        console.print(
            f"Cluster [cyan]{cluster.current_version}[/cyan] on channel "
            f"[cyan]{cluster.channel}[/cyan] - {_styled(platform.overall_health.value)}"
        )
        if cluster.available_updates:
            console.print(f"Available updates: {', '.join(cluster.available_updates)}")

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Operator", style="cyan")
        table.add_column("Namespace", style="blue")
        table.add_column("Version", style="white")
        table.add_column("Channel", style="white")
        table.add_column("Support", style="white")
        table.add_column("Health")
        table.add_column("Issues", style="white")

        for operator in platform.operators:
            installation = operator.installation
            table.add_row(
                installation.display_name,
                installation.namespace,
                installation.current_version,
                installation.current_channel,
                operator.lifecycle_info.support_phase.value,
                _styled(operator.health_status.value),
                str(len(operator.issues)),
            )

        console.print(table)

        if platform.omitted_operators:
            console.print(
                f"[yellow]{len(platform.omitted_operators)} operator(s) could not be read:[/yellow]"
            )
            for omission in platform.omitted_operators:
                console.print(f"  - {omission.namespace}/{omission.name}: {omission.reason}")

    except Exception as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(1)


@app.command()
def operator(
    namespace: str = typer.Argument(..., help="Subscription namespace"),
    name: str = typer.Argument(..., help="Subscription name"),
    context: Optional[str] = ContextOption,
    snapshot_file: Optional[Path] = SnapshotOption,
    lifecycle_data: Optional[Path] = LifecycleOption,
):
    """Show lifecycle, upgrades and issues for one operator."""
    try:
        service = _service(context, snapshot_file, lifecycle_data)
        operator_status = service.get_operator_status(namespace, name)

        if not operator_status:
            console.print(f"[yellow]Operator {namespace}/{name} not found[/yellow]")
            raise typer.Exit(1)

        installation = operator_status.installation
        info = operator_status.lifecycle_info

        table = Table(title=installation.display_name, show_header=True)
        table.add_column("Aspect", style="cyan", no_wrap=True)
        table.add_column("Details", style="white")

        table.add_row("Version", installation.current_version)
        table.add_row("Channel", installation.current_channel)
        table.add_row("Lifecycle Model", info.lifecycle_model.value)
        table.add_row("Support Phase", info.support_phase.value)
        table.add_row("Health", _styled(operator_status.health_status.value))

        if operator_status.available_upgrades:
            upgrades = "\n".join(
                f"• {u.target_version} ({u.channel})" for u in operator_status.available_upgrades
            )
            table.add_row("Available Upgrades", upgrades)

        if operator_status.issues:
            issues = "\n".join(
                f"[{i.severity.value}] {i.title}" for i in operator_status.issues
            )
            table.add_row("Issues", issues)

        console.print(table)

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(1)


@app.command()
def lifecycle(
    operator_name: str = typer.Argument(..., help="Operator name"),
    version: str = typer.Argument(..., help="Operator version or CSV name"),
    lifecycle_data: Optional[Path] = LifecycleOption,
):
    """Show lifecycle facts for an operator version."""
    try:
        settings = get_settings()
        if lifecycle_data:
            settings = settings.model_copy(update={"lifecycle_data_file": lifecycle_data})

        if settings.lifecycle_data_file:
            provider = StaticLifecycleProvider.from_file(settings.lifecycle_data_file)
        else:
            provider = DefaultLifecycleProvider()

        info = provider.get_lifecycle_info(operator_name, version)
        for key, value in info.model_dump(mode="json", by_alias=True).items():
            if value is not None:
                console.print(f"[cyan]{key}[/cyan]: {value}")

    except Exception as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(1)


@app.command()
def recommend(
    context: Optional[str] = ContextOption,
    snapshot_file: Optional[Path] = SnapshotOption,
    lifecycle_data: Optional[Path] = LifecycleOption,
    format: Optional[ReportFormat] = FormatOption,
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the report to this file"
    ),
):
    """Generate upgrade paths and maintenance windows."""
    try:
        with console.status("[bold green]Generating upgrade recommendations..."):
            recommendations = _service(context, snapshot_file, lifecycle_data).get_recommendations()
            report_content = RecommendationReporter().generate_report(
                recommendations, format or get_settings().report_format
            )

        if output:
            output.parent.mkdir(parents=True, exist_ok=True)
            with open(output, "w") as f:
                f.write(report_content)
            console.print(f"[green]✓[/green] Report saved to: [cyan]{output}[/cyan]")
        else:
            console.print(report_content, markup=False, highlight=False)

    except Exception as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(1)


@app.command()
def path(
    path_id: str = typer.Argument(..., help="Path id, e.g. balanced-path"),
    context: Optional[str] = ContextOption,
    snapshot_file: Optional[Path] = SnapshotOption,
    lifecycle_data: Optional[Path] = LifecycleOption,
):
    """Show the steps of one upgrade path."""
    try:
        upgrade_path = _service(context, snapshot_file, lifecycle_data).get_upgrade_path(path_id)
        if not upgrade_path:
            console.print(f"[yellow]Upgrade path {path_id} not found[/yellow]")
            raise typer.Exit(1)

        table = Table(title=upgrade_path.description, show_header=True)
        table.add_column("#", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column("Target", style="green")
        table.add_column("From", style="white")
        table.add_column("To", style="white")
        table.add_column("Duration", style="dim")

        for step in upgrade_path.steps:
            table.add_row(
                str(step.order),
                step.type.value,
                step.target,
                step.from_version or "",
                step.to_version or "",
                step.estimated_duration,
            )

        console.print(table)
        console.print(
            f"Total: [cyan]{upgrade_path.estimated_duration}[/cyan], "
            f"confidence [cyan]{upgrade_path.confidence.value}[/cyan]"
        )

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(1)


@app.command()
def windows(
    context: Optional[str] = ContextOption,
    snapshot_file: Optional[Path] = SnapshotOption,
    lifecycle_data: Optional[Path] = LifecycleOption,
):
    """List recommended maintenance windows."""
    try:
        maintenance_windows = _service(
            context, snapshot_file, lifecycle_data
        ).get_maintenance_windows()

        if not maintenance_windows:
            console.print("[green]No maintenance windows needed[/green]")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Date", style="green")
        table.add_column("Priority")
        table.add_column("Reason", style="white")
        table.add_column("Path", style="cyan")
        table.add_column("Duration", style="dim")

        for window in maintenance_windows:
            priority_style = "red" if window.priority.value == "high" else "yellow"
            table.add_row(
                window.recommended_date.strftime("%Y-%m-%d"),
                f"[{priority_style}]{window.priority.value}[/{priority_style}]",
                window.reason,
                window.upgrade_path.id,
                window.estimated_duration,
            )

        console.print(table)

    except Exception as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
