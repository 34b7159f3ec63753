"""
passrotate CLI - run credential-rotation flows from the command line.
"""
from typing import Iterable, Mapping, Optional
import json

from rich.console import Console
from rich.table import Table

from ..automation.flow import Flow
from ..automation.types import RunResult
from ..core.config import resolve_inputs

# Create console for rich output
console = Console()


def print_flow_table(flows: Iterable[Flow], environ: Optional[Mapping[str, str]] = None) -> None:
    """Print the available flows and whether their required inputs are set."""
    table = Table(title="Rotation flows")
    table.add_column("Flow", style="bold")
    table.add_column("Site")
    table.add_column("Required inputs")
    table.add_column("Configured")
    for flow in flows:
        resolved = resolve_inputs(flow.inputs, environ)
        required = ", ".join(spec.describe() for spec in flow.inputs if spec.required)
        configured = "[green]yes[/]" if resolved.ok else f"[red]missing {len(resolved.missing)}[/]"
        table.add_row(flow.name, flow.site, required, configured)
    console.print(table)


def print_flow_inputs(flow: Flow) -> None:
    table = Table(title=f"Inputs for {flow.name}")
    table.add_column("Input", style="bold")
    table.add_column("Environment")
    table.add_column("Required")
    table.add_column("Default")
    table.add_column("Notes", style="dim")
    for spec in flow.inputs:
        default = spec.default or (f"= {spec.fallback}" if spec.fallback else "")
        table.add_row(spec.key, spec.describe(), "yes" if spec.required else "no", default, spec.help)
    console.print(table)


def print_result(result: RunResult, as_json: bool = False) -> None:
    if as_json:
        console.print_json(json.dumps(result.to_dict()))
        return
    if result.success:
        console.print(f"[green]✓[/] {result.message}")
    else:
        console.print(f"[red]✗[/] {result.message}")
    if result.final_url:
        console.print(f"[dim]Final URL: {result.final_url}")
