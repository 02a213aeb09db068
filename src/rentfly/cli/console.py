# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Shared Rich console for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from rentfly.kernel.exceptions import UpstreamHttpException
from rentfly.saga.result import SagaResult, StepStatus

RENTFLY_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "rentfly": "bold magenta",
    "dim": "dim",
})

console = Console(theme=RENTFLY_THEME)

_STATUS_STYLES = {
    StepStatus.DONE: "success",
    StepStatus.SKIPPED: "dim",
    StepStatus.FAILED: "warning",
}


def print_banner() -> None:
    """Print the Rentfly name and version."""
    from rentfly import __version__

    console.print(f"[rentfly]Rentfly[/rentfly] [dim]:: Rentey booking automation :: (v{__version__})[/dim]\n")


def print_saga_result(result: SagaResult) -> None:
    """Print one row per executed step, then the overall outcome."""
    table = Table(title=f"[rentfly]{result.saga_name}[/rentfly]", border_style="dim")
    table.add_column("Step", style="bold")
    table.add_column("Status")
    table.add_column("Latency (ms)", justify="right")
    table.add_column("Detail", style="dim")

    for name, outcome in result.steps.items():
        style = _STATUS_STYLES[outcome.status]
        if outcome.error is not None:
            style = "error" if result.error is outcome.error else style
            detail = escape(f"{outcome.error.code}: {outcome.error.message}")
        elif outcome.missing:
            detail = escape("missing " + ", ".join(outcome.missing))
        else:
            detail = ""
        table.add_row(name, f"[{style}]{outcome.status}[/{style}]", f"{outcome.latency_ms:.1f}", detail)

    console.print(table)
    console.print(f"  [dim]correlation id: {result.correlation_id}[/dim]")
    if result.success:
        console.print("  [success]Booking executed.[/success]\n")
        if result.final_envelope is not None:
            console.print_json(data=result.final_envelope.to_wire())
        return

    error = result.error
    console.print(f"  [error]Aborted at {error.step}: {escape(error.message)}[/error]")
    console.print(f"  [dim]code: {error.code}[/dim]")
    if isinstance(error, UpstreamHttpException) and error.body:
        console.print(error.body, markup=False, highlight=False)
    console.print()
