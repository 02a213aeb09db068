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
"""'rentfly config' command: show the effective configuration."""

from __future__ import annotations

from typing import Any

import click
from rich.table import Table

from rentfly.cli.console import console
from rentfly.cli.execute import load_config

_SECRET_MARKERS = ("password", "secret")


def flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Dotted keys for every leaf of *data*."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict) and value:
            flat.update(flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat


def _masked(key: str, value: Any) -> str:
    if any(marker in key.lower() for marker in _SECRET_MARKERS):
        return "******"
    return str(value)


@click.command()
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False), help="Configuration file.")
@click.option("--profile", "profiles", multiple=True, help="Active profile (repeatable).")
def config_command(config_path: str | None, profiles: tuple[str, ...]) -> None:
    """Display the merged configuration and where it came from."""
    try:
        config = load_config(config_path, profiles)
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc

    sources = Table(title="Sources", show_header=False, border_style="dim")
    sources.add_column("Source", style="info")
    for source in config.loaded_sources:
        sources.add_row(source)
    console.print(sources)

    values = Table(title="\nEffective configuration", border_style="dim")
    values.add_column("Key", style="info")
    values.add_column("Value")
    for key, value in sorted(flatten(config.to_dict()).items()):
        values.add_row(key, _masked(key, config.get(key, value)))
    console.print(values)
