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
"""'rentfly execute-booking' command."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click

from rentfly.app import RentflyApplication
from rentfly.cli.console import console, print_saga_result
from rentfly.core.config import Config
from rentfly.kernel.exceptions import UpstreamHttpException, ValidationException
from rentfly.logging.structlog_adapter import StructlogAdapter
from rentfly.saga.result import SagaResult


def load_config(config_path: str | None, profiles: tuple[str, ...]) -> Config:
    """Config from *config_path*, or from the usual locations under the working directory."""
    if config_path is not None:
        return Config.from_file(config_path, active_profiles=list(profiles))
    return Config.from_sources(Path.cwd(), active_profiles=list(profiles))


async def _run(config: Config, country: str, branch: str) -> SagaResult:
    async with RentflyApplication.from_config(config) as app:
        return await app.booking_service.run(country, branch)


@click.command()
@click.option("--country", required=True, help="Operational country name, e.g. 'Saudi Arabia'.")
@click.option("--branch", required=True, help="Branch display name within the country.")
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False), help="Configuration file.")
@click.option("--profile", "profiles", multiple=True, help="Active profile (repeatable).")
@click.option("--json", "as_json", is_flag=True, help="Print the final envelope as JSON only.")
def execute_booking_command(
    country: str,
    branch: str,
    config_path: str | None,
    profiles: tuple[str, ...],
    as_json: bool,
) -> None:
    """Create a customer and a booking, then execute the booking."""
    try:
        config = load_config(config_path, profiles)
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    StructlogAdapter().configure(config)

    try:
        result = asyncio.run(_run(config, country, branch))
    except ValidationException as exc:
        raise click.BadParameter(exc.message) from exc

    if as_json:
        if result.final_envelope is not None:
            click.echo(json.dumps(result.final_envelope.to_wire(), indent=2))
    else:
        print_saga_result(result)

    if result.error is not None:
        if isinstance(result.error, UpstreamHttpException) and as_json:
            click.echo(result.error.body, err=True)
        raise SystemExit(1)
