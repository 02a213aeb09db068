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
"""Rentfly CLI: run the booking flow against a Rentey platform."""

from __future__ import annotations

import click

from rentfly.cli.console import print_banner


class RentflyCLI(click.Group):
    """Click group that shows the Rentfly banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


@click.group(cls=RentflyCLI)
@click.version_option(package_name="rentfly")
def cli() -> None:
    """Rentfly: Rentey booking automation CLI."""


from rentfly.cli.execute import execute_booking_command  # noqa: E402
from rentfly.cli.show_config import config_command  # noqa: E402

cli.add_command(execute_booking_command, name="execute-booking")
cli.add_command(config_command, name="config")
