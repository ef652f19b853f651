"""SessionGateway that renders menus and messages on the terminal."""

from __future__ import annotations

from collections.abc import Sequence

import click

from reagent_bank.domain.exceptions import SessionClosedError, ValidationError
from reagent_bank.domain.model.menu import MenuOption
from reagent_bank.domain.port.session_gateway import SessionGateway
from reagent_bank.infrastructure.cli.quality import styled


class ConsoleGateway(SessionGateway):

    def __init__(self) -> None:
        self._options: list[MenuOption] = []
        self._open = False
        self._disconnected = False

    # --- SessionGateway interface ---------------------------------------------

    def render_menu(self, options: Sequence[MenuOption]) -> None:
        self._check_connected()
        self._options = list(options)
        self._open = True
        click.echo()
        for number, option in enumerate(self._options, start=1):
            click.echo(f"  {number:>2}. {styled(option.label, option.quality)}")

    def report_message(self, text: str) -> None:
        self._check_connected()
        click.echo(text)

    def close_menu(self) -> None:
        self._check_connected()
        self._open = False
        self._options = []

    # --- Console helpers ------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._open

    def choose(self, number: int) -> MenuOption:
        if not 1 <= number <= len(self._options):
            raise ValidationError(f"Choose a number between 1 and {len(self._options)}")
        return self._options[number - 1]

    def disconnect(self) -> None:
        self._disconnected = True
        self._open = False

    def _check_connected(self) -> None:
        if self._disconnected:
            raise SessionClosedError("Console session has ended")
