import logging
from pathlib import Path

import click

from reagent_bank.domain.exceptions import DomainException
from reagent_bank.domain.model.config import DEFAULT_PAGE_SIZE, BankConfig
from reagent_bank.infrastructure.bootstrap import build_services
from reagent_bank.infrastructure.cli.bank_commands import (
    bank_browse,
    bank_deposit,
    bank_menu,
    bank_show,
    bank_stock,
    bank_withdraw,
    bank_withdraw_all,
)


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("data"),
    show_default=True,
    envvar="REAGENT_BANK_DATA_DIR",
    help="Directory holding items.json, ledger.json and characters/.",
)
@click.option(
    "--page-size",
    type=int,
    default=DEFAULT_PAGE_SIZE,
    show_default=True,
    envvar="REAGENT_BANK_PAGE_SIZE",
    help="Items per category page.",
)
@click.option(
    "--account-wide/--per-character",
    default=False,
    envvar="REAGENT_BANK_ACCOUNT_WIDE",
    help="Share one bank across every character of the account.",
)
@click.option("--account", "account_id", type=int, default=1, show_default=True)
@click.option("--character", "character_id", type=int, default=1, show_default=True)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar="REAGENT_BANK_LOG_LEVEL",
)
@click.option(
    "--locale",
    default=None,
    envvar="REAGENT_BANK_LOCALE",
    help="Locale for item names, e.g. deDE. Defaults to the English names.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    data_dir: Path,
    page_size: int,
    account_wide: bool,
    account_id: int,
    character_id: int,
    log_level: str,
    locale: str | None,
) -> None:
    """Reagent Bank: store crafting materials per account or character."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    try:
        config = BankConfig(
            page_size=page_size,
            account_wide=account_wide,
            data_dir=data_dir,
            locale=locale,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    services = build_services(config)
    ctx.call_on_close(services.shutdown)
    ctx.obj = {
        "services": services,
        "owner": services.owner_for(account_id, character_id),
        "character_id": character_id,
    }


# Register subcommands
cli.add_command(bank_browse)
cli.add_command(bank_deposit)
cli.add_command(bank_menu)
cli.add_command(bank_show)
cli.add_command(bank_stock)
cli.add_command(bank_withdraw)
cli.add_command(bank_withdraw_all)
