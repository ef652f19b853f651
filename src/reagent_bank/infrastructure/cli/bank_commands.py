"""CLI commands for the reagent bank."""

from __future__ import annotations

import click

from reagent_bank.application.dto import TransferReport
from reagent_bank.application.session import BankSession
from reagent_bank.domain.exceptions import DomainException, EntityNotFoundError
from reagent_bank.domain.model.category import Category
from reagent_bank.domain.model.item import ItemDefinition
from reagent_bank.infrastructure.bootstrap import BankServices
from reagent_bank.infrastructure.cli.console_gateway import ConsoleGateway
from reagent_bank.infrastructure.cli.quality import styled


def _services(ctx: click.Context) -> BankServices:
    return ctx.obj["services"]


def _locale(ctx: click.Context) -> str | None:
    return _services(ctx).config.locale


def _parse_category(raw: str | None) -> Category | None:
    if raw is None:
        return None
    try:
        return Category.from_name(raw)
    except DomainException as exc:
        raise click.BadParameter(str(exc))


def _resolve_item(services: BankServices, raw: str) -> ItemDefinition:
    """Accept an item id or an exact (case-insensitive) item name."""
    definition = (
        services.catalog.lookup(int(raw)) if raw.isdigit() else services.catalog.find_by_name(raw)
    )
    if definition is None:
        raise EntityNotFoundError(f"Item not found: '{raw}'")
    return definition


def _echo_report(report: TransferReport) -> None:
    for message in report.messages:
        click.echo(message)


@click.command("deposit")
@click.option("--category", default=None, help="Only deposit this category (e.g. 'Cloth').")
@click.pass_context
def bank_deposit(ctx: click.Context, category: str | None) -> None:
    """Deposit every reagent the character carries."""
    services = _services(ctx)
    inventory = services.character_inventory(ctx.obj["character_id"])

    try:
        report = services.deposit.handle(
            ctx.obj["owner"], inventory, _parse_category(category), _locale(ctx)
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_report(report)


@click.command("withdraw")
@click.option("--item", required=True, help="Item id or name.")
@click.option(
    "--mode",
    type=click.Choice(["one", "stack", "all"], case_sensitive=False),
    default="all",
    show_default=True,
    help="A single unit, one stack, or everything stored.",
)
@click.pass_context
def bank_withdraw(ctx: click.Context, item: str, mode: str) -> None:
    """Withdraw one unit, one stack or all of a reagent."""
    services = _services(ctx)
    inventory = services.character_inventory(ctx.obj["character_id"])
    owner = ctx.obj["owner"]

    try:
        definition = _resolve_item(services, item)
        operation = {
            "one": services.withdraw.withdraw_one,
            "stack": services.withdraw.withdraw_stack,
            "all": services.withdraw.withdraw_all_of_item,
        }[mode.lower()]
        report = operation(owner, inventory, definition.item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_report(report)


@click.command("withdraw-all")
@click.option("--category", default=None, help="Only withdraw this category.")
@click.pass_context
def bank_withdraw_all(ctx: click.Context, category: str | None) -> None:
    """Withdraw every stored reagent, or every reagent of one category."""
    services = _services(ctx)
    inventory = services.character_inventory(ctx.obj["character_id"])
    owner = ctx.obj["owner"]
    parsed = _parse_category(category)

    try:
        if parsed is None:
            report = services.withdraw.withdraw_everything(owner, inventory)
        else:
            report = services.withdraw.withdraw_category(owner, inventory, parsed)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_report(report)


@click.command("browse")
@click.option("--category", required=True, help="Category to list.")
@click.option("--page", default=1, show_default=True, type=int, help="Page number (1-based).")
@click.pass_context
def bank_browse(ctx: click.Context, category: str, page: int) -> None:
    """List one page of a category."""
    services = _services(ctx)
    dto = services.browse.handle(
        ctx.obj["owner"], _parse_category(category), page - 1, _locale(ctx)
    )

    click.echo(
        f"{dto.label}: {dto.total_types} types, {dto.total_quantity} total  "
        f"(page {dto.page_index + 1}/{dto.total_pages})"
    )
    if not dto.lines:
        click.echo("Nothing stored in this category.")
        return
    click.echo(f"{'ID':<8} {'Reagent':<30} {'Qty':>8}")
    click.echo("-" * 48)
    for line in dto.lines:
        name = styled(f"{line.name:<30}", line.quality)
        click.echo(f"{line.item_id:<8} {name} {line.quantity:>8}")


@click.command("show")
@click.pass_context
def bank_show(ctx: click.Context) -> None:
    """Show every stored reagent."""
    services = _services(ctx)
    lines = services.show_ledger.handle(ctx.obj["owner"], _locale(ctx))

    if not lines:
        click.echo("The reagent bank is empty.")
        return

    click.echo(f"{'Category':<20} {'ID':<8} {'Reagent':<30} {'Qty':>8}")
    click.echo("-" * 69)
    for line in lines:
        name = styled(f"{line.name:<30}", line.quality)
        click.echo(f"{line.category:<20} {line.item_id:<8} {name} {line.quantity:>8}")


@click.command("stock")
@click.option("--item", required=True, help="Item id or name.")
@click.option("--count", required=True, type=int, help="How many to put in the bags.")
@click.pass_context
def bank_stock(ctx: click.Context, item: str, count: int) -> None:
    """Put items into the character's bags (for trying the bank out)."""
    services = _services(ctx)
    inventory = services.character_inventory(ctx.obj["character_id"])

    try:
        definition = _resolve_item(services, item)
        if not inventory.check_capacity(definition.item_id, count, definition.max_stack_size):
            raise click.ClickException(f"Not enough bag space for {count} x {definition.name}.")
        inventory.add_stack(definition.item_id, count, definition.max_stack_size)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Added {count} x {definition.name} to character #{ctx.obj['character_id']}.")


@click.command("menu")
@click.pass_context
def bank_menu(ctx: click.Context) -> None:
    """Talk to the reagent banker (interactive menu)."""
    services = _services(ctx)
    gateway = ConsoleGateway()
    session = BankSession(
        owner=ctx.obj["owner"],
        inventory=services.character_inventory(ctx.obj["character_id"]),
        gateway=gateway,
        locale=_locale(ctx),
    )

    services.menu.hello(session)
    while gateway.is_open:
        number = click.prompt("Choose (0 to leave)", type=int, default=0)
        if number == 0:
            gateway.disconnect()
            break
        try:
            option = gateway.choose(number)
            services.menu.select(session, option).result()
        except DomainException as exc:
            click.echo(f"Error: {exc}", err=True)
    click.echo("Goodbye.")
