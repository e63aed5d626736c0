import click

from promo.infrastructure.bootstrap import configure_logging, settings
from promo.infrastructure.cli.offer_commands import (
    offer_add,
    offer_best,
    offer_list,
    offer_validate,
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log engine decisions.")
def cli(verbose: bool) -> None:
    """PROMO: Promotional Offer Engine"""
    configure_logging("DEBUG" if verbose else settings().LOG_LEVEL)


@cli.group()
def offer() -> None:
    """Evaluate and manage offers."""


# Register subcommands
offer.add_command(offer_add)
offer.add_command(offer_best)
offer.add_command(offer_list)
offer.add_command(offer_validate)
