"""CLI commands for the Offer aggregate."""

from __future__ import annotations

import click

from promo.application.add_offer import AddOfferHandler
from promo.application.dto import CartItemSpec
from promo.application.find_best_offer import FindBestOfferHandler
from promo.application.list_active_offers import ListActiveOffersHandler
from promo.application.validate_coupon import ValidateCouponHandler
from promo.domain.exceptions import DomainException
from promo.domain.model.offer import OfferType
from promo.infrastructure.bootstrap import offer_repository, settings


def _parse_cart(raw: str) -> list[CartItemSpec]:
    """Parse 'p1:shoes:1200:2,p2::300:1' into CartItemSpec list."""
    specs: list[CartItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = entry.split(":")
        if len(parts) != 4:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductId:Category:Price:Qty'."
            )
        product_id, category, price, qty_str = (p.strip() for p in parts)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(
            CartItemSpec(
                product_id=product_id or None,
                category=category or None,
                price=price,
                quantity=qty,
            )
        )
    return specs


def _split_list(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@click.command("list")
def offer_list() -> None:
    """List offers that are live right now."""
    config = settings()
    handler = ListActiveOffersHandler(
        offer_repo=offer_repository(config), limit=config.ACTIVE_OFFERS_LIMIT
    )
    dtos = handler.handle()

    if not dtos:
        click.echo("No active offers.")
        return

    click.echo(f"  {'ID':<5} {'Name':<24} {'Code':<14} {'Type':<14} {'Prio':>4}  {'Ends'}")
    click.echo(f"  {'-'*80}")
    for dto in dtos:
        click.echo(
            f"  {dto.id:<5} {dto.name:<24} {dto.code or '-':<14} {dto.type:<14} "
            f"{dto.priority:>4}  {dto.time_left}"
        )


@click.command("add")
@click.option("--name", required=True, help="Offer name shown to customers.")
@click.option(
    "--type", "offer_type", required=True,
    type=click.Choice([t.value for t in OfferType]), help="Discount model.",
)
@click.option("--value", default="0", help="Percent for 'percentage', amount for 'fixed'.")
@click.option("--start", "start_date", required=True, help="ISO start timestamp.")
@click.option("--end", "end_date", required=True, help="ISO end timestamp.")
@click.option("--description", default="", help="Longer description.")
@click.option("--buy", "buy_quantity", default=1, type=int, help="Buy quantity (buy-x-get-y).")
@click.option("--get", "get_quantity", default=1, type=int, help="Free quantity (buy-x-get-y).")
@click.option("--all", "apply_to_all", is_flag=True, default=False, help="Apply to the whole cart.")
@click.option("--products", default=None, help="Comma-separated product IDs.")
@click.option("--categories", default=None, help="Comma-separated categories.")
@click.option("--min-purchase", default="0", help="Minimum cart total.")
@click.option("--max-discount", default=None, help="Cap on the discount.")
@click.option("--code", default=None, help="Coupon code.")
@click.option("--generate-code", is_flag=True, default=False, help="Generate a random code.")
@click.option("--usage-limit", default=None, type=int, help="Maximum redemptions.")
@click.option("--priority", default=0, type=int, help="Ordering in the offers feed.")
def offer_add(
    name: str,
    offer_type: str,
    value: str,
    start_date: str,
    end_date: str,
    description: str,
    buy_quantity: int,
    get_quantity: int,
    apply_to_all: bool,
    products: str | None,
    categories: str | None,
    min_purchase: str,
    max_discount: str | None,
    code: str | None,
    generate_code: bool,
    usage_limit: int | None,
    priority: int,
) -> None:
    """Add an offer to the catalog."""
    config = settings()
    handler = AddOfferHandler(offer_repo=offer_repository(config), currency=config.CURRENCY)

    try:
        dto = handler.handle(
            name=name,
            offer_type=offer_type,
            value=value,
            start_date=start_date,
            end_date=end_date,
            description=description,
            buy_quantity=buy_quantity,
            get_quantity=get_quantity,
            apply_to_all=apply_to_all,
            products=_split_list(products),
            categories=_split_list(categories),
            min_purchase=min_purchase,
            max_discount=max_discount,
            code=code,
            generate_code=generate_code,
            usage_limit=usage_limit,
            priority=priority,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Offer #{dto.id} '{dto.name}' added  (type={dto.type})")
    if dto.code:
        click.echo(f"Code: {dto.code}")
    click.echo(f"Ends: {dto.ends_at}  ({dto.time_left})")


@click.command("best")
@click.option("--items", required=True, help="Cart as 'ProductId:Category:Price:Qty,...'.")
@click.option("--total", "cart_total", default=None, help="Cart total (defaults to the item sum).")
def offer_best(items: str, cart_total: str | None) -> None:
    """Show the offer auto-apply would pick for a cart."""
    specs = _parse_cart(items)
    config = settings()
    handler = FindBestOfferHandler(offer_repo=offer_repository(config), currency=config.CURRENCY)

    try:
        dto = handler.handle(specs, cart_total=cart_total)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto is None:
        click.echo("No offer applies to this cart.")
        return

    click.echo(f"Best deal: {dto.name}  (offer #{dto.offer_id}, {dto.type})")
    if dto.code:
        click.echo(f"Code:      {dto.code}")
    click.echo(f"You save:  {dto.discount}")


@click.command("validate")
@click.option("--code", required=True, help="Coupon code entered by the customer.")
@click.option("--items", required=True, help="Cart as 'ProductId:Category:Price:Qty,...'.")
@click.option("--total", "cart_total", default=None, help="Cart total (defaults to the item sum).")
def offer_validate(code: str, items: str, cart_total: str | None) -> None:
    """Validate a coupon code against a cart."""
    specs = _parse_cart(items)
    config = settings()
    handler = ValidateCouponHandler(offer_repo=offer_repository(config), currency=config.CURRENCY)

    try:
        dto = handler.handle(code, specs, cart_total=cart_total)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(dto.message)
    click.echo(f"  {'Cart Total':<14} {dto.cart_total:>14}")
    click.echo(f"  {'Discount':<14} {dto.discount:>14}")
    click.echo(f"  {'-'*29}")
    click.echo(f"  {'To Pay':<14} {dto.final_total:>14}")
    if dto.free_shipping:
        click.echo("  Shipping is free with this offer.")
