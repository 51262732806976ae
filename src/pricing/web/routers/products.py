"""Catalog listing endpoints."""

from fastapi import APIRouter

from pricing.web.dependencies import FromPriceCommandDep
from pricing.web.schemas.responses import FromPriceSchema

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/{slug}/from-price", response_model=FromPriceSchema)
def get_from_price(slug: str, command: FromPriceCommandDep) -> FromPriceSchema:
    """Resolve the "starting from" price shown on listing pages.

    Never fails because of bad pricing data; a product with nothing to show
    returns ``fromPriceCents: 0`` and a null source.
    """
    from_price = command.execute(slug)
    return FromPriceSchema(
        slug=slug, from_price_cents=from_price.cents, source=from_price.source
    )
