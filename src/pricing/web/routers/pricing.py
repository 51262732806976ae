"""Live quote endpoint."""

from fastapi import APIRouter

from pricing.web.dependencies import QuoteCommandDep
from pricing.web.schemas.requests import QuoteRequestBody
from pricing.web.schemas.responses import QuoteSchema

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/calculate", response_model=QuoteSchema)
def calculate_quote(
    body: QuoteRequestBody,
    command: QuoteCommandDep,
) -> QuoteSchema:
    """Quote a product configuration.

    Args:
        body: Product slug and requested configuration.
        command: Injected QuoteProductCommand.

    Returns:
        Total, display unit price and itemized breakdown.

    Raises:
        NotFoundError: Unknown or inactive slug (404).
        ValidationError: Malformed request (400).
        ConfigError: Product cannot be quoted from stored data (400).
    """
    quote = command.execute(body.to_domain())
    return QuoteSchema.model_validate(quote.to_dict())
