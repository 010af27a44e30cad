from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from ..core.database import get_db
from ..schemas.pricing import QuoteRequest, QuoteResponse, RentalWindow
from ..models.product import Product
from ..services.pricing import RateTable, calculate_price

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/quote", response_model=QuoteResponse)
def quote(payload: QuoteRequest):
    """Price a rental window against an inline rate table."""
    rates = RateTable(**payload.rates.model_dump())
    result = calculate_price(payload.start, payload.end, payload.quantity, rates)
    return QuoteResponse(**asdict(result))


@router.post("/products/{product_id}/quote", response_model=QuoteResponse)
def quote_product(product_id: int, payload: RentalWindow, db: Session = Depends(get_db)):
    """Price a rental window for a stored product. Unpriceable windows return 422."""
    product = db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    if not product.is_rentable:
        raise HTTPException(status_code=409, detail="Product is not available for rent")

    result = calculate_price(payload.start, payload.end, payload.quantity, product.rate_table())
    return QuoteResponse(**asdict(result), product_id=product.id)
