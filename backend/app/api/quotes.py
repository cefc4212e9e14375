import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import select

from app.api.pricing import CalculateRequest, get_price_engine
from app.db.session import get_session
from app.models.quote import DesignQuote
from app.services.pricing import PriceEngine

logger = logging.getLogger(__name__)
router = APIRouter()


class QuoteRequest(CalculateRequest):
    design_id: str


def _quote_dict(quote: DesignQuote) -> Dict[str, Any]:
    return {
        "id": quote.id,
        "designId": quote.design_id,
        "quantity": quote.quantity,
        "totalAdditionalPrice": quote.total_additional_price,
        "summary": json.loads(quote.summary),
        "createdAt": quote.created_at.isoformat(),
    }


@router.post("", status_code=201)
async def create_quote(req: QuoteRequest, engine: PriceEngine = Depends(get_price_engine)):
    """Price a design and store the result."""
    summary = engine.calculate(req.sides, req.canvases, req.quantity, req.print_methods)

    session = get_session()
    try:
        quote = DesignQuote(
            design_id=req.design_id,
            quantity=req.quantity,
            total_additional_price=summary.total_additional_price,
            summary=summary.model_dump_json(by_alias=True),
        )
        session.add(quote)
        session.commit()
        session.refresh(quote)
        logger.info("Stored quote id=%s design_id=%s total=%s",
                    quote.id, quote.design_id, quote.total_additional_price)
        return _quote_dict(quote)
    except Exception as e:
        session.rollback()
        logger.exception("Failed to store quote for design_id=%s: %s", req.design_id, e)
        raise HTTPException(status_code=500, detail="Failed to store quote")
    finally:
        session.close()


@router.get("/{quote_id}")
async def get_quote(quote_id: int):
    session = get_session()
    try:
        quote = session.get(DesignQuote, quote_id)
        if quote is None:
            raise HTTPException(status_code=404, detail="quote not found")
        return _quote_dict(quote)
    finally:
        session.close()


@router.get("")
async def list_quotes(design_id: Optional[str] = None) -> List[Dict[str, Any]]:
    session = get_session()
    try:
        query = select(DesignQuote).order_by(DesignQuote.id)
        if design_id is not None:
            query = query.where(DesignQuote.design_id == design_id)
        return [_quote_dict(q) for q in session.exec(query).all()]
    finally:
        session.close()
