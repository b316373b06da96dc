from fastapi import APIRouter

from ..config import settings
from ..pricing_engine import PricingEngine, display_breakdown
from ..rates import rate_table
from ..schemas import JobInput, QuoteResponse

router = APIRouter(prefix="/quotes", tags=["quotes"])

# Singleton engine: no state
engine = PricingEngine()


@router.post("/calculate", response_model=QuoteResponse)
def calculate_quote(job: JobInput):
    """Stateless price breakdown for one set of job parameters."""
    price = engine.compute_quote(job)
    return {
        "job": job,
        "price": price,
        "priority": engine.priority_label(job.urgency),
        "display": display_breakdown(price, settings.CURRENCY_SYMBOL),
    }


@router.get("/rates")
def get_rates():
    return rate_table()
