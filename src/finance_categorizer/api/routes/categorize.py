from typing import Annotated

from fastapi import APIRouter, Depends, Query

from finance_categorizer.api.dependencies import get_categorizer
from finance_categorizer.api.schemas import BatchRequest, CategorizeRequest, SuggestRequest
from finance_categorizer.manager import Categorizer
from finance_categorizer.models import CategorizationResult, CategorizedTransaction
from finance_categorizer.services.samples import generate_sample_transactions

router = APIRouter()


@router.post("/categorize", response_model=CategorizationResult)
async def categorize_description(
    req: CategorizeRequest,
    categorizer: Annotated[Categorizer, Depends(get_categorizer)],
) -> CategorizationResult:
    return categorizer.classify(req.description)


@router.post("/suggest")
async def suggest_categories(
    req: SuggestRequest,
    categorizer: Annotated[Categorizer, Depends(get_categorizer)],
) -> list[str]:
    return categorizer.suggest_categories(req.description, limit=req.limit)


@router.post("/categorize/batch", response_model=list[CategorizedTransaction])
async def categorize_batch(
    req: BatchRequest,
    categorizer: Annotated[Categorizer, Depends(get_categorizer)],
) -> list[CategorizedTransaction]:
    return categorizer.classify_all(req.transactions)


@router.get("/taxonomy")
async def get_taxonomy(
    categorizer: Annotated[Categorizer, Depends(get_categorizer)],
) -> dict[str, list[str]]:
    return categorizer.taxonomy.as_dict()


@router.get("/samples", response_model=list[CategorizedTransaction])
async def get_samples(
    categorizer: Annotated[Categorizer, Depends(get_categorizer)],
    months: Annotated[int, Query(ge=1, le=24)] = 3,
) -> list[CategorizedTransaction]:
    samples = generate_sample_transactions(months=months, locale=categorizer.locale)
    return categorizer.classify_all(samples)
