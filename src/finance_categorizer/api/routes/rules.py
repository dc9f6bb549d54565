from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from finance_categorizer.api.dependencies import get_categorizer
from finance_categorizer.api.schemas import LearnRequest
from finance_categorizer.logger import get_logger
from finance_categorizer.manager import Categorizer
from finance_categorizer.models import CategorizationStats

logger = get_logger(__name__)

router = APIRouter()


@router.post("/learn")
async def learn_correction(
    req: LearnRequest,
    categorizer: Annotated[Categorizer, Depends(get_categorizer)],
) -> dict[str, str | int]:
    suggested = categorizer.classify(req.description).category_id
    source = "model" if suggested == req.category_id else "manual"

    logger.info(
        "[LEARN] '%s' -> '%s' (Source: %s)",
        req.description[:50],
        req.category_id,
        source,
    )

    try:
        categorizer.learn(req.description, req.category_id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return {
        "status": "success",
        "message": "Learned from correction",
        "source": source,
        "rules": len(categorizer.rules()),
    }


@router.get("/rules/stats", response_model=CategorizationStats)
async def get_rule_stats(
    categorizer: Annotated[Categorizer, Depends(get_categorizer)],
) -> CategorizationStats:
    return categorizer.stats()


@router.post("/rules/clear")
async def clear_rules(
    categorizer: Annotated[Categorizer, Depends(get_categorizer)],
) -> dict[str, str]:
    categorizer.clear_rules()
    return {"status": "success", "message": "All learned rules cleared"}
