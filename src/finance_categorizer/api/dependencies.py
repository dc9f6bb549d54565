from fastapi import HTTPException, Request

from finance_categorizer.manager import Categorizer


def get_categorizer(request: Request) -> Categorizer:
    categorizer = getattr(request.app.state, "categorizer", None)
    if not categorizer:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return categorizer
