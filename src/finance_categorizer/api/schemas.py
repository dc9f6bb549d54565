from pydantic import Field

from finance_categorizer.models import CamelModel, Transaction


class CategorizeRequest(CamelModel):
    description: str


class SuggestRequest(CamelModel):
    description: str
    limit: int = Field(default=3, ge=1, le=20)


class LearnRequest(CamelModel):
    description: str = Field(min_length=1)
    category_id: str = Field(min_length=1)


class BatchRequest(CamelModel):
    transactions: list[Transaction]
