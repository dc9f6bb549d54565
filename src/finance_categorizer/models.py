from datetime import date, datetime, timezone
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CategorizationMethod = Literal["exact", "fuzzy", "learned"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_transaction_id() -> str:
    return f"tx_{uuid4().hex[:12]}"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Transaction(CamelModel):
    id: str = Field(default_factory=new_transaction_id)
    date: date
    description: str
    amount: float
    category: str = ""
    account: str = ""
    is_manual: bool = False


class CategorizationRule(CamelModel):
    keyword: str # always lower-case
    category_id: str = Field(min_length=1)
    confidence: float = Field(ge=0.0, le=1.0)
    usage_count: int = Field(ge=1)
    last_used: datetime


class CategorizationResult(CamelModel):
    category_id: str
    confidence: float # 0.0 to 1.0
    matched_keywords: list[str] = Field(default_factory=list)
    method: CategorizationMethod


class CategorizedTransaction(Transaction):
    category_id: str
    confidence: float
    matched_keywords: list[str] = Field(default_factory=list)
    method: CategorizationMethod

    @classmethod
    def merge(
        cls, transaction: Transaction, result: CategorizationResult
    ) -> "CategorizedTransaction":
        return cls(**transaction.model_dump(), **result.model_dump())


class KeywordUsage(CamelModel):
    keyword: str
    usage_count: int


class CategorizationStats(CamelModel):
    total_rules: int = 0
    rules_by_category: dict[str, int] = Field(default_factory=dict)
    average_confidence: float = 0.0
    most_used_keywords: list[KeywordUsage] = Field(default_factory=list)
