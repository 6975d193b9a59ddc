from enum import Enum
from typing import Any, Optional
import time
import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    GREETINGS = "greetings"
    FOOD = "food"
    DIRECTIONS = "directions"
    SHOPPING = "shopping"
    EMERGENCIES = "emergencies"
    SOCIAL = "social"
    TRANSPORT = "transport"
    NUMBERS = "numbers"
    QUESTIONS = "questions"
    GENERAL = "general"
    # Local fallback for placeholders produced when translation fails
    UNCATEGORIZED = "uncategorized"


def now_ms() -> int:
    return int(time.time() * 1000)


class Phrase(BaseModel):
    """
    A learned phrase. Serialized with camelCase keys.

    Only ``english`` is required so entries written by other clients can be
    read; length limits apply when a phrase is created, not when one is read.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    english: str
    vietnamese: str = ""
    phonetic: str = ""
    category: str = Category.GENERAL.value
    created_at: int = Field(default_factory=now_ms)
    review_count: int = 0
    last_reviewed: Optional[int] = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TranslationResult(BaseModel):
    vietnamese: str
    phonetic: str
    category: str


class PhrasesResponse(BaseModel):
    phrases: list[Any]


class SyncSuccess(BaseModel):
    success: bool = True
