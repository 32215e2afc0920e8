from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class BookCondition(str, Enum):
    like_new = "like-new"
    good = "good"
    fair = "fair"
    poor = "poor"


class Book(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    author: str = Field(index=True)
    isbn: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    condition: BookCondition = BookCondition.good

    created_at: datetime = Field(default_factory=datetime.utcnow)
