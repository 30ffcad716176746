#app/schemas/comment.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime

from app.schemas.user import UserDetail

class CommentCreate(BaseModel):
    """
    CommentCreate — тело запроса на добавление комментария.
    """
    model_config = ConfigDict(extra="forbid")

    text: str = Field(..., examples=["draft done"], description="Текст комментария")

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment text is required")
        return v

class CommentRead(BaseModel):
    """
    CommentRead — комментарий с раскрытым автором.
    """
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    user: UserDetail
    text: str
    created_at: datetime
