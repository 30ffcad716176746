#app/schemas/category.py
from pydantic import BaseModel, ConfigDict
from typing import Optional

class CategorySummary(BaseModel):
    """
    CategorySummary — проекция категории внутри задачи.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None
