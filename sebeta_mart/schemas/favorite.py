from pydantic import BaseModel, Field, AliasChoices
from typing import Optional


class FavoriteRequest(BaseModel):
    # Support both product_id and productId
    product_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("product_id", "productId"))
