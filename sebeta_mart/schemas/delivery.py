from pydantic import BaseModel
from typing import Optional


class ProfileStatusUpdate(BaseModel):
    status: Optional[str] = None
