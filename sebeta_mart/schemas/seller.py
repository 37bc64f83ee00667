from pydantic import BaseModel
from typing import Optional, Any


class SellerCreate(BaseModel):
    shop_name: Optional[str] = None
    shop_description: Optional[str] = None
    shop_address: Optional[str] = None
    business_license: Optional[str] = None
    government_id: Optional[str] = None
    national_id_number: Optional[str] = None


class SellerUpdate(SellerCreate):
    pass


class SellerVerify(BaseModel):
    # Checked for a real boolean in the endpoint; "true" strings are rejected
    verify: Optional[Any] = None
