from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from app.models.product import ProductStatus


class ProductCreate(BaseModel):
    product_name: str = Field(..., min_length=1, max_length=255)
    brand_name: Optional[str] = Field(None, max_length=255)
    short_description: Optional[str] = None
    price: float = Field(..., ge=0)
    discount: float = Field(0, ge=0, le=100)
    stock_quantity: int = Field(0, ge=0)
    product_code: str = Field(..., min_length=1, max_length=100)
    status: ProductStatus = ProductStatus.ACTIVE


class ProductUpdate(BaseModel):
    product_name: Optional[str] = Field(None, min_length=1, max_length=255)
    brand_name: Optional[str] = Field(None, max_length=255)
    short_description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0, le=100)
    stock_quantity: Optional[int] = Field(None, ge=0)
    product_code: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[ProductStatus] = None


class ProductResponse(BaseModel):
    id: int
    product_name: str
    brand_name: Optional[str] = None
    short_description: Optional[str] = None
    price: float
    discount: float
    final_price: float
    stock_quantity: int
    product_code: str
    status: ProductStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
