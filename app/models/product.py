import enum
from sqlalchemy import Column, Integer, String, Text, Float, Enum

from .base import Base, TimestampMixin


class ProductStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    OUT_OF_STOCK = "OUT_OF_STOCK"


def compute_final_price(price: float, discount: float) -> float:
    """Price after a percentage discount, rounded to cents"""
    return round(price - (price * discount / 100), 2)


class Product(TimestampMixin, Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    product_name = Column(String(255), nullable=False)
    brand_name = Column(String(255), nullable=True)
    short_description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    discount = Column(Float, nullable=False, default=0)
    final_price = Column(Float, nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    product_code = Column(String(100), unique=True, nullable=False, index=True)
    status = Column(Enum(ProductStatus), nullable=False, default=ProductStatus.ACTIVE, index=True)
