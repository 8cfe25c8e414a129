"""
Product catalog.

The public listing feeds automations; editing is owner only.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import ConflictError
from app.models.product import Product, ProductStatus, compute_final_price
from app.schemas.common import Pagination
from app.schemas.products import ProductCreate, ProductUpdate, ProductResponse
from app.auth.dependencies import require_auth, require_owner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Products"])


def _get_product(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _page(query, page: int, limit: int) -> Dict[str, Any]:
    total = query.count()
    products = query.order_by(Product.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return {
        "success": True,
        "data": [ProductResponse.model_validate(p) for p in products],
        "pagination": Pagination.build(page, limit, total),
    }


def _status_filter(query, status_value: Optional[str]):
    if status_value and status_value.upper() != "ALL":
        try:
            query = query.filter(Product.status == ProductStatus(status_value.upper()))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid status: {status_value}")
    return query


@router.get("/public/products")
def public_products(
    status_value: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return _page(_status_filter(db.query(Product), status_value), page, limit)


@router.get("/products")
def list_products(
    status_value: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    query = _status_filter(db.query(Product), status_value)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Product.product_name.ilike(pattern),
            Product.brand_name.ilike(pattern),
            Product.product_code.ilike(pattern),
        ))
    return _page(query, page, limit)


@router.get("/product-stats")
def product_stats(db: Session = Depends(get_db), _: Dict[str, Any] = Depends(require_auth)):
    counts = dict(db.query(Product.status, func.count(Product.id)).group_by(Product.status).all())
    stock_value = db.query(func.sum(Product.final_price * Product.stock_quantity)).filter(
        Product.status == ProductStatus.ACTIVE
    ).scalar()
    return {
        "success": True,
        "stats": {
            "totalProducts": sum(counts.values()),
            "activeProducts": counts.get(ProductStatus.ACTIVE, 0),
            "inactiveProducts": counts.get(ProductStatus.INACTIVE, 0),
            "outOfStockProducts": counts.get(ProductStatus.OUT_OF_STOCK, 0),
            "totalStockValue": round(stock_value or 0, 2),
        },
    }


@router.get("/products/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db), _: Dict[str, Any] = Depends(require_auth)):
    return {"success": True, "data": ProductResponse.model_validate(_get_product(db, product_id))}


@router.post("/products", status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_owner),
):
    if db.query(Product).filter(Product.product_code == data.product_code).first():
        raise ConflictError("Product code already exists. Please use a unique product code.")

    product = Product(
        **data.model_dump(),
        final_price=compute_final_price(data.price, data.discount),
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Product %s created (%s)", product.product_code, product.product_name)
    return {"success": True, "message": "Product created successfully", "data": ProductResponse.model_validate(product)}


@router.put("/products/{product_id}")
def update_product(
    product_id: int,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_owner),
):
    product = _get_product(db, product_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    new_code = changes.get("product_code")
    if new_code and new_code != product.product_code:
        if db.query(Product).filter(Product.product_code == new_code).first():
            raise ConflictError("Product code already exists. Please use a unique product code.")

    for field, value in changes.items():
        setattr(product, field, value)
    if "price" in changes or "discount" in changes:
        product.final_price = compute_final_price(product.price, product.discount)

    db.commit()
    db.refresh(product)
    return {"success": True, "message": "Product updated successfully", "data": ProductResponse.model_validate(product)}


@router.delete("/products/{product_id}")
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_owner),
):
    product = _get_product(db, product_id)
    db.delete(product)
    db.commit()
    return {"success": True, "message": "Product deleted successfully"}
