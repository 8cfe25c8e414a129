# Database models
from .base import Base
from .admin import Admin, AdminRole
from .admin_activity import AdminActivity
from .webhook import WebhookConfig, WebhookType
from .reaction import Reaction, ReactionType
from .comment import Comment
from .order import Order, OrderStatus
from .product import Product, ProductStatus
from .user_ban import UserBan, BanType

__all__ = [
    "Base",
    "Admin",
    "AdminRole",
    "AdminActivity",
    "WebhookConfig",
    "WebhookType",
    "Reaction",
    "ReactionType",
    "Comment",
    "Order",
    "OrderStatus",
    "Product",
    "ProductStatus",
    "UserBan",
    "BanType",
]
