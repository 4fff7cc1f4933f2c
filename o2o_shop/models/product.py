# o2o_shop/models/product.py
from datetime import datetime, timezone
from enum import IntEnum

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


class ProductStatus(IntEnum):
    """Visibility of a product on the storefront."""

    DOWN = 0
    UP = 1


class ProductCategory(SQLModel, table=True):
    """
    Shop-defined grouping of products (e.g. "Drinks", "Desserts").
    """

    __tablename__ = "tb_product_category"

    product_category_id: int | None = Field(default=None, primary_key=True)

    shop_id: int = Field(foreign_key="tb_shop.shop_id", index=True)

    product_category_name: str = Field(max_length=100)
    priority: int = 0

    create_time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    - shop_id is mandatory before the row can be persisted.
    - img_addr is the thumbnail path relative to the image base dir.
    - create_time / last_edit_time are stamped by ProductService.
    """

    __tablename__ = "tb_product"

    product_id: int | None = Field(default=None, primary_key=True)

    shop_id: int | None = Field(
        default=None,
        foreign_key="tb_shop.shop_id",
        index=True,
    )

    product_category_id: int | None = Field(
        default=None,
        foreign_key="tb_product_category.product_category_id",
        index=True,
    )

    product_name: str | None = Field(default=None, max_length=100, index=True)
    product_desc: str | None = Field(default=None, max_length=2000)

    img_addr: str | None = Field(
        default=None,
        max_length=2000,
        description="Thumbnail path",
    )

    normal_price: str | None = Field(default=None, max_length=100)
    promotion_price: str | None = Field(default=None, max_length=100)

    priority: int | None = Field(default=None, description="Higher shows first")

    enable_status: int | None = Field(
        default=None,
        index=True,
        description="ProductStatus: 1 up, 0 down",
    )

    create_time: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    last_edit_time: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))


class ProductImage(SQLModel, table=True):
    """
    Gallery ("detail") image of a product. Ordering is not significant.
    """

    __tablename__ = "tb_product_img"

    product_img_id: int | None = Field(default=None, primary_key=True)

    product_id: int = Field(
        foreign_key="tb_product.product_id",
        index=True,
    )

    img_addr: str = Field(max_length=2000, description="Stored image path")
    img_desc: str | None = Field(default=None, max_length=2000)
    priority: int | None = None

    create_time: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
