# o2o_shop/models/shop.py
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


class ShopCategory(SQLModel, table=True):
    """
    Category a shop is listed under.

    Top-level categories have no parent; they are the ones shown
    on the front-end landing page.
    """

    __tablename__ = "tb_shop_category"

    shop_category_id: int | None = Field(default=None, primary_key=True)

    shop_category_name: str = Field(max_length=100, index=True)
    shop_category_desc: str | None = Field(default=None, max_length=1000)
    shop_category_img: str | None = Field(default=None, max_length=2000)

    priority: int = Field(default=0, description="Higher shows first")

    parent_id: int | None = Field(
        default=None,
        foreign_key="tb_shop_category.shop_category_id",
        index=True,
        description="NULL for top-level categories",
    )

    create_time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
    last_edit_time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )


class Shop(SQLModel, table=True):
    """
    A merchant's shop. Products and their images belong to exactly one shop.
    """

    __tablename__ = "tb_shop"

    shop_id: int | None = Field(default=None, primary_key=True)

    owner_id: int | None = Field(default=None, index=True)

    shop_category_id: int | None = Field(
        default=None,
        foreign_key="tb_shop_category.shop_category_id",
        index=True,
    )

    shop_name: str = Field(max_length=256)
    shop_desc: str | None = Field(default=None, max_length=1024)
    shop_addr: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=128)
    shop_img: str | None = Field(default=None, max_length=1024)

    priority: int = 0

    # -1: not approved, 0: under review, 1: approved
    enable_status: int = Field(default=0, index=True)
    advice: str | None = Field(default=None, max_length=255)

    create_time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
    last_edit_time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
