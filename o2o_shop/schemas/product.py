# o2o_shop/schemas/product.py
from datetime import datetime
from enum import IntEnum

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from o2o_shop.models.product import Product, ProductStatus


class ProductStateEnum(IntEnum):
    """
    Outcome code of a product service call.
    """

    SUCCESS = 1
    FAILURE = -1001
    EMPTY = -1002

    @property
    def state_info(self) -> str:
        return _STATE_INFO[self]


_STATE_INFO: dict[ProductStateEnum, str] = {
    ProductStateEnum.SUCCESS: "operation succeeded",
    ProductStateEnum.FAILURE: "operation failed",
    ProductStateEnum.EMPTY: "product is empty",
}


class ProductExecution(SQLModel):
    """
    Uniform return value of ProductService operations.

    - `state` tells the caller whether anything happened.
    - `product` is set by add/modify, `product_list` + `count` by listing.
    """

    state: ProductStateEnum
    state_info: str = ""
    product: Product | None = None
    product_list: list[Product] = Field(default_factory=list)
    count: int | None = None

    @classmethod
    def of(cls, state: ProductStateEnum, **kwargs) -> "ProductExecution":
        return cls(state=state, state_info=state.state_info, **kwargs)


class ProductCondition(SQLModel):
    """
    Filter for product listing. Unset fields do not filter.

    product_name matches as a substring.
    """

    shop_id: int | None = None
    product_category_id: int | None = None
    product_name: str | None = None
    enable_status: int | None = None


class _ProductFields(SQLModel):
    model_config = ConfigDict(extra="forbid")

    product_name: str | None = Field(default=None, max_length=100)
    product_desc: str | None = Field(default=None, max_length=2000)
    product_category_id: int | None = None
    normal_price: str | None = Field(default=None, max_length=100)
    promotion_price: str | None = Field(default=None, max_length=100)
    priority: int | None = None

    @field_validator("product_name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("product_name cannot be empty")
        return v


class ProductCreate(_ProductFields):
    """
    Payload for creating a product (the `product_str` form field).

    shop_id may be omitted; the service then reports EMPTY.
    Enable status is not accepted: new products are always up.
    """

    shop_id: int | None = None


class ProductUpdate(_ProductFields):
    """
    Partial update payload. Unset fields are left untouched.
    """

    shop_id: int | None = None
    enable_status: ProductStatus | None = None


class ProductRead(SQLModel):
    product_id: int
    shop_id: int
    product_category_id: int | None = None
    product_name: str | None = None
    product_desc: str | None = None
    img_addr: str | None = None
    normal_price: str | None = None
    promotion_price: str | None = None
    priority: int | None = None
    enable_status: int | None = None
    create_time: datetime | None = None
    last_edit_time: datetime | None = None


class ProductImageRead(SQLModel):
    """
    Read model for gallery images.
    """

    product_img_id: int
    product_id: int
    img_addr: str
    img_desc: str | None = None
    priority: int | None = None
    create_time: datetime | None = None


class ProductWithImagesRead(ProductRead):
    product_img_list: list[ProductImageRead] = Field(default_factory=list)


class ProductExecutionRead(SQLModel):
    state: int
    state_info: str
    product: ProductRead | None = None


class ProductListRead(SQLModel):
    product_list: list[ProductRead]
    count: int
