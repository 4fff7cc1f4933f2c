# o2o_shop/schemas/main_page.py
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from o2o_shop.models.headline import HeadLine
from o2o_shop.models.shop import ShopCategory


class ShopCategoryRead(SQLModel):
    shop_category_id: int
    shop_category_name: str
    shop_category_desc: str | None = None
    shop_category_img: str | None = None
    priority: int
    parent_id: int | None = None
    create_time: datetime | None = None
    last_edit_time: datetime | None = None


class HeadLineRead(SQLModel):
    line_id: int
    line_name: str | None = None
    line_link: str
    line_img: str
    priority: int | None = None
    enable_status: int
    create_time: datetime | None = None
    last_edit_time: datetime | None = None


# ----- Service-level result (tagged) -----


class MainPageSuccess(SQLModel):
    success: Literal[True] = True
    shop_categories: list[ShopCategory]
    headlines: list[HeadLine]


class MainPageFailure(SQLModel):
    success: Literal[False] = False
    message: str


MainPageResult = MainPageSuccess | MainPageFailure


# ----- Wire format -----


class MainPageInfoRead(SQLModel):
    """
    Landing-page payload.

    Keys are camelCase on the wire:
      {success, shopCategoryList?, headLineList?, errMsg?}
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    shop_category_list: list[ShopCategoryRead] | None = Field(
        default=None, alias="shopCategoryList"
    )
    head_line_list: list[HeadLineRead] | None = Field(
        default=None, alias="headLineList"
    )
    err_msg: str | None = Field(default=None, alias="errMsg")
