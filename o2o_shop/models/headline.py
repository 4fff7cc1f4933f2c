# o2o_shop/models/headline.py
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


class HeadLine(SQLModel, table=True):
    """
    Banner shown on the front-end landing page.
    """

    __tablename__ = "tb_head_line"

    line_id: int | None = Field(default=None, primary_key=True)

    line_name: str | None = Field(default=None, max_length=1000)
    line_link: str = Field(max_length=2000)
    line_img: str = Field(max_length=2000)

    priority: int | None = None

    # 0: hidden, 1: shown
    enable_status: int = Field(default=0, index=True)

    create_time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
    last_edit_time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
