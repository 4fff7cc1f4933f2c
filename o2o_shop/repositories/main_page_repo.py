# o2o_shop/repositories/main_page_repo.py
from sqlmodel import Session, select

from o2o_shop.models.headline import HeadLine
from o2o_shop.models.shop import ShopCategory


class ShopCategoryRepository:
    """
    Read-only queries over shop categories.
    """

    def list_categories(
        self,
        session: Session,
        parent_id: int | None = None,
    ) -> list[ShopCategory]:
        """
        parent_id=None  -> top-level categories (no parent)
        parent_id=<id>  -> direct children of that category
        """
        stmt = select(ShopCategory)
        if parent_id is None:
            stmt = stmt.where(ShopCategory.parent_id == None)  # noqa: E711
        else:
            stmt = stmt.where(ShopCategory.parent_id == parent_id)
        stmt = stmt.order_by(ShopCategory.priority.desc())
        return session.exec(stmt).all()


class HeadLineRepository:
    def list_headlines(
        self,
        session: Session,
        enable_status: int | None = None,
    ) -> list[HeadLine]:
        stmt = select(HeadLine)
        if enable_status is not None:
            stmt = stmt.where(HeadLine.enable_status == enable_status)
        stmt = stmt.order_by(HeadLine.priority.desc())
        return session.exec(stmt).all()
