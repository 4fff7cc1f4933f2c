# o2o_shop/services/main_page_service.py
import logging

from sqlmodel import Session

from o2o_shop.models.headline import HeadLine
from o2o_shop.models.shop import ShopCategory
from o2o_shop.repositories.main_page_repo import (
    HeadLineRepository,
    ShopCategoryRepository,
)
from o2o_shop.schemas.main_page import (
    MainPageFailure,
    MainPageResult,
    MainPageSuccess,
)

logger = logging.getLogger(__name__)

HEADLINE_ENABLED = 1


class ShopCategoryService:
    def __init__(self, repo: ShopCategoryRepository):
        self.repo = repo

    def get_shop_category_list(
        self,
        session: Session,
        parent_id: int | None = None,
    ) -> list[ShopCategory]:
        """Top-level categories when parent_id is None, else its children."""
        return self.repo.list_categories(session, parent_id=parent_id)


class HeadLineService:
    def __init__(self, repo: HeadLineRepository):
        self.repo = repo

    def get_headline_list(
        self,
        session: Session,
        enable_status: int | None = None,
    ) -> list[HeadLine]:
        return self.repo.list_headlines(session, enable_status=enable_status)


class MainPageService:
    """
    Landing-page aggregation: top-level shop categories + enabled headlines.

    Never raises: a failing lookup comes back as MainPageFailure.
    """

    def __init__(
        self,
        shop_category_service: ShopCategoryService,
        headline_service: HeadLineService,
    ):
        self.shop_category_service = shop_category_service
        self.headline_service = headline_service

    def get_main_page_info(self, session: Session) -> MainPageResult:
        try:
            shop_categories = self.shop_category_service.get_shop_category_list(session)
            headlines = self.headline_service.get_headline_list(
                session, enable_status=HEADLINE_ENABLED
            )
        except Exception as e:
            logger.exception("Main page lookup failed: %s", e)
            return MainPageFailure(message=str(e))

        return MainPageSuccess(shop_categories=shop_categories, headlines=headlines)
