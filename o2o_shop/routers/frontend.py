# o2o_shop/routers/frontend.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from o2o_shop.database import get_session
from o2o_shop.repositories.main_page_repo import (
    HeadLineRepository,
    ShopCategoryRepository,
)
from o2o_shop.schemas.main_page import MainPageFailure, MainPageInfoRead
from o2o_shop.services.main_page_service import (
    HeadLineService,
    MainPageService,
    ShopCategoryService,
)

router = APIRouter(prefix="/frontend", tags=["Frontend"])

main_page_service = MainPageService(
    ShopCategoryService(ShopCategoryRepository()),
    HeadLineService(HeadLineRepository()),
)


def get_main_page_service() -> MainPageService:
    return main_page_service


@router.get(
    "/listmainpageinfo",
    response_model=MainPageInfoRead,
    response_model_exclude_none=True,
)
def list_main_page_info(
    session: Session = Depends(get_session),
    service: MainPageService = Depends(get_main_page_service),
):
    """
    Landing-page data: top-level shop categories and enabled headlines.

    - Public endpoint.
    - Always 200; a failed lookup yields success=false plus errMsg.
    """
    result = service.get_main_page_info(session)
    if isinstance(result, MainPageFailure):
        return {"success": False, "errMsg": result.message}
    return {
        "success": True,
        "shopCategoryList": result.shop_categories,
        "headLineList": result.headlines,
    }
