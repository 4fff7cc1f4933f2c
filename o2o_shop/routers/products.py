# o2o_shop/routers/products.py
import json

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    UploadFile,
    status,
)
from pydantic import ValidationError
from sqlmodel import Session, SQLModel

from o2o_shop.core.auth import require_admin
from o2o_shop.core.config import get_settings
from o2o_shop.core.exceptions import ImageProcessingError
from o2o_shop.core.storage_utils import ImageStorage, get_image_storage
from o2o_shop.database import get_session
from o2o_shop.models.product import Product
from o2o_shop.repositories.product_repo import (
    ProductImageRepository,
    ProductRepository,
)
from o2o_shop.schemas.image import ImageHolder
from o2o_shop.schemas.product import (
    ProductCondition,
    ProductCreate,
    ProductExecution,
    ProductExecutionRead,
    ProductImageRead,
    ProductListRead,
    ProductStateEnum,
    ProductUpdate,
    ProductWithImagesRead,
)
from o2o_shop.services.product_service import ProductService

settings = get_settings()

router = APIRouter(
    prefix="/shopadmin/products",
    tags=["Product Management"],
    dependencies=[Depends(require_admin)],
)

repo = ProductRepository()
image_repo = ProductImageRepository()


def get_product_service(
    storage: ImageStorage = Depends(get_image_storage),
) -> ProductService:
    return ProductService(repo, image_repo, storage)


# -------- Helpers --------


def _parse_payload(raw: str, schema: type[SQLModel]):
    """
    Validate the JSON carried in the `product_str` form field.
    """
    try:
        return schema.model_validate_json(raw)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=json.loads(e.json()),
        )


def _to_holder(file: UploadFile | None) -> ImageHolder | None:
    if file is None or not file.filename:
        return None
    return ImageHolder(image_bytes=file.file.read(), image_name=file.filename)


def _to_holders(files: list[UploadFile] | None) -> list[ImageHolder] | None:
    holders = [h for h in (_to_holder(f) for f in files or []) if h is not None]
    if len(holders) > settings.MAX_PRODUCT_IMAGES:
        raise ImageProcessingError(
            f"At most {settings.MAX_PRODUCT_IMAGES} product images allowed"
        )
    return holders or None


def _ensure_not_empty(execution: ProductExecution) -> ProductExecution:
    if execution.state == ProductStateEnum.EMPTY:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=execution.state_info,
        )
    return execution


# -------- Endpoints --------


@router.get("", response_model=ProductListRead)
def list_products(
    page_index: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    shop_id: int | None = None,
    product_category_id: int | None = None,
    product_name: str | None = None,
    enable_status: int | None = None,
    session: Session = Depends(get_session),
    service: ProductService = Depends(get_product_service),
):
    """
    Page through products matching the given filters.

    `count` is the total number of matches, independent of the page.
    """
    condition = ProductCondition(
        shop_id=shop_id,
        product_category_id=product_category_id,
        product_name=product_name,
        enable_status=enable_status,
    )
    execution = service.get_product_list(session, condition, page_index, page_size)
    return {"product_list": execution.product_list, "count": execution.count}


@router.get("/{product_id}", response_model=ProductWithImagesRead)
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
    service: ProductService = Depends(get_product_service),
):
    """
    Get a single product with its gallery images.
    """
    product = service.get_product_by_id(session, product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )
    images = service.get_product_images(session, product_id)
    return {
        **product.model_dump(),
        "product_img_list": [img.model_dump() for img in images],
    }


@router.get("/{product_id}/images", response_model=list[ProductImageRead])
def list_product_images(
    product_id: int,
    session: Session = Depends(get_session),
    service: ProductService = Depends(get_product_service),
):
    return service.get_product_images(session, product_id)


@router.post(
    "",
    response_model=ProductExecutionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product with thumbnail and gallery images",
)
def add_product(
    product_str: str = Form(...),
    thumbnail: UploadFile | None = File(default=None),
    product_imgs: list[UploadFile] | None = File(default=None),
    session: Session = Depends(get_session),
    service: ProductService = Depends(get_product_service),
):
    """
    Create a product (multipart form).

    - product_str: JSON matching ProductCreate.
    - thumbnail: optional image, resized to thumbnail size.
    - product_imgs: optional gallery images (max MAX_PRODUCT_IMAGES).
    """
    payload = _parse_payload(product_str, ProductCreate)
    gallery = _to_holders(product_imgs)
    product = Product(**payload.model_dump())

    execution = service.add_product(
        session,
        product,
        thumbnail=_to_holder(thumbnail),
        product_images=gallery,
    )
    return _ensure_not_empty(execution)


@router.put(
    "/{product_id}",
    response_model=ProductExecutionRead,
    summary="Update a product, optionally replacing its images",
)
def modify_product(
    product_id: int,
    product_str: str = Form(...),
    thumbnail: UploadFile | None = File(default=None),
    product_imgs: list[UploadFile] | None = File(default=None),
    session: Session = Depends(get_session),
    service: ProductService = Depends(get_product_service),
):
    """
    Update a product (multipart form).

    - A new thumbnail replaces (and deletes) the old one.
    - New gallery images replace the whole existing gallery.
    """
    payload = _parse_payload(product_str, ProductUpdate)
    gallery = _to_holders(product_imgs)
    product = Product(product_id=product_id, **payload.model_dump(exclude_none=True))

    execution = service.modify_product(
        session,
        product,
        thumbnail=_to_holder(thumbnail),
        product_images=gallery,
    )
    return _ensure_not_empty(execution)
