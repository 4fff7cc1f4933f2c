# o2o_shop/services/product_service.py
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from o2o_shop.core.clock import Clock, utc_now
from o2o_shop.core.exceptions import (
    BusinessException,
    ProductNotFoundError,
    ProductOperationError,
)
from o2o_shop.core.pagination import calculate_row_index
from o2o_shop.core.path_utils import get_shop_image_path
from o2o_shop.core.storage_utils import ImageStorage
from o2o_shop.models.product import Product, ProductImage, ProductStatus
from o2o_shop.repositories.product_repo import (
    ProductImageRepository,
    ProductRepository,
)
from o2o_shop.schemas.image import ImageHolder
from o2o_shop.schemas.product import (
    ProductCondition,
    ProductExecution,
    ProductStateEnum,
)

logger = logging.getLogger(__name__)


class ProductService:
    """
    Business logic for Product & ProductImage.

    Responsibilities:
      - presence validation (product + shop id) -> EMPTY result
      - timestamps and default visibility
      - thumbnail / gallery file orchestration with ImageStorage
      - one DB transaction per add/modify (commit or rollback here)

    Files are written and deleted outside the DB transaction. Any failure
    rolls the rows back but leaves files that were already stored (or
    already deleted) as they are.
    """

    def __init__(
        self,
        repo: ProductRepository,
        image_repo: ProductImageRepository,
        storage: ImageStorage,
        clock: Clock = utc_now,
    ):
        self.repo = repo
        self.image_repo = image_repo
        self.storage = storage
        self.clock = clock

    # ----- Helpers -----

    @staticmethod
    def _has_shop(product: Product | None) -> bool:
        return product is not None and product.shop_id is not None

    @contextmanager
    def _transaction(self, session: Session, failure_message: str) -> Iterator[None]:
        """
        Commit on success; roll back and raise ProductOperationError
        (or the original domain error) on failure.
        """
        try:
            yield
            session.commit()
        except BusinessException as e:
            session.rollback()
            logger.error("%s: %s", failure_message, e.message)
            raise
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("%s: %s", failure_message, e)
            raise ProductOperationError(f"{failure_message}: {e}") from e
        except Exception as e:
            session.rollback()
            logger.exception("%s: %s", failure_message, e)
            raise ProductOperationError(f"{failure_message}: {e}") from e

    def _get_existing(self, session: Session, product: Product) -> Product:
        """Stored row for `product`, which must belong to the same shop."""
        current = (
            self.repo.get_by_id(session, product.product_id)
            if product.product_id is not None
            else None
        )
        if current is None or current.shop_id != product.shop_id:
            raise ProductNotFoundError(product.product_id)
        return current

    def _add_thumbnail(self, product: Product, thumbnail: ImageHolder) -> None:
        dest = get_shop_image_path(product.shop_id)
        product.img_addr = self.storage.generate_thumbnail(thumbnail, dest)

    def _add_product_images(
        self,
        session: Session,
        product: Product,
        holders: list[ImageHolder],
    ) -> None:
        """
        Store every gallery image under the shop directory and batch-insert
        one ProductImage row per file.
        """
        dest = get_shop_image_path(product.shop_id)
        images: list[ProductImage] = []
        for holder in holders:
            img_addr = self.storage.generate_normal_image(holder, dest)
            images.append(
                ProductImage(
                    product_id=product.product_id,
                    img_addr=img_addr,
                    create_time=self.clock(),
                )
            )

        try:
            effected = self.image_repo.batch_insert(session, images)
        except SQLAlchemyError as e:
            raise ProductOperationError(f"failed to create product images: {e}") from e
        if effected <= 0:
            raise ProductOperationError("failed to create product images")

    def _delete_product_images(self, session: Session, product_id: int) -> None:
        """
        Remove the gallery of a product: files first, then rows.
        """
        for image in self.image_repo.list_by_product_id(session, product_id):
            self.storage.delete_file_or_path(image.img_addr)
        self.image_repo.delete_by_product_id(session, product_id)

    # ----- Writes -----

    def add_product(
        self,
        session: Session,
        product: Product | None,
        thumbnail: ImageHolder | None = None,
        product_images: list[ImageHolder] | None = None,
    ) -> ProductExecution:
        """
        Create a product together with its thumbnail and gallery.

        Steps:
          1. product / shop id missing -> EMPTY, nothing touched.
          2. Stamp create/edit time, force enable_status = UP.
          3. Store the thumbnail (if any) and keep its path on the product.
          4. Insert the product row to obtain product_id.
          5. Store gallery images (if any) and batch-insert their rows.
          6. Commit.

        Raises:
            ProductOperationError: a write failed or affected no rows.
            ImageProcessingError: an upload is not a readable image.
        """
        if not self._has_shop(product):
            return ProductExecution.of(ProductStateEnum.EMPTY)

        now = self.clock()
        product.create_time = now
        product.last_edit_time = now
        product.enable_status = ProductStatus.UP

        with self._transaction(session, "failed to create product"):
            if thumbnail is not None:
                self._add_thumbnail(product, thumbnail)

            effected = self.repo.insert_product(session, product)
            if effected <= 0:
                raise ProductOperationError("failed to create product")

            if product_images:
                self._add_product_images(session, product, product_images)

        session.refresh(product)
        logger.info(
            "Created product %s in shop %s", product.product_id, product.shop_id
        )
        return ProductExecution.of(ProductStateEnum.SUCCESS, product=product)

    def modify_product(
        self,
        session: Session,
        product: Product | None,
        thumbnail: ImageHolder | None = None,
        product_images: list[ImageHolder] | None = None,
    ) -> ProductExecution:
        """
        Update a product; optionally replace its thumbnail and/or gallery.

        `product` carries the changes: product_id + shop_id identify the
        row, every other non-None field is written.

        Old files are deleted before the update statement runs, so a
        failing update leaves the row pointing at files that are gone.

        Raises:
            ProductNotFoundError: images are replaced for a product that does
                not exist in this shop.
            ProductOperationError: a write failed or affected no rows.
        """
        if not self._has_shop(product):
            return ProductExecution.of(ProductStateEnum.EMPTY)

        product.last_edit_time = self.clock()

        with self._transaction(session, "failed to update product"):
            if thumbnail is not None or product_images:
                current = self._get_existing(session, product)

            if thumbnail is not None:
                if current.img_addr:
                    self.storage.delete_file_or_path(current.img_addr)
                self._add_thumbnail(product, thumbnail)

            if product_images:
                self._delete_product_images(session, product.product_id)
                self._add_product_images(session, product, product_images)

            effected = self.repo.update_product(session, product)
            if effected <= 0:
                raise ProductOperationError("failed to update product")

        logger.info("Updated product %s", product.product_id)
        stored = self.repo.get_by_id(session, product.product_id)
        session.refresh(stored)
        return ProductExecution.of(ProductStateEnum.SUCCESS, product=stored)

    # ----- Reads -----

    def get_product_by_id(self, session: Session, product_id: int) -> Product | None:
        return self.repo.get_by_id(session, product_id)

    def get_product_list(
        self,
        session: Session,
        condition: ProductCondition,
        page_index: int,
        page_size: int,
    ) -> ProductExecution:
        """
        One page of products matching `condition` plus the total match count.

        page_index is 1-based.
        """
        row_index = calculate_row_index(page_index, page_size)
        product_list = self.repo.list_products(
            session, condition, skip=row_index, limit=page_size
        )
        count = self.repo.count_products(session, condition)
        return ProductExecution.of(
            ProductStateEnum.SUCCESS,
            product_list=product_list,
            count=count,
        )

    def get_product_images(self, session: Session, product_id: int) -> list[ProductImage]:
        return self.image_repo.list_by_product_id(session, product_id)
