# o2o_shop/repositories/product_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from o2o_shop.models.product import Product, ProductImage
from o2o_shop.schemas.product import ProductCondition


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - Writes only flush: the caller owns commit/rollback so that
      several statements can share one transaction.
    - Write methods return the number of affected rows.
    """

    # ----- Queries -----

    def get_by_id(self, session: Session, product_id: int) -> Product | None:
        return session.get(Product, product_id)

    def list_products(
        self,
        session: Session,
        condition: ProductCondition,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Product]:
        stmt = self._apply_condition(select(Product), condition)
        stmt = (
            stmt.order_by(Product.priority.desc(), Product.product_id.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def count_products(self, session: Session, condition: ProductCondition) -> int:
        stmt = self._apply_condition(
            select(func.count()).select_from(Product), condition
        )
        value = session.exec(stmt).one()
        return int(value or 0)

    # ----- Writes -----

    def insert_product(self, session: Session, product: Product) -> int:
        session.add(product)
        session.flush()
        return 1 if product.product_id is not None else 0

    def update_product(self, session: Session, changes: Product) -> int:
        """
        Copy every non-None field of `changes` onto the stored row.

        The row is matched on product_id AND shop_id; product_id,
        shop_id and create_time are never overwritten.
        """
        if changes.product_id is None:
            return 0

        current = session.get(Product, changes.product_id)
        if current is None or current.shop_id != changes.shop_id:
            return 0

        values = changes.model_dump(
            exclude={"product_id", "shop_id", "create_time"},
            exclude_none=True,
        )
        for field, value in values.items():
            setattr(current, field, value)

        session.add(current)
        session.flush()
        return 1

    @staticmethod
    def _apply_condition(stmt, condition: ProductCondition):
        if condition.shop_id is not None:
            stmt = stmt.where(Product.shop_id == condition.shop_id)
        if condition.product_category_id is not None:
            stmt = stmt.where(
                Product.product_category_id == condition.product_category_id
            )
        if condition.product_name:
            stmt = stmt.where(Product.product_name.contains(condition.product_name))
        if condition.enable_status is not None:
            stmt = stmt.where(Product.enable_status == condition.enable_status)
        return stmt


class ProductImageRepository:
    """
    Data access layer for ProductImage (gallery rows).
    Same flush-only contract as ProductRepository.
    """

    def list_by_product_id(
        self,
        session: Session,
        product_id: int,
    ) -> list[ProductImage]:
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(ProductImage.product_img_id)
        )
        return session.exec(stmt).all()

    def batch_insert(self, session: Session, images: list[ProductImage]) -> int:
        if not images:
            return 0
        session.add_all(images)
        session.flush()
        return sum(1 for img in images if img.product_img_id is not None)

    def delete_by_product_id(self, session: Session, product_id: int) -> int:
        rows = self.list_by_product_id(session, product_id)
        for row in rows:
            session.delete(row)
        session.flush()
        return len(rows)
