# shopapi/services/product_service.py
import logging
from functools import partial
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Config
from ..database.entities import Product
from ..exceptions import NotFoundError
from ..models.product import ProductDetailsOut, ProductFilters, ProductIn, ProductOut, ProductPatch
from ..models.shared import Page, Pagination
from ..utils.category_tree import expand_category_tree
from .category_service import CategoryService
from .filters import build_product_predicate


class ProductService:
    def __init__(self, db, strict_category_filter: Optional[bool] = None):
        self.db = db
        self.category_service = CategoryService(db)
        if strict_category_filter is None:
            strict_category_filter = Config.CATEGORY_FILTER_STRICT
        self.strict_category_filter = strict_category_filter
        self.logger = logging.getLogger(__name__)

    async def find_active_product(self, session: AsyncSession, product_id: int) -> Product:
        """Load an active product or raise NotFoundError"""
        product = await session.scalar(
            select(Product).where(Product.id == product_id, Product.active.is_(True))
        )
        if product is None:
            raise NotFoundError.product(product_id)
        return product

    async def search_products(self, filters: ProductFilters,
                              pagination: Pagination) -> Page[ProductOut]:
        """Page of active products matching the filters"""
        self.logger.debug(f"{filters!r} {pagination!r}")

        async with self.db.session() as session:
            snapshot = {}
            if filters.category is not None:
                snapshot = await self.category_service.load_tree_snapshot(session)

            predicate = build_product_predicate(
                filters,
                partial(expand_category_tree, parent_by_id=snapshot),
                strict_category=self.strict_category_filter,
            )
            predicate = predicate & Product.active.is_(True)

            total = await session.scalar(select(func.count()).select_from(Product).where(predicate))
            products = (await session.scalars(
                select(Product)
                .where(predicate)
                .order_by(Product.id)
                .offset(pagination.offset)
                .limit(pagination.page_size)
            )).all()

            self.logger.info(f"found products count={len(products)} total={total}")
            return Page[ProductOut].build(
                [ProductOut.from_entity(product) for product in products],
                pagination,
                total,
            )

    async def get_product(self, product_id: int) -> ProductDetailsOut:
        async with self.db.session() as session:
            product = await self.find_active_product(session, product_id)
            self.logger.info(f"found product with id={product_id}")
            return ProductDetailsOut.from_entity(product)

    async def add_product(self, product_in: ProductIn) -> ProductDetailsOut:
        """Create a product in an existing category"""
        self.logger.debug(f"{product_in!r}")

        async with self.db.session() as session:
            await self.category_service.find_category(session, product_in.category)

            product = Product(
                active=True,
                name=product_in.name,
                description=product_in.description,
                price=product_in.price,
                category_id=product_in.category,
            )
            session.add(product)
            await session.flush()

            self.logger.info(f"created product with id={product.id}")
            return ProductDetailsOut.from_entity(product)

    async def update_product(self, product_id: int, patch: ProductPatch) -> None:
        self.logger.debug(f"id={product_id} {patch!r}")

        async with self.db.session() as session:
            product = await self.find_active_product(session, product_id)

            if patch.category is not None:
                await self.category_service.find_category(session, patch.category)
                product.category_id = patch.category
            if patch.name is not None:
                product.name = patch.name
            if patch.description is not None:
                product.description = patch.description
            if patch.price is not None:
                product.price = patch.price

            self.logger.info(f"patched product with id={product_id}")

    async def delete_product(self, product_id: int) -> None:
        """Mark the product inactive; orders keep referring to it"""
        self.logger.debug(f"id={product_id}")

        async with self.db.session() as session:
            product = await self.find_active_product(session, product_id)
            product.active = False

            self.logger.info(f"deleted product with id={product_id}")
