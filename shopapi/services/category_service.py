# shopapi/services/category_service.py
import logging
from typing import Dict, List, Optional

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.entities import Category, Product
from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models.category import CategoryIn, CategoryOut, CategoryPatch


class CategoryService:
    """Category management and category tree reads"""

    def __init__(self, db):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def find_category(self, session: AsyncSession, category_id: int) -> Category:
        """Load a category or raise NotFoundError"""
        category = await session.get(Category, category_id)
        if category is None:
            raise NotFoundError.category(category_id)
        return category

    async def load_tree_snapshot(self, session: AsyncSession) -> Dict[int, Optional[int]]:
        """All categories as id -> parent id, read in a single query"""
        rows = await session.execute(select(Category.id, Category.parent_id))
        return {category_id: parent_id for category_id, parent_id in rows}

    async def get_all_categories(self) -> List[CategoryOut]:
        async with self.db.session() as session:
            categories = (await session.scalars(select(Category).order_by(Category.id))).all()
            self.logger.info(f"found categories count={len(categories)}")
            return [CategoryOut.from_entity(category) for category in categories]

    async def add_category(self, category_in: CategoryIn) -> CategoryOut:
        """Create a category, optionally under an existing parent"""
        self.logger.debug(f"{category_in!r}")

        async with self.db.session() as session:
            if category_in.parent_category is not None:
                await self.find_category(session, category_in.parent_category)

            category = Category(name=category_in.name, parent_id=category_in.parent_category)
            session.add(category)
            await self._flush_unique_name(session, category.name)

            self.logger.info(f"created category with id={category.id}")
            return CategoryOut.from_entity(category)

    async def update_category(self, category_id: int, patch: CategoryPatch) -> None:
        """Rename and/or move a category"""
        self.logger.debug(f"id={category_id} {patch!r}")

        async with self.db.session() as session:
            category = await self.find_category(session, category_id)

            # all reads happen before the first change so autoflush cannot fail early
            if patch.parent_category is not None:
                parent = await self.find_category(session, patch.parent_category)
                snapshot = await self.load_tree_snapshot(session)
                self._validate_no_cycle(category.id, parent.id, snapshot)
                category.parent_id = parent.id

            if patch.name is not None:
                category.name = patch.name

            await self._flush_unique_name(session, category.name)
            self.logger.info(f"updated category with id={category_id}")

    async def delete_category(self, category_id: int) -> None:
        """Delete a category nothing refers to"""
        self.logger.debug(f"id={category_id}")

        async with self.db.session() as session:
            category = await self.find_category(session, category_id)

            has_products = await session.scalar(
                select(exists().where(Product.category_id == category_id))
            )
            has_children = await session.scalar(
                select(exists().where(Category.parent_id == category_id))
            )
            if has_products or has_children:
                raise ConflictError(
                    f"category with id={category_id} cannot be removed, "
                    f"it still has products or subcategories"
                )

            await session.delete(category)
            try:
                await session.flush()
            except IntegrityError as e:
                raise ConflictError(f"category cannot be removed: {e.orig}") from e

            self.logger.info(f"deleted category with id={category_id}")

    @staticmethod
    def _validate_no_cycle(category_id: int, new_parent_id: int,
                           snapshot: Dict[int, Optional[int]]) -> None:
        """Reject a parent that is the category itself or one of its descendants"""
        if new_parent_id == category_id:
            raise ValidationError("category cannot be its own parent")

        seen = set()
        current_id = snapshot.get(new_parent_id)
        while current_id is not None and current_id not in seen:
            if current_id == category_id:
                raise ValidationError("patching category would cause a cycle")
            seen.add(current_id)
            current_id = snapshot.get(current_id)

    async def _flush_unique_name(self, session: AsyncSession, name: str) -> None:
        try:
            await session.flush()
        except IntegrityError as e:
            raise ConflictError(f"category with name={name} already exists") from e
