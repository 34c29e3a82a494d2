"""
Product service: business logic for the Product aggregate and its comments.

Design notes
------------
- A product and its comments are written in the caller's transaction:
  the product row is flushed first so its id is known, then the comments
  are inserted in submission order.  ``get_db`` commits once at the end of
  the request, so a failure part-way leaves nothing behind.
- Reads eager-load comments with ``selectinload`` (one extra query for the
  whole page of products, never one per product) and go through the
  cache-aside layer in ``insightpro.cache``.
- Partial updates are a single ``UPDATE`` whose ``SET`` clause holds only
  the columns present in the request; the matched row count decides
  between success and ``NotFound``.
- Service functions flush but do not commit.
"""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from insightpro.cache import PRODUCT_LIST_KEY, cache, product_detail_key
from insightpro.config import settings
from insightpro.exceptions import NotFound, ValidationError
from insightpro.models import Comment, Product
from insightpro.schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _comment_to_dict(comment: Comment) -> dict:
    return {"id": comment.id, "text": comment.text}


def _product_to_dict(product: Product, comments: list[Comment]) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "company": product.company,
        "average_rating": product.average_rating,
        "comments": [_comment_to_dict(c) for c in comments],
    }


def _validate_new_product(data: ProductCreate) -> None:
    """Every field is required; ``comments`` may be an empty list."""
    if (
        data.name is None
        or not data.name.strip()
        or data.company is None
        or not data.company.strip()
        or data.average_rating is None
        or data.comments is None
    ):
        raise ValidationError("Incomplete product data.")


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def create_product(db: AsyncSession, data: ProductCreate) -> dict:
    """Insert a product plus its comments and return the created record."""
    _validate_new_product(data)

    product = Product(
        name=data.name,
        company=data.company,
        average_rating=data.average_rating,
    )
    db.add(product)
    await db.flush()

    comments = [Comment(product_id=product.id, text=text) for text in data.comments]
    for comment in comments:
        db.add(comment)
    if comments:
        await db.flush()

    await cache.invalidate_product_on_commit(db)
    logger.info("Created product id=%s with %d comment(s)", product.id, len(comments))
    return _product_to_dict(product, comments)


async def list_products(db: AsyncSession) -> list[dict]:
    """Return every product, oldest first, each with its comments."""
    cached = await cache.get(PRODUCT_LIST_KEY)
    if cached is not None:
        return cached

    q = select(Product).options(selectinload(Product.comments)).order_by(Product.id)
    result = await db.execute(q)
    products = [_product_to_dict(p, p.comments) for p in result.scalars().all()]

    await cache.set(PRODUCT_LIST_KEY, products, ttl=settings.CACHE_TTL_LIST)
    return products


async def get_product(db: AsyncSession, product_id: int) -> dict:
    """Return one product with its comments, or raise ``NotFound``."""
    cache_key = product_detail_key(product_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    q = (
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.comments))
    )
    result = await db.execute(q)
    product = result.scalar_one_or_none()
    if product is None:
        raise NotFound("Product not found.")

    data = _product_to_dict(product, product.comments)
    await cache.set(cache_key, data, ttl=settings.CACHE_TTL_DETAIL)
    return data


async def update_product(db: AsyncSession, product_id: int, data: ProductUpdate) -> dict:
    """
    Write only the fields supplied in *data*.

    Fields left out of the request body, or sent as ``null``, are not
    touched.  Comments cannot be changed through this call.
    """
    values = data.model_dump(exclude_unset=True, exclude_none=True)
    if not values:
        raise ValidationError("No fields to update.")

    result = await db.execute(
        update(Product).where(Product.id == product_id).values(**values)
    )
    if result.rowcount == 0:
        raise NotFound("Product not found.")

    await cache.invalidate_product_on_commit(db, product_id)
    logger.info("Updated product id=%s fields=%s", product_id, sorted(values))
    return {"message": "Product updated successfully."}


async def delete_product(db: AsyncSession, product_id: int) -> dict:
    """Delete a product; its comments go with it via ``ON DELETE CASCADE``."""
    result = await db.execute(delete(Product).where(Product.id == product_id))
    if result.rowcount == 0:
        raise NotFound(f"Product with ID {product_id} not found.")

    await cache.invalidate_product_on_commit(db, product_id)
    logger.info("Deleted product id=%s", product_id)
    return {"message": f"Product with ID {product_id} deleted successfully."}
