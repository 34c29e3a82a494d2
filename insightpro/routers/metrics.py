from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from insightpro.cache import cache
from insightpro.database import get_db
from insightpro.models import Account, Comment, Product
from insightpro.schemas import MetricsResponse

router = APIRouter(prefix="/metrics", tags=["metrics"])

@router.get("", response_model=MetricsResponse)
async def get_metrics(db: AsyncSession = Depends(get_db)):
    total_accounts = (await db.execute(select(func.count()).select_from(Account))).scalar_one()

    total_products, avg_rating = (
        await db.execute(select(func.count(Product.id), func.avg(Product.average_rating)))
    ).one()

    total_comments, commented_products = (
        await db.execute(
            select(func.count(Comment.id), func.count(func.distinct(Comment.product_id)))
        )
    ).one()

    by_company = await db.execute(
        select(Product.company, func.count(Product.id))
        .group_by(Product.company)
        .order_by(Product.company)
    )

    return MetricsResponse(
        total_accounts=total_accounts,
        total_products=total_products,
        total_comments=total_comments,
        products_without_comments=total_products - commented_products,
        avg_comments_per_product=round(total_comments / total_products, 2) if total_products else 0.0,
        avg_rating=round(avg_rating, 2) if avg_rating is not None else None,
        products_by_company={company: count for company, count in by_company.all()},
        cache_info=cache.stats,
    )
