from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from insightpro.database import get_db
from insightpro.dependencies import product_write_guard
from insightpro.schemas import MessageResponse, ProductCreate, ProductResponse, ProductUpdate
from insightpro.services import product_service

router = APIRouter(prefix="/products", tags=["products"])

@router.get("", response_model=list[ProductResponse])
async def list_products(db: AsyncSession = Depends(get_db)):
    return await product_service.list_products(db)

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await product_service.get_product(db, product_id)

@router.post("", status_code=201, response_model=ProductResponse, dependencies=[Depends(product_write_guard)])
async def create_product(data: ProductCreate, db: AsyncSession = Depends(get_db)):
    return await product_service.create_product(db, data)

@router.put("/{product_id}", response_model=MessageResponse, dependencies=[Depends(product_write_guard)])
async def update_product(product_id: int, data: ProductUpdate, db: AsyncSession = Depends(get_db)):
    return await product_service.update_product(db, product_id, data)

@router.delete("/{product_id}", response_model=MessageResponse, dependencies=[Depends(product_write_guard)])
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await product_service.delete_product(db, product_id)
