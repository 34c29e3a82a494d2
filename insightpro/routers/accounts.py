from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from insightpro.database import get_db
from insightpro.dependencies import require_token
from insightpro.schemas import LoginRequest, MessageResponse, RegisterRequest, TokenResponse
from insightpro.services import account_service

router = APIRouter(tags=["accounts"])

@router.post("/registro", status_code=201, response_model=MessageResponse)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    return await account_service.register(db, data.email, data.password, data.company)

@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    return await account_service.login(db, data.email, data.password)

@router.get("/me")
async def me(claims: dict = Depends(require_token)):
    return claims
