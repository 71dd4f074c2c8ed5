"""
User management. Admin roles only; users are deactivated, never deleted.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.database import get_db
from riderlink.core.exceptions import ConflictError, NotFoundError
from riderlink.core.roles import require_admin
from riderlink.core.security import hash_password
from riderlink.repositories.repositories import UserRepository
from riderlink.schemas.schemas import UserCreate, UserOut, UserUpdate

router = APIRouter(prefix="/users", tags=["Users"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[UserOut])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await UserRepository(db).list()


@router.post("", response_model=UserOut, status_code=201)
async def create_user(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    repo = UserRepository(db)
    if await repo.get_by_email(payload.email):
        raise ConflictError("Email already registered", field="email")

    data = payload.model_dump(exclude={"password"})
    try:
        return await repo.create(hashed_password=hash_password(payload.password), **data)
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email already registered", field="email")


@router.get("/{user_id}", response_model=UserOut)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    user = await UserRepository(db).get(user_id)
    if not user:
        raise NotFoundError("User", user_id)
    return user


@router.put("/{user_id}", response_model=UserOut)
async def update_user(user_id: int, payload: UserUpdate, db: AsyncSession = Depends(get_db)):
    repo = UserRepository(db)
    user = await repo.get(user_id)
    if not user:
        raise NotFoundError("User", user_id)

    data = payload.model_dump(exclude_unset=True)
    if "email" in data and data["email"] != user.email:
        if await repo.get_by_email(data["email"]):
            raise ConflictError("Email already registered", field="email")
    if "password" in data:
        data["hashed_password"] = hash_password(data.pop("password"))
    try:
        return await repo.update(user, data)
    except IntegrityError:
        await db.rollback()
        if "email" not in data:
            raise
        raise ConflictError("Email already registered", field="email")
