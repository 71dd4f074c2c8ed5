from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.database import get_db
from riderlink.core.deps import get_current_user
from riderlink.models.models import User
from riderlink.schemas.schemas import DashboardSummary
from riderlink.services.dashboard import build_summary

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummary)
async def dashboard_summary(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await build_summary(db)
