"""Interest catalog API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from affinity.engine.errors import UnknownInterest
from affinity.models.base import get_db
from affinity.schemas.interest import (
    CategoryChange,
    CategoryRename,
    InterestCreate,
    InterestRead,
    InterestUpdate,
)
from affinity.services.interest_catalog_service import (
    CategoryAlreadyExists,
    CategoryNotFound,
    InterestAlreadyDeleted,
    InterestAlreadyExists,
    count_interests,
    create_interest,
    delete_category,
    delete_interest,
    list_categories,
    list_interests,
    rename_category,
    update_interest,
)

router = APIRouter(prefix="/interests", tags=["interests"])


@router.get("", response_model=list[InterestRead])
async def get_interests(
    response: Response,
    db: AsyncSession = Depends(get_db),
    category: str | None = Query(None, description="Filter by category"),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=1000),
):
    """List non-deleted interests, one page at a time. X-Total-Count carries the full count."""
    total = await count_interests(db, category)
    response.headers["X-Total-Count"] = str(total)
    return await list_interests(db, category, skip=(page - 1) * limit, limit=limit)


@router.post("", response_model=InterestRead, status_code=201)
async def post_interest(
    data: InterestCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create an interest at the next catalog position."""
    try:
        interest = await create_interest(db, data.name, data.category)
    except InterestAlreadyExists as e:
        raise HTTPException(status_code=409, detail=str(e))
    await db.commit()
    await db.refresh(interest)
    return interest


# Category routes are registered before /{interest_id}

@router.get("/categories", response_model=list[str])
async def get_categories(db: AsyncSession = Depends(get_db)):
    """Distinct categories with at least one live interest."""
    return await list_categories(db)


@router.put("/categories/{name}", response_model=CategoryChange)
async def put_category(
    name: str,
    data: CategoryRename,
    db: AsyncSession = Depends(get_db),
):
    """Rename a category across all of its live interests."""
    try:
        count = await rename_category(db, name, data.new_name)
    except CategoryNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (CategoryAlreadyExists, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    await db.commit()
    return CategoryChange(category=data.new_name.strip(), interest_count=count)


@router.delete("/categories/{name}", response_model=CategoryChange)
async def remove_category(
    name: str,
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete a category and every live interest in it."""
    try:
        count = await delete_category(db, name)
    except CategoryNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    await db.commit()
    return CategoryChange(category=name, interest_count=count)


@router.put("/{interest_id}", response_model=InterestRead)
async def put_interest(
    interest_id: int,
    data: InterestUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Rename or recategorize an interest. Its catalog position is unchanged."""
    try:
        interest = await update_interest(db, interest_id, data.name, data.category)
    except UnknownInterest:
        raise HTTPException(status_code=404, detail="Interest not found")
    except InterestAlreadyDeleted as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InterestAlreadyExists as e:
        raise HTTPException(status_code=409, detail=str(e))
    await db.commit()
    await db.refresh(interest)
    return interest


@router.delete("/{interest_id}", response_model=InterestRead)
async def remove_interest(
    interest_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete an interest. Existing selections and vectors are untouched."""
    try:
        interest = await delete_interest(db, interest_id)
    except UnknownInterest:
        raise HTTPException(status_code=404, detail="Interest not found")
    except InterestAlreadyDeleted as e:
        raise HTTPException(status_code=400, detail=str(e))
    await db.commit()
    await db.refresh(interest)
    return interest
