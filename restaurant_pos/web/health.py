from fastapi import APIRouter

from restaurant_pos.dependencies import CurrentUserDep

router = APIRouter()


@router.get("/health")
async def health_check():
    return "OK"


@router.get("/private-data")
async def private_data(user: CurrentUserDep):
    return {"message": "This is private", "user": user}
