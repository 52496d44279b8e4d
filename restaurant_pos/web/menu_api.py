"""
API меню: категории и блюда.

Чтение публичное, изменения только для авторизованных пользователей.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import selectinload
from sqlmodel import select

from restaurant_pos.db.menu import Category, Item
from restaurant_pos.db.orders import OrderItem
from restaurant_pos.dependencies import SessionDep, get_current_user
from restaurant_pos.schemas.menu import (
    CategoryCreate,
    CategoryOut,
    CategoryUpdate,
    CategoryWithItemsOut,
    ItemCreate,
    ItemUpdate,
    ItemWithCategoryOut,
)
from restaurant_pos.schemas.orders import ItemDetailOut

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/categories", response_model=List[CategoryWithItemsOut])
def list_categories(session: SessionDep):
    categories = session.exec(
        select(Category).options(selectinload(Category.items)).order_by(Category.name)
    ).all()
    return [CategoryWithItemsOut.model_validate(category) for category in categories]


@router.get("/categories/{category_id}", response_model=CategoryWithItemsOut)
def get_category(category_id: int, session: SessionDep):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return CategoryWithItemsOut.model_validate(category)


@router.post("/categories", response_model=CategoryOut, dependencies=[Depends(get_current_user)])
def create_category(data: CategoryCreate, session: SessionDep):
    category = Category(name=data.name)
    session.add(category)
    session.commit()
    session.refresh(category)
    logger.info(f"Category created: id={category.id}, name={category.name}")
    return CategoryOut.model_validate(category)


@router.put("/categories/{category_id}", response_model=CategoryOut, dependencies=[Depends(get_current_user)])
def update_category(category_id: int, data: CategoryUpdate, session: SessionDep):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    category.name = data.name
    session.add(category)
    session.commit()
    session.refresh(category)
    return CategoryOut.model_validate(category)


@router.delete("/categories/{category_id}", response_model=CategoryOut, dependencies=[Depends(get_current_user)])
def delete_category(category_id: int, session: SessionDep):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    deleted = CategoryOut.model_validate(category)
    # Если к категории привязаны блюда, БД отклонит удаление по внешнему ключу
    session.delete(category)
    session.commit()
    logger.info(f"Category {category_id} deleted")
    return deleted


@router.get("/items", response_model=List[ItemWithCategoryOut])
def list_items(session: SessionDep, category_id: Optional[int] = None):
    query = select(Item).options(selectinload(Item.category))
    if category_id:
        query = query.where(Item.category_id == category_id)

    items = session.exec(query.order_by(Item.name)).all()
    return [ItemWithCategoryOut.model_validate(item) for item in items]


@router.get("/items/{item_id}", response_model=ItemDetailOut)
def get_item(item_id: int, session: SessionDep):
    item = session.exec(
        select(Item)
        .where(Item.id == item_id)
        .options(
            selectinload(Item.category),
            selectinload(Item.order_items).selectinload(OrderItem.order),
        )
    ).first()
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return ItemDetailOut.model_validate(item)


@router.post("/items", response_model=ItemWithCategoryOut, dependencies=[Depends(get_current_user)])
def create_item(data: ItemCreate, session: SessionDep):
    if not session.get(Category, data.category_id):
        raise HTTPException(status_code=404, detail=f"Category {data.category_id} not found")

    item = Item(**data.model_dump())
    session.add(item)
    session.commit()
    session.refresh(item)
    logger.info(f"Item created: id={item.id}, name={item.name}, price={item.price}")
    return ItemWithCategoryOut.model_validate(item)


@router.patch("/items/{item_id}", response_model=ItemWithCategoryOut, dependencies=[Depends(get_current_user)])
def update_item(item_id: int, data: ItemUpdate, session: SessionDep):
    item = session.get(Item, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")

    update_data = data.model_dump(exclude_unset=True)
    if "category_id" in update_data and not session.get(Category, update_data["category_id"]):
        raise HTTPException(status_code=404, detail=f"Category {update_data['category_id']} not found")

    for key, value in update_data.items():
        setattr(item, key, value)

    session.add(item)
    session.commit()
    session.refresh(item)
    return ItemWithCategoryOut.model_validate(item)


@router.delete("/items/{item_id}", response_model=ItemWithCategoryOut, dependencies=[Depends(get_current_user)])
def delete_item(item_id: int, session: SessionDep):
    item = session.get(Item, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")

    deleted = ItemWithCategoryOut.model_validate(item)
    session.delete(item)
    session.commit()
    logger.info(f"Item {item_id} deleted")
    return deleted
