from decimal import Decimal
from typing import Optional

from sqlalchemy import Engine, delete
from sqlmodel import Session, select

from restaurant_pos.db import create_db_engine
from restaurant_pos.db.menu import Category, Item
from restaurant_pos.db.orders import Order, OrderItem
from restaurant_pos.db.tables import DiningTable, TableSession
from restaurant_pos.settings import Settings


def create_test_data(engine: Optional[Engine] = None):
    if engine is None:
        engine = create_db_engine(Settings())

    with Session(engine) as session:
        # Чистим в порядке зависимостей по внешним ключам
        for model in (OrderItem, Order, TableSession, Item, Category, DiningTable):
            session.execute(delete(model))
        session.commit()

        categories = [
            Category(name="Appetizers"),
            Category(name="Main Course"),
            Category(name="Beverages"),
            Category(name="Desserts"),
        ]
        for category in categories:
            session.add(category)

        session.commit()

        appetizers = session.exec(select(Category).where(Category.name == "Appetizers")).one()
        beverages = session.exec(select(Category).where(Category.name == "Beverages")).one()

        items = [
            Item(name="Spring Rolls", price=Decimal("5.99"), category_id=appetizers.id),
            Item(name="Garlic Bread", price=Decimal("4.50"), category_id=appetizers.id),
            Item(name="Coke", price=Decimal("2.00"), category_id=beverages.id),
            Item(name="Lemonade", price=Decimal("2.50"), category_id=beverages.id),
        ]
        for item in items:
            session.add(item)

        for number in range(1, 6):
            session.add(DiningTable(table_number=number))

        session.commit()
        print("Test data created successfully!")

if __name__ == "__main__":
    create_test_data()
