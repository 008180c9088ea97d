from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

class Base(DeclarativeBase):
    pass

class Product(Base):
    __tablename__ = "productos"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(String(1000))
    price: Mapped[Optional[float]]
    stock: Mapped[Optional[int]]

# Core table used by the repository for plain INSERT/SELECT/UPDATE/DELETE statements
products = Product.__table__
