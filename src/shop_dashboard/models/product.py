"""
Product model for items a store sells.

A product carries its selling price, unit cost and its recipe: the list of
materials consumed to make one unit. The recipe is stored as a JSON list of
``{"name": ..., "quantity": ...}`` objects, where quantity is free text
such as "100g", "2枚" or "1.5L".
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Numeric,
    Text,
    ForeignKey,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class Product(BaseModel):
    """
    Product model.

    Attributes:
        store_id: Store that sells the product
        name: Display name (e.g., "唐揚げ弁当")
        price: Selling price per unit
        cost: Cost per unit
        materials: Serialized recipe (JSON text)
        user_id: Profile that last saved the product (optional)
    """

    __tablename__ = "products"

    store_id = Column(Integer, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    cost = Column(Numeric(12, 2), nullable=False, default=0)
    materials = Column(Text, nullable=True)
    user_id = Column(Integer, ForeignKey("user_profiles.id", ondelete="SET NULL"), nullable=True)

    store = relationship("Store", back_populates="products")
    sales = relationship("Sale", back_populates="product")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
        CheckConstraint("cost >= 0", name="ck_product_cost_non_negative"),
        Index("idx_product_store", "store_id"),
        Index("idx_product_store_name", "store_id", "name"),
    )
