"""
Store model for the shops that share one dashboard database.

Every product and sale belongs to exactly one store; staff profiles are
assigned to a store, admins may view all of them.
"""

from sqlalchemy import Column, String, Index
from sqlalchemy.orm import relationship

from .base import BaseModel


class Store(BaseModel):
    """
    Store model.

    Attributes:
        name: Display name (e.g., "渋谷店")
        code: Short unique store code shown next to the name

    Relationships:
        products: Products defined for this store
        sales: Sales recorded at this store
        profiles: User profiles assigned to this store
    """

    __tablename__ = "stores"

    name = Column(String(200), nullable=False)
    code = Column(String(50), nullable=False, unique=True)

    products = relationship("Product", back_populates="store", cascade="all, delete-orphan")
    sales = relationship("Sale", back_populates="store", cascade="all, delete-orphan")
    profiles = relationship("UserProfile", back_populates="store")

    __table_args__ = (Index("idx_store_name", "name"),)
