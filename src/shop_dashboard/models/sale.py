"""
Sale model for recorded sales transactions.

Amount and profit are computed from the product's price and cost when the
sale is recorded and stored with the row, so later price edits do not
rewrite history. Deleting a product keeps its sales; the product reference
becomes NULL.
"""

from decimal import Decimal

from sqlalchemy import (
    Column,
    Integer,
    String,
    Numeric,
    Date,
    DateTime,
    ForeignKey,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from shop_dashboard.utils.datetime_utils import utc_now


class Sale(BaseModel):
    """
    Sale model.

    Attributes:
        store_id: Store where the sale happened
        product_id: Product sold (NULL once the product is deleted)
        user_id: Profile that recorded the sale (optional)
        quantity: Units sold
        amount: Revenue (price * quantity)
        profit: Profit ((price - cost) * quantity)
        note: Free text note
        sale_date: Business date the sale counts toward
        sold_at: Timestamp the sale was recorded
    """

    __tablename__ = "sales"

    store_id = Column(Integer, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True
    )
    user_id = Column(Integer, ForeignKey("user_profiles.id", ondelete="SET NULL"), nullable=True)

    quantity = Column(Integer, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False, default=0)
    profit = Column(Numeric(14, 2), nullable=False, default=0)
    note = Column(String(500), nullable=True)

    sale_date = Column(Date, nullable=False)
    sold_at = Column(DateTime, nullable=False, default=utc_now)

    store = relationship("Store", back_populates="sales")
    product = relationship("Product", back_populates="sales")

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_sale_quantity_non_negative"),
        Index("idx_sale_store_date", "store_id", "sale_date"),
    )

    @property
    def unit_price(self) -> Decimal:
        """Revenue per unit for this sale (0 when quantity is 0)."""
        if not self.quantity:
            return Decimal("0")
        return Decimal(self.amount) / self.quantity
