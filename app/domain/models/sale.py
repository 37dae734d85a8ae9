"""Sale aggregate — the 'sales' header and its 'sale_items' lines."""

from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.infrastructure.database import Base


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, autoincrement=True)
    invoice_number = Column(String(30), unique=True, nullable=False, index=True)
    sale_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    client = relationship("Client", back_populates="sales")

    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.id",
    )

    subtotal = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    tax_rate = Column(Numeric(5, 4), nullable=False)
    total = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    payment_method = Column(String(50), nullable=False, default="")
    is_paid = Column(Boolean, nullable=False, default=False)
    notes = Column(String(300), nullable=False, default="")

    def __repr__(self):
        return f"<Sale {self.invoice_number} - {self.total}>"


class SaleItem(Base):
    __tablename__ = "sale_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_sale_items_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="ck_sale_items_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    sale_id = Column(Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    # Price captured at sale time, independent of the product's current price
    unit_price = Column(Numeric(10, 2), nullable=False)

    sale = relationship("Sale", back_populates="items")
    product = relationship("Product")

    @property
    def subtotal(self) -> Decimal:
        return Decimal(self.quantity) * Decimal(self.unit_price)

    def __repr__(self):
        return f"<SaleItem sale={self.sale_id} product={self.product_id} x{self.quantity}>"
