# billing/models/bill.py
from . import db


class Bill(db.Model):
    __tablename__ = "bills"
    id = db.Column(db.Integer, primary_key=True)
    customer_name = db.Column(db.String(255), nullable=False, index=True)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    items = db.relationship(
        "BillItem", back_populates="bill", order_by="BillItem.id", lazy="selectin"
    )

    def __repr__(self):
        return f"<Bill id={self.id} customer={self.customer_name!r} total={self.total_amount}>"


class BillItem(db.Model):
    __tablename__ = "bill_items"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_bill_items_quantity_positive"),
    )

    id = db.Column(db.Integer, primary_key=True)
    bill_id = db.Column(db.Integer, db.ForeignKey("bills.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    # unit price at the time of sale, not a live reference to products.price
    price = db.Column(db.Numeric(10, 2), nullable=False)
    total = db.Column(db.Numeric(10, 2), nullable=False)

    bill = db.relationship("Bill", back_populates="items")
    product = db.relationship("Product", lazy="joined")
