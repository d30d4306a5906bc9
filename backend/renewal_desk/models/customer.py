"""Customer and policy models: the book of business reminders are sent from."""
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from renewal_desk.core.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    phone = Column(String, nullable=False, unique=True, index=True)  # +<country code><number>
    email = Column(String, nullable=True)

    policies = relationship("Policy", back_populates="customer")


class Policy(Base):
    __tablename__ = "policies"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True, index=True)

    policy_number = Column(String, nullable=False, unique=True, index=True)
    policy_type = Column(String, nullable=False)
    expiry_date = Column(String, nullable=False, index=True)  # YYYY-MM-DD as imported
    status = Column(String, default="active", server_default="active")

    customer = relationship("Customer", back_populates="policies")
