from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, Numeric, DateTime, func
from sqlalchemy.orm import relationship
from foodapi.db.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    description = Column(Text)
    price = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2))
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    image = Column(String(500), nullable=False)
    type = Column(String(10), nullable=False)  # "veg" | "non-veg"
    tags = Column(Text)  # JSON array
    prep_time = Column(String(50), nullable=False, server_default="15-20 min")
    ingredients = Column(Text)  # JSON array
    is_available = Column(Boolean, nullable=False, default=True, server_default="1")
    is_popular = Column(Boolean, nullable=False, default=False, server_default="0")
    is_featured = Column(Boolean, nullable=False, default=False, server_default="0")
    rating = Column(Numeric(2, 1), nullable=False, server_default="0")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    category = relationship("Category", back_populates="products")
