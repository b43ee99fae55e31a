from foodapi.models.category import Category
from foodapi.models.product import Product
from foodapi.models.contact_message import ContactMessage

__all__ = ["Category", "Product", "ContactMessage"]
