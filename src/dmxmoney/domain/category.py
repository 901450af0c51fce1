"""Category domain service."""

from dmxmoney.database.base import Database
from dmxmoney.domain.entities import Category
from dmxmoney.domain.transaction import TRANSFER_CATEGORY

TRANSFER_CATEGORY_DEFAULTS = Category(
    id=TRANSFER_CATEGORY, name="Virement", icon="ArrowRightLeft", color="#6366f1"
)


class CategoryService:
    """Service for managing categories.

    Transactions refer to categories by free-text tag, so deleting a
    category never touches transactions.
    """

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_categories(self) -> list[Category]:
        """List all categories."""
        return self.db.list_categories()

    def create_category(self, category: Category) -> None:
        """Create a category; an existing id is left as it is."""
        self.db.create_category(category)

    def update_category(self, category: Category) -> None:
        """Replace every field of the category with the same id."""
        self.db.update_category(category)

    def delete_category(self, category_id: str) -> None:
        """Delete a category."""
        self.db.delete_category(category_id)

    def ensure_transfer_category(self) -> None:
        """Create the category used by transfer legs if it is missing."""
        self.db.create_category(TRANSFER_CATEGORY_DEFAULTS)
