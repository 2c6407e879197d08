from sqlalchemy.orm import Session

from marketplace.data.models.category import CategoryModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_active_category(self, category_id: int) -> CategoryModel | None:
        category = self.get_category(category_id)
        if category is None or not category.is_active:
            return None
        return category

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.flush()
        return category
