"""
Category Service

Categories are global tags shared by every user's expenses. A category
that any expense still uses cannot be deleted.
"""

from typing import Optional

from budget_tracker.models.document import EntityKind
from budget_tracker.models.entities import Category
from budget_tracker.models.outcome import Outcome, OutcomeStatus
from budget_tracker.services.base import DomainService
from budget_tracker.session import Session


class CategoryService(DomainService):
    
    entity_type = EntityKind.CATEGORY.value
    
    def create_category(self, name: Optional[str]) -> Outcome[Category]:
        issue = self._validator.check_new_category(name)
        if issue:
            return self._reject(issue)
        
        category = Category(
            id=self._store.next_id(EntityKind.CATEGORY),
            name=name.strip(),
        )
        self._store.add(category)
        self._audit.log_created(self.entity_type, category.id, category.name)
        
        return Outcome.ok(f"'{category.name}' Category has been successfully created.", category)
    
    def update_category(self, category_id: int, name: Optional[str]) -> Outcome[Category]:
        """
        Rename a category.
        
        Re-submitting the current name (in any case) succeeds without
        touching any other category.
        """
        category = self.get_category(category_id)
        if category is None:
            return Outcome.not_found("Category not found.")
        
        issue = self._validator.check_category_rename(category_id, name)
        if issue:
            return self._reject(issue)
        
        new_name = name.strip()
        old_name = category.name
        
        def rename(record: Category) -> None:
            record.name = new_name
        
        updated = self._store.update_field(EntityKind.CATEGORY, category_id, rename)
        
        # Expenses hold the category object itself, so their display name follows
        self._audit.log_updated(self.entity_type, category_id, {"name": [old_name, new_name]})
        
        return Outcome.ok(f"'{updated.name}' Category has been successfully updated.", updated)
    
    def delete_category(self, session: Session) -> Outcome[None]:
        """
        Delete the selected category.
        
        Not found and still-in-use are reported with different statuses.
        """
        category_id = session.selected_category_id
        if category_id is None or self.get_category(category_id) is None:
            session.clear_category()
            return Outcome.not_found("Category not found.")
        
        dependents = len([
            e for e in self._store.get_all(EntityKind.EXPENSE)
            if e.category_id == category_id
        ])
        if dependents or not self._store.remove(EntityKind.CATEGORY, category_id):
            self._audit.log_delete_blocked(self.entity_type, category_id, dependents)
            return Outcome.fail(
                "There was a problem deleting the category, there may be dependencies.",
                OutcomeStatus.DEPENDENCY_BLOCKED,
            )
        
        session.clear_category()
        self._audit.log_deleted(self.entity_type, category_id)
        return Outcome.ok("Category removed successfully.")
    
    def list_categories(self) -> list[Category]:
        return self._store.get_all(EntityKind.CATEGORY)
    
    def get_category(self, category_id: int) -> Optional[Category]:
        return self._store.get_by_id(EntityKind.CATEGORY, category_id)
    
    def select_category(self, session: Session, category_id: int) -> Outcome[Category]:
        category = self.get_category(category_id)
        if category is None:
            return Outcome.not_found("Category not found.")
        session.select_category(category)
        return Outcome.ok(f"Selected category '{category.name}'.", category)
