"""
User Service

Creates, renames, selects and deletes users. Deleting a user cascades
to every budget the user owns and every expense in those budgets.
"""

from typing import Optional

from budget_tracker.models.document import EntityKind
from budget_tracker.models.entities import User
from budget_tracker.models.audit import AuditEventBuilder
from budget_tracker.models.outcome import Outcome
from budget_tracker.services.base import DomainService
from budget_tracker.services.cascade import remove_user_budgets
from budget_tracker.session import Session


class UserService(DomainService):
    
    entity_type = EntityKind.USER.value
    
    def create_user(self, username: Optional[str], name: Optional[str]) -> Outcome[User]:
        """
        Rules, first failure wins: username non-blank, name non-blank,
        username not already taken (case-insensitive).
        """
        issue = self._validator.check_new_user(username, name)
        if issue:
            return self._reject(issue)
        
        user = User(
            id=self._store.next_id(EntityKind.USER),
            username=username.strip(),
            name=name.strip(),
        )
        self._store.add(user)
        self._audit.log_created(self.entity_type, user.id, user.username)
        
        return Outcome.ok(f"User '{user.username}' has been successfully created.", user)
    
    def update_user(self, session: Session, name: Optional[str]) -> Outcome[User]:
        """Rename the active user. The username never changes."""
        user = self._resolve_active(session)
        if user is None:
            return Outcome.not_found("No active user found. Select or create a user.")
        
        issue = self._validator.check_user_name(name)
        if issue:
            return self._reject(issue)
        
        new_name = name.strip()
        old_name = user.name
        
        def rename(record: User) -> None:
            record.name = new_name
        
        updated = self._store.update_field(EntityKind.USER, user.id, rename)
        session.set_active_user(updated)
        self._audit.log_updated(self.entity_type, user.id, {"name": [old_name, new_name]})
        
        return Outcome.ok(f"User '{updated.username}' has been successfully updated.", updated)
    
    def delete_user(self, session: Session) -> Outcome[None]:
        """
        Delete the active user with all of their budgets and expenses,
        then clear the active-user selection.
        """
        user = self._resolve_active(session)
        if user is None:
            session.clear_active_user()
            return Outcome.not_found("No active user found. Select or create a user.")
        
        cascaded = remove_user_budgets(self._store, user.id)
        self._store.remove(EntityKind.USER, user.id)
        session.clear_active_user()
        self._audit.log_deleted(self.entity_type, user.id, cascaded)
        
        return Outcome.ok("User removed successfully.")
    
    def list_users(self) -> list[User]:
        return self._store.get_all(EntityKind.USER)
    
    def get_user(self, user_id: int) -> Optional[User]:
        return self._store.get_by_id(EntityKind.USER, user_id)
    
    def set_active_user(self, session: Session, user_id: int) -> Outcome[User]:
        user = self.get_user(user_id)
        if user is None:
            return Outcome.not_found("User not found.")
        
        session.set_active_user(user)
        self._audit.log(AuditEventBuilder.user_selected(user.id, user.username))
        return Outcome.ok(f"Active user set to '{user.name}'.", user)
    
    def _resolve_active(self, session: Session) -> Optional[User]:
        if session.active_user_id is None:
            return None
        return self.get_user(session.active_user_id)
