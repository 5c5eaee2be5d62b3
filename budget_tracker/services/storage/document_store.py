"""
Document Store

Owns the single in-memory ApplicationData document and is the only
component allowed to mutate it.

GUARANTEES:
- Every mutating call is followed by a full write-through to the backend
- A category still referenced by an expense is never removed
- Ids are `max(existing) + 1` and are not handed out twice in one process

NOT GUARANTEED:
- Cascading deletes. Removing a user or a budget here is a raw removal;
  the services issue the cascade as an explicit sequence of calls.
- Concurrent access. There is exactly one writer; adding network or
  multi-process access needs a lock around load/persist.
"""

from typing import Callable, Optional, TypeVar, Union

from pydantic import ValidationError

from budget_tracker.audit import AuditLogger
from budget_tracker.models.audit import AuditEventBuilder
from budget_tracker.models.document import (
    ApplicationData,
    EntityKind,
    IntegrityIssue,
    LoadReport,
)
from budget_tracker.models.entities import Budget, Category, Expense, User
from budget_tracker.services.storage.interface import (
    DocumentLoadError,
    DuplicateError,
    PersistError,
    StorageBackend,
)


Entity = Union[User, Budget, Category, Expense]
E = TypeVar("E", User, Budget, Category, Expense)


_COLLECTIONS = {
    EntityKind.USER: "users",
    EntityKind.BUDGET: "budgets",
    EntityKind.CATEGORY: "categories",
    EntityKind.EXPENSE: "expenses",
}

_MODELS = {
    EntityKind.USER: User,
    EntityKind.BUDGET: Budget,
    EntityKind.CATEGORY: Category,
    EntityKind.EXPENSE: Expense,
}

# Default parent reference used by get_by_foreign_key
_FOREIGN_KEYS = {
    EntityKind.BUDGET: "user_id",
    EntityKind.EXPENSE: "budget_id",
}


class DocumentStore:
    """
    CRUD and referential-integrity operations over the document.
    
    Lookups return None for absent records instead of raising;
    callers decide what a missing record means.
    """
    
    def __init__(
        self,
        backend: StorageBackend,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._backend = backend
        self._audit = audit_logger or AuditLogger()
        self._document = ApplicationData()
        self._issued_ids = {kind: 0 for kind in EntityKind}
    
    @property
    def document(self) -> ApplicationData:
        return self._document
    
    @property
    def location(self) -> str:
        return self._backend.location
    
    def _collection(self, kind: EntityKind) -> list:
        return getattr(self._document, _COLLECTIONS[kind])
    
    # =========================================================================
    # LOAD / PERSIST
    # =========================================================================
    
    def load(self) -> LoadReport:
        """
        Replace the in-memory document with the persisted one.
        
        A missing document is a fresh start, not an error.
        
        Raises:
            DocumentLoadError: If the document cannot be read or is malformed
        """
        location = self._backend.location
        
        try:
            payload = self._backend.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentLoadError(f"Could not read data file {location}: {e}") from e
        
        if payload is None:
            self._document = ApplicationData()
            self._reset_issued_ids()
            self._audit.log(AuditEventBuilder.document_missing(location))
            return LoadReport(found=False)
        
        try:
            document = ApplicationData.model_validate_json(payload)
        except ValidationError as e:
            raise DocumentLoadError(
                f"Data file {location} is malformed "
                f"({e.error_count()} problem(s)): {e.errors()[0]['msg']}"
            ) from e
        
        self._document = document
        self._reset_issued_ids()
        issues = self._link_references()
        
        for issue in issues:
            self._audit.log(AuditEventBuilder.integrity_violation(
                issue.entity_type, issue.entity_id, issue.message,
            ))
        
        report = LoadReport(
            found=True,
            user_count=len(document.users),
            budget_count=len(document.budgets),
            category_count=len(document.categories),
            expense_count=len(document.expenses),
            integrity_issues=issues,
        )
        self._audit.log(AuditEventBuilder.document_loaded(location, {
            "users": report.user_count,
            "budgets": report.budget_count,
            "categories": report.category_count,
            "expenses": report.expense_count,
        }))
        return report
    
    def persist(self) -> None:
        """
        Write the whole document to the backend.
        
        Raises:
            PersistError: If the backend write fails. The in-memory change
                          stays applied for the rest of the run.
        """
        payload = self._document.to_json()
        try:
            self._backend.write(payload)
        except OSError as e:
            self._audit.log(AuditEventBuilder.persist_failed(self._backend.location, str(e)))
            raise PersistError(
                f"Could not save changes to {self._backend.location}: {e}"
            ) from e
        self._audit.log(AuditEventBuilder.document_persisted(
            self._backend.location, len(payload.encode("utf-8")),
        ))
    
    def _reset_issued_ids(self) -> None:
        for kind in EntityKind:
            ids = [entity.id for entity in self._collection(kind)]
            self._issued_ids[kind] = max(ids, default=0)
    
    def _link_references(self) -> list[IntegrityIssue]:
        """Rebuild each expense's category link and collect dangling references."""
        issues = []
        categories = {c.id: c for c in self._document.categories}
        budget_ids = {b.id for b in self._document.budgets}
        user_ids = {u.id for u in self._document.users}
        
        for expense in self._document.expenses:
            category = categories.get(expense.category_id)
            expense.attach_category(category)
            if category is None:
                issues.append(IntegrityIssue(
                    entity_type=EntityKind.EXPENSE.value,
                    entity_id=expense.id,
                    field="category_id",
                    missing_id=expense.category_id,
                    message=(
                        f"Expense {expense.id} references missing category "
                        f"{expense.category_id}"
                    ),
                ))
            if expense.budget_id not in budget_ids:
                issues.append(IntegrityIssue(
                    entity_type=EntityKind.EXPENSE.value,
                    entity_id=expense.id,
                    field="budget_id",
                    missing_id=expense.budget_id,
                    message=(
                        f"Expense {expense.id} references missing budget "
                        f"{expense.budget_id}"
                    ),
                ))
        
        for budget in self._document.budgets:
            if budget.user_id not in user_ids:
                issues.append(IntegrityIssue(
                    entity_type=EntityKind.BUDGET.value,
                    entity_id=budget.id,
                    field="user_id",
                    missing_id=budget.user_id,
                    message=f"Budget {budget.id} references missing user {budget.user_id}",
                ))
        
        return issues
    
    # =========================================================================
    # QUERIES
    # =========================================================================
    
    def get_by_id(self, kind: EntityKind, entity_id: int) -> Optional[Entity]:
        for entity in self._collection(kind):
            if entity.id == entity_id:
                return entity
        return None
    
    def get_all(self, kind: EntityKind) -> list:
        return list(self._collection(kind))
    
    def get_by_foreign_key(
        self,
        kind: EntityKind,
        parent_id: int,
        field: Optional[str] = None,
    ) -> list:
        """
        Records of `kind` whose parent reference equals `parent_id`.
        
        `field` defaults to user_id for budgets and budget_id for expenses.
        """
        field = field or _FOREIGN_KEYS.get(kind)
        if field is None:
            raise ValueError(f"{kind.value} has no parent reference")
        return [e for e in self._collection(kind) if getattr(e, field) == parent_id]
    
    def exists(self, kind: EntityKind, predicate: Callable[[Entity], bool]) -> bool:
        return any(predicate(entity) for entity in self._collection(kind))
    
    def count(self, kind: EntityKind) -> int:
        return len(self._collection(kind))
    
    def next_id(self, kind: EntityKind) -> int:
        ids = [entity.id for entity in self._collection(kind)]
        return max(max(ids, default=0), self._issued_ids[kind]) + 1
    
    # =========================================================================
    # MUTATIONS (each one persists)
    # =========================================================================
    
    def add(self, entity: E) -> E:
        kind = self._kind_of(entity)
        if self.get_by_id(kind, entity.id) is not None:
            raise DuplicateError(f"{kind.value} with id {entity.id} already exists")
        
        if kind == EntityKind.EXPENSE:
            entity.attach_category(self.get_by_id(EntityKind.CATEGORY, entity.category_id))
        
        self._collection(kind).append(entity)
        self._issued_ids[kind] = max(self._issued_ids[kind], entity.id)
        self.persist()
        return entity
    
    def remove(self, kind: EntityKind, entity_id: int) -> bool:
        """
        Remove one record.
        
        Returns False (and changes nothing) if the record does not exist, or
        if it is a category that an expense still references.
        """
        if self.get_by_id(kind, entity_id) is None:
            return False
        
        if kind == EntityKind.CATEGORY and self.exists(
            EntityKind.EXPENSE, lambda e: e.category_id == entity_id
        ):
            return False
        
        collection = self._collection(kind)
        collection[:] = [e for e in collection if e.id != entity_id]
        self.persist()
        return True
    
    def update_field(
        self,
        kind: EntityKind,
        entity_id: int,
        mutation: Callable[[Entity], None],
    ) -> Optional[Entity]:
        """
        Apply `mutation` to the stored record in place and persist.
        
        Returns the updated record, or None if it does not exist.
        """
        entity = self.get_by_id(kind, entity_id)
        if entity is None:
            return None
        
        mutation(entity)
        
        if kind == EntityKind.EXPENSE:
            entity.attach_category(self.get_by_id(EntityKind.CATEGORY, entity.category_id))
        
        self.persist()
        return entity
    
    @staticmethod
    def _kind_of(entity: Entity) -> EntityKind:
        for kind, model in _MODELS.items():
            if isinstance(entity, model):
                return kind
        raise TypeError(f"Unsupported entity type: {type(entity).__name__}")
