"""Authorization Policies — one pure function per operation, returning a Decision.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Inputs are the requester plus the owner/assignee ids of the target resource
    - Admins are always allowed; role "user" is scoped to resources they own
    - A Decision either denies, allows everything, or narrows to a field subset

Design Decisions:
    - Decision value over raising inside policies: services decide how to log
      and which message to surface, policies stay trivially testable
    - Narrowed field sets are frozensets of patch attribute names (core/patches.py)
"""

from dataclasses import dataclass, replace
from uuid import UUID

from taskhub.core.domain_types import Role
from taskhub.core.errors import ErrorContext, ForbiddenError
from taskhub.core.listing import TaskListQuery


@dataclass(frozen=True)
class Requester:
    """Authenticated identity performing an operation (decoded from the token)."""
    id: UUID
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy check.

    fields is None when the requester may touch every field; otherwise it is
    the subset of patch fields that survive narrowing.
    """
    allowed: bool
    reason: str | None = None
    fields: frozenset[str] | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)

    @classmethod
    def narrow(cls, fields: frozenset[str]) -> "Decision":
        return cls(allowed=True, fields=fields)

    @property
    def is_narrowed(self) -> bool:
        return self.allowed and self.fields is not None


# Fields a task creator/assignee without admin rights may change.
TASK_FIELDS_EDITABLE_BY_USER = frozenset({"status", "description"})

# Everything on a user patch except the role.
USER_FIELDS_EDITABLE_BY_SELF = frozenset({
    "name", "email", "phone_number", "address",
})


def _is_party_to_task(
    requester: Requester, created_by: UUID, assigned_to: UUID | None,
) -> bool:
    return requester.id == created_by or (
        assigned_to is not None and requester.id == assigned_to
    )


# ─── Task Policies ───────────────────────────────────────────────

def scope_task_listing(
    requester: Requester, query: TaskListQuery,
) -> TaskListQuery:
    """Restrict a listing to the requester's own tasks unless admin.

    A non-admin's assigned_to filter is dropped rather than rejected: it must
    never become a way to browse someone else's tasks.
    """
    if requester.is_admin:
        return query
    return replace(query, assigned_to=None, visible_to=requester.id)


def task_view_policy(
    requester: Requester, created_by: UUID, assigned_to: UUID | None,
) -> Decision:
    """Users see tasks they created or are assigned to."""
    if requester.is_admin or _is_party_to_task(requester, created_by, assigned_to):
        return Decision.allow()
    return Decision.deny("Not authorized to view this task")


def task_update_policy(
    requester: Requester, created_by: UUID, assigned_to: UUID | None,
) -> Decision:
    """Creator or assignee may update, but only status and description."""
    if requester.is_admin:
        return Decision.allow()
    if not _is_party_to_task(requester, created_by, assigned_to):
        return Decision.deny("Not authorized to update this task")
    return Decision.narrow(TASK_FIELDS_EDITABLE_BY_USER)


def task_delete_policy(requester: Requester, created_by: UUID) -> Decision:
    """Only the creator may delete; assignees cannot."""
    if requester.is_admin or requester.id == created_by:
        return Decision.allow()
    return Decision.deny("Not authorized to delete this task")


def task_assign_policy(requester: Requester, created_by: UUID) -> Decision:
    """Only the creator may (re)assign."""
    if requester.is_admin or requester.id == created_by:
        return Decision.allow()
    return Decision.deny("Not authorized to assign this task")


# ─── User Policies ───────────────────────────────────────────────

def user_list_policy(requester: Requester) -> Decision:
    if requester.is_admin:
        return Decision.allow()
    return Decision.deny("Not authorized to list users")


def user_create_policy(requester: Requester) -> Decision:
    if requester.is_admin:
        return Decision.allow()
    return Decision.deny("Not authorized to create users")


def user_view_policy(requester: Requester, target_id: UUID) -> Decision:
    if requester.is_admin or requester.id == target_id:
        return Decision.allow()
    return Decision.deny("Not authorized to view this user")


def user_update_policy(requester: Requester, target_id: UUID) -> Decision:
    """Self-service updates drop the role field; admins may change anything."""
    if requester.is_admin:
        return Decision.allow()
    if requester.id != target_id:
        return Decision.deny("Not authorized to update this user")
    return Decision.narrow(USER_FIELDS_EDITABLE_BY_SELF)


def user_delete_policy(requester: Requester) -> Decision:
    if requester.is_admin:
        return Decision.allow()
    return Decision.deny("Not authorized to delete users")


def user_tasks_policy(requester: Requester, target_id: UUID) -> Decision:
    if requester.is_admin or requester.id == target_id:
        return Decision.allow()
    return Decision.deny("Not authorized to view this user's tasks")


def is_self_deletion(requester: Requester, target_id: UUID) -> bool:
    return requester.id == target_id


# ─── Enforcement ─────────────────────────────────────────────────

def enforce(
    decision: Decision, requester: Requester, resource_id: UUID | None = None,
) -> Decision:
    """Raise ForbiddenError for a denied decision, otherwise hand it back."""
    if not decision.allowed:
        raise ForbiddenError(
            decision.reason or "Insufficient permissions",
            context=ErrorContext(
                requester_id=str(requester.id),
                resource_id=str(resource_id) if resource_id else None,
            ),
        )
    return decision
