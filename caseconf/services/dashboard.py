"""Role-shaped dashboard aggregates, computed from current store state."""
from __future__ import annotations

from typing import Any, assert_never

from caseconf.models import FormStatus, Identity, RecordKind, Student, UserRole
from caseconf.services.policy import AccessPolicy


def _form_counts(students: list[Student]) -> dict[str, int]:
    counts = {status: 0 for status in FormStatus}
    for s in students:
        for state in (s.forms.progress, s.forms.assessment, s.forms.iep):
            counts[state.status] += 1
    return {
        "pendingForms": counts[FormStatus.PENDING],
        "inProgressForms": counts[FormStatus.IN_PROGRESS],
        "completedForms": counts[FormStatus.COMPLETED],
    }


def dashboard_stats(policy: AccessPolicy, identity: Identity) -> dict[str, Any]:
    students: list[Student] = policy.visible(identity, RecordKind.STUDENTS)
    forms = _form_counts(students)
    match identity.role:
        case UserRole.ADMIN:
            store = policy.store
            return {
                "totalStudents": len(students),
                "totalTeachers": len(store.list(RecordKind.TEACHERS)),
                "totalSchools": len(store.list(RecordKind.SCHOOLS)),
                "totalParents": len(store.list(RecordKind.PARENTS)),
                **forms,
            }
        case UserRole.TEACHER:
            return {
                "myStudents": len(students),
                **forms,
                "assignedSchools": len(policy.visible(identity, RecordKind.SCHOOLS)),
            }
        case UserRole.PARENT:
            return {
                "myChildren": len(students),
                **forms,
            }
        case _:
            assert_never(identity.role)
