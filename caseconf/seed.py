"""Seed the bootstrap admin and, optionally, a small demo dataset."""
import logging

from caseconf.config import Settings
from caseconf.models import RecordKind, UserRole
from caseconf.services.passwords import get_password_hash
from caseconf.services.store import RecordStore

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "demo123"


def seed_admin(store: RecordStore, settings: Settings) -> None:
    if store.find_user(settings.admin_email, UserRole.ADMIN):
        return
    store.create(
        RecordKind.USERS,
        {
            "name": settings.admin_name,
            "email": settings.admin_email,
            "password_hash": get_password_hash(settings.admin_password),
        },
        None,
    )
    logger.info("Seeded admin account %s", settings.admin_email)


def seed_demo_data(store: RecordStore) -> None:
    if store.list(RecordKind.SCHOOLS):
        return
    school = store.create(
        RecordKind.SCHOOLS,
        {"name": "Lincoln Elementary", "type": "elementary", "grades": "K-5", "enrollment": 420},
        None,
    )
    teacher = store.create(
        RecordKind.TEACHERS,
        {
            "name": "Sarah Johnson",
            "email": "teacher@test.com",
            "password_hash": get_password_hash(DEMO_PASSWORD),
            "assigned_schools": [school.id],
            "profile": {"qualifications": "M.Ed. Special Education", "years_experience": 8},
        },
        None,
    )
    student = store.create(
        RecordKind.STUDENTS,
        {
            "name": "Emma Wilson",
            "gender": "female",
            "school": school.id,
            "disability_category": "learning-disability",
            "assigned_teacher": teacher.id,
        },
        None,
    )
    store.create(
        RecordKind.PARENTS,
        {
            "name": "Michael Wilson",
            "email": "parent@test.com",
            "password_hash": get_password_hash(DEMO_PASSWORD),
            "children": [student.id],
        },
        None,
    )
    logger.info("Seeded demo school, teacher, student and parent")
