"""Create the tables and load demo business units, users and tasks.

Run with ``python -m kanban_api.seed`` (or the ``kanban-seed`` script).
Rows that already exist are left alone, so running it twice is harmless.
"""
import logging
import sys
from datetime import timedelta

from sqlalchemy.orm import Session
from kanban_api.config import ConfigError, load_settings
from kanban_api.database import build_session_factory, check_connection, create_db_engine, init_db
from kanban_api.logging_setup import setup_logging
from kanban_api.models import BusinessUnit, Task, TaskPriority, TaskStatus, User
from kanban_api.utils.auth import hash_password
from kanban_api.utils.clock import utcnow

logger = logging.getLogger(__name__)

BUSINESS_UNITS = [
    ("Corporate", "Corporate headquarters"),
    ("Leasing", "Property leasing division"),
    ("Abattoir", "Meat processing facility"),
    ("GenMeat", "General meat products"),
    ("Porkland", "Pork processing division"),
    ("RANC", "Regional agricultural network"),
    ("GreenAtom", "Sustainable agriculture division"),
]

# (username, password, name, role, business_unit)
DEMO_USERS = [
    ("admin", "admin123", "System Administrator", "admin", "corporate"),
    ("john", "user123", "John Smith", "user", "corporate"),
    ("jane", "user123", "Jane Doe", "business-manager", "leasing"),
    ("mike", "user123", "Mike Johnson", "user", "abattoir"),
]

# (title, description, status, priority, assignee username, due in days)
SAMPLE_TASKS = [
    (
        "Welcome to the Kanban board!",
        "This is your first task. Move it between columns as work progresses.",
        TaskStatus.todo, TaskPriority.medium, "admin", 7,
    ),
    (
        "Set up the database",
        "Connect the application to PostgreSQL for persistent storage.",
        TaskStatus.done, TaskPriority.high, "admin", None,
    ),
    (
        "Test moving tasks between columns",
        "Make sure tasks can be moved between columns smoothly.",
        TaskStatus.inprogress, TaskPriority.medium, "john", None,
    ),
    (
        "Review user permissions",
        "Ensure users can only see and modify appropriate tasks.",
        TaskStatus.review, TaskPriority.high, "jane", None,
    ),
]


def seed_business_units(db: Session) -> int:
    existing = {name for (name,) in db.query(BusinessUnit.name).all()}
    added = 0
    for name, description in BUSINESS_UNITS:
        if name not in existing:
            db.add(BusinessUnit(name=name, description=description))
            added += 1
    db.commit()
    return added


def seed_users(db: Session) -> int:
    existing = {name for (name,) in db.query(User.username).all()}
    hashes = {}
    added = 0
    for username, password, name, role, unit in DEMO_USERS:
        if username in existing:
            continue
        if password not in hashes:
            hashes[password] = hash_password(password)
        db.add(User(
            username=username,
            password_hash=hashes[password],
            name=name,
            role=role,
            business_unit=unit,
        ))
        added += 1
    db.commit()
    return added


def seed_tasks(db: Session) -> int:
    users = {u.username: u.id for u in db.query(User).all()}
    creator_id = users["admin"]
    existing = {title for (title,) in db.query(Task.title).all()}
    now = utcnow()
    added = 0
    for title, description, status, priority, assignee, due_in in SAMPLE_TASKS:
        if title in existing:
            continue
        db.add(Task(
            title=title,
            description=description,
            status=status.value,
            priority=priority.value,
            assignee_id=users.get(assignee),
            created_by_id=creator_id,
            due_date=(now + timedelta(days=due_in)).date() if due_in else None,
            completed_at=now if status is TaskStatus.done else None,
            created_at=now,
            updated_at=now,
        ))
        added += 1
    db.commit()
    return added


def seed_demo_data(db: Session) -> dict:
    counts = {
        "business_units": seed_business_units(db),
        "users": seed_users(db),
        "tasks": seed_tasks(db),
    }
    logger.info("Seeded %(business_units)d business units, %(users)d users, %(tasks)d tasks", counts)
    return counts


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return 1
    setup_logging(settings.log_level)

    engine = create_db_engine(settings.database_url)
    try:
        check_connection(engine)
        init_db(engine)
        with build_session_factory(engine)() as db:
            seed_demo_data(db)
    except Exception:
        logger.exception("Database setup failed")
        return 1
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
