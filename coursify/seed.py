"""Seed a Coursify database.

Registration always creates ``pending`` accounts, so the first admin has to be
created here:

    python -m coursify.seed --admin-email admin@example.com --admin-password secret

``--demo-users N`` additionally registers N pending students and instructors
that share ``--demo-password``.
"""

import argparse
import logging

from faker import Faker

from coursify.core.errors import ConflictError
from coursify.database import Base, SessionLocal, engine, ensure_schema
from coursify.models import course, enrollment, material  # noqa: F401  # register tables
from coursify.models.user import ROLE_ADMIN, ROLE_INSTRUCTOR, ROLE_STUDENT
from coursify.services import users

logger = logging.getLogger('coursify.seed')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Seed the Coursify database.')
    parser.add_argument('--admin-email', help='Email of an active admin account to create.')
    parser.add_argument('--admin-password', help='Password for the admin account.')
    parser.add_argument('--admin-name', default='Coursify Admin', help='Full name for the admin account.')
    parser.add_argument('--demo-users', type=int, default=0, help='Number of pending demo users to register.')
    parser.add_argument('--demo-password', default='password123', help='Password shared by demo users.')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible demo data.')
    return parser


def seed_admin(db, *, email: str, password: str, full_name: str) -> bool:
    try:
        admin = users.register_user(db, full_name=full_name, email=email, password=password, role=ROLE_ADMIN)
    except ConflictError:
        logger.info('Admin %s already exists, skipping', email)
        return False
    users.approve_user(db, admin.id)
    logger.info('Created active admin %s', admin.email)
    return True


def seed_demo_users(db, *, count: int, password: str, fake: Faker) -> int:
    created = 0
    for _ in range(count):
        role = fake.random_element([ROLE_STUDENT, ROLE_INSTRUCTOR])
        email = fake.unique.email()
        try:
            users.register_user(db, full_name=fake.name(), email=email, password=password, role=role)
        except ConflictError:
            logger.info('Demo user %s already exists, skipping', email)
            continue
        created += 1
    return created


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if bool(args.admin_email) != bool(args.admin_password):
        parser.error('--admin-email and --admin-password must be given together')
    if args.demo_users < 0:
        parser.error('--demo-users must not be negative')

    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s %(message)s')

    Base.metadata.create_all(bind=engine)
    ensure_schema()

    db = SessionLocal()
    try:
        if args.admin_email:
            seed_admin(db, email=args.admin_email, password=args.admin_password, full_name=args.admin_name)
        if args.demo_users:
            if args.seed is not None:
                Faker.seed(args.seed)
            created = seed_demo_users(
                db,
                count=args.demo_users,
                password=args.demo_password,
                fake=Faker(),
            )
            logger.info('Registered %s demo users', created)
    finally:
        db.close()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
