#!/usr/bin/env python
"""Idempotent seed script for console users (one demo account per role).

Usage:
    python backend/scripts/seed_users.py                # seed normally
    python backend/scripts/seed_users.py --show-users   # print users with role + permission counts
    python backend/scripts/seed_users.py --dry-run      # run logic then rollback (no DB changes)
"""
from __future__ import annotations
import os, sys, argparse, textwrap
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from stockdesk import create_app, get_db  # type: ignore
from stockdesk.constants.permissions import PERMISSION_PRESETS, sanitize_permissions
from stockdesk.constants.roles import Role, normalize_role
from stockdesk.models.user import Base, User

DEMO_USERS = (
    ('ceo@example.com', 'Ama', 'Owusu', Role.CEO),
    ('manager@example.com', 'Kofi', 'Mensah', Role.MANAGER),
    ('sales@example.com', 'Esi', 'Boateng', Role.SALES),
)


def ensure_users(session, password):
    existing = {u.email for u in session.execute(select(User)).scalars().all()}
    created = 0
    for email, first, last, role in DEMO_USERS:
        if email in existing:
            continue
        user = User(first_name=first, last_name=last, email=email, password_hash='',
                    role=role.value, permissions=sanitize_permissions(PERMISSION_PRESETS[role.value]))
        user.set_password(password)
        session.add(user)
        created += 1
    session.flush()
    return created


def print_user_summary(session):
    users = session.execute(select(User).order_by(User.id)).scalars().all()
    if not users:
        print("[INFO] No users present.")
        return
    email_w = max(len(u.email) for u in users)
    print(f"{'Email'.ljust(email_w)} | Role     | Perms")
    print('-' * (email_w + 22))
    for u in users:
        perms = sanitize_permissions(u.permissions)
        count = 'all' if '*' in perms else str(len(perms))
        print(f"{u.email.ljust(email_w)} | {normalize_role(u.role).value.ljust(8)} | {count.rjust(5)}")


def parse_args():
    p = argparse.ArgumentParser(
        description="Seed demo console users",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed normally: seed_users.py\n  dry run: seed_users.py --dry-run\n  show users: seed_users.py --show-users\n""")
    )
    p.add_argument('--show-users', action='store_true', help='Print users with role and permission counts after seeding')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    return p.parse_args()


def main():
    args = parse_args()
    app = create_app()
    with app.app_context():
        session = get_db()
        try:
            session.execute(select(User.id).limit(1))
        except OperationalError:
            # Bootstrap schema when migrations have not been run yet
            session.rollback()
            Base.metadata.create_all(session.get_bind())

        created = ensure_users(session, os.getenv('SEED_USER_PASSWORD', 'ChangeMe123!'))
        if args.show_users:
            print_user_summary(session)
        if args.dry_run:
            session.rollback()
            print(f"[DRY-RUN] (rolled back) Users would create: {created}")
        else:
            session.commit()
            print(f"[DONE] Users created: {created}")


if __name__ == '__main__':
    main()
