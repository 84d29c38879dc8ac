#!/usr/bin/env python
"""
Database Initialization Script

1. Creates all tables for the configured database
2. Optionally creates an initial SUPER_ADMIN account

Usage:
    # Create tables only
    python scripts/init_db.py

    # Create tables and an admin account
    python scripts/init_db.py --create-admin

    # Non-interactive mode (use environment variables)
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=password123 \
    python scripts/init_db.py --create-admin --non-interactive

    # Drop all data and reinitialize (DANGEROUS!)
    python scripts/init_db.py --drop-all --create-admin

Environment Variables:
    ADMIN_EMAIL: Email for admin user (default: admin@example.com)
    ADMIN_PASSWORD: Password for admin user (default: prompted)
    ADMIN_FIRST_NAME: First name (default: Admin)
    ADMIN_LAST_NAME: Last name (default: User)
"""

import os
import sys
import argparse
import getpass
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy import inspect
from casthub import create_app
from casthub.extensions import db
from casthub.models import User, UserRole


def parse_args():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Initialize the casting marketplace database',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        '--create-admin',
        action='store_true',
        help='Create initial SUPER_ADMIN user'
    )
    parser.add_argument(
        '--drop-all',
        action='store_true',
        help='Drop all existing data before initialization (DANGEROUS!)'
    )
    parser.add_argument(
        '--non-interactive',
        action='store_true',
        help='Read admin credentials from environment variables'
    )
    return parser.parse_args()


def create_tables(app, drop_all=False):
    print("\n" + "="*60)
    print("STEP 1: Creating tables")
    print("="*60)

    with app.app_context():
        if drop_all:
            print("Dropping all tables...")
            db.drop_all()

        db.create_all()

        tables = inspect(db.engine).get_table_names()
        print(f"\nTables ({len(tables)}):")
        for table in sorted(tables):
            print(f"  - {table}")


def create_admin_user(app, interactive=True):
    """
    Create a SUPER_ADMIN account unless one already exists for the email.

    Returns:
        bool: True on success
    """
    print("\n" + "="*60)
    print("STEP 2: Creating admin user")
    print("="*60)

    email = os.environ.get('ADMIN_EMAIL', 'admin@example.com')
    first_name = os.environ.get('ADMIN_FIRST_NAME', 'Admin')
    last_name = os.environ.get('ADMIN_LAST_NAME', 'User')

    if interactive:
        print("\nEnter admin user details:")
        email = input(f"Email [{email}]: ").strip() or email
        password = getpass.getpass("Password (min 8 chars): ").strip()
    else:
        password = os.environ.get('ADMIN_PASSWORD', '')
        if not password:
            print("ERROR: ADMIN_PASSWORD environment variable is required in non-interactive mode")
            return False

    if len(password) < 8:
        print("ERROR: Password must be at least 8 characters")
        return False

    with app.app_context():
        existing_user = User.find_by_email(email)
        if existing_user:
            print(f"\n✓ Admin user already exists: {email}")
            print(f"   ID: {existing_user.id}")
            print(f"   Role: {existing_user.role}")
            return True

        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=UserRole.SUPER_ADMIN,
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()

        print(f"✓ Admin user created successfully")
        print(f"   ID: {user.id}")
        print(f"   Email: {user.email}")
        return True


def main():
    args = parse_args()
    app = create_app(os.environ.get('FLASK_ENV', 'development'))

    create_tables(app, drop_all=args.drop_all)

    if args.create_admin:
        if not create_admin_user(app, interactive=not args.non_interactive):
            sys.exit(1)

    print("\n✓ Database initialization complete")


if __name__ == '__main__':
    main()
