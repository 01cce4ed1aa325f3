#!/usr/bin/env python3
"""
Script to create an admin user.
"""
import getpass
import sys
from pathlib import Path

# Add parent directory to the system path
sys.path.insert(0, str(Path(__file__).parent.parent))

from database.connection import Database
from database.models import UserRole
from database.repository import SqlRepository
from core.exceptions import CRMSError
from services.user_service import UserService
import config


def create_admin():
    """Create an admin user."""
    config.db = Database(
        database_url=config.DATABASE_URL,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW
    )
    config.db.create_tables()

    print("Creating admin user...")
    print("=" * 50)

    username = input("Username: ").strip()
    email = input("Email: ").strip()
    password = getpass.getpass("Password: ").strip()
    first_name = input("First name (optional): ").strip() or None
    last_name = input("Last name (optional): ").strip() or None

    if not username or not email or not password:
        print("Error: Username, email, and password are required")
        sys.exit(1)

    try:
        with config.db.get_session() as session:
            user = UserService.create(SqlRepository(session), {
                "username": username,
                "email": email,
                "password": password,
                "first_name": first_name,
                "last_name": last_name,
                "role": UserRole.ADMIN,
            })
            print(f"\n✓ Admin user created successfully!")
            print(f"  Username: {user.username}")
            print(f"  Email: {user.email}")
            print(f"  Role: {user.role.value}")
    except CRMSError as e:
        print(f"\n✗ Error: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    create_admin()
