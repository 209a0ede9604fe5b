import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

import argparse
import asyncio
from sqlalchemy import func, select
from hostel_leave.constants.constants import UserRole
from hostel_leave.core.database import session_manager
from hostel_leave.core.security import hash_password
from hostel_leave.models.user import User


async def create_admin(name: str, email: str, password: str):
    """Create an admin account, or promote and reset an existing one."""
    await session_manager.init()
    email = email.lower()
    try:
        async with session_manager.get_session() as db:
            result = await db.execute(
                select(User).where(func.lower(User.email) == email)
            )
            user = result.scalar_one_or_none()

            if user:
                user.role = UserRole.admin
                user.password_hash = hash_password(password)
                user.is_active = True
                print(f"✅ Promoted existing account {email} to admin")
            else:
                db.add(User(
                    name=name,
                    email=email,
                    password_hash=hash_password(password),
                    role=UserRole.admin,
                ))
                print(f"✅ Created admin account {email}")
    finally:
        await session_manager.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or promote a hostel admin account")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default="Hostel Admin")
    args = parser.parse_args()

    if len(args.password) < 6:
        parser.error("password must be at least 6 characters")

    asyncio.run(create_admin(args.name, args.email, args.password))
