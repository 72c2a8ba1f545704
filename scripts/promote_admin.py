"""
Promote a User to Admin

Gives the auth user with the given email access to the back-office.
Run from project root: python scripts/promote_admin.py user@example.com
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from foodzy.core.config import setup_logging
from foodzy.services.gateway import create_gateway


async def promote(email: str, role: str) -> bool:
    gateway = create_gateway()
    await gateway.initialize()
    try:
        users = await gateway.list_auth_users()
        user = next((u for u in users if (u.email or "").lower() == email.lower()), None)
        if user is None:
            print(f"❌ User not found: {email}")
            return False

        print(f"👤 Found user {user.id}")
        if await gateway.select_one("admin_users", eq={"id": user.id}):
            await gateway.update("admin_users", {"role": role}, eq={"id": user.id})
        else:
            await gateway.insert("admin_users", {"id": user.id, "role": role})
    finally:
        await gateway.close()

    print(f"✅ {email} is now an admin ({role})")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Promote a user to admin")
    parser.add_argument("email", help="Email address of the user")
    parser.add_argument("--role", default="admin", help="Admin role name")
    args = parser.parse_args()

    setup_logging()
    if not asyncio.run(promote(args.email, args.role)):
        sys.exit(1)
