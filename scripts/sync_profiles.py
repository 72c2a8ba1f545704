"""
Profile Sync

Creates the missing ``user_profiles`` row for every auth user that has
none. The display name comes from the sign-up metadata, then the email
prefix, then "Unknown User".
Run from project root: python scripts/sync_profiles.py
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from foodzy.core.config import setup_logging
from foodzy.services.gateway import AuthUser, GatewayError, create_gateway


def profile_for(user: AuthUser) -> dict:
    if user.full_name:
        full_name = user.full_name
    elif user.email:
        full_name = user.email.split("@")[0]
    else:
        full_name = "Unknown User"

    return {
        "id": user.id,
        "email": user.email,
        "full_name": full_name,
        "phone": user.phone,
        "preferred_language": "en",
    }


async def sync(dry_run: bool = False) -> int:
    """Returns the number of profiles created (or that would be)."""
    gateway = create_gateway()
    await gateway.initialize()
    created = 0
    try:
        users = await gateway.list_auth_users()
        print(f"👥 Found {len(users)} auth users")

        for user in users:
            if await gateway.select_one("user_profiles", eq={"id": user.id}):
                continue

            profile = profile_for(user)
            if dry_run:
                print(f"   📝 Would create profile for {user.email} ({profile['full_name']})")
                created += 1
                continue
            try:
                await gateway.insert("user_profiles", profile)
            except GatewayError as e:
                print(f"   ❌ Error creating profile for {user.email}: {e}")
                continue
            print(f"   ✅ Created profile for {user.email}")
            created += 1
    finally:
        await gateway.close()

    return created


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create missing user profiles")
    parser.add_argument("--dry-run", action="store_true", help="Only report missing profiles")
    args = parser.parse_args()

    setup_logging()
    count = asyncio.run(sync(dry_run=args.dry_run))
    print(f"\n✅ Sync complete: {count} profile(s) {'missing' if args.dry_run else 'created'}")
