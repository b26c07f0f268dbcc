"""CLI for Don Lustre Admin — bootstrap admins, maintain receipts."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys


async def cmd_create_admin(args):
    """Create an admin account for the login gate."""
    from donlustre.db.engine import async_session_factory, create_tables
    from donlustre.services.auth import create_admin, get_admin_by_username

    await create_tables()

    password = args.password
    if not password:
        password = getpass.getpass("Admin password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match")
            sys.exit(1)

    if len(password) < 8:
        print("Password must be at least 8 characters")
        sys.exit(1)

    async with async_session_factory() as db:
        if await get_admin_by_username(db, args.username):
            print(f"Admin '{args.username}' already exists.")
            sys.exit(1)
        admin = await create_admin(db, args.username, password)

    print(f"Admin created: {admin.username} (id={admin.id})")


async def cmd_retry_receipts(args):
    """Re-upload receipts whose previous upload failed."""
    from donlustre.config import get_settings
    from donlustre.db.engine import async_session_factory, create_tables
    from donlustre.services.branding import load_branding
    from donlustre.services.receipt_generator import retry_pending_uploads
    from donlustre.services.storage import get_object_store

    await create_tables()
    cfg = get_settings().receipts
    branding = load_branding(cfg.logo_path, cfg.watermark_opacity)

    async with async_session_factory() as db:
        results = await retry_pending_uploads(db, get_object_store(), branding)

    failed = [r for r in results if r.upload_error]
    print(f"Retried {len(results)} receipt(s); {len(results) - len(failed)} uploaded.")
    for r in failed:
        print(f"  order {r.receipt.order_id}: {r.upload_error}")
    if failed:
        sys.exit(1)


def main():
    parser = argparse.ArgumentParser(prog="donlustre", description="Don Lustre admin tools")
    sub = parser.add_subparsers(dest="command", required=True)

    p_admin = sub.add_parser("create-admin", help="Create an admin login")
    p_admin.add_argument("--username", required=True)
    p_admin.add_argument("--password", default="", help="Prompted if omitted")
    p_admin.set_defaults(func=cmd_create_admin)

    p_retry = sub.add_parser("retry-receipts", help="Retry failed receipt uploads")
    p_retry.set_defaults(func=cmd_retry_receipts)

    args = parser.parse_args()
    asyncio.run(args.func(args))


if __name__ == "__main__":
    main()
