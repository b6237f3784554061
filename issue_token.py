#!/usr/bin/env python
"""Create (or refresh) a user and print a session token for it.

Sign-in normally happens through the external identity provider; this is for
local development and manual testing.

    python issue_token.py dev-user --name "Dev User" --email dev@example.com
"""
import argparse
import sys

from planner import crud
from planner.database import Store
from planner.routers.auth import create_session_token


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("open_id")
    parser.add_argument("--name")
    parser.add_argument("--email")
    args = parser.parse_args(argv)

    store = Store.from_url()
    store.create_tables()

    profile = {"login_method": "dev"}
    if args.name:
        profile["name"] = args.name
    if args.email:
        profile["email"] = args.email

    result = crud.upsert_user(store, args.open_id, **profile)
    if not result.is_ok:
        print("Database not available", file=sys.stderr)
        return 1

    user = result.value
    print(f"User {user.id} ({user.open_id}, role={user.role.value})", file=sys.stderr)
    print(create_session_token(user.open_id, name=user.name, email=user.email, login_method="dev"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
