#!/usr/bin/env python3
"""
Mint a bearer token for the Wish Lighthouse API.

The API has no login flow; a token simply names the user that
requests act as.  Tokens are signed with ``SECRET_KEY``, so run this
with the same environment as the server.

Usage:
    python create_token.py --user-id user-42 --name "Ann Lee" --days 30
"""

import argparse

from wish_lighthouse_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Create a Wish Lighthouse API bearer token.")
    ap.add_argument("--user-id", required=True, help="Identifier the token authenticates as")
    ap.add_argument("--name", help="Display name shown on signed wishes (defaults to the id)")
    ap.add_argument("--email", help="Optional e-mail returned by /api/users/profile")
    ap.add_argument("--avatar", help="Optional avatar URL")
    ap.add_argument("--days", type=int, default=7, help="Token lifetime in days (default 7)")
    args = ap.parse_args()

    claims = {"sub": args.user_id, "name": args.name or args.user_id}
    if args.email:
        claims["email"] = args.email
    if args.avatar:
        claims["avatar"] = args.avatar
    print(create_access_token(claims, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
