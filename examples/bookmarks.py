#!/usr/bin/env python3
"""List, add and remove bookmarks stored in a user's pod.

The bookmarks document is located through the user's public type index and
created at --path when no document is registered yet. The user id comes from
--user-id, or from podrepo.toml / PODREPO_USER_ID (see podrepo.config).

Usage:
  python examples/bookmarks.py --user-id https://alice.pod.example/profile/card#me list
  python examples/bookmarks.py add "podrepo" https://example.org
  python examples/bookmarks.py remove <id>
"""

import argparse
import asyncio
import sys

from podrepo import Repository, by_keys, fields, load_settings, use_settings
from podrepo.errors import PodRepoError

BOOKMARK = "https://www.w3.org/2002/01/bookmark#Bookmark"
DC_TITLE = "http://purl.org/dc/elements/1.1/title"
BOOKMARK_RECALLS = "https://www.w3.org/2002/01/bookmark#recalls"

BOOKMARK_SCHEMA = {
    "id": fields.key().base64(),
    "title": fields.string(DC_TITLE),
    "url": fields.url(BOOKMARK_RECALLS),
}


async def run(args: argparse.Namespace) -> None:
    repo = await Repository.resolve(type=BOOKMARK, schema=BOOKMARK_SCHEMA, path=args.path)
    print(f"Bookmarks stored at {repo.source}")

    if args.command == "list":
        for bookmark in await repo.find():
            print(f"- {bookmark['title']} <{bookmark['url']}> (ID: {bookmark['id']})")
    elif args.command == "add":
        bookmark = {"id": None, "title": args.title, "url": args.url}
        await repo.save(bookmark)
        print(f"Added {bookmark['id']}")
    elif args.command == "remove":
        if await repo.only(by_keys(args.id)) is None:
            print(f"No bookmark with ID {args.id}", file=sys.stderr)
            sys.exit(1)
        await repo.remove(args.id)
        print(f"Removed {args.id}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Manage bookmarks stored in a pod.")
    parser.add_argument("--user-id", default=None, help="WebID of the pod owner (default: from config)")
    parser.add_argument(
        "--path",
        default="/public/bookmarks.ttl",
        help="Where to create the bookmarks document if none is registered",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="List every bookmark")
    add = commands.add_parser("add", help="Add a bookmark")
    add.add_argument("title")
    add.add_argument("url")
    remove = commands.add_parser("remove", help="Remove a bookmark by ID")
    remove.add_argument("id")
    args = parser.parse_args()

    settings = load_settings()
    if args.user_id:
        settings = settings.model_copy(update={"user_id": args.user_id})
    if not settings.user_id:
        parser.error("no user id: pass --user-id or set PODREPO_USER_ID")

    with use_settings(settings):
        try:
            asyncio.run(run(args))
        except PodRepoError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
