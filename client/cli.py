# client/cli.py
"""Console front end for the task board.

    taskboard signup -u alice
    taskboard add -u alice "Buy milk"
    taskboard list -u alice
    taskboard watch -u alice
"""
import argparse
import asyncio
import getpass
import logging
import os
import sys
from typing import List, Optional

import httpx

import config
from client.api import TaskManagerClient
from client.board import TaskBoard, View


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskboard", description="Task board console client")
    parser.add_argument("--url", default=config.CLIENT_BASE_URL, help="task service base URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    creds = argparse.ArgumentParser(add_help=False)
    creds.add_argument("-u", "--username", default=os.getenv("TASKBOARD_USERNAME"))
    creds.add_argument("-p", "--password", default=os.getenv("TASKBOARD_PASSWORD"))

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("signup", parents=[creds], help="register a new user")
    add = sub.add_parser("add", parents=[creds], help="create a task")
    add.add_argument("title")
    sub.add_parser("list", parents=[creds], help="print all tasks")
    sub.add_parser("watch", parents=[creds], help="print tasks and follow new ones")
    return parser


def _print_titles(kind: str, titles: List[str]) -> None:
    if kind == "render":
        print(f"{len(titles)} task(s)")
    for title in titles:
        print(f"- {title}")


async def _run(args: argparse.Namespace) -> int:
    async with TaskManagerClient(args.url) as client:
        board = TaskBoard(client)

        if args.command == "signup":
            # The board ignores the signup answer; the console reports it.
            await client.signup(args.username, args.password)
            print(f"Signed up {args.username}")
            return 0

        board.add_listener(_print_titles)
        if args.command == "watch":
            board.login_form.fill(username=args.username, password=args.password)
            if not await board.submit_login():
                print("Login failed", file=sys.stderr)
                return 1
        else:
            # Only `watch` wants the live subscription a form login starts.
            if not await client.login(args.username, args.password):
                print("Login failed", file=sys.stderr)
                return 1
            board.view = View.TASK_MANAGER

        if args.command == "add":
            board.task_form.fill(title=args.title)
            await board.submit_task()
        elif args.command == "list":
            await board.load_tasks()
        elif args.command == "watch":
            try:
                await board.subscription
            finally:
                await board.close()
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else config.LOG_LEVEL)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if not args.username:
        print("A username is required (-u or TASKBOARD_USERNAME)", file=sys.stderr)
        return 2
    if not args.password:
        args.password = getpass.getpass("Password: ")

    try:
        return asyncio.run(_run(args))
    except httpx.HTTPStatusError as e:
        print(f"Request failed: HTTP {e.response.status_code} {e.response.text}", file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"Cannot reach {args.url}: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
