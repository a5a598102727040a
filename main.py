"""Command-line interface for the user management form."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from dataclasses import replace
from typing import Awaitable, Callable, Optional, Sequence

import anyio

from usermanager.config import Settings, load_settings, resolve_config_path
from usermanager.controller import UserListController
from usermanager.models import NotificationKind

logger = logging.getLogger("usermanager.main")

Prompt = Callable[[str], Awaitable[str]]


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default=None,
        help="Path to a YAML settings file (default: USER_MANAGER_CONFIG or config/user_manager.yaml)",
    )
    common.add_argument(
        "--api-url",
        default=None,
        help="Override the remote user collection URL",
    )

    parser = argparse.ArgumentParser(description="User management form")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser(
        "serve", parents=[common], help="Serve the HTML form over HTTP"
    )
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")

    subparsers.add_parser(
        "console", parents=[common], help="Manage users from an interactive terminal menu"
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "console"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _load_settings(args: argparse.Namespace) -> Settings:
    config_path = resolve_config_path(args.config or os.getenv("USER_MANAGER_CONFIG"))
    settings = load_settings(config_path)
    if args.api_url:
        settings = replace(settings, api_url=args.api_url)
    return settings


def _serve(settings: Settings, *, host: str, port: int) -> None:
    from usermanager.service import create_app
    import uvicorn

    logger.info("Starting user management form on http://%s:%s", host, port)
    app = create_app(settings=settings)
    uvicorn.run(app, host=host, port=port, log_level="info")


async def _prompt(message: str) -> str:
    return await anyio.to_thread.run_sync(input, message)


def _print_notification(controller: UserListController) -> None:
    notification = controller.notification
    if notification is None:
        return
    marker = "OK" if notification.kind is NotificationKind.SUCCESS else "ERROR"
    print(f"[{marker}] {notification.message}")


def _list_users(controller: UserListController) -> None:
    users = controller.users
    if not users:
        print("No users found. Add a user to see them listed here.")
        return

    print(f"{len(users)} user(s) found:")
    print(f"{'ID':>4}  {'Name':<24}  {'Email':<32}  Date of Birth")
    print("-" * 80)
    for user in users:
        print(f"{user.id:>4}  {user.name:<24}  {user.email:<32}  {user.date_of_birth}")


async def _fill_draft(controller: UserListController, prompt: Prompt) -> bool:
    draft = controller.draft
    print("Leave a field blank to keep the value shown in brackets.")
    name = (await prompt(f"Name [{draft.name}]: ")).strip() or draft.name
    email = (await prompt(f"Email [{draft.email}]: ")).strip() or draft.email
    date_of_birth = (
        await prompt(f"Date of birth YYYY-MM-DD [{draft.date_of_birth}]: ")
    ).strip() or draft.date_of_birth
    controller.update_draft(name=name, email=email, date_of_birth=date_of_birth)
    if not (name and email and date_of_birth):
        print("Name, email and date of birth are all required.")
        return False
    return True


async def _read_user_id(prompt: Prompt, label: str) -> Optional[int]:
    raw = (await prompt(f"User ID to {label}: ")).strip()
    try:
        return int(raw)
    except ValueError:
        print("Please enter a numeric user ID.")
        return None


async def _run_console(controller: UserListController, prompt: Prompt = _prompt) -> None:
    """Drive the controller from a numbered terminal menu."""

    print("User Management System")
    print("Press Ctrl+C at any time to exit.\n")

    await controller.initialize()

    while True:
        _print_notification(controller)
        submit_label = "Update user" if controller.editing is not None else "Add a new user"
        print("Select an option:")
        print("  1) List users")
        print(f"  2) {submit_label}")
        print("  3) Edit a user")
        print("  4) Delete a user")
        print("  5) Cancel editing")
        print("  6) Dismiss notification")
        print("  7) Exit")

        choice = (await prompt("Enter choice [1-7]: ")).strip()

        if choice == "1":
            _list_users(controller)
        elif choice == "2":
            if await _fill_draft(controller, prompt):
                await controller.submit()
        elif choice == "3":
            user_id = await _read_user_id(prompt, "edit")
            if user_id is not None:
                try:
                    record = controller.request_edit(user_id)
                except KeyError:
                    print(f"No user with ID {user_id} is listed.")
                else:
                    print(f"Editing {record.name}. Choose option 2 to save changes.")
        elif choice == "4":
            user_id = await _read_user_id(prompt, "delete")
            if user_id is not None:
                await controller.delete(user_id)
        elif choice == "5":
            controller.cancel_edit()
        elif choice == "6":
            controller.dismiss_notification()
        elif choice == "7":
            print("Goodbye!")
            return
        else:
            print("Invalid selection. Please choose a number from the menu.")

        print()


async def _console_main(settings: Settings) -> None:
    from usermanager.service import build_controller

    controller = build_controller(settings)
    try:
        await _run_console(controller)
    finally:
        await controller.close()


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)
    try:
        settings = _load_settings(args)
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    if args.command == "serve":
        _serve(settings, host=args.host, port=args.port)
    elif args.command == "console":
        try:
            asyncio.run(_console_main(settings))
        except KeyboardInterrupt:
            print("\nExiting user management console.")


if __name__ == "__main__":
    main()
