"""Terminal front-end for the directory admin console.

This module serves as a CLI wrapper around adminconsole.core.controller.
"""
from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from adminconsole.config import load_settings
from adminconsole.core.api import ApiError
from adminconsole.core.api.exceptions import ValidationError
from adminconsole.core.controller import ConsoleController
from adminconsole.core.models import Alert, Filter, StatusFilter
from adminconsole.core.search import RowAction
from adminconsole.core.validators import parse_form_date


def _print_alert(alert: Alert) -> None:
    stream = sys.stderr if alert.level == "danger" else sys.stdout
    print(f"[{alert.level}] {alert.message}", file=stream)


def _ask(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _print_result(result) -> None:
    if result.placeholder:
        print(result.placeholder)
        return
    headers = ("Display Name", "Username", "Domain", "Status", "Admin", "Expires", "Actions")
    lines = [headers] + [row.cells + (",".join(a.value for a in row.actions),) for row in result.rows]
    widths = [max(len(str(line[i])) for line in lines) for i in range(len(headers))]
    for line in lines:
        print("  ".join(str(cell).ljust(width) for cell, width in zip(line, widths)).rstrip())


def _print_form_errors(form) -> None:
    for field, message in form.errors.items():
        print(f"[invalid] {field}: {message}", file=sys.stderr)


def _bool_arg(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"true", "yes", "1"}:
        return True
    if lowered in {"false", "no", "0"}:
        return False
    raise argparse.ArgumentTypeError(f"expected true/false, got '{value}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Directory account administration console")
    parser.add_argument("--api-url", default=None, help="API base URL (default: CONSOLE_API_BASE_URL)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument("--no-healthcheck", action="store_true", help="Skip the API healthcheck")

    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("whoami")

    ss = sub.add_parser("search")
    ss.add_argument("--domain")
    ss.add_argument("--name")
    ss.add_argument("--status", choices=[s.value for s in StatusFilter])
    ss.add_argument("--admin", type=_bool_arg)

    sd = sub.add_parser("details")
    sd.add_argument("--domain")
    sd.add_argument("--username", required=True)

    for cmd in ("unlock", "enable", "disable", "reset-password"):
        sp = sub.add_parser(cmd)
        sp.add_argument("--domain")
        sp.add_argument("--username", required=True)
        sp.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    sc = sub.add_parser("create")
    sc.add_argument("--domain")
    sc.add_argument("--username", required=True)
    sc.add_argument("--first", required=True)
    sc.add_argument("--last", required=True)
    sc.add_argument("--expires", help="Expiration date YYYY-MM-DD (default: one year from today)")
    sc.add_argument("--admin-account", action="store_true")
    sc.add_argument("--group", action="append", default=[])

    se = sub.add_parser("edit")
    se.add_argument("--domain")
    se.add_argument("--username", required=True)
    se.add_argument("--first")
    se.add_argument("--last")
    se.add_argument("--expires")
    se.add_argument("--admin-account", type=_bool_arg)
    se.add_argument("--group", action="append", default=None)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return 0

    cfg = load_settings()
    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")
    if args.api_url:
        cfg.api_base_url = args.api_url.rstrip("/")
    if args.timeout:
        cfg.request_timeout = args.timeout
    if args.no_healthcheck:
        cfg.healthcheck = False

    assume_yes = getattr(args, "yes", False)
    console = ConsoleController.from_config(
        cfg,
        confirm=(lambda prompt: True) if assume_yes else _ask,
        on_alert=_print_alert,
        auto_login=False,
    )

    if not console.login():
        screens = console.state.screens
        print(f"[{args.cmd}] {screens.error_title}: {screens.error_details}", file=sys.stderr)
        return 1

    main_ctx = console.session.main
    domain = getattr(args, "domain", None) or main_ctx.selected_domain

    try:
        if args.cmd == "whoami":
            session = console.state.session
            print(f"{session.name} (high privilege: {'yes' if session.is_high_privilege else 'no'})")
            print(f"Domains: {', '.join(main_ctx.domains)}")
            return 0

        if args.cmd == "search":
            status = StatusFilter(args.status) if args.status else None
            result = console.search(Filter(domain=domain, name_filter=args.name, status_filter=status, admin_filter=args.admin))
            _print_result(result)
            return 1 if result.failed else 0

        if args.cmd == "details":
            handle = console.dispatch(RowAction.EDIT, args.username, domain)
            if handle is None:
                return 1
            form = handle.payload
            print(f"Username:   {form.sam_account_name}")
            print(f"First name: {form.first_name}")
            print(f"Last name:  {form.last_name}")
            print(f"Expires:    {form.account_expiration_date}")
            if form.show_privileged:
                print(f"Admin account: {'yes' if form.admin_account else 'no'}")
                print(f"Groups: {', '.join(form.selected_groups) or '-'}")
            handle.close()
            return 0

        if args.cmd in ("unlock", "enable", "disable"):
            action = {"unlock": RowAction.UNLOCK, "enable": RowAction.ENABLE, "disable": RowAction.DISABLE}[args.cmd]
            done = console.dispatch(action, args.username, domain)
            return 0 if done else 1

        if args.cmd == "reset-password":
            handle = console.dispatch(RowAction.RESET_PASSWORD, args.username, domain)
            if handle is None:
                return 1
            print(f"New password for {handle.payload.sam_account_name}: {handle.payload.new_password}")
            handle.close()
            return 0

        if args.cmd == "create":
            handle = console.open_create_form()
            form = handle.payload
            form.domain = domain
            form.sam_account_name = args.username
            form.first_name = args.first
            form.last_name = args.last
            if args.expires:
                form.account_expiration_date = parse_form_date(args.expires)
            form.admin_account = args.admin_account
            form.select_groups(args.group)
            result = console.submit_create(form)
            if result is None:
                _print_form_errors(form)
                return 1
            print(result.message)
            for label, account in (("User account", result.user_account), ("Admin account", result.admin_account)):
                if account:
                    print(f"{label}: {account.sam_account_name} ({account.display_name}) temporary password: {account.initial_password}")
            if result.groups_associated:
                print(f"Associated groups: {', '.join(result.groups_associated)}")
            return 0

        if args.cmd == "edit":
            handle = console.dispatch(RowAction.EDIT, args.username, domain)
            if handle is None:
                return 1
            form = handle.payload
            if args.first is not None:
                form.first_name = args.first
            if args.last is not None:
                form.last_name = args.last
            if args.expires:
                form.account_expiration_date = parse_form_date(args.expires)
            if args.admin_account is not None:
                form.admin_account = args.admin_account
            if args.group is not None:
                form.select_groups(args.group)
            if console.submit_edit(form):
                return 0
            _print_form_errors(form)
            return 1
    except (ValidationError, ValueError, PermissionError) as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        return 1
    except ApiError as e:
        print(f"[{args.cmd}] Error: {e.display_text}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
