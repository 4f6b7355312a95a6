#!/usr/bin/env python3
"""Terminal front end for the tickets API.

Lists a page of tickets as a table and adds, edits, or deletes tickets.

Examples
--------
tickets list --page 2 --page-size 5
tickets add "printer jam"
tickets update 3 --status Closed
tickets delete 3 --yes
"""

import argparse
import sys
from collections.abc import Sequence
from datetime import datetime

from app.ticket.client import TicketsClient, TicketsClientError

STATUSES = ("Open", "Closed")


def format_date(value: str) -> str:
    """Render an ISO timestamp as ``Mon-DD-YYYY``."""
    return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%b-%d-%Y")


def render_page(page: dict) -> str:
    rows = [("Ticket Id", "Description", "Status", "Date")]
    for t in page["data"]:
        rows.append((str(t["id"]), t["description"], t["status"], format_date(t["createdAt"])))
    widths = [max(len(r[i]) for r in rows) for i in range(4)]
    lines: list[str] = []
    for n, row in enumerate(rows):
        lines.append("  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip())
        if n == 0:
            lines.append("  ".join("-" * w for w in widths))
    meta = page["pagination"]
    lines.append(
        f"page {meta['currentPage']} of {meta['totalPages']} ({meta['totalCount']} tickets)"
    )
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tickets", description="Manage support tickets")
    parser.add_argument("--api-url", help="API root, defaults to $TICKETS_API_URL")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="show one page of tickets")
    p_list.add_argument("--page", type=int, default=1)
    p_list.add_argument("--page-size", type=int, default=10)

    p_add = sub.add_parser("add", help="create a ticket")
    p_add.add_argument("description")
    p_add.add_argument("--status", choices=STATUSES, default="Open")

    p_update = sub.add_parser("update", help="edit a ticket")
    p_update.add_argument("id", type=int)
    p_update.add_argument("--description")
    p_update.add_argument("--status", choices=STATUSES)

    p_delete = sub.add_parser("delete", help="delete a ticket")
    p_delete.add_argument("id", type=int)
    p_delete.add_argument("--yes", action="store_true", help="skip confirmation")
    return parser


def run(args: argparse.Namespace, client: TicketsClient) -> int:
    if args.command == "list":
        print(render_page(client.fetch_tickets(args.page, args.page_size)))
    elif args.command == "add":
        created = client.add_ticket(args.description, args.status)
        print(f"New ticket added successfully (id {created['id']})")
    elif args.command == "update":
        ticket = client.get_ticket(args.id)
        if args.description is not None:
            ticket["description"] = args.description
        if args.status is not None:
            ticket["status"] = args.status
        client.update_ticket(ticket)
        print("Ticket updated successfully")
    elif args.command == "delete":
        if not args.yes:
            answer = input("Are you sure to delete this ticket? [y/N] ")
            if answer.strip().lower() not in ("y", "yes"):
                print("Cancelled")
                return 0
        client.delete_ticket(args.id)
        print("Ticket deleted successfully")
    return 0


def main(argv: Sequence[str] | None = None, client: TicketsClient | None = None) -> int:
    args = build_parser().parse_args(argv)
    owned = client is None
    if owned:
        client = TicketsClient(args.api_url)
    try:
        return run(args, client)
    except TicketsClientError as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1
    finally:
        if owned:
            client.close()


if __name__ == "__main__":
    sys.exit(main())
