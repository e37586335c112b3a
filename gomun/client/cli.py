"""Terminal front-end for the shared agenda."""

from __future__ import annotations

import argparse
import sys
from typing import Callable, List, Optional, Sequence, TextIO

import uvicorn

from ..config import Settings, load_settings
from ..infra.logging import configure_logging
from .api import AgendaApiClient
from .errors import AgendaClientError
from .sections import DisplaySection, format_date
from .session import AgendaSession

ClientFactory = Callable[[Settings], AgendaApiClient]

EMPTY_AGENDA_MESSAGE = "Begin by conjuring your first memory together."
NO_MATCHES_MESSAGE = "No entries match that search."


def _default_client_factory(settings: Settings) -> AgendaApiClient:
    return AgendaApiClient(
        settings.client.api_base_url,
        default_user_id=settings.default_user_id,
        timeout=settings.client.timeout_seconds,
    )


def render_sections(
    sections: Sequence[DisplaySection],
    *,
    default_user_id: str,
    out: TextIO,
) -> None:
    """Write sections as plain text, one block per letter."""

    for section in sections:
        header = section.letter
        if section.total_pages > 1:
            header = f"{header}  (page {section.current_page}/{section.total_pages})"
        out.write(f"{header}\n")
        for entry in section.visible:
            tag = entry.user_id or default_user_id
            out.write(f"  [{tag}] {entry.title}\n")
            if entry.note:
                out.write(f"      {entry.note}\n")
            dates = [format_date(entry.date), format_date(entry.created_at)]
            meta = "  ".join(value for value in dates if value)
            out.write(f"      {meta}  id={entry.id}\n" if meta else f"      id={entry.id}\n")
        out.write("\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gomun", description="Browse and edit the shared GoMun agenda."
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="Config profile name (defaults to $GOMUN_CONFIG_PROFILE or 'dev').",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="Agenda API base URL (overrides the profile).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="Show entries grouped by letter.")
    list_cmd.add_argument("--letter", help="Only show this letter's section.")
    list_cmd.add_argument(
        "--page", type=int, default=1, help="Page to show for the selected letters."
    )

    search_cmd = sub.add_parser("search", help="Substring search across all fields.")
    search_cmd.add_argument("query")

    add_cmd = sub.add_parser("add", help="Record a new entry.")
    add_cmd.add_argument("title")
    add_cmd.add_argument("--note")
    add_cmd.add_argument("--date", help="ISO-8601 date, e.g. 2026-06-01.")
    add_cmd.add_argument("--user", dest="user_id")

    edit_cmd = sub.add_parser("edit", help="Change an entry's title and note.")
    edit_cmd.add_argument("entry_id")
    edit_cmd.add_argument("title")
    edit_cmd.add_argument("--note")

    delete_cmd = sub.add_parser("delete", help="Remove an entry.")
    delete_cmd.add_argument("entry_id")

    serve_cmd = sub.add_parser("serve", help="Run the agenda API with uvicorn.")
    serve_cmd.add_argument("--host", default=None)
    serve_cmd.add_argument("--port", type=int, default=None)
    return parser


def main(
    argv: Optional[List[str]] = None,
    *,
    client_factory: ClientFactory = _default_client_factory,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = load_settings(args.profile)
    if args.api_url:
        settings.client.api_base_url = args.api_url.rstrip("/")
    configure_logging(settings.logging.level)

    if args.command == "serve":
        return _serve(settings, host=args.host, port=args.port)

    client = client_factory(settings)
    session = AgendaSession(client, page_size=settings.client.page_size)
    try:
        return _dispatch(args, session, settings=settings, out=out)
    except AgendaClientError as exc:
        err.write(f"{exc.message}\n")
        return 1
    finally:
        client.close()


def _dispatch(
    args: argparse.Namespace,
    session: AgendaSession,
    *,
    settings: Settings,
    out: TextIO,
) -> int:
    if args.command == "add":
        saved = session.create(
            args.title, note=args.note, date=args.date, user_id=args.user_id
        )
        out.write(f"Saved '{saved.title}' under {saved.user_id} (id={saved.id})\n")
        return 0
    if args.command == "edit":
        saved = session.update(args.entry_id, args.title, note=args.note)
        out.write(f"Updated '{saved.title}' (id={saved.id})\n")
        return 0
    if args.command == "delete":
        session.delete(args.entry_id)
        out.write(f"Deleted {args.entry_id}\n")
        return 0

    session.refresh()
    if args.command == "search":
        sections = session.sections(args.query)
        empty_message = NO_MATCHES_MESSAGE
    else:
        letter = args.letter.strip().upper() if args.letter else None
        for section in session.sections():
            if letter is None or section.letter == letter:
                session.set_page(section.letter, args.page)
        sections = [
            section
            for section in session.sections()
            if letter is None or section.letter == letter
        ]
        empty_message = EMPTY_AGENDA_MESSAGE
    if not sections:
        out.write(f"{empty_message}\n")
        return 0
    render_sections(sections, default_user_id=settings.default_user_id, out=out)
    return 0


def _serve(settings: Settings, *, host: Optional[str], port: Optional[int]) -> int:
    uvicorn.run(
        "gomun.main:app",
        host=host or settings.api.host,
        port=port or settings.api.port,
        log_level=settings.logging.level.lower(),
    )
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
