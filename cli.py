import argparse
import os
import sys
import uuid as _uuid
from typing import List, Optional

from config.settings import get_settings
from db import schema
from db.connection import get_connection
from db.repos.kv_repo import KeyValueRepo
from models.backend_responses import CompanySearchResult
from models.history_entry import CompanySearchHistoryEntry
from pipelines.email_lookup import EmailLookup
from pipelines.employee_search import EmployeeSearchSession
from pipelines.guards import OneShotToken
from services.backend_client import BackendClient
from services.credits import fetch_credits, format_credits
from services.domain_utils import normalize_domain
from services.errors import ConfigurationError, EmailFinderError
from services.history_storage import (
    CompanySearchHistory,
    EmailSearchHistory,
    filter_history,
    load_all_history,
)
from services.reporting import (
    ConsolePresenter,
    print_cached_email_entry,
    print_company_results,
    print_employee_groups,
    print_enriched_data,
    print_history,
)
from utils.logging_setup import init_logging


def _open_history(args):
    settings = get_settings()
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    store = KeyValueRepo(conn)
    email_log = EmailSearchHistory(store, max_entries=settings.history_max_entries)
    company_log = CompanySearchHistory(store, max_entries=settings.history_max_entries)
    return conn, email_log, company_log


def _domain_arg(raw: str) -> str:
    # Fall back to the raw text for hosts without a public suffix
    return normalize_domain(raw) or raw.strip()


def cmd_credits(args):
    client = BackendClient()
    balance = fetch_credits(client)
    print(f"Credits Remaining: {format_credits(balance)}")


def cmd_company_search(args):
    client = BackendClient()
    results = client.search_company_by_name(" ".join(args.query))
    if args.json:
        print("[" + ", ".join(r.model_dump_json() for r in results) + "]")
        return
    print_company_results(results)


def cmd_employees(args):
    conn, _email_log, company_log = _open_history(args)
    try:
        client = BackendClient()
        presenter = ConsolePresenter(quiet=args.json)
        domain = _domain_arg(args.domain)
        company = None
        if args.company_name:
            company = CompanySearchResult(name=args.company_name, domain=domain, confidence_score=100)
        session = EmployeeSearchSession(client, company_log, presenter, domain=domain, company=company)
        session.load_credits()
        if not session.search(token=OneShotToken()):
            return 1
        pages = max(1, args.pages)
        while session.current_page < pages and session.can_load_more:
            if not session.load_more():
                break
        if args.json:
            print("[" + ", ".join(e.model_dump_json() for e in session.employees) + "]")
            return 0 if session.error is None else 1
        print_employee_groups(session.groups, domain, session.current_page, session.total_pages, session.credits)
        return 0 if session.error is None else 1
    finally:
        conn.close()


def cmd_find_email(args):
    conn, email_log, _company_log = _open_history(args)
    try:
        client = BackendClient()
        lookup = EmailLookup(client, email_log, ConsolePresenter(quiet=args.json))
        outcome = lookup.run(args.first_name.strip(), args.last_name.strip(), _domain_arg(args.domain), OneShotToken())
        if outcome is None:
            return 1
        if outcome.status != "success" or outcome.data is None:
            return 1
        if args.json:
            print(outcome.data.model_dump_json(indent=2))
        else:
            print_enriched_data(outcome.data, outcome.credits)
        return 0
    finally:
        conn.close()


def cmd_history(args):
    conn, email_log, company_log = _open_history(args)
    try:
        if args.history_cmd == "list":
            entries = filter_history(load_all_history(email_log, company_log), args.filter)
            if args.json:
                print("[" + ", ".join(e.model_dump_json(exclude_none=True) for e in entries) + "]")
            else:
                print_history(entries)
        elif args.history_cmd == "show":
            email_entry = email_log.get(args.id)
            company_entry = company_log.get(args.id) if email_entry is None else None
            if email_entry is not None:
                print_cached_email_entry(email_entry)
            elif company_entry is not None:
                return _show_company_entry(company_entry, company_log, args.more)
            else:
                print(f"No history entry with id {args.id}")
                return 1
        elif args.history_cmd == "remove":
            email_log.remove(args.id)
            company_log.remove(args.id)
            print(f"Removed {args.id}")
        elif args.history_cmd == "clear":
            if args.kind in ("all", "email"):
                email_log.clear()
            if args.kind in ("all", "company"):
                company_log.clear()
            print(f"Cleared {args.kind} history")
        return 0
    finally:
        conn.close()


def _show_company_entry(entry: CompanySearchHistoryEntry, company_log: CompanySearchHistory, more_pages: int) -> int:
    if not entry.employees:
        print(f"No cached employees for {entry.company_name} ({entry.domain})")
        return 0
    # Replays the cached snapshot; the backend is only hit for --more pages
    session = EmployeeSearchSession.from_history(entry, BackendClient(), company_log, ConsolePresenter())
    for _ in range(more_pages):
        if not session.can_load_more or not session.load_more():
            break
    print_employee_groups(session.groups, entry.domain, session.current_page, session.total_pages, session.credits)
    return 0 if session.error is None else 1


def main(argv: Optional[List[str]] = None):
    settings = get_settings()
    init_logging(settings.log_level)
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex

    parser = argparse.ArgumentParser(description="Find business emails and company employees")
    parser.add_argument("--db", default=settings.db_path, help="Path to the local history DB (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_cr = sub.add_parser("credits", help="Show the remaining credit balance")
    p_cr.set_defaults(func=cmd_credits)

    p_cs = sub.add_parser("company-search", help="Find a company domain by name (free)")
    p_cs.add_argument("query", nargs="+", help="Company name (at least 2 characters)")
    p_cs.add_argument("--json", action="store_true", help="Print raw JSON")
    p_cs.set_defaults(func=cmd_company_search)

    p_emp = sub.add_parser("employees", help="List employees of a company, grouped by department")
    p_emp.add_argument("--domain", "-d", required=True, help="Company domain, e.g. acme.com")
    p_emp.add_argument("--company-name", help="Company display name for history (default: the domain)")
    p_emp.add_argument("--pages", type=int, default=1, help="Number of result pages to fetch (default: 1)")
    p_emp.add_argument("--json", action="store_true", help="Print employees as JSON")
    p_emp.set_defaults(func=cmd_employees)

    p_fe = sub.add_parser("find-email", help="Reveal the business email of a person (costs 1 credit)")
    p_fe.add_argument("--first-name", required=True)
    p_fe.add_argument("--last-name", required=True)
    p_fe.add_argument("--domain", "-d", required=True, help="Company domain, e.g. acme.com")
    p_fe.add_argument("--json", action="store_true", help="Print enriched data as JSON")
    p_fe.set_defaults(func=cmd_find_email)

    p_h = sub.add_parser("history", help="Browse past searches")
    hsub = p_h.add_subparsers(dest="history_cmd", required=True)
    p_hl = hsub.add_parser("list", help="List email and company searches, newest first")
    p_hl.add_argument("--filter", choices=["all", "email", "company", "success", "error"], default="all")
    p_hl.add_argument("--json", action="store_true")
    p_hs = hsub.add_parser("show", help="Show a cached result")
    p_hs.add_argument("id")
    p_hs.add_argument("--more", type=int, default=0, help="Fetch this many more pages for a cached company search")
    p_hr = hsub.add_parser("remove", help="Delete one entry")
    p_hr.add_argument("id")
    p_hc = hsub.add_parser("clear", help="Delete all entries of a kind")
    p_hc.add_argument("--kind", choices=["all", "email", "company"], default="all")
    p_h.set_defaults(func=cmd_history)

    args = parser.parse_args(argv)
    try:
        code = args.func(args)
    except ConfigurationError as e:
        print(f"{e}. Set EMAIL_FINDER_API_KEY in your environment or .env file.", file=sys.stderr)
        sys.exit(2)
    except EmailFinderError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
