#!/usr/bin/env python3
"""Stokvel dashboard terminal client."""
import argparse
import getpass
import sys
from typing import Callable, Dict, List, Optional

from stokvel.config import configure_logging, settings
from stokvel.core.api import StokvelAPIConfig
from stokvel.core.error.exceptions import StokvelError
from stokvel.core.error.handler import ErrorHandler
from stokvel.core.state import SessionManager, create_storage
from stokvel.core.types import NewAnnouncement, NewContribution, NewMember
from stokvel.services.dashboard import DashboardService, aggregates

POPIA_NOTICE = "FOR CLUB USE ONLY - POPIA Protected"


def build_service(args: argparse.Namespace) -> DashboardService:
    api_config = StokvelAPIConfig(
        base_url=args.api_url or settings.API_URL,
        timeout=args.timeout or settings.API_TIMEOUT
    )
    session_manager = SessionManager(create_storage(args.storage), api_config=api_config)
    return DashboardService(session_manager)


def confirm(prompt: str, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    return input(f"{prompt} [y/N] ").strip().lower() in ("y", "yes")


def report(service: DashboardService, ok: bool, success_message: Optional[str] = None) -> int:
    if ok:
        if success_message:
            print(success_message)
        return 0
    if service.state.error:
        print(f"Error: {service.state.error}", file=sys.stderr)
    elif not service.state.is_authenticated:
        print("Session expired. Please log in again.", file=sys.stderr)
    return 1


# Output

def print_dashboard(service: DashboardService) -> None:
    state = service.state
    user = state.user
    print(f"Hi, {aggregates.first_name(user.name)}!")
    print(f"  Total saved:       {aggregates.format_rand(state.stats.total_saved)}"
          f" ({state.stats.months_contributed} months contributed)")
    print(f"  Estimated payout:  {aggregates.format_rand(state.stats.estimated_payout)}")
    print(f"  Membership status: {user.status or '-'} (ID: {user.id})")

    print("\nRecent Contributions")
    recent = service.my_recent_contributions()
    if not recent:
        print("  No contributions yet")
    for contribution in recent:
        print(f"  {contribution.month or '-':<20} {aggregates.format_rand(contribution.amount):>10}  {contribution.status}")

    print("\nLatest Announcements")
    print_announcements(service.latest_announcements())


def print_members(service: DashboardService) -> None:
    members = service.state.members
    if not members:
        print("No members")
    for member in members:
        payments = aggregates.paid_count(service.state.contributions, member.id)
        print(f"{member.id:<8} {member.name or '-':<25} {member.status or '-':<10} {payments} payments")
        print(f"         ID: {aggregates.masked_id_number(member.id_number)}"
              f"  {member.phone or '-'}  {member.email or '-'}")
        if service.is_bank_details_revealed(member.id):
            details = aggregates.bank_details(member)
            print(f"         {POPIA_NOTICE}")
            print(f"         Bank: {details['bank_name'] or '-'}  Holder: {details['account_holder'] or '-'}")
            print(f"         Account: {details['account_number'] or '-'}  Branch: {details['branch_code'] or '-'}")


def print_contributions(service: DashboardService) -> None:
    contributions = service.visible_contributions()
    if not contributions:
        print("No contributions yet")
    for contribution in contributions:
        name = service.member_name(contribution.member_id) if service.state.is_admin else ""
        print(f"{contribution.id:<6} {name:<25} {contribution.month or '-':<20} "
              f"{aggregates.format_rand(contribution.amount):>10}  {contribution.status:<8} "
              f"{contribution.date_paid or '-'}")


def print_announcements(announcements) -> None:
    if not announcements:
        print("  No announcements yet")
    for announcement in announcements:
        marker = "!" if announcement.is_high_priority else "-"
        print(f"  {marker} [{announcement.id}] {announcement.title} ({announcement.announcement_date or '-'})")
        print(f"      {announcement.message}")


# Commands

def cmd_login(service: DashboardService, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    ok = service.login(args.email, password)
    if ok:
        user = service.state.user
        return report(service, service.state.error is None, f"Logged in as {user.name} ({user.role})")
    return report(service, ok)


def cmd_logout(service: DashboardService, args: argparse.Namespace) -> int:
    service.logout()
    print("Logged out")
    return 0


def cmd_whoami(service: DashboardService, args: argparse.Namespace) -> int:
    user = service.state.user
    print(f"{user.name} <{user.email or '-'}> id={user.id} role={user.role} status={user.status or '-'}")
    return 0


def cmd_dashboard(service: DashboardService, args: argparse.Namespace) -> int:
    print_dashboard(service)
    return 0


def cmd_members(service: DashboardService, args: argparse.Namespace) -> int:
    if not service.state.is_admin:
        print("Error: Only administrators can view members.", file=sys.stderr)
        return 1
    for member_id in args.show_bank or []:
        service.toggle_bank_details(member_id)
    print_members(service)
    return 0


def cmd_add_member(service: DashboardService, args: argparse.Namespace) -> int:
    member = NewMember(
        name=args.name,
        email=args.email,
        id_number=args.id_number,
        phone=args.phone,
        status=args.status,
        role=args.role,
        bank_name=args.bank_name,
        account_holder=args.account_holder,
        account_number=args.account_number,
        branch_code=args.branch_code,
    )
    return report(service, service.add_member(member), f"Added member {args.name}")


def cmd_delete_member(service: DashboardService, args: argparse.Namespace) -> int:
    if not confirm("Are you sure you want to delete this member?", args.yes):
        return 0
    return report(service, service.delete_member(args.member_id), f"Deleted member {args.member_id}")


def cmd_contributions(service: DashboardService, args: argparse.Namespace) -> int:
    print_contributions(service)
    return 0


def cmd_add_contribution(service: DashboardService, args: argparse.Namespace) -> int:
    contribution = NewContribution(
        member_id=args.member_id,
        month=args.month,
        amount=args.amount,
        status=args.status,
    )
    return report(service, service.add_contribution(contribution), "Contribution recorded")


def cmd_set_status(service: DashboardService, args: argparse.Namespace) -> int:
    ok = service.update_contribution_status(args.contribution_id, args.status)
    return report(service, ok, f"Contribution {args.contribution_id} marked {args.status}")


def cmd_announcements(service: DashboardService, args: argparse.Namespace) -> int:
    print_announcements(service.state.announcements)
    return 0


def cmd_announce(service: DashboardService, args: argparse.Namespace) -> int:
    announcement = NewAnnouncement(title=args.title, message=args.message, priority=args.priority)
    return report(service, service.add_announcement(announcement), "Announcement posted")


def cmd_delete_announcement(service: DashboardService, args: argparse.Namespace) -> int:
    if not confirm("Delete this announcement?", args.yes):
        return 0
    ok = service.delete_announcement(args.announcement_id)
    return report(service, ok, f"Deleted announcement {args.announcement_id}")


COMMANDS: Dict[str, Callable[[DashboardService, argparse.Namespace], int]] = {
    "login": cmd_login,
    "logout": cmd_logout,
    "whoami": cmd_whoami,
    "dashboard": cmd_dashboard,
    "members": cmd_members,
    "add-member": cmd_add_member,
    "delete-member": cmd_delete_member,
    "contributions": cmd_contributions,
    "add-contribution": cmd_add_contribution,
    "set-status": cmd_set_status,
    "announcements": cmd_announcements,
    "announce": cmd_announce,
    "delete-announcement": cmd_delete_announcement,
}

# Commands that work without a stored session
UNAUTHENTICATED_COMMANDS = {"login", "logout"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stokvel",
        description="Powerhouse Stokvel Club dashboard client",
        epilog="""
Examples:
  %(prog)s login admin@powerhouse.co.za
  %(prog)s dashboard
  %(prog)s add-contribution PH002 "March 2026" --amount 300
  %(prog)s set-status 4 Paid
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--api-url", help="Backend base URL (default: STOKVEL_API_URL)")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds (default: STOKVEL_API_TIMEOUT)")
    parser.add_argument(
        "--storage",
        choices=["redis", "file", "memory"],
        help="Session storage backend (default: STOKVEL_SESSION_BACKEND)"
    )
    parser.add_argument("--log-level", help="Log level for the stokvel logger")

    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Log in and store the session")
    login.add_argument("email")
    login.add_argument("--password", help="Prompted for when omitted")

    sub.add_parser("logout", help="Clear the stored session")
    sub.add_parser("whoami", help="Show the logged in user")
    sub.add_parser("dashboard", help="Savings overview")

    members = sub.add_parser("members", help="List members (admin)")
    members.add_argument("--show-bank", action="append", metavar="MEMBER_ID",
                         help="Reveal banking details for a member")

    add_member = sub.add_parser("add-member", help="Add a member (admin)")
    add_member.add_argument("--name", required=True)
    add_member.add_argument("--email", required=True)
    add_member.add_argument("--id-number", required=True)
    add_member.add_argument("--phone", default="")
    add_member.add_argument("--status", default="Active")
    add_member.add_argument("--role", choices=["member", "admin"], default="member")
    add_member.add_argument("--bank-name", default="")
    add_member.add_argument("--account-holder", default="")
    add_member.add_argument("--account-number", default="")
    add_member.add_argument("--branch-code", default="")

    delete_member = sub.add_parser("delete-member", help="Delete a member (admin)")
    delete_member.add_argument("member_id")
    delete_member.add_argument("--yes", action="store_true", help="Skip confirmation")

    sub.add_parser("contributions", help="List contributions")

    add_contribution = sub.add_parser("add-contribution", help="Record a contribution (admin)")
    add_contribution.add_argument("member_id")
    add_contribution.add_argument("month")
    add_contribution.add_argument("--amount", type=float, default=300)
    add_contribution.add_argument("--status", choices=["Pending", "Paid"], default="Pending")

    set_status = sub.add_parser("set-status", help="Mark a contribution Paid or Pending (admin)")
    set_status.add_argument("contribution_id")
    set_status.add_argument("status", choices=["Paid", "Pending"])

    sub.add_parser("announcements", help="List announcements")

    announce = sub.add_parser("announce", help="Post an announcement (admin)")
    announce.add_argument("title")
    announce.add_argument("message")
    announce.add_argument("--priority", choices=["normal", "high"], default="normal")

    delete_announcement = sub.add_parser("delete-announcement", help="Delete an announcement (admin)")
    delete_announcement.add_argument("announcement_id")
    delete_announcement.add_argument("--yes", action="store_true", help="Skip confirmation")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        service = build_service(args)
        if args.command not in UNAUTHENTICATED_COMMANDS:
            if not service.start():
                print("Not logged in. Run: stokvel login EMAIL", file=sys.stderr)
                return 1
            if service.state.error:
                print(f"Error: {service.state.error}", file=sys.stderr)
                return 1
        return COMMANDS[args.command](service, args)
    except StokvelError as e:
        print(f"Error: {ErrorHandler.user_message(e)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
