#!/usr/bin/env python3
"""
Administration commands for ProspectGenius.

Usage:
    uv run python manage.py status                                 # Is first-admin setup needed?
    uv run python manage.py setup-admin --email a@b.com --password secret [--name "Jane Doe"]
    uv run python manage.py promote <user_id>                      # Make an existing user admin

Configuration:
    Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY in your .env file.
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.table import Table

from modules.profiles.exceptions import AdminAlreadyExistsError, ProfileNotFoundError
from modules.profiles.repository import ProfileRepository
from modules.profiles.service import ProfileService
from shared.database import get_supabase_client
from shared.exceptions import ExternalServiceError

console = Console()


def get_profile_service() -> ProfileService:
    """Build the profile service on the service-role client."""
    try:
        db = get_supabase_client()
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    return ProfileService(ProfileRepository(db), db=db)


async def show_status(service: ProfileService) -> None:
    """Print whether setup is needed and the profile counts per role."""
    setup_needed = await service.is_setup_needed()
    stats = await service.get_stats()

    table = Table(title="Profiles")
    table.add_column("Role", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Administrator", str(stats.admin))
    table.add_row("Subscriber", str(stats.subscriber))
    table.add_row("Guest", str(stats.guest))
    table.add_row("[bold]Total[/bold]", f"[bold]{stats.total}[/bold]")
    console.print(table)

    if setup_needed:
        console.print("[yellow]No admin exists yet.[/yellow] Run: manage.py setup-admin")
    else:
        console.print("[green]Setup complete: an admin exists.[/green]")


async def setup_admin(service: ProfileService, email: str, password: str, name: str) -> None:
    """Create the first admin account."""
    try:
        profile = await service.create_first_admin(email, password, name)
    except AdminAlreadyExistsError as e:
        console.print(f"[yellow]Skipped:[/yellow] {e.message}")
        return
    except ExternalServiceError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)
    console.print(f"[green]✓[/green] Admin created: {email} ({profile.id})")


async def promote(service: ProfileService, user_id: str) -> None:
    """Promote an existing user to admin."""
    try:
        profile = await service.promote_to_admin(user_id)
    except ProfileNotFoundError:
        console.print(f"[red]Error:[/red] No profile found for {user_id}")
        sys.exit(1)
    console.print(f"[green]✓[/green] {profile.full_name or profile.id} is now an Administrator")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="ProspectGenius administration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show whether first-admin setup is needed")

    setup = subparsers.add_parser("setup-admin", help="Create the first admin account")
    setup.add_argument("--email", required=True, help="Admin email address")
    setup.add_argument("--password", required=True, help="Admin password")
    setup.add_argument("--name", default="Admin User", help="Admin display name")

    promote_parser = subparsers.add_parser("promote", help="Promote a user to admin")
    promote_parser.add_argument("user_id", help="User ID (UUID) to promote")

    args = parser.parse_args()

    console.print("[bold]ProspectGenius Administration[/bold]")
    console.print()

    service = get_profile_service()

    if args.command == "status":
        asyncio.run(show_status(service))
    elif args.command == "setup-admin":
        asyncio.run(setup_admin(service, args.email, args.password, args.name))
    elif args.command == "promote":
        asyncio.run(promote(service, args.user_id))


if __name__ == "__main__":
    main()
