"""
Django management command to move lapsed subscriptions to pending payment.

This command should be run periodically (e.g., via cron or scheduled task)
when Celery beat is not running.
"""

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from core.tasks import build_license_service


class Command(BaseCommand):
    """Command to sweep lapsed subscription licenses."""

    help = "Move active subscription licenses whose end date has passed to pendiente_pago"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - don't actually update licenses",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        dry_run = options["dry_run"]
        result = async_to_sync(build_license_service().sweep_lapsed_subscriptions)(dry_run=dry_run)
        if not result.success:
            raise CommandError(result.error)

        if dry_run:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            for license in result.data[:10]:
                self.stdout.write(f"  - License {license.id} ended on {license.end_date}")

        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(result.message))
