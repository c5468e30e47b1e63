import logging

from django.core.management.base import BaseCommand, CommandError

from users.models import Admin
from utils.service_role import require_service_role_key

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Delete the administrator records of an identity (service role operation)."

    def add_arguments(self, parser):
        parser.add_argument("email")

    def handle(self, *args, **options):
        require_service_role_key()

        email = options["email"].lower().strip()
        deleted, _ = Admin.objects.filter(user__email=email).delete()
        if not deleted:
            raise CommandError(f"{email} has no administrator record")

        # Live sessions are rejected by the access gate on their next request.
        logger.info(f"Administrator access revoked for {email}")
        self.stdout.write(self.style.SUCCESS(f"Revoked administrator access for {email}"))
