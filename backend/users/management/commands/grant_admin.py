import logging

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from config.constants import DEFAULT_ROLE, ROLE_CHOICES
from users.models import Admin
from utils.service_role import require_service_role_key

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Create an administrator record for an existing identity (service role operation)."

    def add_arguments(self, parser):
        parser.add_argument("email")
        parser.add_argument(
            "--role",
            default=DEFAULT_ROLE,
            choices=[role["key"] for role in ROLE_CHOICES],
        )

    def handle(self, *args, **options):
        require_service_role_key()

        email = options["email"].lower().strip()
        user = get_user_model().objects.filter(email=email).first()
        if user is None:
            raise CommandError(f"No identity registered for {email}")

        existing = Admin.objects.for_user(user)
        if existing is not None:
            self.stdout.write(f"{email} is already an administrator ({existing.role})")
            return

        admin = Admin.objects.create(user=user, email=email, role=options["role"])
        logger.info(f"Administrator record {admin.id} granted to {email}")
        self.stdout.write(self.style.SUCCESS(f"Granted {admin.role} access to {email}"))
