from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token

from profiles.models import Profile

GUESTS = {
    Profile.TYPE_CUSTOMER: {
        "username": "guest_customer",
        "password": "guest-customer-24",
        "email": "guest.customer@example.com",
        "profile": {"location": "Berlin"},
    },
    Profile.TYPE_TAILOR: {
        "username": "guest_tailor",
        "password": "guest-tailor-24",
        "email": "guest.tailor@example.com",
        "profile": {"shop_name": "Guest Atelier", "location": "Berlin", "working_hours": "9-18"},
    },
}


class Command(BaseCommand):
    help = "Create or update demo guest accounts (one customer, one tailor)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--keep-passwords",
            action="store_true",
            help="Do not reset the password of accounts that already exist.",
        )

    def handle(self, *args, **options):
        User = get_user_model()

        for role, cfg in GUESTS.items():
            u, created = User.objects.get_or_create(
                username=cfg["username"],
                defaults={"email": cfg["email"]},
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f"Created user '{u.username}'"))
            else:
                self.stdout.write(f"User '{u.username}' already exists")

            if created or not options["keep_passwords"]:
                u.set_password(cfg["password"])
                u.save(update_fields=["password"])

            # Profil mit korrektem Typ sicherstellen
            prof, _ = Profile.objects.get_or_create(user=u, defaults={"type": role, **cfg["profile"]})
            if prof.type != role:
                prof.type = role
                prof.save(update_fields=["type"])

            token, _ = Token.objects.get_or_create(user=u)
            self.stdout.write(f"  -> type={role}, token={token.key}")

        self.stdout.write(self.style.SUCCESS("Guest users ready."))
