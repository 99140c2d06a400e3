import json
import os
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import User
from catalog.models import Completion, Problem, Topic
from spaced_repetition.data.models import ScheduleItem


class Command(BaseCommand):
    help = "Wipe and re-seed demo users, catalog problems and completions."

    def add_arguments(self, parser):
        parser.add_argument(
            "--file", default="MOCK_DATA.json", help="JSON file name to load data from"
        )

    def handle(self, *args, **options):
        file_name = options.get("file") or "MOCK_DATA.json"
        json_file_path = os.path.join(os.path.dirname(__file__), file_name)

        try:
            with open(json_file_path) as json_file:
                data = json.load(json_file)
        except (OSError, ValueError) as e:
            raise CommandError(f"Error loading data: {e}") from e

        with transaction.atomic():
            ScheduleItem.objects.all().delete()
            Completion.objects.all().delete()
            Problem.objects.all().delete()
            Topic.objects.all().delete()
            User.objects.all().delete()
            self.stdout.write(self.style.SUCCESS("All existing item data has been deleted"))

            users = self._load_users(data.get("users", []))
            problems = self._load_catalog(data.get("topics", []))
            count = self._load_completions(data.get("completions", {}), users, problems)

        self.stdout.write(
            self.style.SUCCESS(
                f"Mock data loaded successfully from {file_name}: "
                f"{len(users)} users, {len(problems)} problems, {count} completions"
            )
        )

    def _load_users(self, entries):
        users = {}
        for entry in entries:
            username = entry["username"]
            email = entry.get("email", f"{username}@example.com")
            password = entry.get("password", "testpassword")
            if entry.get("superuser"):
                user = User.objects.create_superuser(username, email=email, password=password)
            else:
                user = User.objects.create_user(username, email=email, password=password)
            users[username] = user
        return users

    def _load_catalog(self, topics):
        problems = {}
        for entry in topics:
            topic = Topic.objects.create(name=entry["name"], slug=entry.get("slug"))
            for p in entry.get("problems", []):
                problems[p["slug"]] = Problem.objects.create(
                    name=p["name"],
                    slug=p["slug"],
                    difficulty=p.get("difficulty", Problem.Difficulty.MEDIUM),
                    topic=topic,
                )
        return problems

    def _load_completions(self, completions, users, problems):
        count = 0
        for username, slugs in completions.items():
            user = users.get(username)
            if user is None:
                raise CommandError(f"Completions reference unknown user '{username}'")
            for slug in slugs:
                if slug not in problems:
                    raise CommandError(f"Completions reference unknown problem '{slug}'")
                Completion.objects.create(user_id=user.id, problem=problems[slug])
                count += 1
        return count
