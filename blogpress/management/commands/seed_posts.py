"""
Load posts from a directory of front-matter Markdown files.

    python manage.py seed_posts path/to/seeds --author-email admin@example.com
"""
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from ...conf import blog_settings
from ...models import Post
from ...seeding import get_seed_author, seed_directory


class Command(BaseCommand):
    help = "Create or update posts from Markdown files with YAML front matter."

    def add_arguments(self, parser):
        parser.add_argument(
            "directory",
            nargs="?",
            help="Directory containing *.md seed files (defaults to BLOGPRESS['SEED_DIRECTORY']).",
        )
        parser.add_argument(
            "--author-email",
            help="Email of the user that owns seeded posts; created if missing.",
        )

    def handle(self, *args, **options):
        directory = options["directory"] or blog_settings.SEED_DIRECTORY
        if not directory:
            raise CommandError("No seed directory given and BLOGPRESS['SEED_DIRECTORY'] is not set.")
        directory = Path(directory)
        if not directory.is_dir():
            raise CommandError(f"Seed directory does not exist: {directory}")

        author = get_seed_author(options["author_email"])
        results = seed_directory(directory, author)
        self.stdout.write(f"Found {len(results)} markdown files")

        for result in results:
            if result.status in ("created", "updated"):
                self.stdout.write(self.style.SUCCESS(
                    f"✓ {result.status.capitalize()} post: {result.post.title}"
                ))
            else:
                self.stdout.write(self.style.WARNING(
                    f"✗ Skipping {result.path.name}: {result.message}"
                    if result.status == "skipped"
                    else f"✗ Failed {result.path.name}: {result.message}"
                ))

        self.stdout.write(f"Posts in database: {Post.objects.count()}")
