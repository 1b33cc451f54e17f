from django.core.management.base import BaseCommand
from engagement.services import reconcile_counters
from followers.services import reconcile_follow_counts

class Command(BaseCommand):
    help = "Recompute post engagement counters and profile follow counters from their source tables"

    def add_arguments(self, parser):
        parser.add_argument("--post", type=int, action="append", dest="post_ids",
                            help="Only reconcile this post id (repeatable)")
        parser.add_argument("--skip-follows", action="store_true",
                            help="Leave follower/following counters alone")

    def handle(self, *args, **options):
        repaired = reconcile_counters(options["post_ids"])
        self.stdout.write(self.style.SUCCESS(f"Repaired counters on {repaired} posts."))
        if not options["skip_follows"] and not options["post_ids"]:
            profiles = reconcile_follow_counts()
            self.stdout.write(self.style.SUCCESS(f"Repaired follow counters on {profiles} profiles."))


# python manage.py reconcile_counters --post 42
