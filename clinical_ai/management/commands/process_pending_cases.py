from django.core.management.base import BaseCommand

from cases.repositories import CaseRepository
from clinical_ai.services.pipeline import CaseProcessor


class Command(BaseCommand):
    help = "Run the AI pipeline for cases claimed in QUEUE mode (processing status PENDING)"

    def add_arguments(self, parser):
        parser.add_argument("--batch-size", type=int, default=50)
        parser.add_argument("--dry-run", action="store_true", help="List pending cases without processing them")

    def handle(self, *args, **opts):
        repo = CaseRepository()
        pending = repo.find_pending_processing(limit=opts["batch_size"])
        if not pending:
            self.stdout.write("No cases pending AI processing")
            return

        if opts["dry_run"]:
            for case in pending:
                self.stdout.write(f"{case.id} [{case.priority}] {case.chief_complaint[:60]}")
            self.stdout.write(f"{len(pending)} case(s) pending")
            return

        processor = CaseProcessor(cases=repo)
        done = failed = 0
        for case in pending:
            result = processor.run(case.id)
            if result.success:
                done += 1
            else:
                failed += 1
                self.stderr.write(f"{case.id}: {result.message}")
        self.stdout.write(self.style.SUCCESS(f"Processed {done} case(s), {failed} failed"))
