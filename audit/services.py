from django.contrib.contenttypes.models import ContentType

from .enums import Verb
from .local import current_actor
from .models import AuditLog


def log_action(*, obj, title: str, extra: dict | None = None) -> AuditLog:
    """Record a named action (e.g. a status transition) against ``obj``."""
    return AuditLog.objects.create(
        **current_actor(),
        verb=Verb.ACTION,
        message=title[:255],
        target_ct=ContentType.objects.get_for_model(obj.__class__),
        target_id=str(obj.pk),
        extra=extra or {},
    )
