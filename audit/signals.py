"""
Model-level audit trail for the clinical apps.

Creates, updates and deletes of audited models are written to ``AuditLog``
with before/after snapshots. Bulk ``QuerySet.update`` calls (used for
versioned case writes) do not fire signals; those paths call
``audit.services.log_action`` explicitly.
"""
import json
import sys

from django.contrib.contenttypes.models import ContentType
from django.core.serializers.json import DjangoJSONEncoder
from django.db.models import Model
from django.db.models.signals import post_save, pre_delete, pre_save
from django.dispatch import receiver

from .enums import Verb
from .local import current_actor
from .models import AuditLog

AUDIT_APPS = {"patients", "cases", "clinical_ai", "accounts"}

# never snapshot these
REDACTED_FIELDS = {"password", "last_login"}


class SafeJSONEncoder(DjangoJSONEncoder):
    def default(self, o):
        if isinstance(o, set):
            return sorted(o)
        if isinstance(o, Model):
            return o.pk or str(o)
        return super().default(o)


def json_ready(payload: dict):
    return json.loads(json.dumps(payload, cls=SafeJSONEncoder))


def _should_audit(sender) -> bool:
    if any(cmd in sys.argv for cmd in ("migrate", "makemigrations")):
        return False
    return sender._meta.app_label in AUDIT_APPS


def snapshot(instance) -> dict:
    data = {}
    for f in instance._meta.concrete_fields:
        if f.name in REDACTED_FIELDS:
            continue
        data[f.name] = f.value_from_object(instance)
    return data


def _write(verb, instance, message, changes):
    AuditLog.objects.create(
        **current_actor(),
        verb=verb,
        message=message,
        target_ct=ContentType.objects.get_for_model(instance.__class__),
        target_id=str(instance.pk),
        changes=json_ready(changes),
    )


@receiver(pre_save)
def audit_pre_save(sender, instance, raw=False, **kwargs):
    if raw or not _should_audit(sender) or instance._state.adding:
        return
    old = sender._default_manager.filter(pk=instance.pk).first()
    if old is not None:
        instance._audit_before = snapshot(old)


@receiver(post_save)
def audit_post_save(sender, instance, created, raw=False, **kwargs):
    if raw or not _should_audit(sender):
        return
    if created:
        _write(Verb.CREATE, instance, "Created", {"after": snapshot(instance)})
        return
    before = getattr(instance, "_audit_before", None) or {}
    after = snapshot(instance)
    diff = {k: v for k, v in after.items() if before.get(k) != v}
    if diff:
        _write(Verb.UPDATE, instance, "Updated", {
            "before": {k: before.get(k) for k in diff},
            "after": diff,
        })


@receiver(pre_delete)
def audit_pre_delete(sender, instance, **kwargs):
    if not _should_audit(sender):
        return
    _write(Verb.DELETE, instance, "Deleted", {"before": snapshot(instance)})
