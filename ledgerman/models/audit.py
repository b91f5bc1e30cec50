"""
AuditEntry model — Before/after snapshots of document changes.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ledgerman.models.enums import AuditAction


class AuditEntry(models.Model):
    """
    Tagged before/after snapshot pair keyed by entity id.

    entity is the tag ("document"), entity_id its primary key as text.
    before is empty on creation, after is empty on deletion.
    """

    entity = models.CharField(max_length=40, db_index=True, verbose_name=_('Entidade'))
    entity_id = models.CharField(max_length=64, verbose_name=_('ID'))
    action = models.CharField(
        max_length=20,
        choices=AuditAction.choices,
        verbose_name=_('Ação'),
    )
    before = models.JSONField(default=dict, blank=True, verbose_name=_('Antes'))
    after = models.JSONField(default=dict, blank=True, verbose_name=_('Depois'))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Usuário'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))

    class Meta:
        verbose_name = _('Auditoria')
        verbose_name_plural = _('Auditoria')
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['entity', 'entity_id'], name='ledgerman_audit_entity'),
        ]

    @classmethod
    def record(cls, entity: str, entity_id, action: str,
               before: dict | None = None, after: dict | None = None, user=None):
        return cls.objects.create(
            entity=entity,
            entity_id=str(entity_id),
            action=action,
            before=before or {},
            after=after or {},
            user=user,
        )

    def __str__(self) -> str:
        return f"{self.entity}:{self.entity_id} {self.action}"
