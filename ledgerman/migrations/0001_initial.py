"""
Initial migration for Ledgerman models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


DOC_TYPES = [
    ('receipt', 'Entrada'),
    ('shipment', 'Saída'),
    ('adjustment', 'Ajuste'),
    ('count', 'Contagem'),
]


class Migration(migrations.Migration):
    """Create Ledgerman models: Document, DocumentLine, Balance, LedgerEntry, AuditEntry."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Document',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('doc_no', models.CharField(help_text='Ex: REC-20260101-A1B2', max_length=40, unique=True, verbose_name='Número')),
                ('type', models.CharField(choices=DOC_TYPES, max_length=20, verbose_name='Tipo')),
                ('status', models.CharField(choices=[('draft', 'Rascunho'), ('posted', 'Lançado')], db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('warehouse_id', models.CharField(db_index=True, max_length=64, verbose_name='Depósito')),
                ('note', models.TextField(blank=True, default='', verbose_name='Observação')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizado em')),
                ('posted_at', models.DateTimeField(blank=True, null=True, verbose_name='Lançado em')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Criado por')),
                ('posted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Lançado por')),
            ],
            options={
                'verbose_name': 'Documento',
                'verbose_name_plural': 'Documentos',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='DocumentLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0, verbose_name='Ordem')),
                ('sku', models.CharField(max_length=64, verbose_name='SKU')),
                ('quantity', models.IntegerField(verbose_name='Quantidade')),
                ('note', models.CharField(blank=True, default='', max_length=255, verbose_name='Observação')),
                ('document', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='ledgerman.document', verbose_name='Documento')),
            ],
            options={
                'verbose_name': 'Linha',
                'verbose_name_plural': 'Linhas',
                'ordering': ['position', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Balance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(max_length=64, verbose_name='SKU')),
                ('warehouse_id', models.CharField(max_length=64, verbose_name='Depósito')),
                ('on_hand', models.IntegerField(default=0, verbose_name='Em estoque')),
                ('version', models.PositiveIntegerField(default=0, help_text='Incrementada a cada lançamento (controle de concorrência).', verbose_name='Versão')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Atualizado em')),
            ],
            options={
                'verbose_name': 'Saldo',
                'verbose_name_plural': 'Saldos',
                'ordering': ['on_hand', 'sku'],
            },
        ),
        migrations.CreateModel(
            name='LedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(max_length=64, verbose_name='SKU')),
                ('product_id', models.CharField(blank=True, default='', max_length=64, verbose_name='ID do Produto')),
                ('warehouse_id', models.CharField(max_length=64, verbose_name='Depósito')),
                ('doc_type', models.CharField(choices=DOC_TYPES, max_length=20, verbose_name='Tipo')),
                ('delta', models.IntegerField(help_text='Positivo = entrada, Negativo = saída', verbose_name='Variação')),
                ('description', models.CharField(blank=True, default='', max_length=255, verbose_name='Descrição')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('document', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='ledgerman.document', verbose_name='Documento')),
            ],
            options={
                'verbose_name': 'Lançamento',
                'verbose_name_plural': 'Lançamentos',
                'ordering': ['created_at', 'id'],
            },
        ),
        migrations.CreateModel(
            name='AuditEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entity', models.CharField(db_index=True, max_length=40, verbose_name='Entidade')),
                ('entity_id', models.CharField(max_length=64, verbose_name='ID')),
                ('action', models.CharField(choices=[('created', 'Criado'), ('updated', 'Alterado'), ('deleted', 'Excluído'), ('posted', 'Lançado')], max_length=20, verbose_name='Ação')),
                ('before', models.JSONField(blank=True, default=dict, verbose_name='Antes')),
                ('after', models.JSONField(blank=True, default=dict, verbose_name='Depois')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Usuário')),
            ],
            options={
                'verbose_name': 'Auditoria',
                'verbose_name_plural': 'Auditoria',
                'ordering': ['-created_at', '-id'],
            },
        ),
        # Indexes and constraints
        migrations.AddIndex(
            model_name='document',
            index=models.Index(fields=['type', 'status'], name='ledgerman_doc_type_status'),
        ),
        migrations.AddIndex(
            model_name='document',
            index=models.Index(fields=['status', 'posted_at'], name='ledgerman_doc_posted'),
        ),
        migrations.AddConstraint(
            model_name='balance',
            constraint=models.UniqueConstraint(fields=('sku', 'warehouse_id'), name='unique_balance_sku_warehouse'),
        ),
        migrations.AddIndex(
            model_name='balance',
            index=models.Index(fields=['warehouse_id', 'on_hand'], name='ledgerman_bal_wh_onhand'),
        ),
        migrations.AddIndex(
            model_name='ledgerentry',
            index=models.Index(fields=['sku', 'warehouse_id', 'created_at'], name='ledgerman_led_key_created'),
        ),
        migrations.AddIndex(
            model_name='ledgerentry',
            index=models.Index(fields=['warehouse_id', 'created_at'], name='ledgerman_led_wh_created'),
        ),
        migrations.AddIndex(
            model_name='auditentry',
            index=models.Index(fields=['entity', 'entity_id'], name='ledgerman_audit_entity'),
        ),
    ]
