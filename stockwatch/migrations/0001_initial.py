"""
Initial migration for Stockwatch models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Stockwatch models: Position, Batch, StockRecord, Alert, StockMovement."""

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
    ]

    operations = [
        migrations.CreateModel(
            name='Position',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.SlugField(help_text='Identificador único (ex: loja-centro, deposito)', unique=True, verbose_name='Código')),
                ('name', models.CharField(help_text='Nome legível da posição', max_length=100, verbose_name='Nome')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Posição',
                'verbose_name_plural': 'Posições',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='Batch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=50, unique=True, verbose_name='Código do Lote')),
                ('product_id', models.PositiveIntegerField(verbose_name='ID do Produto')),
                ('quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Quantidade')),
                ('production_date', models.DateField(blank=True, null=True, verbose_name='Data de Produção')),
                ('expiry_date', models.DateField(blank=True, db_index=True, help_text='Último dia em que o lote pode ser vendido/utilizado', null=True, verbose_name='Data de Validade')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('product_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to='contenttypes.contenttype', verbose_name='Tipo de Produto')),
            ],
            options={
                'verbose_name': 'Lote',
                'verbose_name_plural': 'Lotes',
                'ordering': ['expiry_date', 'production_date'],
            },
        ),
        migrations.CreateModel(
            name='StockRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_id', models.PositiveIntegerField(verbose_name='ID do Produto')),
                ('quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Quantidade')),
                ('available', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Disponível')),
                ('reserved', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Reservado')),
                ('status', models.CharField(choices=[('IN_STOCK', 'Em estoque'), ('LOW_STOCK', 'Estoque baixo'), ('OUT_OF_STOCK', 'Sem estoque'), ('EXPIRED', 'Vencido'), ('RESERVED', 'Reservado')], db_index=True, default='IN_STOCK', max_length=20, verbose_name='Status')),
                ('last_updated', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Atualizado em')),
                ('batch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='records', to='stockwatch.batch', verbose_name='Lote')),
                ('position', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='records', to='stockwatch.position', verbose_name='Posição')),
                ('product_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='contenttypes.contenttype', verbose_name='Tipo de Produto')),
            ],
            options={
                'verbose_name': 'Registro de Estoque',
                'verbose_name_plural': 'Registros de Estoque',
            },
        ),
        migrations.CreateModel(
            name='Alert',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entity_key', models.CharField(db_index=True, max_length=100, verbose_name='Entidade')),
                ('product_id', models.PositiveIntegerField(blank=True, null=True, verbose_name='ID do Produto')),
                ('type', models.CharField(choices=[('LOW_STOCK', 'Estoque baixo'), ('EXPIRY', 'Validade'), ('REORDER', 'Reposição'), ('NEGATIVE_STOCK', 'Estoque negativo'), ('OVER_RESERVED', 'Reserva excedente'), ('DAILY_SUMMARY', 'Resumo diário')], max_length=20, verbose_name='Tipo')),
                ('severity', models.CharField(choices=[('low', 'Baixa'), ('medium', 'Média'), ('high', 'Alta')], default='medium', max_length=10, verbose_name='Severidade')),
                ('message', models.TextField(verbose_name='Mensagem')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativo')),
                ('is_resolved', models.BooleanField(default=False, verbose_name='Resolvido')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Criado em')),
                ('resolved_at', models.DateTimeField(blank=True, null=True, verbose_name='Resolvido em')),
                ('product_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='+', to='contenttypes.contenttype', verbose_name='Tipo de Produto')),
            ],
            options={
                'verbose_name': 'Alerta',
                'verbose_name_plural': 'Alertas',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_id', models.PositiveIntegerField(verbose_name='ID do Produto')),
                ('kind', models.CharField(choices=[('in', 'Entrada'), ('out', 'Saída'), ('adjustment', 'Ajuste')], max_length=20, verbose_name='Tipo')),
                ('delta', models.DecimalField(decimal_places=3, help_text='Positivo = entrada, Negativo = saída', max_digits=12, verbose_name='Variação')),
                ('is_sale', models.BooleanField(default=False, help_text='Saída por venda (entra no cálculo de giro)', verbose_name='Venda')),
                ('reason', models.CharField(blank=True, default='', help_text='Ex: "Venda #123", "Inventário mensal"', max_length=255, verbose_name='Motivo')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('position', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='stockwatch.position', verbose_name='Posição')),
                ('product_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='contenttypes.contenttype', verbose_name='Tipo de Produto')),
            ],
            options={
                'verbose_name': 'Movimento',
                'verbose_name_plural': 'Movimentos',
                'ordering': ['timestamp'],
            },
        ),
        # Indexes
        migrations.AddIndex(
            model_name='batch',
            index=models.Index(fields=['product_type', 'product_id'], name='stockwatch_batch_product_idx'),
        ),
        migrations.AddIndex(
            model_name='stockrecord',
            index=models.Index(fields=['product_type', 'product_id'], name='stockwatch_record_product_idx'),
        ),
        migrations.AddIndex(
            model_name='alert',
            index=models.Index(fields=['entity_key', 'type'], name='stockwatch_alert_key_idx'),
        ),
        migrations.AddIndex(
            model_name='alert',
            index=models.Index(fields=['is_active', 'is_resolved'], name='stockwatch_alert_open_idx'),
        ),
        migrations.AddIndex(
            model_name='stockmovement',
            index=models.Index(fields=['product_type', 'product_id', 'timestamp'], name='stockwatch_move_product_ts_idx'),
        ),
        # One open alert per (entity, type)
        migrations.AddConstraint(
            model_name='alert',
            constraint=models.UniqueConstraint(
                condition=models.Q(('is_active', True), ('is_resolved', False)),
                fields=('entity_key', 'type'),
                name='unique_open_alert_per_entity_type',
            ),
        ),
    ]
