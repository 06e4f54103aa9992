# Generated manually for the partner portal commission ledger

import commissions.models
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('sales', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='CommissionSlab',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slabs', models.JSONField(blank=True, default=commissions.models.default_slabs)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('partner', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='commission_slab', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['partner_id'],
            },
        ),
        migrations.CreateModel(
            name='ManagedCommission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('current_slab', models.CharField(default='0-30', max_length=20)),
                ('total_sales', models.PositiveIntegerField(default=0)),
                ('eligible_sales', models.PositiveIntegerField(default=0)),
                ('first_month_sales', models.PositiveIntegerField(default=0)),
                ('renewal_sales', models.PositiveIntegerField(default=0)),
                ('total_commission', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('recomputed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('partner', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='managed_commission', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='SaleCommission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sale_date', models.DateTimeField()),
                ('first_month_subscription', models.BooleanField(default=False)),
                ('amount_charged_first_month', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('renewal_second_month', models.BooleanField(default=False)),
                ('amount_charged_second_month', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('eligible_count', models.PositiveIntegerField(default=0)),
                ('slab', models.CharField(max_length=20)),
                ('rate', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=6)),
                ('first_month_commission', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('renewal_commission', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('commission', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('managed', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='commissions.managedcommission')),
                ('sale', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='commission_line', to='sales.sale')),
            ],
            options={
                'ordering': ['sale_date', 'sale_id'],
            },
        ),
    ]
