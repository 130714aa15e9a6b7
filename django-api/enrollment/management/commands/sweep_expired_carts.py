"""Management command to drop expired students from stored carts."""

from django.core.management.base import BaseCommand
from django.utils import timezone

from enrollment import conf
from enrollment.domain.snapshot import item_from_record, migrate_record
from enrollment.services.cart_service import CartService
from enrollment.services.pricing_service import PricingService
from enrollment.stores.django_store import CacheCartStore, DjangoCatalogStore


def count_expired(records, now, ttl):
    return sum(
        1
        for record in records
        if now - item_from_record(migrate_record(record, now)).added_at >= ttl
    )


class Command(BaseCommand):
    help = 'Remove cart items older than the cart time to live'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show how many items would be removed without changing any cart'
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        store = CacheCartStore()
        pricing = PricingService(DjangoCatalogStore(), conf.standard_price_list())
        now = timezone.now()
        ttl = conf.cart_ttl()

        total = 0
        for cart_id in store.cart_ids():
            try:
                expired = count_expired(store.load(cart_id) or [], now, ttl)
            except (ValueError, TypeError, KeyError, AttributeError) as exc:
                self.stderr.write(f'Cart {cart_id}: unreadable snapshot ({exc})')
                if not dry_run:
                    # Loading discards a snapshot it cannot read.
                    CartService(store, pricing, cart_id)
                continue

            if not expired:
                continue
            total += expired

            if dry_run:
                self.stdout.write(f'  - {cart_id}: {expired}')
            else:
                # Loading a cart prunes expired items and writes it back.
                CartService(store, pricing, cart_id).refresh()

        if dry_run:
            self.stdout.write(f'Would remove {total} expired cart items')
        else:
            self.stdout.write(self.style.SUCCESS(f'Removed {total} expired cart items'))
