from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


class Command(BaseCommand):
    help = (
        "Report orders whose stored total differs from the sum of their "
        "items' quantity * price_at_order.  Read-only."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--fail-on-drift",
            action="store_true",
            help="Exit with a non-zero status when any order drifts.",
        )

    def handle(self, *args, **options):
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        drifting = service.audit_totals()

        for order, drift in drifting:
            self.stdout.write(
                f"order={order.id} stored={order.total_amount} drift={drift}"
            )

        if not drifting:
            self.stdout.write(self.style.SUCCESS("All order totals are consistent."))
            return

        message = f"{len(drifting)} order(s) with drifting totals."
        if options["fail_on_drift"]:
            raise CommandError(message)
        self.stdout.write(self.style.WARNING(message))
