from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.materials.models import MaterialCompany
from modules.materials.repositories.django_repository import (
    MaterialCompanyDjangoRepository,
)
from modules.orders.dtos import CreateOrderDTO, LineGroupDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.statuses.repositories.django_repository import StatusDjangoRepository
from modules.statuses.services import StatusCatalogService


class Command(BaseCommand):
    help = "Seed database with the default status catalog and development data."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders",
            type=int,
            default=20,
            help="Number of sample orders to create (0 to skip).",
        )
        parser.add_argument(
            "--catalog-only",
            action="store_true",
            help="Only create the missing default statuses.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        status_repo = StatusDjangoRepository()
        order_repo = OrderDjangoRepository()
        created_statuses = StatusCatalogService(status_repo, order_repo).seed_defaults()
        self.stdout.write(
            self.style.SUCCESS(f"Status catalog: {len(created_statuses)} status(es) added.")
        )
        if options["catalog_only"]:
            return

        users_created = self._seed_users()
        customers = self._seed_customers()
        companies = self._seed_material_companies()
        service = OrderService(
            order_repository=order_repo,
            status_repository=status_repo,
            customer_repository=CustomerDjangoRepository(),
            material_repository=MaterialCompanyDjangoRepository(),
        )
        orders_created = self._seed_orders(service, customers, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"customers={len(customers)}, "
                f"material_companies={len(companies)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="workshop").exists():
            User.objects.create_user("workshop", password="workshop123", is_staff=True)
            created += 1
        return created

    def _seed_customers(self) -> list[Customer]:
        self.stdout.write("Creating customers...")
        customers: list[Customer] = []
        seed_customers = [
            ("Olivia Tremblay", "olivia@example.com", "416-555-0101"),
            ("Liam Gagnon", "liam@example.com", "647-555-0102"),
            ("Emma Roy", "emma@example.com", "905-555-0103"),
            ("Noah Cote", "noah@example.com", "416-555-0104"),
            ("Ava Bouchard", "ava@example.com", "647-555-0105"),
            ("Lucas Gauthier", "lucas@example.com", "905-555-0106"),
        ]
        for name, email, phone in seed_customers:
            customer, _ = Customer.objects.get_or_create(
                email=email,
                defaults={"name": name, "phone": phone, "is_active": True},
            )
            customers.append(customer)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_material_companies(self) -> list[MaterialCompany]:
        self.stdout.write("Creating material companies...")
        companies: list[MaterialCompany] = []
        seed_companies = [
            ("Charlotte Fabrics", "orders@charlottefabrics.example.com"),
            ("Kravet", "trade@kravet.example.com"),
            ("Robert Allen", "samples@robertallen.example.com"),
        ]
        for position, (name, email) in enumerate(seed_companies, start=1):
            company, _ = MaterialCompany.objects.get_or_create(
                name=name, defaults={"email": email, "sort_order": position}
            )
            companies.append(company)
        self.stdout.write(self.style.SUCCESS("Creating material companies... Done!"))
        return companies

    def _seed_orders(
        self, service: OrderService, customers: list[Customer], count: int
    ) -> int:
        self.stdout.write("Creating orders...")
        if not customers or count <= 0:
            self.stdout.write(self.style.WARNING("Skipping orders."))
            return 0

        furniture = ["Sofa", "Armchair", "Dining chair", "Ottoman", "Headboard"]
        fabrics = [("Charlotte Fabrics", "CH-2041"), ("Kravet", "KR-118"), ("Robert Allen", "RA-77")]
        platforms = ["Website", "Instagram", "Referral", "Walk-in"]

        for _ in range(count):
            groups = []
            for _ in range(random.randint(1, 3)):
                company, code = random.choice(fabrics)
                groups.append(
                    LineGroupDTO(
                        furniture_type=random.choice(furniture),
                        material_company=company,
                        material_code=code,
                        material_quantity=Decimal(random.randint(2, 12)),
                        material_unit_price=Decimal(random.choice([35, 48, 62, 85])),
                        labour_unit_price=Decimal(random.choice([150, 250, 400])),
                        labour_quantity=Decimal(1),
                        foam_enabled=random.random() < 0.4,
                        foam_unit_price=Decimal(random.choice([0, 45, 90])),
                        foam_quantity=Decimal(random.randint(1, 4)),
                    )
                )
            deposit = Decimal(random.choice([0, 200, 300, 500]))
            order = service.create_order(
                CreateOrderDTO(
                    customer_id=random.choice(customers).id,
                    platform=random.choice(platforms),
                    timeline="2-3 weeks",
                    deposit_required=deposit,
                    pickup_delivery_enabled=random.random() < 0.5,
                    pickup_delivery_cost=Decimal(random.choice([80, 120])),
                    initial_payment=deposit if random.random() < 0.5 else Decimal(0),
                    initial_payment_method="E-transfer",
                    line_groups=groups,
                )
            )
            created_at = timezone.now() - timedelta(days=random.randint(0, 60))
            Order.objects.filter(id=order.id).update(created_at=created_at)

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return count
