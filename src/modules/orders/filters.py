import django_filters

from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status_value", lookup_expr="exact")
    customer = django_filters.UUIDFilter(field_name="customer_id")
    invoice_number = django_filters.CharFilter(
        field_name="invoice_number", lookup_expr="exact"
    )
    platform = django_filters.CharFilter(field_name="platform", lookup_expr="iexact")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    deposit_received = django_filters.BooleanFilter(field_name="deposit_received")

    class Meta:
        model = Order
        fields = [
            "status",
            "customer",
            "invoice_number",
            "platform",
            "start_date",
            "end_date",
            "deposit_received",
        ]
