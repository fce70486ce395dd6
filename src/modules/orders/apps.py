from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders import handlers
        from modules.orders.events import (
            OrderCancelled,
            OrderCompleted,
            OrderCreated,
            OrderPutOnHold,
            OrderStatusChanged,
            PaymentRecorded,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderCreated, handlers.order_created_handler)
        event_bus.subscribe(OrderStatusChanged, handlers.order_status_changed_handler)
        event_bus.subscribe(OrderCompleted, handlers.order_completed_handler)
        event_bus.subscribe(OrderCancelled, handlers.order_cancelled_handler)
        event_bus.subscribe(OrderPutOnHold, handlers.order_put_on_hold_handler)
        event_bus.subscribe(PaymentRecorded, handlers.payment_recorded_handler)
