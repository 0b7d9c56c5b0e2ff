"""Email templates for order notifications."""


class OrderConfirmationTemplate:
    """Sent once an order has been committed."""

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        amount = float(context.get("amount", 0.0))
        return {
            "subject": f"Your Cartflow order #{order_id}",
            "body": f"Thank you for your order.\n\nOrder ID: {order_id}\nTotal: ${amount:.2f}",
        }


class StatusUpdateTemplate:
    """Sent whenever a payment or cancellation moves an order's status."""

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        status = str(context.get("status", "")).upper()
        return {
            "subject": f"Order #{order_id} status updated",
            "body": f"Your order status is now: {status}",
        }
