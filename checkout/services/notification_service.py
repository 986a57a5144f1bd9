# checkout/services/notification_service.py
from checkout.celery_worker import celery_app
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_checkout_notification(buyer_id: str, order_ids: list[str]):
        """
        Powiadomienie o opłaconych zamówieniach z checkoutu.
        Błąd kolejki nie może wywrócić checkoutu - pieniądze już poszły.
        """
        if not order_ids:
            return
        try:
            send_checkout_notification_task.delay(buyer_id, list(order_ids))
        except Exception as e:
            logger.warning(f"Failed to enqueue checkout notification for buyer {buyer_id}: {e}")


@celery_app.task(name="checkout.services.notification_service.send_checkout_notification_task")
def send_checkout_notification_task(buyer_id: str, order_ids: list[str]):
    """
    Celery task - dostarczanie (email/push) jest po stronie zewnętrznego serwisu.
    Tutaj tylko logujemy.
    """
    logger.info(f"[NOTIFICATION] Buyer {buyer_id}: orders {', '.join(order_ids)} confirmed")

    return {"buyer_id": buyer_id, "order_ids": order_ids, "status": "sent"}
