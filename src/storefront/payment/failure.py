"""Client-reported payment failures.

Reports for unknown or already-settled orders are accepted and ignored, so
a checkout widget retrying its failure callback never sees an error.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import Conflict
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class ReportPaymentFailure:
    order_id = Identifier(required=True)
    error_code = String(max_length=100)
    error_description = String(max_length=500)


@storefront.command_handler(part_of=Order)
class ReportPaymentFailureHandler:
    @handle(ReportPaymentFailure)
    def report_failure(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            logger.info("payment_failure_for_unknown_order", order_id=command.order_id)
            return False

        if not order.awaiting_payment():
            logger.info("payment_failure_ignored", order_id=str(order.id), payment_status=order.payment_status)
            return False

        order.fail_payment(command.error_code, command.error_description)
        try:
            repo.commit_payment(order)
        except Conflict:
            logger.info("payment_failure_ignored", order_id=str(order.id), payment_status="settled_concurrently")
            return False

        logger.warning(
            "payment_failed",
            order_id=str(order.id),
            error_code=command.error_code,
            error_description=command.error_description,
        )
        return True
