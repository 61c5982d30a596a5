"""Order events reach the notification channels without affecting the order flow."""

from protean import current_domain

from storefront.order.administration import ChangeOrderStatus
from storefront.order.order import Order, PaymentInfo
from storefront.payment.failure import ReportPaymentFailure


class TestOrderNotifications:
    def test_placement_notifies_operator_and_customer(self, make_product, place_order, chat, mailbox):
        product = make_product(base_price=1000.0)

        order = place_order([(product.id, 1)])

        assert any(str(order.id) in sent["message"] for sent in chat.sent_messages)
        assert mailbox.sent_emails[0]["to"] == "asha@example.com"

    def test_broken_channels_do_not_block_placement(self, make_product, place_order, chat, mailbox):
        chat.configure(should_succeed=False)
        mailbox.configure(should_succeed=False)
        product = make_product()

        order = place_order([(product.id, 1)])

        assert current_domain.repository_for(Order).get(order.id).payment_status == "pending"

    def test_payment_failure_alert(self, make_product, place_order, chat, mailbox):
        order = place_order([(make_product().id, 1)])
        chat.sent_messages.clear()

        current_domain.process(ReportPaymentFailure(order_id=str(order.id), error_description="Declined"), asynchronous=False)

        assert "Payment failed" in chat.sent_messages[-1]["message"]

    def test_status_change_email(self, make_product, place_order, chat, mailbox):
        order = place_order([(make_product().id, 1)])
        repo = current_domain.repository_for(Order)
        stored = repo.get(order.id)
        stored.confirm_payment(PaymentInfo(gateway_payment_id="pay_1", amount_paid=stored.total_amount))
        repo.add(stored)
        mailbox.sent_emails.clear()

        current_domain.process(ChangeOrderStatus(order_id=str(order.id), order_status="processing"), asynchronous=False)

        assert mailbox.sent_emails[-1]["subject"] == f"Order {order.id} is processing"
