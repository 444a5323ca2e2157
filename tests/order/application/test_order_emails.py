"""Order confirmation and status-change emails."""

from protean import current_domain

from storefront.accounts.user import User
from storefront.order.status import UpdateOrderStatus, run_with_order_locks


class TestOrderEmails:
    def test_placement_sends_one_confirmation(self, fake_email, placed_order, customer):
        user = current_domain.repository_for(User).get(customer)
        sent = fake_email.sent_to(user.email.address)
        assert len(sent) == 1
        assert placed_order.order_code in sent[0]["subject"]
        assert "Fountain Pen x 2" in sent[0]["body"]
        assert "Total: 48.00" in sent[0]["body"]

    def test_status_change_sends_notice(self, fake_email, placed_order):
        run_with_order_locks(UpdateOrderStatus(order_id=placed_order.id, status="PROCESSING"))
        subjects = [email["subject"] for email in fake_email.sent_emails]
        assert subjects[-1].endswith("is now PROCESSING")
        assert len(subjects) == 2

    def test_no_op_status_update_sends_nothing(self, fake_email, placed_order):
        run_with_order_locks(UpdateOrderStatus(order_id=placed_order.id, status="PENDING"))
        assert len(fake_email.sent_emails) == 1

    def test_failed_send_does_not_fail_the_order(
        self, fake_email, customer, shipping_address, stocked_product, add_to_cart, place
    ):
        fake_email.configure(should_succeed=False)
        add_to_cart(customer, stocked_product, 1)

        assert place(customer, shipping_address)
        assert fake_email.sent_emails == []
