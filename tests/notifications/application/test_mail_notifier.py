from datetime import datetime, timezone

import pytest
from storefront.notifications.mailer import MailNotifier


@pytest.fixture()
def notifier(settings, email_channel):
    return MailNotifier(settings)


ORDER = {
    "id": "ord-1",
    "deliveryType": "post",
    "paymentChargeId": "ch_123",
    "products": [{"name": "Linen Shirt", "color": "white", "price": 50.0, "sizes": [{"size": "M", "quantity": 1}]}],
    "deliveryAddress": {
        "firstName": "Jane",
        "lastName": "Doe",
        "phoneNumber": "+1 555 0100",
        "street": "Main Street",
        "homeNumber": "12",
        "postCode": "62701",
        "city": "Springfield",
    },
}
PAYMENT = {"currency": "usd", "totalPrice": 55.0, "totalCount": 1, "shippingCost": 5.0}


class TestOrderConfirmation:
    def test_customer_and_shop_both_get_a_mail(self, notifier, email_channel, settings):
        sent = notifier.send_order_confirmation({"firstName": "Jane", "email": "jane@example.com"}, ORDER, PAYMENT)

        assert sent is True
        receipt = email_channel.sent_to("jane@example.com")
        assert len(receipt) == 1
        assert "ord-1" in receipt[0]["subject"]
        assert "USD 55.00" in receipt[0]["body"]
        assert "Linen Shirt" in receipt[0]["body"]
        assert "Main Street 12, 62701 Springfield" in receipt[0]["body"]
        assert len(email_channel.sent_to(settings.shop_email)) == 1

    def test_failed_delivery_is_reported_not_raised(self, notifier, email_channel):
        email_channel.configure(should_succeed=False)

        assert notifier.send_order_confirmation({"firstName": "Jane", "email": "jane@example.com"}, ORDER, PAYMENT) is False

    def test_raising_channel_is_reported_not_raised(self, notifier, email_channel):
        email_channel.configure(raise_on_send=True)

        assert notifier.send_order_confirmation({"firstName": "Jane", "email": "jane@example.com"}, ORDER, PAYMENT) is False
        assert email_channel.sent_emails == []


class TestPromoMails:
    def test_promo_code_mail_carries_code_and_end_date(self, notifier, email_channel):
        end_date = datetime(2026, 11, 1, tzinfo=timezone.utc)

        assert notifier.send_promo_code("jane@example.com", "SAVE10", 10, end_date) is True

        mail = email_channel.sent_to("jane@example.com")[0]
        assert "SAVE10" in mail["body"]
        assert "2026-11-01" in mail["body"]
        assert "10%" in mail["subject"]

    def test_invite_mail_carries_the_subscribe_link(self, notifier, email_channel):
        link = "http://localhost:3000/promocode/invite?data=abc"

        assert notifier.send_promo_invite("jane@example.com", 10, link) is True

        assert link in email_channel.sent_to("jane@example.com")[0]["body"]
