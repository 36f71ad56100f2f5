"""Newsletter subscriber records, one per email."""

from datetime import datetime

from protean.fields import DateTime, String

from storefront.domain import storefront
from storefront.promotions.events import NewsletterSubscribed


@storefront.aggregate
class NewsSubscriber:
    email: String(required=True, max_length=254)
    subscribed_at: DateTime(default=datetime.now)

    @classmethod
    def subscribe(cls, email):
        subscriber = cls(email=email, subscribed_at=datetime.now())
        subscriber.raise_(
            NewsletterSubscribed(
                subscriber_id=str(subscriber.id),
                email=email,
                subscribed_at=subscriber.subscribed_at,
            )
        )
        return subscriber
