"""PostalAddress value object shared by users, orders and checkouts."""

from protean.fields import String

from storefront.domain import storefront


@storefront.value_object
class PostalAddress:
    """A delivery or invoice address as the customer typed it."""

    first_name: String(required=True, max_length=50)
    last_name: String(required=True, max_length=50)
    phone_number: String(required=True, max_length=30)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    home_number: String(required=True, max_length=20)
    post_code: String(required=True, max_length=20)
    add_info: String(max_length=500)

    def to_dict(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phoneNumber": self.phone_number,
            "street": self.street,
            "city": self.city,
            "homeNumber": self.home_number,
            "postCode": self.post_code,
            "addInfo": self.add_info,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PostalAddress":
        return cls(
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            phone_number=data.get("phoneNumber"),
            street=data.get("street"),
            city=data.get("city"),
            home_number=data.get("homeNumber"),
            post_code=data.get("postCode"),
            add_info=data.get("addInfo"),
        )
