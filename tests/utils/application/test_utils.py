import pytest
from protean.exceptions import ValidationError
from storefront.utils.logging import mask_email, mask_emails
from storefront.utils.params import PlainParamsCodec


class TestMaskEmail:
    def test_keeps_first_and_last_character(self):
        assert mask_email("jane@example.com") == "j***e@example.com"

    def test_short_local_part(self):
        assert mask_email("jo@example.com") == "j***@example.com"

    def test_non_email_is_left_alone(self):
        assert mask_email("not-an-email") == "not-an-email"
        assert mask_email(None) is None

    def test_processor_masks_known_keys_only(self):
        event = mask_emails(None, "info", {"email": "jane@example.com", "order_id": "ord-1"})

        assert event == {"email": "j***e@example.com", "order_id": "ord-1"}


class TestPlainParamsCodec:
    def test_decodes_what_it_encodes(self):
        codec = PlainParamsCodec()

        token = codec.encode({"email": "jane@example.com"})

        assert "=" not in token
        assert codec.decode(token) == {"email": "jane@example.com"}

    @pytest.mark.parametrize("token", ["!!!", "bm90LWpzb24", "WzEsMl0"])
    def test_unreadable_tokens_are_rejected(self, token):
        with pytest.raises(ValidationError) as exc:
            PlainParamsCodec().decode(token)

        assert "data" in exc.value.messages
