import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_email_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "customer": "jane.doe+work@example.co.uk"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "example.co.uk" not in result["customer"]
        assert "***MASKED***" in result["customer"]

    @pytest.mark.parametrize(
        "phone", ["416-555-0101", "(416) 555-0101", "+1 416 555 0101", "4165550101"]
    )
    def test_phone_masked(self, phone):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "contact": f"call {phone} after 5"}
        result = mask_sensitive_data(None, None, event_dict)
        assert phone not in result["contact"]
        assert "***MASKED***" in result["contact"]

    def test_password_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_identifiers_and_amounts_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {
            "event": "order.status_applied",
            "order_id": "0190a1b2-c3d4-7e5f-8a9b-0c1d2e3f4a5b",
            "invoice_number": "101660",
            "amount_paid": "1250.00",
        }
        result = mask_sensitive_data(None, None, dict(event_dict))
        assert result == event_dict
