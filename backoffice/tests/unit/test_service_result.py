import pytest

from backoffice.services import ErrorCodes, forward_err, service_err, service_ok


@pytest.mark.unit
class TestServiceResult:
    def test_map_transforms_value(self):
        assert service_ok(2).map(lambda value: value * 3).value == 6

    def test_map_passes_errors_through(self):
        result = service_err(ErrorCodes.ORDER_NOT_FOUND, "missing").map(lambda value: value * 3)

        assert result.error == ErrorCodes.ORDER_NOT_FOUND

    def test_error_detail_defaults_to_code(self):
        assert service_err(ErrorCodes.INTERNAL_ERROR).error_detail == ErrorCodes.INTERNAL_ERROR

    def test_forward_err_keeps_payload(self):
        original = service_err(ErrorCodes.INSUFFICIENT_STOCK, "short", error_data={"available": 1})

        forwarded = forward_err(original)

        assert forwarded is not original
        assert (forwarded.error, forwarded.error_detail, forwarded.error_data) == (
            ErrorCodes.INSUFFICIENT_STOCK,
            "short",
            {"available": 1},
        )

    def test_to_dict_merges_error_data(self):
        payload = service_err(ErrorCodes.INSUFFICIENT_STOCK, "short", error_data={"available": 1}).to_dict()

        assert payload == {
            "success": False,
            "error": {"code": ErrorCodes.INSUFFICIENT_STOCK, "message": "short", "available": 1},
        }
