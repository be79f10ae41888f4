import pytest

from factlens.errors import ValidationError
from factlens.schemas import FactCheckRequest
from factlens.services.gate import ensure_content, has_content


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"text": None, "url": None, "images": None},
        {"text": "", "url": "", "images": []},
        {"text": "   \n\t"},
    ],
)
def test_rejects_requests_without_content(payload):
    request = FactCheckRequest(**payload)
    assert not has_content(request)
    with pytest.raises(ValidationError) as exc_info:
        ensure_content(request)
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize(
    "payload",
    [
        {"text": "Water boils at 100C at sea level."},
        {"url": "https://example.com/article"},
        {"images": ["data:image/png;base64,iVBORw0KGgo="]},
    ],
)
def test_passes_request_through_unchanged(payload):
    request = FactCheckRequest(**payload)
    assert ensure_content(request) is request
