import re

import pytest

from rentmatch.core.errors import ValidationAppError
from rentmatch.utils.identifiers import generate_request_id, normalize_participant_id


@pytest.mark.parametrize(
    "role, number, expected",
    [
        ("owner", "+91 98765-43210", "OWNER_919876543210"),
        ("tenant", "(080) 555 0101", "TENANT_0805550101"),
        ("tenant", "9876543210", "TENANT_9876543210"),
    ],
)
def test_normalize_participant_id(role, number, expected) -> None:
    assert normalize_participant_id(role, number) == expected


def test_same_number_collides_regardless_of_format() -> None:
    assert normalize_participant_id("owner", "+91 98765 43210") == normalize_participant_id(
        "owner", "919876543210"
    )


def test_normalize_rejects_number_without_digits() -> None:
    with pytest.raises(ValidationAppError) as exc_info:
        normalize_participant_id("owner", "call me")
    assert exc_info.value.code == "invalid_contact_number"


def test_normalize_rejects_unknown_role() -> None:
    with pytest.raises(ValidationAppError):
        normalize_participant_id("admin", "123")  # type: ignore[arg-type]


def test_generate_request_id_format() -> None:
    request_id = generate_request_id(1700000000123)

    assert re.fullmatch(r"REQ_1700000000123_[0-9a-z]{9}", request_id)


def test_generate_request_id_is_random() -> None:
    ids = {generate_request_id(1) for _ in range(200)}
    assert len(ids) == 200
