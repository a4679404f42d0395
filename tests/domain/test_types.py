"""Tests for the OrderStatus / PropertySize string and integer codecs."""

from __future__ import annotations

import pytest

from moving.domain.types import OrderStatus, PropertySize


class TestOrderStatusCodec:
    @pytest.mark.parametrize(
        ("member", "code"),
        [
            (OrderStatus.CREATED, "created"),
            (OrderStatus.REJECTED, "rejected"),
            (OrderStatus.IN_PROGRESS, "in_progress"),
            (OrderStatus.DONE, "done"),
        ],
    )
    def test_known_codes_round_trip(self, member: OrderStatus, code: str) -> None:
        assert member.encode() == code
        assert OrderStatus.decode(code) is member

    def test_unknown_encodes_as_unknown(self) -> None:
        assert OrderStatus.UNKNOWN.encode() == "unknown"

    @pytest.mark.parametrize("code", ["", None, "shipped", "CREATED", " created"])
    def test_decode_is_lenient(self, code: str | None) -> None:
        assert OrderStatus.decode(code) is OrderStatus.UNKNOWN

    def test_unrecognized_wire_number_is_unknown(self) -> None:
        assert OrderStatus(42) is OrderStatus.UNKNOWN

    def test_is_known(self) -> None:
        assert OrderStatus.DONE.is_known
        assert not OrderStatus.UNKNOWN.is_known


class TestPropertySizeCodec:
    def test_every_member_round_trips(self) -> None:
        for member in PropertySize:
            assert PropertySize.decode(member.encode()) is member

    def test_codes(self) -> None:
        assert PropertySize.ONE_BEDROOM.encode() == "1_bedroom"
        assert PropertySize.FOUR_PLUS_BEDROOMS.encode() == "4_plus_bedrooms"
        assert PropertySize.COMMERCIAL.encode() == "commercial"

    def test_unrecognized_code(self) -> None:
        assert PropertySize.decode("castle") is PropertySize.UNKNOWN

    def test_unknown_is_zero(self) -> None:
        assert PropertySize.UNKNOWN == 0
        assert PropertySize(-1) is PropertySize.UNKNOWN
