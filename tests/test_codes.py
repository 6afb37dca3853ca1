"""
Unit tests for booking and verification code generation
"""
import re
from unittest.mock import patch

import pytest
from cleanlab.services import codes
from cleanlab.services.codes import (
    CodeKind,
    generate_booking_code,
    generate_code,
    generate_verification_code,
)

BOOKING_CODE_RE = re.compile(r"^CL-[A-Z0-9]{5}$")


@pytest.mark.unit
class TestVerificationCode:
    """Test six digit verification codes"""

    def test_is_six_digits_in_range(self):
        for _ in range(200):
            code = generate_verification_code()
            assert code.isdigit()
            assert len(code) == 6
            assert 100000 <= int(code) <= 999999

    def test_dispatch_without_session(self):
        code = generate_code(CodeKind.VERIFICATION)
        assert re.fullmatch(r"\d{6}", code)


@pytest.mark.unit
class TestBookingCode:
    """Test booking code format, uniqueness checks and fallback"""

    def test_format(self, test_db_session):
        code = generate_booking_code(test_db_session)
        assert BOOKING_CODE_RE.match(code)

    def test_custom_prefix_and_length(self, test_db_session):
        code = generate_booking_code(test_db_session, prefix="CLB", length=6)
        assert re.fullmatch(r"CLB[A-Z0-9]{6}", code)

    def test_retries_until_unused_code(self, test_db_session):
        with patch.object(codes, "booking_code_exists", side_effect=[True, True, False]) as exists:
            code = generate_booking_code(test_db_session)

        assert exists.call_count == 3
        assert BOOKING_CODE_RE.match(code)

    def test_falls_back_to_timestamp_when_exhausted(self, test_db_session):
        with patch.object(codes, "booking_code_exists", return_value=True) as exists, \
                patch.object(codes.time, "time", return_value=1700000000.123):
            code = generate_booking_code(test_db_session, max_attempts=4)

        assert exists.call_count == 4
        expected = "CL-" + codes._to_base36(1700000000123)[-5:]
        assert code == expected

    def test_store_error_counts_as_attempt(self, test_db_session):
        from sqlalchemy.exc import InvalidRequestError

        failure = InvalidRequestError("stale query")
        with patch.object(codes, "booking_code_exists", side_effect=[failure, False]):
            code = generate_booking_code(test_db_session)

        assert BOOKING_CODE_RE.match(code)

    def test_connection_errors_are_not_retried(self, test_db_session):
        from sqlalchemy.exc import OperationalError

        failure = OperationalError("SELECT", {}, Exception("locked"))
        with patch.object(codes, "booking_code_exists", side_effect=failure) as exists:
            with pytest.raises(OperationalError):
                generate_booking_code(test_db_session)

        assert exists.call_count == 1

    def test_prefix_is_upper_cased(self, test_db_session):
        code = generate_booking_code(test_db_session, prefix="cl-")
        assert BOOKING_CODE_RE.match(code)

    def test_booking_kind_requires_session(self):
        with pytest.raises(ValueError):
            generate_code(CodeKind.BOOKING)

    def test_base36(self):
        assert codes._to_base36(0) == "0"
        assert codes._to_base36(35) == "Z"
        assert codes._to_base36(36) == "10"
