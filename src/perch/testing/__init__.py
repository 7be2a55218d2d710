"""Test utilities for applications that declare perch routes.

Requires pytest, installed by the ``testing`` extra (``pip install "perch[testing]"``)::

    from perch.testing import assert_round_trip

    def test_user_route() -> None:
        assert_round_trip(user, {"id": 7}, {"tab": "likes"})
"""

from perch.testing.assertions import assert_parse_failures, assert_round_trip

__all__ = [
    "assert_parse_failures",
    "assert_round_trip",
]
