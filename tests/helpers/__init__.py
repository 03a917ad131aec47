"""Shared test data builders"""

from tests.helpers.factories import MONDAY, TUESDAY, make_entry

__all__ = ["MONDAY", "TUESDAY", "make_entry"]
