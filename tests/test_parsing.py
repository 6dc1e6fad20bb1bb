import unittest
from datetime import date
from decimal import Decimal

from eventstudio.errors import CapacityError, ConflictError, ValidationError
from eventstudio.parsing import missing_fields, parse_date, parse_price, parse_seats, parse_tags, parse_uuid


class TestParsing(unittest.TestCase):
    def test_parse_tags(self):
        self.assertEqual(parse_tags("rock, indie ,, , live"), ["rock", "indie", "live"])
        self.assertEqual(parse_tags(["a ", " ", "b"]), ["a", "b"])
        self.assertEqual(parse_tags(None), [])
        self.assertEqual(parse_tags(""), [])
        with self.assertRaises(ValidationError):
            parse_tags(42)

    def test_parse_date(self):
        self.assertEqual(parse_date("2026-10-19"), date(2026, 10, 19))
        self.assertEqual(parse_date("2026-10-19T21:00:00.000Z"), date(2026, 10, 19))
        with self.assertRaises(ValidationError):
            parse_date("19/10/2026")
        with self.assertRaises(ValidationError):
            parse_date(20261019)

    def test_parse_numbers(self):
        self.assertEqual(parse_price("12.5"), Decimal("12.50"))
        self.assertEqual(parse_price(0), Decimal("0.00"))
        self.assertEqual(parse_seats("30"), 30)
        self.assertEqual(parse_seats(0), 0)
        for bad in (-1, "abc", None, "NaN"):
            with self.assertRaises(ValidationError):
                parse_price(bad)
        for bad in (-3, 1.5, True, "x"):
            with self.assertRaises(ValidationError):
                parse_seats(bad)

    def test_missing_fields_keeps_zero(self):
        data = {"price": 0, "seats": 0, "name": "  ", "venue": None}
        self.assertEqual(missing_fields(data, ["price", "seats", "name", "venue", "time"]),
                         ["name", "venue", "time"])

    def test_parse_uuid(self):
        with self.assertRaises(ValidationError):
            parse_uuid("abc")

    def test_sold_out_is_a_conflict(self):
        error = CapacityError("Event is sold out")
        self.assertIsInstance(error, ConflictError)
        self.assertEqual(error.status_code, 400)
        self.assertEqual(error.to_dict()["error_code"], "EVENT_SOLD_OUT")


if __name__ == '__main__':
    unittest.main()
