"""
Serial ID composition and parsing.
"""
from django.test import SimpleTestCase, TestCase, override_settings

from accounts.models import User
from core.models import Organization
from verification.exceptions import SerialGenerationFailed
from verification.serial import (
    compose_serial_id,
    member_years,
    name_initials,
    parse_serial_id,
)


class NameInitialsTests(SimpleTestCase):
    def test_two_part_name_is_padded(self):
        self.assertEqual(name_initials("Jane Doe"), "JDX")

    def test_three_part_name_uses_first_middle_last(self):
        self.assertEqual(name_initials("John Michael Doe"), "JMD")

    def test_long_name_uses_second_and_last(self):
        self.assertEqual(name_initials("Anna Maria Louisa van Berg"), "AMB")

    def test_single_name(self):
        self.assertEqual(name_initials("cher"), "CXX")

    def test_empty_name(self):
        self.assertEqual(name_initials(""), "XXX")
        self.assertEqual(name_initials(None), "XXX")

    def test_non_letters_are_dropped(self):
        self.assertEqual(name_initials("1st Doe"), "DXX")


class ComposeSerialTests(SimpleTestCase):
    def test_first_serial_of_organization(self):
        self.assertEqual(compose_serial_id("ABC", 1, "Jane Doe", 2010, 2014), "ABC0001JDX1014")

    def test_counter_grows_past_four_digits(self):
        self.assertEqual(compose_serial_id("AB", 12345, "Jane Doe", 1999, 2003), "AB12345JDX9903")

    def test_parse_round_trip_of_components(self):
        parsed = parse_serial_id("ABC0042JMD1014")
        self.assertEqual(parsed.organization_code, "ABC")
        self.assertEqual(parsed.counter, 42)
        self.assertEqual(parsed.initials, "JMD")
        self.assertEqual(parsed.admission_yy, 10)
        self.assertEqual(parsed.passout_yy, 14)
        self.assertIsNone(parsed.suffix)

    def test_parse_collision_suffix(self):
        parsed = parse_serial_id("ABC0001JDX011014")
        self.assertEqual(parsed.suffix, 1)
        self.assertEqual(parsed.admission_yy, 10)
        self.assertEqual(parsed.passout_yy, 14)

    def test_parse_rejects_malformed(self):
        self.assertIsNone(parse_serial_id("abc0001JDX1014"))
        self.assertIsNone(parse_serial_id("ABC01JDX1014"))
        self.assertIsNone(parse_serial_id(""))
        self.assertIsNone(parse_serial_id(None))


class MemberYearsTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="ABC Alumni", short_code="ABC")

    def _member(self, **kwargs):
        return User(organization=self.org, email="m@abc.test", full_name="Jane Doe", **kwargs)

    def test_explicit_years(self):
        self.assertEqual(member_years(self._member(admission_year=2010, passout_year=2014, batch=2014)), (2010, 2014))

    @override_settings(ADMISSION_YEARS_BEFORE_PASSOUT=4)
    def test_admission_derived_from_batch(self):
        self.assertEqual(member_years(self._member(batch=2014)), (2010, 2014))

    def test_missing_batch_fails(self):
        with self.assertRaises(SerialGenerationFailed):
            member_years(self._member())
