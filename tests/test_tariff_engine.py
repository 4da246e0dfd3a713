import unittest
from datetime import datetime, timedelta
from decimal import Decimal

from errors import InvalidConfiguration
from models import TariffConfiguration, VehicleType
from tariff_engine import chargeable_hours, duration_minutes, had_overnight, quote


def tariff(**overrides):
    return TariffConfiguration(**overrides)


class TestScenarios(unittest.TestCase):
    def test_s1_short_stay_across_midnight(self):
        fee = quote(
            datetime(2024, 1, 1, 23, 50),
            datetime(2024, 1, 2, 0, 10),
            VehicleType.car,
            tariff(free_minutes=15, hourly_rate_car="1.00", overnight_fee_car="10.00"),
        )
        self.assertEqual(fee.duration_minutes, 20)
        self.assertEqual(fee.chargeable_minutes, 5)
        self.assertEqual(fee.base_charge, Decimal("1.00"))
        self.assertTrue(fee.had_overnight)
        self.assertEqual(fee.overnight_fee, Decimal("10.00"))
        self.assertEqual(fee.total_amount, Decimal("11.00"))

    def test_s2_bike_ninety_minutes_same_day(self):
        fee = quote(
            datetime(2024, 3, 5, 10, 0),
            datetime(2024, 3, 5, 11, 30),
            VehicleType.bike,
            tariff(free_minutes=15, hourly_rate_bike="0.50"),
        )
        self.assertEqual(fee.duration_minutes, 90)
        self.assertEqual(fee.chargeable_minutes, 75)
        self.assertEqual(fee.hourly_rate, Decimal("0.50"))
        self.assertEqual(fee.base_charge, Decimal("1.00"))
        self.assertFalse(fee.had_overnight)
        self.assertEqual(fee.overnight_fee, Decimal("0.00"))
        self.assertEqual(fee.total_amount, Decimal("1.00"))


class TestGracePeriod(unittest.TestCase):
    entry = datetime(2024, 5, 10, 9, 0)

    def fee_after(self, minutes, free_minutes=15):
        return quote(
            self.entry,
            self.entry + timedelta(minutes=minutes),
            VehicleType.car,
            tariff(free_minutes=free_minutes),
        )

    def test_g1_under_grace_is_free(self):
        fee = self.fee_after(10)
        self.assertEqual(fee.chargeable_minutes, 0)
        self.assertEqual(fee.total_amount, Decimal("0.00"))

    def test_g2_exactly_at_grace_is_free(self):
        fee = self.fee_after(15)
        self.assertEqual(fee.chargeable_minutes, 0)
        self.assertEqual(fee.base_charge, Decimal("0.00"))

    def test_g3_one_minute_past_grace_bills_full_hour(self):
        fee = self.fee_after(16)
        self.assertEqual(fee.chargeable_minutes, 1)
        self.assertEqual(fee.base_charge, Decimal("1.00"))

    def test_g4_started_second_hour_rounds_up(self):
        fee = self.fee_after(15 + 61)
        self.assertEqual(fee.chargeable_minutes, 61)
        self.assertEqual(fee.base_charge, Decimal("2.00"))

    def test_g5_exact_hours_do_not_round_up(self):
        fee = self.fee_after(15 + 120)
        self.assertEqual(fee.base_charge, Decimal("2.00"))

    def test_g6_zero_grace(self):
        fee = self.fee_after(1, free_minutes=0)
        self.assertEqual(fee.chargeable_minutes, 1)
        self.assertEqual(fee.base_charge, Decimal("1.00"))

    def test_g7_zero_duration(self):
        fee = self.fee_after(0, free_minutes=0)
        self.assertEqual(fee.duration_minutes, 0)
        self.assertEqual(fee.total_amount, Decimal("0.00"))

    def test_chargeable_hours_helper(self):
        self.assertEqual(chargeable_hours(0), 0)
        self.assertEqual(chargeable_hours(1), 1)
        self.assertEqual(chargeable_hours(60), 1)
        self.assertEqual(chargeable_hours(61), 2)


class TestDuration(unittest.TestCase):
    def test_d1_partial_minutes_are_truncated(self):
        entry = datetime(2024, 5, 10, 9, 0, 0)
        self.assertEqual(duration_minutes(entry, entry + timedelta(seconds=59)), 0)
        self.assertEqual(duration_minutes(entry, entry + timedelta(minutes=15, seconds=59)), 15)

    def test_d2_grace_boundary_uses_truncated_minutes(self):
        entry = datetime(2024, 5, 10, 9, 0, 0)
        fee = quote(entry, entry + timedelta(minutes=15, seconds=59), VehicleType.car, tariff(free_minutes=15))
        self.assertEqual(fee.total_amount, Decimal("0.00"))


class TestOvernight(unittest.TestCase):
    def test_o1_two_minutes_across_midnight(self):
        entry = datetime(2024, 2, 1, 23, 59)
        exit_ = datetime(2024, 2, 2, 0, 1)
        self.assertTrue(had_overnight(entry, exit_))
        fee = quote(entry, exit_, VehicleType.bike, tariff(free_minutes=15))
        self.assertEqual(fee.duration_minutes, 2)
        self.assertEqual(fee.base_charge, Decimal("0.00"))
        self.assertEqual(fee.overnight_fee, Decimal("5.00"))
        self.assertEqual(fee.total_amount, Decimal("5.00"))

    def test_o2_long_stay_within_one_day(self):
        entry = datetime(2024, 2, 1, 0, 30)
        exit_ = datetime(2024, 2, 1, 23, 30)
        self.assertFalse(had_overnight(entry, exit_))
        fee = quote(entry, exit_, VehicleType.car, tariff(free_minutes=15))
        self.assertEqual(fee.duration_minutes, 23 * 60)
        self.assertEqual(fee.base_charge, Decimal("23.00"))
        self.assertEqual(fee.overnight_fee, Decimal("0.00"))

    def test_o3_multi_day_stay_charges_single_surcharge(self):
        entry = datetime(2024, 2, 1, 12, 0)
        exit_ = datetime(2024, 2, 4, 12, 0)
        fee = quote(entry, exit_, VehicleType.car, tariff(free_minutes=0))
        self.assertEqual(fee.base_charge, Decimal("72.00"))
        self.assertEqual(fee.overnight_fee, Decimal("10.00"))
        self.assertEqual(fee.total_amount, Decimal("82.00"))


class TestMoney(unittest.TestCase):
    def test_m1_no_float_drift(self):
        entry = datetime(2024, 6, 1, 8, 0)
        fee = quote(entry, entry + timedelta(hours=3), VehicleType.car, tariff(free_minutes=0, hourly_rate_car="0.10"))
        self.assertEqual(fee.base_charge, Decimal("0.30"))
        self.assertEqual(str(fee.total_amount), "0.30")

    def test_m2_quote_is_deterministic(self):
        entry = datetime(2024, 6, 1, 8, 0)
        exit_ = datetime(2024, 6, 1, 10, 17)
        config = tariff()
        self.assertEqual(
            quote(entry, exit_, VehicleType.car, config).model_dump(),
            quote(entry, exit_, VehicleType.car, config).model_dump(),
        )

    def test_m3_rates_follow_vehicle_type(self):
        entry = datetime(2024, 6, 1, 8, 0)
        exit_ = entry + timedelta(hours=2, minutes=15)
        config = tariff(hourly_rate_car="3.00", hourly_rate_bike="1.25")
        self.assertEqual(quote(entry, exit_, VehicleType.car, config).total_amount, Decimal("6.00"))
        self.assertEqual(quote(entry, exit_, "bike", config).total_amount, Decimal("2.50"))


class TestInvalidConfiguration(unittest.TestCase):
    entry = datetime(2024, 6, 1, 8, 0)
    exit_ = datetime(2024, 6, 1, 9, 30)

    def test_i1_missing_rate(self):
        config = tariff()
        config.hourly_rate_car = None
        with self.assertRaises(InvalidConfiguration):
            quote(self.entry, self.exit_, VehicleType.car, config)

    def test_i2_non_numeric_rate(self):
        config = tariff()
        config.overnight_fee_bike = "abc"
        with self.assertRaises(InvalidConfiguration):
            quote(self.entry, self.exit_, VehicleType.bike, config)

    def test_i3_negative_rate(self):
        config = tariff()
        config.hourly_rate_bike = Decimal("-1")
        with self.assertRaises(InvalidConfiguration):
            quote(self.entry, self.exit_, VehicleType.bike, config)

    def test_i4_bad_free_minutes(self):
        config = tariff()
        config.free_minutes = -5
        with self.assertRaises(InvalidConfiguration):
            quote(self.entry, self.exit_, VehicleType.car, config)

    def test_i6_amount_too_large_to_bill(self):
        config = tariff(free_minutes=0, hourly_rate_car="9e24")
        exit_ = self.entry + timedelta(hours=100)
        with self.assertRaises(InvalidConfiguration):
            quote(self.entry, exit_, VehicleType.car, config)

    def test_i5_other_class_rate_is_not_checked(self):
        config = tariff()
        config.hourly_rate_bike = None
        fee = quote(self.entry, self.exit_, VehicleType.car, config)
        self.assertEqual(fee.total_amount, Decimal("2.00"))


if __name__ == "__main__":
    unittest.main()
