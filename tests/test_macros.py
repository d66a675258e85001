import unittest

from fitplanner.errors import InvalidProfile, UnknownActivityLevel
from fitplanner.services.macros import (ACTIVITY_FACTORS, GOAL_DAILY_CAPS, compute_tdee,
                                        daily_calorie_target, mifflin_st_jeor, round_half_up)


def _targets(**overrides):
    params = dict(sex="male", age=30, height_cm=175, weight_kg=90, activity="moderate",
                  target_weight_kg=75, weeks=16, goal="fat_loss")
    params.update(overrides)
    return daily_calorie_target(**params)


class EnergyModelTests(unittest.TestCase):
    def test_mifflin_male(self):
        self.assertAlmostEqual(mifflin_st_jeor("male", 30, 175, 90), 1848.75)

    def test_mifflin_female(self):
        self.assertAlmostEqual(mifflin_st_jeor("female", 25, 165, 60), 1345.25)

    def test_tdee_uses_activity_table(self):
        for key, factor in ACTIVITY_FACTORS.items():
            self.assertAlmostEqual(compute_tdee(1500, key), 1500 * factor)

    def test_unknown_activity_rejected(self):
        with self.assertRaises(UnknownActivityLevel) as ctx:
            compute_tdee(1500, "athlete")
        self.assertEqual(ctx.exception.activity, "athlete")
        self.assertIsInstance(ctx.exception, InvalidProfile)
        self.assertIsInstance(ctx.exception, ValueError)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(-2.5), -2)
        self.assertEqual(round_half_up(1865.5625), 1866)
        self.assertEqual(round_half_up(-1031.25), -1031)


class CalorieTargetTests(unittest.TestCase):
    def test_reference_scenario(self):
        t = _targets()
        self.assertEqual(t.bmr, 1849)
        self.assertEqual(t.tdee, 2866)
        self.assertEqual(t.daily_change, -1000)
        self.assertEqual(t.target_calories, 1866)

    def test_muscle_gain_capped_at_600(self):
        t = _targets(weight_kg=70, target_weight_kg=75, weeks=4, goal="muscle_gain")
        self.assertEqual(t.daily_change, 600)
        self.assertEqual(t.target_calories, round_half_up(compute_tdee(mifflin_st_jeor("male", 30, 175, 70), "moderate") + 600))

    def test_small_change_is_not_capped(self):
        # 2 kg over 20 weeks: -15400 / 140 = -110 kcal/day
        t = _targets(target_weight_kg=88, weeks=20)
        self.assertEqual(t.daily_change, -110)
        self.assertEqual(t.target_calories, t.tdee - 110)

    def test_maintain_and_endurance_hold_weight(self):
        for goal in ("maintain", "endurance"):
            t = _targets(goal=goal)
            self.assertEqual(t.daily_change, 0)
            self.assertEqual(t.target_calories, t.tdee)

    def test_zero_weeks_counts_as_one_day(self):
        t = _targets(target_weight_kg=89.95, weeks=0)
        self.assertEqual(t.daily_change, -385)

    def test_negative_weeks_counts_as_one_day(self):
        self.assertEqual(_targets(target_weight_kg=89.95, weeks=-3).daily_change, -385)

    def test_daily_change_never_exceeds_goal_cap(self):
        for goal in ("fat_loss", "muscle_gain", "maintain", "endurance"):
            cap = GOAL_DAILY_CAPS.get(goal, 0)
            for target in (50, 70, 90, 110, 130):
                for weeks in (1, 4, 12, 52):
                    t = _targets(goal=goal, target_weight_kg=target, weeks=weeks)
                    self.assertLessEqual(abs(t.daily_change), cap)

    def test_outputs_non_negative_and_deterministic(self):
        a = _targets(sex="female", age=45, height_cm=160, weight_kg=55, activity="sedentary")
        b = _targets(sex="female", age=45, height_cm=160, weight_kg=55, activity="sedentary")
        self.assertEqual(a, b)
        self.assertGreaterEqual(a.bmr, 0)
        self.assertGreaterEqual(a.tdee, 0)

    def test_overflowing_inputs_raise_invalid_profile(self):
        cases = [
            ({"weight_kg": 1e308}, "weight_kg"),
            ({"height_cm": 1e308}, "height_cm"),
            ({"weeks": 1e308}, "weeks"),
        ]
        for overrides, field in cases:
            with self.assertRaises(InvalidProfile) as ctx:
                _targets(**overrides)
            self.assertEqual(ctx.exception.field, field)

    def test_huge_target_weight_is_capped(self):
        self.assertEqual(_targets(goal="muscle_gain", target_weight_kg=1e308).daily_change, 600)
