import unittest

from fitplanner import create_app
from fitplanner.config import PlannerConfig

REFERENCE_FORM = {
    "name": "Alex", "sex": "male", "age": "30", "height_cm": "175", "weight_kg": "90",
    "activity": "moderate", "target_weight_kg": "75", "weeks": "16", "goal": "fat_loss",
    "meals_per_day": "2", "diet_pref": "indian_veg", "restrictions": "",
}


def _app(**overrides):
    params = dict(app_name="Test Planner", allowed_embed_domain=None, allergen_policy="substring")
    params.update(overrides)
    app = create_app(PlannerConfig(**params))
    app.testing = True
    return app


class PageTests(unittest.TestCase):
    def setUp(self):
        self.client = _app().test_client()

    def test_index_ok(self):
        r = self.client.get("/")
        self.assertEqual(r.status_code, 200)
        self.assertIn(b"Test Planner", r.data)
        # default profile: light activity, 16 weeks fat loss
        self.assertIn(b"1542 kcal", r.data)
        self.assertNotIn("Content-Security-Policy", r.headers)

    def test_plan_post(self):
        r = self.client.post("/plan", data=REFERENCE_FORM)
        self.assertEqual(r.status_code, 200)
        self.assertIn(b"1866 kcal", r.data)
        self.assertIn(b"Rajma Chawal", r.data)
        self.assertIn(b"Metabolic Circuit", r.data)

    def test_plan_get_redirects(self):
        r = self.client.get("/plan")
        self.assertEqual(r.status_code, 302)

    def test_invalid_profile_is_400(self):
        r = self.client.post("/plan", data=dict(REFERENCE_FORM, meals_per_day="9"))
        self.assertEqual(r.status_code, 400)
        self.assertIn(b"meals_per_day", r.data)

    def test_blank_weight_is_400(self):
        r = self.client.post("/plan", data=dict(REFERENCE_FORM, weight_kg="", target_weight_kg="60"))
        self.assertEqual(r.status_code, 400)
        self.assertIn(b"weight_kg: is required", r.data)
        self.assertNotIn(b"kcal</div>", r.data)

    def test_huge_weight_renders_error(self):
        r = self.client.post("/plan", data=dict(REFERENCE_FORM, weight_kg="1e308"))
        self.assertEqual(r.status_code, 400)
        self.assertIn(b"weight_kg", r.data)

    def test_insufficient_catalog_is_422_with_metrics(self):
        r = self.client.post("/plan", data=dict(REFERENCE_FORM, diet_pref="vegan", meals_per_day="5",
                                                restrictions="gluten, soy"))
        self.assertEqual(r.status_code, 422)
        self.assertIn(b"1866 kcal", r.data)

    def test_pdf(self):
        r = self.client.post("/pdf", data=REFERENCE_FORM)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.mimetype, "application/pdf")
        self.assertTrue(r.data.startswith(b"%PDF"))

    def test_pdf_invalid_profile(self):
        r = self.client.post("/pdf", data=dict(REFERENCE_FORM, age="-4"))
        self.assertEqual(r.status_code, 400)


class ApiTests(unittest.TestCase):
    def setUp(self):
        self.client = _app().test_client()

    def test_plan_json(self):
        r = self.client.post("/api/plan", json=REFERENCE_FORM)
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertEqual(data["metrics"]["target_calories"], 1866)
        self.assertEqual(data["metrics"]["daily_change"], -1000)
        self.assertEqual([m["id"] for m in data["meal_plan"]["meals"]], ["iv3", "iv1"])
        self.assertEqual(data["workouts"]["level"], "intermediate")

    def test_invalid_field_reported(self):
        r = self.client.post("/api/plan", json=dict(REFERENCE_FORM, activity="athlete"))
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.get_json()["field"], "activity")

    def test_missing_field_is_400(self):
        r = self.client.post("/api/plan", json={"weeks": 4})
        self.assertEqual(r.status_code, 400)
        self.assertIn("is required", r.get_json()["error"])

        data = {k: v for k, v in REFERENCE_FORM.items() if k != "weight_kg"}
        r = self.client.post("/api/plan", json=data)
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.get_json()["field"], "weight_kg")

    def test_empty_body_is_400(self):
        r = self.client.post("/api/plan", json={})
        self.assertEqual(r.status_code, 400)

    def test_huge_weight_is_400(self):
        r = self.client.post("/api/plan", json=dict(REFERENCE_FORM, weight_kg="1e308"))
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.get_json()["field"], "weight_kg")

    def test_body_must_be_object(self):
        r = self.client.post("/api/plan", json=[1, 2])
        self.assertEqual(r.status_code, 400)

    def test_insufficient_catalog(self):
        r = self.client.post("/api/plan", json=dict(REFERENCE_FORM, diet_pref="vegan", meals_per_day=5,
                                                    restrictions="gluten, soy"))
        self.assertEqual(r.status_code, 422)
        self.assertIn("error", r.get_json())


class EmbedTests(unittest.TestCase):
    def test_csp_header_when_configured(self):
        client = _app(allowed_embed_domain="https://example.com").test_client()
        r = client.get("/")
        self.assertEqual(r.headers["Content-Security-Policy"], "frame-ancestors https://example.com 'self'")
