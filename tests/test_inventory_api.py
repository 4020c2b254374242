"""API tests for brands, cars and features: ordering, joins, not-found folding and auth on writes."""

import unittest
from datetime import datetime

from sqlalchemy.exc import OperationalError

from tests.support import ApiTestCase
from volterra.models import Feature, UserRole


def _at(day: int) -> datetime:
    return datetime(2025, 3, day, 9, 30, 0)


class TestBrandListing(ApiTestCase):
    def test_sorted_by_name_with_car_counts(self) -> None:
        zeekr = self.make_brand("Zeekr")
        audi = self.make_brand("Audi")
        self.make_brand("Mazda")
        self.make_car(audi, "A4", _at(1))
        self.make_car(audi, "Q5", _at(2))
        self.make_car(zeekr, "001", _at(3))

        resp = self.client.get("/api/brands")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual([b["name"] for b in body], ["Audi", "Mazda", "Zeekr"])
        self.assertEqual([b["car_count"] for b in body], [2, 0, 1])

    def test_repeated_calls_are_byte_identical(self) -> None:
        audi = self.make_brand("Audi")
        self.make_brand("BMW")
        self.make_car(audi, "A4", _at(1))
        first = self.client.get("/api/brands").content
        second = self.client.get("/api/brands").content
        self.assertEqual(first, second)

    def test_database_fault_is_generic_500(self) -> None:
        self.break_database(OperationalError("SELECT", {}, Exception("relation brands missing")))
        resp = self.client.get("/api/brands")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"detail": "Failed to fetch brands"})
        self.assertNotIn("relation", resp.text)


class TestBrandDetail(ApiTestCase):
    def test_brand_with_cars(self) -> None:
        audi = self.make_brand("Audi")
        self.make_car(audi, "A4", _at(1))
        resp = self.client.get(f"/api/brands/{audi.id}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["name"], "Audi")
        self.assertEqual([c["name"] for c in resp.json()["cars"]], ["A4"])

    def test_unknown_numeric_id_is_404(self) -> None:
        resp = self.client.get("/api/brands/9999")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"detail": "Brand not found"})

    def test_non_numeric_ids_are_404_not_500(self) -> None:
        for raw in ("abc", "1.5", "-3", "0", "12abc", "99999999999999999999"):
            with self.subTest(raw=raw):
                resp = self.client.get(f"/api/brands/{raw}")
                self.assertEqual(resp.status_code, 404)
                self.assertEqual(resp.json(), {"detail": "Brand not found"})


class TestBrandWrites(ApiTestCase):
    def test_create_requires_session(self) -> None:
        resp = self.client.post("/api/brands", json={"name": "Audi"})
        self.assertEqual(resp.status_code, 401)

    def test_create_and_duplicate_name(self) -> None:
        headers = self.auth_headers(self.make_user(role=UserRole.USER))
        created = self.client.post("/api/brands", json={"name": " Audi "}, headers=headers)
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["name"], "Audi")
        dup = self.client.post("/api/brands", json={"name": "audi"}, headers=headers)
        self.assertEqual(dup.status_code, 409)

    def test_update_renames(self) -> None:
        headers = self.auth_headers(self.make_user())
        brand = self.make_brand("Audi")
        resp = self.client.put(f"/api/brands/{brand.id}", json={"name": "Audi AG"}, headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["name"], "Audi AG")

    def test_delete_is_admin_only(self) -> None:
        brand = self.make_brand("Audi")
        user = self.make_user(email="user@volterra.example", role=UserRole.USER)
        resp = self.client.delete(f"/api/brands/{brand.id}", headers=self.auth_headers(user))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"detail": "Insufficient permissions"})

    def test_delete_refused_while_cars_exist(self) -> None:
        admin = self.make_user()
        brand = self.make_brand("Audi")
        self.make_car(brand, "A4", _at(1))
        resp = self.client.delete(f"/api/brands/{brand.id}", headers=self.auth_headers(admin))
        self.assertEqual(resp.status_code, 400)

    def test_delete_empty_brand(self) -> None:
        admin = self.make_user(role=UserRole.SUPER_ADMIN)
        brand = self.make_brand("Audi")
        resp = self.client.delete(f"/api/brands/{brand.id}", headers=self.auth_headers(admin))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get(f"/api/brands/{brand.id}").status_code, 404)


class TestCarListing(ApiTestCase):
    def test_newest_first_with_brand_and_first_image(self) -> None:
        audi = self.make_brand("Audi")
        bmw = self.make_brand("BMW")
        self.make_car(audi, "A4", _at(1), image_urls=("https://cdn.example/a4-front.jpg",))
        self.make_car(
            bmw,
            "X5",
            _at(3),
            image_urls=("https://cdn.example/x5-front.jpg", "https://cdn.example/x5-rear.jpg"),
        )
        self.make_car(audi, "Q5", _at(2))

        resp = self.client.get("/api/cars")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual([c["name"] for c in body], ["X5", "Q5", "A4"])
        self.assertEqual(body[0]["brand"]["name"], "BMW")
        self.assertEqual(body[0]["first_image"]["url"], "https://cdn.example/x5-front.jpg")
        self.assertIsNone(body[1]["first_image"])

    def test_same_timestamp_breaks_ties_by_id(self) -> None:
        audi = self.make_brand("Audi")
        first = self.make_car(audi, "A4", _at(1))
        second = self.make_car(audi, "A6", _at(1))
        ids = [c["id"] for c in self.client.get("/api/cars").json()]
        self.assertEqual(ids, [second.id, first.id])

    def test_status_filter(self) -> None:
        audi = self.make_brand("Audi")
        self.make_car(audi, "A4", _at(1), status="USED")
        self.make_car(audi, "A6", _at(2), status="NEW")
        resp = self.client.get("/api/cars", params={"status": "USED"})
        self.assertEqual([c["name"] for c in resp.json()], ["A4"])


class TestCarWrites(ApiTestCase):
    def test_create_with_features_and_images(self) -> None:
        headers = self.auth_headers(self.make_user())
        brand = self.make_brand("Audi")
        sunroof = self.add(Feature(name="Sunroof"))
        resp = self.client.post(
            "/api/cars",
            json={
                "name": "A4",
                "model": "Avant",
                "brand_id": brand.id,
                "status": "USED",
                "image_urls": ["https://cdn.example/1.jpg", "https://cdn.example/2.jpg"],
                "feature_ids": [sunroof.id],
            },
            headers=headers,
        )
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["brand"]["name"], "Audi")
        self.assertEqual([i["url"] for i in body["images"]], ["https://cdn.example/1.jpg", "https://cdn.example/2.jpg"])
        self.assertEqual([f["name"] for f in body["features"]], ["Sunroof"])

        detail = self.client.get(f"/api/cars/{body['id']}")
        self.assertEqual(detail.json(), body)

    def test_unknown_brand_is_400(self) -> None:
        headers = self.auth_headers(self.make_user())
        resp = self.client.post("/api/cars", json={"name": "A4", "brand_id": 42}, headers=headers)
        self.assertEqual(resp.status_code, 400)

    def test_unknown_feature_is_400(self) -> None:
        headers = self.auth_headers(self.make_user())
        brand = self.make_brand("Audi")
        resp = self.client.post(
            "/api/cars",
            json={"name": "A4", "brand_id": brand.id, "feature_ids": [7]},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"detail": "Feature 7 does not exist"})

    def test_update_replaces_images(self) -> None:
        headers = self.auth_headers(self.make_user())
        brand = self.make_brand("Audi")
        car = self.make_car(brand, "A4", _at(1), image_urls=("https://cdn.example/old.jpg",))
        resp = self.client.put(
            f"/api/cars/{car.id}",
            json={"price": 39999.0, "image_urls": ["https://cdn.example/new.jpg"]},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["price"], 39999.0)
        self.assertEqual([i["url"] for i in resp.json()["images"]], ["https://cdn.example/new.jpg"])

    def test_missing_car_is_404(self) -> None:
        self.assertEqual(self.client.get("/api/cars/123").status_code, 404)
        self.assertEqual(self.client.get("/api/cars/x1").status_code, 404)


class TestFeatures(ApiTestCase):
    def test_list_sorted_with_counts_and_duplicate_guard(self) -> None:
        headers = self.auth_headers(self.make_user())
        brand = self.make_brand("Audi")
        for name in ("Sunroof", "Heated Seats"):
            self.assertEqual(
                self.client.post("/api/features", json={"name": name}, headers=headers).status_code,
                201,
            )
        heated = self.db.query(Feature).filter(Feature.name == "Heated Seats").one()
        self.client.post(
            "/api/cars",
            json={"name": "A4", "brand_id": brand.id, "feature_ids": [heated.id]},
            headers=headers,
        )

        body = self.client.get("/api/features").json()
        self.assertEqual([(f["name"], f["cars_count"]) for f in body], [("Heated Seats", 1), ("Sunroof", 0)])
        dup = self.client.post("/api/features", json={"name": "Sunroof"}, headers=headers)
        self.assertEqual(dup.status_code, 409)

    def test_duplicate_name_ignores_case(self) -> None:
        headers = self.auth_headers(self.make_user())
        self.client.post("/api/features", json={"name": "Sunroof"}, headers=headers)
        dup = self.client.post("/api/features", json={"name": "  sunroof "}, headers=headers)
        self.assertEqual(dup.status_code, 409)
        self.assertEqual(self.db.query(Feature).count(), 1)

        other = self.client.post("/api/features", json={"name": "Panoramic Roof"}, headers=headers)
        renamed = self.client.put(
            f"/api/features/{other.json()['id']}", json={"name": "SUNROOF"}, headers=headers
        )
        self.assertEqual(renamed.status_code, 409)

    def test_feature_not_found(self) -> None:
        self.assertEqual(self.client.get("/api/features/5").status_code, 404)
        self.assertEqual(self.client.get("/api/features/five").status_code, 404)


if __name__ == "__main__":
    unittest.main()
