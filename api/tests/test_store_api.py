from django.test import TestCase
from model_bakery import baker
from rest_framework.test import APIClient

from reviews.models import Review
from stores.models import Store
from stores.tests.factories import make_store, make_user

STORE_PAYLOAD = {
    "name": "Pizza Palace",
    "description": "Wood fired",
    "tags": ["Wifi", "Open Late"],
    "location": {"type": "Point", "coordinates": [-79.38, 43.65], "address": "1 Main St"},
}


class StoreReadAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user(username="apiuser")

    def test_search(self):
        make_store(author=self.user, name="Pizza Place")
        make_store(author=self.user, name="Best Pizza")
        make_store(author=self.user, name="Sushi")
        resp = self.client.get("/api/v1/search", {"q": "piz"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [
            {"name": "Pizza Place", "slug": "pizza-place"},
            {"name": "Best Pizza", "slug": "best-pizza"},
        ])

    def test_search_without_query(self):
        make_store(author=self.user)
        resp = self.client.get("/api/v1/search")
        self.assertEqual(resp.json(), [])

    def test_list_is_paginated_without_reviews(self):
        store = make_store(author=self.user, tags=["Wifi"])
        baker.make(Review, store=store, author=self.user, text="ok", rating=4)
        resp = self.client.get("/api/v1/stores")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual((data["page"], data["total_pages"], data["count"]), (1, 1, 1))
        result = data["results"][0]
        self.assertEqual(result["tags"], ["Wifi"])
        self.assertEqual(result["author"], self.user.pk)
        self.assertEqual(result["location"]["type"], "Point")
        self.assertEqual(result["reviews"], [])

    def test_list_rejects_out_of_range_page_size(self):
        make_store(author=self.user)
        for per_page in (0, -1, 1000000):
            resp = self.client.get("/api/v1/stores", {"per_page": per_page})
            self.assertEqual(resp.status_code, 422, per_page)

    def test_list_page_size(self):
        for index in range(3):
            make_store(author=self.user, name=f"Store {index}")
        data = self.client.get("/api/v1/stores", {"per_page": 2}).json()
        self.assertEqual((len(data["results"]), data["total_pages"]), (2, 2))

    def test_list_can_join_reviews(self):
        store = make_store(author=self.user)
        baker.make(Review, store=store, author=self.user, text="ok", rating=4)
        resp = self.client.get("/api/v1/stores", {"include_reviews": "true"})
        self.assertEqual(len(resp.json()["results"][0]["reviews"]), 1)

    def test_detail_includes_reviews(self):
        store = make_store(author=self.user, name="Pizza Palace")
        baker.make(Review, store=store, author=self.user, text="Great crust", rating=5)
        resp = self.client.get("/api/v1/store/pizza-palace")
        self.assertEqual(resp.status_code, 200)
        review = resp.json()["reviews"][0]
        self.assertEqual((review["author"], review["text"], review["rating"]), ("apiuser", "Great crust", 5))

    def test_detail_not_found(self):
        resp = self.client.get("/api/v1/store/missing")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["code"], "not_found")

    def test_tags(self):
        make_store(author=self.user, name="One", tags=["a", "b"])
        make_store(author=self.user, name="Two", tags=["a", "a"])
        resp = self.client.get("/api/v1/tags")
        self.assertEqual(resp.json(), [{"tag": "a", "count": 3}, {"tag": "b", "count": 1}])

    def test_top(self):
        ranked = make_store(author=self.user, name="Ranked")
        lonely = make_store(author=self.user, name="Lonely")
        baker.make(Review, store=ranked, author=self.user, text="a", rating=4)
        baker.make(Review, store=ranked, author=self.user, text="b", rating=5)
        baker.make(Review, store=lonely, author=self.user, text="c", rating=5)
        resp = self.client.get("/api/v1/stores/top")
        data = resp.json()
        self.assertEqual([store["name"] for store in data], ["Ranked"])
        self.assertEqual(data[0]["review_count"], 2)
        self.assertAlmostEqual(data[0]["average_rating"], 4.5)

    def test_top_tags_loaded_with_the_ranking(self):
        for index in range(3):
            store = make_store(author=self.user, name=f"Store {index}", tags=["Wifi"])
            baker.make(Review, store=store, author=self.user, text="a", rating=4, _quantity=2)
        # Ranking query plus one tag prefetch, whatever the number of stores
        with self.assertNumQueries(2):
            resp = self.client.get("/api/v1/stores/top")
        self.assertEqual([store["tags"] for store in resp.json()], [["Wifi"]] * 3)


class StoreWriteAPITests(TestCase):
    def setUp(self):
        self.password = "strong-pass"
        self.user = make_user(username="apiuser", password=self.password)
        self.client = APIClient()

    def authenticate(self, user=None):
        user = user or self.user
        resp = self.client.post(
            "/api/v1/token/",
            {"username": user.username, "password": self.password},
            format="json",
        )
        self.assertEqual(resp.status_code, 200)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access']}")

    def test_create_requires_auth(self):
        resp = self.client.post("/api/v1/stores", STORE_PAYLOAD, format="json")
        self.assertEqual(resp.status_code, 401)
        self.assertFalse(Store.objects.exists())

    def test_create(self):
        self.authenticate()
        resp = self.client.post(
            "/api/v1/stores",
            {**STORE_PAYLOAD, "location": {**STORE_PAYLOAD["location"], "type": "Polygon"}},
            format="json",
        )
        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertEqual(data["slug"], "pizza-palace")
        self.assertEqual(data["tags"], ["Wifi", "Open Late"])
        self.assertEqual(data["location"]["type"], "Point")
        self.assertEqual(Store.objects.get().author, self.user)

    def test_create_validation_error(self):
        self.authenticate()
        resp = self.client.post(
            "/api/v1/stores",
            {**STORE_PAYLOAD, "name": "   "},
            format="json",
        )
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["detail"]["name"], ["Please enter a store name!"])

    def test_update_owned_store(self):
        store = make_store(author=self.user, name="Pizza Palace", tags=["Wifi"])
        self.authenticate()
        resp = self.client.put(f"/api/v1/stores/{store.pk}", {"name": "Burger Barn"}, format="json")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["slug"], "burger-barn")
        self.assertEqual(data["tags"], ["Wifi"])

    def test_update_other_users_store_forbidden(self):
        store = make_store(author=make_user(), name="Not Yours")
        self.authenticate()
        resp = self.client.put(f"/api/v1/stores/{store.pk}", {"name": "Mine"}, format="json")
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["detail"], "You must own a store in order to edit it!")
        store.refresh_from_db()
        self.assertEqual(store.name, "Not Yours")

    def test_detail_and_update_routes_do_not_shadow_each_other(self):
        store = make_store(author=self.user, name="Pizza Palace")
        self.authenticate()
        self.assertEqual(self.client.get("/api/v1/store/pizza-palace").status_code, 200)
        resp = self.client.put(f"/api/v1/stores/{store.pk}", {"description": "Calzones"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["description"], "Calzones")

    def test_update_missing_store(self):
        self.authenticate()
        resp = self.client.put("/api/v1/stores/999999", {"name": "Ghost"}, format="json")
        self.assertEqual(resp.status_code, 404)


class HealthEndpointsTests(TestCase):
    def test_live_endpoint(self):
        resp = APIClient().get("/api/live")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})

    def test_ready_endpoint(self):
        resp = APIClient().get("/api/ready")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["status"], "pass")
        self.assertIn("db", data["checks"])
