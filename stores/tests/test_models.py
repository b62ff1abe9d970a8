from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from model_bakery import baker

from reviews.models import Review
from stores.models import Store
from stores.tests.factories import make_store, make_user


class StoreValidationTests(TestCase):
    def setUp(self):
        self.user = make_user()

    def test_blank_name_message(self):
        store = Store(author=self.user, name="   ")
        store.location = {"coordinates": [1, 2], "address": "1 Main St"}
        with self.assertRaises(ValidationError) as ctx:
            store.full_clean(exclude=["slug"])
        self.assertEqual(ctx.exception.message_dict["name"], ["Please enter a store name!"])

    def test_missing_location_messages(self):
        store = Store(author=self.user, name="Pizza")
        store.location = {}
        with self.assertRaises(ValidationError) as ctx:
            store.full_clean(exclude=["slug"])
        errors = ctx.exception.message_dict
        self.assertEqual(errors["longitude"], ["You must supply coordinates!"])
        self.assertEqual(errors["latitude"], ["You must supply coordinates!"])
        self.assertEqual(errors["address"], ["You must supply an address!"])

    def test_text_fields_are_trimmed(self):
        store = Store(author=self.user, name="  Pizza  ", description=" hot ")
        store.location = {"coordinates": [1, 2], "address": " 1 Main St "}
        store.full_clean(exclude=["slug"])
        self.assertEqual((store.name, store.description, store.address), ("Pizza", "hot", "1 Main St"))


class StoreLocationTests(TestCase):
    def test_location_round_trip(self):
        store = make_store(location={"type": "Point", "coordinates": [-79.3832, 43.6532], "address": "Toronto"})
        store.refresh_from_db()
        self.assertEqual(store.longitude, Decimal("-79.383200"))
        self.assertEqual(store.location, {
            "type": "Point",
            "coordinates": [-79.3832, 43.6532],
            "address": "Toronto",
        })

    def test_coordinates_rounded_to_column_precision(self):
        store = Store()
        store.location = {"coordinates": [1.123456789, 2.0000004], "address": "x"}
        self.assertEqual(store.longitude, Decimal("1.123457"))
        self.assertEqual(store.latitude, Decimal("2.000000"))


class StoreTagTests(TestCase):
    def test_tags_keep_order_and_duplicates(self):
        store = make_store(tags=["Wifi", "Open Late", "Wifi"])
        store = Store.objects.with_tags().get(pk=store.pk)
        self.assertEqual(store.tags, ["Wifi", "Open Late", "Wifi"])

    def test_set_tags_replaces(self):
        store = make_store(tags=["Wifi"])
        store.set_tags(["Family Friendly"])
        self.assertEqual(store.tags, ["Family Friendly"])

    def test_unsaved_store_has_no_tags(self):
        self.assertEqual(Store().tags, [])

    def test_tags_list_counts_every_occurrence(self):
        user = make_user()
        make_store(author=user, name="One", tags=["a", "b"])
        make_store(author=user, name="Two", tags=["a", "a"])
        self.assertEqual(Store.objects.get_tags_list(), [
            {"tag": "a", "count": 3},
            {"tag": "b", "count": 1},
        ])

    def test_tags_list_ties_sorted_by_label(self):
        make_store(tags=["zeta", "alpha"])
        self.assertEqual(
            [entry["tag"] for entry in Store.objects.get_tags_list()],
            ["alpha", "zeta"],
        )

    def test_tags_list_empty(self):
        self.assertEqual(Store.objects.get_tags_list(), [])


class TopStoresTests(TestCase):
    def setUp(self):
        self.user = make_user()

    def review(self, store, *ratings):
        for rating in ratings:
            baker.make(Review, store=store, author=self.user, text="ok", rating=rating)

    def test_excludes_stores_with_fewer_than_two_reviews(self):
        lonely = make_store(author=self.user, name="Lonely")
        self.review(lonely, 5)
        make_store(author=self.user, name="Empty")
        self.assertEqual(list(Store.objects.get_top_stores()), [])

    def test_ranked_by_average_rating(self):
        good = make_store(author=self.user, name="Good")
        great = make_store(author=self.user, name="Great")
        self.review(good, 3, 4)
        self.review(great, 5, 4, 5)

        top = list(Store.objects.get_top_stores())
        self.assertEqual([store.name for store in top], ["Great", "Good"])
        self.assertEqual(top[0].review_count, 3)
        self.assertAlmostEqual(top[0].average_rating, 14 / 3)
        self.assertAlmostEqual(top[1].average_rating, 3.5)

    def test_limited(self):
        for index in range(4):
            store = make_store(author=self.user, name=f"Store {index}")
            self.review(store, 4, 4)
        self.assertEqual(len(Store.objects.get_top_stores(limit=3)), 3)


class StoreReviewJoinTests(TestCase):
    def test_with_reviews_prefetches_newest_first(self):
        user = make_user()
        store = make_store(author=user)
        older = baker.make(Review, store=store, author=user, text="first", rating=3)
        newer = baker.make(Review, store=store, author=user, text="second", rating=4)

        store = Store.objects.with_reviews().get(pk=store.pk)
        with self.assertNumQueries(0):
            reviews = list(store.reviews.all())
        self.assertEqual(reviews, [newer, older])

    def test_reviews_follow_store_deletion(self):
        user = make_user()
        store = make_store(author=user)
        baker.make(Review, store=store, author=user, text="gone", rating=2)
        store.delete()
        self.assertFalse(Review.objects.exists())
