"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags contention   # Many orders, one seat
  locust -f locustfile.py --tags autoselect   # Parallel auto selection
  locust -f locustfile.py --tags throughput   # Test cache
  locust -f locustfile.py                     # All tests

The layout (one venue, one configuration with SEAT_COUNT seats, one event on
sale) is created once in the test_start hook.
"""

import random
import string

import requests
from locust import HttpUser, task, between, tag, events

SEAT_COUNT = 50

# Shared state
EVENT_ID = None
SEAT_IDS = []
CONTENDED_SEAT_ID = None


def random_user_id():
    return "load_" + "".join(random.choices(string.ascii_lowercase, k=8))


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    """Setup: a single on-sale event whose first seat every contention user fights over."""
    global EVENT_ID, CONTENDED_SEAT_ID
    host = environment.host or "http://localhost:8000"
    api = f"{host}/api/v1"

    print("\n" + "=" * 60)
    print("SETUP: Creating load test layout...")
    print("=" * 60)

    venue = requests.post(f"{api}/venues/", json={"owner_id": "load", "name": "Load Hall", "max_people": SEAT_COUNT}).json()
    config = requests.post(
        f"{api}/venues/{venue['id']}/configurations",
        json={"name": "Rows", "max_people": SEAT_COUNT},
    ).json()

    previous = None
    for i in range(SEAT_COUNT):
        seat = requests.post(
            f"{api}/configurations/{config['id']}/seats",
            json={
                "name": f"R{i // 10}-{i % 10}",
                "seat_class": "VIP" if i < 10 else "GA",
                # Seats in the same row of ten sit next to each other
                "next_to": [previous] if previous and i % 10 else [],
            },
        ).json()
        SEAT_IDS.append(seat["id"])
        previous = seat["id"]

    requests.put(f"{api}/configurations/{config['id']}/availability", json={"available": True})
    event = requests.post(
        f"{api}/events/",
        json={"owner_id": "load", "venue_config_id": config["id"], "max_people": SEAT_COUNT, "on_sale": True},
    ).json()
    EVENT_ID = event["id"]
    CONTENDED_SEAT_ID = SEAT_IDS[0]
    print(f"\n✓ Created event {EVENT_ID} with {SEAT_COUNT} seats\n")


class SeatContentionUser(HttpUser):
    """
    TEST 1: Contention - every user → the same seat

    Run: locust -f locustfile.py --tags contention -u 100 -r 50 --run-time 30s

    After test, verify via GET /api/v1/events/{id}/seats:
      the contended seat is held or reserved by exactly one order
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.order_id = None
        if not EVENT_ID:
            return
        resp = self.client.post("/api/v1/orders/", json={"user_id": random_user_id(), "event_id": EVENT_ID})
        if resp.status_code == 201:
            self.order_id = resp.json()["id"]

    @tag("contention")
    @task
    def hold_contended_seat(self):
        """All users fight for the same seat."""
        if not self.order_id:
            return

        with self.client.post(
            f"/api/v1/orders/{self.order_id}/seats",
            json={"seat_id": CONTENDED_SEAT_ID},
            name="/api/v1/orders/{id}/seats [contended]",
            catch_response=True,
        ) as resp:
            if resp.status_code == 200:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: someone else holds it
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class AutoSelectUser(HttpUser):
    """
    TEST 2: Auto selection under load

    Run: locust -f locustfile.py --tags autoselect -u 50 -r 10 --run-time 60s

    Each user opens an order, asks for a party of 1-4, then releases it so
    inventory keeps churning.
    """
    wait_time = between(0.1, 0.5)

    @tag("autoselect")
    @task
    def select_and_release(self):
        if not EVENT_ID:
            return
        resp = self.client.post("/api/v1/orders/", json={"user_id": random_user_id(), "event_id": EVENT_ID})
        if resp.status_code != 201:
            return
        order_id = resp.json()["id"]

        with self.client.post(
            f"/api/v1/orders/{order_id}/auto-select",
            json={"num_seats": random.randint(1, 4), "seat_class_preference": ["VIP", "GA"]},
            name="/api/v1/orders/{id}/auto-select",
            catch_response=True,
        ) as resp:
            if resp.status_code in (200, 409):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")
            seat_ids = resp.json().get("seat_ids", []) if resp.status_code == 200 else []

        for seat_id in seat_ids:
            self.client.delete(
                f"/api/v1/orders/{order_id}/seats/{seat_id}",
                name="/api/v1/orders/{id}/seats/{seat_id}",
            )
        self.client.delete(f"/api/v1/orders/{order_id}", name="/api/v1/orders/{id}")


class ThroughputUser(HttpUser):
    """
    TEST 3: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_events_cached(self):
        """Hammer the cached endpoint."""
        page = random.randint(1, 5)
        self.client.get(f"/api/v1/events/?page={page}&perpage=20", name="/api/v1/events/ [cached]")

    @tag("throughput", "read")
    @task(3)
    def seat_map(self):
        """Live availability, never cached."""
        if EVENT_ID:
            self.client.get(f"/api/v1/events/{EVENT_ID}/seats?perpage=100", name="/api/v1/events/{id}/seats")

    @tag("throughput")
    @task(1)
    def health_check(self):
        """Monitor system health."""
        self.client.get("/health")
