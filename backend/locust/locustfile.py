"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test double booking
  locust -f locustfile.py --tags throughput   # Test cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests

Every simulated user needs an invitation code, so each one first signs in as
the seeded administrator (ADMIN_EMAIL / ADMIN_PASSWORD) to issue one.
"""

import os
import random
import string
from datetime import datetime, timezone, timedelta

from locust import HttpUser, task, between, tag

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "change-me-admin")
PASSWORD = "loadtest123"
PROPERTY_IDS = [1, 2]


def random_username():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


def day(offset):
    """Midnight UTC `offset` days from now, as the API serializes dates."""
    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return (today + timedelta(days=offset)).isoformat().replace("+00:00", "Z")


def booking_body(property_id, start, nights, people=2):
    return {
        "propertyId": property_id,
        "startDate": day(start),
        "endDate": day(start + nights),
        "expectedPeople": people,
    }


class InvitedUser(HttpUser):
    """Base user: registers through an admin-issued invitation code and logs in."""

    abstract = True

    def on_start(self):
        self.logged_in = False

        resp = self.client.post("/api/User/login", json={
            "username": ADMIN_EMAIL,
            "password": ADMIN_PASSWORD,
        }, name="/api/User/login [admin]")
        if resp.status_code != 200:
            return

        resp = self.client.post("/api/User/invitation-codes")
        self.client.post("/api/User/logout")
        if resp.status_code != 201:
            return

        username = random_username()
        self.client.post("/api/User/register", json={
            "username": username,
            "email": f"{username}@load.test",
            "password": PASSWORD,
            "firstName": "Load",
            "lastName": username,
            "invitationCode": resp.json()["code"],
        })

        # The session cookie is kept by the client for the following requests
        resp = self.client.post("/api/User/login", json={
            "username": username,
            "password": PASSWORD,
        })
        self.logged_in = resp.status_code == 200


class ConcurrencyUser(InvitedUser):
    """
    TEST 1: Concurrency - many users fight over the same few weeks

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify no two stays on a property overlap:
      SELECT a.id, b.id FROM bookings a JOIN bookings b
        ON a.property_id = b.property_id AND a.id < b.id
       AND a.start_date < b.end_date AND a.end_date > b.start_date;
    Should return no rows.
    """
    wait_time = between(0, 0.1)

    @tag("concurrency")
    @task
    def book_contested_dates(self):
        if not self.logged_in:
            return

        body = booking_body(random.choice(PROPERTY_IDS), random.randint(30, 44), random.randint(1, 4))
        with self.client.post("/api/Bookings", json=body, catch_response=True) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: dates already taken
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false on the API, run again

    Compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_bookings_cached(self):
        self.client.get("/api/Bookings", name="/api/Bookings [cached]")

    @tag("throughput", "read")
    @task(5)
    def list_property_bookings(self):
        property_id = random.choice(PROPERTY_IDS)
        self.client.get(f"/api/Bookings/property/{property_id}", name="/api/Bookings/property/{id}")

    @tag("throughput", "read")
    @task(3)
    def list_future_bookings(self):
        self.client.get("/api/Bookings/future")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(InvitedUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def expect(self, resp, *codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_property(self):
        with self.client.post("/api/Bookings", json=booking_body(999999, 60, 2),
                              catch_response=True) as resp:
            self.expect(resp, 401, 404)

    @tag("edge")
    @task
    def end_before_start(self):
        body = booking_body(1, 60, 2)
        body["startDate"], body["endDate"] = body["endDate"], body["startDate"]
        with self.client.post("/api/Bookings", json=body, catch_response=True) as resp:
            self.expect(resp, 400, 401)

    @tag("edge")
    @task
    def start_in_past(self):
        with self.client.post("/api/Bookings", json=booking_body(1, -3, 5),
                              catch_response=True) as resp:
            self.expect(resp, 400, 401)

    @tag("edge")
    @task
    def too_many_people(self):
        with self.client.post("/api/Bookings", json=booking_body(1, 60, 2, people=21),
                              catch_response=True) as resp:
            self.expect(resp, 400, 401)

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/Bookings", data="not json at all",
                              catch_response=True) as resp:
            self.expect(resp, 400, 401, 422)

    @tag("edge")
    @task
    def bogus_invitation_code(self):
        username = random_username()
        with self.client.post("/api/User/register", json={
            "username": username,
            "email": f"{username}@load.test",
            "password": PASSWORD,
            "invitationCode": "NOPE0000",
        }, catch_response=True) as resp:
            self.expect(resp, 400)


class RealisticUser(InvitedUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing the calendar
      - Some bookings and cancellations
      - The occasional post
    """
    wait_time = between(1, 3)

    def on_start(self):
        super().on_start()
        self.booking_ids = []

    @task(50)
    def browse_calendar(self):
        self.client.get(f"/api/Bookings/future/property/{random.choice(PROPERTY_IDS)}",
                        name="/api/Bookings/future/property/{id}")

    @task(10)
    def browse_directory(self):
        if self.logged_in:
            self.client.get("/api/User/all")

    @task(10)
    def book_stay(self):
        if not self.logged_in:
            return
        body = booking_body(random.choice(PROPERTY_IDS), random.randint(1, 180),
                            random.randint(1, 7), people=random.randint(1, 8))
        with self.client.post("/api/Bookings", json=body, catch_response=True) as resp:
            if resp.status_code == 201:
                self.booking_ids.append(resp.json()["id"])
                resp.success()
            elif resp.status_code == 409:
                resp.success()

    @task(3)
    def cancel_stay(self):
        if self.booking_ids:
            booking_id = self.booking_ids.pop()
            self.client.delete(f"/api/Bookings/{booking_id}", name="/api/Bookings/{id}")

    @task(2)
    def write_post(self):
        if self.logged_in:
            self.client.post("/api/Posts", json={
                "title": f"Note {random.randint(1, 10000)}",
                "content": "Remember to turn off the water heater.",
            })
