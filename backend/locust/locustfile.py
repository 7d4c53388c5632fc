"""
Locust load test suite.

Run scenarios:
  locust -f locustfile.py --tags race      # Many users, few seats
  locust -f locustfile.py --tags catalog   # Cached movie listings
  locust -f locustfile.py --tags edge      # Bad input
  locust -f locustfile.py                  # All tests
"""

import random
import string
from locust import HttpUser, task, between, tag

# Shared state
MOVIE_IDS = []
RACE_MOVIE_ID = random.randint(100000, 999999)
RACE_SEATS = [f"{row}{n}" for row in "AB" for n in range(1, 6)]


def random_email():
    return f"load_{random.randint(10000, 99999)}_{random.randint(0, 999)}@test.com"


def random_username():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


def login_headers(user: HttpUser) -> dict:
    email = random_email()
    user.client.post("/api/v1/auth/register", json={
        "email": email,
        "username": random_username(),
        "password": "loadtest123",
    })
    resp = user.client.post("/api/v1/auth/login", json={
        "email": email,
        "password": "loadtest123",
    })
    if resp.status_code == 200:
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}
    return {}


class SeatRaceUser(HttpUser):
    """
    Every user fights for the same ten seats of one movie.

    Run: locust -f locustfile.py --tags race -u 100 -r 50 --run-time 30s

    Afterwards, verify:
      SELECT movie_id, seat_label, COUNT(*) FROM bookings
      GROUP BY 1, 2 HAVING COUNT(*) > 1;
    must return no rows.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = login_headers(self)

    @tag("race")
    @task
    def book_contested_seat(self):
        if not self.headers:
            return

        with self.client.post(
            "/api/v1/bookings",
            json={"movieId": RACE_MOVIE_ID, "seatLabel": random.choice(RACE_SEATS)},
            headers=self.headers,
            name="/api/v1/bookings [race]",
            catch_response=True,
        ) as resp:
            if resp.status_code in (200, 409):
                resp.success()  # 409: someone else got there first
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class CatalogUser(HttpUser):
    """
    Catalog browsing against the Redis cache.

    Run with and without Redis and compare latency percentiles:
      locust -f locustfile.py --tags catalog -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("catalog", "read")
    @task(10)
    def list_movies(self):
        resp = self.client.get("/api/v1/movies", name="/api/v1/movies [cached]")
        if resp.status_code == 200:
            for movie in resp.json().get("movies", []):
                if movie["id"] not in MOVIE_IDS:
                    MOVIE_IDS.append(movie["id"])

    @tag("catalog", "read")
    @task(3)
    def list_seats(self):
        if MOVIE_IDS:
            movie_id = random.choice(MOVIE_IDS)
            self.client.get(f"/api/v1/movies/{movie_id}/seats", name="/api/v1/movies/{id}/seats")

    @tag("catalog")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    Bad input must produce 4xx, never 500.

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = login_headers(self)

    def _expect(self, payload, expected, headers=None, **kwargs):
        with self.client.post(
            "/api/v1/bookings",
            json=payload,
            headers=self.headers if headers is None else headers,
            catch_response=True,
            **kwargs,
        ) as resp:
            if resp.status_code in expected:
                resp.success()
            else:
                resp.failure(f"Expected {expected}, got {resp.status_code}")

    @tag("edge")
    @task
    def non_numeric_movie(self):
        self._expect({"movieId": "abc", "seatLabel": "A1"}, (400,), name="edge: movieId")

    @tag("edge")
    @task
    def negative_movie(self):
        self._expect({"movieId": -5, "seatLabel": "A1"}, (400,), name="edge: negative")

    @tag("edge")
    @task
    def missing_seat(self):
        self._expect({"movieId": 1}, (400,), name="edge: seatLabel")

    @tag("edge")
    @task
    def missing_auth(self):
        self._expect({"movieId": 1, "seatLabel": "A1"}, (401,), headers={}, name="edge: auth")
