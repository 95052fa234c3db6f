import mongomock

from tasktrack.app import create_app
from tasktrack.utils.rate_limit import RateLimiter

from .helpers import login, register


class ManualClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_limiter_blocks_after_limit_and_reports_retry_after():
    clock = ManualClock()
    limiter = RateLimiter(window=60, clock=clock)

    results = [limiter.hit("login:1.2.3.4", 3) for _ in range(3)]
    assert [r.remaining for r in results] == [2, 1, 0]
    assert all(r.allowed for r in results)

    clock.now += 20
    blocked = limiter.hit("login:1.2.3.4", 3)
    assert not blocked.allowed
    assert blocked.retry_after == 40


def test_limiter_window_slides():
    clock = ManualClock()
    limiter = RateLimiter(window=60, clock=clock)

    limiter.hit("k", 2)
    clock.now += 30
    limiter.hit("k", 2)
    assert not limiter.hit("k", 2).allowed

    clock.now += 31  # first hit has left the window
    assert limiter.hit("k", 2).allowed
    assert not limiter.hit("k", 2).allowed


def test_limiter_forgets_keys_once_their_window_has_passed():
    clock = ManualClock()
    limiter = RateLimiter(window=60, clock=clock)

    for n in range(1000):
        limiter.hit(f"login:10.0.{n // 250}.{n % 250}", 5)
    assert len(limiter) == 1000

    clock.now += 3600
    limiter.hit("login:192.168.1.1", 5)

    assert len(limiter) == 1


def test_limiter_sweep_keeps_keys_still_inside_the_window():
    clock = ManualClock()
    limiter = RateLimiter(window=60, clock=clock)

    limiter.hit("old", 5)
    clock.now += 45
    limiter.hit("recent", 5)
    clock.now += 30  # "old" is past the window, "recent" is not
    limiter.hit("new", 5)

    assert len(limiter) == 2
    assert limiter.hit("recent", 2).remaining == 0


def test_limiter_keys_are_independent():
    limiter = RateLimiter(clock=ManualClock())

    assert limiter.hit("a", 1).allowed
    assert not limiter.hit("a", 1).allowed
    assert limiter.hit("b", 1).allowed

    limiter.reset("a")
    assert limiter.hit("a", 1).allowed


def test_sixth_login_in_a_minute_is_throttled(client):
    register(client)

    for _ in range(5):
        assert login(client, password="wrong-password").status_code == 422

    resp = login(client)
    assert resp.status_code == 429
    assert resp.get_json() == {"message": "Too Many Attempts."}
    assert resp.headers["X-RateLimit-Limit"] == "5"
    assert int(resp.headers["Retry-After"]) >= 1

    # other clients are unaffected
    assert login(client, remote_addr="10.9.9.9").status_code == 200


def test_fourth_registration_from_one_ip_is_throttled(client):
    for n in range(3):
        assert register(client, email=f"user{n}@example.com").status_code == 201

    resp = register(client, email="user3@example.com")
    assert resp.status_code == 429
    assert resp.headers["X-RateLimit-Limit"] == "3"
    assert "Retry-After" in resp.headers


def test_api_limit_is_per_user(make_user, app, client):
    app.config["RATELIMIT_API"] = 2
    _, alice = make_user(email="alice@example.com")
    _, bob = make_user(email="bob@example.com")

    assert client.get("/api/tasks", headers=alice).status_code == 200
    assert client.get("/api/tasks", headers=alice).status_code == 200
    assert client.get("/api/tasks", headers=alice).status_code == 429
    assert client.get("/api/tasks", headers=bob).status_code == 200


def test_rate_limiting_can_be_disabled():
    app = create_app(
        "tasktrack.config.TestingConfig",
        mongo_client=mongomock.MongoClient(),
        RATELIMIT_ENABLED=False,
    )
    client = app.test_client()

    for n in range(5):
        assert register(client, email=f"user{n}@example.com").status_code == 201


def test_login_limit_uses_forwarded_client_behind_proxy():
    app = create_app(
        "tasktrack.config.TestingConfig",
        mongo_client=mongomock.MongoClient(),
        PROXY_FIX_X_FOR=1,
    )
    client = app.test_client()

    def attempt(forwarded_for):
        return client.post(
            "/api/login",
            json={"email": "jane@example.com", "password": "pw123456"},
            headers={"X-Forwarded-For": forwarded_for},
            environ_base={"REMOTE_ADDR": "10.0.0.1"},
        )

    # every request arrives from the proxy's address, but clients differ
    for n in range(6):
        assert attempt(f"203.0.113.{n}").status_code == 422

    for _ in range(4):
        attempt("198.51.100.7")
    assert attempt("198.51.100.7").status_code == 422
    assert attempt("198.51.100.7").status_code == 429


def test_proxy_headers_ignored_by_default(client):
    for n in range(5):
        client.post("/api/login", json={"email": "a@b.co", "password": "x"},
                    headers={"X-Forwarded-For": f"203.0.113.{n}"})

    resp = client.post("/api/login", json={"email": "a@b.co", "password": "x"},
                       headers={"X-Forwarded-For": "203.0.113.99"})
    assert resp.status_code == 429
