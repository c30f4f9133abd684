"""
End-to-end tests for the HTTP API.

Run with: pytest tests/test_api.py -v
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from conftest import PASSWORD


REGISTER_BODY = {
    "firstName": "Alice",
    "lastName": "Tester",
    "age": 30,
    "email": "alice@example.com",
    "password": PASSWORD,
}


# ============================================
# Health
# ============================================

class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


# ============================================
# Registration, Login and Session
# ============================================

class TestAuthEndpoints:
    """Tests for register, login, logout and session."""

    @pytest.mark.asyncio
    async def test_register(self, client):
        response = await client.post("/api/auth/register", json=REGISTER_BODY)

        assert response.status_code == 201
        data = response.json()
        assert data["userId"]
        assert "token" not in response.cookies

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client):
        await client.post("/api/auth/register", json=REGISTER_BODY)

        response = await client.post("/api/auth/register", json=REGISTER_BODY)

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_register_missing_field(self, client):
        body = {k: v for k, v in REGISTER_BODY.items() if k != "lastName"}

        response = await client.post("/api/auth/register", json=body)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_register_weak_password(self, client):
        response = await client.post("/api/auth/register", json={**REGISTER_BODY, "password": "password"})

        assert response.status_code == 400
        assert "at least 8 characters" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_login_sets_httponly_cookie(self, client):
        await client.post("/api/auth/register", json=REGISTER_BODY)

        response = await client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": PASSWORD},
        )

        assert response.status_code == 200
        assert response.json()["userId"]
        set_cookie = response.headers["set-cookie"].lower()
        assert set_cookie.startswith("token=")
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, client):
        await client.post("/api/auth/register", json=REGISTER_BODY)

        wrong = await client.post("/api/auth/login", json={"email": "alice@example.com", "password": "Wrong123!"})
        unknown = await client.post("/api/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()

    @pytest.mark.asyncio
    async def test_lockout_after_five_failures(self, client):
        await client.post("/api/auth/register", json=REGISTER_BODY)

        for _ in range(5):
            response = await client.post(
                "/api/auth/login",
                json={"email": "alice@example.com", "password": "Wrong123!"},
            )
            assert response.status_code == 401

        response = await client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": PASSWORD},
        )

        assert response.status_code == 423
        assert int(response.headers["retry-after"]) > 0

    @pytest.mark.asyncio
    async def test_session_and_logout(self, client, signup_and_login):
        user_id = await signup_and_login()

        response = await client.get("/api/auth/session")
        assert response.status_code == 200
        assert response.json() == {
            "loggedIn": True,
            "user": {"userId": user_id, "email": "alice@example.com"},
        }

        response = await client.post("/api/auth/logout")
        assert response.status_code == 200

        response = await client.get("/api/auth/session")
        assert response.status_code == 401
        assert response.json() == {"loggedIn": False}

    @pytest.mark.asyncio
    async def test_session_with_bad_cookie(self, client):
        client.cookies.set("token", "garbage")

        response = await client.get("/api/auth/session")

        assert response.status_code == 401
        assert response.json() == {"loggedIn": False}


# ============================================
# Profile
# ============================================

class TestProfileEndpoints:
    """Tests for profile read, update, password change and delete."""

    @pytest.mark.asyncio
    async def test_profile_requires_session(self, client):
        response = await client.get("/api/auth/profile")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_get_profile_hides_secrets(self, client, signup_and_login):
        await signup_and_login()

        response = await client.get("/api/auth/profile")

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "alice@example.com"
        assert data["firstName"] == "Alice"
        assert "hashedPassword" not in data
        assert "password" not in data
        assert "resetPasswordToken" not in data

    @pytest.mark.asyncio
    async def test_update_profile(self, client, signup_and_login):
        await signup_and_login()

        response = await client.put(
            "/api/auth/profile",
            json={"firstName": "Alicia", "lastName": "Tester", "age": 31, "email": "alicia@example.com"},
        )

        assert response.status_code == 200
        assert response.json()["user"]["firstName"] == "Alicia"
        assert response.json()["user"]["email"] == "alicia@example.com"

    @pytest.mark.asyncio
    async def test_session_reports_new_email_after_update(self, client, signup_and_login):
        user_id = await signup_and_login()

        await client.put(
            "/api/auth/profile",
            json={"firstName": "Alice", "lastName": "Tester", "age": 30, "email": "alicia@example.com"},
        )
        response = await client.get("/api/auth/session")

        assert response.json()["user"] == {"userId": user_id, "email": "alicia@example.com"}

    @pytest.mark.asyncio
    async def test_update_profile_taken_email(self, client, signup_and_login):
        await signup_and_login(email="bob@example.com", first_name="Bob")
        await signup_and_login()

        response = await client.put(
            "/api/auth/profile",
            json={"firstName": "Alice", "lastName": "Tester", "age": 30, "email": "bob@example.com"},
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_change_password(self, client, signup_and_login):
        await signup_and_login()

        response = await client.post(
            "/api/auth/change-password",
            json={"currentPassword": "Wrong123!", "newPassword": "BrandNew456?"},
        )
        assert response.status_code == 401

        response = await client.post(
            "/api/auth/change-password",
            json={"currentPassword": PASSWORD, "newPassword": "BrandNew456?"},
        )
        assert response.status_code == 200

        response = await client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "BrandNew456?"},
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_delete_profile(self, client, signup_and_login):
        await signup_and_login()

        response = await client.request("DELETE", "/api/auth/profile", json={"password": "Wrong123!"})
        assert response.status_code == 401

        response = await client.request("DELETE", "/api/auth/profile", json={"password": PASSWORD})
        assert response.status_code == 200

        response = await client.get("/api/auth/profile")
        assert response.status_code == 401

        response = await client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": PASSWORD},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_session_of_deleted_account(self, client, signup_and_login):
        """A still-valid token for a deleted account gets 404 on the profile."""
        await signup_and_login()
        token = client.cookies.get("token")

        await client.request("DELETE", "/api/auth/profile", json={"password": PASSWORD})
        client.cookies.set("token", token)

        response = await client.get("/api/auth/profile")

        assert response.status_code == 404


# ============================================
# Forgot / Reset Password
# ============================================

class TestPasswordResetEndpoints:
    """Tests for the reset-link flow over HTTP."""

    @pytest.mark.asyncio
    async def test_forgot_password_does_not_reveal_accounts(self, client):
        await client.post("/api/auth/register", json=REGISTER_BODY)

        known = await client.post("/api/auth/forgot-password", json={"email": "alice@example.com"})
        unknown = await client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()

    @pytest.mark.asyncio
    async def test_reset_password_once(self, client):
        from filmunity.services.password_reset_service import PasswordResetService

        await client.post("/api/auth/register", json=REGISTER_BODY)
        token = "ab" * 32

        with patch.object(PasswordResetService, "generate_token", return_value=token):
            await client.post("/api/auth/forgot-password", json={"email": "alice@example.com"})

        response = await client.post(f"/api/auth/reset-password/{token}", json={"password": "BrandNew456?"})
        assert response.status_code == 200

        response = await client.post(f"/api/auth/reset-password/{token}", json={"password": "Another789#"})
        assert response.status_code == 400

        response = await client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "BrandNew456?"},
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_reset_with_unknown_token(self, client):
        response = await client.post(f"/api/auth/reset-password/{'0' * 64}", json={"password": "BrandNew456?"})

        assert response.status_code == 400


# ============================================
# Comments
# ============================================

class TestCommentEndpoints:
    """Tests for comment CRUD and ownership."""

    @pytest.mark.asyncio
    async def test_create_requires_session(self, client):
        response = await client.post("/api/comments", json={"moviePexelsId": "1001", "description": "Hi"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_description_limits(self, client, signup_and_login):
        await signup_and_login()

        too_long = await client.post("/api/comments", json={"moviePexelsId": "1001", "description": "x" * 101})
        blank = await client.post("/api/comments", json={"moviePexelsId": "1001", "description": "   "})
        exact = await client.post("/api/comments", json={"moviePexelsId": "1001", "description": "x" * 100})

        assert too_long.status_code == 400
        assert blank.status_code == 400
        assert exact.status_code == 201

    @pytest.mark.asyncio
    async def test_comment_lifecycle(self, client, signup_and_login):
        alice_id = await signup_and_login()
        response = await client.post(
            "/api/comments",
            json={"moviePexelsId": "1001", "description": "  Lovely colours  "},
        )
        assert response.status_code == 201
        comment = response.json()
        assert comment["description"] == "Lovely colours"
        assert comment["userId"] == alice_id

        response = await client.get("/api/comments/movie/1001")
        data = response.json()
        assert [c["id"] for c in data["userComments"]] == [comment["id"]]
        assert data["otherComments"] == []
        assert data["userComments"][0]["user"]["firstName"] == "Alice"

        await signup_and_login(email="bob@example.com", first_name="Bob")

        response = await client.get("/api/comments/movie/1001")
        assert response.json()["userComments"] == []
        assert len(response.json()["otherComments"]) == 1

        response = await client.put(f"/api/comments/{comment['id']}", json={"description": "Hijacked"})
        assert response.status_code == 403
        response = await client.delete(f"/api/comments/{comment['id']}")
        assert response.status_code == 403

        await client.post("/api/auth/login", json={"email": "alice@example.com", "password": PASSWORD})

        response = await client.patch(f"/api/comments/{comment['id']}", json={"description": "Edited"})
        assert response.status_code == 200
        assert response.json()["comment"]["description"] == "Edited"

        response = await client.delete(f"/api/comments/{comment['id']}")
        assert response.status_code == 200

        response = await client.delete(f"/api/comments/{comment['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_anonymous_listing(self, client, signup_and_login):
        await signup_and_login()
        await client.post("/api/comments", json={"moviePexelsId": "1001", "description": "Hello"})
        await client.post("/api/auth/logout")

        response = await client.get("/api/comments/movie/1001")

        assert response.status_code == 200
        assert response.json()["userComments"] == []
        assert len(response.json()["otherComments"]) == 1

    @pytest.mark.asyncio
    async def test_list_by_user(self, client, signup_and_login):
        alice_id = await signup_and_login()
        await client.post("/api/comments", json={"moviePexelsId": "1001", "description": "One"})
        await client.post("/api/comments", json={"moviePexelsId": "2002", "description": "Two"})

        response = await client.get(f"/api/comments/user/{alice_id}")

        assert response.status_code == 200
        assert len(response.json()) == 2


# ============================================
# Ratings
# ============================================

class TestRatingEndpoints:
    """Tests for rating upsert, averages and delete."""

    @pytest.mark.asyncio
    async def test_create_then_update(self, client, signup_and_login):
        await signup_and_login()

        created = await client.post("/api/ratings", json={"moviePexelsId": "1001", "value": 3})
        updated = await client.post("/api/ratings", json={"moviePexelsId": "1001", "value": 5})

        assert created.status_code == 201
        assert updated.status_code == 200
        assert updated.json()["rating"]["id"] == created.json()["rating"]["id"]
        assert updated.json()["rating"]["value"] == 5

    @pytest.mark.parametrize("value", [0, 6, True, "4", 3.5])
    @pytest.mark.asyncio
    async def test_out_of_range(self, client, signup_and_login, value):
        await signup_and_login()

        response = await client.post("/api/ratings", json={"moviePexelsId": "1001", "value": value})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_average(self, client, signup_and_login):
        for index, value in enumerate((5, 3, 4)):
            await signup_and_login(email=f"user{index}@example.com")
            await client.post("/api/ratings", json={"moviePexelsId": "1001", "value": value})

        response = await client.get("/api/ratings/movie/1001")

        assert response.status_code == 200
        data = response.json()
        assert data["averageRating"] == pytest.approx(4.0)
        assert data["totalRatings"] == 3
        assert data["userRating"] == 4

    @pytest.mark.asyncio
    async def test_unrated_video(self, client, signup_and_login):
        await signup_and_login()

        response = await client.get("/api/ratings/movie/9999")

        assert response.json() == {"averageRating": 0.0, "totalRatings": 0, "userRating": 0}

    @pytest.mark.asyncio
    async def test_delete_ownership(self, client, signup_and_login):
        await signup_and_login()
        rating = (await client.post("/api/ratings", json={"moviePexelsId": "1001", "value": 4})).json()["rating"]

        await signup_and_login(email="bob@example.com", first_name="Bob")
        response = await client.delete(f"/api/ratings/{rating['id']}")
        assert response.status_code == 403

        await client.post("/api/auth/login", json={"email": "alice@example.com", "password": PASSWORD})
        response = await client.delete(f"/api/ratings/{rating['id']}")
        assert response.status_code == 200

        response = await client.delete(f"/api/ratings/{rating['id']}")
        assert response.status_code == 404


# ============================================
# Movies
# ============================================

class TestMovieEndpoints:
    """Tests for the catalog."""

    MOVIE = {
        "title": "Ocean Waves",
        "pexelsId": "1001",
        "pexelsUser": "Jane Doe",
        "miniatureUrl": "https://images.pexels.com/videos/1001/preview.jpg",
    }

    @pytest.mark.asyncio
    async def test_catalog_requires_session(self, client):
        response = await client.get("/api/movies")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_catalog_lifecycle(self, client, signup_and_login):
        alice_id = await signup_and_login()

        response = await client.post("/api/movies", json=self.MOVIE)
        assert response.status_code == 201
        movie = response.json()
        assert movie["userId"] == alice_id
        assert movie["pexelsId"] == "1001"

        response = await client.get("/api/movies")
        assert [m["id"] for m in response.json()] == [movie["id"]]

        response = await client.get(f"/api/movies/{movie['id']}")
        assert response.status_code == 200

        await signup_and_login(email="bob@example.com", first_name="Bob")
        response = await client.delete(f"/api/movies/{movie['id']}")
        assert response.status_code == 403

        await client.post("/api/auth/login", json={"email": "alice@example.com", "password": PASSWORD})
        response = await client.delete(f"/api/movies/{movie['id']}")
        assert response.status_code == 200

        response = await client.get(f"/api/movies/{movie['id']}")
        assert response.status_code == 404


# ============================================
# Pexels Passthrough
# ============================================

class TestVideoEndpoints:
    """Tests for the video search proxy with the provider mocked out."""

    @pytest.fixture
    def pexels(self):
        """Route Pexels calls to an in-process handler and record them."""
        from main import app
        from filmunity.services.video_search_service import VideoSearchService, get_video_search_service

        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if request.url.path.endswith("/videos/404"):
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json={"videos": [{"id": 42}]})

        transport = httpx.MockTransport(handler)
        app.dependency_overrides[get_video_search_service] = lambda: VideoSearchService(transport=transport)
        return calls

    @pytest.mark.asyncio
    async def test_requires_session(self, client, pexels):
        response = await client.get("/api/pexels/popular")

        assert response.status_code == 401
        assert pexels == []

    @pytest.mark.asyncio
    async def test_popular(self, client, signup_and_login, pexels):
        await signup_and_login()

        response = await client.get("/api/pexels/popular")

        assert response.status_code == 200
        assert response.json() == {"videos": [{"id": 42}]}

    @pytest.mark.asyncio
    async def test_search_passes_query(self, client, signup_and_login, pexels):
        await signup_and_login()

        response = await client.get("/api/pexels/search", params={"query": "forest", "per_page": 20})

        assert response.status_code == 200
        assert pexels[-1].url.params["query"] == "forest"
        assert pexels[-1].url.params["per_page"] == "20"

    @pytest.mark.asyncio
    async def test_search_per_page_out_of_range(self, client, signup_and_login, pexels):
        await signup_and_login()

        response = await client.get("/api/pexels/search", params={"per_page": 100})

        assert response.status_code == 400
        assert pexels == []

    @pytest.mark.asyncio
    async def test_provider_failure(self, client, signup_and_login, pexels):
        await signup_and_login()

        response = await client.get("/api/pexels/videos/404")

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch videos"}


# ============================================
# Storage Failures
# ============================================

def failing_commit():
    """Make every session commit fail as if the database went away."""
    from sqlalchemy.ext.asyncio import AsyncSession

    return patch.object(AsyncSession, "commit", AsyncMock(side_effect=RuntimeError("storage down")))


class TestStorageFailures:
    """A failed write is a 500 with no internal details, and nothing is left half-done."""

    @pytest.mark.asyncio
    async def test_register_commit_failure(self, client):
        with failing_commit():
            response = await client.post("/api/auth/register", json=REGISTER_BODY)

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}

        response = await client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": PASSWORD},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_comment_commit_failure(self, client, signup_and_login):
        await signup_and_login()

        with failing_commit():
            response = await client.post("/api/comments", json={"moviePexelsId": "1001", "description": "Hi"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}

        response = await client.get("/api/comments/movie/1001")
        assert response.json() == {"userComments": [], "otherComments": []}

    @pytest.mark.asyncio
    async def test_no_reset_email_when_token_not_stored(self, client):
        await client.post("/api/auth/register", json=REGISTER_BODY)
        email_service = MagicMock()
        email_service.send_password_reset_link = AsyncMock(return_value=True)

        with patch("filmunity.services.password_reset_service.get_email_service", return_value=email_service):
            with failing_commit():
                response = await client.post("/api/auth/forgot-password", json={"email": "alice@example.com"})

        assert response.status_code == 500
        email_service.send_password_reset_link.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_changed_email_when_password_not_stored(self, client):
        from filmunity.services.password_reset_service import PasswordResetService

        await client.post("/api/auth/register", json=REGISTER_BODY)
        token = "cd" * 32
        with patch.object(PasswordResetService, "generate_token", return_value=token):
            await client.post("/api/auth/forgot-password", json={"email": "alice@example.com"})

        email_service = MagicMock()
        email_service.send_password_changed = AsyncMock(return_value=True)

        with patch("filmunity.api.routes.auth.get_email_service", return_value=email_service):
            with failing_commit():
                response = await client.post(f"/api/auth/reset-password/{token}", json={"password": "BrandNew456?"})

        assert response.status_code == 500
        email_service.send_password_changed.assert_not_awaited()

        # Nothing was consumed, so the same link still works
        response = await client.post(f"/api/auth/reset-password/{token}", json={"password": "BrandNew456?"})
        assert response.status_code == 200
