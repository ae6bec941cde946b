"""
Test Suite for the Book Review API

HTTP-level tests using FastAPI's `TestClient` and pytest. Every test gets a
fresh application with freshly seeded stores (see conftest.py).

Dependencies:
    - FastAPI TestClient for API testing
    - Pytest for fixtures and monkeypatching
"""
from datetime import timedelta
from fastapi.testclient import TestClient
import pytest

import config
from app import security
from conftest import login, register

###############################################################################
#                        Public Catalog Tests                                 #
###############################################################################

def test_list_all_books(client):
    response = client.get("/")
    assert response.status_code == 200

    body = response.json()
    assert body["success"] is True
    assert body["count"] == 10
    assert body["data"]["1"]["title"] == "Things Fall Apart"
    assert body["data"]["4"]["year"] == -2100
    assert "search_term" not in body

def test_get_book_by_isbn(client):
    response = client.get("/isbn/1")
    assert response.status_code == 200

    body = response.json()
    assert body["isbn"] == "1"
    assert body["data"]["title"] == "Things Fall Apart"
    assert body["data"]["author"] == "Chinua Achebe"
    assert body["data"]["genre"] == ["Fiction", "Historical"]
    assert body["data"]["reviews"] == {}

def test_get_unknown_isbn(client):
    response = client.get("/isbn/999")
    assert response.status_code == 404

    body = response.json()
    assert body["success"] is False
    assert body["error"] == "BOOK_NOT_FOUND"
    assert body["requested_isbn"] == "999"

def test_blank_isbn_is_rejected(client):
    response = client.get("/isbn/%20")
    assert response.status_code == 400
    assert response.json()["error"] == "MISSING_ISBN"

def test_isbn_is_looked_up_as_given(client):
    assert client.get("/isbn/%201").status_code == 404
    assert client.get("/review/1%20").status_code == 404

def test_search_by_author_is_case_insensitive(client):
    response = client.get("/author/achebe")
    assert response.status_code == 200

    body = response.json()
    assert list(body["data"]) == ["1"]
    assert body["data"]["1"]["title"] == "Things Fall Apart"
    assert body["search_term"] == "achebe"

def test_search_by_author_partial_match(client):
    response = client.get("/author/unknown")
    assert response.status_code == 200
    assert set(response.json()["data"]) == {"4", "5", "6", "7"}

def test_search_by_author_without_matches(client):
    response = client.get("/author/tolkien")
    assert response.status_code == 404

    body = response.json()
    assert body["error"] == "NO_BOOKS_FOUND"
    assert body["search_term"] == "tolkien"

def test_search_by_title(client):
    response = client.get("/title/THE")
    assert response.status_code == 200
    assert set(response.json()["data"]) == {"3", "4", "5", "10"}

def test_search_by_title_without_matches(client):
    response = client.get("/title/dune")
    assert response.status_code == 404
    assert response.json()["error"] == "NO_BOOKS_FOUND"

def test_blank_search_terms_are_rejected(client):
    assert client.get("/author/%20%20").json()["error"] == "MISSING_AUTHOR"
    assert client.get("/title/%20").status_code == 400

def test_reviews_of_unreviewed_book(client):
    response = client.get("/review/1")
    assert response.status_code == 200

    body = response.json()
    assert body["data"] == {}
    assert body["count"] == 0
    assert body["has_reviews"] is False
    assert body["message"] == "No reviews found for this book"

def test_reviews_of_unknown_book(client):
    response = client.get("/review/999")
    assert response.status_code == 404
    assert response.json()["error"] == "BOOK_NOT_FOUND"

###############################################################################
#                        Registration & Login Tests                           #
###############################################################################

def test_register(client):
    response = register(client)
    assert response.status_code == 201

    body = response.json()
    assert body["success"] is True
    assert body["data"]["username"] == "alice"
    assert body["data"]["registered_at"]
    assert "password" not in body["data"]

def test_register_duplicate_username(client):
    assert register(client).status_code == 201

    response = register(client, password="another_password")
    assert response.status_code == 409
    assert response.json()["error"] == "USERNAME_EXISTS"

def test_usernames_are_case_sensitive(client):
    assert register(client, username="alice").status_code == 201
    assert register(client, username="Alice").status_code == 201

def test_register_missing_fields(client):
    response = client.post("/register", json={"username": "alice"})
    assert response.status_code == 400

    body = response.json()
    assert body["message"] == "Username and password are required"
    assert body["errors"] == {"password": "Password is required"}

@pytest.mark.parametrize("username", ["ab", "a" * 31, "bad-name", "white space"])
def test_register_invalid_username(client, username):
    response = register(client, username=username)
    assert response.status_code == 400
    assert "username" in response.json()["errors"]

@pytest.mark.parametrize("password", ["12345", "x" * 101])
def test_register_invalid_password(client, password):
    response = register(client, password=password)
    assert response.status_code == 400
    assert "password" in response.json()["errors"]

def test_register_malformed_body(client):
    response = client.post("/register", json={"username": 12345, "password": "password123"})
    assert response.status_code == 400
    assert response.json()["success"] is False

def test_login(client):
    register(client)
    response = login(client)
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["username"] == "alice"
    assert data["expires_in"] == "1 hour"
    assert security.decode_access_token(data["token"])["sub"] == "alice"

def test_login_wrong_password(client):
    register(client)
    response = login(client, password="wrong_password")
    assert response.status_code == 401
    assert response.json()["error"] == "AUTH_FAILED"

def test_login_unknown_user(client):
    response = login(client, username="nobody")
    assert response.status_code == 401

def test_login_missing_credentials(client):
    response = client.post("/customer/login", json={})
    assert response.status_code == 400
    assert set(response.json()["errors"]) == {"username", "password"}

def test_login_invalid_username_format(client):
    response = login(client, username="no")
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid username format"

###############################################################################
#                          Review Tests                                       #
###############################################################################

def test_add_review(alice):
    response = alice.put("/customer/auth/review/1", json={"review": "Great book"})
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["action"] == "added"
    assert data["username"] == "alice"
    assert data["review"] == "Great book"

    reviews = alice.get("/review/1").json()
    assert reviews["data"] == {"alice": "Great book"}
    assert reviews["has_reviews"] is True

def test_second_review_overwrites_first(alice):
    alice.put("/customer/auth/review/1", json={"review": "Great book"})
    response = alice.put("/customer/auth/review/1", json={"review": "Even better on a second read"})
    assert response.status_code == 200
    assert response.json()["data"]["action"] == "updated"
    assert response.json()["message"] == "Review updated successfully"

    reviews = alice.get("/review/1").json()
    assert reviews["data"] == {"alice": "Even better on a second read"}
    assert reviews["count"] == 1

def test_review_text_is_trimmed(alice):
    response = alice.put("/customer/auth/review/2", json={"review": "  Lovely  "})
    assert response.json()["data"]["review"] == "Lovely"

@pytest.mark.parametrize("review", ["", "   ", None])
def test_empty_review_is_rejected(alice, review):
    response = alice.put("/customer/auth/review/1", json={"review": review})
    assert response.status_code == 400
    assert response.json()["error"] == "REVIEW_CONTENT_REQUIRED"

def test_review_length_limit(alice):
    response = alice.put("/customer/auth/review/1", json={"review": "A" * 1001})
    assert response.status_code == 400
    assert response.json()["error"] == "REVIEW_TOO_LONG"

    response = alice.put("/customer/auth/review/1", json={"review": "A" * 1000})
    assert response.status_code == 200

def test_review_for_unknown_book(alice):
    response = alice.put("/customer/auth/review/999", json={"review": "Review for a non-existent book"})
    assert response.status_code == 404
    assert response.json()["error"] == "BOOK_NOT_FOUND"

def test_reviews_from_different_users_coexist(client):
    register(client, "alice")
    register(client, "bob", "securepass")

    login(client, "alice")
    client.put("/customer/auth/review/8", json={"review": "A literary masterpiece!"})
    login(client, "bob", "securepass")
    client.put("/customer/auth/review/8", json={"review": "Not my cup of tea."})

    assert client.get("/review/8").json()["data"] == {
        "alice": "A literary masterpiece!",
        "bob": "Not my cup of tea.",
    }

def test_delete_review(alice):
    alice.put("/customer/auth/review/3", json={"review": "Dense but rewarding"})

    response = alice.delete("/customer/auth/review/3")
    assert response.status_code == 200
    assert response.json()["data"]["isbn"] == "3"
    assert response.json()["data"]["deleted_at"]

    assert alice.get("/review/3").json()["data"] == {}

def test_delete_missing_review(alice):
    response = alice.delete("/customer/auth/review/3")
    assert response.status_code == 404
    assert response.json()["error"] == "REVIEW_NOT_FOUND"

def test_delete_review_of_unknown_book(alice):
    response = alice.delete("/customer/auth/review/999")
    assert response.status_code == 404
    assert response.json()["error"] == "BOOK_NOT_FOUND"

def test_profile(alice):
    response = alice.get("/customer/auth/profile")
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["username"] == "alice"
    assert data["registered_at"]
    assert data["last_login"]

###############################################################################
#                          Security Tests                                     #
###############################################################################

@pytest.mark.parametrize("method, path", [
    ("PUT", "/customer/auth/review/1"),
    ("DELETE", "/customer/auth/review/1"),
    ("GET", "/customer/auth/profile"),
])
def test_gate_without_session(client, method, path):
    response = client.request(method, path, json={"review": "Unauthorized review"})
    assert response.status_code == 401

    body = response.json()
    assert body["success"] is False
    assert body["error"] == "No active session"

def test_gate_with_expired_token(client, monkeypatch):
    """The session outlives its token: once the token expires the gate answers 403."""
    register(client)
    issued = security._utcnow() - timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES + 1)
    monkeypatch.setattr(security, "_utcnow", lambda: issued)
    assert login(client).status_code == 200
    monkeypatch.undo()

    response = client.put("/customer/auth/review/1", json={"review": "Should fail"})
    assert response.status_code == 403
    assert response.json()["error"] == "Token expired"

    # logging in again restores access
    login(client)
    assert client.put("/customer/auth/review/1", json={"review": "Works now"}).status_code == 200

def test_gate_with_invalid_token(alice, monkeypatch):
    monkeypatch.setattr(security, "JWT_SECRET", "a-rotated-secret-the-token-was-not-signed-with")

    response = alice.get("/customer/auth/profile")
    assert response.status_code == 403
    assert response.json()["error"] == "Invalid token"

def test_tampered_session_cookie_is_ignored(client):
    client.cookies.set("session", "not-a-signed-session", path="/customer")
    response = client.get("/customer/auth/profile")
    assert response.status_code == 401

###############################################################################
#                          System & Error Handling Tests                      #
###############################################################################

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200

    body = response.json()
    assert body["success"] is True
    assert body["uptime"] >= 0
    assert body["timestamp"]

def test_api_docs(client):
    response = client.get("/api-docs")
    assert response.status_code == 200
    assert len(response.json()["data"]["endpoints"]["authenticated"]) == 4

def test_unknown_route(client):
    response = client.get("/no/such/route")
    assert response.status_code == 404
    assert response.json()["message"] == "Route GET /no/such/route not found"

def _broken_list_all():
    raise RuntimeError("catalog unavailable")

def test_unexpected_error_shows_detail_outside_production(app, monkeypatch):
    monkeypatch.setattr(app.state.catalog, "list_all", _broken_list_all)
    response = TestClient(app, raise_server_exceptions=False).get("/")

    assert response.status_code == 500
    assert response.json()["message"] == "catalog unavailable"

def test_unexpected_error_is_generic_in_production(app, monkeypatch):
    monkeypatch.setattr(app.state.catalog, "list_all", _broken_list_all)
    monkeypatch.setattr(config, "IS_PRODUCTION", True)
    response = TestClient(app, raise_server_exceptions=False).get("/")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}
