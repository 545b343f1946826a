import pytest
from sqlalchemy.exc import OperationalError

from shortlinks.core.errors import StorageError
from shortlinks.db import repository
from shortlinks.services.registry import LinkRegistry


def _boom(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("connection to server lost"))


def test_redirect_success(client, db_session):
    """Test successful redirect."""
    LinkRegistry.create_link(db_session, "u1", "https://example.com/redirect-test", "go-here")

    response = client.get("/go-here", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "https://example.com/redirect-test"


def test_redirect_legacy_prefix(client, db_session):
    LinkRegistry.create_link(db_session, "u1", "https://example.com", "demo")

    response = client.get("/l/demo", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "https://example.com"


def test_redirect_keeps_query_string(client, db_session):
    LinkRegistry.create_link(db_session, "u1", "https://example.com/search?q=test&page=2", "search")

    response = client.get("/search", follow_redirects=False)
    assert response.headers["location"] == "https://example.com/search?q=test&page=2"


def test_redirect_not_found(client):
    """Test redirect with non-existent short code."""
    response = client.get("/nonexistent", follow_redirects=False)
    assert response.status_code == 404
    assert response.text == "Link not found"
    assert response.headers["content-type"].startswith("text/plain")


@pytest.mark.parametrize("short_code", ["ab", "x" * 21, "bad.code"])
def test_redirect_malformed_code_skips_storage(client, monkeypatch, short_code):
    monkeypatch.setattr(repository, "get_link_by_short_code", _boom)
    response = client.get(f"/{short_code}", follow_redirects=False)
    assert response.status_code == 404


def test_redirect_is_case_sensitive(client, db_session):
    LinkRegistry.create_link(db_session, "u1", "https://example.com", "Demo")
    assert client.get("/demo", follow_redirects=False).status_code == 404
    assert client.get("/Demo", follow_redirects=False).status_code == 307


def test_redirect_storage_failure(client, monkeypatch):
    monkeypatch.setattr(repository, "get_link_by_short_code", _boom)

    response = client.get("/demo", follow_redirects=False)
    assert response.status_code == 500
    assert response.text == "Internal server error"
    assert "connection" not in response.text


def test_health_is_not_a_short_code(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# --- Redirect cache ---

def test_redirect_populates_cache(client, db_session, fake_redis):
    LinkRegistry.create_link(db_session, "u1", "https://example.com", "demo")
    fake_redis.store.clear()

    client.get("/demo", follow_redirects=False)
    assert fake_redis.store["url:demo"] == "https://example.com"


def test_redirect_served_from_cache(client, db_session, fake_redis, monkeypatch):
    LinkRegistry.create_link(db_session, "u1", "https://example.com", "demo")
    monkeypatch.setattr(repository, "get_link_by_short_code", _boom)

    response = client.get("/demo", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "https://example.com"


def test_update_invalidates_cache(client, db_session, fake_redis):
    link = LinkRegistry.create_link(db_session, "u1", "https://example.com", "demo")
    client.get("/demo", follow_redirects=False)

    LinkRegistry.update_link(db_session, link.id, "u1", "https://example.org", "demo")

    response = client.get("/demo", follow_redirects=False)
    assert response.headers["location"] == "https://example.org"


def test_renaming_code_evicts_old_code(client, db_session, fake_redis):
    link = LinkRegistry.create_link(db_session, "u1", "https://example.com", "old-code")
    client.get("/old-code", follow_redirects=False)

    LinkRegistry.update_link(db_session, link.id, "u1", "https://example.com", "new-code")

    assert "url:old-code" not in fake_redis.store
    assert client.get("/old-code", follow_redirects=False).status_code == 404
    assert client.get("/new-code", follow_redirects=False).status_code == 307


def test_delete_invalidates_cache(client, db_session, fake_redis):
    link = LinkRegistry.create_link(db_session, "u1", "https://example.com", "demo")
    client.get("/demo", follow_redirects=False)

    LinkRegistry.delete_link(db_session, link.id, "u1")

    assert "url:demo" not in fake_redis.store
    assert client.get("/demo", follow_redirects=False).status_code == 404


def test_redirect_works_when_redis_is_down(client, db_session, fake_redis):
    LinkRegistry.create_link(db_session, "u1", "https://example.com", "demo")
    fake_redis.down = True

    response = client.get("/demo", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "https://example.com"


def test_failed_eviction_rolls_back_rename(client, db_session, fake_redis):
    link = LinkRegistry.create_link(db_session, "u1", "https://example.com", "demo")
    client.get("/demo", follow_redirects=False)
    fake_redis.fail_deletes = True

    with pytest.raises(StorageError):
        LinkRegistry.update_link(db_session, link.id, "u1", "https://example.com", "demo2")

    # The cached entry and the row still agree
    assert LinkRegistry.get_link(db_session, link.id, "u1").short_code == "demo"
    assert client.get("/demo", follow_redirects=False).status_code == 307
    assert client.get("/demo2", follow_redirects=False).status_code == 404

    fake_redis.fail_deletes = False
    LinkRegistry.update_link(db_session, link.id, "u1", "https://example.com", "demo2")
    assert client.get("/demo", follow_redirects=False).status_code == 404
    assert client.get("/demo2", follow_redirects=False).status_code == 307


def test_failed_eviction_rolls_back_delete(client, db_session, fake_redis, u1_headers):
    link = LinkRegistry.create_link(db_session, "u1", "https://example.com", "demo")
    client.get("/demo", follow_redirects=False)
    fake_redis.fail_deletes = True

    response = client.delete(f"/api/v1/links/{link.id}", headers=u1_headers)
    assert response.status_code == 500
    assert "connection reset" not in response.text
    assert LinkRegistry.resolve_by_code(db_session, "demo") is not None

    fake_redis.fail_deletes = False
    assert client.delete(f"/api/v1/links/{link.id}", headers=u1_headers).status_code == 204
    assert "url:demo" not in fake_redis.store
    assert client.get("/demo", follow_redirects=False).status_code == 404
