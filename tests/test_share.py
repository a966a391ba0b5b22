from datetime import timedelta

from models.SharedTrip import SharedTrip
from utils.formatting import utcnow


def _create_link(client, headers, trip_id, **extra):
    return client.post("/share/create", json={"tripId": trip_id, **extra}, headers=headers)


def test_create_share_link(client, alice, trip):
    res = _create_link(client, alice, trip["id"])
    assert res.status_code == 201
    link = res.json()["shareLink"]
    assert link["url"] == f"https://app.example.test/shared/{link['token']}"
    assert link["isProtected"] is False
    assert len(link["token"]) >= 43


def test_create_share_link_errors(client, alice, bob, trip):
    assert client.post("/share/create", json={}, headers=alice).status_code == 400
    assert _create_link(client, alice, 9999).status_code == 404
    res = _create_link(client, bob, trip["id"])
    assert res.status_code == 403
    assert res.json()["detail"] == "Unauthorized"


def test_public_view_counts_views(client, alice, trip, db_session):
    token = _create_link(client, alice, trip["id"]).json()["shareLink"]["token"]

    res = client.get(f"/share/{token}")
    assert res.status_code == 200
    body = res.json()
    assert body["trip"]["title"] == "Summer in Rome"
    assert body["trip"]["isPasswordProtected"] is False
    assert body["shareLink"]["expiresAt"] is None

    client.get(f"/share/{token}")
    assert db_session.query(SharedTrip).filter_by(share_token=token).one().view_count == 2


def test_unknown_token(client):
    assert client.get("/share/does-not-exist").status_code == 404


def test_password_protected_link(client, alice, trip):
    token = _create_link(client, alice, trip["id"], password="s3cret").json()["shareLink"]["token"]

    res = client.get(f"/share/{token}")
    assert res.status_code == 401
    assert res.json()["detail"]["isPasswordProtected"] is True

    assert client.get(f"/share/{token}", headers={"X-Share-Password": "wrong"}).status_code == 401
    assert client.get(f"/share/{token}", headers={"X-Share-Password": "s3cret"}).status_code == 200


def test_verify_password(client, alice, trip):
    token = _create_link(client, alice, trip["id"], password="s3cret").json()["shareLink"]["token"]

    assert client.post(f"/share/{token}/verify", json={}).status_code == 400
    assert client.post("/share/nope/verify", json={"password": "s3cret"}).status_code == 404
    assert client.post(f"/share/{token}/verify", json={"password": "bad"}).status_code == 401

    res = client.post(f"/share/{token}/verify", json={"password": "s3cret"})
    assert res.json() == {"success": True, "message": "Password verified"}


def test_expired_link_is_gone(client, alice, trip):
    expires = (utcnow() - timedelta(hours=1)).isoformat()
    token = _create_link(client, alice, trip["id"], expiresAt=expires).json()["shareLink"]["token"]
    assert client.get(f"/share/{token}").status_code == 410


def test_list_and_revoke(client, alice, bob, trip):
    token = _create_link(client, alice, trip["id"]).json()["shareLink"]["token"]

    assert client.get(f"/trips/{trip['id']}/shares", headers=bob).status_code == 403
    links = client.get(f"/trips/{trip['id']}/shares", headers=alice).json()["shareLinks"]
    assert [link["token"] for link in links] == [token]

    assert client.delete(f"/share/{token}", headers=bob).status_code == 403
    assert client.delete(f"/share/{token}", headers=alice).status_code == 200
    assert client.get(f"/share/{token}").status_code == 404


def test_creator_skips_password(client, alice, bob, trip):
    token = _create_link(client, alice, trip["id"], password="s3cret").json()["shareLink"]["token"]
    assert client.get(f"/share/{token}", headers=alice).status_code == 200
    assert client.get(f"/share/{token}", headers=bob).status_code == 401
