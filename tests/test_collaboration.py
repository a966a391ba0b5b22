from datetime import timedelta

from conftest import share_trip_with
from models.TripInvitation import TripInvitation
from utils.formatting import utcnow


def _invite(client, headers, trip_id, email, role="editor"):
    return client.post("/collaborate/invite", json={"tripId": trip_id, "email": email, "role": role}, headers=headers)


def test_invite_creates_pending_invitation(client, alice, bob, trip):
    res = _invite(client, alice, trip["id"], "Bob@Example.com")
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Invitation sent successfully"
    assert body["invitation"]["email"] == "bob@example.com"
    assert body["invitation"]["status"] == "pending"

    invitations = client.get("/collaborate/invitations", headers=bob).json()["invitations"]
    assert len(invitations) == 1
    assert invitations[0]["trip"]["title"] == "Summer in Rome"
    assert invitations[0]["inviter"]["email"] == "alice@example.com"


def test_invite_pushes_to_known_device(client, alice, bob, trip, no_push_notifications):
    client.put("/profile/fcm-token", json={"fcm_token": "device-token"}, headers=bob)
    _invite(client, alice, trip["id"], "bob@example.com")

    no_push_notifications.assert_called_once()
    assert no_push_notifications.call_args.args[0] == "device-token"
    assert no_push_notifications.call_args.kwargs["trip_title"] == "Summer in Rome"


def test_only_owner_can_invite(client, alice, bob, trip):
    share_trip_with(client, alice, bob, trip["id"], "bob@example.com", role="editor")
    res = _invite(client, bob, trip["id"], "carol@example.com")
    assert res.status_code == 403
    assert res.json()["detail"] == "Only trip owners can send invitations"


def test_duplicate_invitations_are_rejected(client, alice, bob, trip):
    _invite(client, alice, trip["id"], "carol@example.com")
    res = _invite(client, alice, trip["id"], "carol@example.com")
    assert res.status_code == 400
    assert res.json()["detail"] == "An invitation has already been sent to this email"

    share_trip_with(client, alice, bob, trip["id"], "bob@example.com")
    res = _invite(client, alice, trip["id"], "bob@example.com")
    assert res.json()["detail"] == "User is already a collaborator on this trip"


def test_accept_adds_collaborator_with_invited_role(client, alice, bob, trip):
    share_trip_with(client, alice, bob, trip["id"], "bob@example.com", role="viewer")

    role = client.get(f"/trips/{trip['id']}/role", headers=bob).json()
    assert role["role"] == "viewer"
    assert role["can_edit"] is False
    assert role["is_owner"] is False

    assert trip["id"] in [t["id"] for t in client.get("/trips/", headers=bob).json()]
    assert client.get("/collaborate/invitations", headers=bob).json()["invitations"] == []


def test_accept_requires_matching_email(client, alice, carol, trip):
    invitation_id = _invite(client, alice, trip["id"], "bob@example.com").json()["invitation"]["id"]
    res = client.post("/collaborate/accept", json={"invitationId": invitation_id}, headers=carol)
    assert res.status_code == 404
    assert res.json()["detail"] == "Invitation not found or already responded to"


def test_expired_invitation_is_marked_and_rejected(client, alice, bob, trip, db_session):
    invitation_id = _invite(client, alice, trip["id"], "bob@example.com").json()["invitation"]["id"]
    invitation = db_session.query(TripInvitation).filter_by(id=invitation_id).one()
    invitation.expires_at = utcnow() - timedelta(days=1)
    db_session.commit()

    assert client.get("/collaborate/invitations", headers=bob).json()["invitations"] == []

    res = client.post("/collaborate/accept", json={"invitationId": invitation_id}, headers=bob)
    assert res.status_code == 400
    assert res.json()["detail"] == "Invitation has expired"

    db_session.expire_all()
    assert db_session.query(TripInvitation).filter_by(id=invitation_id).one().status.value == "expired"


def test_decline(client, alice, bob, trip):
    invitation_id = _invite(client, alice, trip["id"], "bob@example.com").json()["invitation"]["id"]
    res = client.post("/collaborate/decline", json={"invitationId": invitation_id}, headers=bob)
    assert res.json()["message"] == "Invitation declined"

    res = client.post("/collaborate/accept", json={"invitationId": invitation_id}, headers=bob)
    assert res.status_code == 404


def test_inviter_can_cancel(client, alice, bob, trip):
    invitation_id = _invite(client, alice, trip["id"], "bob@example.com").json()["invitation"]["id"]
    assert client.delete(f"/collaborate/invitations/{invitation_id}", headers=bob).status_code == 404
    assert client.delete(f"/collaborate/invitations/{invitation_id}", headers=alice).status_code == 200
    assert client.get("/collaborate/invitations", headers=bob).json()["invitations"] == []


def test_leave_trip(client, alice, bob, trip):
    res = client.post("/collaborate/leave", json={"tripId": trip["id"]}, headers=alice)
    assert res.status_code == 400
    assert res.json()["detail"] == "Trip owners cannot leave. Please transfer ownership or delete the trip."

    share_trip_with(client, alice, bob, trip["id"], "bob@example.com")
    res = client.post("/collaborate/leave", json={"tripId": trip["id"]}, headers=bob)
    assert res.json()["message"] == "You have left the trip successfully"
    assert client.get(f"/trips/{trip['id']}", headers=bob).status_code == 404

    res = client.post("/collaborate/leave", json={"tripId": trip["id"]}, headers=bob)
    assert res.json()["detail"] == "You have already left this trip"


def test_former_member_cannot_be_reinvited(client, alice, bob, trip):
    share_trip_with(client, alice, bob, trip["id"], "bob@example.com")
    client.post("/collaborate/leave", json={"tripId": trip["id"]}, headers=bob)

    res = _invite(client, alice, trip["id"], "bob@example.com")
    assert res.status_code == 400
    assert res.json()["detail"] == "User was previously a member of this trip"


def test_remove_collaborator(client, alice, bob, carol, trip):
    share_trip_with(client, alice, bob, trip["id"], "bob@example.com")
    share_trip_with(client, alice, carol, trip["id"], "carol@example.com")

    res = client.post("/collaborate/remove", json={"tripId": trip["id"], "userId": "user-carol"}, headers=bob)
    assert res.status_code == 403

    res = client.post("/collaborate/remove", json={"tripId": trip["id"], "userId": "user-alice"}, headers=alice)
    assert res.json()["detail"] == "Cannot remove trip owner"

    res = client.post("/collaborate/remove", json={"tripId": trip["id"], "userId": "user-carol"}, headers=alice)
    assert res.json()["message"] == "Collaborator removed successfully"

    res = client.post("/collaborate/remove", json={"tripId": trip["id"], "userId": "user-carol"}, headers=alice)
    assert res.json()["detail"] == "User is already a former member"

    active = client.get(f"/trips/{trip['id']}/collaborators", headers=alice).json()["collaborators"]
    assert [c["user_id"] for c in active] == ["user-alice", "user-bob"]

    everyone = client.get(f"/trips/{trip['id']}/collaborators?include_former=true", headers=alice).json()
    former = everyone["collaborators"][-1]
    assert former["user_id"] == "user-carol"
    assert former["status"] == "former_member"
    assert former["removed_by"] == "user-alice"


def test_change_role(client, alice, bob, trip):
    share_trip_with(client, alice, bob, trip["id"], "bob@example.com", role="viewer")

    res = client.put("/collaborate/role", json={"tripId": trip["id"], "userId": "user-bob", "role": "editor"},
                     headers=alice)
    assert res.status_code == 200
    assert res.json()["collaborator"]["role"] == "editor"
    assert client.get(f"/trips/{trip['id']}/role", headers=bob).json()["can_edit"] is True

    res = client.put("/collaborate/role", json={"tripId": trip["id"], "userId": "user-alice", "role": "viewer"},
                     headers=alice)
    assert res.json()["detail"] == "Cannot change owner role. Transfer ownership instead."

    res = client.put("/collaborate/role", json={"tripId": trip["id"], "userId": "user-bob", "role": "viewer"},
                     headers=bob)
    assert res.json()["detail"] == "Only trip owners can change collaborator roles"
