"""Tests for the /api/user and /api/genre blueprints."""

from djsync.models.enums import Gender
from djsync.services import GenreService, RegistrationService

REGISTRATION = {
    "name": "Ava Stone",
    "email": "ava@partyhub.io",
    "phone_number": "5551234567",
    "gender": "female",
}


class TestRegisterAndLogin:
    def test_register_sets_cookie_and_returns_token(self, client):
        response = client.post("/api/user/register", json=REGISTRATION)

        assert response.status_code == 201
        payload = response.get_json()
        assert payload["token"]
        assert payload["user"]["email"] == "ava@partyhub.io"
        assert payload["user"]["is_dj"] is False
        assert payload["user"]["qr_code_data_url"].startswith("data:image/png;base64,")
        assert "token=" in response.headers.get("Set-Cookie", "")

    def test_duplicate_email(self, client):
        client.post("/api/user/register", json=REGISTRATION)

        response = client.post("/api/user/register", json=REGISTRATION)

        assert response.status_code == 400
        assert response.get_json()["error"] == "User already exists"

    def test_invalid_phone_number(self, client):
        response = client.post("/api/user/register", json={**REGISTRATION, "phone_number": "12-34"})

        assert response.status_code == 400
        assert response.get_json()["error"] == "Validation failed"

    def test_login_unknown_email(self, client, app):
        response = client.post("/api/user/login", json={"email": "nobody@partyhub.io"})

        assert response.status_code == 400
        assert response.get_json()["error"] == "Invalid email"

    def test_cookie_authenticates_following_requests(self, client):
        client.post("/api/user/register", json=REGISTRATION)
        client.post("/api/user/login", json={"email": "ava@partyhub.io"})

        response = client.get("/api/user/check-auth")

        assert response.status_code == 200
        payload = response.get_json()
        assert payload["is_authenticated"] is True
        assert payload["is_dj"] is False
        assert payload["user"]["name"] == "Ava Stone"

    def test_logout_clears_cookie(self, client):
        client.post("/api/user/register", json=REGISTRATION)

        client.post("/api/user/logout")

        assert client.get("/api/user/check-auth").status_code == 401


class TestCurrentUser:
    def test_check_auth_without_token(self, client, app):
        assert client.get("/api/user/check-auth").status_code == 401

    def test_token_for_deleted_user(self, client, auth_headers, make_user):
        from djsync.extensions import db

        guest = make_user()
        headers = auth_headers(guest)
        db.session.delete(guest)
        db.session.commit()

        assert client.get("/api/user/current-user", headers=headers).status_code == 401

    def test_update_profile(self, client, make_user, auth_headers):
        guest = make_user()

        response = client.post(
            "/api/user/update-profile",
            json={"phone_number": "5559876543", "gender": "male"},
            headers=auth_headers(guest),
        )

        assert response.status_code == 200
        user = response.get_json()["user"]
        assert user["phone_number"] == "5559876543"
        assert user["gender"] == "male"
        assert user["profile_completed"] is True

    def test_partial_profile_update_keeps_other_fields(self, client, make_user, auth_headers):
        """Fields left out of the request keep their stored value."""
        guest = make_user(phone_number="5551234567")

        response = client.post(
            "/api/user/update-profile", json={"gender": "female"}, headers=auth_headers(guest)
        )

        assert response.status_code == 200
        user = response.get_json()["user"]
        assert user["phone_number"] == "5551234567"
        assert user["gender"] == "female"


class TestUpdateGenre:
    def test_rejects_non_youtube_link(self, client, make_user, auth_headers):
        response = client.post(
            "/api/user/update-genre",
            json={"genre": "Techno", "media_link": "https://vimeo.com/123"},
            headers=auth_headers(make_user()),
        )

        assert response.status_code == 400
        assert "Invalid YouTube URL provided" in response.get_json()["details"][0]

    def test_updates_user_and_todays_events(self, client, make_user, make_dj, make_event, auth_headers):
        event = make_event(make_dj())
        guest = make_user()
        RegistrationService.assign(event.id, guest.id)

        response = client.post(
            "/api/user/update-genre",
            json={"genre": "Techno", "media_link": "https://www.youtube.com/watch?v=abc"},
            headers=auth_headers(guest),
        )

        assert response.status_code == 200
        payload = response.get_json()
        assert payload["user"]["genre_choice"] == "Techno"
        assert payload["updated_event_ids"] == [event.id]


class TestScanQr:
    def test_join_live_event(self, client, make_user, make_dj, make_event, auth_headers):
        dj = make_dj(name="DJ Nova")
        make_event(dj, event_name="Warehouse Rave")

        response = client.post(
            "/api/user/scan-qr", json={"qr_code_identifier": dj.id}, headers=auth_headers(make_user())
        )

        assert response.status_code == 200
        payload = response.get_json()
        assert payload["message"] == "Successfully joined DJ DJ Nova's event!"
        assert payload["event_name"] == "Warehouse Rave"

    def test_no_live_event(self, client, make_user, make_dj, auth_headers):
        dj = make_dj()

        response = client.post(
            "/api/user/scan-qr", json={"qr_code_identifier": dj.id}, headers=auth_headers(make_user())
        )

        assert response.status_code == 404


class TestVerifySerial:
    def test_promotes_caller(self, client, make_user, make_serial, auth_headers):
        make_serial("NOVA-2026")
        headers = auth_headers(make_user())

        response = client.post("/api/user/verify-serial", json={"serial": "NOVA-2026"}, headers=headers)

        assert response.status_code == 200
        assert client.get("/api/user/check-admin", headers=headers).get_json() == {"is_dj": True}

    def test_unknown_serial(self, client, make_user, auth_headers):
        response = client.post(
            "/api/user/verify-serial", json={"serial": "NOPE"}, headers=auth_headers(make_user())
        )

        assert response.status_code == 400


class TestPublicUserInfo:
    def test_generate_qr_is_cached(self, client, make_user):
        guest = make_user()

        first = client.get(f"/api/user/generate-qr/{guest.id}").get_json()["qr_code_data_url"]
        second = client.get(f"/api/user/generate-qr/{guest.id}").get_json()["qr_code_data_url"]

        assert first.startswith("data:image/png;base64,")
        assert first == second

    def test_dj_info_and_listing(self, client, make_user, make_dj):
        dj = make_dj(name="DJ Nova")
        guest = make_user()

        assert client.get(f"/api/user/dj-info/{dj.id}").get_json() == {"dj_name": "DJ Nova"}
        assert client.get(f"/api/user/dj-info/{guest.id}").status_code == 404
        assert client.get("/api/user/djs").get_json() == [
            {"id": dj.id, "name": "DJ Nova", "email": dj.email}
        ]


class TestStats:
    def _populate(self, make_user, make_dj, make_event):
        dj = make_dj()
        event = make_event(dj)
        ava = make_user(name="Ava", email="ava@partyhub.io", gender=Gender.FEMALE, phone_number="5551234567")
        ben = make_user(name="Ben", email="ben@partyhub.io", gender=Gender.MALE)
        cleo = make_user(name="Cleo", email="cleo@partyhub.io", gender=Gender.FEMALE)
        for guest in (ava, ben, cleo):
            RegistrationService.assign(event.id, guest.id)
        GenreService.select_genre(event.id, ava.id, "Techno")
        GenreService.select_genre(event.id, ben.id, "Techno")
        GenreService.select_genre(event.id, cleo.id, "House")
        return dj

    def test_user_stats(self, client, make_user, make_dj, make_event, auth_headers):
        dj = make_dj()
        event = make_event(dj)
        ava = make_user(gender=Gender.FEMALE)
        ben = make_user(gender=Gender.MALE)
        RegistrationService.assign(event.id, ava.id)
        RegistrationService.assign(event.id, ben.id)
        GenreService.select_genre(event.id, ava.id, "Techno")

        response = client.get("/api/user/user-stats", headers=auth_headers(dj))

        assert response.get_json() == {"total_users": 2, "genre_choices": 1, "males": 1, "females": 1}

    def test_stats_forbidden_for_guest(self, client, make_user, auth_headers):
        headers = auth_headers(make_user())

        assert client.get("/api/user/user-stats", headers=headers).status_code == 403
        assert client.get("/api/genre/genre-stats", headers=headers).status_code == 403
        assert client.get("/api/user/download-user-details", headers=headers).status_code == 403

    def test_genre_stats(self, client, make_user, make_dj, make_event, auth_headers):
        dj = self._populate(make_user, make_dj, make_event)

        response = client.get("/api/genre/genre-stats", headers=auth_headers(dj))

        assert response.get_json() == [
            {
                "name": "Techno",
                "total_choices": 2,
                "choices_by_females": 1,
                "choices_by_males": 1,
                "percentage_distribution": 66.67,
            },
            {
                "name": "House",
                "total_choices": 1,
                "choices_by_females": 1,
                "choices_by_males": 0,
                "percentage_distribution": 33.33,
            },
        ]

    def test_download_user_details(self, client, make_user, make_dj, make_event, auth_headers):
        dj = self._populate(make_user, make_dj, make_event)

        response = client.get("/api/user/download-user-details", headers=auth_headers(dj))

        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        assert "user-details.csv" in response.headers["Content-Disposition"]
        lines = response.get_data(as_text=True).splitlines()
        assert lines[0] == '"Name","Email","Phone Number","Gender"'
        assert lines[1] == '"Ava","ava@partyhub.io","5551234567","female"'
        assert len(lines) == 4


class TestUserGenre:
    def test_genre_lookup(self, client, make_user):
        with_genre = make_user(genre_choice="Trance")
        without = make_user()

        assert client.get(f"/api/genre/{with_genre.id}").get_json() == {"genre": "Trance"}
        assert client.get(f"/api/genre/{without.id}").status_code == 404
        assert client.get("/api/genre/999").status_code == 404

    def test_select_own_genre(self, client, make_user, make_dj, make_event, auth_headers):
        event = make_event(make_dj())
        guest = make_user()
        RegistrationService.assign(event.id, guest.id)

        response = client.post("/api/genre", json={"genre": "Trance"}, headers=auth_headers(guest))

        assert response.status_code == 200
        assert response.get_json()["updated_event_ids"] == [event.id]
        assert client.get(f"/api/genre/{guest.id}").get_json() == {"genre": "Trance"}

    def test_set_genre_by_user_id(self, client, make_user, auth_headers):
        guest, other = make_user(), make_user()

        own = client.post(f"/api/genre/{guest.id}", json={"genre": "House"}, headers=auth_headers(guest))
        foreign = client.post(f"/api/genre/{guest.id}", json={"genre": "Techno"}, headers=auth_headers(other))

        assert own.status_code == 200
        assert foreign.status_code == 403
        assert client.get(f"/api/genre/{guest.id}").get_json() == {"genre": "House"}

    def test_genre_write_requires_genre(self, client, make_user, auth_headers):
        response = client.post("/api/genre", json={}, headers=auth_headers(make_user()))

        assert response.status_code == 400
