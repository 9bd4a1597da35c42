"""
Tests for the API client, run against the app through FastAPI's TestClient
"""
import pytest
from fastapi.testclient import TestClient

from jobboard.client import ApiError, JobBoardClient
from jobboard.main import app

from conftest import alumni_payload, job_payload, student_payload


@pytest.fixture
def anonymous():
    return JobBoardClient("/api", http=TestClient(app))


class TestJobBoardClient:

    def test_full_flow(self, anonymous):
        poster = anonymous.with_token(anonymous.register(**alumni_payload())["token"])
        seeker_auth = anonymous.register(**student_payload())
        seeker = anonymous.with_token(seeker_auth["token"])

        job = poster.create_job(**job_payload())["job"]
        seeker.apply(job["id"])
        poster.set_application_status(job["id"], seeker_auth["user"]["id"], "reviewed")

        apps = seeker.my_applications()["applications"]
        assert apps[0]["application"]["status"] == "reviewed"
        assert poster.me()["user"]["role"] == "alumni"

    def test_tokens_are_per_instance(self, anonymous):
        auth = anonymous.register(**student_payload())
        authed = anonymous.with_token(auth["token"])
        assert anonymous.token is None
        assert authed.token == auth["token"]

        with pytest.raises(ApiError) as exc_info:
            anonymous.me()
        assert exc_info.value.status_code == 401

    def test_validation_errors_surface(self, anonymous):
        with pytest.raises(ApiError) as exc_info:
            anonymous.register(**student_payload(email="asha@gmail.com"))
        err = exc_info.value
        assert err.status_code == 400
        assert err.errors[0]["field"] == "email"

    def test_list_jobs_drops_unset_filters(self, anonymous):
        poster = anonymous.with_token(anonymous.register(**alumni_payload())["token"])
        poster.create_job(**job_payload())
        body = poster.list_jobs(jobType=None, page=1, limit=5)
        assert body["pagination"]["total"] == 1

    def test_both_profile_routes(self, anonymous):
        me = anonymous.with_token(anonymous.register(**alumni_payload())["token"])
        assert me.update_profile(bio="Mentoring final years")["user"]["bio"] == "Mentoring final years"
        body = me.update_account_profile(company="Acme Labs", skills=["Go", " Go ", "Rust"])
        assert body["user"]["company"] == "Acme Labs"
        assert body["user"]["skills"] == ["Go", "Rust"]
        assert me.me()["user"]["bio"] == "Mentoring final years"
