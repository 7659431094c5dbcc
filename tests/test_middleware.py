# tests/test_middleware.py

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from main import install_middleware


def make_client(environment):
    app = FastAPI()

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    install_middleware(app, environment)
    return TestClient(app)


class TestHttpsBehindProxy:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.client = make_client("production")

    def test_forwarded_https_is_served(self):
        resp = self.client.get(
            "/health", headers={"x-forwarded-proto": "https"}, follow_redirects=False
        )
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {"status": "healthy"}

    def test_plain_http_is_redirected(self):
        resp = self.client.get("/health", follow_redirects=False)
        assert resp.status_code == status.HTTP_307_TEMPORARY_REDIRECT
        assert resp.headers["location"] == "https://testserver/health"

    def test_forwarded_http_is_redirected(self):
        resp = self.client.get(
            "/health", headers={"x-forwarded-proto": "http"}, follow_redirects=False
        )
        assert resp.status_code == status.HTTP_307_TEMPORARY_REDIRECT


class TestDevelopmentMiddleware:
    def test_no_https_redirect(self):
        resp = make_client("development").get("/health", follow_redirects=False)
        assert resp.status_code == status.HTTP_200_OK
