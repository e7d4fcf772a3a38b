import json
import unittest

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response
from fastapi.testclient import TestClient

from webapp.core.messages import ResponseStatusCode, get_message, language_from_header
from webapp.core.response_envelope import envelope_response, install_response_envelope, rewrite_envelope_body
from webapp.main import app as main_app
from webapp.schemas.common import ApiResponse, PaginatedResult


def _build_app() -> FastAPI:
    app = FastAPI()
    install_response_envelope(app)

    @app.get("/coded/{code}")
    def coded(code: int):
        return {"message": code, "data": {"id": 1}}

    @app.get("/plain")
    def plain():
        return {"status": "ok", "items": [1, 2, 3]}

    @app.get("/text", response_class=PlainTextResponse)
    def text():
        return "404"

    @app.get("/malformed")
    def malformed():
        return Response(content=b'{"message": 404', media_type="application/json")

    @app.get("/flag")
    def flag():
        return {"message": True}

    @app.get("/headers")
    def headers():
        return Response(
            content=json.dumps({"message": 400}).encode("utf-8"),
            media_type="application/json",
            headers={"X-Custom": "kept"},
        )

    @app.get("/page")
    def page():
        return ApiResponse(message=ResponseStatusCode.OK, data=PaginatedResult(items=[1, 2], total_count=7))

    @app.get("/typed")
    def typed():
        return envelope_response(ResponseStatusCode.NOT_FOUND, language="en-US")

    @app.get("/boom")
    def boom():
        raise RuntimeError("boom")

    return app


class ResponseEnvelopeMiddlewareTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(_build_app())

    def tearDown(self):
        self.client.close()

    def test_error_code_overrides_status_and_is_localized(self):
        response = self.client.get("/coded/404")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(
            response.json(),
            {"message": get_message(404), "status": 404, "success": False, "data": {"id": 1}},
        )

    def test_success_code_keeps_transport_status(self):
        response = self.client.get("/coded/201")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], 201)
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], get_message(201))

    def test_accept_language_selects_message_table(self):
        response = self.client.get("/coded/404", headers={"Accept-Language": "en-US,en;q=0.9"})
        self.assertEqual(response.json()["message"], "Resource not found")

    def test_body_without_message_passes_through_byte_for_byte(self):
        response = self.client.get("/plain")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b'{"status":"ok","items":[1,2,3]}')

    def test_non_json_and_malformed_bodies_pass_through(self):
        text = self.client.get("/text")
        self.assertEqual(text.status_code, 200)
        self.assertEqual(text.content, b"404")

        malformed = self.client.get("/malformed")
        self.assertEqual(malformed.status_code, 200)
        self.assertEqual(malformed.content, b'{"message": 404')

    def test_message_outside_http_status_range_passes_through(self):
        for code in (42, 600):
            with self.subTest(code=code):
                response = self.client.get(f"/coded/{code}")
                self.assertEqual(response.status_code, 200)
                self.assertEqual(response.json(), {"message": code, "data": {"id": 1}})

    def test_each_request_is_logged_with_final_status(self):
        with self.assertLogs("webapp.http", level="INFO") as logs:
            self.client.get("/coded/404")
        self.assertIn("GET /coded/404 status=404", logs.output[-1])

    def test_boolean_message_is_not_a_code(self):
        response = self.client.get("/flag")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": True})

    def test_headers_survive_rewrite(self):
        response = self.client.get("/headers")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.headers.get("x-custom"), "kept")
        self.assertEqual(int(response.headers["content-length"]), len(response.content))

    def test_api_response_model_is_rewritten(self):
        response = self.client.get("/page")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"], {"items": [1, 2], "totalCount": 7})

    def test_typed_envelope_is_left_alone(self):
        response = self.client.get("/typed")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(
            response.json(),
            {"status": 404, "success": False, "message": "Resource not found", "data": None},
        )

    def test_unexpected_failure_collapses_to_bare_500(self):
        with self.assertLogs("webapp.http", level="ERROR"):
            response = self.client.get("/boom")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.content, b"")


class RewriteEnvelopeBodyTests(unittest.TestCase):
    def test_rewrite_returns_code_and_body(self):
        code, body = rewrite_envelope_body(b'{"message": 500}', "en-US")
        self.assertEqual(code, 500)
        self.assertEqual(json.loads(body), {"message": "Internal server error", "status": 500, "success": False})

    def test_rewrite_ignores_non_objects_and_missing_codes(self):
        for raw in (b"", b"[1, 2]", b'"text"', b'{"message": "hello"}', b'{"message": 0}', b'{"message": 42}', b'{"data": 1}'):
            with self.subTest(raw=raw):
                self.assertIsNone(rewrite_envelope_body(raw))

    def test_unknown_code_falls_back_to_number(self):
        _, body = rewrite_envelope_body(b'{"message": 418}')
        self.assertEqual(json.loads(body)["message"], "418")


class MessagesTests(unittest.TestCase):
    def test_language_from_header(self):
        self.assertEqual(language_from_header(None), "es-MX")
        self.assertEqual(language_from_header("en"), "en-US")
        self.assertEqual(language_from_header("fr-FR, en-GB;q=0.8"), "en-US")
        self.assertEqual(language_from_header("de"), "es-MX")

    def test_unknown_language_uses_default_table(self):
        self.assertEqual(get_message(404, "de-DE"), get_message(404, "es-MX"))


class MainAppTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(main_app)

    def tearDown(self):
        self.client.close()

    def test_health_passes_through(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
