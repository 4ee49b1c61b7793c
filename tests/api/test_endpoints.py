"""
API endpoint tests
"""

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from api.main import create_app

API = "/api"


def create_source(client, payload):
    response = client.post(f"{API}/sources", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestHealth:

    def test_health(self, client):
        response = client.get(f"{API}/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["message"]

    def test_request_context_headers(self, client):
        response = client.get(f"{API}/health")

        assert response.headers["X-Request-ID"]
        assert int(response.headers["X-API-Latency-ms"]) >= 0

    def test_root_banner(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["sources"] == "/api/sources"


class TestSources:

    def test_create_and_get(self, client, url_source_payload):
        created = create_source(client, url_source_payload)

        assert created["id"] > 0
        assert created["type"] == "url"
        assert created["config"]["method"] == "GET"
        assert created["created_by"] == "anonymous"
        assert created["last_request_status"] is None

        response = client.get(f"{API}/sources/{created['id']}")
        assert response.status_code == 200
        assert response.json()["data"] == created

    def test_config_round_trip(self, client, url_source_payload):
        created = create_source(client, url_source_payload)

        fetched = client.get(f"{API}/sources/{created['id']}").json()["data"]

        expected = dict(url_source_payload["config"], method="GET")
        assert fetched["config"] == expected

    def test_config_round_trip_keeps_null_keys(self, client):
        config = {
            "url": "https://example.com",
            "method": "GET",
            "headers": None,
            "extra": None
        }
        created = create_source(client, {"name": "Nulls", "type": "url", "config": config})

        fetched = client.get(f"{API}/sources/{created['id']}").json()["data"]

        assert fetched["config"] == config

    def test_list(self, client, url_source_payload, file_source_payload):
        create_source(client, url_source_payload)
        create_source(client, file_source_payload)

        response = client.get(f"{API}/sources")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["total"] == 2
        assert [s["name"] for s in body["data"]] == ["Orders export", "Orders API"]

    @pytest.mark.parametrize("payload", [
        {"name": "Bad", "type": "url", "config": {"path": "/tmp/a.csv"}},
        {"name": "Bad", "type": "file", "config": {"url": "https://x", "method": "GET"}},
        {"name": "Bad", "type": "url", "config": {"url": "https://x"}},
        {"name": "Bad", "type": "api", "config": {"url": "https://x", "method": "GET"}},
        {"name": "", "type": "file", "config": {"path": "/tmp/a.csv"}},
        {"type": "file", "config": {"path": "/tmp/a.csv"}},
    ])
    def test_invalid_payload_rejected_and_nothing_stored(self, client, sync_engine, payload):
        response = client.post(f"{API}/sources", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]
        assert body["message"]

        with sync_engine.connect() as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM sources")).scalar() == 0

    def test_update(self, client, url_source_payload, file_source_payload):
        created = create_source(client, url_source_payload)

        response = client.put(f"{API}/sources/{created['id']}", json=file_source_payload)

        assert response.status_code == 200
        updated = response.json()["data"]
        assert updated["type"] == "file"
        assert updated["config"]["location"] == "local"
        assert updated["created_at"] == created["created_at"]

    def test_update_invalid_config_rejected(self, client, url_source_payload):
        created = create_source(client, url_source_payload)

        response = client.put(
            f"{API}/sources/{created['id']}",
            json={"name": "x", "type": "file", "config": {"url": "https://x"}}
        )

        assert response.status_code == 400
        assert client.get(f"{API}/sources/{created['id']}").json()["data"]["type"] == "url"

    def test_soft_delete(self, client, sync_engine, url_source_payload):
        created = create_source(client, url_source_payload)

        response = client.delete(f"{API}/sources/{created['id']}")
        assert response.status_code == 200
        assert response.json()["success"] is True

        assert client.get(f"{API}/sources/{created['id']}").status_code == 404
        assert client.get(f"{API}/sources").json()["total"] == 0
        assert client.put(f"{API}/sources/{created['id']}", json=url_source_payload).status_code == 404
        assert client.delete(f"{API}/sources/{created['id']}").status_code == 404
        assert client.post(f"{API}/sources/{created['id']}/test").status_code == 404

        with sync_engine.connect() as conn:
            row = conn.execute(
                text("SELECT is_active FROM sources WHERE id = :id"), {"id": created["id"]}
            ).one()
        assert row.is_active == 0

    def test_missing_source(self, client):
        response = client.get(f"{API}/sources/999")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Source not found",
            "message": "Source not found"
        }

    def test_error_envelope_documented(self, client):
        schema = client.get("/openapi.json").json()

        responses = schema["paths"]["/api/sources/{source_id}"]["get"]["responses"]
        ref = responses["404"]["content"]["application/json"]["schema"]["$ref"]
        assert ref == "#/components/schemas/ErrorResponse"
        assert set(schema["components"]["schemas"]["ErrorResponse"]["properties"]) == {
            "success", "error", "message"
        }

    def test_non_numeric_id_is_bad_request(self, client):
        assert client.get(f"{API}/sources/abc").status_code == 400


class TestUrlProbe:

    def test_success_persisted(self, client, url_source_payload, http_client, response_factory):
        http_client.request.return_value = response_factory(200, json={"orders": []})
        created = create_source(client, url_source_payload)

        response = client.post(f"{API}/sources/{created['id']}/test")

        assert response.status_code == 200
        result = response.json()["result"]
        assert result["status"] == "200 OK"
        assert result["error"] is None
        assert result["data"]["body"] == {"orders": []}

        request_kwargs = http_client.request.call_args.kwargs
        assert request_kwargs["method"] == "GET"
        assert request_kwargs["params"] == {"limit": 10}
        assert http_client.factory.call_args.kwargs["timeout"] == 5.0

        stored = client.get(f"{API}/sources/{created['id']}").json()["data"]
        assert stored["last_request_status"] == "200 OK"
        assert stored["last_request_data"] == result["data"]
        assert stored["last_request_error"] is None
        assert stored["last_request_at"] is not None
        assert stored["updated_at"] == created["updated_at"]

    def test_unreachable_host_persisted(self, client, url_source_payload, http_client):
        http_client.request.side_effect = httpx.ConnectError("connection refused")
        created = create_source(client, url_source_payload)

        response = client.post(f"{API}/sources/{created['id']}/test")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["result"]["status"] == "Network Error"
        assert body["result"]["error"] == "could not connect to server"

        stored = client.get(f"{API}/sources/{created['id']}").json()["data"]
        assert stored["last_request_status"] == body["result"]["status"]
        assert stored["last_request_error"] == body["result"]["error"]
        assert stored["last_request_data"] == body["result"]["data"]

    def test_non_2xx_reported_in_result(self, client, url_source_payload, http_client, response_factory):
        http_client.request.return_value = response_factory(503, text="down")
        created = create_source(client, url_source_payload)

        result = client.post(f"{API}/sources/{created['id']}/test").json()["result"]

        assert result["status"] == "503 Service Unavailable"
        assert result["error"] == "HTTP 503: Service Unavailable"

    def test_file_source_cannot_be_tested(self, client, file_source_payload):
        created = create_source(client, file_source_payload)

        assert client.post(f"{API}/sources/{created['id']}/test").status_code == 400


class TestFileView:

    def test_view_local_file(self, client, file_source_payload):
        created = create_source(client, file_source_payload)

        response = client.get(f"{API}/sources/{created['id']}/view")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["fileName"] == "orders.csv"
        assert data["contentType"] == "text/csv"
        assert data["encoding"] == "utf8"
        assert data["content"] == "id,total\n1,9.99\n2,19.99\n"
        assert data["fileSize"] == len(data["content"])
        assert data["lastViewed"]

        stored = client.get(f"{API}/sources/{created['id']}").json()["data"]
        assert stored["last_request_status"] == "File Read Success"
        assert stored["last_request_data"]["contentLength"] == len(data["content"])
        assert "content" not in stored["last_request_data"]

    def test_missing_file_persisted_then_404(self, client, tmp_path):
        created = create_source(client, {
            "name": "Gone",
            "type": "file",
            "config": {"path": str(tmp_path / "gone.csv")}
        })

        response = client.get(f"{API}/sources/{created['id']}/view")

        assert response.status_code == 404
        assert response.json()["error"] == "file not found"

        stored = client.get(f"{API}/sources/{created['id']}").json()["data"]
        assert stored["last_request_status"] == "File Read Error"
        assert stored["last_request_data"] is None
        assert stored["last_request_error"] == "file not found"

    def test_oversized_file_persisted_then_413(self, test_settings, tmp_path):
        settings = test_settings.model_copy(update={"MAX_FILE_VIEW_BYTES": 8})
        data_file = tmp_path / "big.txt"
        data_file.write_text("123456789", encoding="utf-8")

        with TestClient(create_app(settings)) as client:
            created = create_source(client, {
                "name": "Big",
                "type": "file",
                "config": {"path": str(data_file)}
            })

            response = client.get(f"{API}/sources/{created['id']}/view")
            stored = client.get(f"{API}/sources/{created['id']}").json()["data"]

        assert response.status_code == 413
        assert stored["last_request_status"] == "File Read Error"

    def test_url_source_cannot_be_viewed(self, client, url_source_payload):
        created = create_source(client, url_source_payload)

        assert client.get(f"{API}/sources/{created['id']}/view").status_code == 400


class TestUploads:

    def test_upload_register_and_view(self, client):
        response = client.post(
            f"{API}/upload/single",
            files={"file": ("orders.json", b'{"orders": [1]}', "application/json")}
        )

        assert response.status_code == 200
        info = response.json()["data"]
        assert info["originalName"] == "orders.json"
        assert info["mimetype"] == "application/json"
        assert info["relativePath"] == f"uploads/{info['filename']}"

        created = create_source(client, {
            "name": "Uploaded",
            "type": "file",
            "config": {"path": f"/{info['relativePath']}"}
        })
        assert created["config"]["location"] == "upload"

        view = client.get(f"{API}/sources/{created['id']}/view").json()["data"]
        assert view["content"] == '{"orders": [1]}'
        assert view["contentType"] == "application/json"

    def test_upload_multiple_list_delete(self, client):
        response = client.post(
            f"{API}/upload/multiple",
            files=[
                ("files", ("a.csv", b"a\n1\n", "text/csv")),
                ("files", ("b.txt", b"hello", "text/plain")),
            ]
        )
        assert response.status_code == 200
        assert len(response.json()["data"]) == 2

        listing = client.get(f"{API}/upload/files").json()
        assert listing["total"] == 2

        filename = listing["data"][0]["filename"]
        assert client.delete(f"{API}/upload/files/{filename}").status_code == 200
        assert client.get(f"{API}/upload/files").json()["total"] == 1
        assert client.delete(f"{API}/upload/files/{filename}").status_code == 404

    def test_too_many_files(self, client):
        files = [("files", (f"f{i}.txt", b"x", "text/plain")) for i in range(6)]

        response = client.post(f"{API}/upload/multiple", files=files)

        assert response.status_code == 400
        assert client.get(f"{API}/upload/files").json()["total"] == 0

    def test_oversized_upload(self, test_settings):
        settings = test_settings.model_copy(update={"MAX_UPLOAD_BYTES": 4})

        with TestClient(create_app(settings)) as client:
            response = client.post(
                f"{API}/upload/single",
                files={"file": ("big.txt", b"12345", "text/plain")}
            )
            listing = client.get(f"{API}/upload/files").json()

        assert response.status_code == 413
        assert listing["total"] == 0

    def test_oversized_file_in_batch_stores_nothing(self, test_settings):
        settings = test_settings.model_copy(update={"MAX_UPLOAD_BYTES": 4})

        with TestClient(create_app(settings)) as client:
            response = client.post(
                f"{API}/upload/multiple",
                files=[
                    ("files", ("ok.txt", b"abc", "text/plain")),
                    ("files", ("big.txt", b"123456", "text/plain")),
                ]
            )
            listing = client.get(f"{API}/upload/files").json()

        assert response.status_code == 413
        assert listing["total"] == 0

    def test_no_file(self, client):
        assert client.post(f"{API}/upload/single").status_code == 400

    def test_empty_listing(self, client):
        assert client.get(f"{API}/upload/files").json() == {"success": True, "data": [], "total": 0}


class TestProcessors:

    def test_crud(self, client):
        payload = {"name": "Cleaner", "description": "Drops blank rows", "input_source": "1"}

        response = client.post(f"{API}/processors", json=payload)
        assert response.status_code == 201
        created = response.json()["data"]

        assert client.get(f"{API}/processors/{created['id']}").json()["data"]["name"] == "Cleaner"
        assert client.get(f"{API}/processors").json()["total"] == 1

        response = client.put(
            f"{API}/processors/{created['id']}",
            json=dict(payload, name="Deduper")
        )
        assert response.json()["data"]["name"] == "Deduper"

        assert client.delete(f"{API}/processors/{created['id']}").status_code == 200
        assert client.get(f"{API}/processors/{created['id']}").status_code == 404

    def test_missing_fields_rejected(self, client):
        response = client.post(f"{API}/processors", json={"name": "Cleaner"})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_input_resolution(self, client, url_source_payload):
        source = create_source(client, url_source_payload)
        processor = client.post(f"{API}/processors", json={
            "name": "Cleaner", "description": "Drops blank rows", "input_source": str(source["id"])
        }).json()["data"]
        chained = client.post(f"{API}/processors", json={
            "name": "Chained", "description": "Reads the cleaner", "input_source": str(processor["id"] + 1)
        }).json()["data"]

        resolved = client.get(f"{API}/processors/{processor['id']}/input").json()["data"]
        assert resolved == {"kind": "source", "id": source["id"], "name": "Orders API"}

        # id 2 has no source, so it resolves to the processor table
        resolved = client.get(f"{API}/processors/{chained['id']}/input").json()["data"]
        assert resolved == {"kind": "processor", "id": chained["id"], "name": "Chained"}

    def test_execute_not_implemented(self, client):
        created = client.post(f"{API}/processors", json={
            "name": "Cleaner", "description": "Drops blank rows", "input_source": "1"
        }).json()["data"]

        response = client.post(f"{API}/processors/{created['id']}/execute")

        assert response.status_code == 501
        assert response.json()["success"] is False
        assert client.post(f"{API}/processors/999/execute").status_code == 404
