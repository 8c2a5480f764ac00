import httpx
import pytest

from kcadmin.dispatch.returns import map_response
from kcadmin.models.errors import DecodeError, HttpStatusError
from kcadmin.models.response import Response, created_id
from kcadmin.resources.representations import RealmRepresentation


def envelope(status=200, body='{"realm": "demo"}', headers=None) -> Response:
    if headers is None:
        headers = {"Content-Type": "application/json; charset=utf-8"}
    raw = httpx.Response(status, headers=headers, content=body.encode("utf-8"))
    return map_response(Response, raw)


class TestResponseEnvelope:
    """Test the buffered response envelope."""

    def test_envelope_captures_exchange(self):
        # Act
        response = envelope()

        # Assert
        assert response.status == 200
        assert response.ok
        assert response.status_family == 2
        assert response.content_type == "application/json"
        assert response.body == '{"realm": "demo"}'
        assert response.has_body
        assert response.length == len('{"realm": "demo"}')

    def test_read_decodes_on_demand(self):
        # Arrange
        response = envelope()

        # Act
        realm = response.read(RealmRepresentation)
        as_dict = response.read(dict)

        # Assert
        assert realm.realm == "demo"
        assert as_dict == {"realm": "demo"}

    def test_read_text_passes_through(self):
        response = envelope(body="not json", headers={"Content-Type": "text/plain"})
        assert response.read() == "not json"
        assert response.read(str) == "not json"

    def test_read_mismatch_raises_decode_error(self):
        response = envelope(body="not json")
        with pytest.raises(DecodeError):
            response.read(RealmRepresentation)

    def test_read_without_body(self):
        assert Response(204).read(RealmRepresentation) is None

    def test_repeated_headers_are_joined(self):
        # Arrange
        response = envelope(
            headers=[("Allow", "GET"), ("Allow", "PUT, DELETE"), ("ETag", '"v1"')]
        )

        # Act & Assert
        assert response.header("allow") == "GET,PUT, DELETE"
        assert response.allowed_methods == {"GET", "PUT", "DELETE"}
        assert response.etag == '"v1"'
        assert response.header("Missing") is None
        assert response.headers.get_list("Allow") == ["GET", "PUT, DELETE"]

    def test_headers_cannot_be_mutated_through_accessor(self):
        response = envelope()
        response.headers["X-Injected"] = "1"
        assert response.header("X-Injected") is None

    def test_missing_content_type(self):
        response = envelope(headers={}, body="")
        assert response.content_type is None
        assert not response.has_body


class TestCreatedId:
    def test_id_from_location(self):
        response = envelope(
            status=201,
            body="",
            headers={"Location": "https://host/admin/realms/demo/users/5f1c-77"},
        )
        assert created_id(response) == "5f1c-77"

    def test_non_created_status(self):
        with pytest.raises(HttpStatusError):
            created_id(envelope(status=200))

    def test_missing_location(self):
        with pytest.raises(DecodeError):
            created_id(envelope(status=201, body="", headers={}))
