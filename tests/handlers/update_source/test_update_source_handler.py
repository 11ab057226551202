import json

from handlers.update_source.handler import handler


class TestUpdateSourceHandler:
    def test_update_returns_previous_source(
        self, lambda_context, json_event, hosted_image, dynamodb_get_item
    ) -> None:
        record = hosted_image("cat.png")

        first = handler(
            json_event({"id": record.filename, "source": "https://a"}, method="PUT"),
            lambda_context,
        )
        second = handler(
            json_event({"id": record.image_id, "source": "https://b"}, method="PUT"),
            lambda_context,
        )

        assert first["statusCode"] == 200
        assert json.loads(first["body"])["previous_source"] is None
        assert json.loads(second["body"]) == {
            "id": record.image_id,
            "source": "https://b",
            "previous_source": "https://a",
        }
        assert dynamodb_get_item(record.image_id)["source"] == "https://b"

    def test_null_source_clears(self, lambda_context, json_event, hosted_image, dynamodb_get_item) -> None:
        record = hosted_image("cat.png")
        handler(json_event({"id": record.image_id, "source": "https://a"}, method="PUT"), lambda_context)

        response = handler(json_event({"id": record.image_id, "source": None}, method="PUT"), lambda_context)

        assert response["statusCode"] == 200
        assert "source" not in dynamodb_get_item(record.image_id)

    def test_unknown_id_is_404_and_creates_nothing(
        self, lambda_context, json_event, aws_resources, dynamodb_count
    ) -> None:
        response = handler(json_event({"id": "ghost1", "source": "https://x"}, method="PUT"), lambda_context)

        assert response["statusCode"] == 404
        assert dynamodb_count() == 0

    def test_malformed_id_is_400(self, lambda_context, json_event, aws_resources) -> None:
        response = handler(json_event({"id": "../x", "source": "https://x"}, method="PUT"), lambda_context)

        assert response["statusCode"] == 400

    def test_requires_secret(self, lambda_context, json_event, aws_resources) -> None:
        response = handler(json_event({"id": "abc123", "source": "x"}, headers={}), lambda_context)

        assert response["statusCode"] == 401
