import base64

from core.services.metadata import MetadataService
from handlers.get_source.handler import handler


class TestGetSourceHandler:
    def test_redirects_to_recorded_source(self, lambda_context, path_event, hosted_image) -> None:
        record = hosted_image("cat.png")
        MetadataService().set_source(record.image_id, "https://example.com/cat")

        response = handler(path_event(record.filename), lambda_context)

        assert response["statusCode"] == 302
        assert response["headers"]["Location"] == "https://example.com/cat"

    def test_serves_local_copy_without_source(
        self, lambda_context, path_event, hosted_image, sample_image_binary
    ) -> None:
        record = hosted_image("cat.png")

        response = handler(path_event(record.image_id), lambda_context)

        assert response["statusCode"] == 200
        assert base64.b64decode(response["body"]) == sample_image_binary

    def test_unknown_is_not_found(self, lambda_context, path_event, aws_resources) -> None:
        response = handler(path_event("ghost1"), lambda_context)

        assert response["statusCode"] == 404

    def test_traversal_is_not_found(self, lambda_context, path_event, aws_resources) -> None:
        response = handler(path_event("../ghost1"), lambda_context)

        assert response["statusCode"] == 404
