import pytest
from botocore.exceptions import ClientError
from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, registry_client_config
from core.utils.constants import ENV_IMAGE_REGISTRY_TABLE_NAME


class TestRegistryClientConfig:
    def test_bounded_and_single_attempt(self):
        config = registry_client_config()

        assert config.connect_timeout == 2
        assert config.read_timeout == 5
        assert config.max_pool_connections == 10
        assert config.retries["total_max_attempts"] == 1


class TestDynamoDBAdapter:
    def test_init_missing_table_env(self, monkeypatch):
        monkeypatch.delenv(ENV_IMAGE_REGISTRY_TABLE_NAME, raising=False)

        with pytest.raises(RuntimeError):
            DynamoDBAdapter()

    def test_put_and_get_item_success(self, dynamodb_table):
        adapter = DynamoDBAdapter()

        item = {
            "image_id": "abc123",
            "extension": ".png",
        }

        adapter.put_item(item=item)

        response = adapter.get_item(key={"image_id": "abc123"})

        assert response["Item"]["image_id"] == "abc123"
        assert response["Item"]["extension"] == ".png"

    def test_put_item_with_condition_expression(self, dynamodb_table):
        adapter = DynamoDBAdapter()

        item = {
            "image_id": "cond01",
            "extension": ".png",
        }

        adapter.put_item(
            item=item,
            condition_expression="attribute_not_exists(image_id)",
        )

        with pytest.raises(ClientError) as exc:
            adapter.put_item(
                item=item,
                condition_expression="attribute_not_exists(image_id)",
            )

        assert exc.value.response["Error"]["Code"] == "ConditionalCheckFailedException"

    def test_update_item(self, dynamodb_table):
        adapter = DynamoDBAdapter()
        adapter.put_item(item={"image_id": "upd001", "extension": ".gif"})

        adapter.update_item(
            Key={"image_id": "upd001"},
            UpdateExpression="SET #source = :source",
            ExpressionAttributeNames={"#source": "source"},
            ExpressionAttributeValues={":source": "https://example.com"},
        )

        assert adapter.get_item(key={"image_id": "upd001"})["Item"]["source"] == "https://example.com"

    def test_delete_item_success(self, dynamodb_table):
        adapter = DynamoDBAdapter()

        adapter.put_item(item={"image_id": "del001"})
        adapter.delete_item(key={"image_id": "del001"})

        response = adapter.get_item(key={"image_id": "del001"})
        assert "Item" not in response

    def test_batch_get_item(self, dynamodb_table):
        adapter = DynamoDBAdapter()
        adapter.put_item(item={"image_id": "bat001", "extension": ".png"})
        adapter.put_item(item={"image_id": "bat002", "extension": ".jpg"})

        response = adapter.batch_get_item(
            keys=[{"image_id": "bat001"}, {"image_id": "bat002"}, {"image_id": "nope00"}]
        )

        items = response["Responses"][dynamodb_table.name]
        assert sorted(i["image_id"] for i in items) == ["bat001", "bat002"]

    def test_scan_returns_items(self, dynamodb_table):
        adapter = DynamoDBAdapter()
        adapter.put_item(item={"image_id": "scn001", "extension": ".png"})
        adapter.put_item(item={"image_id": "scn002", "extension": ".png"})

        response = adapter.scan()

        assert len(response["Items"]) == 2

    def test_get_item_bubbles_client_error(self, monkeypatch, dynamodb_table):
        adapter = DynamoDBAdapter()

        def raise_error(**_):
            raise ClientError(
                {"Error": {"Code": "InternalError"}},
                "GetItem",
            )

        monkeypatch.setattr(adapter.table, "get_item", raise_error)

        with pytest.raises(ClientError):
            adapter.get_item(key={"image_id": "x"})

    def test_delete_item_bubbles_client_error(self, monkeypatch, dynamodb_table):
        adapter = DynamoDBAdapter()

        def raise_error(**_):
            raise ClientError(
                {"Error": {"Code": "InternalError"}},
                "DeleteItem",
            )

        monkeypatch.setattr(adapter.table, "delete_item", raise_error)

        with pytest.raises(ClientError):
            adapter.delete_item(key={"image_id": "x"})
