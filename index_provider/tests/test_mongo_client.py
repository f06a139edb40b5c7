"""
MongoDB connection bootstrap tests
No server needed: MongoClient is patched where a client would be built
"""

import pytest
from unittest.mock import patch
from pymongo.errors import InvalidURI

from index_provider.core.errors import ProviderConfigError
from index_provider.db.mongo import create_client, resolve_mongo_url, resolve_operation_timeout


class TestResolveMongoUrl:

    def test_explicit_url_wins(self, monkeypatch):
        monkeypatch.setenv("MONGODB_URL", "mongodb://env:27017")
        assert resolve_mongo_url("mongodb://config:27017") == "mongodb://config:27017"

    def test_environment_fallback(self, monkeypatch):
        monkeypatch.setenv("MONGODB_URL", "mongodb://env:27017")
        assert resolve_mongo_url() == "mongodb://env:27017"

    def test_missing_url(self, monkeypatch):
        monkeypatch.delenv("MONGODB_URL", raising=False)
        with pytest.raises(ProviderConfigError, match="MONGODB_URL"):
            resolve_mongo_url()

    def test_explicit_empty_url(self, monkeypatch):
        monkeypatch.setenv("MONGODB_URL", "mongodb://env:27017")
        with pytest.raises(ProviderConfigError):
            resolve_mongo_url("")


class TestResolveOperationTimeout:

    def test_unset_means_no_deadline(self, monkeypatch):
        monkeypatch.delenv("INDEX_OPERATION_TIMEOUT_SECONDS", raising=False)
        assert resolve_operation_timeout() is None

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("INDEX_OPERATION_TIMEOUT_SECONDS", "2.5")
        assert resolve_operation_timeout() == 2.5

    def test_explicit_value_wins(self, monkeypatch):
        monkeypatch.setenv("INDEX_OPERATION_TIMEOUT_SECONDS", "2.5")
        assert resolve_operation_timeout(10) == 10

    @pytest.mark.parametrize("raw", ["soon", "-1"])
    def test_invalid_values(self, monkeypatch, raw):
        monkeypatch.setenv("INDEX_OPERATION_TIMEOUT_SECONDS", raw)
        with pytest.raises(ProviderConfigError):
            resolve_operation_timeout()


class TestCreateClient:

    def test_client_uses_stable_api(self):
        with patch("index_provider.db.mongo.MongoClient") as mongo_client:
            client = create_client("mongodb://localhost:27017")

        assert client is mongo_client.return_value
        args, kwargs = mongo_client.call_args
        assert args == ("mongodb://localhost:27017",)
        assert kwargs["server_api"].version == "1"

    def test_unusable_url(self):
        with patch("index_provider.db.mongo.MongoClient", side_effect=InvalidURI("bad uri")):
            with pytest.raises(ProviderConfigError, match="Unable to Create MongoDB Client"):
                create_client("not-a-uri")
