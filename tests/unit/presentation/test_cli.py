"""Unit tests for the command line tools"""

import json
import httpx
import pytest
from click.testing import CliRunner

from shared.config.settings import Settings
from ragflow_bridge.infrastructure.external.ragflow_client import RAGFlowClient
from ragflow_bridge.presentation import cli as cli_module

DATASETS = [
    {"id": "ds-1", "name": "Manuals", "document_count": 3, "chunk_count": 40, "chunk_method": "naive"},
]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def configure(monkeypatch):
    """Point the CLI at a RAGFlow answered by ``handler``"""
    requests = []

    def _configure(handler, api_key="ragflow-secret-key"):
        def recording_handler(request):
            requests.append(request)
            return handler(request)

        monkeypatch.setattr(cli_module, "settings", Settings(
            ragflow_instance_name="local", ragflow_api_url="http://ragflow.test", ragflow_api_key=api_key
        ))
        monkeypatch.setattr(cli_module, "create_ragflow_client", lambda instance: RAGFlowClient(
            instance, http_client=httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
        ))
        return requests

    return _configure


def healthy(request):
    return httpx.Response(200, json={"code": 0, "data": DATASETS})


def unavailable(request):
    return httpx.Response(200, json={"code": 401, "message": "Authentication error: API key is invalid!"})


class TestHealthCheck:
    """Test health-check"""

    def test_json_output(self, runner, configure):
        configure(healthy)

        result = runner.invoke(cli_module.cli, ["health-check", "--output", "json"])

        assert result.exit_code == 0
        report = json.loads(result.output)
        assert report["name"] == "local"
        assert report["status"] == "healthy"
        assert report["response_time_ms"] >= 0

    def test_unhealthy_exits_with_error(self, runner, configure):
        configure(unavailable)

        result = runner.invoke(cli_module.cli, ["health-check", "-o", "json"])

        assert result.exit_code == 1
        assert "API key is invalid" in json.loads(result.output)["message"]

    def test_table_output(self, runner, configure):
        configure(healthy)

        result = runner.invoke(cli_module.cli, ["health-check"])

        assert result.exit_code == 0
        assert "healthy" in result.output


class TestTestInstance:
    """Test test-instance"""

    def test_success(self, runner, configure):
        configure(healthy)

        result = runner.invoke(cli_module.cli, ["test-instance", "--timeout", "2"])

        assert result.exit_code == 0
        assert "Testing local at http://ragflow.test" in result.output
        assert "Connection succeeded" in result.output

    def test_failure(self, runner, configure):
        configure(unavailable)

        result = runner.invoke(cli_module.cli, ["test-instance"])

        assert result.exit_code == 1


class TestListDatasets:
    """Test list-datasets"""

    def test_json_output_and_paging(self, runner, configure):
        requests = configure(healthy)

        result = runner.invoke(cli_module.cli, ["list-datasets", "--page", "2", "--limit", "5", "-o", "json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == DATASETS
        assert requests[0].url.params["page"] == "2"
        assert requests[0].url.params["page_size"] == "5"

    def test_empty(self, runner, configure):
        configure(lambda request: httpx.Response(200, json={"code": 0, "data": []}))

        result = runner.invoke(cli_module.cli, ["list-datasets"])

        assert result.exit_code == 0
        assert "No datasets found" in result.output

    def test_remote_error(self, runner, configure):
        configure(unavailable)

        result = runner.invoke(cli_module.cli, ["list-datasets"])

        assert result.exit_code == 1

    def test_rejects_page_zero(self, runner, configure):
        configure(healthy)

        result = runner.invoke(cli_module.cli, ["list-datasets", "--page", "0"])

        assert result.exit_code == 2


class TestShowInstance:
    """Test show-instance"""

    def test_masks_api_key(self, runner, configure):
        configure(healthy)

        result = runner.invoke(cli_module.cli, ["show-instance", "-o", "json"])

        details = json.loads(result.output)
        assert details["api_key"] == "ragf..."
        assert details["api_url"] == "http://ragflow.test"

    def test_missing_api_key(self, runner, configure):
        configure(healthy, api_key="")

        result = runner.invoke(cli_module.cli, ["show-instance", "-o", "json"])

        assert json.loads(result.output)["api_key"] == "not set"
