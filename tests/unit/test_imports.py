"""Import-level checks for the public package surface."""

import importlib

import pytest

import civitai_client
from civitai_client.kernel.errors import ErrorCode
from civitai_client.kernel.result import Error

MODULES = [
    "civitai_client.client",
    "civitai_client.config",
    "civitai_client.generation",
    "civitai_client.http",
    "civitai_client.kernel",
    "civitai_client.logging_config",
    "civitai_client.query",
    "civitai_client.schemas",
]


class TestPackageImports:
    @pytest.mark.parametrize("name", MODULES)
    def test_module_imports(self, name):
        assert importlib.import_module(name) is not None

    def test_public_names_resolve(self):
        assert civitai_client.__version__
        for name in civitai_client.__all__:
            assert hasattr(civitai_client, name), name

    def test_error_field_errors_default_is_per_instance(self):
        """`field` is a regular attribute on Error and does not shadow the dataclass helper."""
        first = Error(ErrorCode.INVALID_QUERY_PARAMETER, "bad", field="limit")
        second = Error(ErrorCode.INVALID_QUERY_PARAMETER, "bad")
        first.errors["limit"] = ["too large"]
        assert first.field == "limit"
        assert second.errors == {}
