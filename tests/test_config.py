"""Tests for slsannotations.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from slsannotations.config import AnnotationsConfig, ConfigError, ServiceConfig, load_config
from slsannotations.models import InvocationSite


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, ServiceConfig)
    assert config.root == tmp_path.resolve()
    assert config.service == tmp_path.resolve().name
    assert config.provider_stage is None
    assert config.functions == {}
    assert config.annotations == AnnotationsConfig()
    assert config.annotations.pattern == "**/*.ts"
    assert config.annotations.ignore == ["src/shared"]
    assert config.annotations.handlers == {"handler": {}}
    assert config.annotations.invocation_site is InvocationSite.DECLARATION


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / "serverless.yml").write_text(
        """
service: shop
provider:
  name: aws
  stage: prod
  role: !GetAtt [LambdaRole, Arn]
functions:
  legacy:
    handler: legacy.default
custom:
  annotations:
    pattern: "src/**/*.ts"
    ignore: src/vendor
    handlers:
      Handler:
        memorySize: 512
      Job:
    invocation: decorator
resources:
  Outputs:
    Bucket:
      Value: !Ref Bucket
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path / "serverless.yml")

    assert config.service == "shop"
    assert config.provider_stage == "prod"
    assert config.functions == {"legacy": {"handler": "legacy.default"}}
    assert config.annotations.pattern == "src/**/*.ts"
    assert config.annotations.ignore == ["src/vendor"]
    assert config.annotations.handlers == {"Handler": {"memorySize": 512}, "Job": {}}
    assert config.annotations.invocation_site is InvocationSite.DECORATOR


def test_service_may_be_a_mapping_and_yaml_extension(tmp_path: Path) -> None:
    (tmp_path / "serverless.yaml").write_text("service:\n  name: billing\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.service == "billing"
    assert config.annotations.handlers == {"handler": {}}


@pytest.mark.parametrize(
    "content, message",
    [
        ("- just\n- a list\n", "mapping at the root"),
        ("custom:\n  annotations: [1]\n", "custom.annotations"),
        ("custom:\n  annotations:\n    handlers: [Handler]\n", "handlers"),
        ("custom:\n  annotations:\n    invocation: sometimes\n", "invocation"),
        ("functions: [a]\n", "functions"),
        ("service: [\n", "Failed to parse"),
    ],
)
def test_load_config_rejects_malformed_files(tmp_path: Path, content: str, message: str) -> None:
    (tmp_path / "serverless.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)
