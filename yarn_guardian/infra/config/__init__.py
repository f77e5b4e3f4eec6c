"""YAML 설정 인프라 (ConfigPort 구현)."""

from yarn_guardian.infra.config.yaml_config_loader import YamlConfigLoader

__all__ = ["YamlConfigLoader"]
