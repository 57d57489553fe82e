"""Configuração da aplicação."""
import os
from dataclasses import dataclass


def _env_flag(name: str, default: bool) -> bool:
    """Lê flag booleana de variável de ambiente."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AppConfig:
    """Configuração da aplicação."""

    config_dir: str = "./resources"
    data_dir: str = "./resources"
    output_dir: str = "./output"
    dry_run: bool = False
    json_output: bool = False
    http_timeout: int = 30
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Carrega config de variáveis de ambiente."""
        return cls(
            config_dir=os.getenv("MAPPER_CONFIG_DIR", "./resources"),
            data_dir=os.getenv("MAPPER_DATA_DIR", "./resources"),
            output_dir=os.getenv("MAPPER_OUTPUT_DIR", "./output"),
            dry_run=_env_flag("MAPPER_DRY_RUN", False),
            json_output=_env_flag("MAPPER_JSON_OUTPUT", False),
            http_timeout=int(os.getenv("MAPPER_HTTP_TIMEOUT", "30")),
            log_level=os.getenv("MAPPER_LOG_LEVEL", "WARNING").upper(),
        )


# Instância global
app_config = AppConfig.from_env()
