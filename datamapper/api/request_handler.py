"""Request-style entry point: two references and two toggles in, one payload out."""
import logging
from typing import Any, Dict, Optional

from config import AppConfig, app_config
from datamapper.exceptions import DocumentLoadError, InvalidConfigError, MappingError
from datamapper.mapper.engine import DataMapper, MapOptions
from datamapper.parser.loader import DocumentLoader

logger = logging.getLogger(__name__)


class MappingRequestHandler:
    """Runs mapping requests and turns fatal errors into error payloads."""

    def __init__(self, mapper: Optional[DataMapper] = None, settings: Optional[AppConfig] = None):
        """
        Initialize handler

        Args:
            mapper: Engine to run; built from settings when omitted
            settings: Application settings (directories, timeouts, defaults)
        """
        self.settings = settings or app_config
        self.mapper = mapper or DataMapper(
            config_loader=DocumentLoader(self.settings.config_dir, self.settings.http_timeout),
            data_loader=DocumentLoader(self.settings.data_dir, self.settings.http_timeout),
        )

    def handle(
        self,
        config_ref: str,
        data_ref: str,
        dry_run: Optional[bool] = None,
        json_dry_run_output: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """
        Handle one mapping request

        Toggles left as None fall back to the configured defaults.

        Returns:
            The selected payload, or {"error": {"type", "message", ...}}
        """
        options = MapOptions(
            dry_run=self.settings.dry_run if dry_run is None else dry_run,
            json_dry_run_output=self.settings.json_output if json_dry_run_output is None else json_dry_run_output,
        )

        try:
            return self.mapper.map_data(config_ref, data_ref, options)
        except MappingError as e:
            logger.error(f"Mapping request failed: {e}")
            return self.error_payload(e)

    @staticmethod
    def error_payload(error: MappingError) -> Dict[str, Any]:
        if isinstance(error, InvalidConfigError):
            kind = "INVALID_CONFIG"
        elif isinstance(error, DocumentLoadError):
            kind = "LOAD_FAILED"
        else:
            kind = "MAPPING_FAILED"

        body = {"type": kind, "message": str(error)}
        location = getattr(error, "location", None)
        if location:
            body["location"] = location
        return {"error": body}
