"""JSON exporter."""
import json
from pathlib import Path
from typing import Any, Dict


class JsonExporter:
    """Export mapping payloads to JSON."""

    @staticmethod
    def dumps(payload: Dict[str, Any]) -> str:
        """Serialize a payload; key order is preserved."""
        return json.dumps(payload, indent=2, ensure_ascii=False, default=str)

    def export(self, output_file: Path, payload: Dict[str, Any]) -> None:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, "w", encoding="utf-8") as f:
            f.write(self.dumps(payload))
            f.write("\n")
