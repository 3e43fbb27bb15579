"""JSON exporter."""
import json
from pathlib import Path
from datetime import datetime
from typing import List, Dict, Any

from tradein_mapping.mapper.mapping import MappingRule


class JsonExporter:
    """Export transformed payloads to JSON."""

    def export(
        self,
        output_file: Path,
        payloads: List[Dict[str, Any]],
        mappings: List[MappingRule],
    ) -> None:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "metadata": {
                "created_at": datetime.now().isoformat(),
                "total_payloads": len(payloads),
                "total_mappings": len(mappings),
            },
            "mappings": [m.to_dict() for m in mappings],
            "payloads": payloads,
        }

        with open(output_file, "w") as f:
            json.dump(data, f, indent=2, default=str)
