"""Report generator for selected runs.

Renders a SelectionResult as plain run names or as a JSON document.
"""

import json
from typing import Any

from ..runner.selector import SelectionResult

FORMATS = ("text", "json")


class RunReporter:
    """Renders selected runs for stdout."""

    def generate(self, result: SelectionResult) -> dict[str, Any]:
        """Generate a report dictionary ready for JSON serialization."""
        return {
            "project": result.project.name,
            "count": len(result.runs),
            "runs": [
                {
                    "id": run.id,
                    "name": run.name,
                    "plan_id": run.plan_id,
                    "standalone": run.is_standalone,
                    "config_ids": sorted(run.config_ids),
                }
                for run in result.runs
            ],
        }

    def render(self, result: SelectionResult, output_format: str = "text") -> str:
        """Render the result in the given format.

        The text format is one run name per line, and an empty
        string when nothing matched.
        """
        if output_format == "json":
            return json.dumps(self.generate(result), ensure_ascii=False) + "\n"
        if output_format != "text":
            raise ValueError(f"Unknown output format: {output_format}")

        return "".join(f"{name}\n" for name in result.run_names)
