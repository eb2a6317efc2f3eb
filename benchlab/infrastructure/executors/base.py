import json
from abc import ABC
from datetime import datetime
from typing import Any

from jinja2 import StrictUndefined, Template, UndefinedError

from ...domain.contracts.config import WorkloadSpec
from ...domain.contracts.executor import ExecutorContract
from ...domain.contracts.results import ScoreRecord
from ...domain.errors import BenchLabError


class ExecutorError(BenchLabError):
    pass


class Executor(ExecutorContract, ABC):
    def template_context(
        self, workload: WorkloadSpec, browser_flags: list[str]
    ) -> dict[str, Any]:
        return {
            **workload.options,
            "workload": workload.name,
            "run_times": workload.run_times,
            "flags": " ".join(browser_flags),
        }

    def render(self, template: str, context: dict[str, Any]) -> str:
        try:
            return Template(template, undefined=StrictUndefined).render(**context)
        except UndefinedError as e:
            raise ExecutorError(f"Missing workload option: {e}")

    def parse_score_record(self, output: str | bytes) -> ScoreRecord:
        try:
            data = json.loads(output)
        except ValueError as e:
            raise ExecutorError(f"Executor output is not valid JSON: {e}")

        if not isinstance(data, dict):
            raise ExecutorError(
                f"Executor output must be a JSON object, got {type(data).__name__}"
            )

        # Drivers may emit {"scores": {...}, "date": ...} or a bare score mapping.
        scores = data.get("scores", data)
        if not isinstance(scores, dict):
            raise ExecutorError("Executor output 'scores' must be a JSON object")

        date = data.get("date") or datetime.now().isoformat()
        return ScoreRecord(
            scores={k: v for k, v in scores.items() if k != "date"},
            date=str(date),
        )
