"""Summary Service — natural-language digest of the newest tasks.

Invariants:
    - Empty store -> {"summary": "No tasks available to summarize.", "tasks": []}
    - Digest lines are "#{n} {title}: {description}", colon segment omitted
      when the description is empty or absent
    - Non-empty result is {"summary": ..., "count": n}
"""

import logging

from taskhub.core.ports import Summarizer, TaskStore
from taskhub.models.task import Task

logger = logging.getLogger(__name__)

NO_TASKS_MESSAGE = "No tasks available to summarize."


def build_task_digest(tasks: list[Task]) -> str:
    """Numbered, one-line-per-task text block fed to the summarizer."""
    lines = []
    for n, task in enumerate(tasks, start=1):
        line = f"#{n} {task.title}"
        if task.description:
            line += f": {task.description}"
        lines.append(line)
    return "\n".join(lines)


class SummaryService:
    def __init__(self, tasks: TaskStore, summarizer: Summarizer):
        self.tasks = tasks
        self.summarizer = summarizer

    async def summarize_newest(self, limit: int) -> dict:
        tasks = await self.tasks.find_newest(limit)
        if not tasks:
            return {"summary": NO_TASKS_MESSAGE, "tasks": []}

        summary = await self.summarizer.summarize(build_task_digest(tasks))
        logger.info(
            "Task summary generated",
            extra={"event": "TASKS_SUMMARY_GENERATED", "count": len(tasks)},
        )
        return {"summary": summary, "count": len(tasks)}
