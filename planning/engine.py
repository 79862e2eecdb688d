"""
Фасад движка графа зависимостей.

Экземпляр создается на каждый запрос: после конструктора объект не хранит
изменяемого состояния, поэтому параллельные вызовы не требуют синхронизации.
"""
import config
from logger import logger
from planning.errors import GraphTooLargeError
from planning.network import calculate_critical_path
from planning.sequence import suggest_optimized_sequence
from planning.validation import create_dependency, validate_dependency
from planning.visualization import generate_dependency_graph


class DependencyGraphEngine:
    """Операции над графом зависимостей проекта."""

    def __init__(self, hours_per_day=None, max_tasks=None, max_dependencies=None):
        self.hours_per_day = hours_per_day or config.HOURS_PER_DAY
        self.max_tasks = max_tasks if max_tasks is not None else config.MAX_GRAPH_TASKS
        self.max_dependencies = (
            max_dependencies if max_dependencies is not None else config.MAX_GRAPH_DEPENDENCIES
        )

    def _check_size(self, tasks, dependencies):
        if len(tasks) > self.max_tasks:
            logger.warning(f"Проект содержит {len(tasks)} задач, допустимо {self.max_tasks}")
            raise GraphTooLargeError(
                f"Project has {len(tasks)} tasks, the limit is {self.max_tasks}"
            )
        if len(dependencies) > self.max_dependencies:
            logger.warning(f"Проект содержит {len(dependencies)} зависимостей, допустимо {self.max_dependencies}")
            raise GraphTooLargeError(
                f"Project has {len(dependencies)} dependencies, the limit is {self.max_dependencies}"
            )

    def create_dependency(self, from_task, to_task, type):
        return create_dependency(from_task, to_task, type)

    def validate_dependency(self, tasks, dependencies, from_task_id, to_task_id):
        self._check_size(tasks, dependencies)
        return validate_dependency(tasks, dependencies, from_task_id, to_task_id)

    def calculate_critical_path(self, tasks, dependencies, project_start=None):
        self._check_size(tasks, dependencies)
        return calculate_critical_path(tasks, dependencies, self.hours_per_day, project_start)

    def suggest_optimized_sequence(self, tasks, dependencies):
        self._check_size(tasks, dependencies)
        return suggest_optimized_sequence(tasks, dependencies, self.hours_per_day)

    def generate_dependency_graph(self, tasks, dependencies):
        return generate_dependency_graph(tasks, dependencies)
