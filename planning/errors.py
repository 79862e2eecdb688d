"""
Исключения движка графа зависимостей
"""


class DependencyGraphError(ValueError):
    """Базовая ошибка расчета графа зависимостей."""


class CycleDetectedError(DependencyGraphError):
    """Граф зависимостей содержит цикл (валидация была пропущена)."""

    def __init__(self, task_ids):
        self.task_ids = list(task_ids)
        super().__init__(
            f"Circular dependency detected between tasks: {', '.join(str(t) for t in self.task_ids)}"
        )


class GraphTooLargeError(DependencyGraphError):
    """Проект превышает допустимый размер графа."""
