from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Priority(Enum):
    """Приоритет задачи (порядковая шкала)."""
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    URGENT = 'urgent'

    @property
    def rank(self):
        return _PRIORITY_RANKS[self]


_PRIORITY_RANKS = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.URGENT: 3,
}


class DependencyType(Enum):
    """Тип связи между задачами."""
    FINISH_TO_START = 'finish-to-start'
    START_TO_START = 'start-to-start'
    FINISH_TO_FINISH = 'finish-to-finish'
    START_TO_FINISH = 'start-to-finish'


def coerce_date(value):
    """
    Приводит значение к datetime.date.

    Args:
        value: None, date, datetime или строка в формате ISO

    Returns:
        date или None
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
        except ValueError:
            raise ValueError(f"Invalid date string: {value!r}")
    raise ValueError(f"Invalid date type: {type(value)}")


@dataclass(frozen=True)
class Task:
    """Модель задачи (неизменяемый снимок)."""
    id: Any
    title: str
    status: str = 'todo'
    priority: Priority = Priority.MEDIUM
    project_id: Any = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = None

    def __post_init__(self):
        # Нормализуем входные значения, не меняя интерфейс dataclass
        if not isinstance(self.priority, Priority):
            object.__setattr__(self, 'priority', Priority(str(self.priority).lower()))
        object.__setattr__(self, 'start_date', coerce_date(self.start_date))
        object.__setattr__(self, 'due_date', coerce_date(self.due_date))
        if self.estimated_hours is not None:
            if self.estimated_hours < 0:
                raise ValueError(f"Task {self.id}: estimated_hours must be >= 0")

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            title=data.get('title', data.get('name', '')),
            status=data.get('status', 'todo'),
            priority=data.get('priority') or Priority.MEDIUM,
            project_id=data.get('projectId', data.get('project_id')),
            start_date=data.get('startDate', data.get('start_date')),
            due_date=data.get('dueDate', data.get('due_date')),
            estimated_hours=data.get('estimatedHours', data.get('estimated_hours')),
        )


@dataclass(frozen=True)
class Dependency:
    """Модель зависимости между задачами: ребро from -> to."""
    id: Any
    from_task_id: Any
    to_task_id: Any
    type: DependencyType = DependencyType.FINISH_TO_START

    def __post_init__(self):
        if not isinstance(self.type, DependencyType):
            object.__setattr__(self, 'type', DependencyType(self.type))

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get('id'),
            from_task_id=data.get('fromTaskId', data.get('from_task_id')),
            to_task_id=data.get('toTaskId', data.get('to_task_id')),
            type=data.get('type') or DependencyType.FINISH_TO_START,
        )


@dataclass(frozen=True)
class ValidationResult:
    """Результат проверки новой зависимости."""
    valid: bool
    message: Optional[str] = None

    def __bool__(self):
        return self.valid

    def to_dict(self):
        if self.valid:
            return {'valid': True}
        return {'valid': False, 'message': self.message}


@dataclass(frozen=True)
class TimingResult:
    """Параметры сетевой модели для одной задачи."""
    task_id: Any
    duration: float
    earliest_start: float
    earliest_finish: float
    latest_start: float
    latest_finish: float
    slack: float
    is_critical: bool = False


@dataclass(frozen=True)
class CriticalPathResult:
    """Результат расчета критического пути."""
    critical_path_duration: float
    critical_tasks: List[Task] = field(default_factory=list)
    timings: Dict[Any, TimingResult] = field(default_factory=dict)
    slack_tasks: List[Task] = field(default_factory=list)
    order: List[Any] = field(default_factory=list)

    @property
    def project_duration(self):
        return self.critical_path_duration

    def is_critical(self, task_id):
        timing = self.timings.get(task_id)
        return bool(timing and timing.is_critical)


@dataclass(frozen=True)
class GraphNode:
    id: Any
    label: str
    status: str
    priority: str

    def to_dict(self):
        return {
            'id': self.id,
            'label': self.label,
            'status': self.status,
            'priority': self.priority
        }


@dataclass(frozen=True)
class GraphEdge:
    id: Any
    from_task_id: Any
    to_task_id: Any
    type: str
    label: str

    def to_dict(self):
        return {
            'id': self.id,
            'from': self.from_task_id,
            'to': self.to_task_id,
            'type': self.type,
            'label': self.label
        }


@dataclass(frozen=True)
class GraphView:
    """Граф зависимостей для внешней визуализации."""
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def to_dict(self):
        return {
            'nodes': [node.to_dict() for node in self.nodes],
            'edges': [edge.to_dict() for edge in self.edges]
        }
