import os

# In-memory database for every test session, set before config is imported
os.environ["DATABASE_URL"] = "sqlite://"

import pytest

from planning.models import Dependency, DependencyType, Task


@pytest.fixture
def make_task():
    """Factory for tasks whose duration in days equals `days` at 8 hours per day."""
    def _make(task_id, days=1, **kwargs):
        kwargs.setdefault('title', task_id.upper() if isinstance(task_id, str) else str(task_id))
        kwargs.setdefault('estimated_hours', days * 8)
        return Task(id=task_id, **kwargs)
    return _make


@pytest.fixture
def make_dep():
    def _make(from_id, to_id, dependency_type=DependencyType.FINISH_TO_START):
        return Dependency(
            id=f"dep-{from_id}-{to_id}",
            from_task_id=from_id,
            to_task_id=to_id,
            type=dependency_type
        )
    return _make


@pytest.fixture
def fixture_project(make_task, make_dep):
    """Five tasks: task-1 -> task-2 -> task-3 -> task-5 and task-1 -> task-4."""
    tasks = [
        make_task('task-1', 1, title='Requirements'),
        make_task('task-2', 2, title='Design'),
        make_task('task-3', 1, title='Implementation'),
        make_task('task-4', 1, title='Documentation'),
        make_task('task-5', 1, title='Release'),
    ]
    dependencies = [
        make_dep('task-1', 'task-2'),
        make_dep('task-2', 'task-3'),
        make_dep('task-3', 'task-5'),
        make_dep('task-1', 'task-4'),
    ]
    return tasks, dependencies


@pytest.fixture
def db():
    from database.models import Base
    from database.operations import engine

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
