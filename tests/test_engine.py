import pytest

from planning.engine import DependencyGraphEngine
from planning.errors import GraphTooLargeError
from planning.models import DependencyType


def test_engine_exposes_all_operations(fixture_project):
    tasks, deps = fixture_project
    engine = DependencyGraphEngine()

    assert not engine.validate_dependency(tasks, deps, 'task-5', 'task-1').valid
    assert engine.calculate_critical_path(tasks, deps).critical_path_duration == 5
    assert [t.id for t in engine.suggest_optimized_sequence(tasks, deps)][0] == 'task-1'
    assert len(engine.generate_dependency_graph(tasks, deps).edges) == 4

    dep = engine.create_dependency(tasks[3], tasks[4], 'finish-to-finish')
    assert dep.type is DependencyType.FINISH_TO_FINISH


def test_hours_per_day_override(fixture_project):
    tasks, deps = fixture_project
    result = DependencyGraphEngine(hours_per_day=4).calculate_critical_path(tasks, deps)
    assert result.critical_path_duration == 10


def test_size_guard_on_tasks(fixture_project):
    tasks, deps = fixture_project
    engine = DependencyGraphEngine(max_tasks=3)

    with pytest.raises(GraphTooLargeError):
        engine.calculate_critical_path(tasks, deps)
    with pytest.raises(GraphTooLargeError):
        engine.suggest_optimized_sequence(tasks, deps)
    with pytest.raises(GraphTooLargeError):
        engine.validate_dependency(tasks, deps, 'task-4', 'task-5')


def test_size_guard_on_dependencies(fixture_project):
    tasks, deps = fixture_project
    with pytest.raises(GraphTooLargeError):
        DependencyGraphEngine(max_dependencies=2).calculate_critical_path(tasks, deps)


def test_export_is_not_guarded(fixture_project):
    tasks, deps = fixture_project
    view = DependencyGraphEngine(max_tasks=1).generate_dependency_graph(tasks, deps)
    assert len(view.nodes) == 5


def test_engine_does_not_share_results_between_calls(fixture_project):
    tasks, deps = fixture_project
    engine = DependencyGraphEngine()
    first = engine.calculate_critical_path(tasks, deps)
    second = engine.calculate_critical_path(tasks, deps)
    assert first == second
    assert first is not second
    assert first.timings is not second.timings
