import random
from datetime import date

import pytest

from planning.errors import CycleDetectedError
from planning.models import Dependency, DependencyType, Task
from planning.sequence import suggest_optimized_sequence


def ids(tasks):
    return [task.id for task in tasks]


def assert_respects_dependencies(sequence, deps):
    position = {task.id: i for i, task in enumerate(sequence)}
    for dep in deps:
        assert position[dep.from_task_id] < position[dep.to_task_id]


def test_fixture_sequence(fixture_project):
    tasks, deps = fixture_project
    sequence = suggest_optimized_sequence(tasks, deps)

    assert ids(sequence) == ['task-1', 'task-2', 'task-3', 'task-5', 'task-4']
    assert_respects_dependencies(sequence, deps)


def test_empty_input():
    assert suggest_optimized_sequence([], []) == []


def test_critical_before_priority(make_task):
    tasks = [make_task('n', 1, priority='urgent'), make_task('c', 5, priority='low')]
    assert ids(suggest_optimized_sequence(tasks, [])) == ['c', 'n']


def test_higher_priority_first(make_task):
    tasks = [make_task('p', 5), make_task('a', 1, priority='low'), make_task('b', 1, priority='high')]
    assert ids(suggest_optimized_sequence(tasks, [])) == ['p', 'b', 'a']


def test_earlier_due_date_first(make_task):
    tasks = [
        make_task('p', 5),
        make_task('late', 1, due_date=date(2025, 6, 1)),
        make_task('none', 1),
        make_task('early', 1, due_date=date(2025, 5, 1)),
    ]
    assert ids(suggest_optimized_sequence(tasks, [])) == ['p', 'early', 'late', 'none']


def test_id_breaks_remaining_ties(make_task):
    tasks = [make_task('b', 2), make_task('a', 2)]
    assert ids(suggest_optimized_sequence(tasks, [])) == ['a', 'b']


def test_mixed_id_types_are_ordered(make_task):
    tasks = [make_task('x', 2), make_task(1, 2)]
    assert ids(suggest_optimized_sequence(tasks, [])) == [1, 'x']


def test_successor_waits_for_all_predecessors(make_task, make_dep):
    tasks = [
        make_task('a', 1),
        make_task('b', 1, priority='urgent'),
        make_task('c', 3),
    ]
    deps = [make_dep('a', 'b'), make_dep('c', 'b')]
    sequence = suggest_optimized_sequence(tasks, deps)

    assert ids(sequence)[-1] == 'b'
    assert ids(sequence) == ['c', 'a', 'b']


def test_non_finish_to_start_edges_still_ordered(make_task, make_dep):
    tasks = [make_task('b', 5), make_task('a', 1)]
    deps = [make_dep('a', 'b', DependencyType.FINISH_TO_FINISH)]
    sequence = suggest_optimized_sequence(tasks, deps)
    assert ids(sequence) == ['a', 'b']


def test_deterministic(fixture_project):
    tasks, deps = fixture_project
    first = suggest_optimized_sequence(tasks, deps)
    second = suggest_optimized_sequence(tuple(tasks), tuple(deps))
    assert ids(first) == ids(second)


def test_cycle_raises(make_task, make_dep):
    tasks = [make_task('a'), make_task('b')]
    with pytest.raises(CycleDetectedError):
        suggest_optimized_sequence(tasks, [make_dep('a', 'b'), make_dep('b', 'a')])


def test_random_graphs_produce_valid_permutations():
    rng = random.Random(7)
    priorities = ['low', 'medium', 'high', 'urgent']

    for _ in range(50):
        size = rng.randint(1, 15)
        tasks = [
            Task(id=i, title=f"T{i}", priority=rng.choice(priorities), estimated_hours=rng.randint(1, 16))
            for i in range(size)
        ]
        rng.shuffle(tasks)
        deps = [
            Dependency(id=f"{i}-{j}", from_task_id=i, to_task_id=j, type=rng.choice(list(DependencyType)))
            for i in range(size) for j in range(i + 1, size) if rng.random() < 0.25
        ]

        sequence = suggest_optimized_sequence(tasks, deps)

        assert sorted(ids(sequence)) == sorted(ids(tasks))
        assert_respects_dependencies(sequence, deps)
        assert ids(sequence) == ids(suggest_optimized_sequence(tasks, deps))
