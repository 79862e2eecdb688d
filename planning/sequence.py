"""
Priority-aware execution order of tasks (list scheduling).
"""
import heapq
from datetime import date

from config import HOURS_PER_DAY
from logger import logger
from planning.errors import CycleDetectedError
from planning.network import calculate_critical_path


def sequence_key(task, critical_ids):
    """
    Ordering key of a ready task: critical first, then higher priority,
    then earlier due date (missing due dates last), then lower id.
    Ids of different types are grouped by type name so they stay comparable.
    """
    due = task.due_date or date.max
    return (
        0 if task.id in critical_ids else 1,
        -task.priority.rank,
        task.due_date is None,
        due,
        type(task.id).__name__,
        task.id
    )


def suggest_optimized_sequence(tasks, dependencies, hours_per_day=HOURS_PER_DAY):
    """
    Suggest an execution order that respects every dependency.

    Args:
        tasks: All tasks of the project
        dependencies: Dependencies between the tasks
        hours_per_day: Working hours in one day

    Returns:
        List of tasks; for every dependency its "from" task comes first

    Raises:
        CycleDetectedError: if the dependencies contain a cycle
    """
    if not tasks:
        return []

    analysis = calculate_critical_path(tasks, dependencies, hours_per_day)
    critical_ids = {task.id for task in analysis.critical_tasks}

    tasks_by_id = {task.id: task for task in tasks}
    index = {task.id: i for i, task in enumerate(tasks)}

    # Count unplaced predecessors per task
    waiting_on = {task.id: 0 for task in tasks}
    successors = {task.id: [] for task in tasks}
    for dep in dependencies:
        if dep.from_task_id in tasks_by_id and dep.to_task_id in tasks_by_id:
            waiting_on[dep.to_task_id] += 1
            successors[dep.from_task_id].append(dep.to_task_id)

    ready = []
    for task in tasks:
        if waiting_on[task.id] == 0:
            heapq.heappush(ready, (sequence_key(task, critical_ids), index[task.id]))

    sequence = []
    while ready:
        _, task_index = heapq.heappop(ready)
        task = tasks[task_index]
        sequence.append(task)

        for successor_id in successors[task.id]:
            waiting_on[successor_id] -= 1
            if waiting_on[successor_id] == 0:
                successor = tasks_by_id[successor_id]
                heapq.heappush(ready, (sequence_key(successor, critical_ids), index[successor_id]))

    if len(sequence) != len(tasks):
        remaining = [task.id for task in tasks if waiting_on[task.id] > 0]
        logger.error(f"Cannot order tasks, circular dependency between: {remaining}")
        raise CycleDetectedError(remaining)

    logger.debug(f"Suggested sequence: {[task.id for task in sequence]}")
    return sequence
