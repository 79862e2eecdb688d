"""
Validation of proposed task dependencies.

Every check here is a pure function of its arguments: nothing is mutated and
invalid proposals are reported through ValidationResult instead of exceptions.
Cycle detection is a breadth-first reachability search, O(V + E) per candidate
edge.
"""
import uuid
from collections import defaultdict, deque

from planning.models import Dependency, DependencyType, ValidationResult

SELF_LOOP_MESSAGE = "A task cannot depend on itself"
DUPLICATE_MESSAGE = "Dependency already exists"
CYCLE_MESSAGE = "This would create a circular dependency"


def create_dependency(from_task, to_task, type=DependencyType.FINISH_TO_START):
    """
    Build a new Dependency between two tasks. Does not validate.

    Args:
        from_task: Predecessor task
        to_task: Successor task
        type: DependencyType or its string value

    Returns:
        Dependency with a freshly generated id
    """
    if not isinstance(type, DependencyType):
        type = DependencyType(type)
    return Dependency(
        id=f"dep-{from_task.id}-{to_task.id}-{uuid.uuid4().hex[:12]}",
        from_task_id=from_task.id,
        to_task_id=to_task.id,
        type=type
    )


def build_adjacency(dependencies):
    graph = defaultdict(list)
    for dep in dependencies:
        graph[dep.from_task_id].append(dep.to_task_id)
    return graph


def is_reachable(graph, start_id, target_id):
    """Check whether target_id can be reached from start_id following edges forward."""
    visited = {start_id}
    queue = deque([start_id])
    while queue:
        current = queue.popleft()
        if current == target_id:
            return True
        for neighbor in graph.get(current, []):
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)
    return False


def would_create_cycle(dependencies, from_task_id, to_task_id):
    """
    Check if adding from_task_id -> to_task_id closes a cycle.

    The new edge closes a cycle exactly when from_task_id is already
    reachable from to_task_id.
    """
    if from_task_id == to_task_id:
        return True
    graph = build_adjacency(dependencies)
    graph[from_task_id].append(to_task_id)
    return is_reachable(graph, to_task_id, from_task_id)


def validate_dependency(tasks, dependencies, from_task_id, to_task_id):
    """
    Validate if a dependency can be created.

    Args:
        tasks: All tasks of the project
        dependencies: Existing dependencies of the project
        from_task_id: ID of the predecessor task
        to_task_id: ID of the successor task

    Returns:
        ValidationResult
    """
    task_ids = {task.id for task in tasks}
    for task_id in (from_task_id, to_task_id):
        if task_id not in task_ids:
            return ValidationResult(False, f"Dangling reference: task '{task_id}' does not exist")

    if from_task_id == to_task_id:
        return ValidationResult(False, SELF_LOOP_MESSAGE)

    for dep in dependencies:
        if dep.from_task_id == from_task_id and dep.to_task_id == to_task_id:
            return ValidationResult(False, DUPLICATE_MESSAGE)

    if would_create_cycle(dependencies, from_task_id, to_task_id):
        return ValidationResult(False, CYCLE_MESSAGE)

    return ValidationResult(True)


def find_predecessors(dependencies, task_id):
    """Dependencies that task_id waits on."""
    return [dep for dep in dependencies if dep.to_task_id == task_id]


def find_successors(dependencies, task_id):
    """Dependencies that wait on task_id."""
    return [dep for dep in dependencies if dep.from_task_id == task_id]


def find_available_dependencies(tasks, dependencies, task_id):
    """
    Tasks that can be added as a new predecessor of task_id.

    Excludes the task itself, its current direct predecessors and everything
    that already depends on it (directly or transitively).
    """
    graph = build_adjacency(dependencies)

    # Everything reachable from task_id would close a cycle
    blocked = {task_id}
    queue = deque([task_id])
    while queue:
        current = queue.popleft()
        for neighbor in graph.get(current, []):
            if neighbor not in blocked:
                blocked.add(neighbor)
                queue.append(neighbor)

    blocked.update(dep.from_task_id for dep in find_predecessors(dependencies, task_id))
    return [task for task in tasks if task.id not in blocked]
