"""
Export of the dependency graph for external rendering
"""
from planning.models import GraphEdge, GraphNode, GraphView


def generate_dependency_graph(tasks, dependencies):
    """
    Builds the node/edge view of the project.

    No validation and no timing: one node per task, one edge per dependency.

    Args:
        tasks: Project tasks
        dependencies: Project dependencies

    Returns:
        GraphView
    """
    nodes = [
        GraphNode(
            id=task.id,
            label=task.title,
            status=task.status,
            priority=task.priority.value
        )
        for task in tasks
    ]

    edges = [
        GraphEdge(
            id=dep.id,
            from_task_id=dep.from_task_id,
            to_task_id=dep.to_task_id,
            type=dep.type.value,
            label=dep.type.value
        )
        for dep in dependencies
    ]

    return GraphView(nodes=nodes, edges=edges)
