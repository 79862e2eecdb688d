# main.py
import argparse
import json
import sys

from logger import logger
from planning.engine import DependencyGraphEngine
from planning.errors import DependencyGraphError
from utils.csv_import import parse_csv_tasks, build_snapshot


def format_plan(analysis, sequence):
    """Текстовое представление результата расчета."""
    lines = [f"Длительность проекта: {analysis.critical_path_duration:g} дн."]
    lines.append("Критический путь: " + " -> ".join(task.title for task in analysis.critical_tasks))
    lines.append("")
    lines.append(f"{'Задача':<30} {'ES':>7} {'EF':>7} {'LS':>7} {'LF':>7} {'Резерв':>7}")
    for task in sequence:
        timing = analysis.timings[task.id]
        marker = '*' if timing.is_critical else ' '
        lines.append(
            f"{marker}{task.title:<29} {timing.earliest_start:>7g} {timing.earliest_finish:>7g} "
            f"{timing.latest_start:>7g} {timing.latest_finish:>7g} {timing.slack:>7g}"
        )
    return "\n".join(lines)


def plan_to_dict(analysis, sequence):
    return {
        'critical_path_duration': analysis.critical_path_duration,
        'critical_tasks': [task.id for task in analysis.critical_tasks],
        'sequence': [task.id for task in sequence],
        'timings': {
            task_id: {
                'earliest_start': timing.earliest_start,
                'earliest_finish': timing.earliest_finish,
                'latest_start': timing.latest_start,
                'latest_finish': timing.latest_finish,
                'slack': timing.slack,
            }
            for task_id, timing in analysis.timings.items()
        }
    }


def build_parser():
    parser = argparse.ArgumentParser(description="Анализ графа зависимостей задач проекта")
    subparsers = parser.add_subparsers(dest='command', required=True)

    plan_parser = subparsers.add_parser('plan', help="Критический путь и порядок выполнения")
    plan_parser.add_argument('csv_file')
    plan_parser.add_argument('--hours-per-day', type=float, default=None)
    plan_parser.add_argument('--json', action='store_true')

    graph_parser = subparsers.add_parser('graph', help="Граф зависимостей в формате JSON")
    graph_parser.add_argument('csv_file')

    return parser


def main(argv=None):
    """Точка входа командной строки."""
    args = build_parser().parse_args(argv)

    try:
        with open(args.csv_file, encoding='utf-8') as f:
            rows = parse_csv_tasks(f)
    except OSError as e:
        logger.error(f"Не удалось открыть файл {args.csv_file}: {str(e)}")
        return 1
    if not rows:
        logger.error(f"Не удалось прочитать задачи из {args.csv_file}")
        return 1

    tasks, dependencies, errors = build_snapshot(rows)
    for error in errors:
        print(f"Пропущено: {error}", file=sys.stderr)

    engine = DependencyGraphEngine(hours_per_day=getattr(args, 'hours_per_day', None))

    if args.command == 'graph':
        print(json.dumps(engine.generate_dependency_graph(tasks, dependencies).to_dict(),
                         ensure_ascii=False, indent=2))
        return 0

    try:
        analysis = engine.calculate_critical_path(tasks, dependencies)
        sequence = engine.suggest_optimized_sequence(tasks, dependencies)
    except DependencyGraphError as e:
        logger.error(f"Ошибка расчета плана: {str(e)}")
        return 1

    if args.json:
        print(json.dumps(plan_to_dict(analysis, sequence), ensure_ascii=False, indent=2))
    else:
        print(format_plan(analysis, sequence))
    return 0


if __name__ == '__main__':
    sys.exit(main())
