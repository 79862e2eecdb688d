import pytest

from main import build_parser, main, plan_to_dict
from planning.network import calculate_critical_path
from planning.sequence import suggest_optimized_sequence
from utils.csv_import import build_snapshot, generate_sample_csv, parse_csv_tasks


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "tasks.csv"
    path.write_text(generate_sample_csv(), encoding='utf-8')
    return path


def test_sample_plan():
    tasks, deps, _ = build_snapshot(parse_csv_tasks(generate_sample_csv()))
    analysis = calculate_critical_path(tasks, deps)
    sequence = suggest_optimized_sequence(tasks, deps)

    data = plan_to_dict(analysis, sequence)

    assert data['critical_path_duration'] == 12
    assert data['critical_tasks'] == ['task-1', 'task-2', 'task-3', 'task-5']
    assert data['sequence'] == ['task-1', 'task-2', 'task-3', 'task-4', 'task-5', 'task-6']
    assert data['timings']['task-4']['slack'] == 6


def test_plan_command(sample_file, capsys):
    assert main(['plan', str(sample_file), '--json']) == 0
    out = capsys.readouterr().out
    assert '"critical_path_duration": 12.0' in out
    assert '"task-5"' in out


def test_plan_command_text_output(sample_file, capsys):
    assert main(['plan', str(sample_file)]) == 0
    out = capsys.readouterr().out
    assert "Длительность проекта: 12 дн." in out
    assert "*Разработка API" in out


def test_graph_command(sample_file, capsys):
    assert main(['graph', str(sample_file)]) == 0
    out = capsys.readouterr().out
    assert '"nodes"' in out
    assert '"start-to-start"' in out


def test_unreadable_csv_returns_error(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("name,duration\nA,1\n", encoding='utf-8')
    assert main(['plan', str(path)]) == 1


def test_oversized_project_returns_error(sample_file, monkeypatch):
    import config
    monkeypatch.setattr(config, 'MAX_GRAPH_TASKS', 2)
    assert main(['plan', str(sample_file)]) == 1


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_missing_csv_returns_error(tmp_path):
    assert main(['plan', str(tmp_path / "missing.csv")]) == 1
