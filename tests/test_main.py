"""End-to-end tests for the command line entry point."""

import json

import pytest

import main

DATA = {
    'masters': [{'id': 'm1', 'name': 'Workbook', 'default_unit_name': 'page', 'default_unit_time': 10}],
    'logs': [
        {'id': 'l1', 'master_id': 'm1', 'created_at': '2026-10-01T09:00:00', 'actual_time_minutes': 12, 'amount': 1},
        {'id': 'l2', 'master_id': 'm1', 'created_at': '2026-10-02T09:00:00', 'actual_time_minutes': 24, 'amount': 2},
    ],
    'tasks': [
        {'id': 'undated', 'created_at': '2026-10-01T08:00:00', 'estimated_time_minutes': 30},
        {'id': 'urgent', 'created_at': '2026-10-05T08:00:00', 'estimated_time_minutes': 90, 'due_date': '2026-10-19'},
        {'id': 'huge', 'created_at': '2026-10-03T08:00:00', 'estimated_time_minutes': 400, 'due_date': '2026-10-25'},
    ],
    'capacities': [
        {'date': '2026-10-19', 'available_minutes': 120},
        {'date': '2026-10-20', 'available_minutes': 120},
    ],
}


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / 'data.json'
    path.write_text(json.dumps(DATA))
    return path


def test_estimate_command(workspace, capsys):
    code = main.main(['estimate', '--data', str(workspace), '--master', 'm1', '--amount', '2', '--difficulty', '4'])

    out = capsys.readouterr().out
    assert code == 0
    # 12 min/page * 2 pages * 1.3
    assert "31 min" in out
    assert "phase: cold_start" in out


def test_estimate_command_with_trace(workspace, capsys):
    main.main(['estimate', '--data', str(workspace), '--master', 'm1', '--amount', '1', '--trace', '--save-trace'])

    assert "=== Estimate: m1 ===" in capsys.readouterr().out
    assert list((workspace.parent / 'results').glob('estimate_m1_*.json'))


def test_estimate_unknown_master_fails(workspace):
    assert main.main(['estimate', '--data', str(workspace), '--master', 'nope', '--amount', '1']) == 1


def test_allocate_command_sorts_backlog(workspace, capsys):
    code = main.main(['allocate', '--data', str(workspace), '--start', '2026-10-19', '--save-trace'])

    out = capsys.readouterr().out
    assert code == 0
    assert "Allocated 3 of 3 tasks" in out
    assert "urgent -> 2026-10-19\n" in out
    assert "huge -> 2026-10-20 (overflow)" in out
    assert "undated -> 2026-10-19" in out
    assert list((workspace.parent / 'results').glob('allocation_*.log'))


def test_carry_over_command(workspace, capsys):
    main.main(['carry-over', '--data', str(workspace), '--today', '2026-10-19'])

    out = capsys.readouterr().out
    assert "Carried over 2 tasks" in out
    assert "Unassigned: huge\n" in out


def test_capacity_command(capsys):
    code = main.main(['--config', 'missing.yaml', 'capacity', '--wake', '07:00', '--sleep', '23:00',
                      '--block', '09:00-18:00', '--start', '2026-10-19', '--end', '2026-10-25'])

    out = capsys.readouterr().out
    assert code == 0
    assert "Available per day: 7h 0m (420 min)" in out
    assert out.count("420 min") == 6


def test_generate_then_evaluate(workspace, capsys):
    assert main.main(['generate', '--seed', '3', '--count', '8', '--today', '2026-10-19']) == 0
    generated = workspace.parent / 'results' / 'generated_data.json'
    assert len(json.loads(generated.read_text())['tasks']) == 8

    assert main.main(['evaluate', '--data', str(generated)]) == 0
    assert "ESTIMATION ACCURACY COMPARISON" in capsys.readouterr().out


def test_allocate_with_mixed_timestamp_forms(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / 'mixed.json'
    path.write_text(json.dumps({
        'tasks': [
            {'id': 'early', 'created_at': '2026-10-01T08:00:00Z', 'estimated_time_minutes': 30},
            {'id': 'late', 'created_at': '2026-10-01T09:00:00', 'estimated_time_minutes': 30},
        ],
        'capacities': [{'date': '2026-10-19', 'available_minutes': 60}],
    }))

    assert main.main(['allocate', '--data', str(path), '--start', '2026-10-19']) == 0
    assert "Allocated 2 of 2 tasks" in capsys.readouterr().out


@pytest.mark.parametrize("block", ['09:00', '09:00-', 'lunch-13:00'])
def test_capacity_rejects_malformed_block(block):
    assert main.main(['--config', 'missing.yaml', 'capacity', '--block', block]) == 1


def test_estimate_defaults_to_policy_normal_difficulty(workspace, capsys):
    code = main.main(['estimate', '--data', str(workspace), '--master', 'm1', '--amount', '1',
                      '--policy', 'weighted-average'])

    # 12 min/page at the normal level of the 1..3 scale
    assert code == 0
    assert ": 12 min" in capsys.readouterr().out
