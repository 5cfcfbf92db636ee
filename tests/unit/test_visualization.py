"""Unit tests for chart rendering and result tables."""

import pytest

from core.process import Process
from schedulers import MLFQScheduler
from utils.visualization import Visualizer


@pytest.fixture
def result():
    processes = [Process(1, [5, 8, 3]), Process(2, [45]), Process(3, [12, 20, 4])]
    return MLFQScheduler(processes).run()


@pytest.fixture
def visualizer():
    return Visualizer()


def test_gantt_chart_is_saved(visualizer, result, tmp_path):
    path = tmp_path / "gantt.png"

    visualizer.draw_gantt_chart(result['gantt_chart'], result['algorithm'],
                                save_path=str(path), show=False)

    assert path.exists()
    assert path.stat().st_size > 0


def test_queue_level_chart_is_saved(visualizer, result, tmp_path):
    path = tmp_path / "levels.png"

    visualizer.draw_queue_levels(result['gantt_chart'], 3, save_path=str(path), show=False)

    assert path.exists()


def test_empty_gantt_chart_is_skipped(visualizer, tmp_path, capsys):
    path = tmp_path / "empty.png"

    visualizer.draw_gantt_chart([], "MLFQ", save_path=str(path), show=False)

    assert not path.exists()
    assert "데이터가 없습니다" in capsys.readouterr().out


def test_statistics_table_lists_algorithm(visualizer, result, capsys):
    visualizer.print_statistics_table([result])

    assert "Multi-Level Feedback Queue" in capsys.readouterr().out


def test_process_details_lists_every_process(visualizer, result, capsys):
    visualizer.print_process_details(result)

    out = capsys.readouterr().out
    for pid in (1, 2, 3):
        assert f"\n{pid:<6} " in out
