import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

import pandas as pd
import pytest

from data_io import read_tasks, write_route
from kpis import compute_route_kpis, route_to_frame
from main import main
from models import Algorithm, PickTask, Priority, RouteOptions, WarehouseCfg
from optimizer import RouteOptimizer
from visualization import plot_route


def _scenario_route():
    tasks = [
        PickTask("T1", "O1", "SKU-1", 2, "A-1-1", Priority.URGENT, weight=1.5),
        PickTask("T2", "O1", "SKU-2", 1, "A-1-2"),
        PickTask("T3", "O2", "SKU-3", 4, "A-2-1", Priority.HIGH, weight=3.0),
    ]
    return RouteOptimizer().optimize_route(tasks, options=RouteOptions(algorithm=Algorithm.NEAREST))


def test_route_kpis():
    wh = WarehouseCfg()
    kpis = compute_route_kpis(_scenario_route(), wh)
    assert kpis["Algorithm"] == "nearest"
    assert kpis["Lines Picked"] == 3
    assert kpis["Units Picked"] == 7
    assert kpis["Stops"] == 3
    assert kpis["Distance Walked (m)"] == 16.0
    assert kpis["Pick Time (s)"] == 45.0
    assert kpis["Travel Time (s)"] == pytest.approx(16.0 / 1.4)
    assert kpis["Time (s)"] == pytest.approx(16.0 / 1.4 + 45.0)
    assert kpis["Zones Visited"] == 1
    assert kpis["Aisles Visited"] == 2
    assert kpis["Lines by Priority"] == {"LOW": 0, "NORMAL": 1, "HIGH": 1, "URGENT": 1}
    assert kpis["Total Weight"] == 4.5
    assert kpis["Iteration Limit Reached"] is False


def test_route_to_frame():
    df = route_to_frame(_scenario_route())
    assert list(df["sequence"]) == [1, 2, 3]
    assert list(df["task_id"]) == ["T1", "T2", "T3"]
    assert df["distance"].sum() == 9.0
    assert list(df["priority"]) == ["URGENT", "NORMAL", "HIGH"]


def test_route_to_frame_empty_route():
    df = route_to_frame(RouteOptimizer().optimize_route([]))
    assert df.empty
    assert "to_location" in df.columns


def test_read_tasks_keeps_location_text(tmp_path):
    path = tmp_path / "tasks.csv"
    pd.DataFrame([
        {"task_id": "001", "order_id": "O1", "sku": "SKU-1", "quantity": 2, "bin_location": "A-01-02", "priority": "high"},
        {"task_id": "002", "order_id": "O1", "sku": "SKU-2", "quantity": 1, "bin_location": "B-3-4L", "priority": None},
    ]).to_csv(path, index=False)
    tasks = read_tasks(path)
    assert [t.task_id for t in tasks] == ["001", "002"]
    assert [t.bin_location for t in tasks] == ["A-01-02", "B-3-4L"]
    assert tasks[0].priority == Priority.HIGH
    assert tasks[1].priority == Priority.NORMAL
    assert tasks[0].weight is None


def test_read_tasks_requires_columns(tmp_path):
    path = tmp_path / "tasks.csv"
    pd.DataFrame([{"task_id": "1", "sku": "X", "quantity": 1}]).to_csv(path, index=False)
    with pytest.raises(ValueError, match="missing columns"):
        read_tasks(path)


def test_write_route(tmp_path):
    path = tmp_path / "route.csv"
    write_route(_scenario_route(), path)
    df = pd.read_csv(path)
    assert len(df) == 3
    assert list(df["to_location"]) == ["A-1-1", "A-1-2", "A-2-1"]


def test_plot_route_draws_path():
    route = _scenario_route()
    fig, ax = plot_route(route, WarehouseCfg())
    xs, ys = ax.lines[0].get_data()
    assert len(xs) == len(route.waypoints)
    assert list(ys) == [0.0] * len(route.waypoints)
    assert "nearest" in ax.get_title()
    plt.close(fig)


def test_cli_demo_run_writes_outputs(tmp_path, capsys):
    route_csv = tmp_path / "route.csv"
    plot_png = tmp_path / "route.png"
    main(["--demo-tasks", "12", "--seed", "3", "--output", str(route_csv), "--plot", str(plot_png),
          "--log-level", "WARNING"])
    out = capsys.readouterr().out
    assert "Lines Picked: 12" in out
    assert len(pd.read_csv(route_csv)) == 12
    assert plot_png.exists()


def test_cli_reports_missing_columns(tmp_path):
    path = tmp_path / "tasks.csv"
    pd.DataFrame([{"task_id": "1", "sku": "X", "quantity": 1}]).to_csv(path, index=False)
    with pytest.raises(SystemExit, match="missing columns"):
        main(["--tasks", str(path), "--log-level", "WARNING"])


def test_cli_reports_bad_locations(tmp_path):
    path = tmp_path / "tasks.csv"
    pd.DataFrame([
        {"task_id": "1", "order_id": "O1", "sku": "X", "quantity": 1, "bin_location": "A-1"},
    ]).to_csv(path, index=False)
    with pytest.raises(SystemExit, match="Invalid location format"):
        main(["--tasks", str(path), "--log-level", "WARNING"])
