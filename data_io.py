from typing import List

import pandas as pd

from kpis import route_to_frame
from models import OptimizedRoute, PickTask, Priority

# tasks.csv: task_id:str, order_id:str, sku:str, quantity:int, bin_location:str,
#            priority:str (optional, LOW|NORMAL|HIGH|URGENT), weight:float (optional)
REQUIRED_COLUMNS = {"task_id", "order_id", "sku", "quantity", "bin_location"}


def tasks_from_frame(df: pd.DataFrame) -> List[PickTask]:
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"tasks missing columns: {sorted(missing)}")
    tasks = []
    for row in df.to_dict("records"):
        priority = row.get("priority")
        weight = row.get("weight")
        tasks.append(PickTask(
            task_id=str(row["task_id"]),
            order_id=str(row["order_id"]),
            sku=str(row["sku"]),
            quantity=int(row["quantity"]),
            bin_location=str(row["bin_location"]),
            priority=Priority(str(priority).upper()) if not pd.isna(priority) else Priority.NORMAL,
            weight=float(weight) if weight is not None and not pd.isna(weight) else None,
        ))
    return tasks


def read_tasks(path) -> List[PickTask]:
    # Keep ids and locations as text so zero padding survives.
    df = pd.read_csv(path, dtype={"task_id": str, "order_id": str, "sku": str, "bin_location": str})
    return tasks_from_frame(df)


def write_route(route: OptimizedRoute, path) -> None:
    route_to_frame(route).to_csv(path, index=False)
