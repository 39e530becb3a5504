from collections import Counter

import pandas as pd

from distance import travel_time
from models import OptimizedRoute, Priority, WarehouseCfg
from storage import parse_location


def compute_route_kpis(route: OptimizedRoute, wh: WarehouseCfg):
    distance = route.total_distance
    pick_time_s = len(route.tasks) * wh.pick_time
    travel_time_s = travel_time(distance, wh) / 1000.0
    # Full trip including the walk back, whatever the route's own time covers.
    total_time_s = travel_time_s + pick_time_s
    stops = [wp.location for wp in route.waypoints[1:-1]]

    zones = set()
    aisles = set()
    for location in stops:
        loc = parse_location(location)
        zones.add(loc.zone)
        aisles.add((loc.zone, loc.aisle))

    priority_counts = Counter(t.task.priority for t in route.tasks)
    weights = [t.task.weight for t in route.tasks if t.task.weight is not None]

    return {
        "Algorithm": route.algorithm.value,
        "Lines Picked": len(route.tasks),
        "Units Picked": sum(t.task.quantity for t in route.tasks),
        "Stops": len(stops),
        "Distance Walked (m)": distance,
        "Travel Time (s)": travel_time_s,
        "Pick Time (s)": pick_time_s,
        "Time (s)": total_time_s,
        "Time (min)": total_time_s / 60 if total_time_s else 0,
        "Zones Visited": len(zones),
        "Aisles Visited": len(aisles),
        "Lines by Priority": {p.value: priority_counts.get(p, 0) for p in Priority},
        "Total Weight": sum(weights),
        "2-opt Passes": route.iterations,
        "Iteration Limit Reached": route.iteration_limit_reached,
    }


def route_to_frame(route: OptimizedRoute) -> pd.DataFrame:
    rows = []
    for t in route.tasks:
        rows.append({
            "sequence": t.sequence,
            "task_id": t.task_id,
            "order_id": t.task.order_id,
            "sku": t.task.sku,
            "quantity": t.task.quantity,
            "priority": t.task.priority.value,
            "from_location": t.from_location,
            "to_location": t.to_location,
            "distance": t.distance,
            "estimated_time_ms": t.estimated_time,
        })
    columns = [
        "sequence", "task_id", "order_id", "sku", "quantity", "priority",
        "from_location", "to_location", "distance", "estimated_time_ms",
    ]
    return pd.DataFrame(rows, columns=columns)
