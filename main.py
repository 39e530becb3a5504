# main.py

import argparse
import logging
import random

from data_io import read_tasks, write_route
from kpis import compute_route_kpis
from models import DEPOT, Algorithm, PickTask, Priority, RouteOptions, WarehouseCfg
from optimizer import RouteOptimizer
from storage import gen_bin_locations


def gen_tasks(num_tasks, locations, rng, num_orders=None):
    num_orders = num_orders or max(1, num_tasks // 4)
    priorities = list(Priority)
    tasks = []
    for tid in range(1, num_tasks + 1):
        tasks.append(PickTask(
            task_id=f"T{tid:04d}",
            order_id=f"O{rng.randint(1, num_orders):04d}",
            sku=f"SKU-{rng.randint(1, 500):05d}",
            quantity=max(1, int(rng.expovariate(1.0 / 3))),
            bin_location=rng.choice(locations),
            priority=rng.choices(priorities, weights=[1, 6, 2, 1])[0],
            weight=round(rng.uniform(0.1, 12.0), 2),
        ))
    return tasks


def build_parser():
    parser = argparse.ArgumentParser(description="Optimize a warehouse pick route.")
    parser.add_argument("--tasks", default=None, help="Pick task CSV (task_id, order_id, sku, quantity, bin_location[, priority, weight]).")
    parser.add_argument("--demo-tasks", type=int, default=25, help="Number of random tasks to generate when --tasks is not given.")
    parser.add_argument("--demo-zones", default="ABCD")
    parser.add_argument("--demo-aisles", type=int, default=10)
    parser.add_argument("--demo-shelves", type=int, default=8)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--start", default=DEPOT, help="Start/return location.")
    parser.add_argument("--algorithm", choices=[a.value for a in Algorithm], default=None,
                        help="Force a strategy instead of selecting one from the task spread.")
    parser.add_argument("--max-iterations", type=int, default=1000, help="2-opt pass cap.")
    parser.add_argument("--aisle-width", type=float, default=None)
    parser.add_argument("--shelf-depth", type=float, default=None)
    parser.add_argument("--shelf-height", type=float, default=None)
    parser.add_argument("--walking-speed", type=float, default=None)
    parser.add_argument("--pick-time", type=float, default=None)
    parser.add_argument("--output", default=None, help="Write the sequenced route to this CSV.")
    parser.add_argument("--plot", default=None, help="Save a route plot to this image file.")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def config_overrides(args):
    overrides = {
        "aisle_width": args.aisle_width,
        "shelf_depth": args.shelf_depth,
        "shelf_height": args.shelf_height,
        "walking_speed": args.walking_speed,
        "pick_time": args.pick_time,
    }
    return {k: v for k, v in overrides.items() if v is not None}


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    optimizer = RouteOptimizer(WarehouseCfg())
    optimizer.update_config(config_overrides(args))
    options = RouteOptions(algorithm=Algorithm(args.algorithm) if args.algorithm else None,
                           max_iterations=args.max_iterations)

    try:
        if args.tasks:
            tasks = read_tasks(args.tasks)
        else:
            rng = random.Random(args.seed)
            locations = gen_bin_locations(args.demo_zones, args.demo_aisles, args.demo_shelves)
            tasks = gen_tasks(args.demo_tasks, locations, rng)
        route = optimizer.optimize_route(tasks, args.start, options)
    except ValueError as exc:
        raise SystemExit(f"Route optimization failed: {exc}")

    kpis = compute_route_kpis(route, optimizer.get_config())
    for key, value in kpis.items():
        if isinstance(value, float):
            print(f"{key}: {value:.2f}")
        else:
            print(f"{key}: {value}")

    for t in route.tasks:
        print(f"{t.sequence:>4}  {t.task_id:<8} {t.from_location:>9} -> {t.to_location:<9} {t.distance:7.2f} m")

    if args.output:
        write_route(route, args.output)
        print(f"Wrote {len(route.tasks)} route rows to {args.output}")

    if args.plot:
        import matplotlib.pyplot as plt
        from visualization import plot_route
        fig, _ = plot_route(route, optimizer.get_config())
        fig.savefig(args.plot, dpi=120, bbox_inches="tight")
        plt.close(fig)
        print(f"Wrote route plot to {args.plot}")


if __name__ == "__main__":
    main()
