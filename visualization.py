import matplotlib.pyplot as plt
import matplotlib.patches as patches

from models import OptimizedRoute, WarehouseCfg
from storage import zone_index

BAND_HEIGHT = 0.6


def plot_route(route: OptimizedRoute, wh: WarehouseCfg, ax=None, title=None):
    """
    Draw the picker route over the zone bands.

    x runs along the aisles and y is the zone band index, matching the
    waypoint coordinates. Each zone's aisle range from ``zone_layout`` is
    shaded as a band.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(12, 5))
    else:
        fig = ax.figure

    for zone, layout in sorted(wh.zone_layout.items()):
        y = zone_index(zone)
        x0 = layout.start_aisle * wh.aisle_width
        width = (layout.end_aisle - layout.start_aisle) * wh.aisle_width
        rect = patches.Rectangle(
            (x0, y - BAND_HEIGHT / 2), width, BAND_HEIGHT,
            linewidth=1, edgecolor='gray', facecolor='lightblue', alpha=0.4, zorder=0,
        )
        ax.add_patch(rect)
        ax.text(x0 - wh.aisle_width / 2, y, f"Zone {zone}", ha='right', va='center', fontsize=9, color='navy')

    xs = [wp.coordinates[0] for wp in route.waypoints]
    ys = [wp.coordinates[1] for wp in route.waypoints]
    ax.plot(xs, ys, '-', color='red', linewidth=2, alpha=0.7, label='Picker path')
    ax.plot(xs[1:-1], ys[1:-1], 'o', color='red', markersize=5, alpha=0.7)
    if xs:
        ax.plot(xs[0], ys[0], 's', color='black', markersize=8, label=f'Start ({route.waypoints[0].location})')

    for wp in route.waypoints[1:-1]:
        ax.annotate(str(wp.sequence), (wp.coordinates[0], wp.coordinates[1]),
                    textcoords='offset points', xytext=(3, 4), fontsize=7)

    ax.set_xlabel("Aisle position (m)")
    ax.set_ylabel("Zone band")
    ax.margins(0.05)
    ax.legend(loc='upper right', fontsize=9)
    ax.set_title(title or (
        f"Pick route ({route.algorithm.value}): {route.total_distance:.1f} m, "
        f"{route.estimated_time / 60000:.1f} min"
    ))
    return fig, ax
