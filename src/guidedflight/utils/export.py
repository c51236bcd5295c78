"""
Data Export Utilities.

Export recorded flights to CSV and plain-text reports for external analysis.
"""

import csv
import logging
import os
from datetime import datetime

_logger = logging.getLogger(__name__)


def export_flight_csv(record, filepath: str) -> bool:
    """
    Export a recorded flight to CSV.

    Columns:
    - Time (s)
    - Position X/Y/Z (m)
    - Velocity X/Y/Z (m/s)
    - Speed (m/s)
    - Rate X/Y/Z (rad/s), body frame
    - Nose X/Y/Z, world frame
    - Throttle
    - Thrust (N)
    - Drag (N)

    Args:
        record: FlightRecord object
        filepath: Output file path

    Returns:
        True if export successful
    """
    try:
        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else '.', exist_ok=True)

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)

            writer.writerow([
                'Time (s)',
                'Position X (m)', 'Position Y (m)', 'Position Z (m)',
                'Velocity X (m/s)', 'Velocity Y (m/s)', 'Velocity Z (m/s)',
                'Speed (m/s)',
                'Rate X (rad/s)', 'Rate Y (rad/s)', 'Rate Z (rad/s)',
                'Nose X', 'Nose Y', 'Nose Z',
                'Throttle',
                'Thrust (N)',
                'Drag (N)'
            ])

            speed = record.speed
            for i in range(len(record.time)):
                writer.writerow(
                    [f"{record.time[i]:.4f}"]
                    + [f"{v:.4f}" for v in record.position[i]]
                    + [f"{v:.4f}" for v in record.velocity[i]]
                    + [f"{speed[i]:.4f}"]
                    + [f"{v:.5f}" for v in record.angular_velocity[i]]
                    + [f"{v:.6f}" for v in record.nose_direction[i]]
                    + [f"{record.throttle[i]:.3f}",
                       f"{record.thrust[i]:.3f}",
                       f"{record.drag[i]:.3f}"]
                )

        _logger.info("Exported %d samples to %s", len(record.time), filepath)
        return True

    except OSError as e:
        _logger.error("Export error: %s", e)
        return False


def export_summary_txt(record, config, filepath: str) -> bool:
    """
    Export a flight summary as a text report.

    Args:
        record: FlightRecord object
        config: ScenarioConfig the record was produced from
        filepath: Output file path

    Returns:
        True if export successful
    """
    body = config.body
    lines = []
    lines.append("=" * 50)
    lines.append("Guided Flight Summary Report")
    lines.append("=" * 50)
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append(f"Scenario: {config.name}")
    lines.append("")

    lines.append("BODY")
    lines.append("-" * 30)
    lines.append(f"Total Length: {body.total_length:.3f} m")
    lines.append(f"Diameter: {2.0 * body.radius:.3f} m")
    lines.append(f"Mass: {body.mass:.2f} kg")
    lines.append(f"Max Thrust: {body.max_thrust:.1f} N")
    if body.is_derived:
        lines.append(f"Inertia (pitch/roll/yaw): {body.inertia_pitch:.5f} / "
                     f"{body.inertia_roll:.5f} / {body.inertia_yaw:.5f} kg·m²")
        lines.append(f"COM from tail: {body.com_offset:.3f} m")
    lines.append("")

    lines.append("PERFORMANCE")
    lines.append("-" * 30)
    lines.append(f"Flight Time: {record.flight_time:.2f} s")
    lines.append(f"Apogee: {record.apogee:.1f} m")
    lines.append(f"Max Speed: {record.max_speed:.1f} m/s")
    lines.append(f"Max Drag: {float(record.drag.max()):.1f} N")
    lines.append("")

    lines.append("STATUS")
    lines.append("-" * 30)
    if record.success:
        lines.append("Completed")
    else:
        lines.append(f"Aborted: {record.abort_reason}")
    lines.append("")

    lines.append("=" * 50)

    try:
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write("\n".join(lines))
        return True

    except OSError as e:
        _logger.error("Export error: %s", e)
        return False
