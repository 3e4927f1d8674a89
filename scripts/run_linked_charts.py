import matplotlib.pyplot as plt
import numpy as np
from loguru import logger

from pybdchart import (
    ChartSyncManager,
    DatasetMaker,
    DecimationConfig,
    MplChart,
    SimpleRange,
    TimerFrameScheduler,
    chart_updater,
    common_range,
    configure_logging,
)

# --- User configuration dictionary ---
CONFIG = {
    "N_SAMPLES": 200_000,  # samples per series
    "SAMPLE_INTERVAL": 1e-3,  # seconds between samples
    "NOISE": 0.2,  # noise amplitude of the synthetic signals
    "ALERT_CODES": {3: "Overheat", 7: "Overcurrent"},  # alert code -> label
    "ALERT_COLORS": {3: "tab:orange", 7: "tab:red"},
    "ALERT_BAND": (0.9, 1.0),  # fixed-y alert band as fraction of the y viewport
    "MAX_POINTS": 2000,  # decimation threshold for lines
    "SEED": 1234,  # seed for synthetic data and scatter decimation
    "LOG_LEVEL": "INFO",  # logging level: DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
}


def make_signals(config):
    """Synthetic timeline with two signals and sparse alert codes."""
    rng = np.random.default_rng(config["SEED"])
    n = config["N_SAMPLES"]
    t = np.arange(n) * config["SAMPLE_INTERVAL"]

    temperature = 40 + 5 * np.sin(t / 20) + config["NOISE"] * rng.standard_normal(n)
    current = 2 + np.cos(t / 7) + config["NOISE"] * rng.standard_normal(n)
    # Sensor dropouts show up as gaps
    current[(t > 60) & (t < 62)] = np.nan

    alerts = np.full(n, np.nan)
    alerts[temperature > 44.8] = 3
    alerts[(current > 2.9) & np.isnan(alerts)] = 7
    return t, temperature, current, alerts


def main() -> None:
    """
    Main function: two linked charts sharing one horizontal viewport.
    """
    configure_logging(CONFIG.get("LOG_LEVEL", "INFO"))
    t, temperature, current, alerts = make_signals(CONFIG)
    line_config = DecimationConfig(max_points_to_display=CONFIG["MAX_POINTS"])

    fig, (ax_top, ax_bottom) = plt.subplots(2, 1, figsize=(12, 7))
    scheduler = TimerFrameScheduler(fig.canvas)
    manager = ChartSyncManager(scheduler)

    # Top chart: temperature line with fixed-y alert bands
    y_range = common_range([temperature])
    top_data = [
        DatasetMaker.line_plot(t, temperature, "Temperature", color="tab:blue", config=line_config)
    ] + DatasetMaker.fixed_y_alert_plot(
        t,
        alerts,
        init_y_range=y_range,
        target_range=SimpleRange(*CONFIG["ALERT_BAND"]),
        label_dict=CONFIG["ALERT_CODES"],
        color_dict=CONFIG["ALERT_COLORS"],
    )
    top = MplChart.create(
        [d.dataset for d in top_data],
        title="Temperature",
        y_label="°C",
        ylim=(y_range.min, y_range.max),
        ax=ax_top,
        registry_index=0,
    )
    manager.register(top, chart_updater([d.update for d in top_data]))

    # Bottom chart: current as scatter
    bottom_data = [
        DatasetMaker.scatter_plot(
            t, current, "Current", color="tab:green", rng=CONFIG["SEED"], config=line_config
        )
    ]
    bottom = MplChart.create(
        [d.dataset for d in bottom_data],
        title="Current",
        y_label="A",
        ax=ax_bottom,
        registry_index=1,
    )
    manager.register(bottom, chart_updater([d.update for d in bottom_data]))

    manager.attach_sync()
    logger.success("Charts ready. Pan or zoom either chart; the other one follows.")
    plt.show()
    manager.destroy()


if __name__ == "__main__":
    main()
