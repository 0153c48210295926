"""Orbital Engine command-line entry point.

``simulate`` runs a headless host loop that drives the simulation clock
and logs where the tracked objects are; ``serve`` starts the HTTP
service.
"""

from __future__ import annotations

import argparse
import logging
import time
from typing import Optional, Sequence

from orbital_engine.utils.config import Settings


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    # Quieter libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("astropy").setLevel(logging.WARNING)


def run_simulation(
    settings: Settings,
    speed: float = 1.0,
    seconds: float = 10.0,
    fps: float = 2.0,
    refresh: bool = False,
) -> None:
    """Tick the clock for ``seconds`` of wall time and log positions each frame."""
    from orbital_engine.core import propagator
    from orbital_engine.core.time_controller import TimeController
    from orbital_engine.data.comets import comets_by_distance
    from orbital_engine.data.stations import SPACE_STATIONS, default_tle_cache
    from orbital_engine.data.voyager import MISSIONS
    from orbital_engine.utils.formatting import (
        format_altitude,
        format_comet_distance,
        format_coordinates,
        format_distance_au,
    )
    from orbital_engine.utils.time_utils import format_sim_time, format_speed
    from orbital_engine.utils.tle_feed import TLEFeed

    logger = logging.getLogger(__name__)
    cache = default_tle_cache()

    if refresh:
        feed = TLEFeed(cache, base_url=settings.celestrak_url, timeout=settings.fetch_timeout)
        results = feed.refresh_all({s.id: s.norad_id for s in SPACE_STATIONS})
        logger.info("TLE refresh: %s", results)

    controller = TimeController()
    controller.set_speed(speed)
    logger.info(
        "Simulating from %s at %s", format_sim_time(controller.time), format_speed(speed)
    )

    frame = 1.0 / fps if fps > 0 else 0.5
    deadline = time.perf_counter() + seconds
    while time.perf_counter() < deadline:
        time.sleep(frame)
        now = controller.tick()

        for station in SPACE_STATIONS:
            state = propagator.propagate_parsed(cache.parsed(station.id), now)
            logger.info(
                "%s %s | %s | %s",
                format_sim_time(now),
                station.name,
                format_coordinates(state.latitude, state.longitude),
                format_altitude(state.altitude),
            )

        comet, comet_state = comets_by_distance(now)[0]
        logger.info(
            "Nearest comet: %s at %s", comet.name, format_comet_distance(comet_state.distance)
        )

        for mission in MISSIONS.values():
            sample = mission.position_at(now)
            if sample is not None:
                logger.info("%s at %s", mission.name, format_distance_au(sample.distance))


def run_server(settings: Settings) -> None:
    import uvicorn

    uvicorn.run(
        "orbital_engine.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="orbital-engine", description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="command", required=True)

    sim = sub.add_parser("simulate", help="Run a headless simulation loop")
    sim.add_argument("--speed", type=float, default=1.0, help="Simulated seconds per real second")
    sim.add_argument("--seconds", type=float, default=10.0, help="Wall-clock run time")
    sim.add_argument("--fps", type=float, default=2.0, help="Frames per second")
    sim.add_argument("--refresh", action="store_true", help="Fetch fresh TLEs from CelesTrak first")

    sub.add_parser("serve", help="Start the HTTP service")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Application entry point."""
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    logger.info("Starting Orbital Engine (%s)", args.command)

    if args.command == "simulate":
        run_simulation(
            settings,
            speed=args.speed,
            seconds=args.seconds,
            fps=args.fps,
            refresh=args.refresh,
        )
    else:
        run_server(settings)


if __name__ == "__main__":
    main()
