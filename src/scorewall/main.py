"""
SCOREWALL - Attack-Defense Status Wall

Main entry point for running the full application.
Connects to the competition stream (or simulator) and serves the wall.
"""

import argparse
import logging
import threading

from .config import load_config, set_config
from .core.state import state
from .core.registry import TeamRegistry
from .core.pipeline import ScoreboardPipeline
from .output.presenter import CompositePresenter, LoggingPresenter
from .output.socketio_presenter import SocketIOPresenter
from .simulator.fake_stream import CompetitionSimulator, FakeStream
from .stream.client import StreamReader


def setup_logging(debug: bool = False):
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SCOREWALL - Attack-Defense Status Wall"
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to config file",
        default=None
    )
    parser.add_argument(
        "--simulate", "-s",
        action="store_true",
        help="Run in simulation mode (no competition stream required)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        help="Web server port (default: 8080)",
        default=None
    )
    parser.add_argument(
        "--url", "-u",
        help="Competition stream websocket URL",
        default=None
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Log notifications instead of serving the web wall"
    )
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_arg_parser().parse_args(argv)

    # Load configuration
    config = load_config(args.config)

    # Apply command line overrides
    if args.simulate:
        config.simulator.enabled = True
    if args.debug:
        config.debug = True
    if args.port:
        config.web.port = args.port
    if args.url:
        config.stream.url = args.url

    set_config(config)

    # Setup logging
    setup_logging(config.debug)
    logger = logging.getLogger("scorewall")

    logger.info("=" * 50)
    logger.info("SCOREWALL - Attack-Defense Status Wall")
    logger.info("=" * 50)

    # Initialize components
    registry = TeamRegistry()
    socket_presenter = None
    if args.headless:
        presenter = LoggingPresenter()
    else:
        from .web.app import create_app, socketio, set_pipeline, set_presenter, set_simulator
        socket_presenter = SocketIOPresenter(socketio, registry)
        presenter = CompositePresenter([socket_presenter, LoggingPresenter()])

    pipeline = ScoreboardPipeline(
        presenter,
        registry=registry,
        system_state=state,
        tick_seconds=config.scheduler.tick_seconds,
        batch_size=config.scheduler.batch_size,
    )

    # Setup stream source
    simulator = None
    if config.simulator.enabled:
        logger.info("Starting in SIMULATION mode")
        simulator = CompetitionSimulator(
            team_count=config.simulator.team_count,
            service_count=config.simulator.service_count,
            round_seconds=config.simulator.round_seconds,
            exploit_chance=config.simulator.exploit_chance,
            down_chance=config.simulator.down_chance,
            speed_multiplier=config.simulator.speed_multiplier,
        )
        fake_stream = FakeStream(simulator=simulator)
        fake_stream.open()
        state.simulator_running = True
        reader = StreamReader(
            "sim://",
            pipeline,
            system_state=state,
            receive_timeout=config.stream.receive_timeout,
            connection_factory=lambda url: fake_stream,
        )
    else:
        reader = StreamReader(
            config.stream.url,
            pipeline,
            system_state=state,
            receive_timeout=config.stream.receive_timeout,
        )

    reader.start()

    try:
        if args.headless:
            logger.info("Running headless, press Ctrl+C to stop")
            threading.Event().wait()
        else:
            set_pipeline(pipeline)
            set_presenter(socket_presenter)
            set_simulator(simulator)
            app = create_app()

            logger.info(f"Starting web server on http://{config.web.host}:{config.web.port}")
            logger.info("Press Ctrl+C to stop")

            socketio.run(
                app,
                host=config.web.host,
                port=config.web.port,
                debug=False,  # Disable Flask debug to prevent double-start
                use_reloader=False,
                allow_unsafe_werkzeug=True
            )
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        reader.stop()
        pipeline.shutdown()
        if simulator is not None:
            simulator.stop()
            state.simulator_running = False

    logger.info("SCOREWALL stopped")


if __name__ == "__main__":
    main()
