"""
SCOREWALL Web Application

Flask-based wall page with WebSocket support for real-time updates.
"""

import logging
from pathlib import Path

from flask import Flask, render_template, jsonify
from flask_socketio import SocketIO, emit

from ..core.state import state
from ..core.registry import PALETTE, STATUS_UP_HEX, STATUS_DOWN_HEX
from ..config import get_config
from ..parser.frames import get_frame_stats

logger = logging.getLogger(__name__)

socketio = SocketIO(cors_allowed_origins="*")

# References to pipeline, presenter and simulator (set by main app)
_pipeline = None
_presenter = None
_simulator = None
_state_listener = None


def set_pipeline(pipeline):
    """Set the pipeline instance for the status API."""
    global _pipeline
    _pipeline = pipeline


def set_presenter(presenter):
    """Set the SocketIO presenter, for roster replay on connect."""
    global _presenter
    _presenter = presenter


def set_simulator(sim):
    """Set the simulator instance for web control."""
    global _simulator
    _simulator = sim


def _roster_payload():
    if _presenter is not None and _presenter.roster_snapshot is not None:
        return _presenter.roster_snapshot
    if _pipeline is not None and _pipeline.ready:
        return {"teams": _pipeline.registry.to_dict()["teams"]}
    return None


def create_app() -> Flask:
    """
    Create and configure the Flask application.

    Returns:
        Configured Flask application
    """
    global _state_listener

    # Get paths
    base_dir = Path(__file__).parent
    template_dir = base_dir / "templates"

    app = Flask(__name__, template_folder=str(template_dir))

    config = get_config()
    app.config["SECRET_KEY"] = "scorewall-secret-key"
    app.config["DEBUG"] = config.web.debug

    # Initialize SocketIO
    socketio.init_app(app)

    # Register state change listener
    def on_state_change():
        socketio.emit("state_update", state.to_dict())

    if _state_listener is not None:
        state.remove_listener(_state_listener)
    _state_listener = on_state_change
    state.add_listener(on_state_change)

    # ============ Routes ============

    @app.route("/")
    def index():
        """Wall page."""
        return render_template(
            "index.html",
            tick_seconds=config.scheduler.tick_seconds,
        )

    # ============ API Routes ============

    @app.route("/api/state", methods=["GET"])
    def get_state():
        """Get current system state with frame statistics."""
        data = state.to_dict()
        data["frames"] = get_frame_stats()
        return jsonify(data)

    @app.route("/api/teams", methods=["GET"])
    def get_teams():
        """Get the team roster with service colours."""
        if _pipeline is None:
            return jsonify({"established": False, "teams": []})
        return jsonify(_pipeline.registry.to_dict())

    @app.route("/api/rounds", methods=["GET"])
    def get_rounds():
        """Get the active round and the rounds waiting behind it."""
        if _pipeline is None:
            return jsonify({"active": None, "pending": [], "backlog": {}})

        scheduler = _pipeline.scheduler
        active = scheduler.active_round
        return jsonify({
            "active": active.to_dict() if active else None,
            "pending": scheduler.queue.pending_ids(),
            "backlog": {
                team: [n.to_dict() for n in items]
                for team, items in scheduler.backlog().items()
            },
            "phase": scheduler.phase.value,
        })

    @app.route("/api/palette", methods=["GET"])
    def get_palette():
        """Get the service colour palette."""
        return jsonify({
            "services": [{"color": c.value, "hex": c.hex} for c in PALETTE],
            "status": {"up": STATUS_UP_HEX, "down": STATUS_DOWN_HEX},
        })

    @app.route("/api/simulator/start", methods=["POST"])
    def start_simulator():
        """Start the competition simulator."""
        if _simulator is None:
            return jsonify({"error": "Simulator not available"}), 400
        _simulator.start()
        state.simulator_running = True
        return jsonify({"status": "ok", "running": True})

    @app.route("/api/simulator/stop", methods=["POST"])
    def stop_simulator():
        """Stop the competition simulator."""
        if _simulator is None:
            return jsonify({"error": "Simulator not available"}), 400
        _simulator.stop()
        state.simulator_running = False
        return jsonify({"status": "ok", "running": False})

    # ============ WebSocket Events ============

    @socketio.on("connect")
    def handle_connect(auth=None):
        """Handle client connection."""
        logger.info("WebSocket client connected")
        emit("state_update", state.to_dict())
        roster = _roster_payload()
        if roster is not None:
            emit("roster", roster)

    @socketio.on("disconnect")
    def handle_disconnect(*args):
        """Handle client disconnection."""
        logger.info("WebSocket client disconnected")

    @socketio.on("request_state")
    def handle_request_state():
        """Handle state request from client."""
        emit("state_update", state.to_dict())

    return app
