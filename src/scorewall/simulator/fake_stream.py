"""
Fake Competition Stream for Testing

Simulates the scoring-round websocket for testing without a live
competition.
"""

import json
import queue
import random
import threading
import time
import logging
from typing import Optional, Callable, List

logger = logging.getLogger(__name__)

TEAM_NAMES = [
    "NullPointers", "0xDEADBEEF", "ShellShock", "RootKit", "BufferFlow",
    "HeapSpray", "RaceCond", "SegFault", "Sploit", "Cr4ckers",
    "ByteBandits", "PwnStars",
]

SERVICE_NAMES = ["bank", "notes", "forum", "market", "vault", "chat", "wiki"]


class CompetitionSimulator:
    """
    Simulates an attack-defense competition for testing.

    Generates frames in the stream format:
    - One roster frame on the first tick
    - Then one round frame per tick, with random exploit activity
      and random service ping status
    """

    def __init__(
        self,
        team_count: int = 8,
        service_count: int = 5,
        round_seconds: float = 60.0,
        exploit_chance: float = 0.3,
        down_chance: float = 0.4,
        speed_multiplier: float = 10.0,
        rng: Optional[random.Random] = None
    ):
        self.round_seconds = round_seconds
        self.exploit_chance = exploit_chance
        self.down_chance = down_chance
        self.speed_multiplier = speed_multiplier
        self._rng = rng or random.Random()

        self.teams: List[str] = [
            TEAM_NAMES[i] if i < len(TEAM_NAMES) else f"team{i + 1}"
            for i in range(team_count)
        ]
        self.services: List[str] = [
            SERVICE_NAMES[i] if i < len(SERVICE_NAMES) else f"service{i + 1}"
            for i in range(service_count)
        ]
        self.round = 0

        # Simulation control
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._on_frame: Optional[Callable[[dict], None]] = None

    def _service_entry(self, name: str) -> dict:
        attacked = self._rng.random() < self.exploit_chance
        exploits = None
        if attacked:
            exploits = [
                {"status": self._rng.choice([1, -1])}
                for _ in range(self._rng.randint(1, 3))
            ]
        return {
            "name": name,
            "ping_status": -1 if self._rng.random() < self.down_chance else 1,
            "exploits": exploits,
        }

    def tick(self) -> dict:
        """
        Advance the competition by one round.

        Returns:
            The stream frame for this round
        """
        self.round += 1
        frame = {
            "message": {
                "round": self.round,
                "teams": [
                    {
                        "name": team,
                        "services": [self._service_entry(s) for s in self.services],
                    }
                    for team in self.teams
                ],
            }
        }
        logger.debug(f"SIM: Round {self.round}")
        return frame

    def set_on_frame(self, callback: Callable[[dict], None]) -> None:
        """Set callback for generated frames."""
        self._on_frame = callback

    def start(self) -> None:
        """Start simulation in background thread."""
        if self._running:
            return

        self._running = True
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()
        logger.info("Competition simulation started")

    def stop(self) -> None:
        """Stop simulation."""
        self._running = False
        if self._thread:
            self._thread.join(timeout=2.0)
            self._thread = None
        logger.info("Competition simulation stopped")

    def reset(self) -> None:
        """Restart the round counter."""
        self.round = 0
        logger.info("Competition simulation reset")

    def _run_loop(self) -> None:
        """Main simulation loop."""
        interval = self.round_seconds / self.speed_multiplier

        while self._running:
            frame = self.tick()
            if self._on_frame:
                try:
                    self._on_frame(frame)
                except Exception as e:
                    logger.error(f"Frame callback error: {e}")

            # Sleep in small steps so stop() is honoured promptly
            deadline = time.monotonic() + interval
            while self._running and time.monotonic() < deadline:
                time.sleep(min(0.1, interval))


class FakeStream:
    """
    Fake websocket connection that mimics the client interface used by
    StreamReader: receive(timeout) and close().

    Frames come from a CompetitionSimulator as JSON text.
    """

    def __init__(self, url: str = "sim://", simulator: Optional[CompetitionSimulator] = None):
        self.url = url
        self._simulator = simulator or CompetitionSimulator()
        self._frames: "queue.Queue[str]" = queue.Queue()
        self._open = False

        self._simulator.set_on_frame(self.push)

    def push(self, frame) -> None:
        """Queue a frame (dict or raw text) for receive()."""
        text = frame if isinstance(frame, str) else json.dumps(frame)
        self._frames.put(text)

    def open(self) -> None:
        """Open the fake stream (start simulation)."""
        self._open = True
        self._simulator.start()
        logger.info(f"FakeStream opened on {self.url}")

    def close(self) -> None:
        """Close the fake stream (stop simulation)."""
        if not self._open:
            return
        self._open = False
        self._simulator.stop()
        logger.info("FakeStream closed")

    def receive(self, timeout: Optional[float] = None) -> Optional[str]:
        """Next frame as JSON text, or None on timeout."""
        try:
            return self._frames.get(timeout=timeout)
        except queue.Empty:
            return None

