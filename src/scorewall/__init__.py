"""
SCOREWALL - Attack-Defense Status Wall

Live status wall for attack-defense security competitions.
Reads scoring-round telemetry from the competition stream and paces
"service status changed" notifications for the display.
"""

__version__ = "1.0.0"
__author__ = "SCOREWALL Contributors"
