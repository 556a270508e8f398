"""SCOREWALL Competition Simulator"""

from .fake_stream import CompetitionSimulator, FakeStream

__all__ = ["CompetitionSimulator", "FakeStream"]
