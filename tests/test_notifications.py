"""Tests for round notification extraction."""

from scorewall.core.notifications import Notification, NotificationExtractor
from scorewall.parser.frames import RoundEventParser

from builders import attacked, frame, service, team


def _extract(registry, payload):
    parsed = RoundEventParser().classify(payload, True)
    return NotificationExtractor(registry).extract(parsed)


class TestExtraction:
    def test_attacked_service_reported(self, registry):
        result = _extract(registry, frame(4, team("alpha", attacked("web", ping_status=1))))
        assert result.id == 4
        assert result.notifications == (Notification("alpha", "web", True),)

    def test_down_status(self, registry):
        result = _extract(registry, frame(4, team("alpha", attacked("web", ping_status=-1))))
        assert result.notifications == (Notification("alpha", "web", False),)

    def test_quiet_services_suppressed(self, registry):
        payload = frame(4, team("alpha", service("web", exploits=None), service("db", exploits=[])))
        assert _extract(registry, payload).notifications == ()

    def test_frame_order_not_registry_order(self, registry):
        payload = frame(
            4,
            team("beta", attacked("web")),
            team("alpha", attacked("db", ping_status=-1), attacked("web")),
        )
        assert _extract(registry, payload).notifications == (
            Notification("beta", "web", True),
            Notification("alpha", "db", False),
            Notification("alpha", "web", True),
        )

    def test_unknown_team_dropped(self, registry):
        payload = frame(4, team("mallory", attacked("web")), team("beta", attacked("web")))
        assert _extract(registry, payload).notifications == (Notification("beta", "web", True),)

    def test_unknown_service_dropped(self, registry):
        payload = frame(4, team("beta", attacked("db"), attacked("web")))
        assert _extract(registry, payload).notifications == (Notification("beta", "web", True),)

    def test_round_to_dict(self, registry):
        result = _extract(registry, frame(4, team("beta", attacked("web"))))
        assert result.to_dict() == {
            "id": 4,
            "notifications": [{"team": "beta", "service": "web", "status": True}],
        }
