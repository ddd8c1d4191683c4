"""Tests for listing formatting and terminal action selection."""

from opsworks_ssh.actions import (
    AmbiguousTarget,
    ConnectSSH,
    ShowListing,
    connection_line,
    format_listing,
    multi_host_line,
    plan,
)
from opsworks_ssh.discovery.models import InstanceRecord


def _inst(name, ip) -> InstanceRecord:
    return InstanceRecord(name, name, "Production", "running", ip)


A = _inst("prod-app1", "10.0.0.1")
B = _inst("prod-app2", "10.0.0.2")


class TestFormatting:
    def test_connection_line(self):
        assert connection_line(A, "user") == "ssh user@10.0.0.1 => prod-app1"

    def test_multi_host_line(self):
        assert multi_host_line([A, B], "deploy") == "deploy@10.0.0.1 deploy@10.0.0.2"

    def test_listing(self):
        assert format_listing([A, B], "user") == (
            "ssh user@10.0.0.1 => prod-app1",
            "ssh user@10.0.0.2 => prod-app2",
            "user@10.0.0.1 user@10.0.0.2",
        )

    def test_empty_listing_has_empty_multi_host_line(self):
        assert format_listing([], "user") == ("",)


class TestPlan:
    def test_show_only_lists_single_match(self):
        action = plan([A], "user", show_only=True)
        assert isinstance(action, ShowListing)
        assert action.lines[0] == "ssh user@10.0.0.1 => prod-app1"

    def test_single_match_connects(self):
        action = plan([A], "user", show_only=False)
        assert action == ConnectSSH(login="user@10.0.0.1", target=A)
        assert action.target.label == "prod-app1"

    def test_multiple_matches_are_ambiguous(self):
        action = plan([A, B], "user", show_only=False)
        assert isinstance(action, AmbiguousTarget)
        assert action.lines == format_listing([A, B], "user")

    def test_no_match_shows_empty_listing(self):
        assert plan([], "user", show_only=False) == ShowListing(("",))
