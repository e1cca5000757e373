"""Tests for the CLI entry point."""

from unittest.mock import MagicMock, patch

import pytest
import yaml

from ec2_skim.cli import build_parser, main
from ec2_skim.discovery.models import InstanceRecord
from ec2_skim.exceptions import InvalidRegion, QueryFailed

RECORDS = [
    InstanceRecord("i-1", "us-east-1", tags={"Name": "web1"}, private_ip="10.0.0.1", public_ip="52.0.0.1"),
    InstanceRecord("i-2", "us-east-1", tags={"Name": "web2"}, private_ip="10.0.0.2"),
]


@pytest.fixture
def fetcher():
    with patch("ec2_skim.cli.EC2InstanceFetcher") as MockFetcher:
        instance = MagicMock()
        instance.fetch.return_value = RECORDS
        MockFetcher.return_value = instance
        yield MockFetcher


@pytest.fixture
def selector():
    with patch("ec2_skim.cli.QuestionarySelector") as MockSelector:
        instance = MagicMock()
        instance.choose.return_value = [0]
        MockSelector.return_value = instance
        yield MockSelector


class TestParser:
    def test_region_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_repeatable_and_multi_value_options(self):
        args = build_parser().parse_args([
            "-r", "us-east-1", "eu-west-1", "--region", "ap-south-1",
            "-f", "tag:Team=infra", "-f", "tag:Env=prod",
            "-d", "Env", "--display-tag", "Team",
            "--public-ip",
        ])
        assert args.regions == ["us-east-1", "eu-west-1", "ap-south-1"]
        assert args.filters == ["tag:Team=infra", "tag:Env=prod"]
        assert args.display_tags == ["Env", "Team"]
        assert args.public_ip is True
        assert args.multi is False

    def test_optional_defaults(self):
        args = build_parser().parse_args(["-r", "us-east-1"])
        assert args.filters is None
        assert args.display_tags is None
        assert args.public_ip is False


class TestMain:
    def test_prints_private_ip_without_newline(self, fetcher, selector, capsys):
        assert main(["-r", "us-east-1"]) == 0
        assert capsys.readouterr().out == "10.0.0.1"

    def test_prints_public_ip(self, fetcher, selector, capsys):
        assert main(["-r", "us-east-1", "--public-ip"]) == 0
        assert capsys.readouterr().out == "52.0.0.1"

    def test_multi_selection_one_per_line(self, fetcher, selector, capsys):
        selector.return_value.choose.return_value = [1, 0]
        assert main(["-r", "us-east-1", "--multi"]) == 0
        selector.assert_called_once_with(multi=True)
        assert capsys.readouterr().out == "10.0.0.2\n10.0.0.1"

    def test_cancelled_selection_prints_nothing(self, fetcher, selector, capsys):
        selector.return_value.choose.return_value = []
        assert main(["-r", "us-east-1"]) == 0
        assert capsys.readouterr().out == ""

    def test_query_failure_exits_nonzero(self, fetcher, selector, capsys):
        fetcher.return_value.fetch.side_effect = QueryFailed("us-east-1", "UnauthorizedOperation")
        assert main(["-r", "us-east-1"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "UnauthorizedOperation" in captured.err
        selector.return_value.choose.assert_not_called()

    def test_invalid_region_exits_nonzero(self, fetcher, selector, capsys):
        fetcher.return_value.fetch.side_effect = InvalidRegion("nowhere-1")
        assert main(["-r", "nowhere-1"]) == 1
        assert "nowhere-1" in capsys.readouterr().err

    def test_missing_address_exits_nonzero(self, fetcher, selector, capsys):
        selector.return_value.choose.return_value = [1]
        assert main(["-r", "us-east-1", "--public-ip"]) == 1
        assert capsys.readouterr().out == ""

    def test_profile_override(self, fetcher, selector):
        main(["-r", "us-east-1", "--profile", "ops"])
        (aws_config,), _ = fetcher.call_args
        assert aws_config.credential_profile == "ops"

    def test_config_file(self, fetcher, selector, tmp_path, capsys):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump({"aws": {"page_size": 200}, "display": {"id_width": 3}}))
        assert main(["-r", "us-east-1", "-c", str(config_path)]) == 0
        (aws_config,), _ = fetcher.call_args
        assert aws_config.page_size == 200
        lines = selector.return_value.choose.call_args.args[0]
        assert lines[0] == "i-1: Name=web1"

    def test_invalid_config_file(self, fetcher, selector, tmp_path, capsys):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump({"aws": {"page_size": 5000}}))
        assert main(["-r", "us-east-1", "-c", str(config_path)]) == 1
        assert "page_size" in capsys.readouterr().err
        fetcher.assert_not_called()

    def test_missing_config_file(self, fetcher, selector):
        assert main(["-r", "us-east-1", "-c", "/nonexistent/config.yaml"]) == 1
