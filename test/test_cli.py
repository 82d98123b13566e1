"""
Tests for command line parsing and the CLI entry point.
"""

import logging
import unittest

import pytest

from http_bench.cli import HttpBenchCLI, parse_keep_alive
from http_bench.configuration import (
    DEFAULT_CONCURRENCY,
    DEFAULT_CONNECT_TIMEOUT_MS,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_METHOD,
    DEFAULT_READ_TIMEOUT_MS,
    DEFAULT_TOTAL_REQUESTS,
    BenchmarkConfig,
)


class TestArgumentParsing(unittest.TestCase):
    """Test HttpBenchCLI argument parsing."""

    def setUp(self):
        self.cli = HttpBenchCLI()

    def test_defaults(self):
        config, urls, _ = self.cli.parse(["http://localhost/"])

        self.assertEqual(urls, ["http://localhost/"])
        self.assertEqual(config.connect_timeout_ms, DEFAULT_CONNECT_TIMEOUT_MS)
        self.assertEqual(config.read_timeout_ms, DEFAULT_READ_TIMEOUT_MS)
        self.assertEqual(config.total_requests, DEFAULT_TOTAL_REQUESTS)
        self.assertEqual(config.concurrency, DEFAULT_CONCURRENCY)
        self.assertEqual(config.content_type, DEFAULT_CONTENT_TYPE)
        self.assertEqual(config.method, DEFAULT_METHOD)
        self.assertFalse(config.keep_alive)
        self.assertIsNone(config.body)
        self.assertIsNone(config.output_dir)

    def test_option_values(self):
        config, urls, _ = self.cli.parse([
            "--connectTimeout=1000", "--readTimeout=2000", "--totalRequest=100",
            "--concurrency=10", "--contentType=application/json", "--method=post",
            "http://a/", "https://b/",
        ])

        self.assertEqual(urls, ["http://a/", "https://b/"])
        self.assertEqual(config.connect_timeout_ms, 1000)
        self.assertEqual(config.read_timeout_ms, 2000)
        self.assertEqual(config.total_requests, 100)
        self.assertEqual(config.concurrency, 10)
        self.assertEqual(config.content_type, "application/json")
        self.assertEqual(config.method, "POST")

    def test_bare_keep_alive_flag(self):
        config, urls, _ = self.cli.parse(["--keepAlive", "http://a/"])
        self.assertTrue(config.keep_alive)
        self.assertEqual(urls, ["http://a/"])

    def test_empty_keep_alive_value_enables(self):
        config, _, _ = self.cli.parse(["--keepAlive=", "http://a/"])
        self.assertTrue(config.keep_alive)

    def test_explicit_keep_alive_value_resolves_false(self):
        for value in ["true", "false", "1"]:
            with self.assertLogs("http_bench.cli", level="WARNING") as logs:
                config, _, _ = self.cli.parse([f"--keepAlive={value}", "http://a/"])
            self.assertFalse(config.keep_alive)
            self.assertIn("resolves to false", logs.output[0])

    def test_invalid_url(self):
        with self.assertRaises(SystemExit):
            self.cli.parse(["ftp://a/"])

    def test_no_url(self):
        with self.assertRaises(SystemExit):
            self.cli.parse(["--concurrency=2"])

    def test_unknown_option(self):
        with self.assertRaises(SystemExit):
            self.cli.parse(["--bogus=1", "http://a/"])

    def test_malformed_value(self):
        with self.assertRaises(SystemExit):
            self.cli.parse(["--totalRequest=many", "http://a/"])

    def test_out_of_range_values(self):
        for arg in ["--concurrency=0", "--totalRequest=-1", "--connectTimeout=0", "--readTimeout=-5"]:
            with self.assertRaises(SystemExit, msg=arg):
                self.cli.parse([arg, "http://a/"])

    def test_missing_body_file(self):
        with self.assertRaises(SystemExit):
            self.cli.parse(["--bodyFile=/nonexistent/payload.bin", "http://a/"])

    def test_configuration_errors_exit_with_usage_code(self):
        for args in [["ftp://a/"], ["--concurrency=0", "http://a/"],
                     ["--bodyFile=/nonexistent/payload.bin", "http://a/"]]:
            with self.assertRaises(SystemExit, msg=args) as exc:
                self.cli.parse(args)
            self.assertEqual(exc.exception.code, 2)


class TestKeepAliveResolution(unittest.TestCase):

    def test_parse_keep_alive(self):
        self.assertFalse(parse_keep_alive(None))
        self.assertTrue(parse_keep_alive(""))
        with self.assertLogs("http_bench.cli", level="WARNING"):
            self.assertFalse(parse_keep_alive("yes"))


class TestBenchmarkConfig(unittest.TestCase):

    def test_frozen(self):
        config = BenchmarkConfig()
        with self.assertRaises(Exception):
            config.concurrency = 5

    def test_timeouts_in_seconds(self):
        config = BenchmarkConfig(connect_timeout_ms=1500, read_timeout_ms=250)
        self.assertAlmostEqual(config.connect_timeout_seconds, 1.5)
        self.assertAlmostEqual(config.read_timeout_seconds, 0.25)

    def test_invalid_prometheus_port(self):
        with self.assertRaises(ValueError):
            BenchmarkConfig(prometheus_port=70000)


def test_body_file_is_loaded(tmp_path):
    payload = tmp_path / "payload.json"
    payload.write_bytes(b'{"k": "v"}')

    config, _, _ = HttpBenchCLI().parse([f"--bodyFile={payload}", "--method=PUT", "http://a/"])

    assert config.body == b'{"k": "v"}'
    assert config.method == "PUT"


def test_run_prints_report(http_server, capsys):
    url = http_server.url("/bytes/25")
    exit_code = HttpBenchCLI().run(["--totalRequest=8", "--concurrency=2", url])

    assert exit_code == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == f"URL:                    {url}"
    assert "Concurrency Level:      2" in out
    assert "Use KeepAlive:          false" in out
    assert "Complete requests:      8" in out
    assert "Failed requests:        0" in out
    assert "HTML transferred:       200 bytes" in out
    assert out[-1].startswith("Requests per second:    ")
    assert out[-1].endswith("[#/sec] (mean)")


def test_run_handles_unexpected_errors(monkeypatch, caplog):
    def broken_run_all(self, urls):
        raise RuntimeError("kaboom")

    monkeypatch.setattr("http_bench.benchmark.BenchmarkRunner.run_all", broken_run_all)

    with caplog.at_level(logging.ERROR):
        exit_code = HttpBenchCLI().run(["http://a/"])

    assert exit_code == 1
    assert "kaboom" in caplog.text


def test_help_lists_defaults(capsys):
    with pytest.raises(SystemExit) as exc:
        HttpBenchCLI().run(["--help"])

    assert exc.value.code == 0
    out = capsys.readouterr().out
    for option in ["--connectTimeout", "--readTimeout", "--totalRequest", "--concurrency",
                   "--contentType", "--method", "--keepAlive"]:
        assert option in out
    assert "default: 30000" in out
    assert "default: text/plain" in out
