"""
Command line interface for http-bench.
"""

import sys
import logging
import argparse
from typing import List, Optional

from http_bench.configuration import (
    BenchmarkConfig,
    DEFAULT_CONCURRENCY,
    DEFAULT_CONNECT_TIMEOUT_MS,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_KEEP_ALIVE,
    DEFAULT_METHOD,
    DEFAULT_READ_TIMEOUT_MS,
    DEFAULT_TOTAL_REQUESTS,
    LOG_FORMAT,
    LOG_LEVEL,
    URL_SCHEME_PREFIX,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def parse_keep_alive(value: Optional[str]) -> bool:
    """Resolve the --keepAlive option.

    A bare ``--keepAlive`` enables connection reuse. Any explicit value,
    including ``--keepAlive=true``, resolves to False. This mirrors the
    established behaviour of the tool and is reported with a warning until it
    is settled.
    """
    if value is None:
        return DEFAULT_KEEP_ALIVE
    if value == '':
        return True
    logger.warning(
        f"--keepAlive={value} resolves to false; pass a bare --keepAlive to enable keep-alive"
    )
    return False


class HttpBenchCLI:
    """CLI interface for the HTTP benchmark."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog='http-bench',
            description='Fire a fixed number of HTTP requests at one or more URLs and report throughput',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            allow_abbrev=False,
            epilog="""
Examples:
  # 1000 GET requests over 10 concurrent connections
  http-bench --totalRequest=1000 --concurrency=10 http://localhost:8080/

  # Reuse connections and benchmark two URLs one after the other
  http-bench --keepAlive --totalRequest=500 --concurrency=8 http://a.local/ http://b.local/

  # POST a file and keep the reports in a Parquet file
  http-bench --method=POST --contentType=application/json --bodyFile=payload.json \\
      --outputDir=results http://localhost:8080/api
            """
        )

        parser.add_argument('--connectTimeout', type=int, default=DEFAULT_CONNECT_TIMEOUT_MS,
                            help=f'Connect timeout in ms (default: {DEFAULT_CONNECT_TIMEOUT_MS})')
        parser.add_argument('--readTimeout', type=int, default=DEFAULT_READ_TIMEOUT_MS,
                            help=f'Read timeout in ms (default: {DEFAULT_READ_TIMEOUT_MS})')
        parser.add_argument('--totalRequest', type=int, default=DEFAULT_TOTAL_REQUESTS,
                            help=f'Total requests per URL (default: {DEFAULT_TOTAL_REQUESTS})')
        parser.add_argument('--concurrency', type=int, default=DEFAULT_CONCURRENCY,
                            help=f'Concurrent connections (default: {DEFAULT_CONCURRENCY})')
        parser.add_argument('--contentType', type=str, default=DEFAULT_CONTENT_TYPE,
                            help=f'Request body MIME type (default: {DEFAULT_CONTENT_TYPE})')
        parser.add_argument('--method', type=str, default=DEFAULT_METHOD,
                            help=f'HTTP method (default: {DEFAULT_METHOD})')
        parser.add_argument('--keepAlive', action='store_true',
                            help=f'Reuse connections (default: {str(DEFAULT_KEEP_ALIVE).lower()})')
        parser.add_argument('--bodyFile', type=str, default=None,
                            help='Send the contents of this file as the request body')
        parser.add_argument('--outputDir', type=str, default=None,
                            help='Save all reports to a Parquet file in this directory')
        parser.add_argument('--prometheusPort', type=int, default=None,
                            help='Expose live counters for Prometheus on this port')
        parser.add_argument('--logLevel', type=str.upper, choices=LOG_LEVELS, default=LOG_LEVEL.upper(),
                            help=f'Logging level (default: {LOG_LEVEL.upper()})')
        parser.add_argument('urls', nargs='+', metavar='url',
                            help='Target URLs, benchmarked one after the other')

        return parser

    def build_config(self, args) -> BenchmarkConfig:
        """Turn parsed arguments into the immutable run configuration.

        Raises:
            ValueError: If a value is out of range or the body file cannot be read
        """
        body = None
        if args.bodyFile:
            try:
                with open(args.bodyFile, 'rb') as f:
                    body = f.read()
            except OSError as e:
                raise ValueError(f"Cannot read body file {args.bodyFile}: {e}") from e

        return BenchmarkConfig(
            connect_timeout_ms=args.connectTimeout,
            read_timeout_ms=args.readTimeout,
            total_requests=args.totalRequest,
            concurrency=args.concurrency,
            method=args.method,
            content_type=args.contentType,
            keep_alive=parse_keep_alive(args.keepAlive),
            body=body,
            output_dir=args.outputDir,
            prometheus_port=args.prometheusPort,
        )

    def parse(self, args: Optional[List[str]] = None):
        """Parse and validate arguments.

        Exits through the parser with usage text on any configuration error.

        Returns:
            Tuple of (BenchmarkConfig, list of URLs, parsed namespace)
        """
        if args is None:
            args = sys.argv[1:]

        args, keep_alive_value = _split_keep_alive(list(args))
        parsed_args = self.parser.parse_args(args)
        if keep_alive_value is not None:
            parsed_args.keepAlive = keep_alive_value
        else:
            parsed_args.keepAlive = '' if parsed_args.keepAlive else None

        for url in parsed_args.urls:
            if not url.startswith(URL_SCHEME_PREFIX):
                self.parser.error(f"Invalid URL: {url}")

        _configure_logging(parsed_args.logLevel)

        try:
            config = self.build_config(parsed_args)
        except ValueError as e:
            self.parser.error(str(e))

        return config, parsed_args.urls, parsed_args

    def run(self, args: Optional[List[str]] = None) -> int:
        """Run the CLI with the given arguments."""
        if args is None:
            args = sys.argv[1:]

        config, urls, _ = self.parse(args)

        from http_bench.benchmark import BenchmarkRunner

        runner = None
        try:
            runner = BenchmarkRunner(config)
            runner.run_all(urls)
            return 0

        except KeyboardInterrupt:
            logger.info("Benchmark interrupted by user")
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            return 1
        finally:
            if runner is not None:
                runner.close()


def _split_keep_alive(args: List[str]):
    """Pull explicit --keepAlive=<value> tokens out before argparse sees them."""
    value = None
    remaining = []
    for arg in args:
        if arg.startswith('--keepAlive='):
            value = arg.split('=', 1)[1]
        else:
            remaining.append(arg)
    return remaining, value


def _configure_logging(level: str) -> None:
    # Only if not already configured
    if not logging.root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        logging.root.setLevel(level)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def main():
    """Main entry point."""
    cli = HttpBenchCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
