from http_bench.cli import main

main()
