"""Allow `python -m clipstash`."""

from clipstash.cli.main import main

main()
