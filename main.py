"""Development entrypoint for the Statecraft resolution tools."""

from __future__ import annotations

from statecraft.__main__ import main

if __name__ == "__main__":
    raise SystemExit(main())
