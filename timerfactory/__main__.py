"""Application entry point."""

import argparse
import logging
from pathlib import Path

from rich.logging import RichHandler

from .app.app import DemoApp
from .app.app_config import DemoConfig
from .common.app import app_dirs


def load_config(path: Path) -> DemoConfig:
    """Load the config file, falling back to defaults when it does not exist."""
    if not path.exists():
        return DemoConfig()
    return DemoConfig.model_validate_json(path.read_text())


def write_config(path: Path, config: DemoConfig) -> None:
    """Write ``config`` to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.model_dump_json(indent=2))


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="TimerFactory - named timer registry demo")
    parser.add_argument("--config", type=Path, default=app_dirs.app_config_path, help="Path to the config file")
    parser.add_argument("--duration", type=float, default=None, help="Run for this many seconds, then exit")
    parser.add_argument("--verbose", action="store_true", help="Show debug output")
    parser.add_argument("--write-config", action="store_true", help="Write the default config file and exit")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )

    if args.write_config:
        write_config(args.config, DemoConfig())
        print(f"Config written: {args.config}")
        return

    app = DemoApp(load_config(args.config))
    app.run(duration=args.duration)


if __name__ == "__main__":
    main()
