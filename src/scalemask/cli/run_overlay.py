"""Core overlay pipeline execution logic.

This module contains the actual pipeline runner, separated from argument
parsing. ``scripts/run_overlay.py`` and the ``scalemask`` console command
are thin wrappers around ``main()``.
"""

import argparse
import importlib.util
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from pydantic import ValidationError

from scalemask.calibration import CalibrationBuilder
from scalemask.contracts import ContractViolation
from scalemask.errors import MissingArguments, MissingReferenceImage, ScalemaskError
from scalemask.imaging import ImageSource
from scalemask.pipeline import BatchOrchestrator
from scalemask.schemas import CLIConfig, ParamConfig, UserConfig, resolve_config

__all__ = ['run_overlay_pipeline', 'setup_logging', 'load_user_config_dict', 'main']

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If the file cannot be imported or has no CONFIG dict.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Could not load config module from {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ValueError(f"Could not load config module from {path}: {e!r}") from e

    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def setup_logging(config) -> None:
    """Configure the root logger from ``config.logging``.

    Replaces any existing root handlers with a console handler and, if
    ``log_file`` is set, a file handler.
    """
    log_level = getattr(logging, config.logging.level, logging.INFO)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    if config.logging.log_file:
        log_path = Path(config.logging.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)
        logger.info("Logging: level=%s, file=%s", config.logging.level, log_path)


def run_overlay_pipeline(
    image_paths: Sequence,
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False,
) -> dict:
    """Execute the overlay pipeline.

    1. Loads and resolves configuration (Param < User < CLI)
    2. Configures logging
    3. Checks the reference image and the target list
    4. Builds calibration tables from the reference image
    5. Transforms every target image concurrently

    Parameters
    ----------
    image_paths : sequence of str or Path
        Target images. Each produces ``<stem>_alfa.png`` next to it.
    user_config_path : str, optional
        Python file with a CONFIG dict.
    cli_args : dict, optional
        CLI overrides. Keys: reference_image, image_workers, row_workers,
        log_level, log_file. None values are ignored.
    verbose : bool, optional
        Enable DEBUG logging and log the resolved config.

    Returns
    -------
    dict
        Per-path results from :meth:`BatchOrchestrator.run`.

    Raises
    ------
    MissingReferenceImage
        If the reference image does not exist.
    MissingArguments
        If ``image_paths`` is empty.
    ImageDecodeError
        If the reference image cannot be decoded.
    ContractViolation
        If calibration produced unusable tables.
    """
    param_cfg = ParamConfig()

    if user_config_path:
        user_cfg = UserConfig.model_validate(load_user_config_dict(user_config_path))
    else:
        user_cfg = UserConfig()

    cli_args = dict(cli_args or {})
    if verbose and cli_args.get("log_level") is None:
        cli_args["log_level"] = "DEBUG"
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config = resolve_config(param_cfg, user_cfg, cli_cfg)
    setup_logging(config)

    if verbose:
        logger.debug("Resolved configuration:\n%s", json.dumps(config.model_dump(), indent=2))

    reference = Path(config.calibration.reference_image)
    if not reference.exists():
        raise MissingReferenceImage(reference)
    if not image_paths:
        raise MissingArguments()

    logger.info("Calibrating from %s", reference)
    legend = ImageSource().load(reference)
    tables = CalibrationBuilder(config).build(legend)

    orchestrator = BatchOrchestrator(config, tables)
    return orchestrator.run(image_paths)


def _pause():
    try:
        input("Press Enter to continue...")
    except EOFError:
        pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scalemask",
        description="Render alpha overlays from images that share a legend's color scale",
    )
    parser.add_argument("images", nargs="*", help="Target images; each produces <stem>_alfa.png")
    parser.add_argument("-c", "--config", help="Path to user config file (Python, CONFIG dict)")
    parser.add_argument("--reference", help="Legend image used for calibration (default: image.png)")
    parser.add_argument("--image-workers", type=int, help="Images processed concurrently")
    parser.add_argument("--row-workers", type=int, help="Rows classified concurrently per image")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--pause", action="store_true", help="Wait for Enter before exiting")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    cli_args = {
        "reference_image": args.reference,
        "image_workers": args.image_workers,
        "row_workers": args.row_workers,
        "log_file": args.log_file,
    }

    exit_code = 0
    try:
        run_overlay_pipeline(args.images, args.config, cli_args, verbose=args.verbose)
    except (MissingReferenceImage, MissingArguments) as e:
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1
    except (ValidationError, FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        exit_code = 1
    except (ScalemaskError, ContractViolation) as e:
        logger.critical("Calibration failed: %s", e)
        exit_code = 1

    if args.pause:
        _pause()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
