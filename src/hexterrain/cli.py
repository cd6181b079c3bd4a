"""Command-line interface for hex terrain generation."""

import argparse
import logging
import time
from pathlib import Path

import structlog


def main() -> None:
    """CLI entry point for hex terrain generation."""
    parser = argparse.ArgumentParser(
        description="Generate procedural terrain on a hexagonal map"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a TOML generation config (command-line options override it)",
    )
    parser.add_argument(
        "--generator",
        choices=["islands", "inland"],
        default=None,
        help="Generator to run (default: islands)",
    )
    parser.add_argument("--width", type=int, default=None, help="Map width in hexes")
    parser.add_argument("--height", type=int, default=None, help="Map height in hexes")
    parser.add_argument("--seed", type=int, default=None, help="32-bit random seed")
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="map.npz",
        help="Output map path (default: map.npz)",
    )
    parser.add_argument(
        "--image",
        type=str,
        default=None,
        help="Also render a PNG preview to this path",
    )
    parser.add_argument(
        "--hex-width",
        type=float,
        default=None,
        help="Hex width in pixels for the preview",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
    logger = structlog.get_logger()

    # Import here to avoid slow startup for --help
    from .config import GenerationConfig, load_config
    from .generators import build_generator
    from .hexmap import HexMap
    from .persistence import save_map
    from .render import render_preview

    config = load_config(Path(args.config)) if args.config else GenerationConfig()

    overrides = {
        key: value
        for key, value in (
            ("generator", args.generator),
            ("width", args.width),
            ("height", args.height),
            ("seed", args.seed),
        )
        if value is not None
    }
    if overrides:
        config = GenerationConfig.model_validate(config.model_dump() | overrides)
    if args.hex_width is not None:
        config.render.hex_width = args.hex_width

    generator = build_generator(config)
    hex_map = HexMap(config.width, config.height)

    start_time = time.time()
    generator.generate(hex_map)
    gen_time = time.time() - start_time

    logger.info(
        "generation_complete",
        generator=config.generator,
        seed=generator.last_seed,
        seconds=round(gen_time, 2),
    )

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    save_map(output_path, hex_map, seed=generator.last_seed, generator=config.generator)

    if args.image:
        image_path = Path(args.image)
        image_path.parent.mkdir(parents=True, exist_ok=True)
        img = render_preview(
            hex_map,
            multiplier=config.render.hex_width,
            wrap_map=config.render.wrap_map,
            randomize_colors=config.render.randomize_colors,
            seed=generator.last_seed or 0,
        )
        img.save(image_path)
        logger.info("preview_saved", path=str(image_path), size=img.size)


if __name__ == "__main__":
    main()
