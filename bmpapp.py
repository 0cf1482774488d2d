#!/usr/bin/env python3
"""Console session for editing 24-bit BMP files.

Usage: python bmpapp.py [--debug] [image.bmp [threads]]

Prompts for anything not given on the command line, then applies commands
until ``q`` and asks where to save the result.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from typing import Callable

from bitmap import Bitmap
from errors import BitmapNotFoundError, NotABitmapError

logger = logging.getLogger(__name__)

TRANSFORMS: dict[str, Callable[[Bitmap], Bitmap]] = {
    "i": Bitmap.invert,
    "g": Bitmap.grayscale,
    "b": Bitmap.blur,
    "h": Bitmap.horizontal_mirror,
    "s": Bitmap.shrink,
    "d": Bitmap.double_size,
    "r": Bitmap.rotate90,
}

COMMAND_PROMPT = "What command would you like to perform (i, g, b, h, s, d, r, p, v, or q): "


def ask_threads(bitmap: Bitmap, ask: Callable[[str], str], preset: str | None = None) -> int:
    """Keep prompting until the bitmap accepts a thread count."""
    answer = preset
    while True:
        if answer is None:
            answer = ask("How many threads would you like to use: ")
        try:
            if bitmap.set_threads(int(answer.strip())):
                return bitmap.threads
        except ValueError:
            pass
        answer = None


def run_command(bitmap: Bitmap, command: str, name: str = "") -> bool:
    """Apply one command letter. Returns False if the letter is unknown."""
    if command in TRANSFORMS:
        start = time.perf_counter()
        TRANSFORMS[command](bitmap)
        print(f"Command took {time.perf_counter() - start:.3f} seconds to execute")
    elif command == "p":
        bitmap.header.display_info(name)
    elif command == "v":
        if bitmap.width == 0 or bitmap.height == 0:
            print(f"Nothing to preview: the image is {bitmap.width}x{bitmap.height}.")
        else:
            bitmap.to_image().show()
    else:
        return False
    return True


def session(ask: Callable[[str], str] = input, argv: list[str] | None = None) -> int:
    args = list(argv or [])
    path = args[0] if args else ask("What image file would you like to edit: ").strip()

    try:
        bitmap = Bitmap.read(path)
    except BitmapNotFoundError as e:
        print(f'The file: "{e.get_absolute_path()}" was not found.')
        return 1
    except NotABitmapError as e:
        print(f'The file: "{e.get_absolute_path()}" is not a valid bitmap, '
              "or is not supported by this application.")
        return 1

    ask_threads(bitmap, ask, args[1] if len(args) > 1 else None)

    while True:
        command = ask(COMMAND_PROMPT).strip().lower()[:1]
        if command == "q":
            break
        if not run_command(bitmap, command, os.path.basename(path)):
            print("Command is not valid; please try again.")

    out_path = ask("What do you want to name your new image file: ").strip()
    bitmap.write(out_path)
    logger.info("Saved %r to %s", bitmap, out_path)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    debug = "--debug" in args
    if debug:
        args.remove("--debug")
    if len(args) > 2:
        print("Usage: python bmpapp.py [--debug] [image.bmp [threads]]")
        return 2

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return session(input, args)
    except (EOFError, KeyboardInterrupt):
        print()
        return 1


if __name__ == "__main__":
    sys.exit(main())
