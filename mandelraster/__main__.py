"""
Command line entry point: python -m mandelraster "#w=800&h=600&mag=2"
"""
import argparse
import sys


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="mandelraster",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Render the Mandelbrot set for a viewport.",
    )
    parser.add_argument(
        "fragment",
        nargs="?",
        default="",
        help="view parameters as 'w=..&h=..&x=..&y=..&mag=..&limit=..' (a leading '#' is allowed)",
    )
    parser.add_argument(
        "-o",
        "--out-file",
        default=None,
        help="write the image to this file (PNG) instead of opening a window",
    )
    parser.add_argument(
        "--no-window",
        action="store_true",
        help="render and report timing only",
    )
    parser.add_argument(
        "--no-warmup",
        action="store_true",
        help="include JIT compilation time in the reported elapsed time",
    )

    args = parser.parse_args(argv)

    from .app import MandelbrotApp

    try:
        app = MandelbrotApp(args.fragment, warmup=not args.no_warmup)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.out_file:
        app.save(args.out_file)
    elif args.no_window:
        app.render()
    else:
        app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
