import argparse
import sys

from sonicslice.core.audio_engine import AudioEngine
from sonicslice.core.exceptions import DecodeError
from sonicslice.utils.logger import get_logger

log = get_logger("cli")


class _SilentOutput:
    """The command line never plays audio."""

    def start(self, buffer, offset, duration, on_finished):
        raise RuntimeError("Playback is not available from the command line")


def build_parser():
    parser = argparse.ArgumentParser(prog="sonicslice", description="Cut and join audio clips.")
    sub = parser.add_subparsers(dest="command", required=True)

    cut = sub.add_parser("cut", help="Export a time range of a file as WAV")
    cut.add_argument("input")
    cut.add_argument("--start", type=float, default=0.0, help="Range start in seconds")
    cut.add_argument("--end", type=float, required=True, help="Range end in seconds")
    cut.add_argument("-o", "--output-dir", default=".")

    join = sub.add_parser("join", help="Concatenate whole files into one WAV")
    join.add_argument("inputs", nargs="+")
    join.add_argument("-o", "--output-dir", default=".")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    engine = AudioEngine(output=_SilentOutput())

    try:
        if args.command == "cut":
            engine.load_file(args.input)
            engine.set_selection(args.start, args.end)
            artifact = engine.cut().to_artifact()
        else:
            for path in args.inputs:
                audio = engine.load_file(path)
                engine.set_selection(0.0, audio.duration)
                engine.cut()
            artifact = engine.join_clips()
    except DecodeError as e:
        log.error(f"Could not read input: {e}")
        return 1
    finally:
        engine.close()

    path = artifact.write_to(args.output_dir)
    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
