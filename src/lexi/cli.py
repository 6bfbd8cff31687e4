"""CLI entrypoint for lexi — subcommand dispatcher."""

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np


def _add_shared_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments shared by every subcommand."""
    parser.add_argument("-v", "--verbose", action="store_true", default=False,
                        help="Enable debug logging")


def _add_spectral_args(parser: argparse.ArgumentParser) -> None:
    """Add spectrogram sizing arguments."""
    parser.add_argument("--width", type=int, default=800,
                        help="Output columns (default: 800)")
    parser.add_argument("--fft-size", type=int, default=512,
                        help="FFT frame size, power of two (default: 512)")
    parser.add_argument("--no-cache", action="store_true", default=False,
                        help="Disable the file-based spectrogram cache")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments with subcommands."""
    parser = argparse.ArgumentParser(
        prog="lexi",
        description="Spectrogram and articulatory landmark analysis of spoken utterances",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    spec_parser = subparsers.add_parser(
        "spectrogram",
        help="Render a WAV file to an RGBA spectrogram array",
        description="Render a WAV file to a (height, width, 4) uint8 .npy array",
    )
    spec_parser.add_argument("audio", type=Path, help="Input WAV file")
    spec_parser.add_argument("--output", type=Path, default=Path("spectrogram.npy"),
                             help="Output .npy path (default: spectrogram.npy)")
    spec_parser.add_argument("--strict", action="store_true", default=False,
                             help="Fail instead of writing a blank image for too-short audio")
    _add_spectral_args(spec_parser)
    _add_shared_args(spec_parser)

    lm_parser = subparsers.add_parser(
        "landmarks",
        help="Extract articulatory landmarks from phoneme keyframes",
        description="Extract articulatory landmarks from a JSON keyframe list",
    )
    lm_parser.add_argument("keyframes", type=Path, help="Keyframe JSON file")
    lm_parser.add_argument("--output", type=Path, default=None,
                           help="Write landmarks JSON here (default: stdout)")
    _add_shared_args(lm_parser)

    an_parser = subparsers.add_parser(
        "analyze",
        help="Spectrogram, waveform peaks and landmarks for one utterance",
        description="Run both engines and write spectrogram.npy + analysis.json",
    )
    an_parser.add_argument("audio", type=Path, help="Input WAV file")
    an_parser.add_argument("keyframes", type=Path, help="Keyframe JSON file")
    an_parser.add_argument("--output-dir", type=Path, default=Path("./lexi-output"),
                           help="Output directory (default: ./lexi-output)")
    an_parser.add_argument("--height", type=int, default=200,
                           help="Waveform display height in pixels (default: 200)")
    an_parser.add_argument("--margin", type=float, default=0.1,
                           help="Waveform margin as a fraction of height (default: 0.1)")
    _add_spectral_args(an_parser)
    _add_shared_args(an_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    return args


def _require_files(*paths: Path) -> None:
    for p in paths:
        if not p.exists():
            print(f"Error: file not found: {p}", file=sys.stderr)
            sys.exit(1)


def _run_spectrogram(args: argparse.Namespace) -> None:
    """Render the spectrogram subcommand."""
    from lexi.analysis import read_wav
    from lexi.cache import file_hash, get_cached_spectrogram, store_spectrogram_cache
    from lexi.spectral import compute_spectrogram

    _require_files(args.audio)
    samples, sr = read_wav(args.audio)

    image = None
    audio_hash = None
    if not args.no_cache and not args.strict:
        audio_hash = file_hash(args.audio)
        image = get_cached_spectrogram(audio_hash, args.fft_size, args.width)

    if image is None:
        try:
            image = compute_spectrogram(
                samples, sr, args.width, fft_size=args.fft_size, strict=args.strict,
            )
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        if audio_hash is not None:
            store_spectrogram_cache(audio_hash, image)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    np.save(args.output, image.as_rgba())
    print(f"Spectrogram {image.width}x{image.height} "
          f"({image.frames_emitted} frames, hop {image.hop_size}) -> {args.output}")


def _run_landmarks(args: argparse.Namespace) -> None:
    """Run the landmarks subcommand."""
    from lexi.landmarks import extract_landmarks, load_keyframes

    _require_files(args.keyframes)
    keyframes = load_keyframes(args.keyframes)
    landmarks = extract_landmarks(keyframes)

    text = json.dumps([lm.to_dict() for lm in landmarks], indent=2, ensure_ascii=False)
    if args.output is None:
        print(text)
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        print(f"{len(landmarks)} landmarks -> {args.output}")


def _run_analyze(args: argparse.Namespace) -> None:
    """Run the analyze subcommand."""
    from lexi.analysis import read_wav
    from lexi.cache import file_hash
    from lexi.landmarks import load_keyframes
    from lexi.pipeline import analyze

    _require_files(args.audio, args.keyframes)
    samples, sr = read_wav(args.audio)
    keyframes = load_keyframes(args.keyframes)

    use_cache = not args.no_cache
    try:
        result = analyze(
            samples, sr, keyframes,
            width=args.width,
            height=args.height,
            fft_size=args.fft_size,
            margin=args.margin,
            audio_hash=file_hash(args.audio) if use_cache else None,
            use_cache=use_cache,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    output_dir = args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    np.save(output_dir / "spectrogram.npy", result.spectrogram.as_rgba())
    (output_dir / "analysis.json").write_text(
        json.dumps(result.to_manifest(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )

    print(f"Duration: {result.duration:.3f}s at {result.sample_rate} Hz")
    print(f"Landmarks: {len(result.landmarks)}")
    print(f"Output:")
    print(f"  {output_dir / 'spectrogram.npy'}")
    print(f"  {output_dir / 'analysis.json'}")


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint."""
    args = parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(name)s %(levelname)s: %(message)s")

    if args.command == "spectrogram":
        _run_spectrogram(args)
    elif args.command == "landmarks":
        _run_landmarks(args)
    elif args.command == "analyze":
        _run_analyze(args)


if __name__ == "__main__":
    main()
