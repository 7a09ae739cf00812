"""Command line interface for the ghostcomm transport codec."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from .api import pack as api_pack
from .api import unpack as api_unpack
from .codec.alphabet import PRESETS, get_alphabet
from .config import PROFILES, Settings
from .exceptions import GhostCommError, IntegrityError, MissingVolumesError
from .framing.extractor import VolumeExtractor, group_transmissions
from .framing.volume import MediaType
from .utils.logging import configure_logging

console = Console(stderr=True)


def _read_bytes(path: str | None) -> bytes:
    if not path or path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _write_bytes(path: str | None, data: bytes) -> None:
    if not path or path == "-":
        sys.stdout.buffer.write(data)
        return
    Path(path).write_bytes(data)


def _read_text(path: str | None, *, encoding: str = "utf-8") -> str:
    if not path or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding=encoding)


def _write_text(path: str | None, data: str, *, encoding: str = "utf-8") -> None:
    if not path or path == "-":
        sys.stdout.write(data)
        return
    Path(path).write_text(data, encoding=encoding)


def _settings() -> Optional[Settings]:
    try:
        return Settings.from_env()
    except GhostCommError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return None


def _resolve_media_type(choice: str, input_path: str | None) -> MediaType:
    if choice != "auto":
        return MediaType.coerce(choice)
    guessed = MediaType.from_filename(input_path or "")
    if guessed is None:
        raise GhostCommError("cannot infer the media type from the file name; pass --type I, A or V")
    return guessed


def _handle_pack(argv: Sequence[str]) -> int:
    settings = _settings()
    if settings is None:
        return 1

    parser = argparse.ArgumentParser(
        prog="ghostcomm pack",
        description="Encode a file into volumes that fit a text channel.",
        allow_abbrev=False,
    )
    parser.add_argument("-i", "--in", dest="input_path", default="-", help="Input file (default: stdin)")
    parser.add_argument("-o", "--out", dest="output_path", default="-", help="Volume text output (default: stdout)")
    parser.add_argument(
        "--type",
        dest="media_type",
        choices=["auto", "I", "A", "V"],
        default="auto",
        help="Media type header; auto guesses from the file name",
    )
    limit = parser.add_mutually_exclusive_group()
    limit.add_argument("--profile", choices=sorted(PROFILES), default=settings.profile, help="Transport profile")
    limit.add_argument("--max-chars", type=int, help="Explicit per-volume character limit")
    parser.add_argument(
        "--no-compress",
        dest="compress",
        action="store_false",
        default=settings.compress,
        help="Skip the deflate step",
    )
    parser.add_argument("--alphabet", choices=sorted(PRESETS), default=settings.alphabet, help="Alphabet preset")
    parser.add_argument("--split-dir", help="Write each volume to its own file in this directory")
    known = parser.parse_args(list(argv))

    try:
        media_type = _resolve_media_type(known.media_type, known.input_path)
        data = _read_bytes(known.input_path)
        volumes = api_pack(
            data,
            media_type,
            profile=known.profile,
            max_chars=known.max_chars,
            compress=known.compress,
            alphabet=get_alphabet(known.alphabet),
        )
    except (GhostCommError, OSError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1

    if known.split_dir:
        out_dir = Path(known.split_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        width = len(str(len(volumes)))
        for index, volume in enumerate(volumes):
            (out_dir / f"volume_{index + 1:0{width}d}.txt").write_text(volume, encoding="utf-8")
    else:
        _write_text(known.output_path, "\n\n".join(volumes) + "\n")

    console.print(
        f"[green]Packed[/green] {len(data)} bytes into {len(volumes)} {media_type.name.lower()} volume(s)."
    )
    return 0


def _handle_unpack(argv: Sequence[str]) -> int:
    settings = _settings()
    if settings is None:
        return 1

    parser = argparse.ArgumentParser(
        prog="ghostcomm unpack",
        description="Reassemble a payload from pasted volume text.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-i",
        "--in",
        dest="input_paths",
        action="append",
        help="Pasted text file; repeat for several pastes (default: stdin)",
    )
    parser.add_argument("-o", "--out", dest="output_path", required=True, help="Recovered payload output")
    parser.add_argument(
        "--no-decompress",
        dest="decompress",
        action="store_false",
        default=settings.compress,
        help="Skip the inflate step",
    )
    parser.add_argument("--alphabet", choices=sorted(PRESETS), default=settings.alphabet, help="Alphabet preset")
    known = parser.parse_args(list(argv))

    try:
        texts = [_read_text(path) for path in (known.input_paths or ["-"])]
        result = api_unpack(
            texts,
            decompress=known.decompress,
            alphabet=get_alphabet(known.alphabet),
            max_total=settings.max_total,
        )
    except MissingVolumesError as exc:
        console.print(f"[yellow]Incomplete:[/yellow] {exc}")
        return 1
    except IntegrityError as exc:
        console.print(f"[red]Integrity failure:[/red] {exc}")
        return 1
    except (GhostCommError, OSError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1

    _write_bytes(known.output_path, result.data)
    console.print(
        f"[green]Recovered[/green] {len(result.data)} bytes of {result.media_type.mime_type} "
        f"from {result.volumes} volume(s)."
    )
    return 0


def _handle_inspect(argv: Sequence[str]) -> int:
    settings = _settings()
    if settings is None:
        return 1

    parser = argparse.ArgumentParser(
        prog="ghostcomm inspect",
        description="Report the status of every volume found in pasted text.",
        allow_abbrev=False,
    )
    parser.add_argument("-i", "--in", dest="input_path", default="-", help="Pasted text (default: stdin)")
    parser.add_argument("--alphabet", choices=sorted(PRESETS), default=settings.alphabet, help="Alphabet preset")
    known = parser.parse_args(list(argv))

    extractor = VolumeExtractor(get_alphabet(known.alphabet))
    try:
        text = _read_text(known.input_path)
    except OSError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1
    results = extractor.scan(text)

    table = Table(title="Segments")
    table.add_column("#", justify="right")
    table.add_column("Status")
    table.add_column("Type")
    table.add_column("Index", justify="right")
    table.add_column("Checksum")
    table.add_column("Symbols", justify="right")
    table.add_column("Reason")
    for result in results:
        volume = result.volume
        style = "green" if result.ok else "red"
        table.add_row(
            str(result.position),
            f"[{style}]{result.status.value}[/{style}]",
            volume.media_type.value if volume else "",
            f"{volume.index}/{volume.total}" if volume else "",
            result.declared_checksum or "",
            str(len(volume.payload)) if volume else "",
            result.reason,
        )
    Console().print(table)

    groups = group_transmissions(r.volume for r in results if r.volume is not None)
    for key, volumes in sorted(groups.items(), key=lambda item: (item[0].media_type.value, item[0].total)):
        indices = {volume.index for volume in volumes}
        console.print(
            f"{key.media_type.name.lower()} transmission: {len(indices)}/{key.total} volume(s) present"
        )
    return 0 if any(result.ok for result in results) else 1


def _handle_profiles(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="ghostcomm profiles",
        description="List the built-in transport profiles.",
        allow_abbrev=False,
    )
    parser.parse_args(list(argv))

    table = Table(title="Transport profiles")
    table.add_column("Name")
    table.add_column("Label")
    table.add_column("Max chars", justify="right")
    for profile in PROFILES.values():
        table.add_row(profile.name, profile.label, str(profile.max_chars))
    Console().print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghostcomm",
        description="Send binary payloads through character-limited text channels.",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("pack", help="Encode a file into volumes")
    subparsers.add_parser("unpack", help="Reassemble a payload from pasted volumes")
    subparsers.add_parser("inspect", help="Report the status of each pasted volume")
    subparsers.add_parser("profiles", help="List transport profiles")
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    args: List[str] = list(argv) if argv is not None else sys.argv[1:]
    if not args or args[0] in {"-h", "--help"}:
        build_parser().print_help()
        return 0

    configure_logging()
    command, rest = args[0], args[1:]

    if command == "pack":
        return _handle_pack(rest)
    if command == "unpack":
        return _handle_unpack(rest)
    if command == "inspect":
        return _handle_inspect(rest)
    if command == "profiles":
        return _handle_profiles(rest)

    console.print(f"[red]Error:[/red] unknown command '{command}'")
    build_parser().print_help()
    return 1


if __name__ == "__main__":  # pragma: no cover - module entry point
    sys.exit(main())
