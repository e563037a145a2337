"""CLI interface: readiness, voice listing, text preview, and synthesis."""

import argparse
import asyncio
import logging
import os
import re
import shutil
import sys
from urllib.parse import urlparse

import httpx

from voxcpm_tts.constants import AUDIO_EXTENSION, DEFAULT_VOICE, VERSION
from voxcpm_tts.models import ProviderSettings
from voxcpm_tts.provider import VoxCPMProvider
from voxcpm_tts.segmenter import split_segments
from voxcpm_tts.settings import load_settings, settings_from_mapping
from voxcpm_tts.tts import SegmentStream, SynthesisError


def _build_settings(args) -> ProviderSettings:
    """Settings file first, then command-line overrides."""
    base = load_settings(args.settings)
    overrides = {
        "provider_endpoint": base.provider_endpoint,
        "speed": base.speed,
        "only_bracketed": base.only_bracketed,
        "strip_emphasis": base.strip_emphasis,
    }
    if args.endpoint:
        overrides["provider_endpoint"] = args.endpoint
    if args.speed is not None:
        overrides["speed"] = args.speed
    if args.only_bracketed:
        overrides["only_bracketed"] = True
    if args.strip_emphasis:
        overrides["strip_emphasis"] = True
    return settings_from_mapping(overrides)


def _reference_filename(index: int, voice: str, reference: str) -> str:
    """Generate filename for a downloaded segment."""
    voice_slug = re.sub(r"[^a-zA-Z0-9]+", "_", voice).strip("_").lower() or "voice"
    ext = os.path.splitext(urlparse(reference).path)[1] or AUDIO_EXTENSION
    return f"{index:03d}_{voice_slug}{ext}"


def save_reference(reference: str, output_path: str) -> None:
    """Copy one audio reference (URL or local path) to output_path."""
    if urlparse(reference).scheme in ("http", "https"):
        response = httpx.get(reference, follow_redirects=True)
        response.raise_for_status()
        with open(output_path, "wb") as f:
            f.write(response.content)
    else:
        shutil.copyfile(reference, output_path)


async def _collect_references(provider: VoxCPMProvider, text: str, voice: str, out_dir: str | None) -> list[str]:
    """Synthesize and report each reference as soon as it arrives."""
    result = await provider.speak(text, voice)
    if result is None:
        return []

    references = []

    def _emit(reference):
        index = len(references)
        references.append(reference)
        print(f"  [{index + 1}] {reference}")
        if out_dir:
            path = os.path.join(out_dir, _reference_filename(index, voice, reference))
            save_reference(reference, path)
            print(f"      saved {path}")

    if isinstance(result, SegmentStream):
        async for reference in result:
            _emit(reference)
    else:
        _emit(result)
    return references


def cmd_check(args):
    """Check whether the provider endpoint is ready."""
    provider = VoxCPMProvider(_build_settings(args))
    ready = asyncio.run(provider.check_ready())
    print(f"{provider.settings.provider_endpoint}: {'ready' if ready else 'not ready'}")
    if not ready:
        raise SystemExit(1)


def cmd_voices(args):
    """List voices offered by the remote app."""
    provider = VoxCPMProvider(_build_settings(args))
    voices = asyncio.run(provider.fetch_voices())
    if not voices:
        print(f"Error: Could not fetch voices from {provider.settings.provider_endpoint}", file=sys.stderr)
        raise SystemExit(1)

    filter_str = args.filter.lower() if args.filter else None
    names = [v.name for v in voices]
    if filter_str:
        names = [n for n in names if filter_str in n.lower()]
    if not names:
        print("No matching voices found.")
        return
    print("Available voices:")
    for name in names:
        print(f"  {name}")


def cmd_segments(args):
    """Show what would be spoken, without contacting the remote app."""
    provider = VoxCPMProvider(_build_settings(args))
    segments = split_segments(provider.process_text(args.text))
    if not segments:
        print("Nothing to speak.")
        return
    for i, segment in enumerate(segments):
        print(f"  [{i + 1}] {segment}")


def cmd_say(args):
    """Synthesize text and print (optionally save) each audio reference."""
    provider = VoxCPMProvider(_build_settings(args))

    if args.out:
        os.makedirs(args.out, exist_ok=True)

    try:
        references = asyncio.run(_collect_references(provider, args.text, args.voice, args.out))
    except SynthesisError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    except (httpx.HTTPError, OSError) as e:
        print(f"Error: Could not reach {provider.settings.provider_endpoint}: {e}", file=sys.stderr)
        raise SystemExit(1)

    if not references:
        print("Nothing to speak.")


def _add_common_arguments(parser):
    parser.add_argument("--settings", help="Path to a JSON settings file")
    parser.add_argument("--endpoint", help="Provider endpoint URL")
    parser.add_argument("--speed", type=float, help="Speech speed multiplier")
    parser.add_argument("--only-bracketed", action="store_true", help="Only speak text inside 「」")
    parser.add_argument("--strip-emphasis", action="store_true", help="Skip text inside *asterisks*")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="voxcpm-tts",
        description="VoxCPM TTS provider: filter chat text and synthesize it segment by segment",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check
    check_parser = subparsers.add_parser("check", help="Check that the endpoint is reachable")
    _add_common_arguments(check_parser)
    check_parser.set_defaults(func=cmd_check)

    # voices
    voices_parser = subparsers.add_parser("voices", help="List available voices")
    _add_common_arguments(voices_parser)
    voices_parser.add_argument("--filter", help="Filter voices by substring")
    voices_parser.set_defaults(func=cmd_voices)

    # segments
    segments_parser = subparsers.add_parser("segments", help="Show the segments that would be spoken")
    _add_common_arguments(segments_parser)
    segments_parser.add_argument("text", help="Chat text")
    segments_parser.set_defaults(func=cmd_segments)

    # say
    say_parser = subparsers.add_parser("say", help="Synthesize text")
    _add_common_arguments(say_parser)
    say_parser.add_argument("text", help="Chat text")
    say_parser.add_argument("--voice", default=DEFAULT_VOICE, help="Voice name")
    say_parser.add_argument("--out", help="Directory to save audio files into")
    say_parser.set_defaults(func=cmd_say)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
