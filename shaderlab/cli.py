# shaderlab/cli.py
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from shaderlab.core.errors import ShaderLabError
from shaderlab.shaders.macros import GlslifyResolver
from shaderlab.shaders.scanner import scan
from shaderlab.shaders.stage import ShaderStageKind
from shaderlab.shaders.transpiler import transpile

log = logging.getLogger("shaderlab")


def _read(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _resolve_stage(args: argparse.Namespace) -> ShaderStageKind:
    if args.stage:
        try:
            return ShaderStageKind.from_name(args.stage)
        except KeyError:
            raise ShaderLabError(f"Unknown stage '{args.stage}'") from None
    stage = ShaderStageKind.from_path(args.file)
    if stage is None:
        raise ShaderLabError(
            f"Cannot tell the stage of {args.file}; pass --stage vertex|fragment"
        )
    return stage


def cmd_scan(args: argparse.Namespace) -> int:
    result = scan(_read(args.file))
    for uniform in result.uniforms:
        suffix = f"[{uniform.array_length}]" if uniform.array_length else ""
        print(f"uniform    {uniform.declared_type} {uniform.name}{suffix}")
    for attribute in result.attributes:
        location = "-" if attribute.location is None else attribute.location
        print(f"attribute  {attribute.declared_type} {attribute.name} @{location}")
    return 0


def cmd_webgl(args: argparse.Namespace) -> int:
    stage = _resolve_stage(args)
    text = transpile(_read(args.file), stage, resolver=GlslifyResolver())
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        log.info("Wrote %s", args.output)
    else:
        print(text)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shaderlab", description="GLSL interface scanning and WebGL 1.0 conversion"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_scan = sub.add_parser("scan", help="list uniforms and vertex attributes")
    p_scan.add_argument("file")
    p_scan.set_defaults(func=cmd_scan)

    p_webgl = sub.add_parser("webgl", help="convert a vertex/fragment shader")
    p_webgl.add_argument("file")
    p_webgl.add_argument("--stage", help="vertex or fragment (default: from extension)")
    p_webgl.add_argument("-o", "--output", help="write here instead of stdout")
    p_webgl.set_defaults(func=cmd_webgl)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    try:
        return args.func(args)
    except ShaderLabError as e:
        log.error("%s", e)
        return 2
    except OSError as e:
        log.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
