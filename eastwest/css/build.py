"""
Build the deferred stylesheet.

Reads ``globals-deferred.css``, adds the vendor prefixes our supported
browsers still need, minifies in production and writes the asset the
page bootstrap fetches (``static/css/deferred-styles.css``).  Large
outputs also get ``.gz`` and ``.br`` siblings so they can be served
pre-encoded.

Run with ``eastwest-build-css`` or ``python -m eastwest.css.build``.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import rcssmin
import tinycss2

from ..caching.compression import Encoding, compress_text, should_compress

logger = logging.getLogger(__name__)

_PACKAGE_DIR = Path(__file__).resolve().parent.parent

# property -> prefixes to emit ahead of the unprefixed declaration
PREFIXED_PROPERTIES: dict[str, tuple[str, ...]] = {
    "backdrop-filter": ("-webkit-",),
    "background-clip": ("-webkit-",),
    "user-select": ("-webkit-",),
    "appearance": ("-webkit-",),
    "mask-image": ("-webkit-",),
    "text-size-adjust": ("-webkit-",),
}

_RULE_LIST_AT_RULES = {"media", "supports", "keyframes", "layer", "container"}
_DECLARATION_AT_RULES = {"font-face", "page"}


class CSSBuildError(Exception):
    pass


@dataclass(frozen=True)
class BuildConfig:
    source: Path = _PACKAGE_DIR / "css" / "globals-deferred.css"
    dest: Path = _PACKAGE_DIR / "static" / "css" / "deferred-styles.css"
    production: bool = os.getenv("ENVIRONMENT", "development") == "production"
    precompress_threshold: int = 8192
    precompress_min_ratio: float = 0.8


DEFAULT_BUILD_CONFIG = BuildConfig()


@dataclass
class BuildResult:
    source: Path
    dest: Path
    size: int
    minified: bool
    precompressed: list[Path] = field(default_factory=list)


def _check(node) -> None:
    if node.type == "error":
        raise CSSBuildError(f"{node.message} (line {node.source_line})")


def _prefix_declarations(content) -> str:
    declarations = tinycss2.parse_declaration_list(
        content, skip_comments=True, skip_whitespace=True
    )
    present = {d.lower_name for d in declarations if d.type == "declaration"}
    out: list[str] = []
    for decl in declarations:
        _check(decl)
        if decl.type != "declaration":
            out.append(decl.serialize())
            continue
        value = tinycss2.serialize(decl.value).strip()
        important = "!important" if decl.important else ""
        for prefix in PREFIXED_PROPERTIES.get(decl.lower_name, ()):
            if prefix + decl.lower_name not in present:
                out.append(f"{prefix}{decl.lower_name}:{value}{important}")
        out.append(f"{decl.name}:{value}{important}")
    return ";".join(out)


def _prefix_rules(rules) -> str:
    out: list[str] = []
    for rule in rules:
        _check(rule)
        prelude = tinycss2.serialize(rule.prelude).strip() if rule.type != "comment" else ""
        if rule.type == "qualified-rule":
            out.append(f"{prelude}{{{_prefix_declarations(rule.content)}}}")
        elif rule.type == "at-rule" and rule.content is not None:
            head = f"@{rule.at_keyword} {prelude}".rstrip()
            if rule.lower_at_keyword in _RULE_LIST_AT_RULES:
                inner = tinycss2.parse_rule_list(
                    rule.content, skip_comments=True, skip_whitespace=True
                )
                out.append(f"{head}{{\n{_prefix_rules(inner)}\n}}")
            elif rule.lower_at_keyword in _DECLARATION_AT_RULES:
                out.append(f"{head}{{{_prefix_declarations(rule.content)}}}")
            else:
                out.append(rule.serialize())
        else:
            out.append(rule.serialize())
    return "\n".join(out)


def add_vendor_prefixes(css: str) -> str:
    rules = tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True)
    return _prefix_rules(rules) + "\n"


def compile_css(css: str, production: bool) -> str:
    compiled = add_vendor_prefixes(css)
    if production:
        compiled = rcssmin.cssmin(compiled)
    return compiled


def _precompress(dest: Path, text: str, config: BuildConfig) -> list[Path]:
    if not should_compress(text, min_size=config.precompress_threshold):
        return []

    written = []
    size = len(text.encode("utf-8"))
    for encoding, suffix in ((Encoding.GZIP, ".gz"), (Encoding.BROTLI, ".br")):
        data = compress_text(text, encoding)
        if len(data) / size > config.precompress_min_ratio:
            continue
        target = dest.with_name(dest.name + suffix)
        target.write_bytes(data)
        written.append(target)
    return written


def build_deferred_css(config: BuildConfig = DEFAULT_BUILD_CONFIG) -> BuildResult:
    if not config.source.exists():
        raise FileNotFoundError(f"Source CSS file not found: {config.source}")

    config.dest.parent.mkdir(parents=True, exist_ok=True)
    css = config.source.read_text(encoding="utf-8")
    compiled = compile_css(css, config.production)

    stamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
    output = f"/* Built by eastwest-build-css - {stamp} */\n{compiled}"
    config.dest.write_text(output, encoding="utf-8")

    result = BuildResult(
        source=config.source,
        dest=config.dest,
        size=len(compiled.encode("utf-8")),
        minified=config.production,
        precompressed=_precompress(config.dest, output, config),
    )
    logger.info("Deferred CSS built: %s -> %s", result.source, result.dest)
    logger.info(
        "Size: %.2f KB%s", result.size / 1024, " (minified)" if result.minified else ""
    )
    for path in result.precompressed:
        logger.info("Precompressed: %s", path.name)
    return result


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compile the deferred stylesheet.")
    parser.add_argument("--source", type=Path, default=DEFAULT_BUILD_CONFIG.source)
    parser.add_argument("--dest", type=Path, default=DEFAULT_BUILD_CONFIG.dest)
    parser.add_argument(
        "--production",
        action="store_true",
        default=DEFAULT_BUILD_CONFIG.production,
        help="minify the output",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    config = BuildConfig(source=args.source, dest=args.dest, production=args.production)
    try:
        build_deferred_css(config)
    except (FileNotFoundError, CSSBuildError) as exc:
        logger.error("Error building CSS: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
